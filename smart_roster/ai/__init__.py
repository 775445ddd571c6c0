"""AI adapters backed by the Gemini multimodal API."""

from .client import clean_json_string, make_client
from .ocr import OCRService, parse_schedule_response
from .workplace import analyze_workplace_image, generate_daily_huddle, parse_suggested_tasks

__all__ = [
    "clean_json_string",
    "make_client",
    "OCRService",
    "parse_schedule_response",
    "analyze_workplace_image",
    "generate_daily_huddle",
    "parse_suggested_tasks",
]
