"""Thin wrapper around the Gemini client used by the AI adapters."""

from __future__ import annotations

from typing import Any, List

import httpx
from google import genai
from google.genai import errors, types

from smart_roster.exceptions import AIServiceError


def make_client(api_key: str | None) -> genai.Client:
    """Create a Gemini client; the key comes from config or GEMINI_API_KEY."""
    if not api_key:
        raise AIServiceError("GEMINI_API_KEY is not set")
    return genai.Client(api_key=api_key)


def image_part(data: bytes, mime_type: str) -> types.Part:
    return types.Part.from_bytes(data=data, mime_type=mime_type)


def generate_text(client: Any, model: str, parts: List[Any], json_response: bool = False) -> str:
    """
    Run one generate_content call and return the response text.

    Args:
        client: genai.Client (or anything exposing ``models.generate_content``)
        model: Model name
        parts: Content parts (image parts and prompt strings)
        json_response: Ask the model for application/json output

    Raises:
        AIServiceError: If the API call fails or the service cannot be reached
    """
    config = types.GenerateContentConfig(response_mime_type="application/json") if json_response else None
    try:
        response = client.models.generate_content(model=model, contents=parts, config=config)
    except (errors.APIError, httpx.HTTPError, OSError) as e:
        raise AIServiceError(f"Gemini request to {model} failed: {e}") from e
    return response.text or ""


def clean_json_string(text: str) -> str:
    """Strip a ```json / ``` code fence around a model's JSON output."""
    if not text:
        return ""
    clean = text.strip()
    for fence in ("```json", "```JSON", "```"):
        if clean.startswith(fence):
            clean = clean[len(fence):]
            break
    else:
        return clean
    clean = clean.strip()
    if clean.endswith("```"):
        clean = clean[:-3]
    return clean.strip()
