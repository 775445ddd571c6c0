"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


class FakeModels:
    """Stands in for ``genai.Client().models``; records each call."""

    def __init__(self, text, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def fake_client():
    """Factory for fake Gemini clients returning a fixed text, or raising ``error``."""

    def _make(text="", error=None):
        return SimpleNamespace(models=FakeModels(text, error))

    return _make
