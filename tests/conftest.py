"""
Shared fixtures: a scripted fake binding and PNG payloads
"""

import io
import os
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from ui_pilot.app import app
from ui_pilot.dependencies import get_ai_binding

VALID_BRAIN = {
    "screen_summary": "Home screen with a top navigation bar",
    "ui_elements": [
        {"id": i, "label": label}
        for i, label in enumerate(["Menu", "Search", "Profile", "Settings", "Help", "Logout"])
    ],
    "steps": [
        "Click the menu icon",
        "Scroll to Settings",
        "Click Settings",
        "Wait for the settings page",
    ],
    "confidence": 0.9,
    "need_new_screenshot": False,
    "expected_next_screen": "Settings page",
}


class FakeBinding:
    """Stands in for WorkersAIBinding; returns scripted outputs and records every call."""

    def __init__(
        self,
        responses: Optional[List[Any]] = None,
        streams: Optional[List[List[Dict[str, Any]]]] = None,
    ):
        self.responses = list(responses or [])
        self.streams = list(streams or [])
        self.calls: List[Dict[str, Any]] = []

    async def run(self, model: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"model": model, "inputs": inputs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, dict) else {"response": response}

    async def stream(self, model: str, inputs: Dict[str, Any]):
        self.calls.append({"model": model, "inputs": inputs})
        for chunk in self.streams.pop(0):
            yield chunk


def make_png(side: int = 60) -> bytes:
    """Noise PNG; 60x60 RGB noise compresses poorly and lands around 10KB."""
    image = Image.frombytes("RGB", (side, side), os.urandom(side * side * 3))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_binding():
    binding = FakeBinding()
    app.dependency_overrides[get_ai_binding] = lambda: binding
    yield binding
    app.dependency_overrides.clear()


@pytest.fixture
def no_binding():
    app.dependency_overrides[get_ai_binding] = lambda: None
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)
