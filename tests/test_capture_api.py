import json

import pytest

from ui_pilot.config import DEFAULT_VISION_MODEL
from ui_pilot.exceptions import ModelRequestError
from ui_pilot.services.capture.extractor import RETRY_DIRECTIVE
from ui_pilot.services.capture.pipeline import SYSTEM_PROMPT
from ui_pilot.services.capture.validator import MAX_IMAGE_BYTES

from .conftest import VALID_BRAIN


def post_capture(client, goal="Open settings menu", image=None, content_type="image/png", filename="screen.png"):
    data = {} if goal is None else {"goal": goal}
    files = None if image is None else {"image": (filename, image, content_type)}
    return client.post("/capture", data=data, files=files)


def test_end_to_end_success(client, fake_binding, png_bytes, monkeypatch):
    monkeypatch.delenv("VISION_MODEL_ID", raising=False)
    fake_binding.responses.append(json.dumps(VALID_BRAIN))

    resp = post_capture(client, image=png_bytes)

    assert resp.status_code == 200
    assert resp.json() == {
        "ok": True,
        "received": {
            "filename": "screen.png",
            "type": "image/png",
            "size": len(png_bytes),
            "goal": "Open settings menu",
        },
        "brain": VALID_BRAIN,
    }

    assert len(fake_binding.calls) == 1
    call = fake_binding.calls[0]
    assert call["model"] == DEFAULT_VISION_MODEL
    system, user = call["inputs"]["messages"]
    assert system == {"role": "system", "content": SYSTEM_PROMPT}
    text_part, image_part = user["content"]
    assert text_part["text"] == "Goal: Open settings menu\nInclude >=6 ui_elements and >=4 steps."
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,iVBOR")


def test_vision_model_override_read_per_request(client, fake_binding, png_bytes, monkeypatch):
    monkeypatch.setenv("VISION_MODEL_ID", "@cf/test/vision")
    fake_binding.responses.append("{}")

    assert post_capture(client, image=png_bytes).status_code == 200
    assert fake_binding.calls[0]["model"] == "@cf/test/vision"


@pytest.mark.parametrize("goal", [None, "", "settings", "   settings   "])
def test_short_goal(client, fake_binding, png_bytes, goal):
    resp = post_capture(client, goal=goal, image=png_bytes)
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "Goal must be at least 2 words."}
    assert fake_binding.calls == []


def test_missing_image(client, fake_binding):
    resp = post_capture(client)
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "Missing image file."}


def test_image_sent_as_text_field(client, fake_binding):
    resp = client.post("/capture", data={"goal": "Open settings menu", "image": "iVBORw0KGgo="})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing image file."


def test_unsupported_type_even_when_oversized(client, fake_binding):
    resp = post_capture(client, image=b"\0" * (MAX_IMAGE_BYTES + 1), content_type="image/gif", filename="a.gif")
    assert resp.status_code == 415
    assert resp.json() == {"ok": False, "error": "Only PNG/JPG allowed."}


def test_oversized_jpeg(client, fake_binding):
    resp = post_capture(client, image=b"\xff" * (MAX_IMAGE_BYTES + 1), content_type="image/jpeg", filename="a.jpg")
    assert resp.status_code == 413
    assert resp.json() == {"ok": False, "error": "File too large (max 5MB)."}
    assert fake_binding.calls == []


def test_retry_then_success(client, fake_binding, png_bytes):
    fake_binding.responses.extend(["I think the screen shows...", json.dumps(VALID_BRAIN)])

    resp = post_capture(client, image=png_bytes)

    assert resp.status_code == 200
    assert resp.json()["brain"] == VALID_BRAIN
    systems = [c["inputs"]["messages"][0]["content"] for c in fake_binding.calls]
    assert systems == [SYSTEM_PROMPT, SYSTEM_PROMPT + RETRY_DIRECTIVE]


def test_invalid_json_twice_returns_502_without_raw_output(client, fake_binding, png_bytes):
    secret = "RAW-MODEL-OUTPUT-" + "x" * 2000
    fake_binding.responses.extend([secret, secret])

    resp = post_capture(client, image=png_bytes)

    assert resp.status_code == 502
    assert resp.json() == {"ok": False, "error": "Model returned invalid JSON."}
    assert "RAW-MODEL-OUTPUT" not in resp.text
    assert len(fake_binding.calls) == 2


def test_upstream_failure_returns_generic_502(client, fake_binding, png_bytes):
    fake_binding.responses.append(ModelRequestError("secret upstream detail"))

    resp = post_capture(client, image=png_bytes)

    assert resp.status_code == 502
    assert resp.json() == {"ok": False, "error": "Model request failed."}
    assert "secret upstream detail" not in resp.text
    assert len(fake_binding.calls) == 1


def test_structured_response_is_accepted(client, fake_binding, png_bytes):
    # Some models hand back the JSON already decoded
    fake_binding.responses.append({"response": VALID_BRAIN})
    resp = post_capture(client, image=png_bytes)
    assert resp.json()["brain"] == VALID_BRAIN


def test_missing_binding_is_503_after_validation(client, no_binding, png_bytes):
    assert post_capture(client, goal="settings", image=png_bytes).status_code == 400

    resp = post_capture(client, image=png_bytes)
    assert resp.status_code == 503
    assert resp.json() == {"ok": False, "error": "AI binding is not configured."}


def test_get_capture_is_not_found(client):
    resp = client.get("/capture")
    assert resp.status_code == 404
    assert resp.text == "Not found"
