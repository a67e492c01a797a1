"""
Capture orchestrator - validate, encode, infer, extract
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ui_pilot.exceptions import AIBindingError
from ui_pilot.models.vision import VisionInferenceClient
from ui_pilot.services.capture.encoder import upload_to_data_url
from ui_pilot.services.capture.extractor import ResilientJSONExtractor
from ui_pilot.services.capture.validator import Rejected, file_size, validate_capture_form
from ui_pilot.utils.logger import log_info, log_warning

SYSTEM_PROMPT = (
    "Return ONLY valid JSON with keys: "
    "screen_summary, ui_elements, steps, confidence, need_new_screenshot, expected_next_screen."
)


def build_user_prompt(goal: str) -> str:
    return f"Goal: {goal}\nInclude >=6 ui_elements and >=4 steps."


@dataclass(frozen=True)
class CaptureResponse:
    ok: bool
    status_code: int = 200
    received: Optional[Dict[str, Any]] = None
    brain: Any = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str, status_code: int) -> "CaptureResponse":
        return cls(ok=False, status_code=status_code, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {"ok": True, "received": dict(self.received or {}), "brain": self.brain}


@dataclass
class CaptureOrchestrator:
    """
    Runs one capture request.

    `binding` is the model-execution binding or None when it is not
    configured; that case is only reported once the input has been accepted.
    """

    binding: Optional[Any]
    model_id: str
    client_factory: Any = field(default=VisionInferenceClient)

    async def run(self, form: Mapping[str, Any]) -> CaptureResponse:
        outcome = validate_capture_form(form)
        if isinstance(outcome, Rejected):
            log_warning("Capture rejected", reason=outcome.reason, status=outcome.status_code)
            return CaptureResponse.failure(outcome.reason, outcome.status_code)

        if self.binding is None:
            raise AIBindingError()

        image = outcome.image
        data_url = await upload_to_data_url(image)

        client = self.client_factory(self.binding, self.model_id)
        brain = await ResilientJSONExtractor(client).extract(
            SYSTEM_PROMPT, build_user_prompt(outcome.goal), data_url
        )

        received = {
            "filename": image.filename,
            "type": image.content_type,
            "size": file_size(image),
            "goal": outcome.goal,
        }
        log_info("Capture completed", filename=image.filename, size=received["size"])
        return CaptureResponse(ok=True, received=received, brain=brain)
