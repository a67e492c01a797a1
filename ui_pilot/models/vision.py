"""
Vision inference client - one multimodal call with a bounded step budget
"""

from typing import Any

from ui_pilot.models.llm import generate_text
from ui_pilot.utils.logger import log_info

VISION_STEP_BUDGET = 5


class VisionInferenceClient:
    """Sends a text prompt plus an inline image to a vision-capable model.

    Retries are not done here; the caller decides whether to call again.
    """

    def __init__(self, binding: Any, model_id: str):
        self.binding = binding
        self.model_id = model_id

    async def infer(self, system: str, prompt: str, data_url: str) -> str:
        message = {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        }

        log_info("Vision inference started", model=self.model_id, prompt=prompt[:100])
        text = await generate_text(
            self.binding,
            self.model_id,
            system,
            [message],
            max_steps=VISION_STEP_BUDGET,
            purpose="capture",
        )
        log_info("Vision inference completed", model=self.model_id, chars=len(text))
        return text
