"""
Capture Router - screenshot + goal to a structured UI action plan
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ui_pilot.config import AIConfig
from ui_pilot.dependencies import get_ai_binding, get_ai_config
from ui_pilot.models.workers_ai import WorkersAIBinding
from ui_pilot.services.capture.pipeline import CaptureOrchestrator
from ui_pilot.utils.metrics import track_request

router = APIRouter()


@router.post("/capture")
@track_request("capture")
async def capture(
    request: Request,
    binding: Optional[WorkersAIBinding] = Depends(get_ai_binding),
    config: AIConfig = Depends(get_ai_config),
):
    """
    Multipart form: `goal` (text, at least 2 words) and `image` (PNG/JPEG, max 5MB).

    Fields are taken raw from the form; typing them is the validator's job.
    """
    async with request.form() as form:
        orchestrator = CaptureOrchestrator(binding=binding, model_id=config.vision_model)
        result = await orchestrator.run(form)

    return JSONResponse(result.to_dict(), status_code=result.status_code)
