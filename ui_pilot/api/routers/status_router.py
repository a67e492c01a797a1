# -*- coding: utf-8 -*-
"""Status endpoints: binding check, health, metrics."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ui_pilot import __version__
from ui_pilot.config import AIConfig
from ui_pilot.dependencies import get_ai_binding, get_ai_config
from ui_pilot.models.workers_ai import WorkersAIBinding
from ui_pilot.utils.metrics import METRICS_CONTENT_TYPE, get_metrics

router = APIRouter()


@router.get("/check-ai-binding")
async def check_ai_binding(
    binding: Optional[WorkersAIBinding] = Depends(get_ai_binding),
) -> Dict[str, Any]:
    return {"success": binding is not None}


@router.get("/health")
def health(config: AIConfig = Depends(get_ai_config)) -> Dict[str, Any]:
    """Liveness endpoint; reports models without calling them."""
    return {
        "ok": True,
        "service": "ui-pilot",
        "version": __version__,
        "binding": config.binding_configured,
        "models": {
            "vision": config.vision_model,
            "chat": config.chat_model,
        },
    }


@router.get("/metrics")
def metrics() -> Response:
    return Response(content=get_metrics(), media_type=METRICS_CONTENT_TYPE)
