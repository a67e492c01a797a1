"""
FastAPI Dependencies - request-scoped access to the model-execution binding
"""

from typing import Optional

import httpx
from fastapi import Depends, Request

from ui_pilot.config import AIConfig, load_ai_config
from ui_pilot.exceptions import AIBindingError
from ui_pilot.models.workers_ai import WorkersAIBinding


def get_ai_config() -> AIConfig:
    """Binding settings, read from the environment for each request"""
    return load_ai_config()


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared HTTP client from app state"""
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise AIBindingError("HTTP client not initialized")
    return client


async def get_ai_binding(
    request: Request, config: AIConfig = Depends(get_ai_config)
) -> Optional[WorkersAIBinding]:
    """
    Build the binding for this request, or None when it is not configured.

    Capture reports a missing binding only after its input is validated.
    """
    if not config.binding_configured:
        return None
    client = await get_http_client(request)
    return WorkersAIBinding.from_config(config, client)
