"""
Agent Router - streamed chat with named agent instances
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from ui_pilot.config import AIConfig
from ui_pilot.dependencies import get_ai_binding, get_ai_config
from ui_pilot.exceptions import AIBindingError
from ui_pilot.models.workers_ai import WorkersAIBinding
from ui_pilot.services.agent.core import route_agent
from ui_pilot.services.agent.stream import UI_STREAM_HEADERS
from ui_pilot.services.agent.tools import tool_registry
from ui_pilot.utils.logger import setup_logger
from ui_pilot.utils.metrics import track_request

logger = setup_logger(__name__)
router = APIRouter()


class UIMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    role: str
    parts: List[Dict[str, Any]] = Field(default_factory=list)


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    messages: List[UIMessage] = Field(default_factory=list)


def _not_found() -> PlainTextResponse:
    return PlainTextResponse("Not found", status_code=404)


@router.post("/{agent}/{name}")
@track_request("agent_chat")
async def chat(
    agent: str,
    name: str,
    body: ChatRequest,
    binding: Optional[WorkersAIBinding] = Depends(get_ai_binding),
    config: AIConfig = Depends(get_ai_config),
):
    """Stream the agent's reply as a UI message stream"""
    agent_cls = route_agent(agent)
    if agent_cls is None:
        return _not_found()
    if binding is None:
        raise AIBindingError()

    logger.info(f"[AGENT] {agent}/{name}: {len(body.messages)} messages")

    instance = agent_cls(name, binding, config.chat_model)
    stream = instance.on_chat_message([m.model_dump() for m in body.messages])
    return StreamingResponse(stream, media_type="text/event-stream", headers=UI_STREAM_HEADERS)


@router.get("/{agent}/{name}/tools")
def list_tools(agent: str, name: str):
    if route_agent(agent) is None:
        return _not_found()
    return {"ok": True, "tools": tool_registry.list_tools()}
