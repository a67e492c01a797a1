"""
Step-bounded text generation on top of the model-execution binding
"""

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

from ui_pilot.utils.logger import log_info, log_warning
from ui_pilot.utils.metrics import model_calls_total


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)},
        }


@dataclass
class StepDelta:
    """One piece of a streamed step: a text delta and/or completed tool calls."""

    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)


def response_text(result: Dict[str, Any]) -> str:
    """Extract the text output of a run; structured responses are re-serialized."""
    response = result.get("response")
    if response is None:
        return ""
    if isinstance(response, str):
        return response
    return json.dumps(response)


def parse_tool_calls(raw: Any) -> List[ToolCall]:
    """Accept both the Workers AI `{name, arguments}` and the OpenAI `function` shape."""
    calls: List[ToolCall] = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        fn = item.get("function") if isinstance(item.get("function"), dict) else item
        name = fn.get("name")
        if not name:
            continue
        args = fn.get("arguments") or {}
        if isinstance(args, str):
            try:
                args = json.loads(args)
            except ValueError:
                log_warning("Dropping malformed tool arguments", tool=name)
                args = {}
        calls.append(
            ToolCall(
                id=str(item.get("id") or f"call_{uuid.uuid4().hex[:12]}"),
                name=name,
                arguments=args if isinstance(args, dict) else {},
            )
        )
    return calls


def tool_specs(tools: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [t.spec() for t in (tools or {}).values()]


def build_inputs(conversation: List[Dict[str, Any]], tools: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    inputs: Dict[str, Any] = {"messages": list(conversation)}
    specs = tool_specs(tools)
    if specs:
        inputs["tools"] = specs
    return inputs


async def execute_tool_calls(
    calls: List[ToolCall], tools: Dict[str, Any], conversation: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """Run auto-executable tools and append their results to the conversation."""
    outputs = []
    for call in calls:
        tool = tools[call.name]
        try:
            output = await tool.execute(**call.arguments)
        except Exception as e:
            output = f"Error executing tool: {e}"
        conversation.append(
            {
                "role": "tool",
                "name": call.name,
                "tool_call_id": call.id,
                "content": output if isinstance(output, str) else json.dumps(output),
            }
        )
        outputs.append({"call": call, "output": output})
    return outputs


def runnable_calls(calls: List[ToolCall], tools: Optional[Dict[str, Any]]) -> List[ToolCall]:
    tools = tools or {}
    return [c for c in calls if c.name in tools and tools[c.name].execute is not None]


async def generate_text(
    binding: Any,
    model: str,
    system: str,
    messages: List[Dict[str, Any]],
    tools: Optional[Dict[str, Any]] = None,
    max_steps: int = 1,
    purpose: str = "generate",
) -> str:
    """
    Run up to `max_steps` model calls, executing tool calls between steps.

    Returns the text of the last step. Without tools this is a single call.
    """
    conversation: List[Dict[str, Any]] = [{"role": "system", "content": system}, *messages]
    text = ""

    for step in range(1, max_steps + 1):
        model_calls_total.labels(purpose=purpose, model=model).inc()
        result = await binding.run(model, build_inputs(conversation, tools))
        text = response_text(result)

        calls = runnable_calls(parse_tool_calls(result.get("tool_calls")), tools)
        if not calls:
            break

        log_info("Model requested tools", step=step, tools=[c.name for c in calls])
        conversation.append(
            {"role": "assistant", "content": text, "tool_calls": [c.to_message() for c in calls]}
        )
        await execute_tool_calls(calls, tools or {}, conversation)

    return text


async def stream_step(
    binding: Any,
    model: str,
    conversation: List[Dict[str, Any]],
    tools: Optional[Dict[str, Any]] = None,
    purpose: str = "chat",
) -> AsyncIterator[StepDelta]:
    """Stream a single model call as text deltas; tool calls arrive as they complete."""
    model_calls_total.labels(purpose=purpose, model=model).inc()
    async for chunk in binding.stream(model, build_inputs(conversation, tools)):
        delta = StepDelta(
            text=response_text(chunk) if isinstance(chunk.get("response"), str) else "",
            tool_calls=parse_tool_calls(chunk.get("tool_calls")),
        )
        if delta.text or delta.tool_calls:
            yield delta
