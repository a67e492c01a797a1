"""
UI message helpers - cleanup and conversion to model messages
"""

import json
from typing import Any, Dict, List

TOOL_PART_PREFIX = "tool-"


def is_tool_part(part: Dict[str, Any]) -> bool:
    return str(part.get("type", "")).startswith(TOOL_PART_PREFIX)


def tool_name(part: Dict[str, Any]) -> str:
    return str(part.get("type", ""))[len(TOOL_PART_PREFIX):]


def _is_incomplete(part: Dict[str, Any]) -> bool:
    if not is_tool_part(part):
        return False
    state = part.get("state")
    return state == "input-streaming" or (
        state == "input-available" and not part.get("output") and not part.get("errorText")
    )


def cleanup_messages(messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop messages carrying tool calls that never produced a result or an error."""
    return [
        m for m in messages
        if not any(_is_incomplete(p) for p in (m.get("parts") or []))
    ]


def _text_of(parts: List[Dict[str, Any]]) -> str:
    return "".join(p.get("text", "") for p in parts if p.get("type") == "text")


def _stringify(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def convert_to_model_messages(messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten UI messages into chat-completion messages for the binding."""
    out: List[Dict[str, Any]] = []
    for m in messages:
        role = m.get("role", "user")
        parts = m.get("parts") or []

        if role != "assistant":
            out.append({"role": role, "content": _text_of(parts)})
            continue

        calls, results = [], []
        for p in parts:
            if not is_tool_part(p) or p.get("state") not in {"output-available", "output-error"}:
                continue
            call_id = p.get("toolCallId", "")
            calls.append(
                {
                    "id": call_id,
                    "type": "function",
                    "function": {"name": tool_name(p), "arguments": json.dumps(p.get("input") or {})},
                }
            )
            output = p.get("output") if p.get("state") == "output-available" else p.get("errorText", "")
            results.append(
                {"role": "tool", "name": tool_name(p), "tool_call_id": call_id, "content": _stringify(output)}
            )

        message: Dict[str, Any] = {"role": "assistant", "content": _text_of(parts)}
        if calls:
            message["tool_calls"] = calls
        out.append(message)
        out.extend(results)
    return out
