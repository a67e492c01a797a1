"""
Human-in-the-loop processing of confirmation-gated tool calls
"""

from typing import Any, Dict, List

from ui_pilot.services.agent.messages import is_tool_part, tool_name
from ui_pilot.services.agent.stream import UIMessageStreamWriter
from ui_pilot.services.agent.tools import ToolFn
from ui_pilot.utils.logger import log_info


class APPROVAL:
    YES = "Yes, confirmed."
    NO = "No, denied."


DENIED_RESULT = "Error: User denied access to tool execution"


async def process_tool_calls(
    messages: List[Dict[str, Any]],
    writer: UIMessageStreamWriter,
    executions: Dict[str, ToolFn],
) -> List[Dict[str, Any]]:
    """
    Resolve the user's answers to pending confirmations in the last message.

    An approved call runs its execution, a denied one gets DENIED_RESULT; both
    are streamed as `tool-output-available` and replace the part's output.
    Other parts are left untouched.
    """
    if not messages:
        return messages

    last = messages[-1]
    processed: List[Dict[str, Any]] = []

    for part in last.get("parts") or []:
        name = tool_name(part) if is_tool_part(part) else ""
        if name not in executions or part.get("state") != "output-available":
            processed.append(part)
            continue

        answer = part.get("output")
        if answer == APPROVAL.YES:
            args = part.get("input")
            result = await executions[name](**(args if isinstance(args, dict) else {}))
        elif answer == APPROVAL.NO:
            result = DENIED_RESULT
        else:
            processed.append(part)
            continue

        log_info("Tool confirmation processed", tool=name, approved=answer == APPROVAL.YES)
        writer.write(
            {"type": "tool-output-available", "toolCallId": part.get("toolCallId"), "output": result}
        )
        processed.append({**part, "output": result})

    return [*messages[:-1], {**last, "parts": processed}]
