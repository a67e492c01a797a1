"""
Chat Agent - streamed chat with tool use and human confirmation
"""

import uuid
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from ui_pilot.models.llm import ToolCall, execute_tool_calls, runnable_calls, stream_step
from ui_pilot.services.agent.hitl import process_tool_calls
from ui_pilot.services.agent.messages import cleanup_messages, convert_to_model_messages
from ui_pilot.services.agent.stream import UIMessageStreamWriter, create_ui_message_stream
from ui_pilot.services.agent.tools import ToolRegistry, tool_registry
from ui_pilot.utils.logger import log_info

CHAT_SYSTEM_PROMPT = "You are a helpful assistant. Respond normally like a chat bot. Be concise.\n"
CHAT_STEP_BUDGET = 10


class ChatAgent:
    """
    One named chat instance.

    Each call to `on_chat_message` gets the full conversation from the
    client; nothing is kept between requests.
    """

    def __init__(
        self,
        name: str,
        binding: Any,
        model_id: str,
        registry: ToolRegistry = tool_registry,
        max_steps: int = CHAT_STEP_BUDGET,
    ):
        self.name = name
        self.binding = binding
        self.model_id = model_id
        self.tools = registry.get_tools()
        self.executions = registry.executions
        self.max_steps = max_steps

    def on_chat_message(self, messages: List[Dict[str, Any]]) -> AsyncIterator[str]:
        async def execute(writer: UIMessageStreamWriter) -> None:
            # Incomplete tool calls make the model API reject the history
            cleaned = cleanup_messages(messages)
            processed = await process_tool_calls(cleaned, writer, self.executions)
            await self._run_steps(convert_to_model_messages(processed), writer)

        log_info("Chat message received", agent=self.name, messages=len(messages))
        return create_ui_message_stream(execute)

    async def _run_steps(self, history: List[Dict[str, Any]], writer: UIMessageStreamWriter) -> None:
        conversation = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *history]

        for step in range(1, self.max_steps + 1):
            writer.write({"type": "start-step"})
            text, calls = await self._stream_one(conversation, writer)

            for call in calls:
                writer.write(
                    {
                        "type": "tool-input-available",
                        "toolCallId": call.id,
                        "toolName": call.name,
                        "input": call.arguments,
                    }
                )

            runnable = runnable_calls(calls, self.tools)
            if runnable:
                conversation.append(
                    {"role": "assistant", "content": text, "tool_calls": [c.to_message() for c in runnable]}
                )
                for result in await execute_tool_calls(runnable, self.tools, conversation):
                    writer.write(
                        {
                            "type": "tool-output-available",
                            "toolCallId": result["call"].id,
                            "output": result["output"],
                        }
                    )
            writer.write({"type": "finish-step"})

            # Stop when the model is done or a call waits for the user
            if not calls or len(runnable) < len(calls):
                log_info("Chat finished", agent=self.name, steps=step)
                return

        log_info("Chat step budget reached", agent=self.name, steps=self.max_steps)

    async def _stream_one(
        self, conversation: List[Dict[str, Any]], writer: UIMessageStreamWriter
    ) -> "tuple[str, List[ToolCall]]":
        text_id: Optional[str] = None
        text = ""
        calls: List[ToolCall] = []

        async for delta in stream_step(self.binding, self.model_id, conversation, self.tools):
            if delta.text:
                if text_id is None:
                    text_id = f"txt_{uuid.uuid4().hex[:12]}"
                    writer.write({"type": "text-start", "id": text_id})
                writer.write({"type": "text-delta", "id": text_id, "delta": delta.text})
                text += delta.text
            calls.extend(delta.tool_calls)

        if text_id is not None:
            writer.write({"type": "text-end", "id": text_id})
        return text, calls


# Agent classes addressable under /agents/<name>/<instance>
AGENTS: Dict[str, Type[ChatAgent]] = {"chat": ChatAgent}


def route_agent(agent: str) -> Optional[Type[ChatAgent]]:
    return AGENTS.get(agent)
