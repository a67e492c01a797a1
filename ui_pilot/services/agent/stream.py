"""
UI message stream - server-sent events consumed by the chat front end
"""

import asyncio
import json
import uuid
from typing import Any, AsyncIterator, Awaitable, Callable, Dict

from ui_pilot.utils.logger import log_error

UI_STREAM_HEADERS = {
    "x-vercel-ai-ui-message-stream": "v1",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

_CLOSE = object()


def sse(part: Dict[str, Any]) -> str:
    return f"data: {json.dumps(part)}\n\n"


class UIMessageStreamWriter:
    """Collects stream parts written by the executing agent."""

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()

    def write(self, part: Dict[str, Any]) -> None:
        self._queue.put_nowait(part)

    def close(self) -> None:
        self._queue.put_nowait(_CLOSE)

    async def parts(self) -> AsyncIterator[Dict[str, Any]]:
        while True:
            part = await self._queue.get()
            if part is _CLOSE:
                return
            yield part


async def create_ui_message_stream(
    execute: Callable[[UIMessageStreamWriter], Awaitable[None]],
) -> AsyncIterator[str]:
    """
    Run `execute` in a task and relay what it writes as SSE lines.

    Errors inside `execute` become an in-band `error` part. Closing the
    generator (client disconnect) cancels the task.
    """
    writer = UIMessageStreamWriter()

    async def runner() -> None:
        try:
            await execute(writer)
        except Exception as e:
            log_error("Chat stream failed", error=str(e), error_type=type(e).__name__)
            writer.write({"type": "error", "errorText": "An error occurred."})
        finally:
            writer.close()

    task = asyncio.create_task(runner())
    try:
        yield sse({"type": "start", "messageId": f"msg_{uuid.uuid4().hex}"})
        async for part in writer.parts():
            yield sse(part)
        yield sse({"type": "finish"})
        yield "data: [DONE]\n\n"
    finally:
        if not task.done():
            task.cancel()
