"""
Workers AI binding - model execution over the Cloudflare REST API
"""

import json
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ui_pilot.config import AIConfig
from ui_pilot.exceptions import AIBindingError, ModelRequestError
from ui_pilot.utils.logger import log_debug, log_error


class WorkersAIBinding:
    """
    Minimal async client for `POST /accounts/{account_id}/ai/run/{model}`.

    The HTTP client is owned by the application and shared across requests;
    the binding itself is cheap and built per request from the current config.
    """

    def __init__(
        self,
        account_id: str,
        api_token: str,
        client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 120.0,
    ):
        self.account_id = account_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client
        self.headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_config(cls, config: AIConfig, client: httpx.AsyncClient) -> "WorkersAIBinding":
        if not config.binding_configured:
            raise AIBindingError()
        return cls(
            account_id=config.account_id,  # type: ignore[arg-type]
            api_token=config.api_token,  # type: ignore[arg-type]
            client=client,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def _url(self, model: str) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/ai/run/{model}"

    async def run(self, model: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """Run a model once and return the `result` object of the envelope."""
        try:
            r = await self.client.post(
                self._url(model), headers=self.headers, json=inputs, timeout=self.timeout
            )
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPError as e:
            log_error("Workers AI request failed", model=model, error=str(e))
            raise ModelRequestError(str(e)) from e
        except ValueError as e:
            log_error("Workers AI returned a non-JSON envelope", model=model)
            raise ModelRequestError("non-JSON envelope") from e

        if isinstance(data, dict) and data.get("success") is False:
            log_error("Workers AI reported failure", model=model, errors=data.get("errors"))
            raise ModelRequestError(str(data.get("errors") or "unsuccessful run"))

        result = data.get("result") if isinstance(data, dict) else None
        return result if isinstance(result, dict) else {"response": result}

    async def stream(self, model: str, inputs: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        """Run a model with `stream: true` and yield each server-sent event payload."""
        payload = dict(inputs, stream=True)
        try:
            async with self.client.stream(
                "POST", self._url(model), headers=self.headers, json=payload, timeout=self.timeout
            ) as r:
                r.raise_for_status()
                async for line in r.aiter_lines():
                    chunk = _parse_sse_line(line)
                    if chunk is None:
                        continue
                    if chunk is _DONE:
                        break
                    yield chunk
        except httpx.HTTPError as e:
            log_error("Workers AI stream failed", model=model, error=str(e))
            raise ModelRequestError(str(e)) from e


_DONE: Dict[str, Any] = {}


def _parse_sse_line(line: str) -> Optional[Dict[str, Any]]:
    line = line.strip()
    if not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if data == "[DONE]":
        return _DONE
    try:
        chunk = json.loads(data)
    except ValueError:
        log_debug("Skipping undecodable stream chunk", chunk=data[:200])
        return None
    return chunk if isinstance(chunk, dict) else None
