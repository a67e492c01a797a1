"""
Resilient JSON extraction from vision model output
"""

import json
from enum import Enum
from typing import Any

from ui_pilot.exceptions import InvalidModelOutput
from ui_pilot.utils.logger import log_error, log_warning
from ui_pilot.utils.metrics import json_retries_total

MAX_ATTEMPTS = 2
RETRY_DIRECTIVE = "\nCRITICAL: output parseable JSON only."
RAW_LOG_LIMIT = 1200


class ExtractState(Enum):
    FIRST = "first"
    RETRY = "retry"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_json(raw: str) -> Any:
    """Strict JSON parse: NaN and Infinity are rejected like any other syntax error."""
    return json.loads(raw, parse_constant=_reject_constant)


class ResilientJSONExtractor:
    """
    Two-state machine over the inference client.

    FIRST calls with the base instruction. A parse failure moves to RETRY,
    which calls once more with RETRY_DIRECTIVE appended. A second failure is
    terminal. At most MAX_ATTEMPTS model calls are made, one after another.
    """

    def __init__(self, client: Any):
        self.client = client

    async def extract(self, system: str, prompt: str, data_url: str) -> Any:
        state = ExtractState.FIRST
        raw = ""

        for attempt in range(1, MAX_ATTEMPTS + 1):
            instruction = system if state is ExtractState.FIRST else system + RETRY_DIRECTIVE
            raw = await self.client.infer(instruction, prompt, data_url)
            try:
                return parse_json(raw)
            except (ValueError, RecursionError):
                if state is ExtractState.FIRST:
                    log_warning("Model output is not JSON, retrying", attempt=attempt)
                    json_retries_total.inc()
                    state = ExtractState.RETRY

        log_error("Non-JSON model output", raw=raw[:RAW_LOG_LIMIT])
        raise InvalidModelOutput()
