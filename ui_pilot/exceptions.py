# -*- coding: utf-8 -*-
"""Service exceptions. Each carries the HTTP status and the public message."""

from __future__ import annotations


class UIPilotError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error occurred"

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message or self.public_message)
        if status_code is not None:
            self.status_code = status_code


class AIBindingError(UIPilotError):
    """The model-execution binding is absent or incomplete."""

    status_code = 503
    public_message = "AI binding is not configured."


class ModelRequestError(UIPilotError):
    """The binding answered with a transport or HTTP error."""

    status_code = 502
    public_message = "Model request failed."


class InvalidModelOutput(UIPilotError):
    """The vision model did not return parseable JSON after the retry."""

    status_code = 502
    public_message = "Model returned invalid JSON."
