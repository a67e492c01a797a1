# -*- coding: utf-8 -*-
"""Config reader for the ui-pilot service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_AI_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_VISION_MODEL = "@cf/meta/llama-3.2-11b-vision-instruct"
DEFAULT_CHAT_MODEL = "@cf/deepseek-ai/deepseek-r1-distill-qwen-32b"


def _env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


# ---------- Model-execution binding ----------
@dataclass
class AIConfig:
    account_id: Optional[str] = field(default_factory=lambda: _env("CLOUDFLARE_ACCOUNT_ID"))
    api_token: Optional[str] = field(default_factory=lambda: _env("CLOUDFLARE_API_TOKEN"))
    base_url: str = field(default_factory=lambda: _env("AI_BASE_URL") or DEFAULT_AI_BASE_URL)
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("AI_TIMEOUT_SECONDS", "120")))
    # Empty override falls back to the default model
    vision_model: str = field(default_factory=lambda: _env("VISION_MODEL_ID") or DEFAULT_VISION_MODEL)
    chat_model: str = field(default_factory=lambda: _env("CHAT_MODEL_ID") or DEFAULT_CHAT_MODEL)

    @property
    def binding_configured(self) -> bool:
        return bool(self.account_id and self.api_token)


# ---------- API misc ----------
@dataclass
class APISettings:
    cors_origins_list: List[str] = field(
        default_factory=lambda: os.getenv("API_CORS_ORIGINS", "*").split(",")
    )
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")


# ---------- Root Config ----------
@dataclass
class Config:
    api: APISettings = field(default_factory=APISettings)
    ai: AIConfig = field(default_factory=AIConfig)


_SINGLETON: Config | None = None


def get_config() -> Config:
    """Process-wide settings, read once."""
    global _SINGLETON
    if _SINGLETON is None:
        _SINGLETON = Config()
    return _SINGLETON


def load_ai_config() -> AIConfig:
    """Binding settings, re-read from the environment on every call."""
    return AIConfig()
