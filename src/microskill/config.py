from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_HF_MODEL = "mistralai/Mistral-7B-Instruct-v0.3"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

_TRUTHY = {"1", "true", "yes"}


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """Static configuration for the generation core.

    Built once at process start (usually via `Settings.from_env()`) and handed
    to `LLMClient`. Tests build their own instances instead of touching the
    environment.
    """

    demo_mode: bool = False
    default_provider: str = "openai"

    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_base_url: str = "https://api.openai.com/v1"

    hf_api_key: str = ""
    hf_model: str = DEFAULT_HF_MODEL
    hf_base_url: str = "https://api-inference.huggingface.co"

    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    temperature: float = 0.25
    max_output_tokens: int = 7000
    max_attempts: int = 3
    backoff_base_s: float = 0.5
    request_timeout_s: float = 60.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str, default: str = "") -> str:
            return (env.get(name) or default).strip()

        return cls(
            demo_mode=_flag(env.get("DEMO_MODE")),
            default_provider=get("DEFAULT_PROVIDER", "openai").lower(),
            openai_api_key=get("OPENAI_API_KEY"),
            openai_model=get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            openai_base_url=get("OPENAI_BASE_URL", cls.openai_base_url).rstrip("/"),
            hf_api_key=get("HUGGINGFACE_API_KEY"),
            hf_model=get("HF_MODEL", DEFAULT_HF_MODEL),
            hf_base_url=get("HF_BASE_URL", cls.hf_base_url).rstrip("/"),
            gemini_api_key=get("GEMINI_API_KEY"),
            gemini_model=get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            gemini_base_url=get("GEMINI_BASE_URL", cls.gemini_base_url).rstrip("/"),
            temperature=float(get("LLM_TEMPERATURE", "0.25")),
            max_output_tokens=int(get("LLM_MAX_OUTPUT_TOKENS", "7000")),
            max_attempts=max(1, int(get("LLM_MAX_ATTEMPTS", "3"))),
            backoff_base_s=float(get("LLM_BACKOFF_BASE_S", "0.5")),
            request_timeout_s=float(get("LLM_REQUEST_TIMEOUT_S", "60")),
            log_level=get("LOG_LEVEL", "INFO").upper(),
        )
