from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

import httpx

from llm.demo_fixture import FETCH_EXPANSION, demo_payload, get_demo_supplement
from llm.prompts import SYSTEM_PROMPT
from llm.providers.base import LLMProvider
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.huggingface_provider import HuggingFaceProvider
from llm.providers.openai_provider import OpenAIProvider
from llm.text_extractor import extract_json, strip_fences
from microskill.config import Settings
from microskill.errors import (
    EMPTY_RESPONSE,
    MISSING_USER_PROMPT,
    PARSE_ERROR,
    UNSUPPORTED_PROVIDER,
    ConfigError,
    ContentError,
    GenerationError,
)
from microskill.models import (
    Failure,
    GenerationRequest,
    GenerationResult,
    NormalizedOutcome,
    Parsed,
    PlainText,
    ProviderName,
    ProviderResult,
)

logger = logging.getLogger(__name__)

PROVIDER_REGISTRY: Dict[ProviderName, Type[LLMProvider]] = {
    ProviderName.OPENAI: OpenAIProvider,
    ProviderName.HUGGINGFACE: HuggingFaceProvider,
    ProviderName.GEMINI: GeminiProvider,
}


class LLMClient:
    """Facade over the provider adapters.

    Picks an adapter, runs it, and turns its text into either a parsed JSON
    payload or plain text. Adapter errors pass through untouched; this class
    only adds the parse-stage codes (EMPTY_RESPONSE, PARSE_ERROR).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        providers: Optional[Mapping[ProviderName, LLMProvider]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings if settings is not None else Settings.from_env()
        if providers is None:
            providers = {
                name: cls(self.settings, transport=transport, sleep=sleep)
                for name, cls in PROVIDER_REGISTRY.items()
            }
        self._providers = dict(providers)

    def resolve_provider(self, provider: Optional[str] = None) -> ProviderName:
        name = (provider or self.settings.default_provider or ProviderName.OPENAI.value).strip().lower()
        try:
            return ProviderName(name)
        except ValueError:
            raise ConfigError(
                UNSUPPORTED_PROVIDER,
                f"Unsupported provider: {name}",
                provider=name,
                source="wrapper",
            )

    def _call(
        self,
        provider: Optional[str],
        system_prompt: str,
        user_prompt: Any,
        extra: Optional[Mapping[str, Any]],
    ) -> Tuple[ProviderName, ProviderResult]:
        if not user_prompt or not isinstance(user_prompt, str):
            raise ConfigError(
                MISSING_USER_PROMPT,
                "userPrompt is required and must be a string",
                source="wrapper",
            )

        name = self.resolve_provider(provider)
        adapter = self._providers.get(name)
        if adapter is None:
            raise ConfigError(
                UNSUPPORTED_PROVIDER,
                f"Unsupported provider: {name.value}",
                provider=name.value,
                source="wrapper",
            )

        extra = extra or {}
        request = GenerationRequest(
            provider=name,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_output_tokens=int(extra.get("max_output_tokens") or self.settings.max_output_tokens),
            temperature=self.settings.temperature,
        )
        logger.info(f"Dispatching generation to {name.value}")
        return name, adapter.generate(request)

    def generate_for_provider(
        self,
        provider: Optional[str] = None,
        user_prompt: Any = None,
        extra: Optional[Mapping[str, Any]] = None,
        *,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> GenerationResult:
        """Structured mode: returns the JSON object the model produced."""
        if self.settings.demo_mode:
            logger.info("Demo mode on, returning fixture")
            payload = demo_payload()
            text = json.dumps(payload, ensure_ascii=False)
            return GenerationResult(parsed=payload, raw=text, assistant_text=text)

        provider_name, result = self._call(provider, system_prompt, user_prompt, extra)
        name = provider_name.value

        cleaned = strip_fences(result.assistant_text or "")
        parsed = extract_json(cleaned)
        if isinstance(parsed, (dict, list)):
            return GenerationResult(parsed=parsed, raw=result.raw_response_text, assistant_text=cleaned)

        if not (result.assistant_text or "").strip():
            raise ContentError(
                EMPTY_RESPONSE,
                f"{name} returned empty text",
                provider=name,
                details=result.raw_response_text,
            )
        raise ContentError(
            PARSE_ERROR,
            f"{name} output not JSON",
            provider=name,
            details=cleaned,
        )

    def generate_plain_text(
        self,
        provider: Optional[str] = None,
        system_prompt: str = SYSTEM_PROMPT,
        user_prompt: Any = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> ProviderResult:
        """Plain-text mode: fence-stripped text, empty string included."""
        if self.settings.demo_mode:
            text = get_demo_supplement(0, FETCH_EXPANSION)
            return ProviderResult(raw_response_text=text, assistant_text=text)

        _, result = self._call(provider, system_prompt, user_prompt, extra)
        return ProviderResult(
            raw_response_text=result.raw_response_text,
            assistant_text=strip_fences(result.assistant_text or ""),
        )

    def generate(
        self,
        provider: Optional[str] = None,
        user_prompt: Any = None,
        *,
        system_prompt: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        plain_text: bool = False,
    ) -> NormalizedOutcome:
        """Like the two modes above, but failures come back as `Failure`."""
        extra = {"max_output_tokens": max_output_tokens} if max_output_tokens else None
        try:
            if plain_text:
                result = self.generate_plain_text(
                    provider,
                    system_prompt=system_prompt or SYSTEM_PROMPT,
                    user_prompt=user_prompt,
                    extra=extra,
                )
                return PlainText(value=result.assistant_text)
            result = self.generate_for_provider(
                provider,
                user_prompt,
                extra,
                system_prompt=system_prompt or SYSTEM_PROMPT,
            )
            return Parsed(value=result.parsed)
        except GenerationError as e:
            logger.warning("Generation failed: %r", e)
            return Failure.from_error(e)
