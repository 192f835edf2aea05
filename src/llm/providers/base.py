from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

import httpx

from microskill.config import Settings
from microskill.errors import (
    MISSING_API_KEY,
    PROVIDER_ERROR,
    RETRIES_EXHAUSTED,
    ConfigError,
    TransportError,
)
from microskill.models import GenerationRequest, ProviderResult

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """One upstream text-generation API.

    Subclasses build the request, unwrap the response envelope and return the
    model text verbatim; fence stripping and JSON parsing belong to LLMClient.
    """

    name: str = "base"
    label: str = "LLM"
    retries_enabled: bool = False

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self._transport = transport
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.settings.max_attempts if self.retries_enabled else 1

    @abstractmethod
    def generate(self, request: GenerationRequest) -> ProviderResult:
        raise NotImplementedError

    def _require_key(self, api_key: str, env_name: str) -> str:
        if not api_key:
            raise ConfigError(
                MISSING_API_KEY,
                f"{self.label} API key not configured ({env_name})",
                provider=self.name,
                source="provider",
            )
        return api_key

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.settings.request_timeout_s, transport=self._transport)

    def backoff_delay(self, attempt: int) -> float:
        return self.settings.backoff_base_s * (2 ** (attempt - 1))

    def _send_with_retries(self, send: Callable[[httpx.Client, int], httpx.Response]) -> httpx.Response:
        """Run `send` until it returns a 2xx response or the policy gives up.

        Only 5xx responses are retried, with exponential backoff between
        attempts. Anything else surfaces immediately as PROVIDER_ERROR.

        When a retrying adapter spends its whole budget on 5xx responses the
        error is RETRIES_EXHAUSTED (with the last status and body), not
        PROVIDER_ERROR, so callers matching on PROVIDER_ERROR alone will miss
        that case. Single-attempt adapters always report PROVIDER_ERROR.
        """
        attempts = self.max_attempts
        attempt = 0
        with self._client() as client:
            while True:
                attempt += 1
                try:
                    resp = send(client, attempt)
                except httpx.HTTPError as e:
                    raise TransportError(
                        PROVIDER_ERROR,
                        f"{self.label} request failed: {e}",
                        provider=self.name,
                        details=str(e),
                    ) from e

                logger.info("%s attempt %d/%d status=%d", self.name, attempt, attempts, resp.status_code)
                logger.debug("%s body: %s", self.name, resp.text)

                if resp.is_success:
                    return resp
                if resp.status_code < 500 or attempt >= attempts:
                    break

                delay = self.backoff_delay(attempt)
                logger.warning(f"{self.name} returned {resp.status_code}, retrying in {delay:.2f}s")
                self._sleep(delay)

        if resp.status_code >= 500 and attempts > 1:
            raise TransportError(
                RETRIES_EXHAUSTED,
                f"{self.label} retries exhausted",
                provider=self.name,
                status=resp.status_code,
                details=resp.text,
            )
        raise TransportError(
            PROVIDER_ERROR,
            f"{self.label} API error",
            provider=self.name,
            status=resp.status_code,
            details=resp.text,
        )
