from __future__ import annotations

from typing import Any, Optional


class GenerationError(Exception):
    """Base error raised by the generation core.

    `source` tells the HTTP layer who is at fault: "provider" errors map to a
    502 response, everything else to a 500.
    """

    kind = "generation"

    def __init__(
        self,
        code: str,
        message: str,
        *,
        provider: Optional[str] = None,
        status: Optional[int] = None,
        details: Any = None,
        source: str = "provider",
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.provider = provider
        self.status = status
        self.details = details
        self.source = source

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "source": self.source,
            "kind": self.kind,
            "code": self.code,
            "provider": self.provider,
            "status": self.status,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, provider={self.provider!r}, status={self.status!r})"


class ConfigError(GenerationError):
    """Caller input or deployment misconfiguration. Never retried."""

    kind = "config"


class TransportError(GenerationError):
    """Upstream HTTP failure or an envelope we could not read."""

    kind = "transport"


class ContentError(GenerationError):
    """The upstream call succeeded but the text was unusable."""

    kind = "content"


# Stable error codes
MISSING_API_KEY = "MISSING_API_KEY"
UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
MISSING_USER_PROMPT = "MISSING_USER_PROMPT"
PROVIDER_ERROR = "PROVIDER_ERROR"
INVALID_RESPONSE = "INVALID_RESPONSE"
RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
EMPTY_RESPONSE = "EMPTY_RESPONSE"
PARSE_ERROR = "PARSE_ERROR"
