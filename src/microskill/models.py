from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from microskill.errors import GenerationError


class ProviderName(str, Enum):
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"
    GEMINI = "gemini"


@dataclass(frozen=True)
class GenerationRequest:
    provider: ProviderName
    system_prompt: str
    user_prompt: str
    max_output_tokens: int
    temperature: float = 0.25


@dataclass(frozen=True)
class ProviderResult:
    # verbatim upstream body, kept for diagnostics
    raw_response_text: str
    # model payload after unwrapping the provider envelope
    assistant_text: str


@dataclass(frozen=True)
class GenerationResult:
    parsed: Any
    raw: str
    assistant_text: str


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class PlainText:
    value: str


@dataclass(frozen=True)
class Failure:
    kind: str
    code: str
    message: str
    provider: Optional[str] = None
    http_status: Optional[int] = None
    details: Any = None

    @classmethod
    def from_error(cls, err: GenerationError) -> "Failure":
        return cls(
            kind=err.kind,
            code=err.code,
            message=err.message,
            provider=err.provider,
            http_status=err.status,
            details=err.details,
        )


NormalizedOutcome = Union[Parsed, PlainText, Failure]


class MicroLesson(BaseModel):
    title: str = Field(..., min_length=1)
    tip: str = Field(..., min_length=1)
    practice_task: str = Field(..., min_length=1)
    example_output: str = Field(..., min_length=1)

    # only present in the richer demo fixture
    difficulty: Optional[str] = None
    hints: List[str] = Field(default_factory=list)
    full_guide: Optional[str] = None

    @field_validator("title", "tip", "practice_task", "example_output")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("must not be blank")
        return v2


class MicroLessonSet(BaseModel):
    """Payload shape the system prompt asks the model for.

    The core never enforces it; callers validate with `model_validate` when
    they need the guarantees.
    """

    micro_lessons: List[MicroLesson]
    profile_short: str
    profile_long: str
    cover_message: str

    @field_validator("micro_lessons")
    @classmethod
    def exactly_five(cls, v: List[MicroLesson]) -> List[MicroLesson]:
        if len(v) != 5:
            raise ValueError(f"expected exactly 5 micro_lessons, got {len(v)}")
        return v
