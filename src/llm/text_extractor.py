from __future__ import annotations

import json
import re
from typing import Any, Optional

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
_ANY_FENCE_RE = re.compile(r"```(.*?)```", re.DOTALL)
_LEADING_FENCE_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```\Z")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Optional[Any]:
    # strict JSON only: NaN/Infinity are rejected, absurd nesting counts as unparseable
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None


def extract_json(text: Any) -> Optional[Any]:
    """Best-effort recovery of a JSON value from model output.

    Tries, in order: the whole string, the interior of a fenced code block,
    and the span from the first "{" to the last "}". Returns None when
    nothing parses. Braces are not balanced, so prose containing unrelated
    braces around the object can defeat the last step.
    """
    if not text or not isinstance(text, str):
        return None

    parsed = _loads(text)
    if parsed is not None:
        return parsed

    block = _JSON_FENCE_RE.search(text) or _ANY_FENCE_RE.search(text)
    if block:
        parsed = _loads(block.group(1))
        if parsed is not None:
            return parsed

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        return _loads(text[first : last + 1])

    return None


def strip_fences(text: Any) -> Any:
    """Remove a leading ```json / ``` marker and a trailing ``` marker.

    Non-string input is returned unchanged. Applied until the text stops
    changing, which keeps it idempotent for stacked fences.
    """
    if not isinstance(text, str):
        return text

    current = text.strip()
    while True:
        stripped = _TRAILING_FENCE_RE.sub("", _LEADING_FENCE_RE.sub("", current, count=1), count=1).strip()
        if stripped == current:
            return stripped
        current = stripped
