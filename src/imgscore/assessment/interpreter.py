"""Response Interpreter: recover a score from untrusted model output.

External assessors do not always honor the requested schema. The raw
result is first normalized into an optional structured map plus an
optional free-text body, then an ordered chain of extraction strategies
runs until one produces a number:

1. exact expected key with a numeric value
2. an alternate / legacy key name with a numeric value
3. structured map with no recognized key -> its first value, coerced
4. no structured map -> first run of decimal digits in the text
5. the caller's documented default

Every strategy is total (never raises). The final value is clamped to
[0, 100].
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NamedTuple

from imgscore.adapters.base import AdapterTurnResult
from imgscore.assessment.prompt import SCORE_TOOL_NAME
from imgscore.pipeline.aggregation import clamp_score

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

# Nested objects like {"subjectScore": {"score": 72, "reasoning": "..."}}
_NESTED_VALUE_KEYS = ("score", "value")


class ScoreExtraction(NamedTuple):
    """An interpreted score and the strategy that produced it."""

    value: int
    source: str


def to_number(value: Any) -> float | None:
    """Coerce a JSON-ish value to a finite-or-infinite float, else None.

    Booleans, NaN, and non-numeric strings are not numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    elif isinstance(value, Mapping):
        for key in _NESTED_VALUE_KEYS:
            if key in value:
                return to_number(value[key])
        return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def extract_json_from_text(text: str) -> dict | None:
    """Find a JSON object in free text.

    Tries, in order: the whole text, the span from the first '{' to the
    last '}', and a fenced ```json block.
    """
    if not text:
        return None

    candidates = [text]
    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        candidates.append(text[first_brace : last_brace + 1])
    match = re.search(r"```json\s*\n(.*?)\n\s*```", text, re.DOTALL)
    if match:
        candidates.append(match.group(1))

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(result, dict):
            return result
    return None


def normalize_response(
    raw: AdapterTurnResult | Mapping[str, Any] | str | None,
    tool_name: str = SCORE_TOOL_NAME,
) -> tuple[dict[str, Any] | None, str | None]:
    """Split a raw external result into (structured map, free text).

    For adapter results, the scoring tool call's arguments win; a JSON
    object embedded in the text content is the next best structured
    form; otherwise the content is treated as free text.
    """
    if raw is None:
        return None, None

    if isinstance(raw, Mapping):
        return dict(raw), None

    if isinstance(raw, str):
        return extract_json_from_text(raw), raw

    if isinstance(raw, AdapterTurnResult):
        calls = [tc for tc in raw.tool_calls if tc.arguments]
        preferred = [tc for tc in calls if tc.name == tool_name]
        for tc in preferred or calls:
            if isinstance(tc.arguments, dict):
                return dict(tc.arguments), raw.content
        text = raw.content
        return (extract_json_from_text(text) if text else None), text

    return None, None


def _normalize_key(key: str) -> str:
    return re.sub(r"[\s_\-]", "", key).lower()


Strategy = Callable[[dict | None, str | None, str, Sequence[str]], float | None]


def _exact_key(payload, text, key, aliases):
    if payload is None or key not in payload:
        return None
    return to_number(payload[key])


def _alternate_key(payload, text, key, aliases):
    if payload is None:
        return None
    wanted = [_normalize_key(name) for name in (key, *aliases)]
    normalized = {
        _normalize_key(k): v for k, v in payload.items() if isinstance(k, str)
    }
    for name in wanted:
        if name in normalized:
            number = to_number(normalized[name])
            if number is not None:
                return number
    return None


def _first_value(payload, text, key, aliases):
    if not payload:
        return None
    return to_number(next(iter(payload.values())))


def _free_text(payload, text, key, aliases):
    if payload is not None or not text:
        return None
    match = _NUMBER_RE.search(text)
    if match is None:
        return None
    return to_number(match.group(0))


EXTRACTION_CHAIN: tuple[tuple[str, Strategy], ...] = (
    ("exact_key", _exact_key),
    ("alternate_key", _alternate_key),
    ("first_value", _first_value),
    ("free_text", _free_text),
)


def interpret_score(
    raw: AdapterTurnResult | Mapping[str, Any] | str | None,
    key: str,
    *,
    aliases: Sequence[str] = (),
    other_keys: Sequence[str] = (),
    default: float,
    tool_name: str = SCORE_TOOL_NAME,
) -> ScoreExtraction:
    """Recover one score from a raw external result.

    Args:
        raw: Adapter result, structured mapping, free text, or None.
        key: Expected key, e.g. "subjectScore".
        aliases: Alternate / legacy key names for the same concept.
        other_keys: Keys of sibling scores requested in the same call;
            their values are never taken for this score.
        default: Value used when no strategy finds a number.
        tool_name: Name of the scoring tool call to read arguments from.

    Returns:
        ScoreExtraction with the clamped value and the winning strategy
        name ("default" when nothing matched).
    """
    payload, text = normalize_response(raw, tool_name=tool_name)
    if payload is not None and other_keys:
        claimed = {_normalize_key(k) for k in other_keys}
        payload = {
            k: v
            for k, v in payload.items()
            if not (isinstance(k, str) and _normalize_key(k) in claimed)
        }

    for source, strategy in EXTRACTION_CHAIN:
        number = strategy(payload, text, key, aliases)
        if number is not None:
            return ScoreExtraction(clamp_score(number), source)

    return ScoreExtraction(clamp_score(default), "default")
