"""Backend completion → :class:`Verdict`.

Generative backends do not reliably return bare JSON even when asked to,
so parsing runs in two stages, each exposed on its own:

  1. :func:`extract_json_object` — keep the span from the first ``{`` to the
     last ``}`` and decode it strictly.
  2. :func:`strip_code_fences` — drop markdown fences (```` ```json ````
     and ```` ``` ````) from that span and decode again.

If both fail, :class:`ResponseParseError` is raised with a short preview
of the raw text.
"""

import json
from typing import Any, Dict

from market_reaction.core.errors import ResponseParseError
from market_reaction.models.datatypes import EventClass, Verdict

MISSING_SUMMARY = "No explanation returned."


def extract_json_object(text: str) -> str:
    """Return ``text[first '{' : last '}' + 1]``, or ``text`` unchanged if there is no such span."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start:end + 1]


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def _decode_object(text: str) -> Dict[str, Any]:
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def parse_model_json(raw: str) -> Dict[str, Any]:
    """Decode the JSON object in a backend completion.

    Raises:
        ResponseParseError: If neither stage yields a JSON object.
    """
    raw = raw or ""
    candidate = extract_json_object(raw)
    try:
        return _decode_object(candidate)
    except ValueError:
        pass

    try:
        return _decode_object(strip_code_fences(candidate))
    except ValueError as exc:
        raise ResponseParseError(raw) from exc


def normalize_verdict(raw: str) -> Verdict:
    """Parse ``raw`` and map it onto a Verdict.

    ``event_class`` values outside the known set become ``UNKNOWN``.

    Raises:
        ResponseParseError: If ``raw`` holds no decodable JSON object.
    """
    data = parse_model_json(raw)
    summary = str(data.get("reason_summary") or "").strip() or MISSING_SUMMARY
    return Verdict(reason_summary=summary, event_class=EventClass.parse(data.get("event_class")))
