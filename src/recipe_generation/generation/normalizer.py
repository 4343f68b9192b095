"""Response normalization: pull a JSON object out of free-form provider text.

Text providers routinely wrap an otherwise well-formed payload in markdown
fences or surround it with commentary. normalize_response() strips a fence
and then runs a balanced-brace scan, returning the longest `{...}` substring
that parses as a JSON object. Unrelated braces in free text are skipped, either
because they do not parse or because a small echoed object loses to the
larger payload.
"""

import json
import re
from typing import Any, Optional

from recipe_generation.utils.errors import NoStructuredPayloadError, safe_execute_sync

# Opening fence with optional language tag (```json, ```JSON, ```), closing fence
_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading and trailing markdown code fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def _match_closing_brace(text: str, start: int) -> Optional[int]:
    """Index of the `}` closing the `{` at `start`, or None if unbalanced.

    Braces inside JSON string literals (including escaped quotes) are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> Optional[str]:
    """Return the longest balanced `{...}` substring that parses as a JSON object.

    Top-level candidates are compared by length; objects nested inside an
    accepted candidate are not considered on their own.
    """
    best: Optional[str] = None
    start = text.find("{")
    while start != -1:
        end = _match_closing_brace(text, start)
        next_from = start + 1
        if end is not None:
            candidate = text[start : end + 1]
            parsed = safe_execute_sync(
                lambda: json.loads(candidate),
                "Skipping unparseable brace candidate",
                log_level="debug",
            )
            if isinstance(parsed, dict):
                if best is None or len(candidate) > len(best):
                    best = candidate
                next_from = end + 1
        start = text.find("{", next_from)
    return best


def normalize_response(raw_text: str) -> str:
    """Strip formatting artifacts and return the structured payload substring.

    Idempotent: normalizing an already-normalized payload returns it unchanged.

    Raises:
        NoStructuredPayloadError: If no substring parses as a JSON object.
    """
    payload = extract_json_object(strip_code_fence(raw_text or ""))
    if payload is None:
        raise NoStructuredPayloadError(raw_text)
    return payload


def parse_structured_payload(raw_text: str) -> dict[str, Any]:
    """normalize_response() followed by json.loads()."""
    return json.loads(normalize_response(raw_text))
