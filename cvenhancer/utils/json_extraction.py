"""
Tolerant JSON extraction from free-form model output.

Models wrap their JSON in code fences, prepend "Here is your resume:" or
append notes after the closing brace. The strategies below are tried in
order and the first one that yields something wins; later strategies are
not consulted.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from cvenhancer.exceptions import ResponseFormatError
from cvenhancer.models.resume import EXPERIENCE_DATE_ALIASES
from .logger import get_logger

logger = get_logger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)



def from_code_fence(text: str) -> Optional[str]:
    """Contents of the first fenced block, with or without a ``json`` tag."""
    match = CODE_FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return None


def from_brace_span(text: str) -> Optional[str]:
    """Slice from the first ``{`` to the last ``}``, inclusive."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start:end + 1]


def from_trimmed_text(text: str) -> Optional[str]:
    return text.strip()


EXTRACTION_STRATEGIES: Tuple[Callable[[str], Optional[str]], ...] = (
    from_code_fence,
    from_brace_span,
    from_trimmed_text,
)


def extract_json_text(raw: str) -> str:
    """
    Pull the JSON candidate out of raw model output.

    Args:
        raw: Model reply

    Returns:
        Text produced by the first strategy that matched
    """
    for strategy in EXTRACTION_STRATEGIES:
        candidate = strategy(raw)
        if candidate is not None:
            logger.debug(f"JSON candidate extracted by {strategy.__name__}")
            return candidate
    return raw


def parse_json_object(raw: str) -> Dict[str, Any]:
    """
    Extract and parse a JSON object from model output.

    Raises:
        ResponseFormatError: If the reply is empty, not valid JSON, or not an object
    """
    if not raw or not raw.strip():
        raise ResponseFormatError("AI provider returned an empty response")

    candidate = extract_json_text(raw)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        preview = candidate[:200].replace("\n", " ")
        raise ResponseFormatError(
            f"AI response is not valid JSON ({e.msg} at position {e.pos}): {preview}"
        ) from e

    if not isinstance(data, dict):
        raise ResponseFormatError(
            f"AI response JSON is a {type(data).__name__}, expected an object"
        )
    return data


def _date_range(entry: Dict[str, Any]) -> Any:
    # Same lookup the resume schema does: first spelling that is present and not null
    for alias in EXPERIENCE_DATE_ALIASES:
        if entry.get(alias) is not None:
            return entry[alias]
    return None


def experience_key(entry: Dict[str, Any]) -> str:
    """Composite key: company + title + dateRange, plain concatenation."""
    parts = (entry.get("company"), entry.get("title"), _date_range(entry))
    return "".join(str(part or "") for part in parts)


def dedupe_experience(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop repeated work-experience entries.

    The first entry for each (company, title, dateRange) key is kept as is;
    later entries with the same key are dropped along with their duties.
    Returns a new dict; the input is not modified.
    """
    experience = data.get("experience")
    if not isinstance(experience, list):
        return data

    seen = set()
    unique: List[Any] = []
    for entry in experience:
        if not isinstance(entry, dict):
            unique.append(entry)
            continue
        key = experience_key(entry)
        if key in seen:
            logger.warning(
                f"⚠️ Dropping duplicate experience entry: {entry.get('title')} at {entry.get('company')}"
            )
            continue
        seen.add(key)
        unique.append(entry)

    cleaned = dict(data)
    cleaned["experience"] = unique
    return cleaned


def sanitize_response(raw: str) -> Dict[str, Any]:
    """Extract, parse, and deduplicate a provider reply."""
    return dedupe_experience(parse_json_object(raw))
