"""Pull a JSON object out of free-form model output."""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned.strip()


def parse_json_object(text: str) -> dict[str, Any] | None:
    """Parse a JSON object from LLM output.

    Strips markdown fences; if the model wrapped the object in prose, falls
    back to the span between the first "{" and the last "}". Returns None
    when no object can be recovered.
    """
    cleaned = _strip_fences(text)
    candidates = [cleaned]
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if 0 <= start < end and (start, end) != (0, len(cleaned) - 1):
        candidates.append(cleaned[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    logger.warning("Model output is not a JSON object: %r", text[:200])
    return None
