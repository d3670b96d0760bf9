import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` wrappers that Gemini sometimes adds around JSON"""
    json_str = text.strip()

    # Remove ```json or ``` at the beginning
    if json_str.startswith("```json"):
        json_str = json_str[7:]
    elif json_str.startswith("```"):
        json_str = json_str[3:]

    # Remove ``` at the end
    if json_str.endswith("```"):
        json_str = json_str[:-3]

    return json_str.strip()


def _first_json_object(text: str) -> Optional[Any]:
    """Decode the first complete JSON value that starts at a '{', ignoring what follows"""
    decoder = json.JSONDecoder()
    start_idx = text.find("{")
    while start_idx != -1:
        try:
            data, _ = decoder.raw_decode(text, start_idx)
            return data
        except ValueError:
            start_idx = text.find("{", start_idx + 1)
    return None


def extract_json_object(raw_text: Optional[str]) -> Dict[str, Any]:
    """
    Parse a model reply into a JSON object.

    Returns an empty dict when the reply is empty, not JSON, or JSON that is
    not an object. Never raises.
    """
    if not raw_text or not raw_text.strip():
        return {}

    json_str = strip_code_fences(raw_text)

    try:
        data = json.loads(json_str)
    except ValueError as e:
        # Extra text before or after the object
        data = _first_json_object(json_str)
        if data is None:
            logger.warning(f"Failed to parse JSON from response: {e} (first 200 chars: {raw_text[:200]!r})")
            return {}

    if not isinstance(data, dict):
        logger.warning(f"Expected a JSON object, got {type(data).__name__}")
        return {}
    return data


def truncate(text: str, limit: int) -> str:
    return text[:limit] if len(text) > limit else text
