"""
Parsing of generated note payloads.
"""
import json
import re
from typing import Any, Dict, Optional

from .errors import PayloadParseError

FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
FENCE_CLOSE_RE = re.compile(r"\n?```$")


def strip_wrappers(payload: str) -> str:
    """Remove surrounding whitespace and Markdown code fences."""
    text = payload.strip()
    if text.startswith("```"):
        text = FENCE_OPEN_RE.sub("", text, count=1)
        text = FENCE_CLOSE_RE.sub("", text.rstrip(), count=1)
    return text.strip()


def parse_json_payload(payload: Optional[str]) -> Any:
    """Strip wrappers from a model response and decode it as JSON."""
    if payload is None or not payload.strip():
        raise PayloadParseError("Empty payload")
    text = strip_wrappers(payload)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadParseError(f"Invalid JSON payload: {e}") from e


def parse_note_payload(payload: Optional[str]) -> Dict[str, Any]:
    """Parse a generated payload that must be a single JSON object."""
    data = parse_json_payload(payload)
    if not isinstance(data, dict):
        raise PayloadParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data
