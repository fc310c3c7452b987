"""
AI Search: ask the model which notes in a collection answer a query.
"""
import json
import logging
from typing import Any, Dict, List

from ..common.errors import PayloadParseError
from ..common.identity import coerce_note_id
from ..common.payload_parser import parse_json_payload
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("id", "title", "text", "status", "priority", "createdAt")

SEARCH_PROMPT = """You are the search function of a personal notes app.
Below is the user's notes collection as a JSON array, followed by a query.
Return only a JSON array with the ids of the notes that best answer the
query, most relevant first. Return [] if none match.

Notes:
{notes_json}

Query: {query}"""


def searchable_view(notes: List[Dict[str, Any]], include_private: bool = False) -> List[Dict[str, Any]]:
    """Reduce notes to the fields sent to the model."""
    view = []
    for note in notes:
        if note.get("isPrivate") and not include_private:
            continue
        view.append({key: note.get(key) for key in SEARCH_FIELDS if key in note})
    return view


def resolve_ids(payload: Any, notes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Map the model's id list back to notes, dropping ids that are not in the collection."""
    if isinstance(payload, dict):
        payload = payload.get("ids", [])
    if not isinstance(payload, list):
        raise PayloadParseError(f"Expected a JSON array of ids, got {type(payload).__name__}")

    by_id = {}
    for note in notes:
        note_id = coerce_note_id(note.get("id"))
        if note_id is not None:
            by_id.setdefault(note_id, note)

    results = []
    seen = set()
    for value in payload:
        note_id = coerce_note_id(value)
        if note_id is None or note_id in seen or note_id not in by_id:
            logger.debug(f"Ignoring search result id {value!r}")
            continue
        seen.add(note_id)
        results.append(by_id[note_id])
    return results


class AISearch:
    """Model-assisted search over a whole notes collection."""

    def __init__(self, client: GeminiClient, include_private: bool = False):
        self.client = client
        self.include_private = include_private

    def search(self, query: str, notes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Find the notes matching a query.

        Args:
            query: Free-text question or search phrase
            notes: Notes collection to search

        Returns:
            Matching notes, most relevant first
        """
        if not query.strip():
            return []
        view = searchable_view(notes, self.include_private)
        if not view:
            logger.info("No searchable notes")
            return []

        prompt = SEARCH_PROMPT.format(
            notes_json=json.dumps(view, ensure_ascii=False),
            query=query.strip(),
        )
        logger.info(f"Searching {len(view)} notes for {query!r}")
        response = self.client.generate_text(prompt)
        if response is None:
            return []
        return resolve_ids(parse_json_payload(response), notes)
