"""
Identity and order assignment for newly ingested notes.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .note_model import Note

logger = logging.getLogger(__name__)


def coerce_note_id(value: Any) -> Optional[int]:
    """Return a positive integer id, or None if the value is not a usable id."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def compute_next_id(notes: Iterable[Dict[str, Any]]) -> int:
    """One past the highest valid id in the collection, or 1 if there is none."""
    highest = 0
    for note in notes:
        note_id = coerce_note_id(note.get("id"))
        if note_id is None:
            logger.debug(f"Ignoring malformed note id: {note.get('id')!r}")
            continue
        highest = max(highest, note_id)
    return highest + 1


@dataclass
class RunContext:
    """Counters owned by a single ingestion run."""
    next_id: int = 1
    current_order: int = 0

    @classmethod
    def for_collection(cls, notes: Iterable[Dict[str, Any]]) -> "RunContext":
        return cls(next_id=compute_next_id(notes), current_order=0)

    def stamp(self, note: Note) -> Note:
        """Overwrite the note's id and order with the next values of this run."""
        return note.with_identity(self.next_id, self.current_order)

    def advance(self) -> None:
        self.next_id += 1
        self.current_order += 1
