"""
Normalize engine for completing partially-formed note candidates.
"""
import logging
from enum import Enum
from typing import Any, Optional, Type

from .note_model import Note, NoteCandidate, NotePriority, NoteStatus

logger = logging.getLogger(__name__)

TITLE_WORD_LIMIT = 5
TITLE_SEPARATORS = ("-", "_")


def title_from_name_hint(name_hint: Optional[str]) -> Optional[str]:
    """Turn a file name hint like 'meeting-notes' into 'meeting notes'."""
    if not name_hint:
        return None
    title = name_hint
    for separator in TITLE_SEPARATORS:
        title = title.replace(separator, " ")
    title = title.strip()
    return title or None


def title_from_text(source_text: Optional[str]) -> Optional[str]:
    """First few words of the source text, joined by single spaces."""
    words = (source_text or "").split()
    if not words:
        return None
    return " ".join(words[:TITLE_WORD_LIMIT])


def coerce_enum(value: Any, enum_type: Type[Enum], default: Enum) -> Enum:
    """Match a value against an enum case-insensitively, falling back to the default."""
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for member in enum_type:
            if member.value.lower() == value.strip().lower():
                return member
    if value is not None:
        logger.debug(f"Unrecognised {enum_type.__name__} value {value!r}, using {default.value}")
    return default


class NormalizeEngine:
    """Engine for filling in the gaps of a generated note candidate."""

    def __init__(self, default_status: NoteStatus = NoteStatus.OPEN,
                 default_priority: NotePriority = NotePriority.MEDIUM,
                 default_private: bool = False):
        self.default_status = default_status
        self.default_priority = default_priority
        self.default_private = default_private

    def derive_title(self, name_hint: Optional[str], source_text: Optional[str], note_id: Any) -> str:
        """
        Derive a title for a note that has none.

        Args:
            name_hint: Source name, usually the file stem
            source_text: Original source text
            note_id: Identifier used for the placeholder title

        Returns:
            Non-empty title
        """
        return (
            title_from_name_hint(name_hint)
            or title_from_text(source_text)
            or f"Note {note_id}"
        )

    def normalize(self, candidate: NoteCandidate, source_text: str, name_hint: Optional[str],
                  created_at: str, note_id: Optional[int] = None) -> Note:
        """
        Complete a candidate into a note.

        Missing fields get defaults; fields already present are kept. The
        result carries `note_id` as its id until it is stamped.

        Args:
            candidate: Partial note produced by the generator
            source_text: Original source text
            name_hint: Source name used for title derivation
            created_at: Creation timestamp of the source
            note_id: Identifier the note is about to receive

        Returns:
            Complete note
        """
        text = candidate.text if candidate.text is not None else source_text

        title = candidate.title
        if not isinstance(title, str) or not title.strip():
            title = self.derive_title(name_hint, source_text, note_id)

        is_private = candidate.is_private
        if not isinstance(is_private, bool):
            is_private = self.default_private

        return Note(
            id=note_id if note_id is not None else candidate.id,
            order=candidate.order,
            title=title,
            text=text,
            status=coerce_enum(candidate.status, NoteStatus, self.default_status),
            priority=coerce_enum(candidate.priority, NotePriority, self.default_priority),
            is_private=is_private,
            created_at=created_at,
            extra=dict(candidate.extra),
        )
