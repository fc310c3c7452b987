"""
Note record types: a partial candidate produced by the generator and the
complete note that gets persisted.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional


class NoteStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class NotePriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Persisted key names, in the order they are written.
REQUIRED_KEYS = ("id", "title", "text", "status", "priority", "isPrivate", "createdAt", "order")


@dataclass
class NoteCandidate:
    """
    Partially-formed note. Any field may be None, meaning absent.

    Keys that are not part of the note schema are kept in `extra` and
    carried through to the persisted note unchanged.
    """
    id: Any = None
    title: Optional[str] = None
    text: Optional[str] = None
    status: Any = None
    priority: Any = None
    is_private: Any = None
    created_at: Optional[str] = None
    order: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoteCandidate":
        """Build a candidate from a parsed JSON object."""
        extra = {key: value for key, value in data.items() if key not in REQUIRED_KEYS}
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            text=data.get("text"),
            status=data.get("status"),
            priority=data.get("priority"),
            is_private=data.get("isPrivate"),
            created_at=data.get("createdAt"),
            order=data.get("order"),
            extra=extra,
        )


@dataclass(frozen=True)
class Note:
    """A complete note record. `id` and `order` are set when the note is stamped."""
    title: str
    text: str
    status: NoteStatus
    priority: NotePriority
    is_private: bool
    created_at: str
    id: Optional[int] = None
    order: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def with_identity(self, note_id: int, order: int) -> "Note":
        return replace(self, id=note_id, order=order)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted camelCase form."""
        data = {
            "id": self.id,
            "title": self.title,
            "text": self.text,
            "status": self.status.value,
            "priority": self.priority.value,
            "isPrivate": self.is_private,
            "createdAt": self.created_at,
            "order": self.order,
        }
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def to_candidate(self) -> NoteCandidate:
        return NoteCandidate.from_dict(self.to_dict())
