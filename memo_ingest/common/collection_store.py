"""
Collection store holding the notes of one collection file.
"""
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import CollectionSaveError
from .identity import coerce_note_id
from .io_utils import write_json_atomic
from .note_model import Note

logger = logging.getLogger(__name__)


def note_sort_key(note: Dict[str, Any]) -> Tuple[int, int, str]:
    """Numeric ids ascending, then anything malformed ordered by its text."""
    note_id = coerce_note_id(note.get("id"))
    if note_id is None:
        return (1, 0, str(note.get("id")))
    return (0, note_id, "")


class CollectionStore:
    """In-memory notes collection backed by a single JSON array file."""

    def __init__(self, path: Path):
        """
        Initialize collection store.

        Args:
            path: Path to the collection JSON file
        """
        self.path = Path(path)
        self._notes: List[Dict[str, Any]] = []
        self._unreadable = False

    @property
    def notes(self) -> List[Dict[str, Any]]:
        return list(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def load(self) -> List[Dict[str, Any]]:
        """
        Load the persisted collection.

        An absent, empty or malformed file yields an empty collection. A
        malformed file is kept aside by the next save instead of being
        overwritten.

        Returns:
            Loaded notes
        """
        self._notes = []
        self._unreadable = False

        if not self.path.exists():
            logger.info(f"No collection at {self.path}, starting empty")
            return self.notes

        try:
            content = self.path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read collection {self.path}, starting empty: {e}")
            self._unreadable = isinstance(e, UnicodeDecodeError)
            return self.notes

        if not content.strip():
            logger.info(f"Collection {self.path} is empty")
            return self.notes

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse collection {self.path}, starting empty: {e}")
            self._unreadable = True
            return self.notes

        if not isinstance(data, list):
            logger.warning(f"Collection {self.path} is not a JSON array, starting empty")
            self._unreadable = True
            return self.notes

        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                logger.warning(f"Dropping non-object entry {index} in {self.path}")
                continue
            self._notes.append(entry)

        logger.info(f"Loaded {len(self._notes)} notes from {self.path}")
        return self.notes

    def append(self, note: Note) -> None:
        self._notes.append(note.to_dict())

    def set_aside_unreadable(self) -> Optional[Path]:
        """Rename an unreadable collection file so that saving does not destroy it."""
        if not self._unreadable or not self.path.exists():
            return None
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.{timestamp}.corrupt")
        os.replace(self.path, backup)
        self._unreadable = False
        logger.warning(f"Moved unreadable collection {self.path} to {backup}")
        return backup

    def save(self) -> Path:
        """
        Write the whole collection, sorted by id, replacing the file atomically.

        Raises:
            CollectionSaveError: If the file cannot be written
        """
        ordered = sorted(self._notes, key=note_sort_key)
        try:
            self.set_aside_unreadable()
            write_json_atomic(ordered, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error writing collection {self.path}: {e}")
            raise CollectionSaveError(f"Could not save {self.path}: {e}") from e
        logger.info(f"Saved {len(ordered)} notes to {self.path}")
        return self.path
