"""
Core ingest engine turning raw text sources into notes.
"""
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from .classification import ClassificationGate
from .collection_store import CollectionStore
from .errors import PayloadParseError, SourceRootError
from .identity import RunContext
from .io_utils import DEFAULT_PATTERNS, SourceItem, discover_source_files, read_source_item
from .normalize_engine import NormalizeEngine
from .note_model import Note, NoteCandidate
from .payload_parser import parse_note_payload
from .schema_validator import validate_note

logger = logging.getLogger(__name__)


class Generator(Protocol):
    def generate(self, text: str, name_hint: str, created_at: str) -> Optional[str]:
        ...


class IngestEngine:
    """Engine for ingesting source items into a notes collection."""

    def __init__(self, store: CollectionStore, gate: ClassificationGate, generator: Generator,
                 normalizer: Optional[NormalizeEngine] = None, schema_path: Optional[Path] = None,
                 delay_seconds: float = 0.0, sleep: Callable[[float], None] = time.sleep):
        """
        Initialize ingest engine.

        Args:
            store: Loaded collection that new notes are appended to
            gate: Classification gate deciding which items become notes
            generator: Produces a raw JSON note candidate for an accepted item
            normalizer: Fills defaults into generated candidates
            schema_path: Note schema used to validate new notes
            delay_seconds: Pause after each processed item
            sleep: Sleep function used for the pause
        """
        self.store = store
        self.gate = gate
        self.generator = generator
        self.normalizer = normalizer or NormalizeEngine()
        self.schema_path = schema_path
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def build_note(self, item: SourceItem, context: RunContext) -> Optional[Note]:
        """Generate, normalize, stamp and validate a note for an accepted item."""
        payload = self.generator.generate(item.text, item.name, item.created_at)
        if payload is None:
            logger.warning(f"No content generated for {item.name}, skipping")
            return None

        candidate = NoteCandidate.from_dict(parse_note_payload(payload))
        note = self.normalizer.normalize(
            candidate,
            source_text=item.text,
            name_hint=item.name,
            created_at=item.created_at,
            note_id=context.next_id,
        )
        note = context.stamp(note)

        is_valid, error_msg = validate_note(note.to_dict(), self.schema_path)
        if not is_valid:
            logger.warning(f"Generated note for {item.name} failed validation: {error_msg}")
            return None
        return note

    def ingest_item(self, item: SourceItem, context: RunContext,
                    errors: Optional[List[str]] = None) -> Optional[Note]:
        """
        Ingest a single source item.

        Failures are logged and recorded in `errors`; the context only
        advances when a note is appended.

        Args:
            item: Source item to ingest
            context: Counters for the current run
            errors: Optional list collecting per-item diagnostics

        Returns:
            The appended note, or None if the item was skipped
        """
        if errors is None:
            errors = []

        if not item.text.strip():
            logger.info(f"Skipping empty source: {item.name}")
            return None

        try:
            if not self.gate.decide(item.text, item.name):
                logger.info(f"Not a note, skipping: {item.name}")
                return None

            note = self.build_note(item, context)
            if note is None:
                errors.append(f"{item.name}: no usable note generated")
                return None

            self.store.append(note)
            context.advance()
            logger.info(f"Added note {note.id} ({note.title!r}) from {item.name}")
            return note

        except PayloadParseError as e:
            error_msg = f"{item.name}: {e}"
            logger.warning(f"Could not parse generated note for {item.name}: {e}")
            errors.append(error_msg)
        except Exception as e:
            error_msg = f"Error during ingest of {item.name}: {e}"
            logger.error(error_msg)
            errors.append(error_msg)
        return None

    def ingest_items(self, items: Iterable[Any], context: Optional[RunContext] = None) -> Dict[str, Any]:
        """
        Ingest items one at a time, in order.

        Items may be SourceItem objects or paths to source files.

        Returns:
            Dictionary with ingest statistics
        """
        if context is None:
            context = RunContext.for_collection(self.store.notes)

        stats = {
            "total_items": 0,
            "added_notes": 0,
            "skipped_items": 0,
            "errors": [],
        }

        for index, entry in enumerate(items):
            if index and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)

            stats["total_items"] += 1
            try:
                item = entry if isinstance(entry, SourceItem) else read_source_item(entry)
            except (OSError, UnicodeDecodeError) as e:
                stats["skipped_items"] += 1
                stats["errors"].append(f"{entry}: unreadable source: {e}")
                continue

            note = self.ingest_item(item, context, stats["errors"])
            if note is None:
                stats["skipped_items"] += 1
            else:
                stats["added_notes"] += 1

            logger.info(f"Progress: {stats['total_items']} processed, {stats['added_notes']} added")

        return stats

    def ingest_directory(self, source_root: Path, patterns: Iterable[str] = DEFAULT_PATTERNS) -> Dict[str, Any]:
        """
        Ingest all matching source files under a directory.

        Raises:
            SourceRootError: If the source root does not exist
        """
        source_path = Path(source_root)
        if not source_path.is_dir():
            raise SourceRootError(f"Source directory does not exist: {source_root}")

        patterns = list(patterns)
        source_files = discover_source_files(source_path, patterns)
        if not source_files:
            logger.warning(f"No source files found in {source_root} matching {patterns}")
        else:
            logger.info(f"Found {len(source_files)} source files to ingest")

        return self.ingest_items(source_files)
