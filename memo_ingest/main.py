"""
Main entry point for ingesting text files into a notes collection and
searching it.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from memo_ingest.common.classification import ClassificationGate
from memo_ingest.common.collection_store import CollectionStore
from memo_ingest.common.config import get_api_key, load_config
from memo_ingest.common.errors import CollectionSaveError, LLMRequestError, PayloadParseError, SourceRootError
from memo_ingest.common.ingest_engine import IngestEngine
from memo_ingest.common.schema_validator import DEFAULT_SCHEMA_PATH
from memo_ingest.llm.ai_search import AISearch
from memo_ingest.llm.gemini_client import GeminiClient
from memo_ingest.llm.note_service import GeminiNoteService
from memo_ingest.llm.retry import RetryPolicy


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_client(config: Dict[str, Any]) -> Optional[GeminiClient]:
    """Create a Gemini client from config, or None if no API key is set."""
    api_key = get_api_key(config)
    if not api_key:
        logging.error(f"No API key: set the {config['gemini']['api_key_env']} environment variable")
        return None

    gemini = config["gemini"]
    retry = config["retry"]
    return GeminiClient(
        api_key=api_key,
        model=gemini["model"],
        base_url=gemini["base_url"],
        timeout=gemini["timeout_seconds"],
        temperature=gemini["temperature"],
        retry_policy=RetryPolicy(
            max_attempts=retry["max_attempts"],
            delay_seconds=retry["delay_seconds"],
        ),
    )


def collection_path(args: argparse.Namespace, config: Dict[str, Any]) -> Path:
    return Path(args.collection or config["collection"]["path"])


def resolve_schema_path(configured: str) -> Optional[Path]:
    """Configured schema path, falling back to the bundled schema for a relative path."""
    schema_path = Path(configured)
    if schema_path.exists():
        return schema_path
    if not schema_path.is_absolute() and DEFAULT_SCHEMA_PATH.exists():
        logging.debug(f"{schema_path} not found from {Path.cwd()}, using {DEFAULT_SCHEMA_PATH}")
        return DEFAULT_SCHEMA_PATH
    return None


def ingest_command(args: argparse.Namespace, config: Dict[str, Any],
                   client: Optional[GeminiClient] = None) -> int:
    """Execute ingest command."""
    source_root = Path(args.source_root)
    if not source_root.is_dir():
        logging.error(f"Source directory does not exist: {source_root}")
        return 1

    schema_path = resolve_schema_path(config["schema_path"])
    if schema_path is None:
        logging.error(f"Schema file does not exist: {config['schema_path']}")
        return 1

    client = client or build_client(config)
    if client is None:
        return 1

    store = CollectionStore(collection_path(args, config))
    store.load()

    service = GeminiNoteService(client)
    delay = args.delay if args.delay is not None else config["ingest"]["delay_seconds"]
    engine = IngestEngine(
        store=store,
        gate=ClassificationGate(service),
        generator=service,
        schema_path=schema_path,
        delay_seconds=delay,
    )

    patterns = args.pattern or config["ingest"]["patterns"]
    logging.info(f"Starting ingest from {source_root} into {store.path}")
    try:
        stats = engine.ingest_directory(source_root, patterns)
    except SourceRootError as e:
        logging.error(str(e))
        return 1

    logging.info("=== Ingest Summary ===")
    logging.info(f"Items processed: {stats['total_items']}")
    logging.info(f"Notes added: {stats['added_notes']}")
    logging.info(f"Items skipped: {stats['skipped_items']}")
    for error in stats["errors"]:
        logging.warning(f"  {error}")

    if args.dry_run:
        logging.info(f"Dry run, not writing {store.path}")
        return 0

    try:
        store.save()
    except CollectionSaveError as e:
        logging.error(f"Save failed: {e}")
        return 1

    return 0


def search_command(args: argparse.Namespace, config: Dict[str, Any],
                   client: Optional[GeminiClient] = None) -> int:
    """Execute search command."""
    store = CollectionStore(collection_path(args, config))
    notes = store.load()
    if not notes:
        logging.warning(f"Collection {store.path} has no notes")
        return 0

    client = client or build_client(config)
    if client is None:
        return 1

    searcher = AISearch(client, include_private=args.include_private)
    try:
        results = searcher.search(args.query, notes)
    except (LLMRequestError, PayloadParseError) as e:
        logging.error(f"Search failed: {e}")
        return 1

    logging.info(f"{len(results)} matching notes")
    for note in results:
        print(f"[{note.get('id')}] {note.get('title')}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Turn text files into notes with Gemini")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--config", default=None, help="Path to YAML config file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest text files into the notes collection")
    ingest_parser.add_argument("source_root", help="Directory containing source text files")
    ingest_parser.add_argument("--collection", default=None, help="Notes collection JSON file")
    ingest_parser.add_argument("--pattern", action="append", help="Glob pattern for source files (repeatable)")
    ingest_parser.add_argument("--delay", type=float, default=None, help="Seconds to wait between items")
    ingest_parser.add_argument("--dry-run", action="store_true", help="Process files without saving")

    search_parser = subparsers.add_parser("search", help="AI Search over the notes collection")
    search_parser.add_argument("query", help="What to search for")
    search_parser.add_argument("--collection", default=None, help="Notes collection JSON file")
    search_parser.add_argument("--include-private", action="store_true", help="Also send private notes")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logging.error(f"Could not load config: {e}")
        return 1

    if args.command == "ingest":
        return ingest_command(args, config)
    elif args.command == "search":
        return search_command(args, config)
    else:
        logging.error(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
