"""
IO utilities for reading sources and writing data during ingest operations.
"""
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("*.txt", "*.md")


@dataclass(frozen=True)
class SourceItem:
    """One raw input: its name hint, text and creation timestamp."""
    name: str
    text: str
    created_at: str
    path: Optional[Path] = None


def format_timestamp(moment: datetime) -> str:
    """Format as YYYY-MM-DDTHH:mm:ss.sssZ in UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def file_timestamp(file_path: Path) -> str:
    """Creation timestamp of a source file, taken from its modification time."""
    mtime = file_path.stat().st_mtime
    return format_timestamp(datetime.fromtimestamp(mtime, tz=timezone.utc))


def discover_source_files(source_root: Path, patterns: Iterable[str] = DEFAULT_PATTERNS) -> List[Path]:
    """
    Find source files under a root directory.

    Args:
        source_root: Directory to search recursively
        patterns: Glob patterns to match

    Returns:
        Sorted list of unique matching file paths
    """
    found = set()
    for pattern in patterns:
        for path in Path(source_root).rglob(pattern):
            if path.is_file():
                found.add(path)
    return sorted(found)


def read_source_item(file_path: Path) -> SourceItem:
    """Read a text file into a source item."""
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise
    return SourceItem(
        name=file_path.stem,
        text=text,
        created_at=file_timestamp(file_path),
        path=file_path,
    )


def target_file_mode(output_path: Path) -> int:
    """Mode of the existing file, or the umask-derived default for a new one."""
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_json_atomic(data: Any, output_path: Path) -> None:
    """
    Write JSON to a temporary file next to the destination, then swap it in.

    The destination is either left untouched or fully replaced.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    mode = target_file_mode(output_path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write('\n')
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, output_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    logger.info(f"Wrote {output_path}")
