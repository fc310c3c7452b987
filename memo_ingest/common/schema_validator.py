"""
Schema validation utilities for note records.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, Tuple, Optional
import jsonschema
from jsonschema import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schemas" / "note.schema.json"


@lru_cache(maxsize=8)
def load_schema(schema_path: Path) -> Dict[str, Any]:
    """Load JSON schema from file."""
    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, FileNotFoundError) as e:
        logger.error(f"Failed to load schema from {schema_path}: {e}")
        raise


def validate_against_schema(data: Dict[str, Any], schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate data against JSON schema.
    
    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        jsonschema.validate(instance=data, schema=schema)
        return True, None
    except ValidationError as e:
        return False, e.message


def validate_note(note_data: Dict[str, Any], schema_path: Optional[Path] = None) -> Tuple[bool, Optional[str]]:
    """Validate a persisted note record against the note schema."""
    schema = load_schema(Path(schema_path or DEFAULT_SCHEMA_PATH))
    return validate_against_schema(note_data, schema)
