"""
Configuration loading for memo ingest.
"""
import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("configs/memo_ingest.yaml")

DEFAULTS: Dict[str, Any] = {
    "gemini": {
        "model": "gemini-2.0-flash-lite",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
        "api_key_env": "GEMINI_API_KEY",
        "timeout_seconds": 60,
        "temperature": 0.2,
    },
    "retry": {
        "max_attempts": 3,
        "delay_seconds": 2.0,
    },
    "ingest": {
        "patterns": ["*.txt", "*.md"],
        "delay_seconds": 0.0,
    },
    "collection": {
        "path": "notes.json",
    },
    "schema_path": "schemas/note.schema.json",
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file over the built-in defaults.

    Args:
        config_path: YAML file to load; the default path is used when None

    Returns:
        Merged configuration dictionary
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        if config_path:
            logger.warning(f"Config file does not exist: {path}, using defaults")
        return copy.deepcopy(DEFAULTS)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse config {path}: {e}")
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return merge_config(DEFAULTS, loaded)


def get_api_key(config: Dict[str, Any]) -> Optional[str]:
    """Read the Gemini API key from the environment variable named in the config."""
    env_name = config["gemini"].get("api_key_env", "GEMINI_API_KEY")
    return os.environ.get(env_name) or None
