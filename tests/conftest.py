import json
import pathlib
import sys
from typing import Dict, List, Optional

import pytest

# Add repo root to path to import modules
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))


class FakeJudge:
    """Returns a fixed verdict and records every call."""

    def __init__(self, verdict: Optional[str] = "Yes", error: Optional[Exception] = None):
        self.verdict = verdict
        self.error = error
        self.calls: List[str] = []

    def classify(self, text, name_hint):
        self.calls.append(name_hint)
        if self.error:
            raise self.error
        return self.verdict


class FakeGenerator:
    """Returns a canned payload per name hint, or a default payload."""

    def __init__(self, payloads: Optional[Dict[str, Optional[str]]] = None, default: Optional[str] = "{}"):
        self.payloads = payloads or {}
        self.default = default
        self.calls: List[str] = []

    def generate(self, text, name_hint, created_at):
        self.calls.append(name_hint)
        payload = self.payloads.get(name_hint, self.default)
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture(scope="session")
def repo_root():
    """Return the root directory of the project."""
    return pathlib.Path(__file__).resolve().parents[1]


@pytest.fixture
def schema_path(repo_root):
    return repo_root / "schemas" / "note.schema.json"


@pytest.fixture
def source_dir(tmp_path):
    """Empty directory for source text files."""
    path = tmp_path / "sources"
    path.mkdir()
    return path


@pytest.fixture
def write_collection(tmp_path):
    """Write a list of notes to a collection file and return its path."""
    def _write(notes, name="notes.json"):
        path = tmp_path / name
        path.write_text(json.dumps(notes), encoding="utf-8")
        return path
    return _write
