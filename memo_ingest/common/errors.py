"""
Error types raised by the note ingestion pipeline.
"""
from typing import Optional


class MemoIngestError(Exception):
    """Base class for all memo ingest errors."""


class PayloadParseError(MemoIngestError):
    """Generated payload could not be turned into a note candidate."""


class SourceRootError(MemoIngestError):
    """Source root directory is missing or is not a directory."""


class CollectionSaveError(MemoIngestError):
    """The notes collection could not be written."""


class LLMRequestError(MemoIngestError):
    """A request to the language model API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
