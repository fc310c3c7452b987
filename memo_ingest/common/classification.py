"""
Classification gate deciding whether a source should become a note.
"""
import logging
import re
from typing import Optional, Protocol

from .payload_parser import strip_wrappers

logger = logging.getLogger(__name__)

AFFIRMATIVE_RE = re.compile(r"yes(?![a-z0-9])", re.IGNORECASE)
VERDICT_NOISE = "*`\"'_ \t\r\n"


class Judge(Protocol):
    def classify(self, text: str, name_hint: str) -> Optional[str]:
        ...


def is_affirmative(verdict: Optional[str]) -> bool:
    """True when the verdict starts with the word 'yes', in any case."""
    if not verdict:
        return False
    cleaned = strip_wrappers(verdict).lstrip(VERDICT_NOISE)
    return AFFIRMATIVE_RE.match(cleaned) is not None


class ClassificationGate:
    """Accept/reject step in front of note generation."""

    def __init__(self, judge: Judge):
        self.judge = judge

    def decide(self, text: str, name_hint: str) -> bool:
        """
        Decide whether the text should become a note.

        Empty text is rejected without consulting the judge. A failing judge
        rejects the input.
        """
        if not text or not text.strip():
            logger.debug(f"Rejecting empty input: {name_hint}")
            return False

        try:
            verdict = self.judge.classify(text, name_hint)
        except Exception as e:
            logger.warning(f"Classification failed for {name_hint}, skipping: {e}")
            return False

        accepted = is_affirmative(verdict)
        logger.debug(f"Classification verdict for {name_hint}: {verdict!r} -> {'accept' if accepted else 'reject'}")
        return accepted
