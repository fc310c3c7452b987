"""
Prompts for deciding whether a text is a note and for turning it into one.
"""
import logging
from typing import Optional

from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 20000

CLASSIFY_PROMPT = """You are sorting files for a personal notes app.
Decide whether the following file contains content worth keeping as a note
(ideas, tasks, meeting notes, reminders, reference material). Generated
output, logs, binary garbage and empty templates are not notes.

File name: {name_hint}
---
{text}
---
Answer with a single word: Yes or No."""

GENERATE_PROMPT = """Convert the following file into a note for a personal notes app.
Return only a JSON object with these fields:
  "title": short descriptive title (string)
  "text": the note body in Markdown (string), keep the original content
  "status": "Open" or "Closed"
  "priority": "Low", "Medium" or "High"
  "isPrivate": true if the content looks personal or sensitive, else false
You may add a "tags" field with a list of short strings.

File name: {name_hint}
Created at: {created_at}
---
{text}
---"""


def clip(text: str, limit: int = MAX_PROMPT_CHARS) -> str:
    if len(text) <= limit:
        return text
    logger.debug(f"Clipping {len(text)} character input to {limit}")
    return text[:limit]


class GeminiNoteService:
    """Judge and generator backed by a Gemini client."""

    def __init__(self, client: GeminiClient):
        self.client = client

    def classify(self, text: str, name_hint: str) -> Optional[str]:
        prompt = CLASSIFY_PROMPT.format(name_hint=name_hint, text=clip(text))
        return self.client.generate_text(prompt)

    def generate(self, text: str, name_hint: str, created_at: str) -> Optional[str]:
        prompt = GENERATE_PROMPT.format(name_hint=name_hint, created_at=created_at, text=clip(text))
        return self.client.generate_text(prompt)
