"""Split one message holding several tasks and parse each one."""

from __future__ import annotations

import logging
import re
from datetime import datetime

from taskmanager.services.gemini import GeminiClient, GeminiError, load_json_array
from taskmanager.services.parser import TaskParser
from taskmanager.services.task import ParsedTask

logger = logging.getLogger(__name__)

# Semicolons, newlines, "1) " numbering, "- " dashes and "• " bullets
LIST_DELIMITERS = re.compile(r";|\n|\d+\) |- |• ")
SENTENCE_DELIMITER = re.compile(r"\. ")
CONTINUATION = re.compile(r"[a-z]")

MULTI_TASK_MARKERS = (";", "\n", "1)", "2)", "- ", "• ")

MULTI_TASK_PROMPT = """Extract multiple tasks from the following text. For each task, identify:

1. Task name
2. Assignee (if mentioned)
3. Due date and time (if mentioned)
4. Priority (P1 for highest, P4 for lowest, default to P3 if not specified)

Text: "{text}"

Respond with a JSON array of tasks, each with the following structure:
{{
  "name": "Task name",
  "assignee": "Person name or null if not specified",
  "dueDate": "ISO date string or null if not specified",
  "priority": "P1, P2, P3, or P4",
  "description": "A brief description of what the task entails"
}}

Ensure each task has all fields, using null for missing values except priority which defaults to P3."""


def contains_multiple_tasks(text: str) -> bool:
    """Cheap check for list-like separators, without splitting."""
    return any(marker in text for marker in MULTI_TASK_MARKERS)


def split_by_delimiters(text: str) -> list[str]:
    """Break ``text`` into one fragment per task.

    Sentences split on ". " that start lowercase are glued back onto the
    previous sentence, so "Fix login. then deploy" stays one task. Always
    returns at least one fragment.
    """
    fragments: list[str] = []
    for block in LIST_DELIMITERS.split(text):
        fragments.extend(_split_sentences(block))
    return fragments or [text.strip()]


def _split_sentences(block: str) -> list[str]:
    sentences: list[str] = []
    for sentence in SENTENCE_DELIMITER.split(block):
        sentence = sentence.strip()
        if not sentence:
            continue
        if sentences and CONTINUATION.match(sentence):
            sentences[-1] = f"{sentences[-1]}. {sentence}"
        else:
            sentences.append(sentence)
    return sentences


class MultiTaskParser:
    def __init__(
        self,
        task_parser: TaskParser | None = None,
        client: GeminiClient | None = None,
    ):
        self.task_parser = task_parser or TaskParser()
        self._client = client

    @property
    def client(self) -> GeminiClient:
        """Get or create the Gemini client."""
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def parse_multiple_tasks(self, text: str, now: datetime | None = None) -> list[ParsedTask]:
        tasks = []
        for fragment in split_by_delimiters(text):
            task = self.task_parser.parse(fragment, now=now)
            task.is_ai = True
            task.description = ""
            tasks.append(task)
        return tasks

    def parse_with_ai(self, text: str, now: datetime | None = None) -> list[ParsedTask]:
        """Let Gemini pull tasks out of ``text``, falling back to splitting."""
        if not self.client.is_configured:
            return self.parse_multiple_tasks(text, now=now)

        try:
            response = self.client.generate(MULTI_TASK_PROMPT.format(text=text))
            items = load_json_array(response)
        except GeminiError as exc:
            logger.warning("Gemini multi-task parsing failed; splitting locally: %s", exc)
            return self.parse_multiple_tasks(text, now=now)

        tasks = [ParsedTask.from_dict(item) for item in items if isinstance(item, dict)]
        if not tasks:
            logger.info("Gemini returned no tasks; splitting locally")
            return self.parse_multiple_tasks(text, now=now)
        return tasks
