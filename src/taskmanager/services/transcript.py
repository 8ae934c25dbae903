"""Rule-based task extraction from meeting transcripts.

Each transcript line is treated as a possible task. Lines addressed to a
known team member ("Aman you take the landing page by 10pm tomorrow") get
that person as assignee before the line goes through the task parser.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from taskmanager.services.parser import TaskParser
from taskmanager.services.task import ParsedTask

logger = logging.getLogger(__name__)

INTRODUCERS = r"(?:you|please|can you|will|should|needs to)"
LEADING_FILLER = re.compile(r"^(?:you|please|can you)\s+")
TRAILING_PERIOD = re.compile(r"\s*\.\s*$")

MIN_LINE_LENGTH = 5


class TranscriptParser:
    def __init__(
        self,
        known_names: list[str] | None = None,
        task_parser: TaskParser | None = None,
    ):
        if known_names is None:
            from taskmanager.config import settings

            known_names = settings.known_names
        self.known_names = list(known_names)
        self.task_parser = task_parser or TaskParser()
        self._addressed = {
            name: re.compile(rf"^{re.escape(name)}\s+{INTRODUCERS}\b", re.IGNORECASE)
            for name in self.known_names
        }

    def extract_tasks(self, transcript: str, now: datetime | None = None) -> list[ParsedTask]:
        tasks = []
        for line in transcript.splitlines():
            line = line.strip()
            if len(line) < MIN_LINE_LENGTH:
                continue
            try:
                tasks.append(self.parse_line(line, now=now))
            except Exception as exc:
                logger.warning("Skipping transcript line %r: %s", line, exc)
        return tasks

    def parse_line(self, line: str, now: datetime | None = None) -> ParsedTask:
        assignee, task_text = self._addressee(line)
        if assignee is None:
            assignee = self._mentioned(line)

        task = self.task_parser.parse(task_text, now=now)
        task.is_ai = False

        if assignee and (not task.assignee or task.assignee == "."):
            task.assignee = assignee

        name = TRAILING_PERIOD.sub("", LEADING_FILLER.sub("", task.name))
        task.name = name or TRAILING_PERIOD.sub("", line)
        return task

    def _addressee(self, line: str) -> tuple[str | None, str]:
        """Name the line opens with, plus the line minus "Name you/please/...".

        "Aman you take the deck" -> ("Aman", "take the deck")
        """
        for name, pattern in self._addressed.items():
            if not line.startswith(name):
                continue
            match = pattern.match(line)
            if match:
                return name, line[match.end() :].strip()
        return None, line

    def _mentioned(self, line: str) -> str | None:
        for name in self.known_names:
            if f" {name} " in line or f" {name}," in line:
                return name
        return None


_parser: TranscriptParser | None = None


def get_transcript_parser() -> TranscriptParser:
    global _parser
    if _parser is None:
        _parser = TranscriptParser()
    return _parser


def extract_tasks_from_transcript(transcript: str, now: datetime | None = None) -> list[ParsedTask]:
    return get_transcript_parser().extract_tasks(transcript, now=now)
