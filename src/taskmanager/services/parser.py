import logging
import re
from datetime import datetime

import pytz

from taskmanager.config import settings
from taskmanager.services.assignee import extract_assignee
from taskmanager.services.dates import cut, extract_date, extract_time, strip_trailing_lead_in
from taskmanager.services.task import ParsedTask, Priority

logger = logging.getLogger(__name__)

PRIORITY_PATTERN = re.compile(r"\b(P[1-4])\b")


def extract_priority(text: str) -> tuple[Priority | None, str]:
    match = PRIORITY_PATTERN.search(text)
    if not match:
        return None, text
    return Priority(match.group(1)), cut(text, match)


class TaskParser:
    """Turn a one-line task sentence into a ParsedTask.

    "Finish landing page Aman by 11pm 20th June" becomes name
    "Finish landing page", assignee "Aman", due 20 June 23:00, priority P3.

    Stages run in a fixed order, each cutting its match out of the working
    text before the next one looks at it: priority, time of day, date,
    assignee. Whatever is left is the task name.
    """

    def __init__(self, timezone: str | None = None):
        self.timezone = pytz.timezone(timezone or settings.user_timezone)

    def parse(self, text: str, now: datetime | None = None) -> ParsedTask:
        original = text.strip()
        reference = self._reference_time(now)

        priority, working = extract_priority(original)
        time_of_day, working = extract_time(working)
        due_date, working = extract_date(working, reference.replace(tzinfo=None))

        if due_date is not None:
            if time_of_day is not None:
                due_date = time_of_day.apply(due_date)
            if reference.tzinfo is not None:
                due_date = self.timezone.localize(due_date)

        working = strip_trailing_lead_in(working)
        assignee, working = extract_assignee(working)

        task = ParsedTask(
            name=working.strip() or original,
            assignee=assignee,
            due_date=due_date,
            priority=priority or Priority.P3,
            is_ai=True,
        )
        logger.debug("Parsed %r -> %s", original, task)
        return task

    def _reference_time(self, now: datetime | None) -> datetime:
        if now is None:
            return datetime.now(self.timezone)
        if now.tzinfo is None:
            return now
        return now.astimezone(self.timezone)


_parser: TaskParser | None = None


def get_task_parser() -> TaskParser:
    global _parser
    if _parser is None:
        _parser = TaskParser()
    return _parser


def parse_task(text: str, now: datetime | None = None) -> ParsedTask:
    return get_task_parser().parse(text, now=now)
