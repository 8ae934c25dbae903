"""AI title and description enhancement for parsed tasks.

Gemini writes a clearer title and a short description when an API key is
configured. Without one, or when the call fails, a deterministic heuristic
fills the same fields so callers always get an enhanced task back.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import datetime

from taskmanager.services.gemini import GeminiClient, GeminiError, load_json_object
from taskmanager.services.task import ParsedTask, Priority

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r'enhancedTitle["\s:]+([^"]+)')
DESCRIPTION_PATTERN = re.compile(r'description["\s:]+([^"]+)')

PRIORITY_NOTES: dict[Priority, str] = {
    Priority.P1: "This is a critical task that requires immediate attention.",
    Priority.P2: "This is an important task that should be completed soon.",
    Priority.P3: "This is a standard task with normal priority.",
    Priority.P4: "This is a low-priority task that can be completed when time permits.",
}


def build_prompt(task: ParsedTask) -> str:
    lines = [
        "Generate a meaningful title and description for the following task:",
        "",
        f"Task: {task.name}",
    ]
    if task.assignee:
        lines.append(f"Assignee: {task.assignee}")
    if task.due_date:
        lines.append(f"Due Date: {task.due_date.isoformat()}")
    lines.append(f"Priority: {task.priority.value}")
    lines.append("")
    lines.append("Please respond in JSON format with the following structure:")
    lines.append(
        '{"enhancedTitle": "A clear, concise and specific title for the task", '
        '"description": "A helpful description that explains what needs to be done"}'
    )
    return "\n".join(lines)


def fallback_title(task: ParsedTask) -> str:
    """Expand short task names into something more descriptive."""
    if len(task.name) > 15:
        return task.name
    if any(len(word) > 3 for word in task.name.split()):
        return f"Complete {task.name}"
    if task.assignee:
        return f"Complete task for {task.assignee}"
    return "Complete task"


def fallback_description(task: ParsedTask) -> str:
    description = f"This task involves {task.name.lower()}"
    if task.assignee:
        description += f" and is assigned to {task.assignee}"
    if task.due_date:
        description += f". It should be completed by {format_due_date(task.due_date)}"
    description += f". This task has a priority of {task.priority.value}."
    return f"{description} {PRIORITY_NOTES[task.priority]}"


def format_due_date(value: datetime) -> str:
    """Format like 'Friday, June 20, 2025 at 11:00 PM'."""
    return f"{value:%A, %B} {value.day}, {value.year} at {value:%I:%M %p}"


class TaskEnhancer:
    def __init__(self, client: GeminiClient | None = None):
        self.client = client if client is not None else GeminiClient()

    def enhance_task(self, task: ParsedTask) -> ParsedTask:
        if not self.client.is_configured:
            logger.debug("Gemini not configured; using heuristic enhancement")
            return self.fallback_enhance(task)

        try:
            response = self.client.generate(
                build_prompt(task), temperature=0.7, max_output_tokens=200
            )
        except GeminiError as exc:
            logger.warning("Gemini enhancement failed; using heuristic enhancement: %s", exc)
            return self.fallback_enhance(task)

        title, description = self._parse_response(response, task)
        return replace(task, name=title, description=description, is_ai=True)

    def enhance_many(self, tasks: list[ParsedTask]) -> list[ParsedTask]:
        return [self.enhance_task(task) for task in tasks]

    def fallback_enhance(self, task: ParsedTask) -> ParsedTask:
        return replace(
            task,
            name=fallback_title(task),
            description=fallback_description(task),
            is_ai=True,
        )

    def _parse_response(self, response: str, task: ParsedTask) -> tuple[str, str]:
        data = load_json_object(response)
        if data is not None:
            title = str(data.get("enhancedTitle") or "").strip()
            description = str(data.get("description") or "").strip()
            return title or task.name, description

        # Not JSON: pull the values out of whatever Gemini wrote
        title_match = TITLE_PATTERN.search(response)
        description_match = DESCRIPTION_PATTERN.search(response)
        title = title_match.group(1).strip() if title_match else ""
        description = description_match.group(1).strip() if description_match else ""
        return title or task.name, description


_enhancer: TaskEnhancer | None = None


def get_task_enhancer() -> TaskEnhancer:
    global _enhancer
    if _enhancer is None:
        _enhancer = TaskEnhancer()
    return _enhancer
