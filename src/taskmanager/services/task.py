from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Priority(str, Enum):
    """Task priority, P1 being the most urgent."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"

    @classmethod
    def coerce(cls, value: Any) -> Priority:
        """Map loose input onto a priority, defaulting to P3."""
        if isinstance(value, Priority):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.P3


@dataclass
class ParsedTask:
    name: str
    assignee: str | None = None
    due_date: datetime | None = None
    priority: Priority = Priority.P3
    is_ai: bool = False
    description: str = ""
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the field names the task API exposes."""
        return {
            "name": self.name,
            "assignee": self.assignee,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority.value,
            "isAI": self.is_ai,
            "description": self.description,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, is_ai: bool = True) -> ParsedTask:
        """Build a task from an API or LLM payload.

        Accepts ``title`` for ``name`` and ``deadline`` for ``dueDate``.
        Unparseable dates become None and unknown priorities become P3.
        """
        name = data.get("name") or data.get("title") or "Untitled Task"
        assignee = str(data.get("assignee") or "").strip()
        return cls(
            name=str(name).strip(),
            assignee=assignee or None,
            due_date=_parse_due_date(data.get("dueDate") or data.get("deadline")),
            priority=Priority.coerce(data.get("priority")),
            is_ai=is_ai,
            description=str(data.get("description") or ""),
            completed=bool(data.get("completed", False)),
        )


def _parse_due_date(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None
