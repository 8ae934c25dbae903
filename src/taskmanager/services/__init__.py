"""Task parsing services.

Imports are lazy so that the pure parser can be used without constructing
HTTP clients or reading settings for the AI-backed services.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Task record
    "ParsedTask": ("taskmanager.services.task", "ParsedTask"),
    "Priority": ("taskmanager.services.task", "Priority"),
    # Parser
    "TaskParser": ("taskmanager.services.parser", "TaskParser"),
    "extract_priority": ("taskmanager.services.parser", "extract_priority"),
    "get_task_parser": ("taskmanager.services.parser", "get_task_parser"),
    "parse_task": ("taskmanager.services.parser", "parse_task"),
    # Dates
    "TimeOfDay": ("taskmanager.services.dates", "TimeOfDay"),
    "extract_date": ("taskmanager.services.dates", "extract_date"),
    "extract_time": ("taskmanager.services.dates", "extract_time"),
    # Assignee
    "extract_assignee": ("taskmanager.services.assignee", "extract_assignee"),
    # Multiple tasks
    "MultiTaskParser": ("taskmanager.services.multi_task", "MultiTaskParser"),
    "contains_multiple_tasks": ("taskmanager.services.multi_task", "contains_multiple_tasks"),
    "split_by_delimiters": ("taskmanager.services.multi_task", "split_by_delimiters"),
    # Transcripts
    "TranscriptParser": ("taskmanager.services.transcript", "TranscriptParser"),
    "extract_tasks_from_transcript": (
        "taskmanager.services.transcript",
        "extract_tasks_from_transcript",
    ),
    # Gemini
    "GeminiClient": ("taskmanager.services.gemini", "GeminiClient"),
    "GeminiError": ("taskmanager.services.gemini", "GeminiError"),
    "get_gemini_client": ("taskmanager.services.gemini", "get_gemini_client"),
    # Enhancement
    "TaskEnhancer": ("taskmanager.services.enhancer", "TaskEnhancer"),
    "get_task_enhancer": ("taskmanager.services.enhancer", "get_task_enhancer"),
    # Meeting minutes
    "MeetingMinutesAnalyzer": ("taskmanager.services.meeting_minutes", "MeetingMinutesAnalyzer"),
    "extract_action_items": ("taskmanager.services.meeting_minutes", "extract_action_items"),
    "get_meeting_minutes_analyzer": (
        "taskmanager.services.meeting_minutes",
        "get_meeting_minutes_analyzer",
    ),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))
