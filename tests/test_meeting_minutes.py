"""Tests for meeting minutes analysis."""

from __future__ import annotations

import pytest

from taskmanager.services.gemini import GeminiError
from taskmanager.services.meeting_minutes import (
    MeetingMinutesAnalyzer,
    extract_action_items,
)
from taskmanager.services.task import Priority

MINUTES = """Weekly sync notes
Sarah will send the deck by Friday. Everyone agreed.
Mike to review the budget
Assigned to Jane: update the roadmap.
Action item: fix the login bug - Alex
We discussed hiring plans
"""


class FakeGemini:
    def __init__(self, response: str = "", error: Exception | None = None, configured: bool = True):
        self.response = response
        self.error = error
        self.is_configured = configured
        self.prompts: list[str] = []

    def generate(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class TestExtractActionItems:
    def test_extracts_each_pattern(self) -> None:
        tasks = extract_action_items(MINUTES)

        assert [(task.assignee, task.name) for task in tasks] == [
            ("Sarah", "send the deck by Friday"),
            ("Mike", "review the budget"),
            ("Jane", "update the roadmap"),
            ("Alex", "fix the login bug"),
        ]

    def test_fallback_task_fields(self) -> None:
        task = extract_action_items("Mike to review the budget")[0]

        assert task.priority == Priority.P3
        assert task.due_date is None
        assert task.is_ai is True
        assert task.completed is False
        assert task.description == 'Extracted from meeting minutes: "Mike to review the budget"'

    @pytest.mark.parametrize(
        "verb",
        ["will", "should", "needs to", "has to", "must", "is going to"],
    )
    def test_commitment_verbs(self, verb: str) -> None:
        tasks = extract_action_items(f"John {verb} book the room")
        assert [(task.assignee, task.name) for task in tasks] == [("John", "book the room")]

    def test_no_action_items(self) -> None:
        assert extract_action_items("We discussed hiring plans\nlunch was good") == []


class TestMeetingMinutesAnalyzer:
    def test_unconfigured_client_uses_patterns(self) -> None:
        client = FakeGemini(configured=False)
        tasks = MeetingMinutesAnalyzer(client=client).analyze(MINUTES)

        assert len(tasks) == 4
        assert client.prompts == []

    def test_gemini_tasks(self) -> None:
        client = FakeGemini(
            "```json\n"
            '[{"title": "Send sales deck", "description": "Share the Q3 deck", '
            '"assignee": "Sarah", "priority": "P1", "deadline": "2026-10-23T17:00:00Z", '
            '"completed": false}]\n'
            "```"
        )
        tasks = MeetingMinutesAnalyzer(client=client).analyze(MINUTES)

        assert len(tasks) == 1
        task = tasks[0]
        assert task.name == "Send sales deck"
        assert task.assignee == "Sarah"
        assert task.priority == Priority.P1
        assert task.due_date.isoformat() == "2026-10-23T17:00:00+00:00"
        assert task.description == "Share the Q3 deck"
        assert task.is_ai is True
        assert MINUTES in client.prompts[0]

    def test_gemini_error_uses_patterns(self) -> None:
        client = FakeGemini(error=GeminiError("timeout"))
        tasks = MeetingMinutesAnalyzer(client=client).analyze(MINUTES)
        assert [task.assignee for task in tasks] == ["Sarah", "Mike", "Jane", "Alex"]

    def test_response_without_array_uses_patterns(self) -> None:
        client = FakeGemini("No action items were found.")
        tasks = MeetingMinutesAnalyzer(client=client).analyze("Mike to review the budget")
        assert [task.name for task in tasks] == ["review the budget"]
