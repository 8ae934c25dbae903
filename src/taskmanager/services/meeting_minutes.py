"""Meeting minutes analysis.

Gemini reads the minutes and proposes titled, described, assigned tasks.
When Gemini is not configured or fails, a handful of action-item patterns
("Sarah will ...", "Assigned to Mike: ...") are matched line by line.
"""

from __future__ import annotations

import logging
import re

from taskmanager.services.gemini import GeminiClient, GeminiError, load_json_array
from taskmanager.services.task import ParsedTask, Priority

logger = logging.getLogger(__name__)

NAME = r"\b([A-Z][a-z]+)"

# (pattern, kind) pairs; first match on a line wins, explicit markers first
ACTION_ITEM_PATTERNS = [
    # "Assigned to Jane: update the roadmap"
    (re.compile(rf"(?i:assigned to)\s+{NAME}:\s+([^.]+)"), "name_first"),
    # "Action item: fix the login bug - Alex"
    (re.compile(rf"(?i:action item):\s+([^-]+)-\s*{NAME}"), "task_first"),
    # "Sarah will send the deck" / "John needs to book the room"
    (
        re.compile(rf"{NAME}\s+(?i:will|should|needs to|has to|must|is going to)\s+([^.]+)"),
        "name_first",
    ),
    # "Mike to review the budget"
    (re.compile(rf"{NAME}\s+(?i:to)\s+([^.]+)"), "name_first"),
]

MEETING_MINUTES_PROMPT = '''You are an AI system administrator whose task is to analyze meeting minutes and create multiple meaningful tasks with small descriptions (max 250 characters) and short titles assigned to people mentioned in the input.

Guidelines:
1. Act as a professional system administrator who is organizing tasks for a team
2. Create clear, concise, and specific task titles (maximum 5-7 words)
3. Add detailed but concise descriptions (max 250 characters) that provide context and specific actions needed
4. Only assign tasks to people explicitly mentioned in the input
5. Assign appropriate priorities (P1 for critical/urgent, P2 for important, P3 for normal, P4 for low)
6. Extract or estimate deadlines based on the context in ISO format (YYYY-MM-DDThh:mm:ssZ)
7. Make sure each task is actionable and meaningful
8. Break down complex responsibilities into multiple smaller tasks

Meeting Minutes:
"""
{minutes}
"""

Format your response as a JSON array of task objects with these properties:
[
  {{
    "name": "Clear, specific task title (5-7 words max)",
    "description": "Detailed but concise description with specific actions needed (max 250 characters)",
    "assignee": "Person's name",
    "priority": "P1|P2|P3|P4",
    "dueDate": "YYYY-MM-DDThh:mm:ssZ" or null if not specified,
    "completed": false
  }}
]

Only include tasks that are clearly actionable and assigned to specific people. Quality is more important than quantity.
Your response should be ONLY the JSON array, nothing else before or after.'''


def extract_action_items(minutes: str) -> list[ParsedTask]:
    """Pull "person + task" action items out of minutes without an LLM."""
    tasks = []
    for line in minutes.splitlines():
        for pattern, kind in ACTION_ITEM_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue
            if kind == "task_first":
                name, assignee = match.group(1), match.group(2)
            else:
                assignee, name = match.group(1), match.group(2)
            tasks.append(
                ParsedTask(
                    name=name.strip(),
                    assignee=assignee.strip(),
                    priority=Priority.P3,
                    is_ai=True,
                    description=f'Extracted from meeting minutes: "{line.strip()}"',
                )
            )
            break
    return tasks


class MeetingMinutesAnalyzer:
    def __init__(self, client: GeminiClient | None = None):
        self.client = client if client is not None else GeminiClient()

    def analyze(self, minutes: str) -> list[ParsedTask]:
        if not self.client.is_configured:
            logger.info("Gemini not configured; extracting action items by pattern")
            return extract_action_items(minutes)

        try:
            response = self.client.generate(
                MEETING_MINUTES_PROMPT.format(minutes=minutes),
                temperature=0.2,
                max_output_tokens=1024,
            )
            items = load_json_array(response)
        except GeminiError as exc:
            logger.warning("Meeting minutes analysis failed; extracting by pattern: %s", exc)
            return extract_action_items(minutes)

        return [ParsedTask.from_dict(item) for item in items if isinstance(item, dict)]


_analyzer: MeetingMinutesAnalyzer | None = None


def get_meeting_minutes_analyzer() -> MeetingMinutesAnalyzer:
    global _analyzer
    if _analyzer is None:
        _analyzer = MeetingMinutesAnalyzer()
    return _analyzer
