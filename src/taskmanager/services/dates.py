"""Date and time-of-day resolution for task sentences.

Every extractor takes the working text and returns ``(value, remainder)``,
where ``remainder`` is the text with the matched phrase cut out. Dates are
resolved against an explicit reference instant so results are reproducible.
Arithmetic happens on wall-clock values; callers own timezone localization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

LEAD_IN_WORDS = ("by", "on", "at", "due", "before")

MONTHS: dict[str, int] = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

_LEAD_IN = "|".join(LEAD_IN_WORDS)
_MONTH_NAMES = "|".join(MONTHS)
_WEEKDAY_NAMES = "|".join(WEEKDAYS)
_ORDINAL = r"(?:st|nd|rd|th)?"

TIME_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE)

# First match wins, so order matters.
DATE_PATTERNS = [
    (re.compile(rf"\b(?:{_LEAD_IN})?\s*tomorrow\b", re.IGNORECASE), "tomorrow"),
    (re.compile(rf"\b(?:{_LEAD_IN})?\s*today\b", re.IGNORECASE), "today"),
    (re.compile(rf"\b(?:{_LEAD_IN})?\s*next week\b", re.IGNORECASE), "next_week"),
    (
        re.compile(rf"\b(?:{_LEAD_IN})?\s*(?P<weekday>{_WEEKDAY_NAMES})\b", re.IGNORECASE),
        "weekday",
    ),
    (
        re.compile(
            rf"\b(?:{_LEAD_IN})?\s*"
            rf"(?:(?P<day>\d{{1,2}}){_ORDINAL}\s+(?P<month>{_MONTH_NAMES})"
            rf"|(?P<month_first>{_MONTH_NAMES})\s+(?P<day_after>\d{{1,2}}){_ORDINAL})\b",
            re.IGNORECASE,
        ),
        "specific",
    ),
]

TRAILING_LEAD_IN = re.compile(rf"\b(?:{_LEAD_IN})\b\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class TimeOfDay:
    """Clock time pulled from text such as ``11pm`` or ``5:30 AM``."""

    hour: int
    minute: int = 0

    def apply(self, value: datetime) -> datetime:
        """Set this time on ``value``'s calendar day.

        Out-of-range values (``13pm``, ``5:75am``) roll over into the next
        hour or day instead of raising.
        """
        midnight = value.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + timedelta(hours=self.hour, minutes=self.minute)


def cut(text: str, match: re.Match[str]) -> str:
    """Remove a regex match from ``text`` and trim the result."""
    return (text[: match.start()] + text[match.end() :]).strip()


def extract_time(text: str) -> tuple[TimeOfDay | None, str]:
    match = TIME_PATTERN.search(text)
    if not match:
        return None, text

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3).lower()
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0

    return TimeOfDay(hour=hour, minute=minute), cut(text, match)


def extract_date(text: str, now: datetime) -> tuple[datetime | None, str]:
    """Resolve the first date phrase in ``text`` relative to ``now``.

    Relative phrases keep ``now``'s time of day; calendar dates resolve to
    midnight.
    """
    for pattern, kind in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return _resolve(kind, match, now), cut(text, match)
    return None, text


def strip_trailing_lead_in(text: str) -> str:
    """Drop a dangling ``by``/``on``/``at``/``due``/``before`` at the end."""
    return TRAILING_LEAD_IN.sub("", text).strip()


def next_weekday(now: datetime, weekday: int) -> datetime:
    """Next date falling on ``weekday`` strictly after today (1 to 7 days out)."""
    days_ahead = weekday - now.weekday()
    if days_ahead <= 0:
        days_ahead += 7
    return now + timedelta(days=days_ahead)


def calendar_date(now: datetime, month: int, day: int) -> datetime:
    """Midnight on ``month``/``day`` this year, or next year if already past.

    Days beyond the end of the month spill into the following month, and
    day 0 is the last day of the previous month.
    """
    resolved = _month_day(now, now.year, month, day)
    if resolved < now:
        resolved = _month_day(now, now.year + 1, month, day)
    return resolved


def _month_day(now: datetime, year: int, month: int, day: int) -> datetime:
    first = now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)
    return first + timedelta(days=day - 1)


def _resolve(kind: str, match: re.Match[str], now: datetime) -> datetime:
    if kind == "tomorrow":
        return now + timedelta(days=1)
    if kind == "today":
        return now
    if kind == "next_week":
        return now + timedelta(days=7)
    if kind == "weekday":
        return next_weekday(now, WEEKDAYS[match.group("weekday").lower()])

    day_text = match.group("day") or match.group("day_after")
    month_name = match.group("month") or match.group("month_first")
    day = int(day_text) if day_text else 1
    month = MONTHS.get(month_name.lower(), 1) if month_name else 1
    return calendar_date(now, month, day)
