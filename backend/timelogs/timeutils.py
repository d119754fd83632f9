from __future__ import annotations

import re
from datetime import date, datetime, timedelta, tzinfo

from .errors import InvalidDurationError, InvalidInputError

_DURATION_RE = re.compile(r"^(\d+):([0-5]\d):([0-5]\d)$")
_COMPACT_OFFSET_RE = re.compile(r"([+-])(\d{2})(\d{2})$")


def format_duration(seconds: int) -> str:
    """
    Секунды -> "HH:MM:SS". Часы не ограничены по ширине (100:00:00),
    минуты и секунды всегда две цифры.
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidDurationError(f"Duration must be an integer number of seconds, got {seconds!r}")
    if seconds < 0:
        raise InvalidDurationError(f"Duration must be non-negative, got {seconds}")
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    rest = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{rest:02d}"


def parse_duration(text: str) -> int:
    m = _DURATION_RE.match((text or "").strip())
    if not m:
        raise InvalidDurationError(f"Expected HH:MM:SS, got {text!r}")
    hours, minutes, rest = (int(part) for part in m.groups())
    return hours * 3600 + minutes * 60 + rest


def _parse_timestamp(timestamp: str) -> datetime:
    # GitLab: "2024-01-10T09:00:00Z" / "+01:00"; Jira: "2024-01-10T09:00:00.000+0100"
    value = (timestamp or "").strip()
    if not value:
        raise InvalidInputError("Empty timestamp")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    elif "T" in value:
        value = _COMPACT_OFFSET_RE.sub(r"\1\2:\3", value)
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unparseable timestamp: {timestamp!r}") from exc


def work_date(timestamp: str, tz: tzinfo | None = None) -> str:
    """
    Календарная дата списания (YYYY-MM-DD) в зоне tz.

    tz=None означает локальную зону процесса: два сервера в разных зонах разложат
    одно и то же списание по разным дням.
    """
    dt = _parse_timestamp(timestamp)
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.strftime("%Y-%m-%d")


def parse_report_date(value: str) -> date:
    if not isinstance(value, str) or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def previous_day(today: date | None = None) -> str:
    today = today or date.today()
    return (today - timedelta(days=1)).strftime("%Y-%m-%d")


def dates_to_fetch(today: date | None = None) -> list[str]:
    """
    Даты для ежедневного отчёта: вчера, а в понедельник пятница, суббота
    и воскресенье.
    """
    today = today or date.today()
    if today.weekday() == 0:
        return [(today - timedelta(days=i)).strftime("%Y-%m-%d") for i in range(3, 0, -1)]
    return [previous_day(today)]


def format_date_range(dates: list[str]) -> str:
    if not dates:
        return ""
    if len(dates) == 1:
        return dates[0]
    return f"{dates[0]} to {dates[-1]}"


def european_date(value: str) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY."""
    return parse_report_date(value).strftime("%d/%m/%Y")
