"""
Текстовые отчёты для отправки в чат (Slack-разметка: *жирный*, [текст](url)).
"""
from __future__ import annotations

import re
from typing import Mapping

from .models import TimelogData, TimelogEntry
from .timeutils import european_date, format_date_range, format_duration, parse_duration

_BRACKETS_RE = re.compile(r"[\[\]]")


def display_name(user_name: str, mapping: Mapping[str, str] | None = None) -> str:
    return (mapping or {}).get(user_name) or user_name


def _group_by_user(entries: list[TimelogEntry], mapping: Mapping[str, str] | None) -> dict[str, list[TimelogEntry]]:
    out: dict[str, list[TimelogEntry]] = {}
    for entry in entries:
        out.setdefault(display_name(entry.user_name, mapping), []).append(entry)
    return out


def _user_blocks(entries: list[TimelogEntry], mapping: Mapping[str, str] | None) -> str:
    lines: list[str] = []
    for name, user_entries in _group_by_user(entries, mapping).items():
        lines.append(f"*{name}*")
        for entry in user_entries:
            title = _BRACKETS_RE.sub("", entry.issue_title)
            lines.append(f"  [{title}]({entry.issue_web_url})")
            lines.append(f"   {entry.summary}")
            lines.append(f"   *Time spent:* {entry.time_spent}")
        lines.append("")
    return "".join(line + "\n" for line in lines)


def build_text_report(data: TimelogData, selected_dates: list[str], mapping: Mapping[str, str] | None = None) -> str:
    message = "*DAILY ☀️*\n"
    if len(selected_dates) == 1:
        message += f"What we accomplished on {european_date(selected_dates[0])}:\n\n"
    elif selected_dates:
        message += (
            f"What we accomplished from {european_date(selected_dates[0])} "
            f"to {european_date(selected_dates[-1])}:\n\n"
        )

    entries: list[TimelogEntry] = []
    for day in selected_dates:
        entries.extend(data.timelog_groups.get(day) or [])
    if not entries:
        return message + f"No time logs found for {format_date_range(selected_dates)}\n"
    return message + _user_blocks(entries, mapping)


def build_day_report(data: TimelogData, day: str, mapping: Mapping[str, str] | None = None) -> str:
    entries = data.timelog_groups.get(day) or []
    if not entries:
        return "No time logs found for this day\n"
    return _user_blocks(entries, mapping)


def report_stats(data: TimelogData, selected_dates: list[str], mapping: Mapping[str, str] | None = None) -> dict:
    entries: list[TimelogEntry] = []
    for day in selected_dates:
        entries.extend(data.timelog_groups.get(day) or [])
    days_with_data = [d for d in selected_dates if data.timelog_groups.get(d)]
    total_seconds = sum(parse_duration(e.time_spent) for e in entries)
    return {
        "teamMembers": len(_group_by_user(entries, mapping)),
        "totalEntries": len(entries),
        "days": len(days_with_data),
        "totalTime": format_duration(total_seconds),
    }
