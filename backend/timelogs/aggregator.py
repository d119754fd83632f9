from __future__ import annotations

from typing import Iterable

from .models import TimelogData, TimelogEntry, TimelogGroups, UserTotals


class TimelogAccumulator:
    """
    Группировка списаний по датам и суммирование секунд по пользователям.

    Все запрошенные даты присутствуют в результате сразу, даже если за день
    ничего не найдено.
    """

    def __init__(self, target_dates: Iterable[str]) -> None:
        self.groups: TimelogGroups = {}
        for day in target_dates:
            self.groups.setdefault(day, [])
        self.totals: UserTotals = {}
        self.warnings: list[str] = []

    @property
    def dates(self) -> list[str]:
        return list(self.groups)

    def wants(self, day: str) -> bool:
        return day in self.groups

    def add(self, day: str, entry: TimelogEntry, seconds: int) -> None:
        self.groups[day].append(entry)
        self.totals[entry.user_name] = self.totals.get(entry.user_name, 0) + seconds

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def result(self) -> TimelogData:
        return TimelogData(
            timelog_groups={day: list(entries) for day, entries in self.groups.items()},
            user_totals=dict(self.totals),
            warnings=tuple(self.warnings),
        )
