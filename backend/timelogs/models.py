from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TimelogGroups = dict[str, list["TimelogEntry"]]
UserTotals = dict[str, int]


@dataclass(slots=True, frozen=True)
class TimelogEntry:
    """Одно списание в общем для GitLab и Jira виде."""

    issue_title: str
    summary: str
    time_spent: str
    user_name: str
    issue_web_url: str

    def to_dict(self) -> dict[str, str]:
        return {
            "issueTitle": self.issue_title,
            "summary": self.summary,
            "timeSpent": self.time_spent,
            "userName": self.user_name,
            "issueWebUrl": self.issue_web_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimelogEntry":
        return cls(
            issue_title=str(data.get("issueTitle") or ""),
            summary=str(data.get("summary") or ""),
            time_spent=str(data.get("timeSpent") or "00:00:00"),
            user_name=str(data.get("userName") or ""),
            issue_web_url=str(data.get("issueWebUrl") or ""),
        )


@dataclass(slots=True, frozen=True)
class TimelogData:
    timelog_groups: TimelogGroups
    user_totals: UserTotals
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timelogGroups": {
                day: [entry.to_dict() for entry in entries]
                for day, entries in self.timelog_groups.items()
            },
            "userTotals": dict(self.user_totals),
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimelogData":
        groups = data.get("timelogGroups") or {}
        totals = data.get("userTotals") or {}
        return cls(
            timelog_groups={
                str(day): [TimelogEntry.from_dict(e) for e in (entries or []) if isinstance(e, dict)]
                for day, entries in groups.items()
            },
            user_totals={str(name): int(seconds or 0) for name, seconds in totals.items()},
            warnings=tuple(str(w) for w in (data.get("warnings") or [])),
        )
