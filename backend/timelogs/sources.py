"""
Источники списаний: GitLab (GraphQL timelogs группы) и Jira (JQL + worklog задач).

Оба источника приводят записи к TimelogEntry и складывают их в общий
TimelogAccumulator; запросы идут строго последовательно.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import tzinfo
from typing import Iterable

from .aggregator import TimelogAccumulator
from .errors import InvalidDurationError, InvalidInputError, TimelogError, UpstreamProtocolError
from .gitlab_client import GitLab
from .jira_client import SEARCH_PAGE_SIZE, Jira
from .models import TimelogData, TimelogEntry
from .richtext import clean_summary, clean_text, extract_comment_text
from .timeutils import format_duration, work_date

logger = logging.getLogger(__name__)


class TimelogSource(ABC):
    name = ""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz

    @abstractmethod
    def collect(self, acc: TimelogAccumulator, selected_users: set[str]) -> None:
        """Сложить в acc записи источника за acc.dates для selected_users."""

    def fetch(self, target_dates: Iterable[str], selected_users: Iterable[str]) -> TimelogData:
        acc = TimelogAccumulator(target_dates)
        self.collect(acc, set(selected_users))
        return acc.result()

    def _entry_date(self, timestamp: str | None, acc: TimelogAccumulator, what: str) -> str | None:
        try:
            return work_date(timestamp or "", self.tz)
        except InvalidInputError:
            message = f"Skipped {what}: unparseable timestamp {timestamp!r}"
            logger.warning(message)
            acc.warn(message)
            return None


def _duration(seconds, acc: TimelogAccumulator, what: str) -> tuple[int, str] | None:
    try:
        value = int(seconds or 0)
        return value, format_duration(value)
    except (InvalidDurationError, TypeError, ValueError):
        # GitLab разрешает отрицательные списания (вычитание времени)
        message = f"Skipped {what}: unsupported time spent {seconds!r}"
        logger.warning(message)
        acc.warn(message)
        return None


class GitLabSource(TimelogSource):
    name = "gitlab"

    def __init__(self, client: GitLab, tz: tzinfo | None = None) -> None:
        super().__init__(tz)
        self.client = client

    def collect(self, acc: TimelogAccumulator, selected_users: set[str]) -> None:
        cursor: str | None = None
        pages = 0
        while True:
            nodes, has_next_page, end_cursor = self.client.timelogs_page(cursor)
            pages += 1
            for node in nodes:
                self._consume(node, acc, selected_users)
            if not has_next_page:
                break
            if not end_cursor:
                raise UpstreamProtocolError("GitLab reported hasNextPage without endCursor")
            cursor = end_cursor
        logger.info("gitlab: fetched %d page(s) for group %s", pages, self.client.group_path)

    def _consume(self, node: dict, acc: TimelogAccumulator, selected_users: set[str]) -> None:
        issue = node.get("issue") or {}
        title = issue.get("title") or ""
        label = f"GitLab timelog {node.get('id') or title}"
        day = self._entry_date(node.get("spentAt"), acc, label)
        if day is None or not acc.wants(day):
            return
        user_name = (node.get("user") or {}).get("name") or ""
        if user_name not in selected_users:
            return

        duration = _duration(node.get("timeSpent"), acc, label)
        if duration is None:
            return
        seconds, human = duration
        acc.add(
            day,
            TimelogEntry(
                issue_title=clean_text(title),
                summary=clean_summary(node.get("summary")),
                time_spent=human,
                user_name=user_name,
                issue_web_url=clean_text(issue.get("webUrl")),
            ),
            seconds,
        )


class JiraSource(TimelogSource):
    name = "jira"

    def __init__(self, client: Jira, tz: tzinfo | None = None, page_size: int = SEARCH_PAGE_SIZE) -> None:
        super().__init__(tz)
        self.client = client
        self.page_size = page_size

    def collect(self, acc: TimelogAccumulator, selected_users: set[str]) -> None:
        for day in acc.dates:
            issues = self._search_issues(day)
            logger.info("jira: %d issue(s) with worklogs on %s", len(issues), day)
            for issue in issues:
                self._collect_issue(day, issue, acc, selected_users)

    def _search_issues(self, day: str) -> list[dict]:
        # Стоп на isLast или на неполной странице. Без isLast и токена
        # листаем по startAt: ровно заполненная последняя страница даёт
        # ещё один запрос с 0 задач.
        jql = f'worklogDate = "{day}"'
        start_at = 0
        token = ""
        out: list[dict] = []
        while True:
            issues, next_token, is_last = self.client.search_issues_page(
                jql, start_at=start_at, max_results=self.page_size, next_page_token=token
            )
            out.extend(issues)
            start_at += len(issues)
            if is_last or len(issues) != self.page_size:
                break
            if next_token and next_token == token:
                raise UpstreamProtocolError(f"Jira search returned the same nextPageToken twice for {day}")
            token = next_token
        return out

    def _collect_issue(self, day: str, issue: dict, acc: TimelogAccumulator, selected_users: set[str]) -> None:
        issue_key = (issue.get("key") or "").strip()
        if not issue_key:
            return
        issue_summary = (issue.get("fields") or {}).get("summary") or ""

        try:
            worklogs = self.client.get_worklog(issue_key)
        except TimelogError as exc:
            message = f"Failed to fetch worklogs for {issue_key}: {exc}"
            logger.warning(message)
            acc.warn(message)
            return

        for wl in worklogs:
            label = f"Jira worklog {wl.get('id') or issue_key}"
            if self._entry_date(wl.get("started"), acc, label) != day:
                continue
            author_name = (wl.get("author") or {}).get("displayName") or ""
            if author_name not in selected_users:
                continue
            duration = _duration(wl.get("timeSpentSeconds"), acc, label)
            if duration is None:
                continue
            seconds, human = duration
            acc.add(
                day,
                TimelogEntry(
                    issue_title=clean_text(f"{issue_key}: {issue_summary}"),
                    summary=clean_summary(extract_comment_text(wl.get("comment"))),
                    time_spent=human,
                    user_name=author_name,
                    issue_web_url=clean_text(self.client.browse_url(issue_key)),
                ),
                seconds,
            )
