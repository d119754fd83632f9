from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .aggregator import TimelogAccumulator
from .config import Settings, settings as default_settings
from .errors import InvalidInputError
from .gitlab_client import build_gitlab_client
from .jira_client import build_jira_client
from .models import TimelogData
from .sources import GitLabSource, JiraSource, TimelogSource
from .timeutils import parse_report_date

logger = logging.getLogger(__name__)


def _gitlab_source(cfg: Settings) -> TimelogSource:
    return GitLabSource(build_gitlab_client(cfg), cfg.tzinfo)


def _jira_source(cfg: Settings) -> TimelogSource:
    return JiraSource(build_jira_client(cfg), cfg.tzinfo)


SOURCES: dict[str, Callable[[Settings], TimelogSource]] = {
    "gitlab": _gitlab_source,
    "jira": _jira_source,
}


def validate_request(source: Any, target_dates: Any, selected_users: Any) -> tuple[str, list[str], list[str]]:
    if not isinstance(target_dates, list) or not target_dates:
        raise InvalidInputError("Missing or invalid targetDates parameter")
    if not isinstance(selected_users, list) or not selected_users:
        raise InvalidInputError("Missing or invalid selectedUsers parameter")
    if not isinstance(source, str) or source not in SOURCES:
        raise InvalidInputError(
            'Missing or invalid dataSource parameter. Must be "gitlab" or "jira".'
        )

    dates: list[str] = []
    for value in target_dates:
        parse_report_date(value)
        if value not in dates:
            dates.append(value)

    users: list[str] = []
    for value in selected_users:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError("Missing or invalid selectedUsers parameter")
        users.append(value)
    return source, dates, users


def build_source(name: str, cfg: Settings | None = None) -> TimelogSource:
    """Источник по имени; конфигурация проверяется до любого сетевого вызова."""
    factory = SOURCES.get(name)
    if factory is None:
        raise InvalidInputError(f"Unknown data source: {name!r}")
    return factory(cfg if cfg is not None else default_settings)


def run_aggregation(
    source: str,
    target_dates: list[str],
    selected_users: list[str],
    *,
    settings: Settings | None = None,
    sources: Mapping[str, TimelogSource] | None = None,
) -> TimelogData:
    """
    Собрать списания за даты target_dates для пользователей selected_users.

    Args:
        source: "gitlab" или "jira"
        target_dates: непустой список дат YYYY-MM-DD
        selected_users: непустой список имён в том виде, в каком их отдаёт трекер
        settings: конфигурация (по умолчанию из окружения)
        sources: готовые источники по имени (для тестов и встраивания)

    Returns:
        TimelogData: все запрошенные даты присутствуют ключами, суммы секунд
        по пользователям, предупреждения о пропущенных задачах.
    """
    source, dates, users = validate_request(source, target_dates, selected_users)
    adapter = sources[source] if sources and source in sources else build_source(source, settings)

    acc = TimelogAccumulator(dates)
    adapter.collect(acc, set(users))
    data = acc.result()
    logger.info(
        "%s: %d entr(ies) over %d date(s), %d warning(s)",
        source,
        sum(len(v) for v in data.timelog_groups.values()),
        len(dates),
        len(data.warnings),
    )
    return data
