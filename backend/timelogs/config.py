from __future__ import annotations

import logging
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationMissingError


class Settings(BaseSettings):
    # Сервер иногда запускают не из папки backend/, поэтому env-файлы
    # указываем абсолютными путями относительно backend/.
    _backend_dir = Path(__file__).resolve().parent.parent
    model_config = SettingsConfigDict(
        env_file=(str(_backend_dir / ".env"), str(_backend_dir / "config.env")),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitLab GraphQL (https://gitlab.example.com/api/graphql)
    gitlab_api_url: str = ""
    gitlab_access_token: str = ""
    gitlab_group_path: str = "btv-applications"

    # Jira Cloud REST: Basic auth email + API token
    jira_api_url: str = ""
    jira_email: str = ""
    jira_access_token: str = ""

    # IANA-зона для раскладки списаний по календарным дням.
    # Пусто: локальная зона процесса.
    timelog_timezone: str = ""

    http_timeout_seconds: float = 120.0

    # Сырые имена из трекера -> короткие имена для текстового отчёта.
    # В .env задаётся JSON-объектом: NAME_MAPPING={"Tim_Blazic": "Tim"}
    name_mapping: dict[str, str] = {}

    log_level: str = "INFO"

    @property
    def tzinfo(self) -> tzinfo | None:
        """Зона для work_date(); None означает локальную зону хоста."""
        name = (self.timelog_timezone or "").strip()
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationMissingError(f"Unknown TIMELOG_TIMEZONE: {name!r}") from exc

    def require_gitlab(self) -> tuple[str, str]:
        url = (self.gitlab_api_url or "").strip()
        token = (self.gitlab_access_token or "").strip()
        if not url or not token:
            raise ConfigurationMissingError(
                "GitLab configuration not found. Please check environment variables "
                "GITLAB_API_URL and GITLAB_ACCESS_TOKEN."
            )
        return url, token

    def require_jira(self) -> tuple[str, str, str]:
        url = (self.jira_api_url or "").strip()
        email = (self.jira_email or "").strip()
        token = (self.jira_access_token or "").strip()
        if not url or not email or not token:
            raise ConfigurationMissingError(
                "Jira configuration not found. Please check environment variables "
                "JIRA_API_URL, JIRA_ACCESS_TOKEN, and JIRA_EMAIL."
            )
        return url, email, token


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
