from __future__ import annotations

import base64
from urllib.parse import quote
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import Settings
from .errors import UpstreamHttpError, UpstreamProtocolError

API_PREFIX = "/rest/api/3"
SEARCH_PAGE_SIZE = 100


class Jira:
    def __init__(self, base_url: str, headers: Dict[str, str], timeout_s: float = 120) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(headers)
        self.timeout_s = timeout_s

    def request(self, method: str, path: str, *, params: Optional[dict] = None) -> requests.Response:
        url = self.base_url + path
        try:
            return self.session.request(method, url, params=params, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as exc:
            raise UpstreamHttpError(f"Jira request {method} {path} failed: {exc}") from exc

    def search_issues_page(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = SEARCH_PAGE_SIZE,
        next_page_token: str = "",
    ) -> Tuple[List[dict], str, bool]:
        """
        Одна страница JQL-поиска (key + summary).

        Возвращает (issues, next_page_token, is_last). Jira Cloud листает
        /search/jql по nextPageToken/isLast и игнорирует startAt; startAt
        передаётся для серверов с offset-пагинацией.
        """
        params: Dict[str, Any] = {
            "jql": jql,
            "fields": "key,summary",
            "startAt": start_at,
            "maxResults": max_results,
        }
        if next_page_token:
            params["nextPageToken"] = next_page_token
        r = self.request("GET", f"{API_PREFIX}/search/jql", params=params)
        if r.status_code != 200:
            raise UpstreamHttpError(
                f"Jira API error: HTTP {r.status_code} {r.reason} - {r.text}",
                status=r.status_code,
            )
        payload = _json_object(r, "search")
        issues = payload.get("issues") or []
        token = payload.get("nextPageToken") or ""
        return (
            [i for i in issues if isinstance(i, dict)],
            token.strip() if isinstance(token, str) else "",
            payload.get("isLast") is True,
        )

    def get_worklog(self, issue_key: str) -> List[dict]:
        """Все worklog'и задачи одним ответом (без вложенной пагинации)."""
        r = self.request("GET", f"{API_PREFIX}/issue/{quote(issue_key, safe='')}/worklog")
        if r.status_code != 200:
            raise UpstreamHttpError(
                f"Get worklog failed for {issue_key}: HTTP {r.status_code}",
                status=r.status_code,
            )
        payload = _json_object(r, f"worklog {issue_key}")
        worklogs = payload.get("worklogs") or []
        return [w for w in worklogs if isinstance(w, dict)]

    def browse_url(self, issue_key: str) -> str:
        return f"{self.base_url}/browse/{issue_key}"


def _json_object(r: requests.Response, what: str) -> dict:
    try:
        payload: Any = r.json()
    except ValueError as exc:
        raise UpstreamProtocolError(f"Jira {what}: response is not JSON") from exc
    if not isinstance(payload, dict):
        raise UpstreamProtocolError(f"Jira {what}: unexpected response shape")
    return payload


def basic_auth_headers(email: str, api_token: str) -> Dict[str, str]:
    raw = f"{email}:{api_token}".encode("utf-8")
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Authorization": "Basic " + base64.b64encode(raw).decode("ascii"),
    }


def build_jira_client(settings: Settings) -> Jira:
    base_url, email, token = settings.require_jira()
    return Jira(base_url, basic_auth_headers(email, token), timeout_s=settings.http_timeout_seconds)
