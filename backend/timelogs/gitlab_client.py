from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .errors import UpstreamHttpError, UpstreamProtocolError

PAGE_SIZE = 100

TIMELOGS_QUERY = """
query($fullPath: ID!, $first: Int!, $after: String) {
  group(fullPath: $fullPath) {
    timelogs(first: $first, after: $after, sort: SPENT_AT_DESC) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        id
        timeSpent
        user {
          id
          username
          name
        }
        spentAt
        summary
        issue {
          id
          iid
          projectId
          title
          webUrl
        }
      }
    }
  }
}
"""


class GitLab:
    def __init__(self, graphql_url: str, token: str, group_path: str, timeout_s: float = 120) -> None:
        self.graphql_url = graphql_url
        self.group_path = group_path
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self.timeout_s = timeout_s

    def request(self, body: dict) -> requests.Response:
        try:
            return self.session.post(self.graphql_url, json=body, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise UpstreamHttpError(f"GitLab request failed: {exc}") from exc

    def timelogs_page(self, cursor: Optional[str] = None, first: int = PAGE_SIZE) -> tuple[List[dict], bool, Optional[str]]:
        """
        Одна страница timelogs группы.

        Returns:
            (nodes, has_next_page, end_cursor)
        """
        body = {
            "query": TIMELOGS_QUERY,
            "variables": {"fullPath": self.group_path, "first": first, "after": cursor or None},
        }
        r = self.request(body)
        if r.status_code != 200:
            raise UpstreamHttpError(f"GitLab API error: HTTP {r.status_code}", status=r.status_code)
        try:
            payload: Any = r.json()
        except ValueError as exc:
            raise UpstreamProtocolError("GitLab response is not JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("GitLab: unexpected response shape")
        if payload.get("errors"):
            raise UpstreamProtocolError(f"GraphQL errors: {payload['errors']}")

        group = (payload.get("data") or {}).get("group")
        if not isinstance(group, dict):
            raise UpstreamProtocolError(f"GitLab group {self.group_path!r} not found")
        timelogs = group.get("timelogs") or {}
        page_info: Dict[str, Any] = timelogs.get("pageInfo") or {}
        nodes = [n for n in (timelogs.get("nodes") or []) if isinstance(n, dict)]
        return nodes, bool(page_info.get("hasNextPage")), page_info.get("endCursor")


def build_gitlab_client(settings: Settings) -> GitLab:
    url, token = settings.require_gitlab()
    return GitLab(url, token, settings.gitlab_group_path, timeout_s=settings.http_timeout_seconds)
