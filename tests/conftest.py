import json
from zoneinfo import ZoneInfo

import pytest

from timelogs.config import Settings
from timelogs.gitlab_client import GitLab
from timelogs.jira_client import Jira, basic_auth_headers


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=None):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def utc():
    return ZoneInfo("UTC")


@pytest.fixture
def response():
    return FakeResponse


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        gitlab_api_url="https://gitlab.example.com/api/graphql",
        gitlab_access_token="glpat-test",
        jira_api_url="https://example.atlassian.net",
        jira_email="bot@example.com",
        jira_access_token="jira-token",
        timelog_timezone="UTC",
    )


@pytest.fixture
def gitlab_client():
    return GitLab("https://gitlab.example.com/api/graphql", "glpat-test", "btv-applications")


@pytest.fixture
def jira_client():
    return Jira("https://example.atlassian.net/", basic_auth_headers("bot@example.com", "jira-token"))


def _gitlab_node(user, seconds, spent_at, title="Fix login", summary="Did work", node_id="gid://gitlab/Timelog/1"):
    return {
        "id": node_id,
        "timeSpent": seconds,
        "user": {"id": "gid://gitlab/User/1", "username": user.lower(), "name": user},
        "spentAt": spent_at,
        "summary": summary,
        "issue": {
            "id": "gid://gitlab/Issue/7",
            "iid": 7,
            "projectId": 3,
            "title": title,
            "webUrl": "https://gitlab.example.com/btv-applications/app/-/issues/7",
        },
    }


def _gitlab_page(nodes, has_next=False, cursor=None):
    return {
        "data": {
            "group": {
                "timelogs": {
                    "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
                    "nodes": nodes,
                }
            }
        }
    }


def _jira_worklog(author, seconds, started, comment=None, worklog_id="10001"):
    return {
        "id": worklog_id,
        "author": {"displayName": author, "emailAddress": f"{author.lower()}@example.com"},
        "started": started,
        "timeSpentSeconds": seconds,
        "comment": comment,
    }


@pytest.fixture
def gitlab_node():
    return _gitlab_node


@pytest.fixture
def gitlab_page():
    return _gitlab_page


@pytest.fixture
def jira_worklog():
    return _jira_worklog
