import json
from unittest.mock import MagicMock

from timelogs import daily_report
from timelogs.errors import UpstreamHttpError
from timelogs.models import TimelogData, TimelogEntry


def _data():
    entry = TimelogEntry("ABC-1: Login", "Did work", "00:30:00", "alice", "https://example.atlassian.net/browse/ABC-1")
    return TimelogData({"2024-02-01": [entry]}, {"alice": 1800}, ("Failed to fetch worklogs for ABC-2: HTTP 500",))


def test_prints_text_report(monkeypatch, capsys):
    run = MagicMock(return_value=_data())
    monkeypatch.setattr(daily_report, "run_aggregation", run)
    monkeypatch.setattr(daily_report.settings, "name_mapping", {})

    code = daily_report.main(["--source", "jira", "--date", "2024-02-01", "--user", "alice"])

    assert code == 0
    run.assert_called_once_with("jira", ["2024-02-01"], ["alice"])
    out = capsys.readouterr().out
    assert "What we accomplished on 01/02/2024:" in out
    assert "  [ABC-1: Login](https://example.atlassian.net/browse/ABC-1)" in out


def test_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(daily_report, "run_aggregation", MagicMock(return_value=_data()))

    code = daily_report.main(["--date", "2024-02-01", "--user", "alice", "--user", "bob", "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["userTotals"] == {"alice": 1800}
    assert payload["warnings"] == ["Failed to fetch worklogs for ABC-2: HTTP 500"]


def test_default_dates(monkeypatch):
    run = MagicMock(return_value=_data())
    monkeypatch.setattr(daily_report, "run_aggregation", run)
    monkeypatch.setattr(daily_report, "dates_to_fetch", lambda: ["2024-01-16"])

    daily_report.main(["--user", "alice"])

    run.assert_called_once_with("gitlab", ["2024-01-16"], ["alice"])


def test_failure_exit_code(monkeypatch):
    monkeypatch.setattr(daily_report, "run_aggregation", MagicMock(side_effect=UpstreamHttpError("HTTP 500")))
    assert daily_report.main(["--user", "alice", "--date", "2024-02-01"]) == 1
