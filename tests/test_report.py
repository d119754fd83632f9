from timelogs.models import TimelogData, TimelogEntry
from timelogs.report import build_day_report, build_text_report, display_name, report_stats


def _entry(user, title="ABC-1: [API] Login", seconds="00:30:00", summary="Did work"):
    return TimelogEntry(title, summary, seconds, user, "https://example.atlassian.net/browse/ABC-1")


DATA = TimelogData(
    timelog_groups={
        "2024-01-12": [_entry("Tim_Blazic"), _entry("edis", seconds="01:00:00")],
        "2024-01-13": [],
        "2024-01-14": [_entry("Tim_Blazic", title="ABC-2: Deploy", seconds="00:15:30")],
    },
    user_totals={"Tim_Blazic": 2730, "edis": 3600},
)
MAPPING = {"Tim_Blazic": "Tim", "edis": "Edis"}


def test_display_name_uses_injected_mapping():
    assert display_name("Tim_Blazic", MAPPING) == "Tim"
    assert display_name("someone", MAPPING) == "someone"
    assert display_name("Tim_Blazic") == "Tim_Blazic"


def test_single_day_report():
    text = build_text_report(DATA, ["2024-01-12"], MAPPING)
    assert text == (
        "*DAILY ☀️*\n"
        "What we accomplished on 12/01/2024:\n\n"
        "*Tim*\n"
        "  [ABC-1: API Login](https://example.atlassian.net/browse/ABC-1)\n"
        "   Did work\n"
        "   *Time spent:* 00:30:00\n"
        "\n"
        "*Edis*\n"
        "  [ABC-1: API Login](https://example.atlassian.net/browse/ABC-1)\n"
        "   Did work\n"
        "   *Time spent:* 01:00:00\n"
        "\n"
    )


def test_multi_day_report_groups_by_user_across_days():
    text = build_text_report(DATA, ["2024-01-12", "2024-01-13", "2024-01-14"], MAPPING)
    assert text.startswith("*DAILY ☀️*\nWhat we accomplished from 12/01/2024 to 14/01/2024:\n\n*Tim*\n")
    tim_block = text.split("*Edis*")[0]
    assert "ABC-2: Deploy" in tim_block


def test_empty_report():
    text = build_text_report(DATA, ["2024-01-13"], MAPPING)
    assert text == "*DAILY ☀️*\nWhat we accomplished on 13/01/2024:\n\nNo time logs found for 2024-01-13\n"


def test_day_report():
    assert build_day_report(DATA, "2024-01-13") == "No time logs found for this day\n"
    assert build_day_report(DATA, "2024-01-14", MAPPING).startswith("*Tim*\n  [ABC-2: Deploy]")


def test_report_stats():
    stats = report_stats(DATA, ["2024-01-12", "2024-01-13", "2024-01-14"], MAPPING)
    assert stats == {"teamMembers": 2, "totalEntries": 3, "days": 2, "totalTime": "01:45:30"}
