"""
Tests for the executive-summary narrative text.
"""

from survey_dashboard.core.aggregator import ExecutiveSummary, RatedQuestion
from survey_dashboard.core.narrative import build_narrative


def _summary(highest="Sessions", lowest="Venue"):
    return ExecutiveSummary(
        total_responses=12,
        highest_rated=RatedQuestion(question=highest, percentage=92),
        lowest_rated=RatedQuestion(question=lowest, percentage=8),
        overall_satisfaction=81,
    )


def test_numbers_come_from_summary():
    text = build_narrative(_summary(), "Opening Survey")
    assert "12 participants" in text
    assert "81%" in text
    assert '"Sessions", with 92%' in text
    assert '"Venue" ranked lowest, with 8%' in text


def test_single_question_not_repeated():
    text = build_narrative(_summary(highest="Q1", lowest="Q1"), "Closing Survey")
    assert "ranked lowest" not in text


def test_no_data():
    assert build_narrative(None, "Closing Survey") == (
        "No survey responses are available yet for the Closing Survey."
    )
