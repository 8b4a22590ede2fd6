from __future__ import annotations

from typing import Optional

from survey_dashboard.core.aggregator import ExecutiveSummary

NO_DATA_TEXT = "No survey responses are available yet for the {label}."


def _respondents(n: int) -> str:
    return "1 participant" if n == 1 else f"{n} participants"


def build_narrative(summary: Optional[ExecutiveSummary], survey_label: str = "survey") -> str:
    """
    Short factual paragraph for the executive summary card.

    Every number in the text is taken from the summary; nothing is inferred
    beyond it. A missing summary yields the "no data" sentence.
    """
    if summary is None:
        return NO_DATA_TEXT.format(label=survey_label)

    highest = summary.highest_rated
    lowest = summary.lowest_rated

    parts = [
        f"The {survey_label} results reflect feedback from {_respondents(summary.total_responses)}.",
        f"Across all questions, {summary.overall_satisfaction}% of responses were positive "
        f"(Strongly Agree or Agree).",
        f"The highest rated item was \"{highest.question}\", with {highest.percentage}% "
        f"of participants responding positively.",
    ]
    if lowest.question != highest.question:
        parts.append(
            f"\"{lowest.question}\" ranked lowest, with {lowest.percentage}% of participants "
            f"answering Disagree."
        )
    return " ".join(parts)
