from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import logging
import math

import pandas as pd

from survey_dashboard.core.csv_normalizer import Record, records_to_frame

logger = logging.getLogger(__name__)

# Fixed seven-point scale, in display order.
LIKERT_SCALE = [
    "Strongly Agree",
    "Agree",
    "Somewhat Agree",
    "Neutral",
    "Somewhat Disagree",
    "Disagree",
    "Strongly Disagree",
]

STRONGLY_AGREE = "Strongly Agree"
AGREE = "Agree"
DISAGREE = "Disagree"
POSITIVE_RESPONSES = (STRONGLY_AGREE, AGREE)

# Columns that look like answers on the first row but are respondent metadata.
METADATA_COLUMNS = frozenset({"First Name", "Last Name", "Title", "Organization"})
RESPONSE_PREFIX = "Response"
ID_MARKER = "ID"


class AggregatorError(Exception):
    """Custom exception for aggregation failures."""


class EmptyDatasetError(AggregatorError):
    """Raised when there are no records or no survey questions to aggregate."""


@dataclass
class ResponseDistribution:
    question: str
    counts: Dict[str, int]
    percentages: Dict[str, int]
    total: int  # non-empty answers on the Likert scale


@dataclass
class RatedQuestion:
    question: str
    percentage: int


@dataclass
class ExecutiveSummary:
    """
    Headline numbers for the dashboard.

    highest_rated carries a positive-response rate while lowest_rated carries
    the share of exact "Disagree" answers. Both use the full respondent count
    as denominator.
    """
    total_responses: int
    highest_rated: RatedQuestion
    lowest_rated: RatedQuestion
    overall_satisfaction: int


@dataclass
class SurveyReport:
    survey_type: str
    total_responses: int
    questions: List[str]
    distributions: Dict[str, ResponseDistribution]
    summary: ExecutiveSummary
    category_breakdown: Dict[str, int]
    narrative: str = ""


def round_half_up(value: float) -> int:
    """Round .5 upwards (the dashboard's Math.round), not to even."""
    return int(math.floor(value + 0.5))


def _percent(count: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return round_half_up(100.0 * count / denominator)


def _exact_count(df: pd.DataFrame, question: str, response: str) -> int:
    if question not in df.columns:
        return 0
    return int((df[question] == response).sum())


# ---------------------------------------------------------------------------
# Question classification and ranking
# ---------------------------------------------------------------------------

def is_question_column(column: str, sample_value: Optional[str]) -> bool:
    if not sample_value or not isinstance(sample_value, str):
        return False
    if "Agree" not in sample_value and "Disagree" not in sample_value:
        return False
    if column.startswith(RESPONSE_PREFIX) or ID_MARKER in column:
        return False
    return column not in METADATA_COLUMNS


def classify_questions(records: List[Record]) -> List[str]:
    """
    Columns that hold Likert answers, in file-column order.

    Only the first record is sampled; later rows are not re-checked.
    """
    if not records:
        return []
    first = records[0]
    return [col for col, value in first.items() if is_question_column(col, value)]


def _frame(records: List[Record], df: Optional[pd.DataFrame]) -> pd.DataFrame:
    return df if df is not None else records_to_frame(records)


def rank_questions(
    records: List[Record],
    questions: List[str],
    df: Optional[pd.DataFrame] = None,
) -> List[str]:
    """Order questions by "Strongly Agree" count, descending; ties keep column order."""
    df = _frame(records, df)
    counts = {q: _exact_count(df, q, STRONGLY_AGREE) for q in questions}
    return sorted(questions, key=lambda q: -counts[q])


# ---------------------------------------------------------------------------
# Per-question statistics
#
# Each helper accepts an optional pre-built frame of the same records so a
# full report pass builds the DataFrame only once.
# ---------------------------------------------------------------------------

def distribution(
    records: List[Record],
    question: str,
    df: Optional[pd.DataFrame] = None,
) -> ResponseDistribution:
    """
    Likert breakdown for one question.

    Empty cells and values outside the scale are left out of both the counts
    and the percentage denominator. Labels with no answers are omitted.
    """
    df = _frame(records, df)
    if df.empty or question not in df.columns:
        return ResponseDistribution(question=question, counts={}, percentages={}, total=0)

    values = df[question].str.strip()
    values = values[values.isin(LIKERT_SCALE)]
    tallies = values.value_counts()

    total = int(len(values))
    counts: Dict[str, int] = {}
    percentages: Dict[str, int] = {}
    for label in LIKERT_SCALE:
        n = int(tallies.get(label, 0))
        if n <= 0:
            continue
        counts[label] = n
        percentages[label] = _percent(n, total)

    return ResponseDistribution(question=question, counts=counts, percentages=percentages, total=total)


def positive_rate(records: List[Record], question: str, df: Optional[pd.DataFrame] = None) -> int:
    """Share of all respondents answering Strongly Agree or Agree."""
    df = _frame(records, df)
    positives = sum(_exact_count(df, question, r) for r in POSITIVE_RESPONSES)
    return _percent(positives, len(records))


def disagree_rate(records: List[Record], question: str, df: Optional[pd.DataFrame] = None) -> int:
    df = _frame(records, df)
    return _percent(_exact_count(df, question, DISAGREE), len(records))


# ---------------------------------------------------------------------------
# Dataset-level aggregates
# ---------------------------------------------------------------------------

def summarize(
    records: List[Record],
    questions: List[str],
    df: Optional[pd.DataFrame] = None,
) -> Optional[ExecutiveSummary]:
    """
    Executive summary over ranked questions.

    Returns None when there is nothing to summarize (no records or no
    questions); callers render that as a "no data" state.
    """
    if not records or not questions:
        return None

    df = _frame(records, df)
    total = len(records)
    rates = [positive_rate(records, q, df) for q in questions]

    return ExecutiveSummary(
        total_responses=total,
        highest_rated=RatedQuestion(question=questions[0], percentage=rates[0]),
        lowest_rated=RatedQuestion(question=questions[-1], percentage=disagree_rate(records, questions[-1], df)),
        overall_satisfaction=round_half_up(sum(rates) / len(rates)),
    )


def average_percentage(
    records: List[Record],
    questions: List[str],
    response: str,
    df: Optional[pd.DataFrame] = None,
) -> Optional[int]:
    """
    Mean over questions of the share of respondents giving exactly `response`.

    The denominator is every record, including blanks for that question.
    """
    if not records or not questions:
        return None
    df = _frame(records, df)
    total = len(records)
    per_question = [100.0 * _exact_count(df, q, response) / total for q in questions]
    return round_half_up(sum(per_question) / len(per_question))


def category_breakdown(
    records: List[Record],
    questions: List[str],
    df: Optional[pd.DataFrame] = None,
) -> Dict[str, int]:
    df = _frame(records, df)
    out: Dict[str, int] = {}
    for label in LIKERT_SCALE:
        pct = average_percentage(records, questions, label, df)
        out[label] = pct if pct is not None else 0
    return out


def build_survey_report(
    records: List[Record],
    survey_type: str,
    narrate: Optional[Callable[[ExecutiveSummary], str]] = None,
) -> SurveyReport:
    """
    Run the whole aggregation pass for one dataset.

    The records are framed once and every statistic reads that frame.
    `narrate` turns the summary into the report's narrative text; without it
    the narrative stays empty.

    Raises EmptyDatasetError when there are no records or no questions, so
    the caller can show an informational state instead of an error.
    """
    if not records:
        raise EmptyDatasetError(f"Survey '{survey_type}' has no responses.")

    questions = classify_questions(records)
    if not questions:
        logger.warning("Survey %s: no Likert question columns found in %d records.", survey_type, len(records))
        raise EmptyDatasetError(f"Survey '{survey_type}' has no Likert questions.")

    df = records_to_frame(records)
    ranked = rank_questions(records, questions, df)
    summary = summarize(records, ranked, df)
    if summary is None:
        raise EmptyDatasetError(f"Survey '{survey_type}' could not be summarized.")

    logger.info(
        "Survey %s: %d responses, %d questions, overall satisfaction %d%%",
        survey_type, summary.total_responses, len(ranked), summary.overall_satisfaction,
    )

    return SurveyReport(
        survey_type=survey_type,
        total_responses=summary.total_responses,
        questions=ranked,
        distributions={q: distribution(records, q, df) for q in ranked},
        summary=summary,
        category_breakdown=category_breakdown(records, ranked, df),
        narrative=narrate(summary) if narrate is not None else "",
    )
