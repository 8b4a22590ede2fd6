from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_dashboard import config
from survey_dashboard.core.aggregator import EmptyDatasetError, SurveyReport, build_survey_report
from survey_dashboard.core.csv_normalizer import CSVNormalizerError
from survey_dashboard.core.narrative import build_narrative
from survey_dashboard.core.survey_loader import (
    InvalidTypeError,
    SurveyIOError,
    timed_load_survey_records,
)

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Invalid survey type"
PROCESSING_FAILED_MESSAGE = "Failed to process survey data"

app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _report_payload(report: SurveyReport) -> Dict[str, Any]:
    summary = report.summary
    return {
        "type": report.survey_type,
        "noData": False,
        "totalResponses": report.total_responses,
        "questions": report.questions,
        "distributions": {
            q: {"counts": d.counts, "percentages": d.percentages, "total": d.total}
            for q, d in report.distributions.items()
        },
        "executiveSummary": {
            "totalResponses": summary.total_responses,
            "highestRated": asdict(summary.highest_rated),
            "lowestRated": asdict(summary.lowest_rated),
            "overallSatisfaction": summary.overall_satisfaction,
        },
        "categoryBreakdown": report.category_breakdown,
        "narrative": report.narrative,
    }


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "name": config.APP_NAME, "version": config.APP_VERSION}


@app.get("/api/survey")
def get_survey(survey_type: Optional[str] = Query(default=None, alias="type")):
    try:
        records, elapsed = timed_load_survey_records(survey_type)
    except InvalidTypeError:
        logger.warning("Rejected survey request with type=%r", survey_type)
        return _error(400, INVALID_TYPE_MESSAGE)
    except (SurveyIOError, CSVNormalizerError):
        logger.exception("Error processing survey %s", survey_type)
        return _error(500, PROCESSING_FAILED_MESSAGE)
    except Exception:
        logger.exception("Unexpected error while loading survey %s", survey_type)
        return _error(500, PROCESSING_FAILED_MESSAGE)

    logger.info("Served survey %s: %d records in %0.3fs", survey_type, len(records), elapsed)
    return records


@app.get("/api/survey/summary")
def get_survey_summary(survey_type: Optional[str] = Query(default=None, alias="type")):
    records = []
    try:
        records, elapsed = timed_load_survey_records(survey_type)
        label = config.SURVEY_LABELS.get(survey_type, "survey")
        report = build_survey_report(records, survey_type, narrate=lambda s: build_narrative(s, label))
    except InvalidTypeError:
        logger.warning("Rejected summary request with type=%r", survey_type)
        return _error(400, INVALID_TYPE_MESSAGE)
    except EmptyDatasetError as exc:
        logger.info("No data for survey %s: %s", survey_type, exc)
        return {"type": survey_type, "noData": True, "totalResponses": len(records)}
    except (SurveyIOError, CSVNormalizerError):
        logger.exception("Error processing survey %s", survey_type)
        return _error(500, PROCESSING_FAILED_MESSAGE)
    except Exception:
        logger.exception("Unexpected error while summarizing survey %s", survey_type)
        return _error(500, PROCESSING_FAILED_MESSAGE)

    logger.info("Summarized survey %s in %0.3fs", survey_type, elapsed)
    return _report_payload(report)
