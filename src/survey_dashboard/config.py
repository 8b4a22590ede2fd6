from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Survey exports live outside the web root. Override with SURVEY_DATA_DIR.
DATA_DIR = PROJECT_ROOT / "data"
SURVEY_DATA_DIR = Path(
    os.getenv("SURVEY_DATA_DIR", str(DATA_DIR / "surveys")).strip()
).expanduser()

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Survey Results Dashboard API"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Survey sources
#
# The dashboard only ever serves two fixed exports, selected by ?type=.
# The names are the ones the survey platform produces on export.
# ---------------------------------------------------------------------------

SURVEY_FILES: Dict[str, str] = {
    "opening": "Black+History+Retreat+Survey+(Opening+Survey).csv",
    "closing": "Black+Futures+Retreat+Survey+(Closing+Survey).csv",
}

SURVEY_LABELS: Dict[str, str] = {
    "opening": "Opening Survey",
    "closing": "Closing Survey",
}

# Optional HTTP mirror for the exports (e.g. a bucket). When empty, files are
# read from SURVEY_DATA_DIR.
SURVEY_SOURCE_BASE_URL = os.getenv("SURVEY_SOURCE_BASE_URL", "").strip()
SURVEY_SOURCE_TIMEOUT_SECONDS = int(os.getenv("SURVEY_SOURCE_TIMEOUT_SECONDS", "30"))


def _split_env_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


# Cell values that mark the real header row of an export. Anything above the
# first row containing one of these is export preamble.
HEADER_ANCHORS: Tuple[str, ...] = tuple(
    _split_env_list(os.getenv("SURVEY_HEADER_ANCHORS", "First Name,Submitted Date"))
)

# ---------------------------------------------------------------------------
# HTTP service
# ---------------------------------------------------------------------------

API_HOST = os.getenv("API_HOST", "127.0.0.1").strip()
API_PORT = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS: List[str] = _split_env_list(os.getenv("CORS_ORIGINS", "http://localhost:3000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
