from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from survey_dashboard import config
from survey_dashboard.core.csv_normalizer import Record, normalize

logger = logging.getLogger(__name__)


class SurveyLoaderError(Exception):
    """Raised when a survey export cannot be located or read."""


class InvalidTypeError(SurveyLoaderError):
    """Raised when the requested survey type is not one of the accepted literals."""


class SurveyIOError(SurveyLoaderError):
    """Raised when the underlying export is unreadable (disk or HTTP mirror)."""


def _build_retry_session() -> requests.Session:
    """
    Build a requests Session with conservative retries.
    Only used when the exports are served from SURVEY_SOURCE_BASE_URL.
    """
    session = requests.Session()

    retry = Retry(
        total=3,
        connect=3,
        read=3,
        status=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_retry_session()
    return _SESSION


def resolve_survey_filename(survey_type: Optional[str]) -> str:
    if not survey_type or survey_type not in config.SURVEY_FILES:
        raise InvalidTypeError(
            f"Invalid survey type {survey_type!r}; expected one of {sorted(config.SURVEY_FILES)}"
        )
    return config.SURVEY_FILES[survey_type]


def resolve_survey_path(survey_type: Optional[str], data_dir: Optional[Path] = None) -> Path:
    filename = resolve_survey_filename(survey_type)
    base = Path(data_dir) if data_dir is not None else config.SURVEY_DATA_DIR
    return base / filename


def _fetch_remote_text(base_url: str, filename: str) -> str:
    url = f"{base_url.rstrip('/')}/{quote(filename)}"
    logger.info("Fetching survey export from %s", url)
    try:
        resp = _get_session().get(url, timeout=config.SURVEY_SOURCE_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise SurveyIOError(f"HTTP error while fetching {url}: {exc}") from exc

    if resp.status_code != 200:
        preview = (resp.text or "")[:200]
        raise SurveyIOError(f"Unexpected status {resp.status_code} for {url}. Preview: {preview}")

    resp.encoding = resp.encoding or "utf-8"
    return resp.text


def read_survey_text(survey_type: Optional[str], data_dir: Optional[Path] = None) -> str:
    """
    Raw text of the export for `survey_type`.

    Reads from SURVEY_SOURCE_BASE_URL when configured (and no explicit
    data_dir is given), otherwise from disk.
    """
    filename = resolve_survey_filename(survey_type)

    if config.SURVEY_SOURCE_BASE_URL and data_dir is None:
        return _fetch_remote_text(config.SURVEY_SOURCE_BASE_URL, filename)

    path = resolve_survey_path(survey_type, data_dir)
    logger.info("Reading survey export from %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SurveyIOError(f"Could not read survey export {path}: {exc}") from exc


def load_survey_records(survey_type: Optional[str], data_dir: Optional[Path] = None) -> List[Record]:
    """
    Load and normalize one survey export.

    Every call reads a fresh copy; nothing is cached between requests, so
    switching survey type always replaces the previous data.
    """
    text = read_survey_text(survey_type, data_dir)
    records = normalize(text, config.HEADER_ANCHORS)
    logger.info("Survey %s: %d records after normalization", survey_type, len(records))
    return records


def timed_load_survey_records(
    survey_type: Optional[str],
    data_dir: Optional[Path] = None,
) -> Tuple[List[Record], float]:
    """
    Convenience helper for timing logs.
    """
    t0 = time.perf_counter()
    records = load_survey_records(survey_type, data_dir)
    return records, (time.perf_counter() - t0)
