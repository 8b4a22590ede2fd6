from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from survey_dashboard.config import HEADER_ANCHORS

Record = Dict[str, str]

QUOTE = '"'


class CSVNormalizerError(Exception):
    """Raised when raw survey text cannot be turned into records."""


class HeaderNotFoundError(CSVNormalizerError):
    """Raised when no row in the export contains a header anchor cell."""


def clean_cell(value: Optional[str]) -> str:
    """
    Trim a cell the way the dashboard expects.

    Quoting is removed once, by the csv reader (enclosing pair plus doubled
    quote escapes). After trimming, a lone unmatched leading or trailing
    quote mark left in an unquoted field is dropped; a balanced pair is the
    cell's own content and stays, so a tripled-quote field keeps exactly one
    pair of quote marks around its text.
    """
    if value is None:
        return ""
    s = str(value).strip()
    if s == QUOTE:
        return ""
    starts, ends = s.startswith(QUOTE), s.endswith(QUOTE)
    if starts and not ends:
        s = s[1:]
    elif ends and not starts:
        s = s[:-1]
    return s.strip()


def _split_rows(raw_text: str) -> List[List[str]]:
    if raw_text.startswith("\ufeff"):
        raw_text = raw_text[1:]
    reader = csv.reader(
        io.StringIO(raw_text, newline=""),
        delimiter=",",
        quotechar=QUOTE,
        skipinitialspace=True,
    )
    return [row for row in reader]


def find_header_index(rows: Sequence[Sequence[str]], anchors: Iterable[str] = HEADER_ANCHORS) -> int:
    """
    Index of the first row containing an anchor cell.

    Raises HeaderNotFoundError if no row qualifies.
    """
    anchor_set = {a for a in anchors if a}
    for idx, row in enumerate(rows):
        if any(clean_cell(cell) in anchor_set for cell in row):
            return idx
    raise HeaderNotFoundError(
        f"Could not find header row (looked for any of {sorted(anchor_set)})"
    )


def _is_blank(row: Sequence[str]) -> bool:
    return not any(clean_cell(cell) for cell in row)


def _row_to_record(headers: List[str], row: Sequence[str]) -> Record:
    record: Record = {}
    for i, header in enumerate(headers):
        record[header] = clean_cell(row[i]) if i < len(row) else ""
    return record


def normalize(raw_text: str, anchors: Iterable[str] = HEADER_ANCHORS) -> List[Record]:
    """
    Convert a raw survey export into one record per respondent.

    Steps:
      - skip preamble rows until the first row holding an anchor value
      - header names are that row's cleaned cells
      - every later row with at least one non-blank cell becomes a record
      - short rows are padded with "" and extra cells are ignored

    Output order matches the file. Depends on nothing but its arguments.
    """
    rows = _split_rows(raw_text)
    header_idx = find_header_index(rows, anchors)
    headers = [clean_cell(h) for h in rows[header_idx]]

    records: List[Record] = []
    for row in rows[header_idx + 1:]:
        if _is_blank(row):
            continue
        records.append(_row_to_record(headers, row))
    return records


def records_to_frame(records: List[Record]) -> pd.DataFrame:
    """DataFrame view of normalized records (all columns str, header order)."""
    if not records:
        return pd.DataFrame()
    columns = list(records[0].keys())
    return pd.DataFrame.from_records(records, columns=columns).astype(str)
