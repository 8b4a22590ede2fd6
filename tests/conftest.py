"""Shared fixtures: small survey exports written to a temporary data dir."""

import pytest

from survey_dashboard import config


OPENING_CSV = """Black History Retreat Survey (Opening Survey)
"Exported on 2024-02-01"

"Submitted Date","First Name","Last Name","Organization","Response ID","The sessions were engaging","The venue was accessible","Title"
"2024-01-01","Jane","Doe","Acme","1","Strongly Agree","Agree","Strongly Agree"
"2024-01-02","Sam","Lee","Acme","2","Strongly Agree","Disagree","Agree"
,,,,,,,
"2024-01-03","Ana","Ruiz","Beta","3","Agree","Strongly Agree","Agree"
"2024-01-04","Kim","Park","Beta","4","","Disagree","Agree"
"""

NO_QUESTIONS_CSV = """"Submitted Date","First Name","Comments"
"2024-01-01","Jane","Great event"
"""


@pytest.fixture
def survey_dir(tmp_path, monkeypatch):
    """Data dir holding an opening export and a closing export with no Likert columns."""
    (tmp_path / config.SURVEY_FILES["opening"]).write_text(OPENING_CSV, encoding="utf-8")
    (tmp_path / config.SURVEY_FILES["closing"]).write_text(NO_QUESTIONS_CSV, encoding="utf-8")
    monkeypatch.setattr(config, "SURVEY_DATA_DIR", tmp_path)
    monkeypatch.setattr(config, "SURVEY_SOURCE_BASE_URL", "")
    return tmp_path


@pytest.fixture
def opening_csv():
    return OPENING_CSV
