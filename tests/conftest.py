from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiercharts.config import Settings, SpreadsheetConfig

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


def _difficulty_page(raw_metadata: str, difficulty_list: str) -> str:
    """rawMetadata / difficultyList を埋め込んだ難易度リストページHTMLを作る。"""
    return f"""<!DOCTYPE html>
<html>
<head><title>difficulty list</title></head>
<body>
<div id="list"></div>
<script>
  let rawMetadata = {raw_metadata};
  let difficultyList = {difficulty_list};
  renderList(rawMetadata, difficultyList);
</script>
</body>
</html>
"""


@pytest.fixture
def fixture_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def difficulty_page_html() -> str:
    return (FIXTURE_DIR / "difficulty_list_18.html").read_text(encoding="utf-8")


@pytest.fixture
def song_data_js() -> str:
    return (FIXTURE_DIR / "songdata.js").read_text(encoding="utf-8")


@pytest.fixture
def make_page():
    """rawMetadata / difficultyList のJSONテキストからページHTMLを作る関数を返す。"""
    return _difficulty_page


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """tmp_path 配下を data_dir / output_dir とするテスト用設定。"""
    return Settings(
        data_dir=tmp_path / "data",
        output_dir=tmp_path / "output",
        song_data_url="http://localhost/songdata.js",
        song_data_name="songdata.js",
        difficulty_list_url="http://localhost/difficulty_list/{level}",
        additional_csv_name="additional.csv",
        output_csv_name="charts.csv",
        dashboard_html_name="dashboard.html",
        request_timeout=5,
        log_level="INFO",
        spreadsheet=SpreadsheetConfig(spreadsheet_id="sheet", gid="0"),
    )
