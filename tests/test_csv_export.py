"""譜面リストCSV出力のテスト。"""

from __future__ import annotations

import csv
import io
from pathlib import Path

import pytest

from tiercharts.exporter import CSV_HEADER, charts_to_csv, export_charts_csv, format_value
from tiercharts.models import Chart


@pytest.mark.light
def test_field_with_comma_and_quote_is_escaped_and_recovered():
    """`a,b"c` が `"a,b""c"` と出力され、CSVパーサで元に戻ることを確認する。"""
    chart = Chart(id="x", title='a,b"c', difficulty="0 ESP", rating=17, tier=1.5, youtube_url="")
    text = charts_to_csv([chart])

    lines = text.splitlines()
    assert lines[0] == "ID,Title,Difficulty,Rating,Tier,YouTube URL"
    assert lines[1] == 'x,"a,b""c",0 ESP,17,1.5,'

    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][1] == 'a,b"c'


@pytest.mark.light
def test_field_with_newline_is_quoted():
    chart = Chart(id="x", title="line1\nline2", difficulty="0 ESP", rating=17, tier=1)
    text = charts_to_csv([chart])
    assert '"line1\nline2"' in text
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][1] == "line1\nline2"


@pytest.mark.light
def test_format_value_drops_integral_fraction():
    assert format_value(19.0) == "19"
    assert format_value(0.7) == "0.7"
    assert format_value(-1.0) == "-1"
    assert format_value(18) == "18"
    assert format_value("abc") == "abc"


@pytest.mark.light
def test_export_creates_directory_and_keeps_order(tmp_path: Path):
    """出力ディレクトリを作成し、入力順のまま書き出すことを確認する。"""
    charts = [
        Chart(id="b", title="B", difficulty="1 CDP", rating=18, tier=2),
        Chart(id="a", title="A", difficulty="0 bSP", rating=3, tier=1),
        Chart(id="b", title="B", difficulty="1 CDP", rating=18, tier=2),
    ]
    output_dir = tmp_path / "nested" / "output"

    path = export_charts_csv(charts, output_dir, "charts.csv")

    assert path == output_dir / "charts.csv"
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == CSV_HEADER
    assert [r[0] for r in rows[1:]] == ["b", "a", "b"]


@pytest.mark.light
def test_export_overwrites_existing_file(tmp_path: Path):
    (tmp_path / "charts.csv").write_text("old content\n" * 10, encoding="utf-8")
    export_charts_csv([], tmp_path)
    assert (tmp_path / "charts.csv").read_text(encoding="utf-8") == "ID,Title,Difficulty,Rating,Tier,YouTube URL\n"
