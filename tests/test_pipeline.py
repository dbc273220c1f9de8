"""data_dir から charts.csv を生成する一連の処理のテスト。"""

from __future__ import annotations

import csv
import shutil
from pathlib import Path

import pytest

from tiercharts.errors import PreconditionError
from tiercharts.pipeline import build_chart_collection, run_build


@pytest.mark.light
def test_overlapping_songs_across_files_are_not_deduplicated(tmp_path: Path, make_page):
    """同じ song_id を含む2ファイルから、それぞれ独立した行が作られることを確認する。"""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "17.html").write_text(
        make_page(
            '[{"song_id":"shared","difficulty":3,"youtube_id":null},{"song_id":"only17","difficulty":2,"youtube_id":null}]',
            '{"shared/3":{"tier":1,"rating":17},"only17/2":{"tier":2,"rating":17}}',
        ),
        encoding="utf-8",
    )
    (data_dir / "18.html").write_text(
        make_page(
            '[{"song_id":"shared","difficulty":4,"youtube_id":"vid"}]',
            '{"shared/4":{"tier":3,"rating":18}}',
        ),
        encoding="utf-8",
    )

    charts, stats = build_chart_collection(data_dir)

    assert [(c.id, c.difficulty) for c in charts] == [
        ("shared", "0 ESP"),
        ("only17", "0 DSP"),
        ("shared", "0 CSP"),
    ]
    assert stats["html_files"] == 2
    assert stats["html_failed"] == []
    assert stats["additional"] == 0


@pytest.mark.light
def test_broken_file_is_skipped_and_others_continue(tmp_path: Path, make_page):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "1.html").write_text("<html><body>maintenance</body></html>", encoding="utf-8")
    (data_dir / "2.html").write_text(
        make_page('[{"song_id":"a","difficulty":1,"youtube_id":null}]', '{"a/1":{"tier":1,"rating":2}}'),
        encoding="utf-8",
    )

    charts, stats = build_chart_collection(data_dir)

    assert [c.id for c in charts] == ["a"]
    assert stats["html_failed"] == ["1.html"]


@pytest.mark.light
def test_unconvertible_record_does_not_abort_other_files(tmp_path: Path, make_page):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "1.html").write_text(
        make_page('[{"song_id":"a","difficulty":1e999}]', "{}"),
        encoding="utf-8",
    )
    (data_dir / "2.html").write_text(
        make_page('[{"song_id":"b","difficulty":1,"youtube_id":null}]', '{"b/1":{"tier":1,"rating":2}}'),
        encoding="utf-8",
    )

    charts, stats = build_chart_collection(data_dir)

    assert [c.id for c in charts] == ["b"]
    assert stats["html_failed"] == []


@pytest.mark.light
def test_missing_data_dir_is_fatal(tmp_path: Path):
    with pytest.raises(PreconditionError):
        build_chart_collection(tmp_path / "data")


@pytest.mark.light
def test_no_html_files_is_fatal(tmp_path: Path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "additional.csv").write_text("a,A,0 ESP,17,1\n", encoding="utf-8")
    with pytest.raises(PreconditionError):
        build_chart_collection(data_dir)


@pytest.mark.light
def test_run_build_with_fixtures(settings, fixture_dir: Path):
    """fixture 一式から charts.csv を生成し、HTML由来の行の後に追加CSVの行が並ぶことを確認する。"""
    settings.data_dir.mkdir()
    shutil.copy(fixture_dir / "difficulty_list_18.html", settings.data_dir / "18.html")
    shutil.copy(fixture_dir / "songdata.js", settings.data_dir / "songdata.js")
    shutil.copy(fixture_dir / "additional.csv", settings.data_dir / "additional.csv")

    result = run_build(settings)

    assert result["charts"] == 6
    assert result["reconciled"] == 3
    assert result["additional"] == 3
    assert Path(result["output_path"]) == settings.output_csv_path

    with settings.output_csv_path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))

    assert rows[0] == ["ID", "Title", "Difficulty", "Rating", "Tier", "YouTube URL"]
    assert rows[1] == [
        "PO9Pl1q896bDDl89qQb98D80DQoPio1I",
        "ENDYMION",
        "0 ESP",
        "17",
        "2.5",
        "https://www.youtube.com/watch?v=cnTky49oBVA",
    ]
    assert rows[2][1] == "嘆きの樹 (Nageki no Ki/Tree of Lament)"
    assert [r[0] for r in rows[4:]] == ["chartA", "chartB", "chartC"]
    assert rows[5][1] == "Title, With Comma"
