"""曲データ(songdata.js)読み込みのテスト。"""

from __future__ import annotations

from pathlib import Path

import pytest

from tiercharts.song_index import load_song_index, parse_song_index


@pytest.mark.light
def test_parse_song_index_from_fixture(song_data_js: str):
    """song_id をキーに曲名・別名・レーティングが取り込まれることを確認する。"""
    index = parse_song_index(song_data_js)

    assert len(index) == 3
    endymion = index["PO9Pl1q896bDDl89qQb98D80DQoPio1I"]
    assert endymion.song_name == "ENDYMION"
    assert endymion.romanized_name is None
    assert endymion.ratings[4] == 19
    assert endymion.tiers[4] == 0.7

    nageki = index["9i0q91lPPiO61b9P891O1i86iOP1I08O"]
    assert nageki.romanized_name == "Nageki no Ki"
    assert nageki.alternate_name == "Tree of Lament"

    assert index["b6Ibl1dQ8ObDdqiO0IbQQOi6I1q9P06d"].ratings is None


@pytest.mark.light
def test_duplicate_song_id_last_write_wins():
    js = 'var ALL_SONG_DATA=[{"song_id":"x","song_name":"Old"},{"song_id":"x","song_name":"New"}];'
    index = parse_song_index(js)
    assert index["x"].song_name == "New"


@pytest.mark.light
def test_parse_failures_return_empty_index():
    """パターン不一致・JSON不正・配列以外の場合は空の辞書を返すことを確認する。"""
    assert parse_song_index("console.log('no data');") == {}
    assert parse_song_index("var ALL_SONG_DATA=[{broken}];") == {}
    assert parse_song_index('var ALL_SONG_DATA={"a":1};') == {}


@pytest.mark.light
def test_load_song_index_missing_file_returns_empty(tmp_path: Path):
    assert load_song_index(tmp_path / "songdata.js") == {}


@pytest.mark.light
def test_load_song_index_reads_file(tmp_path: Path, song_data_js: str):
    path = tmp_path / "songdata.js"
    path.write_text(song_data_js, encoding="utf-8")
    assert "PO9Pl1q896bDDl89qQb98D80DQoPio1I" in load_song_index(path)
