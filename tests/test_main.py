"""main.py のサブコマンドのテスト。"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
import requests

import main
from tiercharts import spreadsheet


def _write_settings(tmp_path: Path) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(
        "data_dir: data\n"
        "output_dir: output\n"
        "difficulty_list_url: http://localhost/difficulty_list/{level}\n"
        "song_data_url: http://localhost/songdata.js\n"
        "spreadsheet:\n"
        "  id: doc\n"
        "  gid: '0'\n",
        encoding="utf-8",
    )
    return path


@pytest.mark.light
def test_fetch_without_difficulty_fails_before_network(monkeypatch, tmp_path: Path):
    """DIFFICULTY 未設定時は通信せずに終了コード1で終わることを確認する。"""
    monkeypatch.delenv("DIFFICULTY", raising=False)

    def _fail(*args, **kwargs):
        raise AssertionError("network must not be touched")

    monkeypatch.setattr(requests, "get", _fail)
    assert main.main(["--settings", str(_write_settings(tmp_path)), "fetch"]) == 1


@pytest.mark.light
def test_build_writes_charts_csv(tmp_path: Path, fixture_dir: Path):
    settings_path = _write_settings(tmp_path)
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    shutil.copy(fixture_dir / "difficulty_list_18.html", data_dir / "18.html")

    assert main.main(["--settings", str(settings_path), "build"]) == 0

    lines = (tmp_path / "output" / "charts.csv").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    # 曲データが無いので song_id がタイトルになる
    assert lines[1].startswith("PO9Pl1q896bDDl89qQb98D80DQoPio1I,PO9Pl1q896bDDl89qQb98D80DQoPio1I,0 ESP,18,")


@pytest.mark.light
def test_build_without_data_dir_returns_error(tmp_path: Path):
    assert main.main(["--settings", str(_write_settings(tmp_path)), "build"]) == 1


@pytest.mark.light
def test_dashboard_writes_filtered_html(monkeypatch, tmp_path: Path):
    class _Response:
        ok = True
        status_code = 200
        reason = "OK"
        encoding = None
        text = "ID,Title,Tier,Difficulty,Score\na,Alpha,1,ESP,900000\nb,Beta,-1,CSP,0\nc,Gamma,3,BSP,0\n"

    monkeypatch.setattr(spreadsheet.requests, "get", lambda url, timeout: _Response())

    code = main.main(
        ["--settings", str(_write_settings(tmp_path)), "dashboard", "--sort", "tier", "--desc"]
    )

    assert code == 0
    html = (tmp_path / "output" / "dashboard.html").read_text(encoding="utf-8")
    assert "Parsed 3 charts / showing 2" in html
    assert html.index("banners/c.jpg") < html.index("banners/a.jpg")
    assert "banners/b.jpg" not in html
