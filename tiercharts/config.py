"""
設定ファイル(settings.yaml)の読み込み処理を提供するモジュール。

settings.yaml から譜面リスト生成・ダッシュボード出力に必要な各種設定を読み込み、
アプリ内で扱いやすい dataclass に変換する。

data_dir / output_dir はカレントディレクトリではなく settings.yaml の
配置ディレクトリ（または base_dir 引数）を基準に解決する。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

DEFAULT_SONG_DATA_URL = "https://3icecream.com/js/songdata.js"
DEFAULT_DIFFICULTY_LIST_URL = "https://3icecream.com/difficulty_list/{level}"


@dataclass(frozen=True)
class SpreadsheetConfig:
    """
    ダッシュボード用の公開スプレッドシート設定。

    Attributes:
        spreadsheet_id: Google スプレッドシートのドキュメントID。
        gid: 対象シートのgid。
    """

    spreadsheet_id: str
    gid: str


@dataclass(frozen=True)
class Settings:
    """
    アプリケーション全体設定。

    Attributes:
        data_dir: 取得したHTML/JSおよび additional.csv を置くディレクトリ。
        output_dir: charts.csv / dashboard.html の出力先ディレクトリ。
        song_data_url: 曲データJS(songdata.js)のURL。
        song_data_name: data_dir 内の曲データJSファイル名。
        difficulty_list_url: 難易度別リストページのURLテンプレート（{level} を置換）。
        additional_csv_name: 手動管理の追加譜面CSVファイル名。
        output_csv_name: 出力CSVファイル名。
        dashboard_html_name: ダッシュボードHTMLファイル名。
        request_timeout: HTTPタイムアウト秒。
        log_level: logging のレベル名。
        spreadsheet: 公開スプレッドシート設定。
    """

    data_dir: Path
    output_dir: Path
    song_data_url: str
    song_data_name: str
    difficulty_list_url: str
    additional_csv_name: str
    output_csv_name: str
    dashboard_html_name: str
    request_timeout: int
    log_level: str
    spreadsheet: SpreadsheetConfig

    @property
    def song_data_path(self) -> Path:
        return self.data_dir / self.song_data_name

    @property
    def additional_csv_path(self) -> Path:
        return self.data_dir / self.additional_csv_name

    @property
    def output_csv_path(self) -> Path:
        return self.output_dir / self.output_csv_name

    @property
    def dashboard_html_path(self) -> Path:
        return self.output_dir / self.dashboard_html_name


def _resolve_dir(value: Union[str, Path], base_dir: Path) -> Path:
    """相対パスを base_dir 基準の絶対パスへ変換する。"""
    path = Path(value)
    if not path.is_absolute():
        path = base_dir / path
    return path


def load_settings(path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None) -> Settings:
    """
    settings.yaml を読み込み Settings に変換する。

    Args:
        path: settings.yaml のファイルパス。
        base_dir: 相対パス解決の基準ディレクトリ。省略時は settings.yaml の親ディレクトリ。

    Returns:
        Settingsオブジェクト。

    Raises:
        FileNotFoundError: 設定ファイルが存在しない場合。
        KeyError: 必須キー(spreadsheet.id / spreadsheet.gid)が存在しない場合。
        yaml.YAMLError: YAMLのパースに失敗した場合。
        ValueError: request_timeout のint変換に失敗した場合。
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    base = Path(base_dir) if base_dir is not None else path.resolve().parent
    sheet_data = data.get("spreadsheet") or {}

    return Settings(
        data_dir=_resolve_dir(data.get("data_dir", "data"), base),
        output_dir=_resolve_dir(data.get("output_dir", "output"), base),
        song_data_url=str(data.get("song_data_url", DEFAULT_SONG_DATA_URL)),
        song_data_name=str(data.get("song_data_name", "songdata.js")),
        difficulty_list_url=str(data.get("difficulty_list_url", DEFAULT_DIFFICULTY_LIST_URL)),
        additional_csv_name=str(data.get("additional_csv_name", "additional.csv")),
        output_csv_name=str(data.get("output_csv_name", "charts.csv")),
        dashboard_html_name=str(data.get("dashboard_html_name", "dashboard.html")),
        request_timeout=int(data.get("request_timeout", 30)),
        log_level=str(data.get("log_level", "INFO")).upper(),
        spreadsheet=SpreadsheetConfig(
            spreadsheet_id=str(sheet_data["id"]).strip(),
            gid=str(sheet_data["gid"]).strip(),
        ),
    )
