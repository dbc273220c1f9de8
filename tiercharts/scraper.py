"""
スクレイピング処理。

指定されたURLからHTML/JSを取得し、data_dir へ保存する責務を持つ。
埋め込みデータの解析は parser.py / song_index.py 側で行い、本モジュールは通信と保存のみを担当する。

例外方針:
- requests 由来の例外は ScrapeError に変換して上位へ伝播する。
- 曲データ(songdata.js)の取得失敗は致命的とせず、ログを出して続行する。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import requests

from tiercharts.config import Settings
from tiercharts.errors import PreconditionError, ScrapeError

LOGGER = logging.getLogger(__name__)

MIN_DIFFICULTY_LEVEL = 1
MAX_DIFFICULTY_LEVEL = 19


def fetch_text(url: str, timeout: int = 30) -> str:
    """
    指定URLへHTTP GETを行い、レスポンス本文を返す。

    Args:
        url: 取得対象URL。
        timeout: requests.get に渡すタイムアウト秒。

    Returns:
        レスポンス本文の文字列。

    Raises:
        ScrapeError: HTTPエラーや通信失敗が発生した場合。
    """
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        r.encoding = r.encoding or r.apparent_encoding
        return r.text
    except requests.RequestException as e:
        raise ScrapeError(f"HTTP fetch failed: {url} ({e})") from e


def parse_difficulty_level(value: Optional[str]) -> int:
    """
    環境変数 DIFFICULTY の値を検証し、難易度レベル(1-19)を返す。

    Raises:
        PreconditionError: 未設定・整数でない・範囲外の場合。
    """
    if value is None or not value.strip():
        raise PreconditionError(
            "DIFFICULTY environment variable is not set (usage: DIFFICULTY=<1-19> python main.py fetch)"
        )

    try:
        level = int(value.strip())
    except ValueError as e:
        raise PreconditionError(f"DIFFICULTY must be a number between 1 and 19: {value!r}") from e

    if not MIN_DIFFICULTY_LEVEL <= level <= MAX_DIFFICULTY_LEVEL:
        raise PreconditionError(f"DIFFICULTY must be a number between 1 and 19: {level}")

    return level


def difficulty_level_from_env() -> int:
    """環境変数 DIFFICULTY から難易度レベルを読み取る。"""
    return parse_difficulty_level(os.environ.get("DIFFICULTY"))


def _save_text(path: Path, text: str) -> None:
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Created directory: %s", path.parent)
    path.write_text(text, encoding="utf-8")


def fetch_song_data(settings: Settings) -> Optional[Path]:
    """
    曲データ(songdata.js)を取得して data_dir に保存する。

    既にファイルが存在する場合はダウンロードしない。
    取得に失敗した場合はログを出して None を返す。

    Returns:
        保存済みファイルのパス。取得できなかった場合は None。
    """
    path = settings.song_data_path
    if path.exists():
        LOGGER.info("%s already exists, skipping download", path.name)
        return path

    LOGGER.info("Fetching %s...", settings.song_data_url)
    try:
        text = fetch_text(settings.song_data_url, timeout=settings.request_timeout)
        _save_text(path, text)
    except (ScrapeError, OSError) as exc:
        LOGGER.error("Error fetching %s: %s", path.name, exc)
        LOGGER.error("Continuing with difficulty list fetch...")
        return None

    LOGGER.info("Successfully saved %s (%d bytes)", path, len(text))
    return path


def fetch_difficulty_page(settings: Settings, level: int) -> Path:
    """
    難易度リストページを取得し data_dir/<level>.html として保存する。

    Args:
        settings: アプリケーション設定。
        level: 難易度レベル(1-19)。

    Returns:
        保存したHTMLファイルのパス。

    Raises:
        ScrapeError: 取得に失敗した場合。
    """
    url = settings.difficulty_list_url.format(level=level)
    LOGGER.info("Fetching %s...", url)
    html = fetch_text(url, timeout=settings.request_timeout)
    LOGGER.info("Successfully fetched %d bytes", len(html))

    path = settings.data_dir / f"{level}.html"
    _save_text(path, html)
    LOGGER.info("Successfully saved to %s", path)
    return path
