"""
曲データ(songdata.js)の読み込み処理。

`var ALL_SONG_DATA=[...]` に埋め込まれた曲情報配列を song_id をキーとした辞書へ変換する。

曲データはあくまで補助情報のため、ファイル欠落・パース失敗時は空の辞書を返し、
下流では song_id をタイトルとして扱う。本モジュールから例外は送出しない。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from tiercharts.embedded_json import extract_json_literal
from tiercharts.errors import TierChartsError
from tiercharts.models import SongIndexEntry

LOGGER = logging.getLogger(__name__)

SONG_DATA_VARNAME = "ALL_SONG_DATA"

SongIndex = Dict[str, SongIndexEntry]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    return s if s else None


def _optional_numbers(value: Any) -> Optional[Tuple[Optional[float], ...]]:
    if not isinstance(value, list):
        return None
    return tuple(v if isinstance(v, (int, float)) and not isinstance(v, bool) else None for v in value)


def _to_entry(item: dict) -> SongIndexEntry:
    return SongIndexEntry(
        song_id=str(item["song_id"]),
        song_name=str(item.get("song_name") or item["song_id"]),
        romanized_name=_optional_str(item.get("romanized_name")),
        alternate_name=_optional_str(item.get("alternate_name")),
        ratings=_optional_numbers(item.get("ratings")),
        tiers=_optional_numbers(item.get("tiers")),
    )


def parse_song_index(js_text: str) -> SongIndex:
    """
    songdata.js のテキストから曲インデックスを作成する。

    song_id が重複した場合は後勝ちとする。
    song_id を持たない要素は読み飛ばす。

    Args:
        js_text: songdata.js の内容。

    Returns:
        song_id -> SongIndexEntry の辞書。パースできない場合は空の辞書。
    """
    try:
        items = extract_json_literal(js_text, SONG_DATA_VARNAME)
    except TierChartsError as exc:
        LOGGER.warning("Could not parse song data, falling back to song_id titles: %s", exc)
        return {}

    if not isinstance(items, list):
        LOGGER.warning("%s is not an array, falling back to song_id titles", SONG_DATA_VARNAME)
        return {}

    index: SongIndex = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("song_id"):
            continue
        entry = _to_entry(item)
        index[entry.song_id] = entry

    return index


def load_song_index(path: Union[str, Path]) -> SongIndex:
    """
    songdata.js ファイルを読み込み、曲インデックスを返す。

    Args:
        path: songdata.js のパス。

    Returns:
        song_id -> SongIndexEntry の辞書。ファイルが無い・読めない場合は空の辞書。
    """
    path = Path(path)
    if not path.exists():
        LOGGER.warning("%s not found. Song titles will use song_id as fallback.", path)
        return {}

    try:
        js_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Error reading %s: %s", path, exc)
        return {}

    index = parse_song_index(js_text)
    LOGGER.info("Loaded %d songs from %s", len(index), path.name)
    return index
