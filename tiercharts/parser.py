"""
難易度リストページのHTMLパーサ。

3icecream の difficulty_list ページHTMLから、<script> 内に埋め込まれた
rawMetadata（譜面一覧）と difficultyList（譜面ごとの tier / rating）を取り出し、
RawChartEntry / DifficultyStat へ変換する責務を持つ。

想定仕様:
- `let rawMetadata = [...]` は {song_id, difficulty, youtube_id} の配列
- `let difficultyList = {...}` は "songId/difficultyCode" -> {tier, rating} のマップ
- どちらかが見つからない、またはJSONとして不正な場合はそのHTML全体をエラーとする
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Tuple

from bs4 import BeautifulSoup

from tiercharts.embedded_json import extract_json_literal
from tiercharts.errors import ValidationError
from tiercharts.models import DifficultyStat, RawChartEntry

LOGGER = logging.getLogger(__name__)

RAW_METADATA_VARNAME = "rawMetadata"
DIFFICULTY_LIST_VARNAME = "difficultyList"


def _script_text(html: str) -> str:
    """
    HTML内の <script> 要素の本文を連結して返す。

    <script> が1つも無い場合はHTML全体を返す。

    Args:
        html: 対象ページのHTML文字列。

    Returns:
        抽出対象のテキスト。
    """
    soup = BeautifulSoup(html, "html.parser")
    bodies = [script.string for script in soup.find_all("script") if script.string]
    if not bodies:
        return html
    return "\n".join(bodies)


def _to_raw_entry(item: Any) -> RawChartEntry | None:
    if not isinstance(item, dict) or not item.get("song_id"):
        return None
    try:
        difficulty = int(item["difficulty"])
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
    youtube_id = item.get("youtube_id")
    return RawChartEntry(
        song_id=str(item["song_id"]),
        difficulty=difficulty,
        youtube_id=str(youtube_id) if youtube_id else None,
    )


def _to_stat(item: Any) -> DifficultyStat | None:
    if not isinstance(item, dict):
        return None
    try:
        tier = float(item["tier"])
        rating = float(item["rating"])
    except (KeyError, TypeError, ValueError, OverflowError):
        return None
    if not (math.isfinite(tier) and math.isfinite(rating)):
        return None
    return DifficultyStat(tier=tier, rating=rating)


def extract_chart_page(html: str) -> Tuple[List[RawChartEntry], Dict[str, DifficultyStat]]:
    """
    難易度リストページHTMLから譜面一覧と tier / rating マップを抽出する。

    形式不正な個々の要素は警告を出して読み飛ばす。

    Args:
        html: 対象ページのHTML文字列。

    Returns:
        (RawChartEntry のリスト, "songId/difficultyCode" -> DifficultyStat の辞書)。

    Raises:
        EmbeddedDataNotFoundError: rawMetadata / difficultyList のいずれかが見つからない場合。
        ValidationError: JSONとして不正、または配列/オブジェクトの形でない場合。
    """
    text = _script_text(html)

    raw_metadata = extract_json_literal(text, RAW_METADATA_VARNAME)
    if not isinstance(raw_metadata, list):
        raise ValidationError(f"{RAW_METADATA_VARNAME} is not an array")

    difficulty_list = extract_json_literal(text, DIFFICULTY_LIST_VARNAME)
    if not isinstance(difficulty_list, dict):
        raise ValidationError(f"{DIFFICULTY_LIST_VARNAME} is not an object")

    entries: List[RawChartEntry] = []
    for item in raw_metadata:
        entry = _to_raw_entry(item)
        if entry is None:
            LOGGER.warning("Skipping malformed rawMetadata entry: %r", item)
            continue
        entries.append(entry)

    stats: Dict[str, DifficultyStat] = {}
    for key, item in difficulty_list.items():
        stat = _to_stat(item)
        if stat is None:
            LOGGER.warning("Skipping malformed difficultyList entry %s: %r", key, item)
            continue
        stats[str(key)] = stat

    return entries, stats
