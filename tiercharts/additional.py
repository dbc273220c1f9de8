"""
手動管理の追加譜面CSV(additional.csv)の読み込み処理。

3icecream に掲載されていない譜面を `id,title,difficulty,rating,tier[,youtubeURL]`
の列順で記述したCSVを読み込み、Chart へ変換する。

例外方針:
- 列数不足・難易度不正・数値不正(nan, inf を含む)の行は警告を出して読み飛ばす
- ファイル自体が無い場合は何もしない
- ファイルの読み込みに失敗した場合はログを出して空のリストを返す
"""

from __future__ import annotations

import csv
import io
import math
import logging
from pathlib import Path
from typing import List, Union

from tiercharts.models import VALID_DIFFICULTIES, Chart

LOGGER = logging.getLogger(__name__)

MIN_FIELDS = 5


def parse_additional_csv(text: str) -> List[Chart]:
    """
    追加譜面CSVのテキストを Chart のリストへ変換する。

    フィールドはダブルクォートによるクォート・"" によるエスケープに対応する。
    空行は無視する。

    Args:
        text: CSVテキスト。

    Returns:
        CSVの行順に並んだ Chart のリスト。
    """
    charts: List[Chart] = []
    reader = csv.reader(io.StringIO(text.strip()))
    for fields in reader:
        if not fields or all(not f.strip() for f in fields):
            continue

        if len(fields) < MIN_FIELDS:
            LOGGER.warning("Skipping invalid line (line %d): %s", reader.line_num, ",".join(fields))
            continue

        chart_id, title, difficulty, rating, tier = (f.strip() for f in fields[:MIN_FIELDS])
        youtube_url = fields[5].strip() if len(fields) > MIN_FIELDS else ""

        if difficulty not in VALID_DIFFICULTIES:
            LOGGER.warning("Skipping chart with invalid difficulty: %s (line %d)", difficulty, reader.line_num)
            continue

        try:
            rating_value = float(rating)
            tier_value = float(tier)
        except ValueError:
            rating_value = tier_value = math.nan

        if not (math.isfinite(rating_value) and math.isfinite(tier_value)):
            LOGGER.warning(
                "Skipping chart with invalid rating/tier: %s / %s (line %d)",
                rating,
                tier,
                reader.line_num,
            )
            continue

        charts.append(
            Chart(
                id=chart_id,
                title=title,
                difficulty=difficulty,
                rating=rating_value,
                tier=tier_value,
                youtube_url=youtube_url,
            )
        )

    return charts


def load_additional_charts(path: Union[str, Path]) -> List[Chart]:
    """
    additional.csv を読み込み Chart のリストを返す。

    Args:
        path: additional.csv のパス。

    Returns:
        Chart のリスト。ファイルが無い・読めない場合は空のリスト。
    """
    path = Path(path)
    if not path.exists():
        LOGGER.info("No %s found, skipping additional charts", path.name)
        return []

    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.error("Error loading %s: %s", path, exc)
        return []

    charts = parse_additional_csv(text)
    LOGGER.info("Added %d additional charts from %s", len(charts), path.name)
    return charts
