"""
譜面リストのCSV出力処理。

Chart のリストをヘッダ付きCSVへ書き出す。並び替えは行わず、入力順をそのまま出力する。
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, List, Union

from tiercharts.models import Chart

LOGGER = logging.getLogger(__name__)

CSV_HEADER = ["ID", "Title", "Difficulty", "Rating", "Tier", "YouTube URL"]


def format_value(value: Union[str, int, float]) -> str:
    """
    CSVに書き出す値を文字列化する。

    整数値の float は小数点以下を付けない（19.0 -> "19"）。
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def chart_to_row(chart: Chart) -> List[str]:
    return [
        format_value(chart.id),
        format_value(chart.title),
        format_value(chart.difficulty),
        format_value(chart.rating),
        format_value(chart.tier),
        format_value(chart.youtube_url),
    ]


def charts_to_csv(charts: Iterable[Chart]) -> str:
    """
    Chart のリストをCSVテキストへ変換する。

    カンマ・改行・ダブルクォートを含むフィールドはダブルクォートで囲み、
    内部のダブルクォートは "" にエスケープする。

    Args:
        charts: 出力する Chart。

    Returns:
        ヘッダ行を含むCSVテキスト（改行は LF）。
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for chart in charts:
        writer.writerow(chart_to_row(chart))
    return buf.getvalue()


def export_charts_csv(charts: List[Chart], output_dir: Union[str, Path], file_name: str = "charts.csv") -> Path:
    """
    Chart のリストを output_dir/file_name へ書き出す。

    出力先ディレクトリが無い場合は作成し、既存ファイルは上書きする。

    Args:
        charts: 出力する Chart。
        output_dir: 出力先ディレクトリ。
        file_name: 出力ファイル名。

    Returns:
        書き出したCSVファイルのパス。
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        output_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Created directory: %s", output_dir)

    csv_path = output_dir / file_name
    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        f.write(charts_to_csv(charts))

    LOGGER.info("Successfully exported %d charts to %s", len(charts), csv_path)
    return csv_path
