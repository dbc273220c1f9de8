"""
譜面リストCSVの生成処理。

data_dir 内の難易度リストHTMLを全て解析し、曲データと突合した Chart に
追加譜面CSVの内容を加えて charts.csv へ出力する。

処理方針:
- HTML 1ファイルの解析失敗はそのファイルのみ読み飛ばし、残りのファイルを続行する
- data_dir が無い、HTMLが1つも無い場合は PreconditionError で中断する
- 重複排除は行わない（同じ song_id でも別ファイル・別ソース由来なら別行）
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from tiercharts.additional import load_additional_charts
from tiercharts.config import Settings
from tiercharts.errors import PreconditionError, ScrapeError, ValidationError
from tiercharts.exporter import export_charts_csv
from tiercharts.models import Chart
from tiercharts.parser import extract_chart_page
from tiercharts.reconcile import count_by_difficulty, reconcile_charts
from tiercharts.song_index import SongIndex, load_song_index

LOGGER = logging.getLogger(__name__)


def list_html_files(data_dir: Path) -> List[Path]:
    """data_dir 直下の *.html をファイル名順で返す。"""
    return sorted(p for p in data_dir.glob("*.html") if p.is_file())


def parse_html_file(path: Path, song_index: SongIndex) -> List[Chart]:
    """
    難易度リストHTML 1ファイルを Chart のリストへ変換する。

    Raises:
        EmbeddedDataNotFoundError: 埋め込みデータが見つからない場合。
        ValidationError: 埋め込みデータが不正な場合。
        OSError: ファイルが読めない場合。
    """
    html = path.read_text(encoding="utf-8")
    entries, stats = extract_chart_page(html)
    return reconcile_charts(entries, stats, song_index)


def build_chart_collection(
    data_dir: Union[str, Path],
    song_data_name: str = "songdata.js",
    additional_csv_name: str = "additional.csv",
) -> Tuple[List[Chart], Dict[str, Any]]:
    """
    data_dir の内容から統合済みの譜面リストを作成する。

    並び順は「HTMLファイル順 × 各ファイル内の rawMetadata 順」の後に追加CSVの行順。

    Args:
        data_dir: 入力ディレクトリ。
        song_data_name: 曲データJSのファイル名。
        additional_csv_name: 追加譜面CSVのファイル名。

    Returns:
        (Chart のリスト, 処理件数の辞書)。

    Raises:
        PreconditionError: data_dir が無い、またはHTMLファイルが1つも無い場合。
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise PreconditionError(f"data directory not found at {data_dir}")

    song_index = load_song_index(data_dir / song_data_name)

    html_files = list_html_files(data_dir)
    if not html_files:
        raise PreconditionError(f"No HTML files found in {data_dir}")

    LOGGER.info("Found %d HTML file(s) to parse", len(html_files))

    charts: List[Chart] = []
    failed: List[str] = []
    for path in html_files:
        LOGGER.info("Parsing %s...", path.name)
        try:
            file_charts = parse_html_file(path, song_index)
        except (ScrapeError, ValidationError, OSError, UnicodeDecodeError) as exc:
            LOGGER.error("  Error parsing %s: %s", path.name, exc)
            failed.append(path.name)
            continue
        charts.extend(file_charts)
        LOGGER.info("  Added %d charts from %s", len(file_charts), path.name)

    reconciled_count = len(charts)
    additional = load_additional_charts(data_dir / additional_csv_name)
    charts.extend(additional)

    stats = {
        "html_files": len(html_files),
        "html_failed": failed,
        "reconciled": reconciled_count,
        "additional": len(additional),
        "charts": len(charts),
    }
    return charts, stats


def log_summary(charts: List[Chart], sample_size: int = 5) -> None:
    """確認用に譜面リストの概要（総数・先頭数件・難易度別件数）をログへ出す。"""
    LOGGER.info("=== Chart Database Summary ===")
    LOGGER.info("Total charts: %d", len(charts))
    sample = [asdict(c) for c in charts[:sample_size]]
    LOGGER.info("Sample charts (first %d):\n%s", sample_size, json.dumps(sample, ensure_ascii=False, indent=2))
    LOGGER.info("Charts by difficulty:")
    for difficulty, count in count_by_difficulty(charts).items():
        LOGGER.info("  %s: %d", difficulty, count)


def run_build(settings: Settings) -> Dict[str, Any]:
    """
    譜面リストCSVを生成する。

    Returns:
        処理件数と出力先パスを含む辞書。

    Raises:
        PreconditionError: 入力が揃っていない場合。
    """
    charts, stats = build_chart_collection(
        settings.data_dir,
        song_data_name=settings.song_data_name,
        additional_csv_name=settings.additional_csv_name,
    )
    log_summary(charts)

    output_path = export_charts_csv(charts, settings.output_dir, settings.output_csv_name)
    stats["output_path"] = str(output_path)
    return stats
