import argparse
import logging
import sys
import traceback

from tiercharts.config import load_settings
from tiercharts.dashboard import build_tiles, write_dashboard_html
from tiercharts.errors import TierChartsError
from tiercharts.filters import SORT_KEYS, FilterConfig, SortConfig, filter_and_sort
from tiercharts.pipeline import run_build
from tiercharts.scraper import difficulty_level_from_env, fetch_difficulty_page, fetch_song_data
from tiercharts.spreadsheet import fetch_spreadsheet_rows

LOGGER = logging.getLogger("tiercharts")


def cmd_fetch(settings, args) -> int:
    """
    環境変数 DIFFICULTY で指定された難易度リストページを取得する。

    DIFFICULTY の検証は通信前に行う。曲データ(songdata.js)は未取得の場合のみ取得する。
    """
    level = difficulty_level_from_env()
    fetch_song_data(settings)
    fetch_difficulty_page(settings, level)
    return 0


def cmd_build(settings, args) -> int:
    """data_dir のHTML・曲データ・追加CSVから charts.csv を生成する。"""
    result = run_build(settings)
    LOGGER.info(
        "charts: %d (additional: %d), html files: %d (failed: %d)",
        result["charts"],
        result["additional"],
        result["html_files"],
        len(result["html_failed"]),
    )
    return 0


def cmd_dashboard(settings, args) -> int:
    """スプレッドシートを取得し、絞り込み・並び替えたタイルを dashboard.html に書き出す。"""
    rows = fetch_spreadsheet_rows(settings.spreadsheet, timeout=settings.request_timeout)

    filter_config = FilterConfig(
        title_query=args.title or "",
        rating=args.rating,
        include_omni=args.include_omni,
        min_score=args.min_score,
        max_score=args.max_score,
    )
    sort_config = SortConfig(key=args.sort, descending=args.desc)
    shown = filter_and_sort(rows, filter_config, sort_config)

    path = write_dashboard_html(build_tiles(shown), len(rows), settings.dashboard_html_path)
    LOGGER.info("Wrote %d of %d charts to %s", len(shown), len(rows), path)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DDR tier chart list builder")
    parser.add_argument("--settings", default="settings.yaml", help="Path to settings.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fetch = sub.add_parser("fetch", help="Fetch one difficulty list page (DIFFICULTY=<1-19>)")
    p_fetch.set_defaults(func=cmd_fetch)

    p_build = sub.add_parser("build", help="Parse fetched pages and export charts.csv")
    p_build.set_defaults(func=cmd_build)

    p_dash = sub.add_parser("dashboard", help="Render the spreadsheet as a banner grid")
    p_dash.add_argument("--title", help="Case-insensitive title substring")
    p_dash.add_argument("--rating", type=float, default=None, help="Exact rating (default: all)")
    p_dash.add_argument("--include-omni", action="store_true", help="Include charts with tier < 0")
    p_dash.add_argument("--min-score", type=float, default=0)
    p_dash.add_argument("--max-score", type=float, default=1_000_000)
    p_dash.add_argument("--sort", choices=SORT_KEYS, default="title")
    p_dash.add_argument("--desc", action="store_true", help="Sort descending")
    p_dash.set_defaults(func=cmd_dashboard)

    return parser


def main(argv=None) -> int:
    """
    譜面リスト作成のメイン処理。

    サブコマンド:
    - fetch: 難易度リストページ(と曲データ)を取得して data_dir へ保存
    - build: data_dir の内容を突合して output_dir/charts.csv を出力
    - dashboard: 公開スプレッドシートを取得して output_dir/dashboard.html を出力

    TierChartsError はログを出して終了コード1を返す。それ以外の例外は
    トレースバックを出力した上で再送出する。
    """
    args = build_arg_parser().parse_args(argv)
    settings = load_settings(args.settings)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        code = args.func(settings, args)
    except TierChartsError as exc:
        LOGGER.error("Error: %s", exc)
        return 1
    except Exception:
        print(traceback.format_exc(), file=sys.stderr)
        raise

    LOGGER.info("SUCCESS")
    return code


if __name__ == "__main__":
    sys.exit(main())
