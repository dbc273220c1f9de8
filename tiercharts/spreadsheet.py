"""
ダッシュボード用スプレッドシートの読み込み処理。

公開されている Google スプレッドシートをCSVエクスポートURL経由で取得し、
ヘッダ名（ID / Title / Rating / Tier / Difficulty / yt / Score）で列を引いて
DashboardRow のリストへ変換する。

クォートされたカンマ・改行を含むセルも列がずれないよう、csv モジュールで解析する。
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from typing import Dict, List, Optional

import requests

from tiercharts.config import SpreadsheetConfig
from tiercharts.errors import ScrapeError, ValidationError
from tiercharts.models import DASHBOARD_DIFFICULTIES, DashboardRow

LOGGER = logging.getLogger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export?format=csv&gid={gid}"

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def build_spreadsheet_csv_url(config: SpreadsheetConfig) -> str:
    """スプレッドシートのCSVエクスポートURLを返す。"""
    return EXPORT_URL.format(spreadsheet_id=config.spreadsheet_id, gid=config.gid)


def _to_number(value: Optional[str]) -> float:
    """
    セル先頭の数値を読み取る。"17 (old)" は 17 となる。

    空・数値で始まらない・有限でない場合は 0 とする。
    """
    match = _LEADING_NUMBER.match((value or "").strip())
    if match is None:
        return 0
    number = float(match.group())
    if not math.isfinite(number):
        return 0
    return number


def _to_difficulty(value: Optional[str]) -> str:
    difficulty = (value or "").strip()
    if difficulty in DASHBOARD_DIFFICULTIES:
        return difficulty
    return DASHBOARD_DIFFICULTIES[0]


def parse_spreadsheet_records(text: str) -> List[Dict[str, str]]:
    """
    CSVテキストを「ヘッダ名 -> セル値」の辞書のリストへ変換する。

    空行は無視する。ヘッダ名・セル値は前後空白を除去する。
    値が足りない列は空文字とする。

    Raises:
        ValidationError: 空のドキュメントの場合。
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        raise ValidationError("Empty spreadsheet")

    headers = [h.strip().lstrip("\ufeff") for h in rows[0]]
    records: List[Dict[str, str]] = []
    for row in rows[1:]:
        values = [v.strip() for v in row]
        records.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return records


def to_dashboard_row(record: Dict[str, str]) -> Optional[DashboardRow]:
    """
    1レコードを DashboardRow へ変換する。ID または Title が空の場合は None。

    - Rating / Tier / Score は数値化できなければ 0
    - Difficulty が BSP/DSP/ESP/CSP 以外なら BSP
    """
    row_id = record.get("ID", "")
    title = record.get("Title", "")
    if not row_id or not title:
        return None

    return DashboardRow(
        id=row_id,
        title=title,
        rating=_to_number(record.get("Rating")),
        tier=_to_number(record.get("Tier")),
        difficulty=_to_difficulty(record.get("Difficulty")),
        youtube_url=record.get("yt", ""),
        score=_to_number(record.get("Score")),
    )


def parse_spreadsheet_csv(text: str) -> List[DashboardRow]:
    """
    スプレッドシートCSVを DashboardRow のリストへ変換する。

    Raises:
        ValidationError: 空のドキュメントの場合。
    """
    rows: List[DashboardRow] = []
    for record in parse_spreadsheet_records(text):
        row = to_dashboard_row(record)
        if row is None:
            continue
        rows.append(row)
    return rows


def fetch_spreadsheet_rows(config: SpreadsheetConfig, timeout: int = 30) -> List[DashboardRow]:
    """
    スプレッドシートを取得して DashboardRow のリストを返す。

    Raises:
        ScrapeError: 取得に失敗した場合（HTTPステータスが200系以外を含む）。
        ValidationError: 空のドキュメントの場合。
    """
    url = build_spreadsheet_csv_url(config)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise ScrapeError(f"Failed to fetch spreadsheet: {url} ({e})") from e

    if not response.ok:
        raise ScrapeError(f"Failed to fetch spreadsheet: {response.status_code} {response.reason}")

    LOGGER.info("Fetched spreadsheet")
    response.encoding = "utf-8"
    rows = parse_spreadsheet_csv(response.text)
    LOGGER.info("Parsed %d charts", len(rows))
    return rows
