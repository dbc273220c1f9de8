"""
ダッシュボードの描画処理。

DashboardRow から表示属性（リンク先・バナー画像・枠色）を持つ Tile を作り、
クリックで動画を開くバナータイルのグリッドを静的HTMLとして書き出す。
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import Iterable, List, Union

from tiercharts.models import DashboardRow

BANNER_URL = "https://3icecream.com/img/banners/{song_id}.jpg"

DIFFICULTY_COLORS = {
    "BSP": "yellow",
    "DSP": "red",
    "ESP": "#33bb33",
    "CSP": "#dd33dd",
}


@dataclass(frozen=True)
class Tile:
    """
    バナータイル1枚分の表示属性。

    Attributes:
        key: 一意キー（song_id + 難易度）。
        href: クリック時に開くURL（動画URL、無ければ空文字）。
        image_url: バナー画像URL。
        alt: 画像の代替テキスト（曲名）。
        border_color: 難易度ごとの枠色。
    """

    key: str
    href: str
    image_url: str
    alt: str
    border_color: str


def build_tile(row: DashboardRow) -> Tile:
    return Tile(
        key=row.id + row.difficulty,
        href=row.youtube_url,
        image_url=BANNER_URL.format(song_id=row.id),
        alt=row.title,
        border_color=DIFFICULTY_COLORS.get(row.difficulty, DIFFICULTY_COLORS["BSP"]),
    )


def build_tiles(rows: Iterable[DashboardRow]) -> List[Tile]:
    return [build_tile(row) for row in rows]


def _render_tile(tile: Tile) -> str:
    return (
        f"<a class='tile' href='{escape(tile.href)}' target='_blank' rel='noopener noreferrer'"
        f" data-key='{escape(tile.key)}'>"
        f"<div class='frame' style='border-color:{escape(tile.border_color)}'>"
        f"<img src='{escape(tile.image_url)}' alt='{escape(tile.alt)}' />"
        "</div></a>"
    )


def render_dashboard_html(tiles: List[Tile], total: int) -> str:
    """
    タイル一覧からダッシュボードHTMLを作成する。

    Args:
        tiles: 表示するタイル（絞り込み・並び替え済み）。
        total: 読み込んだ譜面の総数。

    Returns:
        HTML文字列。
    """
    css = """
    body{margin:0;font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Arial;}
    .meta{padding:16px 16px 0;}
    .grid{display:grid;grid-template-columns:repeat(auto-fill, minmax(250px, 1fr));gap:16px;padding:16px;}
    .tile{display:block;text-decoration:none;color:inherit;}
    .frame{border:6px solid;border-radius:6px;padding:0;width:100%;box-sizing:border-box;}
    .frame img{display:block;width:100%;height:auto;}
    .empty{padding:16px;}
    """

    body = "".join(_render_tile(t) for t in tiles) if tiles else "<div class='empty'>No charts match.</div>"

    return f"""<!doctype html>
<html>
  <head>
    <meta charset='utf-8' />
    <meta name='viewport' content='width=device-width, initial-scale=1' />
    <title>Tier Charts</title>
    <style>{css}</style>
  </head>
  <body>
    <p class='meta'>Parsed {total} charts / showing {len(tiles)}</p>
    <div class='grid'>{body}</div>
  </body>
</html>
"""


def write_dashboard_html(tiles: List[Tile], total: int, output_path: Union[str, Path]) -> Path:
    """ダッシュボードHTMLを書き出す。出力先ディレクトリが無い場合は作成する。"""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_dashboard_html(tiles, total), encoding="utf-8")
    return output_path
