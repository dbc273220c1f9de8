"""
文字列正規化ユーティリティ。

曲名の表記揺れ（全角/半角、大文字/小文字、引用符、空白）を吸収し、
ダッシュボードのタイトル検索・タイトル順ソートで利用する。
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional

_QUOTE_MAP = {
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "’": "'",
    "‘": "'",
    "‚": "'",
    "‛": "'",
}


def normalize_title(s: Optional[str]) -> str:
    """
    曲名を検索・比較用に正規化して返す。

    正規化内容:
    - Unicode正規化 (NFKC)
    - 改行/タブをスペースへ置換
    - 引用符の統一
    - trim・連続空白の単一化
    - casefold

    Args:
        s: 入力文字列。

    Returns:
        正規化済み文字列。入力が None の場合は空文字を返す。
    """
    if s is None:
        return ""

    s = unicodedata.normalize("NFKC", s)
    s = s.replace("\n", " ").replace("\r", " ").replace("\t", " ")

    for k, v in _QUOTE_MAP.items():
        s = s.replace(k, v)

    s = re.sub(r"\s+", " ", s.strip())
    return s.casefold()
