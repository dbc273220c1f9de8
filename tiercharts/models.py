"""
データモデル定義モジュール。

songdata.js / 難易度リストHTML / 追加CSV / スプレッドシートから得た情報を
内部処理・CSV出力・ダッシュボード描画に渡すためのモデルを定義する。

難易度コード（0-8）は SP/DP × 5段階の難易度を表す。
仕様上、BEGINNER譜面はSPのみ存在する。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DIFFICULTY_CODES: Dict[int, str] = {
    0: "0 bSP",  # Beginner Single
    1: "0 BSP",  # Basic Single
    2: "0 DSP",  # Difficult Single
    3: "0 ESP",  # Expert Single
    4: "0 CSP",  # Challenge Single
    5: "1 BDP",  # Basic Double
    6: "1 DDP",  # Difficult Double
    7: "1 EDP",  # Expert Double
    8: "1 CDP",  # Challenge Double
}

VALID_DIFFICULTIES = frozenset(DIFFICULTY_CODES.values())

# ダッシュボードはSPの4難易度のみ扱う。並び順もこの順。
DASHBOARD_DIFFICULTIES: Tuple[str, ...] = ("BSP", "DSP", "ESP", "CSP")
DASHBOARD_DIFFICULTY_RANK: Dict[str, int] = {d: i for i, d in enumerate(DASHBOARD_DIFFICULTIES)}


@dataclass(frozen=True)
class SongIndexEntry:
    """
    songdata.js の1曲分の情報。

    ratings / tiers は難易度コードをインデックスとする配列。
    """

    song_id: str
    song_name: str
    romanized_name: Optional[str] = None
    alternate_name: Optional[str] = None
    ratings: Optional[Tuple[Optional[float], ...]] = None
    tiers: Optional[Tuple[Optional[float], ...]] = None


@dataclass(frozen=True)
class RawChartEntry:
    """難易度リストHTMLの rawMetadata 1件分。"""

    song_id: str
    difficulty: int
    youtube_id: Optional[str] = None


@dataclass(frozen=True)
class DifficultyStat:
    """難易度リストHTMLの difficultyList 1件分（キーは "songId/difficultyCode"）。"""

    tier: float
    rating: float


@dataclass(frozen=True)
class Chart:
    """
    統合後の1譜面分の情報。CSV出力の1行に対応する。

    tier が負の値の場合は omni / 削除譜面を表す。
    youtube_url は動画が無い場合は空文字。
    """

    id: str
    title: str
    difficulty: str
    rating: float
    tier: float
    youtube_url: str = ""


@dataclass(frozen=True)
class DashboardRow:
    """スプレッドシート1行分。score=0 は未クリアを表す。"""

    id: str
    title: str
    rating: float
    tier: float
    difficulty: str
    youtube_url: str = ""
    score: float = 0
