"""
ダッシュボードの絞り込み・並び替え処理。

DashboardRow のリストに対して、タイトル部分一致・レーティング一致・
omni(tier<0)表示・スコア範囲の条件を AND で適用し、指定キーで安定ソートした
新しいリストを返す。入力のリストは変更しない。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from tiercharts.models import DASHBOARD_DIFFICULTY_RANK, DashboardRow
from tiercharts.normalize import normalize_title

SORT_KEYS = ("title", "rating", "tier", "score", "difficulty")

MAX_SCORE = 1_000_000


@dataclass(frozen=True)
class FilterConfig:
    """
    絞り込み条件。

    Attributes:
        title_query: タイトルの部分一致文字列（大文字小文字は区別しない）。空なら条件なし。
        rating: レーティング完全一致。None は「すべて」。
        include_omni: tier < 0 の譜面を含めるかどうか。
        min_score: スコア下限（含む）。
        max_score: スコア上限（含む）。
    """

    title_query: str = ""
    rating: Optional[float] = None
    include_omni: bool = False
    min_score: float = 0
    max_score: float = MAX_SCORE


@dataclass(frozen=True)
class SortConfig:
    """並び替え条件。key は SORT_KEYS のいずれか。"""

    key: str = "title"
    descending: bool = False

    def __post_init__(self):
        if self.key not in SORT_KEYS:
            raise ValueError(f"sort key は {', '.join(SORT_KEYS)} のいずれかを指定してください: {self.key}")


def matches(row: DashboardRow, config: FilterConfig, normalized_query: str = "") -> bool:
    """1行が全ての絞り込み条件を満たすかどうかを返す。"""
    if normalized_query and normalized_query not in normalize_title(row.title):
        return False
    if config.rating is not None and row.rating != config.rating:
        return False
    if not config.include_omni and row.tier < 0:
        return False
    if not config.min_score <= row.score <= config.max_score:
        return False
    return True


def apply_filters(rows: Iterable[DashboardRow], config: FilterConfig) -> List[DashboardRow]:
    """条件を満たす行だけを元の順序のまま返す。"""
    query = normalize_title(config.title_query)
    return [row for row in rows if matches(row, config, query)]


_SORT_KEY_FUNCS: Dict[str, Callable[[DashboardRow], Any]] = {
    # 正規化後が同じタイトルは元の文字列で順序を決める
    "title": lambda row: (normalize_title(row.title), row.title),
    "rating": lambda row: row.rating,
    "tier": lambda row: row.tier,
    "score": lambda row: row.score,
    "difficulty": lambda row: DASHBOARD_DIFFICULTY_RANK.get(row.difficulty, len(DASHBOARD_DIFFICULTY_RANK)),
}


def sort_rows(rows: Iterable[DashboardRow], config: SortConfig) -> List[DashboardRow]:
    """
    指定キーで安定ソートした新しいリストを返す。

    - title: 正規化済みタイトル順
    - rating / tier / score: 数値順
    - difficulty: BSP < DSP < ESP < CSP

    キーが等しい行は降順指定時も元の順序を保つ。
    """
    return sorted(rows, key=_SORT_KEY_FUNCS[config.key], reverse=config.descending)


def filter_and_sort(
    rows: Iterable[DashboardRow],
    filter_config: Optional[FilterConfig] = None,
    sort_config: Optional[SortConfig] = None,
) -> List[DashboardRow]:
    """絞り込み後に並び替えた表示用のリストを返す。"""
    filtered = apply_filters(rows, filter_config or FilterConfig())
    return sort_rows(filtered, sort_config or SortConfig())
