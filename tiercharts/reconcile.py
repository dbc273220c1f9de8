"""
譜面情報の突合処理。

難易度リストHTMLから得た譜面一覧・tier/rating マップと、曲データ(songdata.js)の
曲名・レーティング情報を突き合わせ、Chart のリストを作成する。

I/Oを持たない純粋関数のみで構成する。
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from tiercharts.models import DIFFICULTY_CODES, Chart, DifficultyStat, RawChartEntry, SongIndexEntry

LOGGER = logging.getLogger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


def stat_key(song_id: str, difficulty: int) -> str:
    """difficultyList の参照キー "songId/difficultyCode" を返す。"""
    return f"{song_id}/{difficulty}"


def resolve_title(song_id: str, song: Optional[SongIndexEntry]) -> str:
    """
    表示用タイトルを決定する。

    - 曲データが無い場合は song_id
    - romanized_name / alternate_name がある場合は "曲名 (ローマ字/別名)"
    - どちらも無い場合は曲名のみ

    Args:
        song_id: 譜面の song_id。
        song: 曲データ。存在しない場合は None。

    Returns:
        タイトル文字列。
    """
    if song is None:
        return song_id

    parts = [name for name in (song.romanized_name, song.alternate_name) if name]
    if parts:
        return f"{song.song_name} ({'/'.join(parts)})"
    return song.song_name


def resolve_rating(difficulty: int, stat: DifficultyStat, song: Optional[SongIndexEntry]) -> float:
    """
    レーティングを決定する。

    曲データの ratings[difficulty] が定義されていればそれを優先し、
    無ければ difficultyList 側の rating を使う。
    """
    if song is not None and song.ratings is not None and 0 <= difficulty < len(song.ratings):
        rating = song.ratings[difficulty]
        if rating is not None:
            return rating
    return stat.rating


def build_youtube_url(youtube_id: Optional[str]) -> str:
    """動画IDから視聴URLを作る。IDが無い場合は空文字。"""
    if not youtube_id:
        return ""
    return YOUTUBE_WATCH_URL.format(video_id=youtube_id)


def reconcile_charts(
    entries: Iterable[RawChartEntry],
    stats: Mapping[str, DifficultyStat],
    song_index: Mapping[str, SongIndexEntry],
) -> List[Chart]:
    """
    1ドキュメント分の譜面一覧を Chart のリストへ変換する。

    - tier/rating が無い譜面は読み飛ばす
    - 難易度コードが 0-8 以外の譜面は警告を出して読み飛ばす
    - 出力順は rawMetadata の順

    Args:
        entries: rawMetadata 由来の譜面一覧。
        stats: "songId/difficultyCode" -> DifficultyStat。
        song_index: song_id -> 曲データ。

    Returns:
        Chart のリスト。
    """
    charts: List[Chart] = []
    for entry in entries:
        stat = stats.get(stat_key(entry.song_id, entry.difficulty))
        if stat is None:
            continue

        difficulty = DIFFICULTY_CODES.get(entry.difficulty)
        if difficulty is None:
            LOGGER.warning("Unknown difficulty value: %s for song %s", entry.difficulty, entry.song_id)
            continue

        song = song_index.get(entry.song_id)
        charts.append(
            Chart(
                id=entry.song_id,
                title=resolve_title(entry.song_id, song),
                difficulty=difficulty,
                rating=resolve_rating(entry.difficulty, stat, song),
                tier=stat.tier,
                youtube_url=build_youtube_url(entry.youtube_id),
            )
        )

    return charts


def count_by_difficulty(charts: Iterable[Chart]) -> Dict[str, int]:
    """難易度ごとの譜面数を難易度文字列順で返す。"""
    counts: Dict[str, int] = {}
    for chart in charts:
        counts[chart.difficulty] = counts.get(chart.difficulty, 0) + 1
    return dict(sorted(counts.items()))
