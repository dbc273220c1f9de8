"""
アプリケーション固有の例外定義モジュール。

スクレイピング、埋め込みデータ抽出、入力チェックなどの処理で発生する例外を
分類して扱うために、基底例外および派生例外を定義する。
"""


class TierChartsError(Exception):
    """譜面リスト作成システム全体の基底例外。"""


class ScrapeError(TierChartsError):
    """スクレイピング（HTTP取得）処理に起因する例外。"""


class EmbeddedDataNotFoundError(ScrapeError):
    """ドキュメント内に期待するJS変数の代入が見つからない場合の例外。"""


class ValidationError(TierChartsError):
    """入力データやパース結果が想定の形を満たさない場合の例外。"""


class PreconditionError(TierChartsError):
    """実行に必須のパラメータや入力ファイルが揃っていない場合の例外。"""
