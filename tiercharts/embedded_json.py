"""JSテキスト中の `変数名 = [...]` / `変数名 = {...}` を抽出し、Python値へ変換する。"""

from __future__ import annotations

import json
import re
from typing import Any

from tiercharts.errors import EmbeddedDataNotFoundError, ValidationError

_CLOSERS = {"[": "]", "{": "}"}


def _find_literal_end(js_text: str, start: int) -> int:
    """
    start 位置の開きカッコに対応する閉じカッコの位置を返す。

    文字列リテラル内のカッコ・エスケープは無視する。
    対応する閉じカッコが無い場合は -1 を返す。
    """
    opener = js_text[start]
    closer = _CLOSERS[opener]

    index = start
    depth = 0
    in_str = False
    escaped = False
    str_char = ""
    while index < len(js_text):
        ch = js_text[index]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == str_char:
                in_str = False
        else:
            if ch in ('"', "'"):
                in_str = True
                str_char = ch
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    return index
        index += 1

    return -1


def extract_json_literal(js_text: str, varname: str) -> Any:
    """
    JSテキスト中の `varname = <JSONリテラル>` を抽出し、json.loads した値を返す。

    `var` / `let` / `const` の有無、`=` 前後の空白は問わない。
    リテラルは `[` または `{` で始まるものに限る。

    Args:
        js_text: 対象のJS/HTMLテキスト。
        varname: 代入先の変数名。

    Returns:
        パース済みの list または dict。

    Raises:
        EmbeddedDataNotFoundError: 代入、または対応する閉じカッコが見つからない場合。
        ValidationError: JSONとしてパースできない場合。
    """
    match = re.search(rf"\b{re.escape(varname)}\s*=\s*([\[{{])", js_text)
    if not match:
        raise EmbeddedDataNotFoundError(f"{varname} が ドキュメント内に見つかりません")

    literal_start = match.start(1)
    literal_end = _find_literal_end(js_text, literal_start)
    if literal_end == -1:
        raise EmbeddedDataNotFoundError(f"{varname} の終了カッコが見つかりません")

    literal_text = js_text[literal_start : literal_end + 1]
    try:
        return json.loads(literal_text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"json parse failed for {varname}: {exc}") from exc
