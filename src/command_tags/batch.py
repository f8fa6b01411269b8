"""DataFrame の文字列列に対するタグ解析（一括処理）.

タグ定義を compile_tags() で一度だけ組み立て、1行ずつ解析した結果を列として追加する。

追加する列:
    - new_string: タグを取り除いた文字列
    - matches: 見つかったタグ名のリスト
    - data: 値付きタグの値（JSON文字列。行ごとに型が揃わないため）
"""

from __future__ import annotations

import json
from typing import Any

import polars as pl
from loguru import logger

from command_tags.core.types import ParseOptions
from command_tags.parser import compile_tags

RESULT_COLUMNS = ("new_string", "matches", "data")


def extract_tags_frame(
    df: pl.DataFrame,
    column: str,
    options: ParseOptions | dict[str, Any] | None = None,
    *tags: Any,
) -> pl.DataFrame:
    """DataFrame の指定列からコマンドタグを取り出す.

    Args:
        df: 入力DataFrame
        column: 解析する文字列列
        options: parse() の設定（string は各行の値で上書きされる）
        *tags: 認識するタグ

    Returns:
        new_string / matches / data 列を追加した DataFrame

    Raises:
        ValueError: 列が存在しない場合
    """
    if column not in df.columns:
        msg = f"Column '{column}' not found. Available columns: {df.columns}"
        raise ValueError(msg)

    # タグ定義の正規化とパターンのコンパイルはフレームにつき1回
    compiled = compile_tags(options, *tags)

    new_strings: list[str] = []
    matches: list[list[str]] = []
    data: list[str] = []
    tagged_rows = 0
    for value in df[column].to_list():
        text = "" if value is None else str(value)
        result = compiled.parse(text)
        new_strings.append(result.new_string)
        matches.append(result.matches)
        data.append(json.dumps(result.data, ensure_ascii=False))
        if result.matches:
            tagged_rows += 1

    logger.info(f"Extracted tags from {tagged_rows}/{len(df)} rows (column={column})")

    return df.with_columns(
        pl.Series("new_string", new_strings, dtype=pl.Utf8),
        pl.Series("matches", matches, dtype=pl.List(pl.Utf8)),
        pl.Series("data", data, dtype=pl.Utf8),
    )
