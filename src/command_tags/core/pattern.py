"""接頭辞とパターン断片から照合用の正規表現を組み立てる."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from .exceptions import InvalidPatternError
from .types import FALLBACK_PREFIX


@dataclass(frozen=True)
class TagPattern:
    """タグ定義1組分のコンパイル済みパターン一式.

    Attributes:
        prefix: 正規化済みの接頭辞ソース（先頭の ^ は除去済み）
        tags: 全タグの照合パターン（断片が無ければ None）
        prefix_start: トークン先頭の接頭辞を取り除くためのパターン
        stray: remove_all_tags 用（接頭辞 + 任意の単語）
    """

    prefix: str
    tags: re.Pattern[str] | None
    prefix_start: re.Pattern[str]
    stray: re.Pattern[str]


def prefix_source(prefix: str | re.Pattern[str] | None) -> str:
    """接頭辞を正規表現ソースに揃える.

    - re.Pattern はソースを (?:...) で包む
    - 空/None はフォールバックの "-+"
    - 先頭の ^ は取り除く（アンカーは照合全体に効くため）
    """
    if isinstance(prefix, re.Pattern):
        source = prefix.pattern.removeprefix("^")
        return f"(?:{source})"
    return (prefix or FALLBACK_PREFIX).removeprefix("^")


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def compile_tag_pattern(prefix: str | re.Pattern[str] | None, fragments: Sequence[str]) -> TagPattern:
    """接頭辞と断片から TagPattern を作る.

    組み立てる形: ` ?(?:<prefix>)(?:<f1>|<f2>|...) ?`
    接頭辞そのものが空白1文字の先頭で一致しうる場合は、末尾の ` ?` を付けない。

    Raises:
        InvalidPatternError: 接頭辞や断片が正規表現として不正な場合
    """
    source = prefix_source(prefix)
    prefix_start = _compile(f"^(?:{source})")
    trailing = "" if prefix_start.match(" ") else " ?"

    tags = None
    if fragments:
        tags = _compile(f" ?(?:{source})(?:{'|'.join(fragments)}){trailing}")
        logger.debug(f"Compiled tag pattern: {tags.pattern}")

    stray = _compile(rf" ?(?:{source})\w+ ?")
    return TagPattern(prefix=source, tags=tags, prefix_start=prefix_start, stray=stray)
