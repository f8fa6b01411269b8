"""文字列の走査とタグの置換（1パス）および remove_all_tags の後処理.

1つの出現ごとの流れ:
    RAW_MATCH → STRIPPED → {BARE | SPLIT} → (SPLIT なら値の変換) → COMMIT | REVERT

- COMMIT: トークンを取り除き、matches/data に反映する
- REVERT: 値が読めなかったので元のテキストをそのまま残す
"""

from __future__ import annotations

import re
from typing import Any

from loguru import logger

from .lenient import read_lenient, to_number
from .normalize import NormalizedTags
from .pattern import TagPattern
from .types import ParseOptions, TagType

_WHITESPACE = re.compile(r"\s+")
_BOOLEANS = {"true": True, "yes": True, "false": False, "no": False}


def collapse(raw: str, whole: str) -> str:
    """取り除いたトークンの代わりに残す文字列（空白1つ or 空）を決める.

    前後とも空白を含んで一致し、かつ文字列全体の先頭/末尾でもない場合だけ空白を1つ残す。
    """
    if raw.startswith(" ") and raw.endswith(" ") and not whole.startswith(raw) and not whole.endswith(raw):
        return " "
    return ""


def coerce_value(tag_type: TagType | None, text: str) -> Any:
    """タグ値のテキストを型に合わせて変換する.

    Raises:
        ValueError: NUMBER が数値でない場合、STRUCTURED が読めない場合
            （MalformedValueError も ValueError のサブクラス）
    """
    if tag_type is TagType.NUMBER:
        return to_number(text)
    if tag_type is TagType.BOOLEAN:
        # 大文字小文字は区別する（"TRUE" はテキストのまま）
        return _BOOLEANS.get(text, text)
    if tag_type is TagType.STRING:
        return text
    if tag_type is TagType.STRUCTURED:
        return read_lenient(text)

    # PATTERN / resolve=False: 読めればその値、読めなければテキストのまま
    try:
        return read_lenient(text)
    except ValueError:
        return text


class TagScanner:
    """1回の parse() 分の走査状態（matches/data）を持つ置換コールバック."""

    def __init__(self, string: str, pattern: TagPattern, tags: NormalizedTags, options: ParseOptions) -> None:
        self.string = string
        self.pattern = pattern
        self.tags = tags
        self.options = options
        self.matches: list[str] = []
        self.data: dict[str, Any] = {}

        # 大文字小文字違いで一致したタグ名を、宣言された表記に戻すための索引
        self._declared: dict[str, str] = {}
        for name in [*tags.names, *tags.tag_data]:
            self._declared.setdefault(name.lower(), name)

    def scan(self) -> str:
        """全ての出現を置換した文字列（前後の空白は除去）を返す."""
        if self.pattern.tags is None:
            return self.string
        return self.pattern.tags.sub(self._replace, self.string).strip()

    def _canonical(self, name: str) -> str:
        if name in self.tags.tag_data:
            return name
        return self._declared.get(name.lower(), name)

    def _record(self, name: str) -> str:
        if self.options.lowercase_tags:
            name = name.lower()
        if name not in self.matches:
            self.matches.append(name)
        return name

    def _replace(self, m: re.Match[str]) -> str:
        raw = m.group(0)
        replacement = collapse(raw, self.string)
        token = self.pattern.prefix_start.sub("", raw.strip(), count=1)

        parts = _WHITESPACE.split(token, maxsplit=1)
        head = self._canonical(parts[0])
        tag_type = self.tags.tag_data.get(head)
        has_value = len(parts) == 2
        if not has_value or (tag_type is None and token in self.tags.fragments):
            self._record(self._canonical(token))
            return replacement

        try:
            value = coerce_value(tag_type, parts[1])
        except ValueError as e:
            if self.options.remove_all_tags:
                logger.debug(f"Dropping malformed value for '{head}' without data: {e}")
                return replacement
            logger.debug(f"Reverting '{raw.strip()}': {e}")
            return raw

        self.data[self._record(head)] = value
        return replacement


def strip_prefixed_tokens(text: str, pattern: TagPattern) -> str:
    """remove_all_tags 用の後処理: 接頭辞付きの語を全て取り除く."""
    return pattern.stray.sub(lambda m: collapse(m.group(0), text), text).strip()
