"""タグ定義の正規化（TagSpec → パターン断片 + tag_data）.

呼び出し側が渡すタグ定義は形がまちまちなため、ここで
`"<tag>"`（値なし）または `"<tag> <値パターン>"` の断片に揃える。

受け付ける形:
    - "bold"                          値なしタグ
    - "size 10"                       "名前 値" の省略形（値はリテラル例として型解決）
    - TagSpec("size", ValueKind.NUMBER)
    - {"tag": "size", "value": 10}    辞書形式
    - {"size": 10, "bold": None}      ショートカット（キーごとに1タグ）
    - 上記のリスト/タプル（1段だけ平坦化）
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .lenient import NUMERIC_TEXT
from .types import ParseOptions, TagSpec, TagType, ValueKind

_RESERVED_KEYS = ("tag", "value", "resolve")
_WHITESPACE = re.compile(r"\s+")

BOOLEAN_PATTERN = "(?:true|false|yes|no)"
OBJECT_PATTERN = r"\{[\s\S]+\}"
ARRAY_PATTERN = r"\[[\s\S]+\]"


@dataclass
class NormalizedTags:
    """正規化結果.

    Attributes:
        fragments: パターン断片（"bold", "fontSize -?\\d+" など）
        tag_data: 初期マップのコピーに今回の型を追加したもの
        names: 宣言されたタグ名（出現順、重複なし）
    """

    fragments: list[str] = field(default_factory=list)
    tag_data: dict[str, TagType] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)


def flatten_specs(tags: Iterable[Any]) -> list[Any]:
    """可変長引数のタグ定義を1段だけ平坦化する."""
    out: list[Any] = []
    for t in tags:
        if isinstance(t, (list, tuple)):
            out.extend(t)
        else:
            out.append(t)
    return out


def _expand_spec(spec: Any) -> list[TagSpec | str]:
    """1つのタグ定義を TagSpec / 値なしタグ名のリストに展開する."""
    if isinstance(spec, TagSpec):
        return [spec]

    if isinstance(spec, str):
        name = spec.strip()
        parts = _WHITESPACE.split(name, maxsplit=1)
        if len(parts) == 2:
            return [TagSpec(tag=parts[0], value=parts[1])]
        return [name] if name else []

    if isinstance(spec, Mapping):
        resolve = spec.get("resolve", True) is not False
        if spec.get("tag"):
            return [TagSpec(tag=spec["tag"], value=spec.get("value"), resolve=resolve)]
        # ショートカット: 予約キー以外をそれぞれタグとして展開
        return [
            TagSpec(tag=key, value=value, resolve=resolve) for key, value in spec.items() if key not in _RESERVED_KEYS
        ]

    return []


def _is_numeric_text(value: str) -> bool:
    return NUMERIC_TEXT.fullmatch(value.strip()) is not None


def resolve_value(value: Any, options: ParseOptions) -> tuple[TagType, str]:
    """値マーカー/リテラル例から (TagType, 値パターン) を決める.

    判定順（先に一致したものを採用）:
        boolean → number → re.Pattern → object/array → string
    """
    if isinstance(value, ValueKind):
        if value is ValueKind.BOOLEAN:
            return TagType.BOOLEAN, BOOLEAN_PATTERN
        if value is ValueKind.NUMBER:
            return TagType.NUMBER, _number_pattern(options)
        if value is ValueKind.OBJECT:
            return TagType.STRUCTURED, OBJECT_PATTERN
        if value is ValueKind.ARRAY:
            return TagType.STRUCTURED, ARRAY_PATTERN
        return TagType.STRING, _string_pattern(options)

    if isinstance(value, bool) or value in ("true", "false"):
        return TagType.BOOLEAN, BOOLEAN_PATTERN

    if isinstance(value, (int, float)) or (isinstance(value, str) and _is_numeric_text(value)):
        return TagType.NUMBER, _number_pattern(options)

    if isinstance(value, re.Pattern):
        return TagType.PATTERN, f"(?:{value.pattern})"

    if isinstance(value, (list, tuple)):
        return TagType.STRUCTURED, ARRAY_PATTERN
    if isinstance(value, Mapping):
        return TagType.STRUCTURED, OBJECT_PATTERN

    return TagType.STRING, _string_pattern(options)


def _number_pattern(options: ParseOptions) -> str:
    pattern = r"-?\d+" if options.negative_numbers else r"\d+"
    if options.number_doubles:
        pattern += r"(?:\.\d+)?"
    return pattern


def _string_pattern(options: ParseOptions) -> str:
    return r"\w+" if options.numbers_in_strings else "[A-Za-z]+"


def normalize_tags(
    tags: Iterable[Any],
    tag_data: Mapping[str, TagType] | None,
    options: ParseOptions,
) -> NormalizedTags:
    """タグ定義を正規化してパターン断片と tag_data を作る.

    Args:
        tags: タグ定義（1段ネストしたリストも可）
        tag_data: 初期の tag_data（変更せずコピーして使う）
        options: 数値/文字列パターンの組み立てに使う設定

    Returns:
        NormalizedTags
    """
    result = NormalizedTags(tag_data=dict(tag_data or {}))

    expanded: list[TagSpec | str] = []
    for spec in flatten_specs(tags):
        items = _expand_spec(spec)
        if not items:
            logger.warning(f"Skipping unusable tag spec: {spec!r}")
        expanded.extend(items)

    for item in expanded:
        if isinstance(item, str):
            name, fragment = item, item
        elif not isinstance(item.tag, str) or not item.tag:
            logger.warning(f"Skipping tag spec without a usable tag name: {item!r}")
            continue
        elif item.value is None:
            name, fragment = item.tag, item.tag
        elif not item.resolve:
            raw = item.value.pattern if isinstance(item.value, re.Pattern) else str(item.value)
            name, fragment = item.tag, f"{item.tag} {raw}"
        else:
            tag_type, value_pattern = resolve_value(item.value, options)
            # 既存の型（初期マップ・先勝ち）は上書きしない
            result.tag_data.setdefault(item.tag, tag_type)
            name, fragment = item.tag, f"{item.tag} {value_pattern}"

        result.fragments.append(fragment)
        if name not in result.names:
            result.names.append(name)

    return result
