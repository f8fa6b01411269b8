"""コマンドタグ解析で使う型定義.

- ValueKind: 呼び出し側が渡す「値の種類」マーカー（閉じた列挙）
- TagType: 解析後の tag_data に記録される型
- TagSpec / ParseOptions / ParsedTags: 入力・設定・結果
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

DEFAULT_PREFIX = "--"
# 文字列だけ渡された場合・prefix が空の場合のフォールバック
FALLBACK_PREFIX = "-+"


class ValueKind(str, Enum):
    """タグ値の種類マーカー."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


class TagType(str, Enum):
    """tag_data に記録される解決済みの型."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    STRUCTURED = "structured"  # object / array
    PATTERN = "pattern"  # re.Pattern を値に指定したタグ


@dataclass(frozen=True)
class TagSpec:
    """値付きタグの記述子.

    Attributes:
        tag: 認識するタグ名（正規表現として扱われる）
        value: ValueKind、リテラル例（True, 12, "12", {} など）、re.Pattern。
            resolve=False の場合はそのままパターン文字列として使う
        resolve: False なら value を型解決せずパターンとして埋め込む
    """

    tag: str
    value: Any = None
    resolve: bool = True


@dataclass(frozen=True)
class ParseOptions:
    """parse() の設定.

    Attributes:
        string: 解析対象の文字列
        prefix: タグの接頭辞（文字列または re.Pattern）
        numbers_in_strings: 文字列型の値に数字も許可するか
        remove_all_tags: 未定義のタグも含め、接頭辞付きの語を全て取り除くか
        negative_numbers: 数値型で負数を許可するか
        number_doubles: 数値型で小数を許可するか
        lowercase_tags: matches/data のタグ名を小文字で返すか
        tag_data: 既知のタグ → TagType の初期マップ（コピーして使う）
    """

    string: str = ""
    prefix: str | re.Pattern[str] | None = DEFAULT_PREFIX
    numbers_in_strings: bool = True
    remove_all_tags: bool = False
    negative_numbers: bool = True
    number_doubles: bool = False
    lowercase_tags: bool = False
    tag_data: Mapping[str, TagType] | None = None

    @classmethod
    def from_value(cls, options: ParseOptions | Mapping[str, Any] | str | None) -> ParseOptions:
        """文字列・辞書・None から ParseOptions を組み立てる.

        Raises:
            ValueError: 未知のキー、または不正な tag_data が含まれている場合
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, str):
            return cls(string=options, prefix=FALLBACK_PREFIX)
        if not isinstance(options, Mapping):
            msg = f"options must be a str, mapping or ParseOptions, got {type(options)}"
            raise ValueError(msg)

        valid_keys = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - valid_keys)
        if unknown:
            msg = f"Unknown option(s): {unknown}. Valid options: {sorted(valid_keys)}"
            raise ValueError(msg)

        kwargs = dict(options)
        if kwargs.get("tag_data") is not None:
            kwargs["tag_data"] = coerce_tag_data(kwargs["tag_data"])
        return cls(**kwargs)


def coerce_tag_data(tag_data: Mapping[str, Any]) -> dict[str, TagType]:
    """tag_data の値を TagType に揃える（"number" などの文字列も受け付ける）.

    Raises:
        ValueError: TagType に変換できない値がある場合
    """
    out: dict[str, TagType] = {}
    for name, tag_type in tag_data.items():
        try:
            out[name] = TagType(tag_type)
        except ValueError as e:
            valid = [t.value for t in TagType]
            msg = f"Invalid tag type '{tag_type}' for tag '{name}'. Valid types: {valid}"
            raise ValueError(msg) from e
    return out


@dataclass
class ParsedTags:
    """parse() の結果.

    Attributes:
        string: 元の文字列
        new_string: 認識したタグを取り除いた文字列
        matches: 見つかったタグ名（初出順、重複なし）
        data: 値付きタグ → 変換済みの値
        tag_data: 解析に使ったタグ → TagType のマップ
    """

    string: str
    new_string: str
    matches: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    tag_data: dict[str, TagType] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        return {
            "string": self.string,
            "new_string": self.new_string,
            "matches": list(self.matches),
            "data": dict(self.data),
            "tag_data": {name: tag_type.value for name, tag_type in self.tag_data.items()},
        }
