"""コマンドタグ解析のコア処理群.

- 正規化（タグ定義 → パターン断片 + tag_data）
- パターンのコンパイル
- 走査・置換と値の型変換
- object/array 形式テキストの寛容な読み込み
"""

from .exceptions import CommandTagError, InvalidPatternError, MalformedValueError
from .lenient import read_lenient
from .normalize import normalize_tags
from .pattern import compile_tag_pattern
from .types import ParsedTags, ParseOptions, TagSpec, TagType, ValueKind

__all__ = [
    "CommandTagError",
    "InvalidPatternError",
    "MalformedValueError",
    "ParseOptions",
    "ParsedTags",
    "TagSpec",
    "TagType",
    "ValueKind",
    "compile_tag_pattern",
    "normalize_tags",
    "read_lenient",
]
