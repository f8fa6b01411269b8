"""command_tags: 文字列に埋め込まれたコマンドタグ（`--bold`, `--fontSize 24`）の解析."""

from loguru import logger

from command_tags.core import (
    CommandTagError,
    InvalidPatternError,
    MalformedValueError,
    ParsedTags,
    ParseOptions,
    TagSpec,
    TagType,
    ValueKind,
    read_lenient,
)
from command_tags.parser import CompiledTags, compile_tags, parse

__version__ = "0.1.0"

# ライブラリとして import された場合はログを出さない（CLI 側で enable する）
logger.disable("command_tags")

__all__ = [
    "parse",
    "compile_tags",
    "CompiledTags",
    "read_lenient",
    "ParseOptions",
    "ParsedTags",
    "TagSpec",
    "TagType",
    "ValueKind",
    "CommandTagError",
    "InvalidPatternError",
    "MalformedValueError",
]
