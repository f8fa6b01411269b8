"""タグセット設定（YAML）の読み込み.

よく使うタグ定義と解析設定を YAML にまとめておき、parse() にそのまま渡せる形にする。

YAML形式:
    prefix: "--"
    remove_all_tags: false
    tags:
      - bold
      - "size 10"
      - tag: fontSize
        kind: number
      - tag: color
        pattern: "#[0-9a-fA-F]{6}"
      - tag: raw
        value: "[a-z]+"
        resolve: false

使用例:
    >>> config = load_tag_config(Path("tags.yml"))
    >>> config.parse("Write text --bold --fontSize 24").data
    {'fontSize': 24}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from command_tags.core.types import ParsedTags, ParseOptions, TagSpec, ValueKind, coerce_tag_data
from command_tags.parser import parse

_OPTION_KEYS = {f.name for f in fields(ParseOptions)} - {"string"}
_ENTRY_KEYS = {"tag", "kind", "pattern", "value", "resolve"}


@dataclass
class TagConfig:
    """YAML から読み込んだ解析設定とタグ定義.

    Attributes:
        options: ParseOptions のフィールド（string 以外）
        tags: parse() に渡すタグ定義
    """

    options: dict[str, Any] = field(default_factory=dict)
    tags: list[TagSpec | str] = field(default_factory=list)

    def to_options(self, string: str) -> ParseOptions:
        """解析対象の文字列を埋めた ParseOptions を返す."""
        return replace(ParseOptions.from_value(self.options), string=string)

    def parse(self, string: str) -> ParsedTags:
        return parse(self.to_options(string), self.tags)


def _entry_to_spec(entry: Any, index: int) -> TagSpec | str:
    """tags の1要素を TagSpec（または値なしタグ名/省略形の文字列）に変換する.

    Raises:
        ValueError: 形式が不正な場合
    """
    if isinstance(entry, str):
        return entry

    if not isinstance(entry, dict):
        msg = f"Invalid tag entry #{index}: expected string or mapping, got {type(entry)}"
        raise ValueError(msg)

    unknown = sorted(set(entry) - _ENTRY_KEYS)
    if unknown:
        msg = f"Invalid tag entry #{index}: unknown key(s) {unknown}. Valid keys: {sorted(_ENTRY_KEYS)}"
        raise ValueError(msg)

    tag = entry.get("tag")
    if not isinstance(tag, str) or not tag:
        msg = f"Invalid tag entry #{index}: 'tag' must be a non-empty string"
        raise ValueError(msg)

    given = [k for k in ("kind", "pattern", "value") if k in entry]
    if len(given) > 1:
        msg = f"Invalid tag entry #{index} ('{tag}'): use only one of {given}"
        raise ValueError(msg)

    resolve = entry.get("resolve", True) is not False
    if "kind" in entry:
        try:
            return TagSpec(tag=tag, value=ValueKind(entry["kind"]), resolve=resolve)
        except ValueError as e:
            valid = [k.value for k in ValueKind]
            msg = f"Invalid kind '{entry['kind']}' for tag '{tag}'. Valid kinds: {valid}"
            raise ValueError(msg) from e

    if "pattern" in entry:
        try:
            return TagSpec(tag=tag, value=re.compile(str(entry["pattern"])), resolve=resolve)
        except re.error as e:
            msg = f"Invalid pattern for tag '{tag}': {e}"
            raise ValueError(msg) from e

    return TagSpec(tag=tag, value=entry.get("value"), resolve=resolve)


def parse_tag_config(data: Any) -> TagConfig:
    """YAML を読み込んだ後のデータ（dict）から TagConfig を作る.

    Raises:
        ValueError: 形式が不正な場合
    """
    if not isinstance(data, dict):
        msg = f"Tag config must contain a mapping, got {type(data)}"
        raise ValueError(msg)

    unknown = sorted(set(data) - _OPTION_KEYS - {"tags"})
    if unknown:
        msg = f"Unknown key(s) in tag config: {unknown}. Valid keys: {sorted(_OPTION_KEYS | {'tags'})}"
        raise ValueError(msg)

    options = {k: v for k, v in data.items() if k in _OPTION_KEYS}
    if options.get("tag_data") is not None:
        options["tag_data"] = coerce_tag_data(options["tag_data"])

    raw_tags = data.get("tags") or []
    if not isinstance(raw_tags, list):
        msg = f"'tags' must be a list, got {type(raw_tags)}"
        raise ValueError(msg)

    return TagConfig(options=options, tags=[_entry_to_spec(e, i) for i, e in enumerate(raw_tags)])


def load_tag_config(config_path: Path | str) -> TagConfig:
    """YAMLファイルからタグセット設定を読み込む.

    Args:
        config_path: 設定YAMLファイルのパス

    Returns:
        TagConfig

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: YAML形式が不正、または設定内容が不正な場合
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Tag config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in tag config file: {config_path}"
        raise ValueError(msg) from e

    config = parse_tag_config(data)
    logger.info(f"Loaded {len(config.tags)} tags from {config_path}")
    return config
