"""コマンドタグ解析のエントリポイント.

文字列に埋め込まれた `--bold` / `--fontSize 24` のようなタグを取り出し、値を型変換し、
認識したタグを取り除いた文字列と一緒に返す。

処理の流れ:
    1. 設定の正規化（文字列だけ渡された場合は prefix="-+"）
    2. タグ定義の正規化（パターン断片 + tag_data）
    3. パターンのコンパイル
    4. 走査と置換（1パス）
    5. remove_all_tags の場合は後処理で接頭辞付きの語を全て除去

1〜3 は文字列に依存しないため、同じタグ定義で多数の文字列を解析する場合は
compile_tags() で一度だけ組み立て、CompiledTags.parse() を繰り返し呼ぶ。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from command_tags.core.normalize import NormalizedTags, normalize_tags
from command_tags.core.pattern import TagPattern, compile_tag_pattern
from command_tags.core.scanner import TagScanner, strip_prefixed_tokens
from command_tags.core.types import ParsedTags, ParseOptions, coerce_tag_data


@dataclass(frozen=True)
class CompiledTags:
    """コンパイル済みのタグ定義（文字列を変えて何度でも使える）.

    Attributes:
        options: 正規化済みの設定（string は使わない）
        tags: 正規化済みのタグ定義
        pattern: コンパイル済みパターン
    """

    options: ParseOptions
    tags: NormalizedTags
    pattern: TagPattern

    def parse(self, string: str) -> ParsedTags:
        """1つの文字列を解析する."""
        scanner = TagScanner(string, self.pattern, self.tags, self.options)
        new_string = scanner.scan()
        if self.options.remove_all_tags:
            new_string = strip_prefixed_tokens(new_string, self.pattern)

        return ParsedTags(
            string=string,
            new_string=new_string,
            matches=scanner.matches,
            data=scanner.data,
            tag_data=dict(self.tags.tag_data),
        )


def compile_tags(options: ParseOptions | Mapping[str, Any] | str | None = None, *tags: Any) -> CompiledTags:
    """設定とタグ定義を正規化し、パターンをコンパイルする.

    Raises:
        InvalidPatternError: 接頭辞やタグ定義から組み立てた正規表現が不正な場合
        ValueError: options に未知のキーや不正な tag_data が含まれている場合
    """
    opts = ParseOptions.from_value(options)
    initial = coerce_tag_data(opts.tag_data) if opts.tag_data else {}

    normalized = normalize_tags(tags, initial, opts)
    pattern = compile_tag_pattern(opts.prefix, normalized.fragments)
    return CompiledTags(options=opts, tags=normalized, pattern=pattern)


def parse(options: ParseOptions | Mapping[str, Any] | str | None = None, *tags: Any) -> ParsedTags:
    """文字列からコマンドタグを取り出す.

    Args:
        options: ParseOptions、そのフィールド名の辞書、または解析する文字列そのもの
        *tags: 認識するタグ（"bold"、"size 10"、TagSpec、辞書、それらのリスト）

    Returns:
        ParsedTags

    Raises:
        InvalidPatternError: 接頭辞やタグ定義から組み立てた正規表現が不正な場合
        ValueError: options に未知のキーや不正な tag_data が含まれている場合

    Examples:
        >>> result = parse(
        ...     {"string": "Write text --bold --italic --fontSize 24", "prefix": "--"},
        ...     "bold",
        ...     "italic",
        ...     "strikethrough",
        ...     "underline",
        ...     {"fontSize": 0},
        ... )
        >>> result.new_string
        'Write text'
        >>> result.matches
        ['bold', 'italic', 'fontSize']
        >>> result.data
        {'fontSize': 24}
    """
    opts = ParseOptions.from_value(options)
    return compile_tags(opts, *tags).parse(opts.string or "")
