"""Unit tests for tag spec normalization."""

import re

from command_tags.core.normalize import (
    ARRAY_PATTERN,
    BOOLEAN_PATTERN,
    OBJECT_PATTERN,
    flatten_specs,
    normalize_tags,
    resolve_value,
)
from command_tags.core.types import ParseOptions, TagSpec, TagType, ValueKind


class TestFlattenSpecs:
    def test_flattens_one_level(self) -> None:
        """リストとタプルを1段だけ平坦化すること."""
        assert flatten_specs(["a", ["b", "c"], ("d",)]) == ["a", "b", "c", "d"]

    def test_deeper_nesting_kept(self) -> None:
        """2段目以降の入れ子はそのまま残すこと."""
        assert flatten_specs([["x", ["y"]]]) == ["x", ["y"]]


class TestResolveValue:
    def test_boolean_wins_over_number(self) -> None:
        """bool は int のサブクラスだが boolean として扱うこと."""
        assert resolve_value(True, ParseOptions()) == (TagType.BOOLEAN, BOOLEAN_PATTERN)
        assert resolve_value("false", ParseOptions()) == (TagType.BOOLEAN, BOOLEAN_PATTERN)
        assert resolve_value(ValueKind.BOOLEAN, ParseOptions()) == (TagType.BOOLEAN, BOOLEAN_PATTERN)

    def test_number_literals(self) -> None:
        """数値と数値テキストを NUMBER として扱うこと."""
        assert resolve_value(3.5, ParseOptions()) == (TagType.NUMBER, r"-?\d+")
        assert resolve_value("12", ParseOptions()) == (TagType.NUMBER, r"-?\d+")
        assert resolve_value(ValueKind.NUMBER, ParseOptions()) == (TagType.NUMBER, r"-?\d+")

    def test_number_options(self) -> None:
        """負数/小数の設定を数値パターンに反映すること."""
        options = ParseOptions(negative_numbers=False, number_doubles=True)
        assert resolve_value(0, options) == (TagType.NUMBER, r"\d+(?:\.\d+)?")

    def test_regex_pattern(self) -> None:
        """re.Pattern を PATTERN 型の非捕捉グループにすること."""
        assert resolve_value(re.compile("a+"), ParseOptions()) == (TagType.PATTERN, "(?:a+)")

    def test_structured(self) -> None:
        """リスト/辞書を STRUCTURED 型として扱うこと."""
        assert resolve_value([], ParseOptions()) == (TagType.STRUCTURED, ARRAY_PATTERN)
        assert resolve_value(ValueKind.ARRAY, ParseOptions()) == (TagType.STRUCTURED, ARRAY_PATTERN)
        assert resolve_value({}, ParseOptions()) == (TagType.STRUCTURED, OBJECT_PATTERN)
        assert resolve_value(ValueKind.OBJECT, ParseOptions()) == (TagType.STRUCTURED, OBJECT_PATTERN)

    def test_string_fallback(self) -> None:
        """その他の値は STRING 型として扱うこと."""
        assert resolve_value("word", ParseOptions()) == (TagType.STRING, r"\w+")
        assert resolve_value(ValueKind.STRING, ParseOptions(numbers_in_strings=False)) == (
            TagType.STRING,
            "[A-Za-z]+",
        )


class TestNormalizeTags:
    def test_mixed_specs(self) -> None:
        """値なしタグ・省略形・辞書を混在して正規化できること."""
        result = normalize_tags(["bold", "size 10", {"mode": "fast", "resolve": True}], None, ParseOptions())

        assert result.fragments == ["bold", r"size -?\d+", r"mode \w+"]
        assert result.tag_data == {"size": TagType.NUMBER, "mode": TagType.STRING}
        assert result.names == ["bold", "size", "mode"]

    def test_shortcut_mapping_expands_each_key(self) -> None:
        """ショートカット辞書はキーごとにタグとして展開すること."""
        result = normalize_tags([{"width": 0, "dark": True, "bold": None}], None, ParseOptions())

        assert result.fragments == [r"width -?\d+", f"dark {BOOLEAN_PATTERN}", "bold"]
        assert "bold" not in result.tag_data

    def test_tag_mapping_without_value_is_bare(self) -> None:
        """値の無いタグ定義は値なしタグになること."""
        result = normalize_tags([{"tag": "bold"}, TagSpec("italic")], None, ParseOptions())

        assert result.fragments == ["bold", "italic"]
        assert result.tag_data == {}

    def test_resolve_false_uses_value_verbatim(self) -> None:
        """resolve=False の値はパターンとしてそのまま使うこと."""
        result = normalize_tags([TagSpec("color", "#[0-9a-f]{6}", resolve=False)], None, ParseOptions())

        assert result.fragments == ["color #[0-9a-f]{6}"]
        assert result.tag_data == {}
        assert result.names == ["color"]

    def test_initial_tag_data_not_mutated_or_overwritten(self) -> None:
        """初期マップは変更されず、既知の型も上書きされないこと."""
        initial = {"size": TagType.STRING}

        result = normalize_tags([{"size": 0, "width": 0}], initial, ParseOptions())

        assert initial == {"size": TagType.STRING}
        assert result.tag_data == {"size": TagType.STRING, "width": TagType.NUMBER}

    def test_first_declaration_wins(self) -> None:
        """同じタグ名は最初の定義を使うこと."""
        result = normalize_tags(["size 10", "size word"], None, ParseOptions())

        assert result.tag_data == {"size": TagType.NUMBER}
        assert result.names == ["size"]

    def test_unusable_specs_skipped(self) -> None:
        """使えないタグ定義は読み飛ばすこと."""
        result = normalize_tags([None, {}, 42, "  "], None, ParseOptions())

        assert result.fragments == []
        assert result.names == []
