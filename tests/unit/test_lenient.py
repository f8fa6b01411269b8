"""Unit tests for the lenient object/array reader."""

import pytest

from command_tags.core.exceptions import MalformedValueError
from command_tags.core.lenient import MAX_DEPTH, read_lenient, to_number


class TestReadLenient:
    def test_unquoted_keys_and_bare_values(self) -> None:
        """引用符なしのキーと単語値を読めること."""
        assert read_lenient("{size: 10, mode: fast}") == {"size": 10, "mode": "fast"}

    def test_strict_json(self) -> None:
        """通常の JSON もそのまま読めること."""
        text = '{"a": [1, 2.5, -3e2], "b": null, "c": true}'
        assert read_lenient(text) == {"a": [1, 2.5, -300.0], "b": None, "c": True}

    def test_quoted_colons_and_braces_untouched(self) -> None:
        """文字列中の : や {} は書き換えないこと."""
        assert read_lenient('{url: "http://x:1/{y}"}') == {"url": "http://x:1/{y}"}

    def test_single_quoted_strings(self) -> None:
        """シングルクォート文字列とエスケープを読めること."""
        assert read_lenient(r"{'k': 'it\'s'}") == {"k": "it's"}

    def test_trailing_commas(self) -> None:
        """末尾カンマを許容すること."""
        assert read_lenient("[1, 2,]") == [1, 2]
        assert read_lenient("{a: 1,}") == {"a": 1}

    def test_nested(self) -> None:
        """入れ子の object/array を読めること."""
        assert read_lenient("{a: {b: [x, y]}}") == {"a": {"b": ["x", "y"]}}

    def test_numeric_key_and_hyphenated_word(self) -> None:
        """数値キーとハイフンを含む単語値を文字列として読めること."""
        assert read_lenient("{1: one, font: sans-serif}") == {"1": "one", "font": "sans-serif"}

    def test_empty_containers(self) -> None:
        """空の object/array を読めること."""
        assert read_lenient("{}") == {}
        assert read_lenient("[ ]") == []

    def test_top_level_scalars(self) -> None:
        """トップレベルの JSON スカラーを読めること."""
        assert read_lenient("42") == 42
        assert read_lenient('"hi"') == "hi"
        assert read_lenient("false") is False

    def test_nesting_at_limit(self) -> None:
        """入れ子が上限ちょうどなら読めること."""
        value = read_lenient("[" * MAX_DEPTH + "]" * MAX_DEPTH)

        depth = 0
        while value:
            value = value[0]
            depth += 1
        assert depth == MAX_DEPTH - 1
        assert value == []


class TestReadLenientErrors:
    @pytest.mark.parametrize(
        "text",
        ["", "fast", "{a 1}", "[1 2]", "{a: }", "{#}", '{a: "open}', "{a: 1"],
    )
    def test_malformed(self, text: str) -> None:
        """構文として読めない値は MalformedValueError になること."""
        with pytest.raises(MalformedValueError):
            read_lenient(text)

    def test_trailing_content_position(self) -> None:
        """末尾の余分な内容の位置がエラーに記録されること."""
        with pytest.raises(MalformedValueError) as exc_info:
            read_lenient("{a: 1} extra")

        assert exc_info.value.position == 7
        assert exc_info.value.text == "{a: 1} extra"

    def test_is_value_error(self) -> None:
        """呼び出し側が ValueError として扱えること."""
        with pytest.raises(ValueError, match="Malformed value"):
            read_lenient("{a:")

    def test_nesting_too_deep(self) -> None:
        """上限を超える入れ子は RecursionError ではなく MalformedValueError になること."""
        text = "[" * 600 + "]" * 600

        with pytest.raises(MalformedValueError, match="nesting too deep") as exc_info:
            read_lenient(text)

        assert exc_info.value.position == MAX_DEPTH

    def test_nesting_too_deep_mixed_containers(self) -> None:
        """object と array が混在した深い入れ子も同様に扱うこと."""
        text = "{a: [" * 300 + "]}" * 300

        with pytest.raises(MalformedValueError, match="nesting too deep"):
            read_lenient(text)


class TestToNumber:
    def test_int_and_float(self) -> None:
        """整数は int、小数は float になること."""
        assert to_number("10") == 10
        assert isinstance(to_number("10"), int)
        assert to_number("-3") == -3
        assert to_number("+5") == 5
        assert to_number("2.5") == 2.5
        assert isinstance(to_number("2.5"), float)
        assert to_number("1e3") == 1000.0

    def test_not_a_number(self) -> None:
        """数値として読めないテキストは ValueError になること."""
        with pytest.raises(ValueError):
            to_number("abc")

    @pytest.mark.parametrize("text", ["nan", "NaN", "inf", "-inf", "Infinity", "1_000", ""])
    def test_float_only_spellings_rejected(self, text: str) -> None:
        """float() だけが受け付ける表記（nan/inf/桁区切り）は数値として扱わないこと."""
        with pytest.raises(ValueError, match="Not a numeric literal"):
            to_number(text)
