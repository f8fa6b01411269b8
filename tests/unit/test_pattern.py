"""Unit tests for pattern compilation."""

import re

import pytest

from command_tags.core.exceptions import InvalidPatternError
from command_tags.core.pattern import compile_tag_pattern, prefix_source


class TestPrefixSource:
    def test_text_prefix(self) -> None:
        """文字列の接頭辞はそのまま使うこと."""
        assert prefix_source("--") == "--"

    def test_missing_prefix_falls_back(self) -> None:
        """接頭辞が未指定/空なら "-+" を使うこと."""
        assert prefix_source(None) == "-+"
        assert prefix_source("") == "-+"

    def test_leading_anchor_stripped(self) -> None:
        """先頭の ^ を取り除くこと."""
        assert prefix_source("^--") == "--"
        assert prefix_source(re.compile(r"^[!/]")) == "(?:[!/])"


class TestCompileTagPattern:
    def test_alternation(self) -> None:
        """タグ断片を1つの選択パターンにまとめること."""
        pattern = compile_tag_pattern("--", ["bold", "italic"])

        assert pattern.tags is not None
        assert pattern.tags.pattern == " ?(?:--)(?:bold|italic) ?"
        assert pattern.tags.flags & re.IGNORECASE

    def test_no_trailing_space_when_prefix_matches_at_start(self) -> None:
        """接頭辞が空白1文字の先頭で一致しうる場合は末尾の ` ?` を付けないこと."""
        pattern = compile_tag_pattern("-*", ["bold"])

        assert pattern.tags is not None
        assert pattern.tags.pattern == " ?(?:-*)(?:bold)"

    def test_no_fragments(self) -> None:
        """断片が無ければタグパターンは作らず、後処理用パターンだけ作ること."""
        pattern = compile_tag_pattern("--", [])

        assert pattern.tags is None
        assert pattern.stray.pattern == r" ?(?:--)\w+ ?"

    def test_prefix_start_strips_prefix(self) -> None:
        """prefix_start で先頭の接頭辞だけを取り除けること."""
        pattern = compile_tag_pattern("-+", ["bold"])

        assert pattern.prefix_start.sub("", "---bold", count=1) == "bold"

    def test_invalid_prefix(self) -> None:
        """不正な接頭辞は InvalidPatternError になり、パターン文字列を保持すること."""
        with pytest.raises(InvalidPatternError) as exc_info:
            compile_tag_pattern("([", ["bold"])

        assert "([" in exc_info.value.pattern

    def test_invalid_fragment(self) -> None:
        """不正なタグ断片は InvalidPatternError になること."""
        with pytest.raises(InvalidPatternError, match="Invalid tag pattern"):
            compile_tag_pattern("--", ["color (unclosed"])
