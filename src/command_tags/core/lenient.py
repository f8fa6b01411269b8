"""object/array 形式テキストの寛容な読み込み.

タグ値（例: `--config {size: 10, mode: fast}`）を Python の値に変換する。
JSON をベースに、手入力で書かれがちな以下の揺れを許容する。

    - 引用符なしのキー（`{size: 10}`）
    - シングルクォート文字列（`{'mode': 'fast'}`）
    - コンテナ内の引用符なしの単語値（`mode: fast` → "fast"）
    - 末尾カンマ（`[1, 2,]`）

キーの補完を正規表現の置換で行うと、文字列中の `:` や `{` まで書き換えてしまうため、
トークナイザ + 再帰下降で読む。
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from .exceptions import MalformedValueError

_TOKEN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<punct>[{}\[\]:,])
    |(?P<dstring>"(?:[^"\\]|\\.)*")
    |(?P<sstring>'(?:[^'\\]|\\.)*')
    |(?P<number>-?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<word>[A-Za-z_$][\w$.\-]*)
    """,
    re.VERBOSE | re.DOTALL,
)
_SINGLE_QUOTE_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "/": "/", "\\": "\\", "'": "'", '"': '"'}
_LITERALS: dict[str, Any] = {"true": True, "false": False, "null": None}

# float() が受け付ける "nan" / "inf" / "1_000" は数値リテラルとして扱わない
NUMERIC_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# {} / [] の入れ子の上限（超えたら MalformedValueError）
MAX_DEPTH = 100


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    pos: int


def to_number(text: str) -> int | float:
    """数値テキストを int（小数部/指数があれば float）に変換する.

    Raises:
        ValueError: 数値として読めない場合
    """
    s = text.strip()
    if NUMERIC_TEXT.fullmatch(s) is None:
        raise ValueError(f"Not a numeric literal: {text!r}")
    if re.fullmatch(r"[+-]?\d+", s):
        return int(s)
    return float(s)


def _unescape_single(inner: str) -> str:
    def _replace(m: re.Match[str]) -> str:
        esc = m.group(1)
        if esc.startswith("u") and len(esc) == 5:
            return chr(int(esc[1:], 16))
        return _ESCAPES.get(esc, esc)

    return _SINGLE_QUOTE_ESCAPE.sub(_replace, inner)


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if m is None:
            raise MalformedValueError(text, pos, f"unexpected character {text[pos]!r}")
        kind = m.lastgroup or ""
        if kind == "punct":
            kind = m.group(0)
        if kind != "ws":
            tokens.append(_Token(kind, m.group(0), pos))
        pos = m.end()
    return tokens


class _LenientReader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.index = 0
        self.depth = 0

    def _peek(self) -> _Token | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _next(self, expected: str) -> _Token:
        tok = self._peek()
        if tok is None:
            raise MalformedValueError(self.text, len(self.text), f"unexpected end of input, expected {expected}")
        self.index += 1
        return tok

    def _error(self, tok: _Token, expected: str) -> MalformedValueError:
        return MalformedValueError(self.text, tok.pos, f"expected {expected}, got {tok.text!r}")

    def read(self) -> Any:
        if not self.tokens:
            raise MalformedValueError(self.text, 0, "empty value")
        value = self._value(top_level=True)
        extra = self._peek()
        if extra is not None:
            raise MalformedValueError(self.text, extra.pos, f"unexpected trailing {extra.text!r}")
        return value

    def _value(self, top_level: bool = False) -> Any:
        tok = self._next("a value")
        if tok.kind in ("{", "["):
            return self._container(tok)
        if tok.kind in ("dstring", "sstring"):
            return self._string(tok)
        if tok.kind == "number":
            return to_number(tok.text)
        if tok.kind == "word":
            if tok.text in _LITERALS:
                return _LITERALS[tok.text]
            if top_level:
                raise MalformedValueError(self.text, tok.pos, f"bare word {tok.text!r} outside of an object/array")
            return tok.text
        raise self._error(tok, "a value")

    def _container(self, tok: _Token) -> dict[str, Any] | list[Any]:
        if self.depth >= MAX_DEPTH:
            raise MalformedValueError(self.text, tok.pos, f"nesting too deep (max {MAX_DEPTH})")
        self.depth += 1
        value = self._object() if tok.kind == "{" else self._array()
        self.depth -= 1
        return value

    def _string(self, tok: _Token) -> str:
        if tok.kind == "sstring":
            return _unescape_single(tok.text[1:-1])
        try:
            return json.loads(tok.text)
        except json.JSONDecodeError as e:
            raise MalformedValueError(self.text, tok.pos + e.pos, e.msg) from e

    def _key(self) -> str:
        tok = self._next("a key")
        if tok.kind in ("dstring", "sstring"):
            return self._string(tok)
        if tok.kind in ("word", "number"):
            return tok.text
        raise self._error(tok, "a key")

    def _object(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        while True:
            tok = self._peek()
            if tok is not None and tok.kind == "}":
                self.index += 1
                return out
            key = self._key()
            colon = self._next("':'")
            if colon.kind != ":":
                raise self._error(colon, "':'")
            out[key] = self._value()
            sep = self._next("',' or '}'")
            if sep.kind == "}":
                return out
            if sep.kind != ",":
                raise self._error(sep, "',' or '}'")

    def _array(self) -> list[Any]:
        out: list[Any] = []
        while True:
            tok = self._peek()
            if tok is not None and tok.kind == "]":
                self.index += 1
                return out
            out.append(self._value())
            sep = self._next("',' or ']'")
            if sep.kind == "]":
                return out
            if sep.kind != ",":
                raise self._error(sep, "',' or ']'")


def read_lenient(text: str) -> Any:
    """object/array 形式（または JSON スカラー）のテキストを読み込む.

    Args:
        text: タグ値のテキスト（例: "{size: 10, mode: fast}"）

    Returns:
        読み込んだ値（dict / list / str / int / float / bool / None）

    Raises:
        MalformedValueError: 構文として読めない場合、入れ子が MAX_DEPTH を超える場合

    Examples:
        >>> read_lenient("{size: 10, mode: fast}")
        {'size': 10, 'mode': 'fast'}
        >>> read_lenient("[1, 'two', three,]")
        [1, 'two', 'three']
        >>> read_lenient('{"url": "http://a:b/{c}"}')
        {'url': 'http://a:b/{c}'}
    """
    return _LenientReader(text).read()
