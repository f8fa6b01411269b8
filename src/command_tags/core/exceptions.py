"""Command tag parser exceptions.

カスタム例外クラスを定義します。
"""


class CommandTagError(Exception):
    """コマンドタグ解析の基底例外."""


class InvalidPatternError(CommandTagError, ValueError):
    """接頭辞やタグ定義から組み立てた正規表現がコンパイルできない例外.

    Attributes:
        pattern: コンパイルに失敗したパターン文字列
        reason: re.error のメッセージ
    """

    def __init__(self, pattern: str, reason: str) -> None:
        """例外初期化.

        Args:
            pattern: コンパイルに失敗したパターン文字列
            reason: re.error のメッセージ
        """
        self.pattern = pattern
        self.reason = reason
        message = (
            f"Invalid tag pattern: {pattern!r} ({reason}). "
            "Check the prefix and any custom value patterns (resolve=False / re.Pattern)."
        )
        super().__init__(message)


class MalformedValueError(CommandTagError, ValueError):
    """タグ値（object/array 形式のテキスト）が読めない例外.

    parse() の内部で回復される（置換を取り消す）ため、呼び出し側には伝播しない。

    Attributes:
        text: 読み込もうとしたテキスト
        position: エラー位置（0始まり）
        reason: エラー内容
    """

    def __init__(self, text: str, position: int, reason: str) -> None:
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"Malformed value at position {position}: {reason} (in {text!r})")
