"""
Lexer/Tokenizer for .cto model files.

Converts raw model text into a stream of tokens with source location tracking.
Keywords are not distinguished here; the parser decides from context whether
an identifier such as ``asset`` or ``optional`` is a keyword, because model
files routinely use these words as field names.
"""

from dataclasses import dataclass
from enum import Enum

from ..errors import make_model_error


class TokenType(Enum):
    """Token types in the modelling language."""

    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    REGEX = "regex"

    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    DOT = "."
    EQUALS = "="
    AT = "@"
    STAR = "*"
    ARROW = "-->"

    EOF = "end of file"


PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "=": TokenType.EQUALS,
    "@": TokenType.AT,
    "*": TokenType.STAR,
}


@dataclass
class Token:
    """
    A single token in a model file.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Lexer for .cto model files."""

    def __init__(self, text: str, file: str):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Model file name (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int | None = None, column: int | None = None):
        return make_model_error(
            message,
            self.file,
            line if line is not None else self.line,
            column if column is not None else self.column,
        )

    def skip_line_comment(self) -> None:
        while self.current_char() and self.current_char() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        start_line, start_col = self.line, self.column
        self.advance()
        self.advance()
        while True:
            current = self.current_char()
            if current is None:
                raise self.error("Unterminated block comment", start_line, start_col)
            if current == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                return
            self.advance()

    def read_string(self) -> str:
        """Read a quoted string."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()
        self.advance()

        chars = []
        while True:
            current = self.current_char()
            if not current or current == quote or current == "\n":
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise self.error("Unterminated string literal", start_line, start_col)

        self.advance()
        return "".join(chars)

    def read_number(self) -> str:
        chars = []
        if self.current_char() == "-":
            chars.append("-")
            self.advance()
        current = self.current_char()
        while current and (current.isdigit() or current in ".eE"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current in "_$"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_regex(self) -> str:
        """Read a /pattern/flags literal, returning it including delimiters."""
        start_line, start_col = self.line, self.column
        chars = ["/"]
        self.advance()
        while True:
            current = self.current_char()
            if current is None or current == "\n":
                raise self.error("Unterminated regular expression", start_line, start_col)
            chars.append(current)
            self.advance()
            if current == "\\":
                escaped = self.current_char()
                if escaped is not None:
                    chars.append(escaped)
                    self.advance()
                continue
            if current == "/":
                break
        while self.current_char() and self.current_char().isalpha():
            chars.append(self.current_char())
            self.advance()
        return "".join(chars)

    def _expects_regex(self) -> bool:
        # regex literals only appear as the value of a `regex =` field option
        return (
            len(self.tokens) >= 2
            and self.tokens[-1].type == TokenType.EQUALS
            and self.tokens[-2].type == TokenType.IDENTIFIER
            and self.tokens[-2].value == "regex"
        )

    def add(self, token_type: TokenType, value: str, line: int, column: int) -> None:
        self.tokens.append(Token(token_type, value, line, column))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens, terminated by an EOF token

        Raises:
            ModelValidationError: On characters that cannot start a token
        """
        while True:
            current = self.current_char()
            if current is None:
                break

            line, column = self.line, self.column

            if current.isspace():
                self.advance()
            elif current == "/" and self.peek_char() == "/":
                self.skip_line_comment()
            elif current == "/" and self.peek_char() == "*":
                self.skip_block_comment()
            elif current == "/" and self._expects_regex():
                self.add(TokenType.REGEX, self.read_regex(), line, column)
            elif current == "-" and self.peek_char() == "-" and self.peek_char(2) == ">":
                self.advance()
                self.advance()
                self.advance()
                self.add(TokenType.ARROW, "-->", line, column)
            elif current.isdigit() or (current == "-" and (self.peek_char() or "").isdigit()):
                self.add(TokenType.NUMBER, self.read_number(), line, column)
            elif current in ('"', "'"):
                self.add(TokenType.STRING, self.read_string(), line, column)
            elif current.isalpha() or current in "_$":
                self.add(TokenType.IDENTIFIER, self.read_identifier(), line, column)
            elif current in PUNCTUATION:
                self.advance()
                self.add(PUNCTUATION[current], current, line, column)
            else:
                raise self.error(f"Unexpected character {current!r}")

        self.add(TokenType.EOF, "", self.line, self.column)
        return self.tokens


def tokenize(text: str, file: str) -> list[Token]:
    """
    Convenience function to tokenize model text.

    Args:
        text: Source text
        file: Model file name

    Returns:
        List of tokens
    """
    return Lexer(text, file).tokenize()
