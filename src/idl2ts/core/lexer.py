"""
Lexer/Tokenizer shared by the Thrift and Protobuf grammars.

Converts raw IDL text into a stream of tokens with source location tracking.
Comments are kept in the stream as COMMENT tokens (verbatim, including
delimiters and interior newlines) so the parsers can attach them to
declarations; whitespace is skipped.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import make_parse_error


class TokenType(Enum):
    """Token types shared by both IDL grammars."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    COMMENT = "COMMENT"

    # Punctuation
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    EQUALS = "="
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    STAR = "*"

    # Special
    EOF = "EOF"


PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "=": TokenType.EQUALS,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "*": TokenType.STAR,
}


@dataclass
class Token:
    """
    A single token in an IDL source.

    Attributes:
        type: Type of token
        value: String value of the token (raw text for comments)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        end_line: Line the token ends on (differs for block comments)
    """

    type: TokenType
    value: str
    line: int
    column: int
    end_line: int = 0

    def __post_init__(self) -> None:
        if not self.end_line:
            self.end_line = self.line

    @property
    def is_block_comment(self) -> bool:
        return self.type == TokenType.COMMENT and self.value.startswith("/*")

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for Thrift and Protobuf sources.

    Args:
        text: Source text to tokenize
        file: Source label for error reporting (path or ``source``)
        hash_comments: Treat ``#`` as a line comment (Thrift)
    """

    def __init__(self, text: str, file: str, hash_comments: bool = False):
        self.text = text
        self.file = file
        self.hash_comments = hash_comments
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

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while self.current_char() in (" ", "\t", "\r", "\n", "\f", "\v"):
            self.advance()

    def read_line_comment(self) -> str:
        """Read a ``//`` or ``#`` comment up to (not including) the newline."""
        start = self.pos
        while self.current_char() and self.current_char() != "\n":
            self.advance()
        return self.text[start : self.pos].rstrip("\r")

    def read_block_comment(self) -> str:
        """Read a ``/* ... */`` comment verbatim."""
        start_line = self.line
        start_col = self.column
        start = self.pos
        self.advance()
        self.advance()
        while True:
            ch = self.current_char()
            if ch is None:
                raise make_parse_error(
                    "unterminated block comment", self.file, start_line, start_col
                )
            if ch == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                break
            self.advance()
        return self.text[start : self.pos]

    def read_string(self) -> str:
        """Read a quoted string."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()  # " or '
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
                elif escape_char == "r":
                    chars.append("\r")
                elif escape_char:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise make_parse_error(
                "unterminated string literal",
                self.file,
                start_line,
                start_col,
            )

        self.advance()  # skip closing quote
        return "".join(chars)

    def read_number(self) -> str:
        """Read an integer (decimal or hex) or floating point literal."""
        start = self.pos
        if self.current_char() == "0" and self.peek_char() in ("x", "X"):
            self.advance()
            self.advance()
            while (ch := self.current_char()) and ch in "0123456789abcdefABCDEF":
                self.advance()
            return self.text[start : self.pos]

        while (ch := self.current_char()) and (ch.isdigit() or ch == "."):
            self.advance()
        if self.current_char() in ("e", "E"):
            self.advance()
            if self.current_char() in ("+", "-"):
                self.advance()
            while (ch := self.current_char()) and ch.isdigit():
                self.advance()
        return self.text[start : self.pos]

    def read_identifier(self) -> str:
        """
        Read an identifier.

        Dots are part of an identifier when followed by a letter or
        underscore, so ``base.BaseResp`` and ``google.protobuf.Empty`` come
        out as one token.
        """
        chars = []
        while True:
            current = self.current_char()
            if current and (current.isalnum() or current == "_"):
                chars.append(current)
                self.advance()
                continue
            nxt = self.peek_char()
            if current == "." and chars and nxt and (nxt.isalpha() or nxt == "_"):
                chars.append(current)
                self.advance()
                continue
            break
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens including COMMENT tokens and a final EOF

        Raises:
            ParseError: On an illegal character or unterminated literal
        """
        while True:
            self.skip_whitespace()
            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch == "/" and self.peek_char() == "/":
                value = self.read_line_comment()
                self.tokens.append(Token(TokenType.COMMENT, value, token_line, token_col))

            elif ch == "/" and self.peek_char() == "*":
                value = self.read_block_comment()
                self.tokens.append(
                    Token(TokenType.COMMENT, value, token_line, token_col, end_line=self.line)
                )

            elif ch == "#" and self.hash_comments:
                value = self.read_line_comment()
                self.tokens.append(Token(TokenType.COMMENT, value, token_line, token_col))

            elif ch in ('"', "'"):
                value = self.read_string()
                self.tokens.append(Token(TokenType.STRING, value, token_line, token_col))

            elif ch.isdigit() or (ch == "." and (self.peek_char() or "").isdigit()):
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, token_line, token_col))

            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                self.tokens.append(Token(TokenType.IDENTIFIER, value, token_line, token_col))

            elif ch in PUNCTUATION:
                self.advance()
                self.tokens.append(Token(PUNCTUATION[ch], ch, token_line, token_col))

            else:
                raise make_parse_error(
                    f"illegal token {ch!r}",
                    self.file,
                    token_line,
                    token_col,
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens


def tokenize(text: str, file: str, hash_comments: bool = False) -> list[Token]:
    """
    Convenience function to tokenize IDL text.

    Args:
        text: Source text
        file: Source label for error reporting
        hash_comments: Treat ``#`` as a line comment

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file, hash_comments=hash_comments)
    return lexer.tokenize()
