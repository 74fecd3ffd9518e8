"""
Base parser class shared by the Thrift and Protobuf grammars.

Provides token navigation, matching, error generation and comment
attachment. COMMENT tokens never reach the grammar methods: they are moved
to a pending list while advancing, then claimed as leading or trailing
comments of a declaration, or dropped when a block closes.
"""

from typing import Any

from .. import ir
from ..errors import ParseError, make_parse_error
from ..lexer import Token, TokenType


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: str, revise_tail_comment: bool = True):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer, COMMENT tokens included
            file: Source label (for error reporting)
            revise_tail_comment: Fold same-line trailing comments into the
                declaration they follow instead of the next one
        """
        self.tokens = tokens
        self.file = file
        self.revise_tail_comment = revise_tail_comment
        self.pos = 0
        self.last_index = -1
        self.pending: list[tuple[int, Token]] = []
        self._skip_comments()

    # ------------------------------------------------------------------
    # Token navigation

    def _skip_comments(self) -> None:
        while self.tokens[self.pos].type == TokenType.COMMENT:
            self.pending.append((self.pos, self.tokens[self.pos]))
            self.pos += 1

    def current_token(self) -> Token:
        """Get current (non-comment) token."""
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at a later non-comment token."""
        pos = self.pos
        while offset > 0 and pos < len(self.tokens) - 1:
            pos += 1
            if self.tokens[pos].type != TokenType.COMMENT:
                offset -= 1
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.last_index = self.pos
            self.pos += 1
            self._skip_comments()
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def match_keyword(self, *words: str) -> bool:
        """Check if current token is an identifier spelled as one of ``words``."""
        token = self.current_token()
        return token.type == TokenType.IDENTIFIER and token.value in words

    def accept(self, token_type: TokenType) -> bool:
        """Consume the current token if it has the given type."""
        if self.match(token_type):
            self.advance()
            return True
        return False

    def accept_keyword(self, word: str) -> bool:
        """Consume the current token if it is the given keyword."""
        if self.match_keyword(word):
            self.advance()
            return True
        return False

    def accept_separator(self) -> None:
        """Consume an optional list separator (``,`` or ``;``)."""
        if self.match(TokenType.COMMA, TokenType.SEMICOLON):
            self.advance()

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        if not self.match(token_type):
            raise self.illegal_token()
        return self.advance()

    def expect_keyword(self, word: str) -> Token:
        """Expect an identifier spelled ``word`` and consume it."""
        if not self.match_keyword(word):
            raise self.illegal_token()
        return self.advance()

    def expect_identifier(self) -> Token:
        """Expect an identifier (keywords are valid identifiers here)."""
        return self.expect(TokenType.IDENTIFIER)

    # ------------------------------------------------------------------
    # Errors

    def illegal_token(self, token: Token | None = None) -> ParseError:
        """Build the error for an unexpected token."""
        token = token or self.current_token()
        if token.type == TokenType.EOF:
            return make_parse_error("unexpected EOF", self.file, token.line, token.column)
        text = token.value if token.type != TokenType.STRING else f'"{token.value}"'
        return make_parse_error(f"illegal token {text!r}", self.file, token.line, token.column)

    # ------------------------------------------------------------------
    # Literals

    def parse_number(self) -> int | float:
        """Parse an optionally signed integer or float literal."""
        sign = 1
        if self.match(TokenType.MINUS, TokenType.PLUS):
            sign = -1 if self.advance().type == TokenType.MINUS else 1
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER and token.value in ("inf", "nan"):
            self.advance()
            return sign * float(token.value)
        value = self.expect(TokenType.NUMBER).value
        if value.lower().startswith("0x"):
            return sign * int(value, 16)
        if any(ch in value for ch in ".eE"):
            return sign * float(value)
        return sign * int(value)

    def parse_int(self) -> int:
        """Parse an integer literal."""
        token = self.current_token()
        value = self.parse_number()
        if not isinstance(value, int):
            raise self.illegal_token(token)
        return value

    # ------------------------------------------------------------------
    # Comments

    def begin_comments(self) -> list[Token]:
        """Claim every pending comment as leading comments of a declaration."""
        tokens = [token for _, token in self.pending]
        self.pending = []
        return tokens

    def end_comments(self, leading: list[Token]) -> list[ir.Comment]:
        """
        Close the comment run of the declaration just finished.

        Comments inside the declaration always belong to it. Comments after
        its last token on the same line are claimed only when
        ``revise_tail_comment`` is set; otherwise they stay pending and lead
        the next declaration.
        """
        if self.last_index < 0:
            return group_comments(leading)
        last = self.tokens[self.last_index]
        claimed: list[Token] = []
        remaining: list[tuple[int, Token]] = []
        for index, token in self.pending:
            if index < self.last_index:
                claimed.append(token)
            elif self.revise_tail_comment and token.line == last.end_line:
                claimed.append(token)
            else:
                remaining.append((index, token))
        self.pending = remaining
        return group_comments(leading + claimed)

    def discard_comments(self) -> None:
        """Drop pending comments that have no following declaration."""
        self.pending = []

    def location(self, token: Token) -> ir.SourceLocation:
        return ir.SourceLocation(file=self.file, line=token.line, column=token.column)


def comment_text(token: Token) -> str:
    """Strip comment delimiters from a raw COMMENT token."""
    raw = token.value
    if raw.startswith("/*"):
        return raw[2:-2]
    if raw.startswith("//"):
        return raw[2:]
    return raw[1:]


def group_comments(tokens: list[Token]) -> list[ir.Comment]:
    """
    Group comment tokens into runs.

    A run is a sequence of comments of the same kind on adjacent lines.
    A run of one keeps its text as a string, longer runs keep a list.
    """
    groups: list[list[Token]] = []
    for token in tokens:
        if groups:
            prev = groups[-1][-1]
            if prev.is_block_comment == token.is_block_comment and token.line == prev.end_line + 1:
                groups[-1].append(token)
                continue
        groups.append([token])

    comments: list[ir.Comment] = []
    for group in groups:
        kind = "block" if group[0].is_block_comment else "line"
        texts = [comment_text(token) for token in group]
        value: Any = texts[0] if len(texts) == 1 else texts
        comments.append(ir.Comment(type=kind, value=value))
    return comments
