"""Tests for the shared IDL lexer."""

import pytest

from idl2ts.core.errors import ParseError
from idl2ts.core.lexer import TokenType, tokenize


def kinds(text: str, hash_comments: bool = False) -> list[TokenType]:
    return [t.type for t in tokenize(text, "source", hash_comments=hash_comments)]


class TestTokens:
    """Tests for basic token kinds."""

    def test_punctuation_and_identifiers(self):
        tokens = tokenize("struct Foo { 1: i32 bar; }", "source")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.LBRACE,
            TokenType.NUMBER,
            TokenType.COLON,
            TokenType.IDENTIFIER,
            TokenType.IDENTIFIER,
            TokenType.SEMICOLON,
            TokenType.RBRACE,
            TokenType.EOF,
        ]

    def test_dotted_identifier_is_one_token(self):
        tokens = tokenize("base.BaseResp google.protobuf.Empty", "source")
        assert [t.value for t in tokens[:2]] == ["base.BaseResp", "google.protobuf.Empty"]

    def test_dot_before_paren_is_punctuation(self):
        tokens = tokenize("(api_method).get", "source")
        assert [t.value for t in tokens[:-1]] == ["(", "api_method", ")", ".", "get"]

    def test_strings_with_either_quote(self):
        tokens = tokenize("\"a\\\"b\" 'c'", "source")
        assert [t.value for t in tokens[:2]] == ['a"b', "c"]
        assert tokens[0].type == TokenType.STRING

    def test_numbers(self):
        tokens = tokenize("42 0x1F 3.14 1e3", "source")
        assert [t.value for t in tokens[:4]] == ["42", "0x1F", "3.14", "1e3"]
        assert all(t.type == TokenType.NUMBER for t in tokens[:4])

    def test_positions(self):
        tokens = tokenize("a\n  b", "source")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (2, 3)


class TestComments:
    """Tests for comment tokens."""

    def test_line_and_block_comments_are_kept(self):
        tokens = tokenize("// one\n/* two\n three */ x", "source")
        assert tokens[0].type == TokenType.COMMENT
        assert tokens[0].value == "// one"
        assert tokens[1].is_block_comment
        assert tokens[1].line == 2
        assert tokens[1].end_line == 3

    def test_hash_comments_only_when_enabled(self):
        assert kinds("# note\nx", hash_comments=True)[0] == TokenType.COMMENT
        with pytest.raises(ParseError, match="illegal token '#'"):
            tokenize("# note", "source")


class TestErrors:
    """Tests for lexical errors."""

    def test_illegal_character_has_location(self):
        with pytest.raises(ParseError) as exc:
            tokenize("struct Foo @", "source")
        assert str(exc.value) == "illegal token '@'(source:1:12)"

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="unterminated string literal"):
            tokenize('"abc', "source")

    def test_unterminated_block_comment(self):
        with pytest.raises(ParseError, match="unterminated block comment"):
            tokenize("/* abc", "idl/base.thrift")
