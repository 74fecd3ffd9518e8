"""
Protobuf parser.

Grammar (simplified):

    Document  ::= (Syntax | Package | Import | Option | Message | Enum
                   | Service | Extend | ';')*
    Message   ::= 'message' IDENTIFIER '{' (Field | MapField | Oneof | Option
                   | Message | Enum | Reserved | Extensions | Extend | ';')* '}'
    Field     ::= Label? Type IDENTIFIER '=' NUMBER FieldOptions? ';'
    Service   ::= 'service' IDENTIFIER '{' (Option | Rpc | ';')* '}'
    Rpc       ::= 'rpc' IDENTIFIER '(' 'stream'? Type ')'
                  'returns' '(' 'stream'? Type ')' ('{' (Option | ';')* '}' | ';')
    Option    ::= 'option' OptionName '=' (Constant | Aggregate) ';'
    OptionName::= (IDENTIFIER | '(' IDENTIFIER ')') ('.' IDENTIFIER)*
"""

from __future__ import annotations

from typing import Any

from ..lexer import TokenType, tokenize
from .base import BaseParser
from .proto_ast import (
    Option,
    ProtoDocument,
    ProtoEnum,
    ProtoEnumValue,
    ProtoField,
    ProtoMessage,
    ProtoRpc,
    ProtoService,
)

LABELS = ("repeated", "optional", "required")


class ProtoParser(BaseParser):
    """Recursive descent parser for ``.proto`` sources."""

    def parse(self) -> ProtoDocument:
        """
        Parse the whole token stream.

        Returns:
            ProtoDocument with top-level definitions in source order
        """
        doc = ProtoDocument(file=self.file)

        while not self.match(TokenType.EOF):
            if self.match_keyword("syntax", "edition"):
                leading = self.begin_comments()
                self.advance()
                self.expect(TokenType.EQUALS)
                doc.syntax = self.expect(TokenType.STRING).value
                self.expect(TokenType.SEMICOLON)
                self.end_comments(leading)
            elif self.match_keyword("package"):
                leading = self.begin_comments()
                self.advance()
                doc.package = self.parse_type_name()
                self.expect(TokenType.SEMICOLON)
                self.end_comments(leading)
            elif self.match_keyword("import"):
                leading = self.begin_comments()
                self.advance()
                if self.match_keyword("public", "weak"):
                    self.advance()
                doc.imports.append(self.expect(TokenType.STRING).value)
                self.expect(TokenType.SEMICOLON)
                self.end_comments(leading)
            elif self.match_keyword("option"):
                doc.options.extend(self.parse_option_statement())
            elif self.match_keyword("message"):
                doc.definitions.append(self.parse_message())
            elif self.match_keyword("enum"):
                doc.definitions.append(self.parse_enum())
            elif self.match_keyword("service"):
                doc.definitions.append(self.parse_service())
            elif self.match_keyword("extend"):
                self.skip_extend()
            elif self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                raise self.illegal_token()

        self.discard_comments()
        return doc

    # ------------------------------------------------------------------
    # Messages

    def parse_message(self) -> ProtoMessage:
        leading = self.begin_comments()
        start = self.expect_keyword("message")
        message = ProtoMessage(
            name=self.expect_identifier().value, line=start.line, column=start.column
        )
        self.expect(TokenType.LBRACE)

        while not self.match(TokenType.RBRACE):
            if self.match_keyword("message"):
                message.messages.append(self.parse_message())
            elif self.match_keyword("enum"):
                message.enums.append(self.parse_enum())
            elif self.match_keyword("option"):
                message.options.extend(self.parse_option_statement())
            elif self.match_keyword("oneof"):
                message.fields.extend(self.parse_oneof())
            elif self.match_keyword("reserved", "extensions"):
                self.skip_statement()
            elif self.match_keyword("extend"):
                self.skip_extend()
            elif self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                message.fields.append(self.parse_field())

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        self.accept(TokenType.SEMICOLON)
        message.comments = self.end_comments(leading)
        return message

    def parse_field(self, oneof: str | None = None) -> ProtoField:
        leading = self.begin_comments()
        start = self.current_token()

        label = None
        if (
            oneof is None
            and self.match_keyword(*LABELS)
            and self.peek_token(2).type != TokenType.EQUALS
        ):
            label = self.advance().value

        key_type = value_type = None
        if self.match_keyword("map") and self.peek_token().type == TokenType.LESS_THAN:
            self.advance()
            self.expect(TokenType.LESS_THAN)
            key_type = self.parse_type_name()
            self.expect(TokenType.COMMA)
            value_type = self.parse_type_name()
            self.expect(TokenType.GREATER_THAN)
            type_name = "map"
        else:
            type_name = self.parse_type_name()

        name = self.expect_identifier().value
        self.expect(TokenType.EQUALS)
        number = self.parse_int()
        options = self.parse_field_options()
        self.expect(TokenType.SEMICOLON)

        return ProtoField(
            name=name,
            line=start.line,
            column=start.column,
            type=type_name,
            number=number,
            label=label,
            key_type=key_type,
            value_type=value_type,
            oneof=oneof,
            options=options,
            comments=self.end_comments(leading),
        )

    def parse_oneof(self) -> list[ProtoField]:
        """Parse a ``oneof`` block into its member fields."""
        leading = self.begin_comments()
        self.expect_keyword("oneof")
        name = self.expect_identifier().value
        self.expect(TokenType.LBRACE)
        self.end_comments(leading)

        fields: list[ProtoField] = []
        while not self.match(TokenType.RBRACE):
            if self.match_keyword("option"):
                self.parse_option_statement()
            elif self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                fields.append(self.parse_field(oneof=name))

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        return fields

    def skip_extend(self) -> None:
        """Parse an ``extend`` block and drop it."""
        leading = self.begin_comments()
        self.expect_keyword("extend")
        self.parse_type_name()
        self.expect(TokenType.LBRACE)
        while not self.match(TokenType.RBRACE):
            if self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                self.parse_field()
        self.discard_comments()
        self.expect(TokenType.RBRACE)
        self.end_comments(leading)

    def skip_statement(self) -> None:
        """Skip a ``reserved`` or ``extensions`` statement."""
        leading = self.begin_comments()
        while not self.match(TokenType.SEMICOLON):
            if self.match(TokenType.EOF):
                raise self.illegal_token()
            self.advance()
        self.advance()
        self.end_comments(leading)

    # ------------------------------------------------------------------
    # Enums

    def parse_enum(self) -> ProtoEnum:
        leading = self.begin_comments()
        start = self.expect_keyword("enum")
        enum = ProtoEnum(name=self.expect_identifier().value, line=start.line, column=start.column)
        self.expect(TokenType.LBRACE)

        while not self.match(TokenType.RBRACE):
            if self.match_keyword("option"):
                enum.options.extend(self.parse_option_statement())
            elif self.match_keyword("reserved"):
                self.skip_statement()
            elif self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                enum.values.append(self.parse_enum_value())

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        self.accept(TokenType.SEMICOLON)
        enum.comments = self.end_comments(leading)
        return enum

    def parse_enum_value(self) -> ProtoEnumValue:
        leading = self.begin_comments()
        token = self.expect_identifier()
        self.expect(TokenType.EQUALS)
        value = self.parse_int()
        options = self.parse_field_options()
        self.expect(TokenType.SEMICOLON)
        return ProtoEnumValue(
            name=token.value,
            line=token.line,
            column=token.column,
            value=value,
            options=options,
            comments=self.end_comments(leading),
        )

    # ------------------------------------------------------------------
    # Services

    def parse_service(self) -> ProtoService:
        leading = self.begin_comments()
        start = self.expect_keyword("service")
        service = ProtoService(
            name=self.expect_identifier().value, line=start.line, column=start.column
        )
        self.expect(TokenType.LBRACE)

        while not self.match(TokenType.RBRACE):
            if self.match_keyword("option"):
                service.options.extend(self.parse_option_statement())
            elif self.match_keyword("rpc"):
                service.rpcs.append(self.parse_rpc())
            elif self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                raise self.illegal_token()

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        self.accept(TokenType.SEMICOLON)
        service.comments = self.end_comments(leading)
        return service

    def parse_rpc(self) -> ProtoRpc:
        leading = self.begin_comments()
        start = self.expect_keyword("rpc")
        rpc = ProtoRpc(name=self.expect_identifier().value, line=start.line, column=start.column)

        self.expect(TokenType.LPAREN)
        rpc.request_stream = self._accept_stream()
        rpc.request_type = self.parse_type_name()
        self.expect(TokenType.RPAREN)
        self.expect_keyword("returns")
        self.expect(TokenType.LPAREN)
        rpc.response_stream = self._accept_stream()
        rpc.response_type = self.parse_type_name()
        self.expect(TokenType.RPAREN)

        if self.accept(TokenType.LBRACE):
            while not self.match(TokenType.RBRACE):
                if self.match_keyword("option"):
                    rpc.options.extend(self.parse_option_statement())
                elif self.match(TokenType.SEMICOLON):
                    self.advance()
                else:
                    raise self.illegal_token()
            self.discard_comments()
            self.expect(TokenType.RBRACE)
            self.accept(TokenType.SEMICOLON)
        else:
            self.expect(TokenType.SEMICOLON)

        rpc.comments = self.end_comments(leading)
        return rpc

    def _accept_stream(self) -> bool:
        if self.match_keyword("stream") and self.peek_token().type in (
            TokenType.IDENTIFIER,
            TokenType.DOT,
        ):
            self.advance()
            return True
        return False

    # ------------------------------------------------------------------
    # Names and options

    def parse_type_name(self) -> str:
        """Parse a possibly fully qualified name (``.pkg.Type``)."""
        prefix = "." if self.accept(TokenType.DOT) else ""
        return prefix + self.expect_identifier().value

    def parse_option_statement(self) -> list[Option]:
        """Parse ``option <name> = <value>;``."""
        leading = self.begin_comments()
        self.expect_keyword("option")
        name = self.parse_option_name()
        self.expect(TokenType.EQUALS)
        options = self.parse_option_value(name)
        self.expect(TokenType.SEMICOLON)
        self.end_comments(leading)
        return options

    def parse_field_options(self) -> list[Option]:
        """Parse ``[name = value, ...]`` after a field or enum value."""
        options: list[Option] = []
        if not self.accept(TokenType.LBRACKET):
            return options
        while True:
            name = self.parse_option_name()
            self.expect(TokenType.EQUALS)
            options.extend(self.parse_option_value(name))
            if not self.accept(TokenType.COMMA):
                break
        self.expect(TokenType.RBRACKET)
        return options

    def parse_option_name(self) -> str:
        """
        Parse an option name.

        ``(api.get)`` gives ``api.get`` and ``(api_method).get`` gives
        ``api_method.get``.
        """
        parts: list[str] = []
        if self.accept(TokenType.LPAREN):
            parts.append(self.parse_type_name().lstrip("."))
            self.expect(TokenType.RPAREN)
        else:
            parts.append(self.expect_identifier().value)
        while self.accept(TokenType.DOT):
            parts.append(self.expect_identifier().value)
        return ".".join(parts)

    def parse_option_value(self, name: str) -> list[Option]:
        if self.accept(TokenType.LBRACE):
            return self._parse_aggregate(name)
        return [(name, self.parse_constant())]

    def _parse_aggregate(self, prefix: str) -> list[Option]:
        """Parse a text-format aggregate, flattening it into dotted keys."""
        options: list[Option] = []
        while not self.match(TokenType.RBRACE):
            if self.accept(TokenType.LBRACKET):
                key = self.parse_type_name()
                self.expect(TokenType.RBRACKET)
            else:
                key = self.expect_identifier().value
            name = f"{prefix}.{key}"
            self.accept(TokenType.COLON)

            if self.accept(TokenType.LBRACE):
                options.extend(self._parse_aggregate(name))
            elif self.accept(TokenType.LBRACKET):
                items = []
                while not self.match(TokenType.RBRACKET):
                    items.append(self.parse_constant())
                    self.accept(TokenType.COMMA)
                self.expect(TokenType.RBRACKET)
                options.append((name, items))
            else:
                options.append((name, self.parse_constant()))
            self.accept_separator()
        self.expect(TokenType.RBRACE)
        return options

    def parse_constant(self) -> Any:
        """Parse a scalar constant: string, number, bool or identifier."""
        if self.match(TokenType.STRING):
            # Adjacent string literals concatenate.
            parts = []
            while self.match(TokenType.STRING):
                parts.append(self.advance().value)
            return "".join(parts)
        if self.match(TokenType.NUMBER, TokenType.MINUS, TokenType.PLUS):
            return self.parse_number()
        if self.match(TokenType.IDENTIFIER):
            if self.match_keyword("inf", "nan"):
                return self.parse_number()
            value = self.advance().value
            if value in ("true", "false"):
                return value == "true"
            return value
        raise self.illegal_token()


def parse_proto(text: str, file: str, revise_tail_comment: bool = True) -> ProtoDocument:
    """
    Parse Protobuf source text.

    Args:
        text: Source text
        file: Source label for locations and errors
        revise_tail_comment: Fold same-line trailing comments into the
            preceding declaration

    Returns:
        ProtoDocument

    Raises:
        ParseError: If the source is malformed
    """
    tokens = tokenize(text, file)
    return ProtoParser(tokens, file, revise_tail_comment=revise_tail_comment).parse()
