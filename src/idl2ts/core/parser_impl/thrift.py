"""
Thrift parser.

Grammar (simplified):

    Document    ::= Header* Definition*
    Header      ::= 'include' STRING | 'cpp_include' STRING
                  | 'namespace' (IDENTIFIER | '*') IDENTIFIER
    Definition  ::= Const | Typedef | Enum | Struct | Union | Exception | Service
    Field       ::= (NUMBER ':')? ('required' | 'optional')? Type IDENTIFIER
                    ('=' ConstValue)? Annotations? Separator?
    Function    ::= 'oneway'? ('void' | Type) IDENTIFIER '(' Field* ')'
                    ('throws' '(' Field* ')')? Annotations? Separator?
    Annotations ::= '(' (IDENTIFIER ('=' STRING)? Separator?)* ')'
"""

from __future__ import annotations

from typing import Any

from .. import ir
from ..lexer import Token, TokenType, tokenize
from .base import BaseParser
from .thrift_ast import (
    Annotation,
    ThriftConst,
    ThriftDocument,
    ThriftEnum,
    ThriftEnumValue,
    ThriftField,
    ThriftFunction,
    ThriftService,
    ThriftStruct,
    ThriftType,
    ThriftTypedef,
)

STRUCT_KEYWORDS = ("struct", "union", "exception")
CONTAINER_KEYWORDS = ("map", "set", "list")


class ThriftParser(BaseParser):
    """Recursive descent parser for ``.thrift`` sources."""

    def parse(self) -> ThriftDocument:
        """
        Parse the whole token stream.

        Returns:
            ThriftDocument with headers and definitions in source order
        """
        doc = ThriftDocument(file=self.file)

        while not self.match(TokenType.EOF):
            if self.match_keyword("include", "cpp_include"):
                self._parse_include(doc)
            elif self.match_keyword("namespace"):
                self._parse_namespace(doc)
            elif self.match_keyword("const"):
                doc.definitions.append(self.parse_const())
            elif self.match_keyword("typedef"):
                doc.definitions.append(self.parse_typedef())
            elif self.match_keyword("enum"):
                doc.definitions.append(self.parse_enum())
            elif self.match_keyword(*STRUCT_KEYWORDS):
                doc.definitions.append(self.parse_struct())
            elif self.match_keyword("service"):
                doc.definitions.append(self.parse_service())
            else:
                raise self.illegal_token()

        self.discard_comments()
        return doc

    # ------------------------------------------------------------------
    # Headers

    def _parse_include(self, doc: ThriftDocument) -> None:
        leading = self.begin_comments()
        keyword = self.advance().value
        path = self.expect(TokenType.STRING).value
        self.accept_separator()
        self.end_comments(leading)
        if keyword == "include":
            doc.includes.append(path)

    def _parse_namespace(self, doc: ThriftDocument) -> None:
        leading = self.begin_comments()
        self.advance()
        if self.match(TokenType.STAR):
            scope = self.advance().value
        else:
            scope = self.expect_identifier().value
        doc.namespaces[scope] = self.expect_identifier().value
        self.parse_annotations()
        self.accept_separator()
        self.end_comments(leading)

    # ------------------------------------------------------------------
    # Definitions

    def parse_const(self) -> ThriftConst:
        leading = self.begin_comments()
        start = self.expect_keyword("const")
        type_ = self.parse_type()
        name = self.expect_identifier().value
        self.expect(TokenType.EQUALS)
        value = self.parse_const_value()
        self.accept_separator()
        return ThriftConst(
            name=name,
            line=start.line,
            column=start.column,
            type=type_,
            value=value,
            comments=self.end_comments(leading),
        )

    def parse_typedef(self) -> ThriftTypedef:
        leading = self.begin_comments()
        start = self.expect_keyword("typedef")
        type_ = self.parse_type()
        name = self.expect_identifier().value
        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftTypedef(
            name=name,
            line=start.line,
            column=start.column,
            type=type_,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    def parse_enum(self) -> ThriftEnum:
        """
        Parse an enum.

        Members without an explicit value continue from the previous one.
        """
        leading = self.begin_comments()
        start = self.expect_keyword("enum")
        name = self.expect_identifier().value
        self.expect(TokenType.LBRACE)

        values: list[ThriftEnumValue] = []
        while not self.match(TokenType.RBRACE):
            member_leading = self.begin_comments()
            token = self.expect_identifier()
            value = None
            if self.accept(TokenType.EQUALS):
                value = self.parse_int()
            member_annotations = self.parse_annotations()
            self.accept_separator()
            values.append(
                ThriftEnumValue(
                    name=token.value,
                    line=token.line,
                    column=token.column,
                    value=value,
                    annotations=member_annotations,
                    comments=self.end_comments(member_leading),
                )
            )

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftEnum(
            name=name,
            line=start.line,
            column=start.column,
            values=values,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    def parse_struct(self) -> ThriftStruct:
        leading = self.begin_comments()
        start = self.advance()
        name = self.expect_identifier().value
        self.accept_keyword("xsd_all")
        self.expect(TokenType.LBRACE)
        fields = self._parse_fields(TokenType.RBRACE)
        self.expect(TokenType.RBRACE)
        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftStruct(
            name=name,
            line=start.line,
            column=start.column,
            struct_type=start.value,
            fields=fields,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    def parse_service(self) -> ThriftService:
        leading = self.begin_comments()
        start = self.expect_keyword("service")
        name = self.expect_identifier().value
        extends = None
        if self.accept_keyword("extends"):
            extends = self.expect_identifier().value
        self.expect(TokenType.LBRACE)

        functions: list[ThriftFunction] = []
        while not self.match(TokenType.RBRACE):
            functions.append(self.parse_function())

        self.discard_comments()
        self.expect(TokenType.RBRACE)
        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftService(
            name=name,
            line=start.line,
            column=start.column,
            extends=extends,
            functions=functions,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    def parse_function(self) -> ThriftFunction:
        leading = self.begin_comments()
        start = self.current_token()
        oneway = self.accept_keyword("oneway")
        if self.accept_keyword("void"):
            return_type = ThriftType("void")
        else:
            return_type = self.parse_type()
        name = self.expect_identifier().value

        self.expect(TokenType.LPAREN)
        params = self._parse_fields(TokenType.RPAREN)
        self.expect(TokenType.RPAREN)

        throws: list[ThriftField] = []
        if self.accept_keyword("throws"):
            self.expect(TokenType.LPAREN)
            throws = self._parse_fields(TokenType.RPAREN)
            self.expect(TokenType.RPAREN)

        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftFunction(
            name=name,
            line=start.line,
            column=start.column,
            return_type=return_type,
            params=params,
            throws=throws,
            oneway=oneway,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    def _parse_fields(self, closing: TokenType) -> list[ThriftField]:
        fields: list[ThriftField] = []
        while not self.match(closing):
            fields.append(self.parse_field())
        self.discard_comments()
        return fields

    def parse_field(self) -> ThriftField:
        leading = self.begin_comments()
        start = self.current_token()

        field_id = None
        if self.match(TokenType.NUMBER, TokenType.MINUS):
            field_id = self.parse_int()
            self.expect(TokenType.COLON)

        requiredness = None
        if self.match_keyword("required", "optional"):
            requiredness = self.advance().value

        type_ = self.parse_type()
        name = self.expect_identifier().value

        default_value = None
        if self.accept(TokenType.EQUALS):
            default_value = self.parse_const_value()

        self.accept_keyword("xsd_optional")
        self.accept_keyword("xsd_nillable")
        annotations = self.parse_annotations()
        self.accept_separator()
        return ThriftField(
            name=name,
            line=start.line,
            column=start.column,
            type=type_,
            field_id=field_id,
            requiredness=requiredness,
            default_value=default_value,
            annotations=annotations,
            comments=self.end_comments(leading),
        )

    # ------------------------------------------------------------------
    # Types, values, annotations

    def parse_type(self) -> ThriftType:
        """Parse a base, container or named type with optional annotations."""
        token = self.expect_identifier()
        if token.value in CONTAINER_KEYWORDS and self.match(TokenType.LESS_THAN, TokenType.IDENTIFIER):
            type_ = self._parse_container(token)
        else:
            type_ = ThriftType(token.value)
        type_.annotations = self.parse_annotations()
        return type_

    def _parse_container(self, token: Token) -> ThriftType:
        if self.accept_keyword("cpp_type"):
            self.expect(TokenType.STRING)
        self.expect(TokenType.LESS_THAN)
        if token.value == "map":
            key_type = self.parse_type()
            self.expect(TokenType.COMMA)
            value_type = self.parse_type()
            self.expect(TokenType.GREATER_THAN)
            return ThriftType("map", key_type=key_type, value_type=value_type)
        value_type = self.parse_type()
        self.expect(TokenType.GREATER_THAN)
        return ThriftType(token.value, value_type=value_type)

    def parse_const_value(self) -> Any:
        """Parse a literal: number, string, bool, identifier, list or map."""
        token = self.current_token()
        if self.match(TokenType.NUMBER, TokenType.MINUS, TokenType.PLUS):
            return self.parse_number()
        if self.match(TokenType.STRING):
            return self.advance().value
        if self.match(TokenType.IDENTIFIER):
            self.advance()
            if token.value in ("true", "false"):
                return token.value == "true"
            return ir.ConstRef(name=token.value)
        if self.accept(TokenType.LBRACKET):
            items = []
            while not self.match(TokenType.RBRACKET):
                items.append(self.parse_const_value())
                self.accept_separator()
            self.expect(TokenType.RBRACKET)
            return items
        if self.accept(TokenType.LBRACE):
            entries: dict[Any, Any] = {}
            while not self.match(TokenType.RBRACE):
                key = self.parse_const_value()
                self.expect(TokenType.COLON)
                entries[_hashable(key)] = self.parse_const_value()
                self.accept_separator()
            self.expect(TokenType.RBRACE)
            return entries
        raise self.illegal_token()

    def parse_annotations(self) -> list[Annotation]:
        """Parse ``( key = "value", ... )``; absent annotations give an empty list."""
        annotations: list[Annotation] = []
        if not self.accept(TokenType.LPAREN):
            return annotations
        while not self.match(TokenType.RPAREN):
            key = self.expect_identifier().value
            value = "1"
            if self.accept(TokenType.EQUALS):
                value = self.expect(TokenType.STRING).value
            annotations.append((key, value))
            self.accept_separator()
        self.expect(TokenType.RPAREN)
        return annotations


def _hashable(key: Any) -> Any:
    if isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


def parse_thrift(text: str, file: str, revise_tail_comment: bool = True) -> ThriftDocument:
    """
    Parse Thrift source text.

    Args:
        text: Source text
        file: Source label for locations and errors
        revise_tail_comment: Fold same-line trailing comments into the
            preceding declaration

    Returns:
        ThriftDocument

    Raises:
        ParseError: If the source is malformed
    """
    tokens = tokenize(text, file, hash_comments=True)
    return ThriftParser(tokens, file, revise_tail_comment=revise_tail_comment).parse()
