"""Tests for comment attachment."""

from idl2ts.core import ir
from idl2ts.core.parser import parse


def line(value) -> ir.Comment:
    return ir.Comment(type="line", value=value)


class TestLeadingComments:
    """Tests for comments before a declaration."""

    def test_adjacent_line_comments_form_one_run(self):
        doc = parse("// a\n// b\nstruct S {}", dialect="thrift")
        assert doc.statements[0].comments == [line([" a", " b"])]

    def test_blank_line_splits_runs(self):
        doc = parse("// a\n\n// b\nstruct S {}", dialect="thrift")
        assert doc.statements[0].comments == [line(" a"), line(" b")]

    def test_block_and_line_comments_are_separate_runs(self):
        doc = parse("/* a */\n// b\nstruct S {}", dialect="thrift")
        comments = doc.statements[0].comments
        assert [c.type for c in comments] == ["block", "line"]
        assert comments[0].value == " a "

    def test_hash_comments(self):
        doc = parse("# a\nstruct S {}", dialect="thrift")
        assert doc.statements[0].comments == [line(" a")]

    def test_comment_before_closing_brace_is_dropped(self):
        doc = parse("struct S {\n  1: i32 x\n  // dangling\n}", dialect="thrift")
        struct = doc.statements[0]
        assert struct.comments == []
        assert struct.fields[0].comments == []


class TestTailComments:
    """Tests for same-line trailing comments."""

    SOURCE = "struct A {\n  1: i32 x // tail x\n  2: i32 y\n}"

    def test_tail_comment_folds_into_previous_declaration(self):
        struct = parse(self.SOURCE, dialect="thrift").statements[0]
        assert struct.fields[0].comments == [line(" tail x")]
        assert struct.fields[1].comments == []

    def test_tail_comment_leads_next_declaration_when_not_revised(self):
        struct = parse(self.SOURCE, dialect="thrift", revise_tail_comment=False).statements[0]
        assert struct.fields[0].comments == []
        assert struct.fields[1].comments == [line(" tail x")]

    def test_leading_and_tail_comments_group_together(self):
        doc = parse("// lead\nstruct S {} // tail", dialect="thrift")
        assert doc.statements[0].comments == [line([" lead", " tail"])]

    def test_proto_tail_comment(self):
        doc = parse("message M {\n  string a = 1; // about a\n}", dialect="proto")
        assert doc.statements[0].fields[0].comments == [line(" about a")]


class TestDeterminism:
    """Re-parsing the same text gives the same grouping."""

    def test_reparse_is_identical(self):
        text = "// a\n// b\nservice S {\n  // c\n  void f() // d\n}\n"
        assert parse(text, dialect="thrift") == parse(text, dialect="thrift")
