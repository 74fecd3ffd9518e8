"""Tests for TypeScript rendering of declarations."""

from pathlib import Path

from idl2ts.core import ir
from idl2ts.core.parser import parse
from idl2ts.generator.options import Options
from idl2ts.generator.session import GenerationSession
from idl2ts.generator.typescript import (
    DeclarationRenderer,
    ModuleScope,
    js_value,
    render_comments,
)


def render(source: str, session: GenerationSession, imports=None, declaration_file=False) -> str:
    document = parse(source)
    scope = ModuleScope(document, imports or {}, session)
    return "\n".join(DeclarationRenderer(scope, declaration_file).render())


def session_with(tmp_path: Path, **kwargs) -> GenerationSession:
    options = Options(entries=[], idl_root=tmp_path, output_dir=tmp_path / "out", **kwargs)
    return GenerationSession.from_options(options)


class TestRenderComments:
    """Tests for JSDoc rendering."""

    def test_single_line(self):
        comments = [ir.Comment(type="line", value=" fetches one prompt")]
        assert render_comments(comments, "  ") == ["  /** fetches one prompt */"]

    def test_multi_line(self):
        comments = [ir.Comment(type="line", value=["first", "second"])]
        assert render_comments(comments) == ["/**", " * first", " * second", "*/"]

    def test_empty(self):
        assert render_comments([]) == []
        assert render_comments([ir.Comment(type="block", value="   ")]) == []

    def test_closing_marker_is_escaped(self):
        comments = [ir.Comment(type="block", value="a */ b")]
        assert render_comments(comments) == ["/** a *\\/ b */"]


class TestJsValue:
    """Tests for constant literals."""

    def test_literals(self):
        assert js_value("x") == '"x"'
        assert js_value(True) == "true"
        assert js_value(None) == "null"
        assert js_value(3) == "3"
        assert js_value([1, 2]) == "[1, 2]"
        assert js_value({"a": 1}) == '{"a": 1}'
        assert js_value(ir.ConstRef(name="Status.OK")) == "Status.OK"


class TestDeclarationRenderer:
    """Tests for DeclarationRenderer."""

    def test_enum(self, session):
        text = render("enum Status {\n  OK = 1,\n  // broken\n  FAILED = 2\n}", session)
        assert text == "export enum Status {\n  OK = 1,\n  /** broken */\n  FAILED = 2,\n}"

    def test_struct(self, session):
        source = """
struct Inner {
  1: string name
}
struct Outer {
  1: required i64 id
  2: optional list<string> tags
  3: optional map<string, Inner> by_name
  4: list<map<string, i32>> counts
  5: Inner inner
}
"""
        text = render(source, session)
        assert (
            "export interface Outer {\n"
            "  id: number,\n"
            "  tags?: string[],\n"
            "  by_name?: {\n"
            "    [key: string | number]: Inner\n"
            "  },\n"
            "  counts: Array<{\n"
            "    [key: string | number]: number\n"
            "  }>,\n"
            "  inner: Inner,\n"
            "}"
        ) in text
        assert text.startswith("export interface Inner {\n  name: string,\n}")

    def test_allow_null_for_optional(self, tmp_path):
        session = session_with(tmp_path, allow_null_for_optional=True)
        text = render("struct A {\n  1: optional string a\n  2: string b\n}", session)
        assert "  a?: string | null," in text
        assert "  b: string," in text

    def test_map_enum_key(self, tmp_path):
        source = "enum Kind { A = 1 }\nstruct A {\n  1: map<Kind, string> names\n}"
        assert "[key: string | number]: string" in render(source, session_with(tmp_path))
        session = session_with(tmp_path, map_enum_key_as_number=True)
        assert "[key: number]: string" in render(source, session)

    def test_i64_as_string(self, tmp_path):
        session = session_with(tmp_path, i64_as="string")
        assert "  id: string," in render("struct A {\n  1: i64 id\n}", session)

    def test_js_conv_i64_is_string(self, session):
        source = (
            "typedef i64 PromptId\n"
            "struct R {\n"
            '  1: optional i64 prompt_id (api.js_conv = "true")\n'
            '  2: optional i64 other (api.js_conv = "false")\n'
            "  3: optional i64 plain\n"
            '  4: PromptId alias_id (agw.js_conv = "str")\n'
            "}"
        )
        text = render(source, session)
        assert "  prompt_id?: string," in text
        assert "  other?: number," in text
        assert "  plain?: number," in text
        assert "  alias_id: string," in text

    def test_unresolved_type_is_any(self, session, caplog):
        text = render("struct A {\n  1: Missing m\n  2: Missing n\n}", session)
        assert "  m: any," in text
        assert "  n: any," in text
        warnings = [r for r in caplog.records if "Cannot resolve type Missing" in r.getMessage()]
        assert len(warnings) == 1

    def test_typedef_and_const(self, session):
        source = "typedef i64 UserId\nconst i32 MAX = 100\nconst list<string> NAMES = ['a', 'b']"
        text = render(source, session)
        assert "export type UserId = number;" in text
        assert "export const MAX = 100;" in text
        assert 'export const NAMES = ["a", "b"];' in text

    def test_const_in_declaration_file(self, session):
        text = render("const i32 MAX = 100", session, declaration_file=True)
        assert text == "export declare const MAX: number;"

    def test_included_reference(self, session):
        base = parse("namespace go base\nstruct BaseResp {\n  1: string status_message\n}")
        text = render(
            "include 'base.thrift'\nstruct R {\n  255: base.BaseResp BaseResp\n}",
            session,
            imports={"base": base},
        )
        assert "  BaseResp: base.BaseResp," in text

    def test_proto_nested_declarations(self, session):
        source = """
syntax = "proto3";
package greeter.v1;

message Outer {
  message Inner {
    string name = 1;
  }
  enum Kind {
    KIND_UNSPECIFIED = 0;
  }
  Inner inner = 1;
  repeated Kind kinds = 2;
  google.protobuf.Empty empty = 3;
}
"""
        text = render(source, session)
        assert text.startswith(
            "export interface Outer {\n"
            "  inner?: Outer.Inner,\n"
            "  kinds?: Outer.Kind[],\n"
            "  empty?: {},\n"
            "}"
        )
        assert (
            "export namespace Outer {\n"
            "  export enum Kind {\n"
            "    KIND_UNSPECIFIED = 0,\n"
            "  }\n"
            "  export interface Inner {\n"
            "    name?: string,\n"
            "  }\n"
            "}"
        ) in text

    def test_proto_same_package_import(self, session):
        other = parse('syntax = "proto3";\npackage greeter.v1;\nmessage Shared {}', file="shared.proto")
        text = render(
            'syntax = "proto3";\npackage greeter.v1;\nimport "shared.proto";\n'
            "message Uses {\n  Shared shared = 1;\n}",
            session,
            imports={"shared": other},
        )
        assert "  shared?: shared.Shared," in text

    def test_services_are_skipped_without_callback(self, session):
        text = render("service S {\n  void ping()\n}", session)
        assert text == ""
