"""Tests for the public parse entry points."""

from pathlib import Path

import pytest

from idl2ts.core.errors import ResolutionError
from idl2ts.core.parser import detect_dialect, parse, parse_with_includes, resolve_include


class TestDetectDialect:
    """Tests for dialect detection of inline text."""

    def test_proto_markers(self):
        assert detect_dialect('syntax = "proto3";') == "proto"
        assert detect_dialect("message Foo {}") == "proto"
        assert detect_dialect("service Foo { rpc Biz1(Req) returns (Res); }") == "proto"

    def test_defaults_to_thrift(self):
        assert detect_dialect("struct Foo {}") == "thrift"
        assert detect_dialect("service Foo { Res Biz1(1: Req req) }") == "thrift"


class TestParse:
    """Tests for ``parse``."""

    def test_inline_text(self):
        doc = parse("struct Foo { 1: i32 a }")
        assert doc.dialect == "thrift"
        assert doc.idl_path == "source"

    def test_inline_scenario_from_service_text(self):
        doc = parse("service Foo { rpc Biz1(Req) returns (Res) { option (api.uri) = '/api/biz1'; } }")
        functions = doc.services[0].functions
        assert len(functions) == 1
        assert functions[0].extension_config.uri == "/api/biz1"
        assert functions[0].extension_config.method is None

    def test_file_path(self, idl_root: Path):
        path = idl_root / "base.thrift"
        doc = parse(str(path))
        assert doc.idl_path == str(path.resolve())
        assert doc.namespace == "base"
        assert [s.name for s in doc.statements] == ["Base", "BaseResp"]

    def test_path_object(self, idl_root: Path):
        doc = parse(idl_root / "greeter" / "greeter.proto")
        assert doc.dialect == "proto"
        assert doc.includes == ["google/protobuf/empty.proto"]

    def test_missing_file(self, tmp_path: Path):
        missing = tmp_path / "missing.thrift"
        with pytest.raises(ResolutionError, match="no such file: "):
            parse(str(missing))


class TestIncludes:
    """Tests for include resolution and transitive parsing."""

    def test_resolve_relative_to_including_file(self, idl_root: Path):
        entry = idl_root / "prompt" / "coze.loop.prompt.manage.thrift"
        assert resolve_include("../base.thrift", entry, None) == (idl_root / "base.thrift").resolve()

    def test_resolve_falls_back_to_idl_root(self, idl_root: Path):
        entry = idl_root / "prompt" / "coze.loop.prompt.manage.thrift"
        assert resolve_include("base.thrift", entry, idl_root) == (idl_root / "base.thrift").resolve()

    def test_unresolvable_include(self, idl_root: Path):
        with pytest.raises(ResolutionError, match="no such file: nope.thrift"):
            resolve_include("nope.thrift", idl_root / "base.thrift", idl_root)

    def test_parse_with_includes_is_depth_first(self, idl_root: Path):
        docs = parse_with_includes(idl_root / "prompt" / "coze.loop.prompt.manage.thrift", idl_root)
        names = [Path(d.idl_path).name for d in docs]
        assert names == ["coze.loop.prompt.manage.thrift", "base.thrift", "prompt.thrift"]
        assert [d.is_entry for d in docs] == [True, False, False]

    def test_shared_seen_parses_each_file_once(self, idl_root: Path):
        seen = {}
        entry = idl_root / "prompt" / "coze.loop.prompt.manage.thrift"
        first = parse_with_includes(entry, idl_root, seen=seen)
        second = parse_with_includes(idl_root / "base.thrift", idl_root, seen=seen)
        assert len(first) == 3
        assert second == []
        assert seen[str((idl_root / "base.thrift").resolve())].is_entry

    def test_well_known_imports_are_skipped(self, idl_root: Path):
        docs = parse_with_includes(idl_root / "greeter" / "greeter.proto", idl_root)
        assert len(docs) == 1

    def test_missing_include_fails(self, tmp_path: Path):
        entry = tmp_path / "a.thrift"
        entry.write_text('include "b.thrift"\n')
        with pytest.raises(ResolutionError, match="no such file: b.thrift"):
            parse_with_includes(entry, tmp_path)
