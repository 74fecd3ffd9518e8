"""End-to-end tests for gen_client."""

import json
from pathlib import Path

import pytest

from idl2ts.core.errors import ParseError, ResolutionError
from idl2ts.generator.client import gen_client
from idl2ts.plugins.builtin import (
    AutoFixPathPlugin,
    CommentFormatPlugin,
    IgnoreStructFieldPlugin,
    LocalMockConfigPlugin,
    ServiceAliasPlugin,
)

ENTRY = Path("prompt/coze.loop.prompt.manage.thrift")


def read(options, relative: str) -> str:
    return (options.output_dir / relative).read_text(encoding="utf-8")


class TestThriftClient:
    """Client generation from the Thrift fixtures."""

    def test_files(self, make_options):
        options = make_options()
        result = gen_client(options)
        assert [p.relative_to(options.output_dir).as_posix() for p in result.files_created] == [
            "prompt/coze.loop.prompt.manage.ts",
            "base.ts",
            "prompt/domain/prompt.ts",
        ]
        assert [Path(d.idl_path).name for d in result.documents] == [
            "coze.loop.prompt.manage.thrift",
            "base.thrift",
            "prompt.thrift",
        ]
        assert result.documents[0].is_entry

    def test_imports(self, make_options):
        options = make_options()
        gen_client(options)
        content = read(options, "prompt/coze.loop.prompt.manage.ts")
        assert content.startswith(
            "import * as base from './../base';\n"
            "export { base };\n"
            "import * as prompt from './domain/prompt';\n"
            "export { prompt };\n"
            "import { createAPI } from './../../config';\n"
        )

    def test_api_functions(self, make_options):
        options = make_options()
        result = gen_client(options)
        content = read(options, "prompt/coze.loop.prompt.manage.ts")

        assert [meta.name for meta in result.apis] == ["GetPrompt", "ListPrompt"]
        assert "SyncPrompt" not in content

        assert (
            "/** GetPrompt fetches one prompt */\n"
            "export const GetPrompt = /*#__PURE__*/createAPI<GetPromptRequest, GetPromptResponse>({\n"
            '  "url": "/api/prompt/v1/prompts/:prompt_id",\n'
            '  "method": "GET",\n'
            '  "name": "GetPrompt",\n'
            '  "reqType": "GetPromptRequest",\n'
            '  "reqMapping": {\n'
            '    "path": ["prompt_id"],\n'
            '    "query": ["with_draft", "Base"]\n'
            "  },\n"
            '  "resType": "GetPromptResponse",\n'
            '  "schemaRoot": "api://schemas/prompt_coze.loop.prompt.manage",\n'
            '  "service": "promptManageService"\n'
            "}, (req, option) => `/api/prompt/v1/prompts/${req.prompt_id}`);"
        ) in content

        list_prompt = result.apis[1]
        assert list_prompt.method == "POST"
        assert list_prompt.req_mapping == {
            "body": ["page_num", "page_size"],
            "header": ["workspace_id"],
        }
        assert list_prompt.extra == {"serializer": "json"}

    def test_types(self, make_options):
        options = make_options()
        gen_client(options)
        content = read(options, "prompt/coze.loop.prompt.manage.ts")
        assert (
            "export interface GetPromptResponse {\n"
            "  prompt?: prompt.Prompt,\n"
            "  BaseResp: base.BaseResp,\n"
            "}"
        ) in content
        assert "  prompts?: prompt.Prompt[],\n" in content

        domain = read(options, "prompt/domain/prompt.ts")
        assert "export enum PromptStatus {\n  Draft = 1,\n  Published = 2,\n  Archived = 3,\n}" in domain
        assert "  prompt_key?: string,\n" in domain
        assert "  internal_note?: string,\n" in domain

    def test_plugins(self, make_options):
        options = make_options(
            entry_names={"promptManage": ENTRY},
            plugins=[
                AutoFixPathPlugin(),
                ServiceAliasPlugin(),
                CommentFormatPlugin(),
                IgnoreStructFieldPlugin(),
            ],
        )
        result = gen_client(options)
        assert {meta.service for meta in result.apis} == {"promptManage"}
        assert result.apis[0].req_mapping == {"path": ["prompt_id"], "query": ["with_draft"]}

        domain = read(options, "prompt/domain/prompt.ts")
        assert "internal_note" not in domain
        assert (
            "/**\n"
            " * A prompt template.\n"
            " * Versions are immutable once published.\n"
            "*/\n"
            "export interface Prompt {"
        ) in domain
        assert "  /** unique per workspace */\n  prompt_key?: string," in domain

        content = read(options, "prompt/coze.loop.prompt.manage.ts")
        assert "import * as base from './../base';" in content
        assert "export interface GetPromptResponse {\n  prompt?: prompt.Prompt,\n}" in content

    def test_i64_as_string(self, make_options):
        options = make_options(i64_as="string")
        gen_client(options)
        assert "  prompt_id: string,\n" in read(options, "prompt/coze.loop.prompt.manage.ts")

    def test_default_path_param_provider(self, make_options, idl_root):
        (idl_root / "space.thrift").write_text(
            "struct Req {\n  1: optional string name\n}\n"
            "struct Resp {}\n"
            "service SpaceService {\n"
            '  Resp Get(1: Req req) (api.get = "/api/spaces/:space_id")\n'
            "}\n"
        )
        options = make_options(entries=["space.thrift"], default_path_param_provider="getSpaceId")
        gen_client(options)
        content = read(options, "space.ts")
        assert "import { createAPI, getSpaceId } from './../config';" in content
        assert "createAPI<Req, Resp, {space_id: string | number}>(" in content
        assert "${option?.pathParams?.space_id ?? getSpaceId('space_id')}" in content

    def test_client_disabled(self, make_options):
        options = make_options(gen_client=False)
        result = gen_client(options)
        assert result.apis == []
        content = read(options, "prompt/coze.loop.prompt.manage.ts")
        assert "createAPI" not in content
        assert "export interface GetPromptRequest {" in content


class TestProtoClient:
    """Client generation from the Protobuf fixtures."""

    def test_greeter(self, make_options):
        options = make_options(entries=["greeter/greeter.proto"])
        result = gen_client(options)
        assert len(result.files_created) == 1

        content = read(options, "greeter/greeter.ts")
        assert content.startswith("import { createAPI } from './../../config';\n")
        assert "/** Greeting request */\nexport interface HelloRequest {" in content
        assert "  meta?: HelloRequest.Meta,\n" in content
        assert "export namespace HelloRequest {\n  export interface Meta {" in content
        assert "  kinds?: HelloReply.Kind[],\n" in content
        assert "Ping" not in content

        (say_hello,) = result.apis
        assert say_hello.method == "GET"
        assert say_hello.req_mapping == {"query": ["name", "meta"]}
        assert say_hello.schema_root == "api://schemas/greeter_greeter"
        assert say_hello.service == "greeter"


class TestOutputs:
    """Mocks, schemas, type patches and aggregation."""

    def test_mocks(self, make_options):
        options = make_options(gen_mock=True)
        gen_client(options)

        assert "export function createStruct" in read(options, "_mock_utils.js")

        manage = read(options, "prompt/coze.loop.prompt.manage.mock.js")
        assert manage.startswith(
            "/* eslint-disable */\n"
            "import { createStruct, createEnum } from './../_mock_utils';\n"
            "import * as base from './../base.mock';\n"
        )
        assert "  BaseResp: base.BaseResp(),\n" in manage
        assert "  prompt: prompt.Prompt(),\n" in manage
        assert (
            "export const methods = {\n"
            "  GetPrompt: GetPromptResponse,\n"
            "  ListPrompt: ListPromptResponse,\n"
            "};"
        ) in manage

        domain = read(options, "prompt/domain/prompt.mock.js")
        assert "export const PromptStatus = createEnum([1, 2, 3]);" in domain
        assert "  status: PromptStatus(),\n" in domain
        assert "  id: 0,\n" in domain

        base = read(options, "base.mock.js")
        assert '  status_message: "",\n' in base

    def test_schema(self, make_options):
        options = make_options(gen_schema=True)
        gen_client(options)
        schema = json.loads(read(options, "prompt/coze.loop.prompt.manage.schema.json"))
        assert schema["$id"] == "api://schemas/prompt_coze.loop.prompt.manage"
        assert "GetPromptRequest" in schema["definitions"]

    def test_js_conv_fields_are_strings(self, make_options, idl_root):
        (idl_root / "counter.thrift").write_text(
            "struct Counter {\n"
            '  1: i64 count (api.js_conv = "true")\n'
            "  2: i64 total\n"
            "}\n"
            "service CounterService {\n"
            '  Counter Get(1: i64 id (api.js_conv = "true"), 2: i32 page) (api.get = "/api/counters/:id")\n'
            "}\n"
        )
        options = make_options(entries=["counter.thrift"], gen_mock=True, gen_schema=True)
        gen_client(options)

        content = read(options, "counter.ts")
        assert "  count: string,\n  total: number,\n" in content
        assert "createAPI<{id: string, page: number}, Counter>(" in content

        mock = read(options, "counter.mock.js")
        assert '  count: "0",\n  total: 0,\n' in mock

        schema = json.loads(read(options, "counter.schema.json"))
        properties = schema["definitions"]["Counter"]["properties"]
        assert properties["count"] == {"type": "string", "format": "int64"}
        assert properties["total"] == {"type": "integer"}

    def test_patch_types(self, make_options, tmp_path):
        options = make_options(patch_types_output=tmp_path / "types")
        gen_client(options)
        content = (tmp_path / "types" / "prompt" / "coze.loop.prompt.manage.d.ts").read_text()
        assert content.startswith("import * as base from './../base';\nexport { base };\n")
        assert "export interface GetPromptRequest {" in content
        assert "createAPI" not in content

    def test_aggregation(self, make_options):
        options = make_options(entry_names={"promptManage": ENTRY}, aggregation_export="index.ts")
        gen_client(options)
        assert read(options, "index.ts") == (
            "export * as promptManage from './prompt/coze.loop.prompt.manage';\n"
        )

    def test_local_mock_config(self, make_options, tmp_path):
        path = tmp_path / "api.dev.local.json"
        path.write_text(json.dumps({"mock": ["GetPrompt"], "methods": ["Stale"]}))
        gen_client(make_options(plugins=[LocalMockConfigPlugin(path)]))
        assert json.loads(path.read_text()) == {
            "mock": ["GetPrompt"],
            "methods": ["GetPrompt", "ListPrompt"],
        }


class TestErrors:
    """Failure modes of gen_client."""

    def test_no_entries(self, make_options):
        with pytest.raises(ResolutionError, match="No entries configured"):
            gen_client(make_options(entries=[], idl_root=Path("/nonexistent")))

    def test_missing_entry(self, make_options):
        with pytest.raises(ResolutionError, match="no such file"):
            gen_client(make_options(entries=["missing.thrift"]))

    def test_missing_include(self, make_options, idl_root):
        (idl_root / "broken.thrift").write_text('include "nowhere.thrift"\n')
        with pytest.raises(ResolutionError, match="nowhere.thrift"):
            gen_client(make_options(entries=["broken.thrift"]))

    def test_parse_error(self, make_options, idl_root):
        (idl_root / "bad.thrift").write_text("struct A {\n  1: string a\n")
        with pytest.raises(ParseError):
            gen_client(make_options(entries=["bad.thrift"]))
