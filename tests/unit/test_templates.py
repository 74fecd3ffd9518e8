"""Tests for API call-site templates."""

from idl2ts.core import ir
from idl2ts.generator.templates import ApiMeta, path_params, render_api, request_location


def make_meta(**kwargs) -> ApiMeta:
    values = {
        "name": "GetPrompt",
        "url": "/api/prompt/v1/prompts/:prompt_id",
        "method": "GET",
        "req_type": "GetPromptRequest",
        "res_type": "GetPromptResponse",
        "req_mapping": {"path": ["prompt_id"], "query": ["with_draft"]},
        "schema_root": "api://schemas/prompt_coze.loop.prompt.manage",
        "service": "promptManage",
    }
    values.update(kwargs)
    return ApiMeta(**values)


class TestPathParams:
    """Tests for ``:param`` extraction."""

    def test_order_and_duplicates(self):
        assert path_params("/a/:x/b/:y/:x") == ["x", "y"]
        assert path_params("/a/b") == []

    def test_colon_inside_segment_is_literal(self):
        assert path_params("/api/v1/items:search") == []
        assert path_params("/api/:id/items:search") == ["id"]


class TestRenderApi:
    """Tests for ``render_api``."""

    def test_mapped_path_param(self):
        assert render_api(make_meta()) == (
            "export const GetPrompt = /*#__PURE__*/createAPI<GetPromptRequest, GetPromptResponse>({\n"
            '  "url": "/api/prompt/v1/prompts/:prompt_id",\n'
            '  "method": "GET",\n'
            '  "name": "GetPrompt",\n'
            '  "reqType": "GetPromptRequest",\n'
            '  "reqMapping": {\n'
            '    "path": ["prompt_id"],\n'
            '    "query": ["with_draft"]\n'
            "  },\n"
            '  "resType": "GetPromptResponse",\n'
            '  "schemaRoot": "api://schemas/prompt_coze.loop.prompt.manage",\n'
            '  "service": "promptManage"\n'
            "}, (req, option) => `/api/prompt/v1/prompts/${req.prompt_id}`);"
        )

    def test_no_path_params_has_no_builder(self):
        text = render_api(make_meta(url="/api/prompts/list", method="POST", req_mapping={"body": ["a"]}))
        assert text.endswith('  "service": "promptManage"\n});')
        assert "(req, option)" not in text

    def test_custom_verb_suffix_has_no_builder(self):
        text = render_api(make_meta(url="/api/v1/items:search", req_mapping={}))
        assert "(req, option)" not in text
        assert "createAPI<GetPromptRequest, GetPromptResponse>(" in text

    def test_unmapped_path_param_uses_override_and_provider(self):
        meta = make_meta(url="/api/spaces/:space_id/prompts/:prompt_id")
        text = render_api(meta, default_param_provider="getDefaultParam")
        first_line = text.splitlines()[0]
        assert first_line.endswith(
            "createAPI<GetPromptRequest, GetPromptResponse, {space_id: string | number}>({"
        )
        assert text.endswith(
            "(req, option) => `/api/spaces/${option?.pathParams?.space_id ?? "
            "getDefaultParam('space_id')}/prompts/${req.prompt_id}`);"
        )

    def test_unmapped_path_param_without_provider(self):
        text = render_api(make_meta(url="/api/:space_id", req_mapping={}))
        assert "${option?.pathParams?.space_id ?? ''}" in text
        assert '"reqMapping": {}' in text

    def test_extra_keys_follow_standard_keys(self):
        text = render_api(make_meta(extra={"serializer": "form"}))
        assert '  "service": "promptManage",\n  "serializer": "form"\n}' in text

    def test_comments(self):
        meta = make_meta(comments=[ir.Comment(type="line", value="Fetch one prompt")])
        assert render_api(meta).startswith("/** Fetch one prompt */\nexport const GetPrompt")


class TestRequestLocation:
    """Tests for request field placement."""

    def field(self, name: str) -> ir.FieldDefinition:
        return ir.FieldDefinition(
            name=name, type=ir.FieldType.base("string")
        )

    def test_annotation_wins(self):
        f = ir.FieldDefinition(
            name="token", type=ir.FieldType.base("string"), annotations={"api.header": "X-Token"}
        )
        assert request_location(f, {"token"}, "GET") == "header"

    def test_path_match(self):
        assert request_location(self.field("id"), {"id"}, "POST") == "path"

    def test_method_default(self):
        assert request_location(self.field("q"), set(), "GET") == "query"
        assert request_location(self.field("q"), set(), "DELETE") == "query"
        assert request_location(self.field("q"), set(), "POST") == "body"
        assert request_location(self.field("q"), set(), "PUT") == "body"
