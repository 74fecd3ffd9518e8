"""Tests for route annotation normalization."""

from idl2ts.core import ir
from idl2ts.core.unify import build_extension_config, split_route_key


class TestSplitRouteKey:
    """Tests for prefix stripping."""

    def test_known_prefixes(self):
        assert split_route_key("api.get") == "get"
        assert split_route_key("api.agw.get") == "get"
        assert split_route_key("agw.uri") == "uri"
        assert split_route_key("api_method.post") == "post"
        assert split_route_key("pb_idl.api_method.put") == "put"

    def test_unrelated_keys(self):
        assert split_route_key("go.tag") is None
        assert split_route_key("api.") is None


class TestDialects:
    """Old and new annotation dialects normalize to the same config."""

    def test_old_and_new_verb_keys_agree(self):
        new = build_extension_config([("api.get", "/api/biz1")])
        old = build_extension_config([("api_method.get", "/api/biz1")])
        full = build_extension_config([("pb_idl.api_method.get", "/api/biz1")])
        assert new == old == full
        assert (new.method, new.uri) == ("GET", "/api/biz1")

    def test_gateway_keys(self):
        config = build_extension_config([("agw.uri", "/x"), ("agw.method", "get")])
        assert (config.method, config.uri) == ("GET", "/x")

    def test_uri_without_method(self):
        config = build_extension_config([("api.uri", "/api/biz1")])
        assert config == ir.ExtensionConfig(uri="/api/biz1")
        assert config.method is None

    def test_no_route_keys(self):
        assert build_extension_config([]) is None
        assert build_extension_config([("go.tag", "x"), ("api.serializer", "json")]) is None


class TestPrecedence:
    """Tests for conflicting keys."""

    def test_explicit_method_wins_over_verb(self):
        config = build_extension_config([("api.get", "/a"), ("api.method", "put")])
        assert (config.method, config.uri) == ("PUT", "/a")

    def test_explicit_uri_wins_over_verb_value(self):
        config = build_extension_config([("api.get", "/a"), ("api.uri", "/b")])
        assert (config.method, config.uri) == ("GET", "/b")

    def test_first_verb_wins(self):
        config = build_extension_config([("api.get", "/a"), ("api.post", "/b")])
        assert (config.method, config.uri) == ("GET", "/a")


class TestExtraKeys:
    """Tests for keys beyond method and uri."""

    def test_serializer_group_and_extra(self):
        config = build_extension_config(
            [
                ("api.post", "/a"),
                ("api.serializer", "form"),
                ("api.group", "admin"),
                ("api.category", "prompt"),
            ]
        )
        assert config.serializer == "form"
        assert config.group == "admin"
        assert config.extra == {"category": "prompt"}
        assert config.as_dict() == {
            "category": "prompt",
            "method": "POST",
            "uri": "/a",
            "serializer": "form",
            "group": "admin",
        }

    def test_field_mapping_keys_are_not_extra(self):
        config = build_extension_config([("api.get", "/a"), ("api.query", "q")])
        assert config.extra == {}


class TestExtensionConfig:
    """Tests for the normalized model."""

    def test_assigned_method_is_upper_cased(self):
        config = ir.ExtensionConfig(method="get", uri="/x")
        config.method = "post"
        assert config.method == "POST"
