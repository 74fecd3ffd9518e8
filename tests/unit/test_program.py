"""Tests for the plugin host."""

import pytest

from idl2ts.core.errors import PluginError, UnregisteredHookError
from idl2ts.plugins.program import HookPhase, Program, after, before, hook_key, on


class Recorder:
    """Plugin registering handlers that append their label to ``ctx``."""

    def __init__(self, registrations):
        self.registrations = registrations

    def apply(self, program: Program) -> None:
        for key, label, priority in self.registrations:
            program.register(key, self.make_handler(label), priority=priority)

    @staticmethod
    def make_handler(label):
        def handler(ctx):
            ctx.append(label)
            return ctx

        return handler


class TestHookKeys:
    """Tests for hook key formatting."""

    def test_hook_key(self):
        assert hook_key(HookPhase.BEFORE, "PARSE_ENTRY") == "__BEFORE__::PARSE_ENTRY"
        assert on("X") == "__ON__::X"
        assert before("X") == "__BEFORE__::X"
        assert after("X") == "__AFTER__::X"

    def test_invalid_key_rejected(self):
        with pytest.raises(PluginError, match="Invalid hook key"):
            Program().register("PARSE_ENTRY", lambda ctx: ctx)


class TestTrigger:
    """Tests for handler ordering and failure modes."""

    def test_phases_run_in_order(self):
        program = Program.create(
            [Recorder([(after("H"), "after", 0), (on("H"), "on", 0), (before("H"), "before", 0)])]
        )
        assert program.trigger("H", []) == ["before", "on", "after"]

    def test_lower_priority_runs_first(self):
        program = Program.create([Recorder([(on("H"), "late", 1), (on("H"), "early", 0)])])
        assert program.trigger("H", []) == ["early", "late"]

    def test_priority_does_not_cross_phases(self):
        program = Program.create([Recorder([(on("H"), "on", -100), (before("H"), "before", 100)])])
        assert program.trigger("H", []) == ["before", "on"]

    def test_registration_order_breaks_ties(self):
        program = Program.create(
            [Recorder([(on("H"), "first", 0)]), Recorder([(on("H"), "second", 0)])]
        )
        assert program.trigger("H", []) == ["first", "second"]

    def test_hook_without_handlers_fails(self):
        program = Program.create([Recorder([(on("OTHER"), "x", 0)])])
        assert not program.has_hook("H")
        with pytest.raises(UnregisteredHookError, match="No handler registered for hook H"):
            program.trigger("H", [])

    def test_handler_may_replace_context(self):
        program = Program()
        program.register(on("H"), lambda ctx: ctx + ["replaced"])
        original: list[str] = []
        assert program.trigger("H", original) == ["replaced"]
        assert original == []

    def test_handler_returning_none_fails(self):
        program = Program()
        program.register(on("H"), lambda ctx: None)
        with pytest.raises(PluginError, match="returned no context"):
            program.trigger("H", [])

    def test_handler_exceptions_propagate_unchanged(self):
        def boom(ctx):
            raise KeyError("boom")

        program = Program()
        program.register(on("H"), boom)
        with pytest.raises(KeyError):
            program.trigger("H", [])
