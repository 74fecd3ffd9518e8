"""
Plugin host.

A Program is a hook bus. Plugins register handlers for a named hook in one
of three phases; triggering the hook threads a context through every
handler in phase order (BEFORE, ON, AFTER), ascending priority within a
phase, registration order among equal priorities.

Handlers receive the context and return it, either mutated in place or
replaced. Exceptions raised by handlers propagate to the caller of
``trigger`` unchanged and abort the remaining handlers.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeVar

from ..core.errors import PluginError, UnregisteredHookError

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 0

ContextT = TypeVar("ContextT")
Handler = Callable[[Any], Any]


class HookPhase(Enum):
    """When a handler runs relative to the other handlers of its hook."""

    BEFORE = "BEFORE"
    ON = "ON"
    AFTER = "AFTER"


PHASE_ORDER = (HookPhase.BEFORE, HookPhase.ON, HookPhase.AFTER)


def hook_key(phase: HookPhase, hook_name: str) -> str:
    """
    Build the registration key for a hook phase.

    Example:
        hook_key(HookPhase.BEFORE, "PARSE_ENTRY") == "__BEFORE__::PARSE_ENTRY"
    """
    return f"__{phase.value}__::{hook_name}"


def on(hook_name: str) -> str:
    return hook_key(HookPhase.ON, hook_name)


def before(hook_name: str) -> str:
    return hook_key(HookPhase.BEFORE, hook_name)


def after(hook_name: str) -> str:
    return hook_key(HookPhase.AFTER, hook_name)


class Plugin(Protocol):
    """Anything with an ``apply(program)`` method that registers handlers."""

    def apply(self, program: "Program") -> None: ...


@dataclass
class Registration:
    handler: Handler
    priority: int
    order: int


class Program:
    """
    Hook bus shared by the plugins of one generation run.

    Example:
        program = Program.create([AutoFixPathPlugin(), FormatPlugin()])
        ctx = program.trigger("WRITE_FILE", WriteFileContext(...))
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Registration]] = {}
        self._counter = 0

    @classmethod
    def create(cls, plugins: Iterable[Plugin] = ()) -> "Program":
        """Create a program and apply ``plugins`` in order."""
        program = cls()
        program.load_plugins(plugins)
        return program

    def load_plugins(self, plugins: Iterable[Plugin]) -> None:
        """Apply plugins in order; application order sets registration order."""
        for plugin in plugins:
            logger.debug("Applying plugin %s", type(plugin).__name__)
            plugin.apply(self)

    def register(self, key: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> None:
        """
        Register a handler under a phase key (see ``hook_key``).

        Args:
            key: ``__<PHASE>__::<hook name>``
            handler: Callable taking and returning the hook context
            priority: Lower runs first within the phase
        """
        if not key.startswith("__") or "__::" not in key:
            raise PluginError(f"Invalid hook key: {key!r}")
        self._handlers.setdefault(key, []).append(Registration(handler, priority, self._counter))
        self._counter += 1

    def has_hook(self, hook_name: str) -> bool:
        """True if any phase of ``hook_name`` has a handler."""
        return any(self._handlers.get(hook_key(phase, hook_name)) for phase in PHASE_ORDER)

    def trigger(self, hook_name: str, ctx: ContextT) -> ContextT:
        """
        Run every handler of ``hook_name`` and return the resulting context.

        Raises:
            UnregisteredHookError: If no phase of the hook has a handler
            PluginError: If a handler returns None
        """
        if not self.has_hook(hook_name):
            raise UnregisteredHookError(f"No handler registered for hook {hook_name}")

        for phase in PHASE_ORDER:
            registrations = sorted(
                self._handlers.get(hook_key(phase, hook_name), []),
                key=lambda r: (r.priority, r.order),
            )
            for registration in registrations:
                result = registration.handler(ctx)
                if result is None:
                    raise PluginError(
                        f"Handler {getattr(registration.handler, '__qualname__', registration.handler)!s} "
                        f"for {hook_key(phase, hook_name)} returned no context"
                    )
                ctx = result
        return ctx
