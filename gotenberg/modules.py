"""Module descriptors, the interfaces modules may satisfy, and the registry."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from .flags import FlagSet

if TYPE_CHECKING:
    from .context import Context

VERSION = "snapshot"
"""Version of the application; the command sets it at startup."""


class CancelGracefulShutdown(Exception):
    """Raised by an app's ``stop`` to end a graceful shutdown right away."""

    def __init__(self, message: str = "cancel graceful shutdown's context") -> None:
        super().__init__(message)


class RegistrationError(ValueError):
    """Raised when a module cannot be registered."""


@dataclass
class ModuleDescriptor:
    """Describes a module: its unique id, its flags and how to create it."""

    id: str
    flag_set: FlagSet | None = None
    new: Callable[[], Any] | None = None


@runtime_checkable
class Module(Protocol):
    """A plugin that adds features to the application or to other modules."""

    def descriptor(self) -> ModuleDescriptor:
        """Return the descriptor of the module."""


@runtime_checkable
class Provisioner(Protocol):
    """A module initialised from flags, the environment or other modules."""

    def provision(self, ctx: Context) -> None:
        """Initialise the module; raise on failure."""


@runtime_checkable
class Validator(Protocol):
    """A module validated after provisioning."""

    def validate(self) -> None:
        """Check the module's configuration; raise on failure."""


@runtime_checkable
class App(Protocol):
    """A module the application starts and stops."""

    def start(self) -> None:
        """Start the application module; raise on failure."""

    def startup_message(self) -> str:
        """Return a custom startup message, or an empty string for the default one."""

    def stop(self, timeout: float) -> None:
        """Stop within ``timeout`` seconds; raise ``CancelGracefulShutdown`` to end waiting."""


@runtime_checkable
class SystemLogger(Protocol):
    """A module with messages to display on startup."""

    def system_messages(self) -> list[str]:
        """Return the messages to display."""


@runtime_checkable
class Debuggable(Protocol):
    """A module that provides additional debug data."""

    def debug(self) -> dict[str, Any]:
        """Return the module's debug data."""


class ModuleRegistry:
    """A thread-safe set of module descriptors keyed by id."""

    def __init__(self) -> None:
        self._descriptors: dict[str, ModuleDescriptor] = {}
        self._lock = threading.RLock()

    def register(self, mod: Any) -> None:
        """Register the descriptor of ``mod``; raise ``RegistrationError`` if it is invalid."""
        desc = mod.descriptor()
        if desc.id == "":
            raise RegistrationError("module with an empty ID cannot be registered")
        if desc.new is None:
            raise RegistrationError("module New function cannot be nil")
        if desc.new() is None:
            raise RegistrationError("module New function cannot return a nil instance")

        with self._lock:
            if desc.id in self._descriptors:
                raise RegistrationError(f"module {desc.id} is already registered")
            self._descriptors[desc.id] = desc

    def descriptors(self) -> list[ModuleDescriptor]:
        """Return the registered descriptors sorted by id."""
        with self._lock:
            return sorted(self._descriptors.values(), key=lambda desc: desc.id)


_registry = ModuleRegistry()


def must_register_module(mod: Any) -> None:
    """Register a module in the application-wide registry."""
    _registry.register(mod)


def get_module_descriptors() -> list[ModuleDescriptor]:
    """Return the descriptors of all modules in the application-wide registry."""
    return _registry.descriptors()