"""Debug data gathered from the loaded modules and the flags."""

from __future__ import annotations

import platform
import threading
from dataclasses import dataclass, field
from typing import Any

from . import modules
from .alphanumeric import alphanumeric_sorted
from .context import Context
from .modules import Debuggable

_ARCHITECTURES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


@dataclass
class DebugInfo:
    """Data gathered for debugging."""

    version: str = ""
    architecture: str = ""
    modules: list[str] = field(default_factory=list)
    modules_additional_data: dict[str, dict[str, Any]] = field(default_factory=dict)
    flags: dict[str, Any] = field(default_factory=dict)


_current: DebugInfo | None = None
_lock = threading.Lock()


def _architecture() -> str:
    machine = platform.machine()
    return _ARCHITECTURES.get(machine.lower(), machine.lower())


def _copy(info: DebugInfo) -> DebugInfo:
    return DebugInfo(
        version=info.version,
        architecture=info.architecture,
        modules=list(info.modules),
        modules_additional_data={key: dict(value) for key, value in info.modules_additional_data.items()},
        flags=dict(info.flags),
    )


def build_debug(ctx: Context) -> None:
    """Build the debug data from the context's loaded modules and flags."""
    global _current
    instances = ctx.module_instances()
    info = DebugInfo(
        version=modules.VERSION,
        architecture=_architecture(),
        modules=alphanumeric_sorted(instances),
        modules_additional_data={
            module_id: mod.debug() for module_id, mod in instances.items() if isinstance(mod, Debuggable)
        },
        flags={flag.name: str(flag) for flag in ctx.parsed_flags()},
    )
    with _lock:
        _current = info


def debug() -> DebugInfo:
    """Return a copy of the debug data, empty if it was never built."""
    with _lock:
        return DebugInfo() if _current is None else _copy(_current)