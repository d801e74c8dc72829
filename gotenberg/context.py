"""The provisioning context through which modules reach one another."""

from __future__ import annotations

from typing import Any

from .flags import ParsedFlags
from .modules import ModuleDescriptor, Provisioner, Validator


class ModuleLoadError(RuntimeError):
    """Raised when modules cannot be provisioned, validated or selected."""


class Context:
    """Creates, provisions and caches module instances on demand."""

    def __init__(self, flags: ParsedFlags, descriptors: list[ModuleDescriptor] | None) -> None:
        self._flags = flags
        self._descriptors = list(descriptors or [])
        self._instances: dict[str, Any] = {}

    def parsed_flags(self) -> ParsedFlags:
        """Return the parsed flags."""
        return self._flags

    def module_instances(self) -> dict[str, Any]:
        """Return the loaded instances keyed by module id."""
        return dict(self._instances)

    def module(self, kind: type) -> Any:
        """Return the one and only module that is an instance of ``kind``."""
        mods = self.modules(kind)
        if len(mods) != 1:
            raise ModuleLoadError(
                f"expected to have one and only one {getattr(kind, '__name__', kind)} module"
            )
        return mods[0]

    def modules(self, kind: type) -> list[Any]:
        """Return every module that is an instance of ``kind``, loading it if needed."""
        mods = []
        for desc in self._descriptors:
            new_instance = desc.new()
            if not isinstance(new_instance, kind):
                continue
            if desc.id in self._instances:
                mods.append(self._instances[desc.id])
            else:
                self._load_module(desc.id, new_instance)
                mods.append(new_instance)
        return mods

    def _load_module(self, module_id: str, instance: Any) -> None:
        if isinstance(instance, Provisioner):
            try:
                instance.provision(self)
            except Exception as exc:
                raise ModuleLoadError(f"provision module {module_id}: {exc}") from exc

        if isinstance(instance, Validator):
            try:
                instance.validate()
            except Exception as exc:
                raise ModuleLoadError(f"validate module {module_id}: {exc}") from exc

        self._instances[module_id] = instance