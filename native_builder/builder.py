"""NativeBuilder — load a package, resolve its natives, synthesize build commands."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from native_builder.loader import ProjectLoader
from native_builder.models.native import NativeDescriptor
from native_builder.probe import RuntimeProbe
from native_builder.resolver import NativeResolver
from native_builder.toolchains.base import Toolchain

log = structlog.get_logger("native_builder.builder")


@dataclass(frozen=True)
class NativeCommands:
    """Build commands for one resolved native, in execution order."""

    native: NativeDescriptor
    commands: list[str]


class NativeBuilder:
    """Facade over loader + runtime probe + resolver + toolchain.

    The toolchain is only needed by ``commands``; ``resolve`` works without one.

    Usage::

        builder = NativeBuilder(TomlProjectLoader("."), EnvRuntimeProbe(), select_toolchain())
        for entry in builder.commands("my_pkg"):
            ...
    """

    def __init__(
        self,
        loader: ProjectLoader,
        runtime_probe: RuntimeProbe,
        toolchain: Toolchain | None = None,
    ) -> None:
        self._loader = loader
        self._runtime_probe = runtime_probe
        self._toolchain = toolchain
        self._resolver = NativeResolver(loader)

    def resolve(self, package: str) -> list[NativeDescriptor]:
        project = self._loader.load(package)
        if project.manifest.is_empty:
            log.info("builder.no_natives", package=package)
            return []

        runtime = self._runtime_probe.probe()
        log.info(
            "builder.runtime_probed",
            includes=list(runtime.includes),
            lib_dirs=list(runtime.lib_dirs),
        )
        natives = self._resolver.resolve(project, runtime)
        log.info("builder.resolved", package=package, natives=[n.name for n in natives])
        return natives

    def commands(self, package: str) -> list[NativeCommands]:
        """Resolve everything first; any failure aborts before a command is produced."""
        if self._toolchain is None:
            raise ValueError("NativeBuilder has no toolchain; pass one to synthesize commands")
        natives = self.resolve(package)
        result = [NativeCommands(native=n, commands=self._toolchain.commands(n)) for n in natives]
        log.info(
            "builder.commands_ready",
            package=package,
            toolchain=self._toolchain.name,
            count=sum(len(r.commands) for r in result),
        )
        return result
