"""Dependency resolver — turns raw native declarations into merged descriptors.

Each declared unit is parsed against its package's source root, its library
dependencies (possibly from other packages, loaded through a ProjectLoader)
are resolved recursively and folded in, and the host runtime's include and
library directories are prepended. Flag precedence is:

    runtime values -> the unit's own values -> each dependency, in declared order

The first failure aborts the whole call; no partial list is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar

import structlog

from native_builder.exceptions import (
    CyclicDependencyError,
    DependencyResolutionError,
    LibsNotFoundError,
    NativeBuildError,
    NoSourcesInNativeError,
)
from native_builder.loader import ProjectLoader
from native_builder.models.manifest import NativeConfig, PackageProject, RuntimeProbeInfo
from native_builder.models.native import DepRef, NativeDescriptor, NativeKind

log = structlog.get_logger("native_builder.resolver")

T = TypeVar("T")

# Linked into every standalone node; provides the runtime's external interface.
NODE_INTERFACE_LIB = "ei"


def _uniq(items: Iterable[T]) -> tuple[T, ...]:
    """Stable dedupe, first occurrence kept."""
    return tuple(dict.fromkeys(items))


def add_lib(native: NativeDescriptor, lib: NativeDescriptor) -> NativeDescriptor:
    """Fold a resolved library into a dependent unit."""
    return native.with_changes(
        includes=native.includes + lib.includes,
        libs=native.libs + lib.libs,
        lib_dirs=native.lib_dirs + lib.lib_dirs,
        pkg_configs=native.pkg_configs + lib.pkg_configs,
        deps=native.deps + (lib.ref,) + lib.deps,
    )


class NativeResolver:
    """Resolve the natives declared by a package into NativeDescriptors."""

    def __init__(self, loader: ProjectLoader) -> None:
        self._loader = loader

    def resolve(
        self,
        project: PackageProject,
        runtime: RuntimeProbeInfo,
        kinds: Iterable[NativeKind] = tuple(NativeKind),
    ) -> list[NativeDescriptor]:
        """Resolve every declared native of ``project`` (all kinds by default)."""
        return [
            self._resolve_native(project, name, kind, config, runtime, chain=())
            for name, kind, config in project.manifest.declarations(kinds)
        ]

    def _resolve_native(
        self,
        project: PackageProject,
        name: str,
        kind: NativeKind,
        config: NativeConfig,
        runtime: RuntimeProbeInfo,
        chain: tuple[DepRef, ...],
    ) -> NativeDescriptor:
        ref = DepRef(project.name, name)
        if ref in chain:
            raise CyclicDependencyError([*chain, ref])
        chain = (*chain, ref)

        log.debug("resolver.parsing_native", package=project.name, name=name, kind=kind.value)
        native = self._parse_native(project, name, kind, config)

        for dep_package, lib_names in config.deps.items():
            for lib in self._resolve_package_libs(dep_package, lib_names, runtime, chain):
                native = add_lib(native, lib)

        if kind is NativeKind.STANDALONE_NODE:
            native = native.with_changes(
                libs=(NODE_INTERFACE_LIB, *native.libs),
                lib_dirs=runtime.lib_dirs + native.lib_dirs,
            )

        native = native.with_changes(
            includes=_uniq(runtime.includes + native.includes),
            libs=_uniq(native.libs),
            lib_dirs=_uniq(native.lib_dirs),
            pkg_configs=_uniq(native.pkg_configs),
            sources=_uniq(native.sources),
            deps=_uniq(native.deps),
        )
        log.debug(
            "resolver.native_resolved",
            package=project.name,
            name=name,
            sources=len(native.sources),
            deps=[f"{d.package}:{d.name}" for d in native.deps],
        )
        return native

    @staticmethod
    def _parse_native(
        project: PackageProject, name: str, kind: NativeKind, config: NativeConfig
    ) -> NativeDescriptor:
        src_base = config.src_base if config.src_base is not None else project.name
        sources = tuple(str(Path(project.src_path, src_base, src)) for src in config.sources)
        if not sources:
            raise NoSourcesInNativeError(name)

        return NativeDescriptor(
            name=name,
            package=project.name,
            kind=kind,
            includes=(project.src_path, *config.includes),
            libs=tuple(config.libs),
            lib_dirs=tuple(config.lib_dirs),
            pkg_configs=tuple(config.pkg_configs),
            sources=sources,
        )

    def _resolve_package_libs(
        self,
        package: str,
        names: list[str],
        runtime: RuntimeProbeInfo,
        chain: tuple[DepRef, ...],
    ) -> list[NativeDescriptor]:
        """Load ``package`` and resolve the requested libraries, in requested order."""
        try:
            project = self._loader.load(package)
            libraries = project.manifest.section(NativeKind.LIBRARY)
            wanted = _uniq(names)
            missing = [n for n in wanted if n not in libraries]
            if missing:
                raise LibsNotFoundError(missing)
            return [
                self._resolve_native(
                    project, n, NativeKind.LIBRARY, libraries[n], runtime, chain
                )
                for n in wanted
            ]
        except NativeBuildError as e:
            raise DependencyResolutionError(package, e) from e
