"""Manifest-side models: raw native declarations, packages, runtime probe info."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from native_builder.models.native import NativeKind


class NativeConfig(BaseModel):
    """One declared native unit, before merging.

    ``src_base`` is the source-directory override; ``None`` means the owning
    package's name is used. ``deps`` maps a package to the library name(s)
    required from it; a bare string is accepted for a single library.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    includes: list[str] = Field(default_factory=list)
    libs: list[str] = Field(default_factory=list)
    lib_dirs: list[str] = Field(default_factory=list)
    pkg_configs: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    deps: dict[str, list[str]] = Field(default_factory=dict)
    src_base: str | None = None

    @field_validator("deps", mode="before")
    @classmethod
    def _listify_deps(cls, v):
        if isinstance(v, dict):
            return {pkg: [names] if isinstance(names, str) else names for pkg, names in v.items()}
        return v


class NativeManifest(BaseModel):
    """Native units declared by one package, grouped by kind."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    libraries: dict[str, NativeConfig] = Field(default_factory=dict)
    extensions: dict[str, NativeConfig] = Field(default_factory=dict)
    nodes: dict[str, NativeConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _unique_names(self) -> NativeManifest:
        # Units of one package share an output directory, so names must not repeat across kinds.
        seen: dict[str, NativeKind] = {}
        for name, kind, _ in self.declarations():
            if name in seen:
                raise ValueError(
                    f"native '{name}' declared in both '{seen[name].manifest_section}' "
                    f"and '{kind.manifest_section}'"
                )
            seen[name] = kind
        return self

    def section(self, kind: NativeKind) -> dict[str, NativeConfig]:
        return getattr(self, kind.manifest_section)

    def declarations(
        self, kinds: Iterable[NativeKind] = tuple(NativeKind)
    ) -> Iterator[tuple[str, NativeKind, NativeConfig]]:
        """Yield (name, kind, config), kinds in the given order, declaration order within."""
        for kind in kinds:
            for name, config in self.section(kind).items():
                yield name, kind, config

    @property
    def is_empty(self) -> bool:
        return not (self.libraries or self.extensions or self.nodes)


@dataclass(frozen=True)
class PackageProject:
    """Project loader result: package identity, source root and declarations."""

    name: str
    src_path: str
    manifest: NativeManifest


@dataclass(frozen=True)
class RuntimeProbeInfo:
    """Host runtime headers and library dirs, supplied by a runtime probe."""

    includes: tuple[str, ...] = ()
    lib_dirs: tuple[str, ...] = ()
