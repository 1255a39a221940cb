"""Resolved native build units."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class NativeKind(Enum):
    """Kind of native unit. Decides the link step and the manifest section."""

    LIBRARY = "library"
    LOADABLE_EXTENSION = "loadable_extension"
    STANDALONE_NODE = "standalone_node"

    @property
    def manifest_section(self) -> str:
        return _MANIFEST_SECTIONS[self]


_MANIFEST_SECTIONS: dict[NativeKind, str] = {
    NativeKind.LIBRARY: "libraries",
    NativeKind.LOADABLE_EXTENSION: "extensions",
    NativeKind.STANDALONE_NODE: "nodes",
}


class DepRef(NamedTuple):
    """Reference to a library unit: (owning package, library name)."""

    package: str
    name: str


@dataclass(frozen=True)
class NativeDescriptor:
    """
    Fully merged representation of one native unit, ready for command synthesis.
    Built once per resolution call; use ``with_changes`` to derive a new one.
    """

    name: str
    package: str
    kind: NativeKind
    includes: tuple[str, ...] = ()
    libs: tuple[str, ...] = ()
    lib_dirs: tuple[str, ...] = ()
    pkg_configs: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()  # absolute paths
    deps: tuple[DepRef, ...] = ()

    @property
    def ref(self) -> DepRef:
        return DepRef(self.package, self.name)

    def with_changes(self, **changes) -> NativeDescriptor:
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "package": self.package,
            "kind": self.kind.value,
            "includes": list(self.includes),
            "libs": list(self.libs),
            "lib_dirs": list(self.lib_dirs),
            "pkg_configs": list(self.pkg_configs),
            "sources": list(self.sources),
            "deps": [{"package": d.package, "name": d.name} for d in self.deps],
        }
