"""Linux / GCC toolchain."""

from __future__ import annotations

from native_builder.models.native import NativeKind
from native_builder.toolchains.unix import UnixToolchain


class GCCToolchain(UnixToolchain):
    name = "linux"
    kind_flags = {
        NativeKind.LOADABLE_EXTENSION: ("-fPIC", "-rdynamic -shared"),
    }

    def __init__(self, compiler: str = "gcc", **kwargs) -> None:
        super().__init__(compiler, **kwargs)
