"""Darwin / Xcode toolchain."""

from __future__ import annotations

from native_builder.models.native import NativeKind
from native_builder.toolchains.unix import UnixToolchain


class XCodeToolchain(UnixToolchain):
    """Loadable extensions are built as dynamic libraries with lazily bound runtime symbols."""

    name = "darwin"
    kind_flags = {
        NativeKind.LOADABLE_EXTENSION: ("-fPIC", "-dynamiclib -undefined dynamic_lookup"),
    }
