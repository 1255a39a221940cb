"""Toolchain abstraction and the build profile shared by all toolchains."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from native_builder.models.native import NativeDescriptor


@dataclass(frozen=True)
class BuildProfile:
    """Compile/link defaults applied to every native."""

    warning_flags: tuple[str, ...] = ("-Wall", "-Wextra")
    std: str = "c11"
    optimization: str = "-O2"
    debug: str = "-g"
    archiver: str = "ar rcs"
    extension_suffix: str = ".so"  # loadable extensions; standalone nodes get none

    @property
    def compile_flags(self) -> str:
        return " ".join([*self.warning_flags, "-c", f"-std={self.std}", self.optimization, self.debug])


DEFAULT_PROFILE = BuildProfile()


class Toolchain(ABC):
    """Turns a resolved NativeDescriptor into an ordered list of shell commands."""

    name: str = ""

    @abstractmethod
    def commands(self, native: NativeDescriptor) -> list[str]:
        """Commands that build ``native``: mkdir, one compile per source, one link."""
        ...
