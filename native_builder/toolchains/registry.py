"""Toolchain registry — pick a toolchain variant for a platform."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable

from native_builder.exceptions import UnknownPlatformError
from native_builder.toolchains.base import Toolchain

logger = logging.getLogger(__name__)


@dataclass
class ToolchainDescriptor:
    """Toolchain declaration."""

    name: str
    platforms: set[str]  # sys.platform prefixes, e.g. {"darwin"}, {"linux"}
    factory: Callable[..., Toolchain]
    description: str = ""
    compilers: list[str] = field(default_factory=list)

    def matches(self, platform: str) -> bool:
        return any(platform == p or platform.startswith(p) for p in self.platforms)


class ToolchainRegistry:
    """Toolchain registration center."""

    def __init__(self) -> None:
        self._toolchains: dict[str, ToolchainDescriptor] = {}

    def register(self, descriptor: ToolchainDescriptor) -> None:
        self._toolchains[descriptor.name] = descriptor
        logger.debug("Registered toolchain: %s", descriptor.name)

    def get(self, name: str) -> ToolchainDescriptor | None:
        return self._toolchains.get(name)

    def list_all(self) -> list[ToolchainDescriptor]:
        return list(self._toolchains.values())

    def for_platform(self, platform: str) -> ToolchainDescriptor | None:
        """Exact toolchain name first, then the first descriptor whose platforms match."""
        if platform in self._toolchains:
            return self._toolchains[platform]
        for desc in self._toolchains.values():
            if desc.matches(platform):
                return desc
        return None

    def select(self, platform: str | None = None, **options) -> Toolchain:
        """Instantiate the toolchain for ``platform`` (default: the running platform)."""
        platform = platform or sys.platform
        desc = self.for_platform(platform)
        if desc is None:
            raise UnknownPlatformError(platform, sorted(self._toolchains))
        logger.info("Selected toolchain: %s (platform=%s)", desc.name, platform)
        return desc.factory(**options)


def create_default_registry() -> ToolchainRegistry:
    """Registry with the generic Unix, Darwin and Linux toolchains."""
    from native_builder.toolchains.gcc import GCCToolchain
    from native_builder.toolchains.unix import UnixToolchain
    from native_builder.toolchains.xcode import XCodeToolchain

    registry = ToolchainRegistry()
    registry.register(
        ToolchainDescriptor(
            name="darwin",
            platforms={"darwin"},
            factory=XCodeToolchain,
            description="Xcode command line tools",
            compilers=["cc"],
        )
    )
    registry.register(
        ToolchainDescriptor(
            name="linux",
            platforms={"linux"},
            factory=GCCToolchain,
            description="GCC",
            compilers=["gcc"],
        )
    )
    registry.register(
        ToolchainDescriptor(
            name="unix",
            platforms={"freebsd", "openbsd", "netbsd", "sunos"},
            factory=UnixToolchain,
            description="Generic Unix cc/ar",
            compilers=["cc"],
        )
    )
    return registry


def select_toolchain(platform: str | None = None, **options) -> Toolchain:
    return create_default_registry().select(platform, **options)
