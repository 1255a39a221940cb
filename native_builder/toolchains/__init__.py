"""Toolchain variants: generic Unix, Darwin (Xcode), Linux (GCC)."""

from native_builder.toolchains.base import DEFAULT_PROFILE, BuildProfile, Toolchain
from native_builder.toolchains.gcc import GCCToolchain
from native_builder.toolchains.registry import (
    ToolchainDescriptor,
    ToolchainRegistry,
    create_default_registry,
    select_toolchain,
)
from native_builder.toolchains.unix import UnixToolchain, query_pkg_config
from native_builder.toolchains.xcode import XCodeToolchain

__all__ = [
    "DEFAULT_PROFILE",
    "BuildProfile",
    "GCCToolchain",
    "Toolchain",
    "ToolchainDescriptor",
    "ToolchainRegistry",
    "UnixToolchain",
    "XCodeToolchain",
    "create_default_registry",
    "query_pkg_config",
    "select_toolchain",
]
