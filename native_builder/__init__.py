"""native-builder: resolve native build units and synthesize toolchain commands."""

__version__ = "0.1.0"

from native_builder.builder import NativeBuilder, NativeCommands
from native_builder.exceptions import (
    CyclicDependencyError,
    DependencyResolutionError,
    LibsNotFoundError,
    ManifestError,
    NativeBuildError,
    NoSourcesInNativeError,
    PackageNotFoundError,
    PkgConfigQueryError,
    UnknownPlatformError,
)
from native_builder.loader import ProjectLoader, StaticProjectLoader, TomlProjectLoader
from native_builder.models.manifest import (
    NativeConfig,
    NativeManifest,
    PackageProject,
    RuntimeProbeInfo,
)
from native_builder.models.native import DepRef, NativeDescriptor, NativeKind
from native_builder.output import output_path
from native_builder.resolver import NativeResolver

__all__ = [
    "CyclicDependencyError",
    "DepRef",
    "DependencyResolutionError",
    "LibsNotFoundError",
    "ManifestError",
    "NativeBuildError",
    "NativeBuilder",
    "NativeCommands",
    "NativeConfig",
    "NativeDescriptor",
    "NativeKind",
    "NativeManifest",
    "NativeResolver",
    "NoSourcesInNativeError",
    "PackageNotFoundError",
    "PackageProject",
    "PkgConfigQueryError",
    "ProjectLoader",
    "RuntimeProbeInfo",
    "StaticProjectLoader",
    "TomlProjectLoader",
    "UnknownPlatformError",
    "output_path",
]
