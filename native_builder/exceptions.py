"""Custom exceptions for native-builder."""

from __future__ import annotations


class NativeBuildError(Exception):
    """Base exception for all native build errors."""


class NoSourcesInNativeError(NativeBuildError):
    """Raised when a declared native unit resolves to zero source files."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No sources in native '{name}'")


class LibsNotFoundError(NativeBuildError):
    """Raised when a dependency entry names libraries absent from the target package."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Libraries not found: {missing}")


class DependencyResolutionError(NativeBuildError):
    """Raised when resolving a dependency package fails. Nests for multi-hop chains."""

    def __init__(self, package: str, cause: NativeBuildError):
        self.package = package
        self.cause = cause
        super().__init__(f"Failed to resolve dependency package '{package}': {cause}")

    @property
    def root_cause(self) -> NativeBuildError:
        err: NativeBuildError = self
        while isinstance(err, DependencyResolutionError):
            err = err.cause
        return err

    @property
    def chain(self) -> list[str]:
        """Packages traversed from the outermost wrapper to the failure."""
        packages = []
        err: NativeBuildError = self
        while isinstance(err, DependencyResolutionError):
            packages.append(err.package)
            err = err.cause
        return packages


class CyclicDependencyError(NativeBuildError):
    """Raised when a library is reached again while it is still being resolved."""

    def __init__(self, chain: list[tuple[str, str]]):
        self.chain = chain
        rendered = " -> ".join(f"{package}:{name}" for package, name in chain)
        super().__init__(f"Cyclic native dependency: {rendered}")


class PkgConfigQueryError(NativeBuildError):
    """Raised when a pkg-config query exits with a non-zero status."""

    def __init__(self, packages: list[str], exit_status: int, stderr: str = ""):
        self.packages = packages
        self.exit_status = exit_status
        self.stderr = stderr
        message = f"pkg-config query for {packages} failed (rc={exit_status})"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message)


class ManifestError(NativeBuildError):
    """Raised when a package manifest cannot be read or fails validation."""

    def __init__(self, package: str, detail: str):
        self.package = package
        self.detail = detail
        super().__init__(f"Invalid manifest for package '{package}': {detail}")


class PackageNotFoundError(NativeBuildError):
    """Raised when the project loader cannot locate a package."""

    def __init__(self, package: str):
        self.package = package
        super().__init__(f"Package not found: '{package}'")


class UnknownPlatformError(NativeBuildError):
    """Raised when no toolchain is registered for a platform."""

    def __init__(self, platform: str, known: list[str]):
        self.platform = platform
        self.known = known
        super().__init__(f"No toolchain for platform '{platform}' (known: {known})")
