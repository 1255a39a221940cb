"""Project loaders — map a package name to its source root and native declarations.

The resolver only needs something satisfying :class:`ProjectLoader`; the
TOML loader reads ``<workspace>/<package>/natives.toml``::

    [package]
    src_path = "c_src"          # relative to the package directory

    [libraries.mylib]
    sources = ["mylib.c"]

    [extensions.foo]
    sources = ["foo.c"]
    deps = { other_pkg = ["shared"] }
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError

from native_builder.exceptions import ManifestError, PackageNotFoundError
from native_builder.models.manifest import NativeManifest, PackageProject

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "natives.toml"
DEFAULT_SRC_DIR = "c_src"


@runtime_checkable
class ProjectLoader(Protocol):
    """Interface the resolver uses to load sibling packages."""

    def load(self, package: str) -> PackageProject: ...


class _PackageSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    src_path: str = DEFAULT_SRC_DIR


def parse_manifest(package: str, data: dict[str, Any]) -> NativeManifest:
    """Validate raw manifest data, turning validation failures into ManifestError."""
    try:
        return NativeManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(package, _format_validation_error(e)) from e


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"])
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)


class TomlProjectLoader:
    """Load packages laid out as sibling directories of a workspace."""

    def __init__(self, workspace: str | Path, manifest_name: str = MANIFEST_FILENAME) -> None:
        self.workspace = Path(workspace)
        self.manifest_name = manifest_name

    def load(self, package: str) -> PackageProject:
        package_dir = self.workspace / package
        manifest_path = package_dir / self.manifest_name
        if not manifest_path.is_file():
            logger.warning("Manifest not found for package %s: %s", package, manifest_path)
            raise PackageNotFoundError(package)

        try:
            data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ManifestError(package, f"{manifest_path.name}: {e}") from e

        raw_section = data.pop("package", {})
        try:
            section = _PackageSection.model_validate(raw_section)
        except ValidationError as e:
            raise ManifestError(package, _format_validation_error(e)) from e

        manifest = parse_manifest(package, data)
        src_path = (package_dir / section.src_path).resolve()
        logger.debug("Loaded manifest for %s (src_path=%s)", package, src_path)
        return PackageProject(name=package, src_path=str(src_path), manifest=manifest)


class StaticProjectLoader:
    """In-memory loader, for embedding callers and tests."""

    def __init__(self, projects: dict[str, PackageProject] | None = None) -> None:
        self._projects: dict[str, PackageProject] = dict(projects or {})

    def add(self, project: PackageProject) -> None:
        self._projects[project.name] = project

    def load(self, package: str) -> PackageProject:
        project = self._projects.get(package)
        if project is None:
            raise PackageNotFoundError(package)
        return project
