"""Shared pytest fixtures for native-builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from native_builder.loader import StaticProjectLoader
from native_builder.models.manifest import RuntimeProbeInfo


@pytest.fixture(autouse=True, scope="session")
def _structlog_via_stdlib():
    """Send structlog events through stdlib logging so pytest captures them."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer(key_order=["event"])],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def runtime() -> RuntimeProbeInfo:
    return RuntimeProbeInfo(includes=("/rt/include",), lib_dirs=("/rt/lib",))


@pytest.fixture
def loader() -> StaticProjectLoader:
    return StaticProjectLoader()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty workspace dir; use ``write_manifest`` to add packages."""
    ws = tmp_path / "ws"
    ws.mkdir()
    return ws


@pytest.fixture
def write_manifest(workspace: Path):
    def _write(package: str, content: str) -> Path:
        pkg_dir = workspace / package
        pkg_dir.mkdir(parents=True, exist_ok=True)
        manifest = pkg_dir / "natives.toml"
        manifest.write_text(content)
        return manifest

    return _write
