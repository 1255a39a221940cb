"""Test doubles for native_builder — use in caller and integration tests.

Usage::

    from native_builder.testing import FakePkgConfig, make_project

    loader = StaticProjectLoader({"app": make_project("app", extensions={"foo": {"sources": ["foo.c"]}})})
    toolchain = UnixToolchain(pkg_config=FakePkgConfig({"cflags": "-I/opt/x"}))
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from native_builder.exceptions import PkgConfigQueryError
from native_builder.loader import parse_manifest
from native_builder.models.manifest import PackageProject


def make_project(name: str, src_path: str | None = None, **sections: dict[str, Any]) -> PackageProject:
    """Build a PackageProject from plain dicts, e.g. ``extensions={"foo": {...}}``.

    ``src_path`` defaults to ``/ws/<name>/c_src``.
    """
    return PackageProject(
        name=name,
        src_path=src_path or f"/ws/{name}/c_src",
        manifest=parse_manifest(name, sections),
    )


class FakePkgConfig:
    """Drop-in replacement for ``query_pkg_config``.

    Parameters
    ----------
    outputs:
        Output per option (``"cflags"`` / ``"libs"``). Missing options yield ``""``.
    exit_status:
        If non-zero, every non-empty query raises PkgConfigQueryError.
    """

    def __init__(self, outputs: dict[str, str] | None = None, *, exit_status: int = 0) -> None:
        self._outputs = outputs or {}
        self._exit_status = exit_status
        self._calls: list[tuple[list[str], str]] = []

    @property
    def calls(self) -> list[tuple[list[str], str]]:
        """Non-empty queries received — useful for assertions in tests."""
        return self._calls

    def __call__(self, packages: Sequence[str], option: str) -> str:
        if not packages:
            return ""
        self._calls.append((list(packages), option))
        if self._exit_status:
            raise PkgConfigQueryError(list(packages), self._exit_status, "fake failure")
        return self._outputs.get(option, "")
