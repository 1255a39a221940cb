"""Output-path convention shared by the resolver and every toolchain.

A dependent's link command must point at the exact archive its library
dependency produces, so both sides derive artifact paths from here.
"""

from __future__ import annotations

from pathlib import PurePosixPath

DEFAULT_OUTPUT_ROOT = "_build/native"


def output_path(package: str, name: str, root: str = DEFAULT_OUTPUT_ROOT) -> str:
    """Canonical artifact path prefix for native ``name`` owned by ``package``.

    Suffixes (``.a``, ``.so``, ``_obj``) are appended by the caller.
    """
    return str(PurePosixPath(root) / package / name)
