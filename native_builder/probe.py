"""Runtime probe — where the host runtime's headers and libraries live."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from native_builder.models.manifest import RuntimeProbeInfo

logger = logging.getLogger(__name__)

INCLUDES_ENV = "NATIVE_BUILDER_RUNTIME_INCLUDES"
LIB_DIRS_ENV = "NATIVE_BUILDER_RUNTIME_LIB_DIRS"


@runtime_checkable
class RuntimeProbe(Protocol):
    def probe(self) -> RuntimeProbeInfo: ...


class EnvRuntimeProbe:
    """Read runtime include/lib dirs from ``os.pathsep``-separated env vars."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def probe(self) -> RuntimeProbeInfo:
        info = RuntimeProbeInfo(
            includes=self._split(INCLUDES_ENV),
            lib_dirs=self._split(LIB_DIRS_ENV),
        )
        if not info.includes:
            logger.warning("%s is not set; runtime headers will not be on the include path", INCLUDES_ENV)
        return info

    def _split(self, key: str) -> tuple[str, ...]:
        raw = self._environ.get(key, "")
        return tuple(p for p in raw.split(os.pathsep) if p)


class StaticRuntimeProbe:
    """Fixed probe result."""

    def __init__(self, includes: tuple[str, ...] = (), lib_dirs: tuple[str, ...] = ()) -> None:
        self._info = RuntimeProbeInfo(includes=tuple(includes), lib_dirs=tuple(lib_dirs))

    def probe(self) -> RuntimeProbeInfo:
        return self._info
