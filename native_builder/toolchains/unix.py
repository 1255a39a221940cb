"""Generic Unix-family command synthesizer.

Every emitted path is double-quoted with sh-special characters escaped, so each
command string can be handed to ``sh -c`` on its own.
"""

from __future__ import annotations

import hashlib
import logging
import posixpath
import subprocess
from collections.abc import Callable, Sequence

from native_builder.exceptions import PkgConfigQueryError
from native_builder.models.native import NativeDescriptor, NativeKind
from native_builder.output import DEFAULT_OUTPUT_ROOT, output_path
from native_builder.toolchains.base import DEFAULT_PROFILE, BuildProfile, Toolchain

logger = logging.getLogger(__name__)

PkgConfigQuery = Callable[[Sequence[str], str], str]

# Characters still special inside double quotes; backslash must go first.
_DQUOTE_SPECIAL = ("\\", "$", "`", '"')


def query_pkg_config(packages: Sequence[str], option: str) -> str:
    """Run ``pkg-config --<option> <packages...>`` and return its trimmed output."""
    if not packages:
        return ""
    cmd = ["pkg-config", f"--{option}", *packages]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise PkgConfigQueryError(list(packages), 127, str(e)) from e
    if result.returncode != 0:
        raise PkgConfigQueryError(list(packages), result.returncode, result.stderr)
    return result.stdout.strip()


def quote_path(path: str) -> str:
    """Double-quote for sh; backslash, $, backtick and quote are escaped."""
    escaped = path
    for ch in _DQUOTE_SPECIAL:
        escaped = escaped.replace(ch, "\\" + ch)
    return f'"{escaped}"'


def quote_paths(paths: Sequence[str], flag: str = "") -> str:
    return " ".join(f"{flag}{quote_path(p)}" for p in paths)


def object_path(obj_dir: str, source: str) -> str:
    """Object file for ``source``; the SHA-1 suffix keeps same-named sources apart."""
    digest = hashlib.sha1(source.encode("utf-8")).hexdigest().upper()
    return posixpath.join(obj_dir, f"{posixpath.basename(source)}_{digest}.o")


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


class UnixToolchain(Toolchain):
    """
    Generic toolchain: ``cc`` for compiling and linking, ``ar`` for archives.
    Platform variants override ``kind_flags`` with extra (cflags, lflags) per kind.

    ``wrap_deps`` receives the quoted dependency archives of a link command and
    returns the text to put in their place, e.g. to surround them with
    ``-Wl,--whole-archive ... -Wl,--no-whole-archive``. Not called when a
    native has no dependencies.
    """

    name = "unix"
    kind_flags: dict[NativeKind, tuple[str, str]] = {}

    def __init__(
        self,
        compiler: str = "cc",
        *,
        extra_cflags: str = "",
        extra_lflags: str = "",
        profile: BuildProfile = DEFAULT_PROFILE,
        output_root: str = DEFAULT_OUTPUT_ROOT,
        pkg_config: PkgConfigQuery = query_pkg_config,
        wrap_deps: Callable[[str], str] | None = None,
    ) -> None:
        self.compiler = compiler
        self.extra_cflags = extra_cflags
        self.extra_lflags = extra_lflags
        self.profile = profile
        self.output_root = output_root
        self._pkg_config = pkg_config
        self._wrap_deps = wrap_deps or (lambda deps: deps)

    def flags_for(self, kind: NativeKind) -> tuple[str, str]:
        cflags, lflags = self.kind_flags.get(kind, ("", ""))
        return _join(cflags, self.extra_cflags), _join(lflags, self.extra_lflags)

    def commands(self, native: NativeDescriptor) -> list[str]:
        cflags, lflags = self.flags_for(native.kind)
        return self.compiler_commands(
            native, _join(self.compiler, cflags), _join(self.compiler, lflags)
        )

    def compiler_commands(
        self, native: NativeDescriptor, compile_program: str, link_program: str
    ) -> list[str]:
        """mkdir for the object dir, one compile per source, then the link step."""
        output = output_path(native.package, native.name, self.output_root)
        obj_dir = output + "_obj"
        objects = [object_path(obj_dir, src) for src in native.sources]

        includes = quote_paths(native.includes, "-I")
        pkg_cflags = self._pkg_config(native.pkg_configs, "cflags")

        compile_commands = [
            _join(
                compile_program,
                self.profile.compile_flags,
                "-o",
                quote_path(obj),
                includes,
                pkg_cflags,
                quote_path(src),
            )
            for src, obj in zip(native.sources, objects)
        ]

        step = self._LINK_STEPS.get(native.kind)
        if step is None:
            raise NotImplementedError(f"No link step for native kind {native.kind!r}")
        link_command = step(self, native, link_program, output, objects)

        logger.debug(
            "Synthesized %d compile commands for %s:%s",
            len(compile_commands),
            native.package,
            native.name,
        )
        return [f"mkdir -p {quote_path(obj_dir)}", *compile_commands, link_command]

    def _archive_command(
        self, native: NativeDescriptor, link: str, output: str, objects: list[str]
    ) -> str:
        return _join(self.profile.archiver, quote_path(output + ".a"), quote_paths(objects))

    def _extension_link_command(
        self, native: NativeDescriptor, link: str, output: str, objects: list[str]
    ) -> str:
        return self._link_command(native, link, output + self.profile.extension_suffix, objects)

    def _node_link_command(
        self, native: NativeDescriptor, link: str, output: str, objects: list[str]
    ) -> str:
        return self._link_command(native, link, output, objects)

    def _link_command(
        self, native: NativeDescriptor, link: str, target: str, objects: list[str]
    ) -> str:
        deps = [output_path(d.package, d.name, self.output_root) + ".a" for d in native.deps]
        return _join(
            link,
            "-o",
            quote_path(target),
            self._pkg_config(native.pkg_configs, "libs"),
            quote_paths(native.lib_dirs, "-L"),
            " ".join(f"-l{lib}" for lib in native.libs),
            self._wrap_deps(quote_paths(deps)) if deps else "",
            quote_paths(objects),
        )

    # Link step per kind; must cover every NativeKind.
    _LINK_STEPS: dict[NativeKind, Callable[..., str]] = {
        NativeKind.LIBRARY: _archive_command,
        NativeKind.LOADABLE_EXTENSION: _extension_link_command,
        NativeKind.STANDALONE_NODE: _node_link_command,
    }
