"""Tests for the generic Unix command synthesizer — no compiler needed."""

from __future__ import annotations

import hashlib
import subprocess
from unittest.mock import patch

import pytest

from native_builder.exceptions import PkgConfigQueryError
from native_builder.models.native import DepRef, NativeDescriptor, NativeKind
from native_builder.testing import FakePkgConfig
from native_builder.toolchains.base import BuildProfile
from native_builder.toolchains.unix import (
    UnixToolchain,
    object_path,
    query_pkg_config,
    quote_path,
)


def _sha(path: str) -> str:
    return hashlib.sha1(path.encode()).hexdigest().upper()


def _native(kind=NativeKind.LOADABLE_EXTENSION, **fields) -> NativeDescriptor:
    defaults = {
        "name": "foo",
        "package": "app",
        "kind": kind,
        "includes": ("/rt/include", "/src"),
        "sources": ("/src/a.c", "/src/b.c"),
    }
    defaults.update(fields)
    return NativeDescriptor(**defaults)


def _toolchain(**kwargs) -> UnixToolchain:
    kwargs.setdefault("output_root", "/out")
    kwargs.setdefault("pkg_config", FakePkgConfig())
    return UnixToolchain(**kwargs)


class TestQuoting:
    def test_plain_path(self):
        assert quote_path("/src/a.c") == '"/src/a.c"'

    def test_embedded_quote_escaped(self):
        assert quote_path('/src/we"ird.c') == '"/src/we\\"ird.c"'

    def test_spaces_kept_inside_quotes(self):
        assert quote_path("/my src/a.c") == '"/my src/a.c"'

    def test_dollar_escaped(self):
        assert quote_path("/src/$HOME/a.c") == '"/src/\\$HOME/a.c"'

    def test_backtick_escaped(self):
        assert quote_path("/src/`id`.c") == '"/src/\\`id\\`.c"'

    def test_backslash_escaped_before_quote(self):
        assert quote_path('/src/a\\"b.c') == '"/src/a\\\\\\"b.c"'

    def test_trailing_backslash_does_not_escape_closing_quote(self):
        assert quote_path("/src/dir\\") == '"/src/dir\\\\"'


class TestObjectPath:
    def test_name_has_basename_and_uppercase_sha1(self):
        path = object_path("/out/app/foo_obj", "/src/a.c")
        assert path == f"/out/app/foo_obj/a.c_{_sha('/src/a.c')}.o"

    def test_same_basename_different_dirs_do_not_collide(self):
        first = object_path("/obj", "/x/util.c")
        second = object_path("/obj", "/y/util.c")
        assert first != second
        assert first.startswith("/obj/util.c_")
        assert second.startswith("/obj/util.c_")


class TestCompilerCommands:
    def test_extension_end_to_end(self):
        commands = _toolchain().commands(_native())
        obj_a = f"/out/app/foo_obj/a.c_{_sha('/src/a.c')}.o"
        obj_b = f"/out/app/foo_obj/b.c_{_sha('/src/b.c')}.o"

        assert len(commands) == 4
        assert commands[0] == 'mkdir -p "/out/app/foo_obj"'
        assert commands[1] == (
            "cc -Wall -Wextra -c -std=c11 -O2 -g "
            f'-o "{obj_a}" -I"/rt/include" -I"/src" "/src/a.c"'
        )
        assert commands[2].endswith('"/src/b.c"')
        assert commands[3] == f'cc -o "/out/app/foo.so" "{obj_a}" "{obj_b}"'

    def test_extension_link_references_objects_only(self):
        link = _toolchain().commands(_native())[-1]
        assert link.count(".o\"") == 2
        assert ".a\"" not in link

    def test_one_compile_per_source(self):
        native = _native(sources=("/src/a.c", "/src/b.c", "/src/c.c"))
        commands = _toolchain().commands(native)
        compiles = [c for c in commands if " -c " in c]
        assert len(compiles) == 3

    def test_link_flags_order(self):
        native = _native(
            libs=("ssl", "m"),
            lib_dirs=("/opt/lib",),
            pkg_configs=("zlib",),
            deps=(DepRef("net", "shared"),),
        )
        fake = FakePkgConfig({"cflags": "-I/opt/zlib/include", "libs": "-lz"})
        link = _toolchain(pkg_config=fake).commands(native)[-1]
        obj_a = f"/out/app/foo_obj/a.c_{_sha('/src/a.c')}.o"
        obj_b = f"/out/app/foo_obj/b.c_{_sha('/src/b.c')}.o"

        assert link == (
            'cc -o "/out/app/foo.so" -lz -L"/opt/lib" -lssl -lm '
            f'"/out/net/shared.a" "{obj_a}" "{obj_b}"'
        )

    def test_wrap_deps_surrounds_dependency_archives(self):
        native = _native(deps=(DepRef("net", "shared"), DepRef("core", "base")))
        wrap = lambda d: f"-Wl,--whole-archive {d} -Wl,--no-whole-archive"  # noqa: E731
        toolchain = _toolchain(wrap_deps=wrap)
        link = toolchain.commands(native)[-1]
        assert (
            '-Wl,--whole-archive "/out/net/shared.a" "/out/core/base.a" -Wl,--no-whole-archive "'
            in link
        )

    def test_wrap_deps_not_applied_without_deps(self):
        calls = []
        toolchain = _toolchain(wrap_deps=lambda d: calls.append(d) or d)
        toolchain.commands(_native())
        assert calls == []

    def test_pkg_config_cflags_before_source(self):
        native = _native(pkg_configs=("zlib",))
        fake = FakePkgConfig({"cflags": "-I/opt/zlib/include"})
        compile_cmd = _toolchain(pkg_config=fake).commands(native)[1]
        assert compile_cmd.endswith('-I/opt/zlib/include "/src/a.c"')

    def test_pkg_config_queried_once_per_phase(self):
        fake = FakePkgConfig({"cflags": "-DX", "libs": "-lx"})
        _toolchain(pkg_config=fake).commands(_native(pkg_configs=("x", "y")))
        assert fake.calls == [(["x", "y"], "cflags"), (["x", "y"], "libs")]

    def test_pkg_config_not_queried_without_configs(self):
        fake = FakePkgConfig({"cflags": "-DX"})
        _toolchain(pkg_config=fake).commands(_native())
        assert fake.calls == []

    def test_pkg_config_failure_propagates(self):
        fake = FakePkgConfig(exit_status=1)
        with pytest.raises(PkgConfigQueryError):
            _toolchain(pkg_config=fake).commands(_native(pkg_configs=("missing",)))

    def test_node_has_no_suffix(self):
        native = _native(kind=NativeKind.STANDALONE_NODE, libs=("ei",))
        link = _toolchain().commands(native)[-1]
        assert link.startswith('cc -o "/out/app/foo" -lei ')

    def test_library_is_single_archive_command(self):
        native = _native(
            kind=NativeKind.LIBRARY,
            name="util",
            libs=("ssl",),
            lib_dirs=("/opt/lib",),
            pkg_configs=("zlib",),
            deps=(DepRef("core", "base"),),
            sources=("/src/a.c", "/src/b.c", "/src/c.c"),
        )
        fake = FakePkgConfig({"cflags": "-DZ", "libs": "-lz"})
        commands = _toolchain(pkg_config=fake).commands(native)
        link = commands[-1]

        assert len(commands) == 1 + 3 + 1
        assert link.startswith('ar rcs "/out/app/util.a" ')
        assert link.count(".o\"") == 3
        assert "-l" not in link
        assert "-L" not in link
        assert "core/base.a" not in link
        assert [c for c in commands if c.startswith("ar ")] == [link]

    def test_quoted_paths_in_commands(self):
        native = _native(sources=('/src/we"ird.c',))
        compile_cmd = _toolchain().commands(native)[1]
        assert compile_cmd.endswith('"/src/we\\"ird.c"')

    def test_custom_profile(self):
        profile = BuildProfile(std="gnu99", optimization="-O0", extension_suffix=".dylib")
        commands = _toolchain(profile=profile).commands(_native())
        assert "-std=gnu99 -O0 -g" in commands[1]
        assert '-o "/out/app/foo.dylib"' in commands[-1]

    def test_generic_extra_flags(self):
        toolchain = _toolchain(extra_cflags="-m64", extra_lflags="-pthread")
        commands = toolchain.commands(_native())
        assert commands[1].startswith("cc -m64 -Wall")
        assert commands[-1].startswith("cc -pthread -o ")

    def test_generic_has_no_platform_flags(self):
        commands = _toolchain().commands(_native())
        assert not any("-fPIC" in c for c in commands)
        assert "-dynamiclib" not in commands[-1]

    def test_link_steps_cover_every_kind(self):
        assert set(UnixToolchain._LINK_STEPS) == set(NativeKind)
        for step in UnixToolchain._LINK_STEPS.values():
            assert callable(step)


class TestQueryPkgConfig:
    def test_empty_packages_skip_subprocess(self):
        with patch("native_builder.toolchains.unix.subprocess.run") as run:
            assert query_pkg_config([], "cflags") == ""
        run.assert_not_called()

    def test_success(self):
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="-I/usr/include/glib-2.0 \n", stderr=""
        )
        with patch("native_builder.toolchains.unix.subprocess.run", return_value=completed) as run:
            assert query_pkg_config(["glib-2.0"], "cflags") == "-I/usr/include/glib-2.0"
        assert run.call_args[0][0] == ["pkg-config", "--cflags", "glib-2.0"]

    def test_non_zero_exit(self):
        completed = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="Package nope was not found"
        )
        with patch("native_builder.toolchains.unix.subprocess.run", return_value=completed):
            with pytest.raises(PkgConfigQueryError) as exc_info:
                query_pkg_config(["nope"], "libs")
        assert exc_info.value.packages == ["nope"]
        assert exc_info.value.exit_status == 1
        assert "nope was not found" in str(exc_info.value)

    def test_missing_binary(self):
        with patch(
            "native_builder.toolchains.unix.subprocess.run",
            side_effect=FileNotFoundError("pkg-config"),
        ):
            with pytest.raises(PkgConfigQueryError) as exc_info:
                query_pkg_config(["zlib"], "cflags")
        assert exc_info.value.exit_status == 127
