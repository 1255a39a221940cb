"""CLI entry point: native-builder.

Subcommands:
    native-builder resolve PACKAGE               # Print merged descriptors as JSON
    native-builder commands PACKAGE              # Print build commands
    native-builder commands PACKAGE --script b.sh  # Write them to a shell script
"""

from __future__ import annotations

import json
import os
import sys
from typing import NoReturn

import click

from native_builder.builder import NativeBuilder
from native_builder.exceptions import NativeBuildError
from native_builder.loader import TomlProjectLoader
from native_builder.logging import setup_logging
from native_builder.output import DEFAULT_OUTPUT_ROOT
from native_builder.probe import EnvRuntimeProbe
from native_builder.script import BuildScript
from native_builder.toolchains.base import Toolchain
from native_builder.toolchains.registry import select_toolchain

# Defaults (overridable via env vars)
_DEFAULT_WORKSPACE = os.environ.get("NATIVE_BUILDER_WORKSPACE", ".")
_DEFAULT_OUTPUT_ROOT = os.environ.get("NATIVE_BUILDER_OUTPUT_ROOT", DEFAULT_OUTPUT_ROOT)
_DEFAULT_PLATFORM = os.environ.get("NATIVE_BUILDER_PLATFORM")


def _make_builder(workspace: str, toolchain: Toolchain | None = None) -> NativeBuilder:
    return NativeBuilder(
        loader=TomlProjectLoader(workspace),
        runtime_probe=EnvRuntimeProbe(),
        toolchain=toolchain,
    )


def _fail(error: NativeBuildError) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """native-builder: resolve native units and synthesize compile/link commands."""
    try:
        setup_logging(level="DEBUG" if verbose else None)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


@main.command("resolve")
@click.argument("package")
@click.option("--workspace", default=_DEFAULT_WORKSPACE, help="Directory holding the packages")
def resolve(package: str, workspace: str) -> None:
    """Resolve PACKAGE's natives and print the merged descriptors."""
    try:
        natives = _make_builder(workspace).resolve(package)
    except NativeBuildError as e:
        _fail(e)
    click.echo(json.dumps([n.to_dict() for n in natives], indent=2))


@main.command("commands")
@click.argument("package")
@click.option("--workspace", default=_DEFAULT_WORKSPACE, help="Directory holding the packages")
@click.option("--platform", default=_DEFAULT_PLATFORM, help="Toolchain platform (default: host)")
@click.option("--output-root", default=_DEFAULT_OUTPUT_ROOT, help="Artifact output root")
@click.option("--script", "script_path", default=None, help="Write commands to this shell script")
def commands(
    package: str,
    workspace: str,
    platform: str | None,
    output_root: str,
    script_path: str | None,
) -> None:
    """Print the shell commands that build PACKAGE's natives."""
    try:
        toolchain = select_toolchain(platform, output_root=output_root)
        entries = _make_builder(workspace, toolchain).commands(package)
    except NativeBuildError as e:
        _fail(e)

    if not entries:
        click.echo(f"No natives declared in {package}", err=True)
        return

    if script_path:
        path = BuildScript.from_natives(entries).store(script_path)
        click.echo(f"Build script written to {path}")
        return

    for entry in entries:
        click.echo(f"# {entry.native.package}:{entry.native.name} ({entry.native.kind.value})")
        for command in entry.commands:
            click.echo(command)


if __name__ == "__main__":
    main()
