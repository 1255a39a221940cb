"""Render build commands into a standalone POSIX shell script."""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from pathlib import Path

from native_builder.builder import NativeCommands


@dataclass
class BuildScript:
    commands: list[str] = field(default_factory=list)

    @classmethod
    def from_natives(cls, entries: list[NativeCommands]) -> BuildScript:
        commands: list[str] = []
        for entry in entries:
            commands.extend(entry.commands)
        return cls(commands=commands)

    def render(self) -> str:
        lines = ["#!/bin/sh", "set -e", "", *self.commands]
        return "\n".join(lines) + "\n"

    def store(self, path: str | Path) -> Path:
        """Write the script and mark it executable. Does not run it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render())
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
