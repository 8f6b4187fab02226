"""Launching an external text editor on a project file."""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path

from webscaffold.utils import run_command

logger = logging.getLogger(__name__)

FALLBACK_EDITOR = "vi"

VI_HINT = "Press 'i' to enter insert mode, 'Esc' to exit insert mode, and ':wq' to save and quit."


def default_editor_command() -> str:
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or FALLBACK_EDITOR


def parse_editor_command(command: str) -> list[str]:
    """Split *command* into argv, falling back to ``vi`` when unusable."""
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        logger.warning("Cannot parse editor command %r (%s). Using %s.", command, exc, FALLBACK_EDITOR)
        return [FALLBACK_EDITOR]
    if not argv:
        return [FALLBACK_EDITOR]
    return argv


class SubprocessEditor:
    """Opens files in a terminal editor and blocks until it exits.

    No timeout applies: the editor owns the terminal until the user quits.
    """

    def __init__(self, command: str | None = None) -> None:
        self.command = command or default_editor_command()
        self.argv = parse_editor_command(self.command)

    @property
    def is_vi(self) -> bool:
        return Path(self.argv[0]).name in ("vi", "vim", "nvim", "view")

    def open(self, path: str | Path, env: dict[str, str] | None = None) -> bool:
        path = Path(path)
        if not path.is_file():
            logger.error("Error: File '%s' not found.", path)
            return False

        logger.info("Opening file '%s' in %s...", path, self.argv[0])
        if self.is_vi:
            logger.info(VI_HINT)
        cmd = [*self.argv, str(path)]
        returncode, _stdout, stderr = run_command(cmd, timeout=None, capture=False, env=env)
        if returncode != 0:
            logger.warning("Editor exited with status %d. %s", returncode, stderr)
            return False
        return True
