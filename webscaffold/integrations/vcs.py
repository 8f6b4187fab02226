"""Git repository initialization for a freshly scaffolded project."""

from __future__ import annotations

import logging
from pathlib import Path

from webscaffold.utils import run_command

logger = logging.getLogger(__name__)


class GitRepository:
    """Runs ``git init``, ``git add .`` and an initial commit.

    Failures are logged and reported through the return value; a project
    without version control is still usable.
    """

    def __init__(self, executable: str = "git", timeout: float = 60.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def init(self, path: str | Path, message: str = "Initial commit") -> bool:
        repo = Path(path)
        logger.info("Initializing Git repository...")
        steps = (
            ["init"],
            ["add", "."],
            ["commit", "-m", message],
        )
        for args in steps:
            cmd = [self.executable, *args]
            returncode, _stdout, stderr = run_command(cmd, cwd=repo, timeout=self.timeout)
            if returncode != 0:
                logger.warning(
                    "Git command failed (exit %d): %s %s",
                    returncode,
                    " ".join(cmd),
                    stderr,
                )
                return False
        logger.info("Git repository initialized successfully.")
        return True
