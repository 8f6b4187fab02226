"""Detection and installation of the external tools a project relies on."""

from __future__ import annotations

import logging
import shutil
from typing import Callable, Iterable

from webscaffold.utils import run_command

logger = logging.getLogger(__name__)

Which = Callable[[str], "str | None"]


class DependencyChecker:
    """Reports which named executables are absent from ``PATH``."""

    def __init__(self, which: Which | None = None) -> None:
        self.which = which or shutil.which

    def missing(self, names: Iterable[str]) -> list[str]:
        logger.info("Checking dependencies...")
        absent = [name for name in names if self.which(name) is None]
        if absent:
            logger.warning("Missing dependencies: %s", " ".join(absent))
        else:
            logger.info("All dependencies are installed.")
        return absent


# Package managers in order of preference, with the commands that install
# ``names`` through each of them.
_MANAGERS: tuple[tuple[str, Callable[[list[str]], list[list[str]]]], ...] = (
    ("apt", lambda names: [["sudo", "apt", "update"], ["sudo", "apt", "install", "-y", *names]]),
    ("dnf", lambda names: [["sudo", "dnf", "install", "-y", *names]]),
    ("yum", lambda names: [["sudo", "yum", "install", "-y", *names]]),
    ("brew", lambda names: [["brew", "install", *names]]),
)


class PackageInstaller:
    """Installs packages through the first system package manager found."""

    def __init__(self, which: Which | None = None, timeout: float = 900.0) -> None:
        self.which = which or shutil.which
        self.timeout = timeout

    def manager(self) -> str | None:
        for name, _commands in _MANAGERS:
            if self.which(name):
                return name
        return None

    def install(self, names: list[str]) -> bool:
        if not names:
            return True
        logger.info("Installing dependencies: %s", " ".join(names))
        manager = self.manager()
        if manager is None:
            logger.error("Error: Package manager not found. Please install dependencies manually.")
            return False

        commands = dict(_MANAGERS)[manager](list(names))
        for cmd in commands:
            # Inherit the terminal so sudo can prompt for a password.
            returncode, _stdout, stderr = run_command(cmd, timeout=self.timeout, capture=False)
            if returncode != 0:
                logger.error("Installation failed (exit %d): %s %s", returncode, " ".join(cmd), stderr)
                return False
        logger.info("Dependencies installed successfully.")
        return True
