"""Applies a ``PermissionPolicy`` to a materialized project tree."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from webscaffold.models import PathSelector, PermissionPolicy

logger = logging.getLogger(__name__)


@dataclass
class PermissionReport:
    """Outcome of one permission pass."""

    applied: dict[Path, int] = field(default_factory=dict)
    failures: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class PermissionSetter:
    """Walks a project tree once and sets each entry's mode.

    Symlinks are never followed. With ``skip_hidden`` set, dot-entries and
    everything beneath a dot-directory (``.git`` in particular) keep their
    modes. A failure on one entry is logged and recorded; the walk goes on.
    """

    def __init__(self, policy: PermissionPolicy | None = None) -> None:
        self.policy = policy or PermissionPolicy()

    def apply(self, root: str | Path) -> PermissionReport:
        root = Path(root)
        if not root.is_dir():
            raise FileNotFoundError(f"Project directory not found: {root}")

        logger.info("Setting file permissions...")
        report = PermissionReport()
        self._chmod(root, PathSelector.DIRECTORY, report)

        for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
            current = Path(dirpath)
            if self.policy.skip_hidden:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
                filenames = [f for f in filenames if not f.startswith(".")]
            dirnames.sort()

            for name in dirnames:
                path = current / name
                if path.is_symlink():
                    continue
                self._chmod(path, PathSelector.DIRECTORY, report)

            for name in sorted(filenames):
                path = current / name
                if path.is_symlink():
                    continue
                rel = PurePosixPath(path.relative_to(root).as_posix())
                self._chmod(path, self.policy.classify(rel, is_dir=False), report)

        if report.ok:
            logger.info("File permissions set successfully.")
        else:
            logger.warning("File permissions set with %d failure(s).", len(report.failures))
        return report

    def _chmod(self, path: Path, selector: PathSelector, report: PermissionReport) -> None:
        mode = self.policy.mode_for(selector)
        try:
            path.chmod(mode)
        except OSError as exc:
            report.failures[path] = str(exc)
            logger.warning("Could not set permissions on %s: %s", path, exc)
            return
        report.applied[path] = mode
