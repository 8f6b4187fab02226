"""Main scaffolding orchestrator.

Takes a ``ProjectSpec`` and materializes the fixed project layout: the
directory plan, every file artifact rendered from the static templates and,
when the network allows, remote HTML/CSS/JS overriding the static ones.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from webscaffold.models import (
    DIRECTORY_PLAN,
    FILE_ARTIFACTS,
    REMOTE_KINDS,
    ProjectSpec,
    TemplateKind,
    artifact_for,
)

from .providers import StaticProvider, TemplateProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions and results
# ---------------------------------------------------------------------------


class MaterializationError(Exception):
    """Raised when a directory or file of the project cannot be written."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


@dataclass
class CreatedTree:
    """What a materialization pass produced."""

    root: Path
    directories: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    remote_kinds: list[TemplateKind] = field(default_factory=list)


class ReachabilityCheck(Protocol):
    def is_reachable(self) -> bool: ...


# ---------------------------------------------------------------------------
# Materializer
# ---------------------------------------------------------------------------


class ProjectMaterializer:
    """Creates the directory plan and writes every file artifact.

    Args:
        templates: Provider for the step-2 content of every artifact.
        remote: Optional provider consulted for HTML/CSS/JS after the static
            files are written.
        network: Reachability probe gating the remote step. The remote step
            is skipped when either ``remote`` or ``network`` is missing.
    """

    def __init__(
        self,
        templates: TemplateProvider | None = None,
        remote: TemplateProvider | None = None,
        network: ReachabilityCheck | None = None,
    ) -> None:
        self.templates = templates or StaticProvider()
        self.remote = remote
        self.network = network

    # -- Public API --------------------------------------------------------

    def materialize(self, spec: ProjectSpec, root: str | Path) -> CreatedTree:
        """Build the project for *spec* under *root*.

        Raises:
            MaterializationError: A directory or static file could not be
                written. Already created paths are left in place.
        """
        tree = CreatedTree(root=Path(root))

        # 1. Directory plan
        self._create_directories(tree)

        # 2. Static artifacts
        self._write_artifacts(spec, tree)

        # 3. Best-effort remote overrides
        if self.remote is not None and self.network is not None:
            self._apply_remote_templates(spec, tree)

        return tree

    # -- Steps -------------------------------------------------------------

    def _create_directories(self, tree: CreatedTree) -> None:
        logger.info("Creating project directory structure...")
        _mkdir(tree.root)
        for name in DIRECTORY_PLAN:
            path = tree.root / name
            _mkdir(path)
            tree.directories.append(path)
            logger.info("Created directory: %s", name)

    def _write_artifacts(self, spec: ProjectSpec, tree: CreatedTree) -> None:
        logger.info("Creating project files...")
        for artifact in FILE_ARTIFACTS:
            target = artifact.target(tree.root)
            content = self.templates.fetch(artifact.kind, spec)
            if content is None:
                raise MaterializationError(target, f"No content available for {artifact.kind.value}")
            _write(target, content)
            tree.files.append(target)
            logger.info("Created file: %s", artifact.relative_path)

    def _apply_remote_templates(self, spec: ProjectSpec, tree: CreatedTree) -> None:
        logger.info("Fetching templates from online sources...")
        try:
            reachable = self.network.is_reachable()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Warning: Network check failed (%s). Using local templates only.", exc)
            return
        if not reachable:
            logger.warning("Warning: Network unavailable. Using local templates only.")
            return

        for kind in REMOTE_KINDS:
            target = artifact_for(kind).target(tree.root)
            try:
                content = self.remote.fetch(kind, spec)
                if content is None:
                    continue
                _replace(target, content)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Warning: Keeping local %s template: %s", kind.value, exc)
                continue
            tree.remote_kinds.append(kind)
            logger.info("Fetched remote %s template.", kind.value)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MaterializationError(path, f"Cannot create directory ({exc.strerror or exc})") from exc


def _replace(path: Path, content: str) -> None:
    """Swap *content* in for *path* so a failed write leaves the old file intact."""
    partial = path.with_name(f".{path.name}.partial")
    try:
        partial.write_text(content, encoding="utf-8")
        os.replace(partial, path)
    except OSError:
        partial.unlink(missing_ok=True)
        raise


def _write(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise MaterializationError(path, f"Cannot write file ({exc.strerror or exc})") from exc
