"""Core data model for project scaffolding.

Defines the immutable ``ProjectSpec`` produced by the resolver, the fixed
directory and file catalogs that the materializer writes, the declarative
``PermissionPolicy`` and the ``ProjectEnvironment`` handed to child
processes.
"""

from __future__ import annotations

import os
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PORT = 3000
MIN_PORT = 1024
MAX_PORT = 65535

CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


# ---------------------------------------------------------------------------
# ProjectSpec
# ---------------------------------------------------------------------------


class ProjectSpec(BaseModel):
    """Validated, immutable record of the user's project parameters."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Project (and root directory) name")
    description: str = Field(..., description="Free-text project description")
    author: str = Field(..., description="Author embedded in generated files")
    port: int = Field(default=DEFAULT_PORT, ge=MIN_PORT, le=MAX_PORT)
    created_at: datetime = Field(..., description="Captured once at resolution time")

    @property
    def created_at_display(self) -> str:
        """``created_at`` formatted the way generated files show it."""
        return self.created_at.strftime(CREATED_AT_FORMAT)

    def template_context(self) -> dict[str, object]:
        """Return the Jinja2 context used to render every artifact."""
        return {
            "project_name": self.name,
            "description": self.description,
            "author": self.author,
            "port": self.port,
            "created_at": self.created_at_display,
            "year": self.created_at.year,
            "directories": sorted(DIRECTORY_PLAN),
        }


# ---------------------------------------------------------------------------
# Directory and file catalogs
# ---------------------------------------------------------------------------

DIRECTORY_PLAN: tuple[str, ...] = (
    "Html",
    "CSS",
    "JavaScript",
    "Assets",
    "Data",
    "Docs",
    "Tests",
    "Server",
    "Config",
    "Build",
)


class TemplateKind(str, Enum):
    """Every file the scaffolder knows how to produce."""

    HTML = "html"
    CSS = "css"
    JS = "js"
    TEST = "test"
    SERVER = "server"
    CONFIG = "config"
    PACKAGE = "package"
    README = "readme"
    EDITOR_GUIDE = "editor_guide"
    GITIGNORE = "gitignore"


class FileArtifact(BaseModel):
    """A generated file: where it goes and which template produces it."""

    model_config = ConfigDict(frozen=True)

    kind: TemplateKind
    relative_path: str
    template: str

    def target(self, root: Path) -> Path:
        return root.joinpath(*PurePosixPath(self.relative_path).parts)


FILE_ARTIFACTS: tuple[FileArtifact, ...] = (
    FileArtifact(kind=TemplateKind.HTML, relative_path="Html/index.html", template="index.html.j2"),
    FileArtifact(kind=TemplateKind.CSS, relative_path="CSS/styles.css", template="styles.css.j2"),
    FileArtifact(kind=TemplateKind.JS, relative_path="JavaScript/script.js", template="script.js.j2"),
    FileArtifact(kind=TemplateKind.TEST, relative_path="Tests/test.js", template="test.js.j2"),
    FileArtifact(kind=TemplateKind.SERVER, relative_path="Server/index.js", template="server.js.j2"),
    FileArtifact(
        kind=TemplateKind.CONFIG,
        relative_path="Config/project.config",
        template="project.config.j2",
    ),
    FileArtifact(kind=TemplateKind.PACKAGE, relative_path="package.json", template="package.json.j2"),
    FileArtifact(kind=TemplateKind.README, relative_path="README.md", template="README.md.j2"),
    FileArtifact(
        kind=TemplateKind.EDITOR_GUIDE,
        relative_path="Docs/vi_instructions.md",
        template="vi_instructions.md.j2",
    ),
    FileArtifact(kind=TemplateKind.GITIGNORE, relative_path=".gitignore", template="gitignore.j2"),
)

# Artifacts that a remote template source may replace.
REMOTE_KINDS: tuple[TemplateKind, ...] = (TemplateKind.HTML, TemplateKind.CSS, TemplateKind.JS)


def artifact_for(kind: TemplateKind) -> FileArtifact:
    """Look up the catalog entry for *kind*."""
    for artifact in FILE_ARTIFACTS:
        if artifact.kind is kind:
            return artifact
    raise KeyError(kind)


# ---------------------------------------------------------------------------
# Permission policy
# ---------------------------------------------------------------------------


class PathSelector(str, Enum):
    """Disjoint classes of filesystem entries that carry a permission mode."""

    DIRECTORY = "directory"
    EXECUTABLE = "executable"
    CONFIG = "config"
    FILE = "file"


class PermissionPolicy(BaseModel):
    """Declarative mapping from entry class to permission mode.

    Classification is ordered from most to least specific, so every entry
    falls into exactly one selector: directories first, then files with an
    executable suffix, then files under the config subtree, then everything
    else.
    """

    model_config = ConfigDict(frozen=True)

    directory_mode: int = Field(default=0o755, ge=0, le=0o7777)
    file_mode: int = Field(default=0o644, ge=0, le=0o7777)
    executable_mode: int = Field(default=0o755, ge=0, le=0o7777)
    config_mode: int = Field(default=0o640, ge=0, le=0o7777)
    executable_suffixes: tuple[str, ...] = (".sh",)
    config_dir: str = "Config"
    skip_hidden: bool = True

    def classify(self, relative_path: str | PurePosixPath, is_dir: bool) -> PathSelector:
        if is_dir:
            return PathSelector.DIRECTORY
        rel = PurePosixPath(relative_path)
        if rel.suffix in self.executable_suffixes:
            return PathSelector.EXECUTABLE
        if rel.parts and rel.parts[0] == self.config_dir and len(rel.parts) > 1:
            return PathSelector.CONFIG
        return PathSelector.FILE

    def mode_for(self, selector: PathSelector) -> int:
        return {
            PathSelector.DIRECTORY: self.directory_mode,
            PathSelector.EXECUTABLE: self.executable_mode,
            PathSelector.CONFIG: self.config_mode,
            PathSelector.FILE: self.file_mode,
        }[selector]


# ---------------------------------------------------------------------------
# Project environment
# ---------------------------------------------------------------------------


class ProjectEnvironment(BaseModel):
    """Variables exposed to child processes spawned for a project."""

    model_config = ConfigDict(frozen=True)

    name: str
    directory: Path
    port: int

    @classmethod
    def for_project(cls, spec: ProjectSpec, directory: Path) -> "ProjectEnvironment":
        return cls(name=spec.name, directory=Path(directory).resolve(), port=spec.port)

    def as_env(self) -> dict[str, str]:
        return {
            "PROJECT_NAME": self.name,
            "PROJECT_DIR": str(self.directory),
            "PROJECT_PORT": str(self.port),
        }

    def child_env(self) -> dict[str, str]:
        """``os.environ`` with the project variables layered on top."""
        return {**os.environ, **self.as_env()}
