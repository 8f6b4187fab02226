"""Shared pytest fixtures for the webscaffold test suite.

Provides reusable fixtures for:
- A fixed clock and a resolver built on it
- A sample ``ProjectSpec`` and a materialized project tree
- In-memory fakes for the editor, network probe, git, package installer
  and template providers
- Scripted input and a recording Rich console
"""

from __future__ import annotations

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from webscaffold.config import Config
from webscaffold.models import ProjectSpec, TemplateKind
from webscaffold.resolver import ConfigResolver
from webscaffold.scaffolder import ProjectMaterializer, StaticProvider
from webscaffold.utils import LOGGER_NAME


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo handler changes made by ``configure_logging``/``attach_log_file``."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    propagate = logger.propagate
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = propagate
    logger.setLevel(level)


# ---------------------------------------------------------------------------
# Specs and configuration
# ---------------------------------------------------------------------------

FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config writing projects and logs under ``tmp_path``, offline."""
    return Config(
        output_dir=tmp_path / "projects",
        log_dir=tmp_path / "logs",
        remote_templates={"enabled": False},
        open_menu=False,
    )


@pytest.fixture
def resolver(test_config: Config) -> ConfigResolver:
    return ConfigResolver(test_config, clock=lambda: FIXED_NOW, user_lookup=lambda: "tester")


@pytest.fixture
def sample_spec() -> ProjectSpec:
    return ProjectSpec(
        name="Demo",
        description="A demo project",
        author="Ada Lovelace",
        port=8080,
        created_at=FIXED_NOW,
    )


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    return tmp_path / "Demo"


@pytest.fixture
def materialized_project(sample_spec: ProjectSpec, project_root: Path) -> Path:
    """A project tree produced by the static materializer."""
    ProjectMaterializer(StaticProvider()).materialize(sample_spec, project_root)
    return project_root


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeEditor:
    def __init__(self) -> None:
        self.opened: list[tuple[Path, dict[str, str] | None]] = []

    def open(self, path, env=None) -> bool:
        self.opened.append((Path(path), env))
        return True


class FakeNetwork:
    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable
        self.calls = 0

    def is_reachable(self) -> bool:
        self.calls += 1
        return self.reachable


class FakeVCS:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.initialized: list[Path] = []

    def init(self, path, message: str = "Initial commit") -> bool:
        self.initialized.append(Path(path))
        return self.succeed


class FakeInstaller:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.installed: list[list[str]] = []

    def install(self, names: list[str]) -> bool:
        self.installed.append(list(names))
        return self.succeed


class FakeDependencyChecker:
    def __init__(self, missing: list[str] | None = None) -> None:
        self._missing = missing or []

    def missing(self, names) -> list[str]:
        return [n for n in names if n in self._missing]


class FakeTemplateProvider:
    """Serves fixed content per kind; kinds not in ``contents`` are unavailable."""

    def __init__(self, contents: dict[TemplateKind, str] | None = None, error: Exception | None = None) -> None:
        self.contents = contents or {}
        self.error = error
        self.requested: list[TemplateKind] = []

    def fetch(self, kind: TemplateKind, spec: ProjectSpec) -> str | None:
        self.requested.append(kind)
        if self.error is not None:
            raise self.error
        return self.contents.get(kind)


@pytest.fixture
def fake_editor() -> FakeEditor:
    return FakeEditor()


@pytest.fixture
def fake_network() -> FakeNetwork:
    return FakeNetwork(reachable=True)


@pytest.fixture
def offline_network() -> FakeNetwork:
    return FakeNetwork(reachable=False)


@pytest.fixture
def fake_vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture
def fake_installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def make_dependency_checker() -> Callable[..., FakeDependencyChecker]:
    return FakeDependencyChecker


@pytest.fixture
def make_template_provider() -> Callable[..., FakeTemplateProvider]:
    return FakeTemplateProvider


# ---------------------------------------------------------------------------
# Scripted I/O
# ---------------------------------------------------------------------------

class ScriptedInput:
    """Callable returning queued answers; raises ``EOFError`` when drained."""

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def scripted_input() -> Callable[[list[str]], ScriptedInput]:
    return ScriptedInput


@pytest.fixture
def recording_console() -> Console:
    """Rich console that records output instead of writing to the terminal."""
    return Console(file=io.StringIO(), record=True, width=120, color_system=None)
