"""Post-setup management console.

A synchronous, finite-state command loop over a finished project directory.
Every iteration renders the menu, reads one choice, runs the matching action
to completion and returns to ``IDLE``; only the exit choice (or end of input)
reaches ``EXITED``. The loop keeps no state besides the project itself, so it
can be driven by a scripted ``ask`` callable in tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.prompt import Prompt

from webscaffold.integrations.environment import HostEnvironment
from webscaffold.integrations.network import NetworkProbe
from webscaffold.models import ProjectEnvironment, ProjectSpec, TemplateKind, artifact_for
from webscaffold.scaffolder.permissions import PermissionSetter
from webscaffold.utils import console as default_console
from webscaffold.utils import print_summary_table

logger = logging.getLogger(__name__)

Ask = Callable[[str], str]


class Editor(Protocol):
    def open(self, path: str | Path, env: dict[str, str] | None = None) -> bool: ...


class MenuState(str, Enum):
    IDLE = "idle"
    EXITED = "exited"


MENU_OPTIONS: tuple[tuple[str, str], ...] = (
    ("1", "Edit HTML file"),
    ("2", "Edit CSS file"),
    ("3", "Edit JavaScript file"),
    ("4", "View project structure"),
    ("5", "View environment information"),
    ("6", "Set file permissions"),
    ("7", "Check network connectivity"),
    ("8", "View Vi editor instructions"),
    ("9", "Exit"),
)

EXIT_CHOICE = MENU_OPTIONS[-1][0]


# ---------------------------------------------------------------------------
# Directory listing
# ---------------------------------------------------------------------------


class TreeListing:
    """Sorted, depth-indented listing of a directory tree.

    Lines are produced lazily while iterating. Each ``iter()`` call starts a
    fresh walk, so the same listing can be rendered any number of times.
    Symlinked directories are listed but not descended into.
    """

    def __init__(self, root: str | Path, include_files: bool = False, show_hidden: bool = False) -> None:
        self.root = Path(root)
        self.include_files = include_files
        self.show_hidden = show_hidden

    def __iter__(self) -> Iterator[str]:
        yield f"{self.root.name}/"
        yield from self._walk(self.root, depth=1)

    def _walk(self, directory: Path, depth: int) -> Iterator[str]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            return
        indent = "  " * (depth - 1)
        for entry in entries:
            if not self.show_hidden and entry.name.startswith("."):
                continue
            if entry.is_dir(follow_symlinks=False):
                yield f"{indent}|-- {entry.name}/"
                yield from self._walk(Path(entry.path), depth + 1)
            elif self.include_files or entry.is_symlink() and entry.is_dir():
                yield f"{indent}|-- {entry.name}"

    def render(self) -> str:
        return "\n".join(self)


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


class ManagementConsole:
    """Menu-driven actions over a materialized project.

    Args:
        project_dir: Root of the materialized project.
        spec: Parameters the project was created from.
        editor: Launches the external editor.
        network: Connectivity probe.
        permission_setter: Re-applies the permission policy.
        environment: Host/user facts collaborator.
        ask: Reads one line of input for a prompt. Defaults to a Rich prompt.
        out: Console that receives all output.
        pause: Wait for Enter after each action.
    """

    def __init__(
        self,
        project_dir: str | Path,
        spec: ProjectSpec,
        *,
        editor: Editor,
        network: NetworkProbe,
        permission_setter: PermissionSetter,
        environment: HostEnvironment | None = None,
        ask: Ask | None = None,
        out: Console | None = None,
        pause: bool = True,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.spec = spec
        self.editor = editor
        self.network = network
        self.permission_setter = permission_setter
        self.environment = environment or HostEnvironment()
        self.out = out or default_console
        self.ask = ask or (lambda prompt: Prompt.ask(prompt, console=self.out, default="", show_default=False))
        self.pause = pause
        self.project_env = ProjectEnvironment.for_project(spec, self.project_dir)

        self._actions: dict[str, Callable[[], None]] = {
            "1": lambda: self.edit(TemplateKind.HTML),
            "2": lambda: self.edit(TemplateKind.CSS),
            "3": lambda: self.edit(TemplateKind.JS),
            "4": self.show_structure,
            "5": self.show_environment,
            "6": self.set_permissions,
            "7": self.check_connectivity,
            "8": self.show_editor_guide,
        }

    # -- Loop ----------------------------------------------------------------

    def run(self) -> MenuState:
        state = MenuState.IDLE
        while state is MenuState.IDLE:
            self.render()
            try:
                choice = self.ask(f"Enter your choice [1-{EXIT_CHOICE}]")
            except (EOFError, KeyboardInterrupt):
                logger.info("Input closed. Exiting project management.")
                return MenuState.EXITED
            state = self.dispatch(choice)
            if state is MenuState.IDLE and self.pause:
                try:
                    self.ask("Press Enter to continue...")
                except (EOFError, KeyboardInterrupt):
                    return MenuState.EXITED
        return state

    def render(self) -> None:
        rule = "=" * 40
        self.out.print()
        self.out.print(rule)
        self.out.print(f"    {escape(self.spec.name)} Project Management")
        self.out.print(rule)
        for key, label in MENU_OPTIONS:
            self.out.print(f"{key}. {label}")
        self.out.print(rule)

    def dispatch(self, choice: str) -> MenuState:
        choice = choice.strip()
        if choice == EXIT_CHOICE:
            logger.info("Exiting project management.")
            return MenuState.EXITED
        action = self._actions.get(choice)
        if action is None:
            self.out.print(
                f"[yellow]Invalid choice. Please select a number between 1 and {EXIT_CHOICE}.[/yellow]"
            )
            return MenuState.IDLE
        action()
        return MenuState.IDLE

    # -- Actions -------------------------------------------------------------

    def edit(self, kind: TemplateKind) -> None:
        path = artifact_for(kind).target(self.project_dir)
        self.editor.open(path, env=self.project_env.child_env())

    def show_structure(self) -> None:
        self.out.print("\n[bold]Project Structure:[/bold]")
        for line in TreeListing(self.project_dir):
            self.out.print(escape(line))

    def show_environment(self) -> None:
        logger.info("Environment Information:")
        project = {
            "Name": self.spec.name,
            "Description": self.spec.description,
            "Author": self.spec.author,
            "Port": str(self.spec.port),
            "Created": self.spec.created_at_display,
            "Directory": str(self.project_env.directory),
        }
        print_summary_table(project, title="Project", out=self.out)
        for title, facts in self.environment.collect().items():
            print_summary_table(facts, title=title, out=self.out)
        print_summary_table(self.project_env.as_env(), title="Project Variables", out=self.out)

    def set_permissions(self) -> None:
        try:
            report = self.permission_setter.apply(self.project_dir)
        except OSError as exc:
            logger.error("Could not set permissions: %s", exc)
            return
        self.out.print(f"Permissions applied to {len(report.applied)} entries.")

    def check_connectivity(self) -> bool:
        reachable = self.network.is_reachable()
        if reachable:
            self.out.print("[green]Network connectivity: OK[/green]")
        else:
            self.out.print("[red]Network connectivity: FAILED[/red]")
        return reachable

    def show_editor_guide(self) -> None:
        path = artifact_for(TemplateKind.EDITOR_GUIDE).target(self.project_dir)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Error: Cannot read %s: %s", path, exc)
            return
        self.out.print(Markdown(text))
