"""webscaffold setup pipeline.

Drives one interactive scaffolding run:

Step 1: COLLECT          -- Prompt for project details, resolve and confirm them.
Step 2: MATERIALIZE      -- Check tools, create directories and files, fetch remote templates.
Step 3: PERMISSIONS      -- Apply the permission policy to the new tree.
Step 4: VERSION CONTROL  -- Initialize a git repository with an initial commit.
Step 5: MANAGE           -- Optional management menu over the finished project.

Usage::

    webscaffold
    webscaffold --output ~/projects --offline
    python -m webscaffold --config webscaffold.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from webscaffold.config import Config
from webscaffold.integrations import (
    DependencyChecker,
    GitRepository,
    HostEnvironment,
    NetworkProbe,
    PackageInstaller,
    SubprocessEditor,
)
from webscaffold.manager import ManagementConsole, TreeListing
from webscaffold.models import ProjectEnvironment, ProjectSpec
from webscaffold.resolver import ConfigResolver
from webscaffold.scaffolder import (
    MaterializationError,
    PermissionSetter,
    ProjectMaterializer,
    RemoteProvider,
    StaticProvider,
)
from webscaffold.utils import (
    STEP_NAMES,
    attach_log_file,
    configure_logging,
    console,
    create_progress,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)

logger = logging.getLogger(__name__)

Ask = Callable[[str], str]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _rich_ask(prompt: str) -> str:
    return Prompt.ask(prompt, console=console, default="", show_default=False)


def is_affirmative(answer: str) -> bool:
    """Only ``y`` or ``Y`` counts as yes."""
    return answer.strip() in ("y", "Y")


# ---------------------------------------------------------------------------
# Setup pipeline
# ---------------------------------------------------------------------------


class SetupPipeline:
    """Interactive scaffolding run with injectable collaborators.

    Attributes:
        config: Run configuration.
        ask: Reads one answer per prompt.
        spec: The resolved spec, once step 1 completes.
        project_dir: Absolute project root, once step 2 completes.
    """

    def __init__(
        self,
        config: Config,
        *,
        ask: Ask | None = None,
        resolver: ConfigResolver | None = None,
        materializer: ProjectMaterializer | None = None,
        permission_setter: PermissionSetter | None = None,
        vcs: GitRepository | None = None,
        dependency_checker: DependencyChecker | None = None,
        installer: PackageInstaller | None = None,
        network: NetworkProbe | None = None,
        editor: SubprocessEditor | None = None,
        environment: HostEnvironment | None = None,
    ) -> None:
        self.config = config
        self.ask = ask or _rich_ask
        self.resolver = resolver or ConfigResolver(config)
        self.network = network or NetworkProbe(config.network)
        remote = RemoteProvider(config.remote_templates) if config.remote_templates.enabled else None
        self.materializer = materializer or ProjectMaterializer(
            StaticProvider(), remote=remote, network=self.network if remote else None
        )
        self.permission_setter = permission_setter or PermissionSetter(config.permissions)
        self.vcs = vcs or GitRepository()
        self.dependency_checker = dependency_checker or DependencyChecker()
        self.installer = installer or PackageInstaller()
        self.editor = editor or SubprocessEditor(config.editor)
        self.environment = environment or HostEnvironment()
        self.spec: ProjectSpec | None = None
        self.project_dir: Path | None = None

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Execute the run and return the process exit code."""
        console.print(
            Panel(
                "[bold bright_cyan]Web Project Setup[/bold bright_cyan]\n"
                f"Output : {escape(str(self.config.output_dir.resolve()))}",
                title="[bold]webscaffold[/bold]",
                border_style="bright_cyan",
            )
        )

        print_step_header(1, STEP_NAMES[1])
        spec = self.collect()
        if not self.confirm(spec):
            console.print("Project setup cancelled.")
            return EXIT_OK
        self.spec = spec

        try:
            attach_log_file(self.config.log_path)
        except OSError as exc:
            print_warning(f"Cannot write log file {self.config.log_path}: {exc}")
        logger.info("Starting project setup for %s", spec.name)

        print_step_header(2, STEP_NAMES[2])
        self.check_dependencies()
        root = self.config.project_root(spec.name)
        try:
            with create_progress() as progress:
                task = progress.add_task("Initializing project...", total=None)
                tree = self.materializer.materialize(spec, root)
                progress.update(task, completed=1)
        except MaterializationError as exc:
            logger.error("Project setup failed: %s", exc)
            print_error(f"Project setup failed: {exc}")
            return EXIT_FAILURE
        self.project_dir = tree.root.resolve()

        print_step_header(3, STEP_NAMES[3])
        self.permission_setter.apply(self.project_dir)

        print_step_header(4, STEP_NAMES[4])
        if self.config.init_git:
            if not self.vcs.init(self.project_dir):
                print_warning("Git repository was not initialized. The project is usable without it.")
        else:
            logger.info("Skipping Git initialization.")

        console.print("\n[bold]Project Structure:[/bold]")
        console.print(TreeListing(self.project_dir).render(), markup=False)

        project_env = ProjectEnvironment.for_project(spec, self.project_dir)
        logger.info("Project '%s' created successfully!", spec.name)
        print_success(f"Your project has been created at: {project_env.directory}")
        console.print(f"Log file: {self.config.log_path}", markup=False)

        if self.config.open_menu:
            console.print("A management menu is available for common tasks.")
            if is_affirmative(self.ask("Would you like to open the project management menu? (y/n)")):
                print_step_header(5, STEP_NAMES[5])
                self.management_console().run()

        console.print("\nThank you for using webscaffold!")
        return EXIT_OK

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def collect(self) -> ProjectSpec:
        """Prompt for the four project fields and resolve them."""
        console.print("Please enter project details:")
        raw_name = self.ask("Enter Project Name").strip()
        raw_description = self.ask("Enter Project Description (or press Enter for default)").strip()
        raw_author = self.ask("Enter Author Name (or press Enter for current user)").strip()
        raw_port = self.ask(
            f"Enter Server Port (or press Enter for default port {self.config.default_port})"
        ).strip()
        return self.resolver.resolve(raw_name, raw_description, raw_author, raw_port)

    def confirm(self, spec: ProjectSpec) -> bool:
        print_summary_table(
            {
                "Name": spec.name,
                "Description": spec.description,
                "Author": spec.author,
                "Port": str(spec.port),
            },
            title="Project Details",
        )
        return is_affirmative(self.ask("Continue with these settings? (y/n)"))

    def check_dependencies(self) -> list[str]:
        """Report missing tools and install them when allowed.

        Returns the tools that are still missing afterwards.
        """
        missing = self.dependency_checker.missing(self.config.dependencies)
        if not missing:
            return []

        if self.config.auto_install:
            install = True
        else:
            install = is_affirmative(self.ask("Do you want to install missing dependencies? (y/n)"))

        if install and self.installer.install(missing):
            return []
        logger.warning("Warning: Some dependencies are missing. Functionality may be limited.")
        return missing

    def management_console(self) -> ManagementConsole:
        if self.spec is None or self.project_dir is None:
            raise RuntimeError("The project has not been created yet.")
        return ManagementConsole(
            self.project_dir,
            self.spec,
            editor=self.editor,
            network=self.network,
            permission_setter=self.permission_setter,
            environment=self.environment,
            ask=self.ask,
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webscaffold",
        description="webscaffold -- interactive web project setup tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  webscaffold\n"
            "  webscaffold -o ~/projects --offline\n"
            "  webscaffold --config webscaffold.json --auto-install\n"
        ),
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory the project folder is created in (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (default: settings from WEBSCAFFOLD_* variables)",
    )
    parser.add_argument(
        "--auto-install",
        action="store_true",
        help="Install missing tools without asking",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not fetch remote templates",
    )
    parser.add_argument(
        "--no-git",
        action="store_true",
        help="Skip git repository initialization",
    )
    parser.add_argument(
        "--no-menu",
        action="store_true",
        help="Do not offer the management menu after setup",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    updates: dict[str, object] = {}
    if args.output:
        updates["output_dir"] = Path(args.output)
    if args.auto_install:
        updates["auto_install"] = True
    if args.no_git:
        updates["init_git"] = False
    if args.no_menu:
        updates["open_menu"] = False
    if args.offline:
        updates["remote_templates"] = config.remote_templates.model_copy(update={"enabled": False})
    return config.model_copy(update=updates)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``webscaffold`` and ``python -m webscaffold``."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {escape(str(exc))}")
        sys.exit(EXIT_FAILURE)

    configure_logging()
    try:
        code = SetupPipeline(config).run()
    except EOFError:
        console.print("\nProject setup cancelled.")
        code = EXIT_OK
    except KeyboardInterrupt:
        console.print("\nProject setup interrupted.")
        code = EXIT_INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    main()
