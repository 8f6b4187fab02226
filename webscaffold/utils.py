"""Shared utility functions for webscaffold.

Provides blocking command execution, Rich-based progress reporting and
console helpers, plus the logging setup that echoes every log record to the
terminal and appends it to the run's log file.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.rule import Rule
from rich.table import Table

console = Console()

LOGGER_NAME = "webscaffold"
LOG_LINE_FORMAT = "[%(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command and wait for it to finish.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple. A missing executable yields
        return code 127 and a timeout yields -1, both with an explanatory
        stderr string.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")
    except subprocess.TimeoutExpired:
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (completed.stdout or "").strip()
    stderr_str = (completed.stderr or "").strip()
    return (completed.returncode, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: int = logging.INFO, out: Console | None = None) -> logging.Logger:
    """Install the terminal handler on the package logger.

    Safe to call more than once; an existing Rich handler is replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=out or console,
        show_path=False,
        log_time_format=f"[{LOG_DATE_FORMAT}]",
        markup=False,
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def attach_log_file(path: Path) -> Path:
    """Append every package log record to *path* as timestamped lines.

    The package logger is lowered to ``INFO`` if it would otherwise drop
    progress messages.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.isEnabledFor(logging.INFO):
        logger.setLevel(logging.INFO)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            return path
    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    return path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STEP_NAMES: dict[int, str] = {
    1: "COLLECT",
    2: "MATERIALIZE",
    3: "PERMISSIONS",
    4: "VERSION CONTROL",
    5: "MANAGE",
}

STEP_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_yellow",
    4: "bright_magenta",
    5: "bright_blue",
}


def print_step_header(step: int, name: str) -> None:
    """Print a full-width rule announcing a setup step."""
    color = STEP_COLORS.get(step, "white")
    console.print()
    console.print(
        Rule(
            f"[bold {color}] Step {step}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )
    console.print()


def print_summary_table(
    data: dict[str, str],
    title: str = "Summary",
    out: Console | None = None,
) -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
        out: Console to print to (defaults to the shared console).
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    target = out or console
    target.print(table)
    target.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def create_progress() -> Progress:
    """Create a Rich progress display for the setup steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
