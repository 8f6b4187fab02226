"""Turns raw prompt answers into a validated ``ProjectSpec``.

Resolution never fails: empty answers fall back to defaults and an invalid
port or a path-hostile project name is replaced by a safe value, with a
warning logged so the user can see what happened.
"""

from __future__ import annotations

import getpass
import logging
import re
from datetime import datetime
from typing import Callable

from webscaffold.config import Config
from webscaffold.models import MAX_PORT, MIN_PORT, ProjectSpec

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")
_PATH_HOSTILE_RE = re.compile(r"[/\\\x00]")
_RESERVED_NAMES = {".", ".."}


def current_user() -> str:
    """Login name of the invoking user, or ``"unknown"``."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def default_project_name(now: datetime) -> str:
    return f"WebProject_{now:%Y%m%d}"


class ConfigResolver:
    """Builds ``ProjectSpec`` instances from raw user input.

    Args:
        config: Supplies the default port and description.
        clock: Returns the creation timestamp. Defaults to ``datetime.now``.
        user_lookup: Returns the default author. Defaults to the login name.
    """

    def __init__(
        self,
        config: Config | None = None,
        clock: Callable[[], datetime] | None = None,
        user_lookup: Callable[[], str] | None = None,
    ) -> None:
        self.config = config or Config()
        self.clock = clock or datetime.now
        self.user_lookup = user_lookup or current_user

    def resolve(
        self,
        raw_name: str,
        raw_description: str,
        raw_author: str,
        raw_port: str,
    ) -> ProjectSpec:
        created_at = self.clock()
        return ProjectSpec(
            name=self.resolve_name(raw_name, created_at),
            description=raw_description or self.config.default_description,
            author=raw_author or self.user_lookup(),
            port=self.resolve_port(raw_port),
            created_at=created_at,
        )

    def resolve_name(self, raw_name: str, created_at: datetime) -> str:
        if not raw_name.strip():
            name = default_project_name(created_at)
            logger.info("Using default project name: %s", name)
            return name
        if raw_name.strip() in _RESERVED_NAMES:
            name = default_project_name(created_at)
            logger.warning("Project name %r is not a usable directory name. Using %s.", raw_name, name)
            return name
        if _PATH_HOSTILE_RE.search(raw_name):
            name = _PATH_HOSTILE_RE.sub("_", raw_name)
            logger.warning(
                "Project name %r contains path separators. Using %r instead.", raw_name, name
            )
            return name
        return raw_name

    def resolve_port(self, raw_port: str) -> int:
        default = self.config.default_port
        if not raw_port:
            return default
        if _DIGITS_RE.fullmatch(raw_port) and MIN_PORT <= int(raw_port) <= MAX_PORT:
            return int(raw_port)
        logger.warning("Invalid port number %r. Using default port %d.", raw_port, default)
        return default
