"""webscaffold configuration.

Centralised, typed configuration for a scaffolding run. All settings use
Pydantic v2 models so they can be validated at construction time and loaded
from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from webscaffold.models import DEFAULT_PORT, MAX_PORT, MIN_PORT, PermissionPolicy

DEFAULT_DESCRIPTION = "Web project created with webscaffold"

H5BP_BASE_URL = "https://raw.githubusercontent.com/h5bp/html5-boilerplate/main/dist"


class NetworkConfig(BaseModel):
    """Reachability probe settings."""

    probe_host: str = Field(default="google.com")
    probe_port: int = Field(default=443, ge=1, le=65535)
    timeout: float = Field(default=1.0, gt=0, le=10, description="Probe timeout in seconds")


class RemoteTemplateConfig(BaseModel):
    """Where the optional remote HTML/CSS/JS templates come from."""

    enabled: bool = Field(default=True)
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    urls: dict[str, str] = Field(
        default_factory=lambda: {
            "html": f"{H5BP_BASE_URL}/index.html",
            "css": f"{H5BP_BASE_URL}/css/style.css",
            "js": f"{H5BP_BASE_URL}/js/main.js",
        },
        description="Template kind -> URL",
    )


class Config(BaseModel):
    """Global webscaffold configuration.

    Instances are created once by the CLI entry point (from the environment
    or a JSON file) and then passed to every component that needs them.
    """

    output_dir: Path = Field(default=Path("."))
    log_dir: Path | None = Field(default=None, description="Defaults to the system temp dir")
    default_port: int = Field(default=DEFAULT_PORT, ge=MIN_PORT, le=MAX_PORT)
    default_description: str = Field(default=DEFAULT_DESCRIPTION)
    dependencies: list[str] = Field(default=["git", "node", "npm"])
    auto_install: bool = Field(default=False)
    editor: str | None = Field(default=None, description="Falls back to $VISUAL, $EDITOR, vi")
    init_git: bool = Field(default=True)
    open_menu: bool = Field(default=True)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    remote_templates: RemoteTemplateConfig = Field(default_factory=RemoteTemplateConfig)
    permissions: PermissionPolicy = Field(default_factory=PermissionPolicy)

    @property
    def log_path(self) -> Path:
        """Process-scoped log file path."""
        base = self.log_dir or Path(tempfile.gettempdir())
        return base / f"webscaffold_{os.getpid()}.log"

    def project_root(self, name: str) -> Path:
        """Directory a project called *name* is created in."""
        return self.output_dir / name

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load and validate a configuration from a JSON file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            WEBSCAFFOLD_OUTPUT_DIR, WEBSCAFFOLD_LOG_DIR, WEBSCAFFOLD_DEFAULT_PORT,
            WEBSCAFFOLD_AUTO_INSTALL, WEBSCAFFOLD_EDITOR, WEBSCAFFOLD_OFFLINE,
            WEBSCAFFOLD_NO_GIT, WEBSCAFFOLD_PROBE_HOST, WEBSCAFFOLD_PROBE_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("WEBSCAFFOLD_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["WEBSCAFFOLD_OUTPUT_DIR"])
        if os.environ.get("WEBSCAFFOLD_LOG_DIR"):
            kwargs["log_dir"] = Path(os.environ["WEBSCAFFOLD_LOG_DIR"])
        if os.environ.get("WEBSCAFFOLD_DEFAULT_PORT"):
            kwargs["default_port"] = int(os.environ["WEBSCAFFOLD_DEFAULT_PORT"])
        if os.environ.get("WEBSCAFFOLD_EDITOR"):
            kwargs["editor"] = os.environ["WEBSCAFFOLD_EDITOR"]
        kwargs["auto_install"] = _env_flag("WEBSCAFFOLD_AUTO_INSTALL")
        kwargs["init_git"] = not _env_flag("WEBSCAFFOLD_NO_GIT")

        network_kwargs: dict[str, Any] = {}
        if os.environ.get("WEBSCAFFOLD_PROBE_HOST"):
            network_kwargs["probe_host"] = os.environ["WEBSCAFFOLD_PROBE_HOST"]
        if os.environ.get("WEBSCAFFOLD_PROBE_TIMEOUT"):
            network_kwargs["timeout"] = float(os.environ["WEBSCAFFOLD_PROBE_TIMEOUT"])

        return cls(
            network=NetworkConfig(**network_kwargs),
            remote_templates=RemoteTemplateConfig(enabled=not _env_flag("WEBSCAFFOLD_OFFLINE")),
            **kwargs,
        )


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "y")
