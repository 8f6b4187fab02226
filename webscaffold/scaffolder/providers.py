"""Template providers: where artifact content comes from.

``StaticProvider`` renders the bundled Jinja2 templates and always succeeds.
``RemoteProvider`` downloads replacement HTML/CSS/JS from the configured URLs
and returns ``None`` whenever that is not possible, so callers can fall back
to the static content.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from webscaffold.config import RemoteTemplateConfig
from webscaffold.models import ProjectSpec, TemplateKind, artifact_for

from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

# Present in every statically rendered index.html.
STATIC_TEMPLATE_MARKER = "webscaffold:static-template"


class TemplateProvider(Protocol):
    """Supplies the content of one artifact, or ``None`` when unavailable."""

    def fetch(self, kind: TemplateKind, spec: ProjectSpec) -> str | None: ...


class StaticProvider:
    """Renders the built-in templates with the project parameters as context."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def fetch(self, kind: TemplateKind, spec: ProjectSpec) -> str:
        artifact = artifact_for(kind)
        return self.renderer.render(artifact.template, spec.template_context())


class RemoteProvider:
    """Downloads templates over HTTP.

    Only kinds with a configured URL are served. Connection problems, HTTP
    error statuses and empty bodies are logged and reported as ``None``.
    """

    def __init__(
        self,
        config: RemoteTemplateConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or RemoteTemplateConfig()
        self._client = client

    def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(url)
        with httpx.Client(timeout=httpx.Timeout(self.config.timeout), follow_redirects=True) as client:
            return client.get(url)

    def fetch(self, kind: TemplateKind, spec: ProjectSpec) -> str | None:
        url = self.config.urls.get(kind.value)
        if not url:
            return None
        try:
            response = self._get(url)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Warning: Timed out fetching %s template from %s.", kind.value, url)
            return None
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Warning: Failed to fetch %s template (HTTP %d).",
                kind.value,
                exc.response.status_code,
            )
            return None
        except httpx.HTTPError as exc:
            logger.warning("Warning: Failed to fetch %s template: %s", kind.value, exc)
            return None

        if not response.text.strip():
            logger.warning("Warning: Remote %s template at %s was empty.", kind.value, url)
            return None
        return response.text
