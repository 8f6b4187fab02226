"""webscaffold scaffolder -- materializes web project layouts.

Quick usage::

    from webscaffold.resolver import ConfigResolver
    from webscaffold.scaffolder import ProjectMaterializer, PermissionSetter

    spec = ConfigResolver().resolve("demo", "", "", "8080")
    tree = ProjectMaterializer().materialize(spec, Path("/tmp/demo"))
    PermissionSetter().apply(tree.root)
"""

from webscaffold.scaffolder.generator import CreatedTree, MaterializationError, ProjectMaterializer
from webscaffold.scaffolder.permissions import PermissionReport, PermissionSetter
from webscaffold.scaffolder.providers import (
    STATIC_TEMPLATE_MARKER,
    RemoteProvider,
    StaticProvider,
    TemplateProvider,
)
from webscaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "CreatedTree",
    "MaterializationError",
    "PermissionReport",
    "PermissionSetter",
    "ProjectMaterializer",
    "RemoteProvider",
    "STATIC_TEMPLATE_MARKER",
    "StaticProvider",
    "TemplateProvider",
    "TemplateRenderer",
]
