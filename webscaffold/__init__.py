"""webscaffold -- interactive web project scaffolding."""

__version__ = "1.0.0"
