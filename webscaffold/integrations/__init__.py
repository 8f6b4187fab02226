"""Narrow wrappers around the external tools webscaffold drives."""

from webscaffold.integrations.editor import SubprocessEditor
from webscaffold.integrations.environment import HostEnvironment
from webscaffold.integrations.network import NetworkProbe
from webscaffold.integrations.packages import DependencyChecker, PackageInstaller
from webscaffold.integrations.vcs import GitRepository

__all__ = [
    "DependencyChecker",
    "GitRepository",
    "HostEnvironment",
    "NetworkProbe",
    "PackageInstaller",
    "SubprocessEditor",
]
