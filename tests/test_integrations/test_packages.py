"""Tests for dependency detection and package installation."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from webscaffold.integrations.packages import DependencyChecker, PackageInstaller

pytestmark = pytest.mark.unit


def _which(available: set[str]):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestDependencyChecker:
    def test_reports_missing_in_order(self):
        checker = DependencyChecker(which=_which({"git"}))
        assert checker.missing(["git", "node", "npm"]) == ["node", "npm"]

    def test_nothing_missing(self):
        assert DependencyChecker(which=_which({"git", "node"})).missing(["git", "node"]) == []


class TestPackageInstaller:
    @pytest.mark.parametrize(
        "available,expected",
        [
            ({"apt", "dnf"}, "apt"),
            ({"dnf", "yum"}, "dnf"),
            ({"yum"}, "yum"),
            ({"brew"}, "brew"),
            (set(), None),
        ],
    )
    def test_manager_preference(self, available, expected):
        assert PackageInstaller(which=_which(available)).manager() == expected

    def test_apt_updates_then_installs(self):
        installer = PackageInstaller(which=_which({"apt"}))
        with patch("webscaffold.integrations.packages.run_command", return_value=(0, "", "")) as mock_run:
            assert installer.install(["node", "npm"]) is True
        commands = [call.args[0] for call in mock_run.call_args_list]
        assert commands == [
            ["sudo", "apt", "update"],
            ["sudo", "apt", "install", "-y", "node", "npm"],
        ]
        assert all(call.kwargs["capture"] is False for call in mock_run.call_args_list)

    def test_brew_without_sudo(self):
        installer = PackageInstaller(which=_which({"brew"}))
        with patch("webscaffold.integrations.packages.run_command", return_value=(0, "", "")) as mock_run:
            installer.install(["git"])
        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == ["brew", "install", "git"]

    def test_no_manager(self):
        with patch("webscaffold.integrations.packages.run_command") as mock_run:
            assert PackageInstaller(which=_which(set())).install(["git"]) is False
        mock_run.assert_not_called()

    def test_failed_install(self):
        installer = PackageInstaller(which=_which({"dnf"}))
        with patch("webscaffold.integrations.packages.run_command", return_value=(1, "", "")):
            assert installer.install(["git"]) is False

    def test_empty_list_is_noop(self):
        with patch("webscaffold.integrations.packages.run_command") as mock_run:
            assert PackageInstaller(which=_which({"apt"})).install([]) is True
        mock_run.assert_not_called()
