"""Tests for the project materializer.

Covers:
- Directory plan and file artifacts are all created and non-empty
- Re-materializing the same spec is idempotent
- Remote templates override static HTML/CSS/JS only when reachable
- Remote failures keep the static content
- Write failures surface as MaterializationError
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from webscaffold.models import DIRECTORY_PLAN, FILE_ARTIFACTS, TemplateKind, artifact_for
from webscaffold.scaffolder import (
    STATIC_TEMPLATE_MARKER,
    MaterializationError,
    ProjectMaterializer,
    StaticProvider,
)

pytestmark = pytest.mark.unit


def _snapshot(root: Path) -> dict[str, bytes | None]:
    return {
        p.relative_to(root).as_posix(): (p.read_bytes() if p.is_file() else None)
        for p in sorted(root.rglob("*"))
    }


class TestMaterialize:
    def test_creates_directory_plan(self, materialized_project: Path):
        for name in DIRECTORY_PLAN:
            assert (materialized_project / name).is_dir()

    def test_creates_non_empty_artifacts(self, materialized_project: Path):
        for artifact in FILE_ARTIFACTS:
            target = artifact.target(materialized_project)
            assert target.is_file(), artifact.relative_path
            assert target.stat().st_size > 0, artifact.relative_path

    def test_created_tree_reports_everything(self, sample_spec, project_root):
        tree = ProjectMaterializer().materialize(sample_spec, project_root)
        assert tree.root == project_root
        assert len(tree.directories) == len(DIRECTORY_PLAN)
        assert len(tree.files) == len(FILE_ARTIFACTS)
        assert tree.remote_kinds == []

    def test_spec_values_in_files(self, materialized_project: Path):
        readme = (materialized_project / "README.md").read_text(encoding="utf-8")
        assert "# Demo" in readme
        assert "Ada Lovelace" in readme
        assert "2026-03-14 09:26:53" in readme
        server = artifact_for(TemplateKind.SERVER).target(materialized_project).read_text(encoding="utf-8")
        assert "8080" in server

    def test_idempotent(self, sample_spec, materialized_project: Path):
        before = _snapshot(materialized_project)
        ProjectMaterializer().materialize(sample_spec, materialized_project)
        assert _snapshot(materialized_project) == before

    def test_root_is_a_file(self, sample_spec, tmp_path: Path):
        root = tmp_path / "Demo"
        root.write_text("occupied", encoding="utf-8")
        with pytest.raises(MaterializationError) as exc_info:
            ProjectMaterializer().materialize(sample_spec, root)
        assert exc_info.value.path == root

    def test_write_failure(self, sample_spec, project_root):
        with patch.object(Path, "write_text", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(MaterializationError, match="Cannot write file"):
                ProjectMaterializer().materialize(sample_spec, project_root)

    def test_missing_static_content(self, sample_spec, project_root, make_template_provider):
        with pytest.raises(MaterializationError, match="No content available"):
            ProjectMaterializer(make_template_provider()).materialize(sample_spec, project_root)


class TestRemoteTemplates:
    def test_remote_overrides_when_reachable(self, sample_spec, project_root, fake_network, make_template_provider):
        remote = make_template_provider({TemplateKind.HTML: "<html>remote</html>", TemplateKind.CSS: "body{}"})
        tree = ProjectMaterializer(StaticProvider(), remote=remote, network=fake_network).materialize(
            sample_spec, project_root
        )
        html = artifact_for(TemplateKind.HTML).target(project_root).read_text(encoding="utf-8")
        js = artifact_for(TemplateKind.JS).target(project_root).read_text(encoding="utf-8")
        assert html == "<html>remote</html>"
        assert tree.remote_kinds == [TemplateKind.HTML, TemplateKind.CSS]
        assert "PROJECT_NAME" in js
        assert remote.requested == [TemplateKind.HTML, TemplateKind.CSS, TemplateKind.JS]

    def test_offline_keeps_static(self, sample_spec, project_root, offline_network, make_template_provider):
        remote = make_template_provider({TemplateKind.HTML: "<html>remote</html>"})
        tree = ProjectMaterializer(StaticProvider(), remote=remote, network=offline_network).materialize(
            sample_spec, project_root
        )
        html = artifact_for(TemplateKind.HTML).target(project_root).read_text(encoding="utf-8")
        assert STATIC_TEMPLATE_MARKER in html
        assert remote.requested == []
        assert offline_network.calls == 1
        assert tree.remote_kinds == []

    def test_fetch_error_keeps_static(self, sample_spec, project_root, fake_network, make_template_provider):
        remote = make_template_provider(error=RuntimeError("boom"))
        ProjectMaterializer(StaticProvider(), remote=remote, network=fake_network).materialize(
            sample_spec, project_root
        )
        html = artifact_for(TemplateKind.HTML).target(project_root).read_text(encoding="utf-8")
        assert STATIC_TEMPLATE_MARKER in html

    def test_unavailable_kinds_keep_static(self, sample_spec, project_root, fake_network, make_template_provider):
        remote = make_template_provider({})
        tree = ProjectMaterializer(StaticProvider(), remote=remote, network=fake_network).materialize(
            sample_spec, project_root
        )
        assert tree.remote_kinds == []
        assert STATIC_TEMPLATE_MARKER in artifact_for(TemplateKind.HTML).target(project_root).read_text(
            encoding="utf-8"
        )

    def test_remote_without_network_is_skipped(self, sample_spec, project_root, make_template_provider):
        remote = make_template_provider({TemplateKind.HTML: "remote"})
        ProjectMaterializer(StaticProvider(), remote=remote).materialize(sample_spec, project_root)
        assert remote.requested == []

    def test_failed_remote_write_keeps_static(self, sample_spec, project_root, fake_network, make_template_provider):
        remote_html = "<html>remote</html>"
        remote = make_template_provider({TemplateKind.HTML: remote_html})
        real_write_text = Path.write_text

        def disk_full(self, data, *args, **kwargs):
            if data != remote_html:
                return real_write_text(self, data, *args, **kwargs)
            with open(self, "w", encoding="utf-8") as fh:
                fh.write(data[:5])
            raise OSError(28, "No space left on device")

        with patch.object(Path, "write_text", disk_full):
            tree = ProjectMaterializer(StaticProvider(), remote=remote, network=fake_network).materialize(
                sample_spec, project_root
            )

        html_path = artifact_for(TemplateKind.HTML).target(project_root)
        html = html_path.read_text(encoding="utf-8")
        assert STATIC_TEMPLATE_MARKER in html
        assert tree.remote_kinds == []
        assert sorted(p.name for p in html_path.parent.iterdir()) == ["index.html"]
