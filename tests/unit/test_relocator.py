"""Unit tests for moving artifacts to the output root."""

import os
from pathlib import Path

import pytest

from pause.contexts.rendering.relocator import relocate_artifact
from pause.exceptions import RelocationError


@pytest.fixture
def artifact(tmp_path):
    build_dir = tmp_path / "work" / "build-1"
    build_dir.mkdir(parents=True)
    path = build_dir / "resume.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return path


@pytest.mark.unit
class TestRelocateArtifact:
    def test_atomic_move(self, artifact, tmp_path):
        destination = tmp_path / "out" / "resume.pdf"

        result = relocate_artifact(artifact, destination)

        assert result == destination
        assert destination.read_bytes() == b"%PDF-1.4 fake"
        assert not artifact.exists()

    def test_overwrites_existing(self, artifact, tmp_path):
        destination = tmp_path / "out" / "resume.pdf"
        destination.parent.mkdir()
        destination.write_bytes(b"old")

        relocate_artifact(artifact, destination)

        assert destination.read_bytes() == b"%PDF-1.4 fake"

    def test_copy_fallback_leaves_one_copy(self, artifact, tmp_path, monkeypatch):
        """Cross-device moves fall back to copy + delete."""

        def cross_device(src, dst):
            raise OSError(18, "Invalid cross-device link")

        monkeypatch.setattr(os, "replace", cross_device)
        destination = tmp_path / "out" / "resume.pdf"

        relocate_artifact(artifact, destination)

        assert destination.read_bytes() == b"%PDF-1.4 fake"
        assert not artifact.exists()

    def test_undeletable_source_after_copy(self, artifact, tmp_path, monkeypatch):
        def cross_device(src, dst):
            raise OSError(18, "Invalid cross-device link")

        real_unlink = Path.unlink

        def unlink(self, *args, **kwargs):
            if self == artifact:
                raise PermissionError(13, "Permission denied", str(self))
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(os, "replace", cross_device)
        monkeypatch.setattr(Path, "unlink", unlink)
        destination = tmp_path / "out" / "resume.pdf"

        result = relocate_artifact(artifact, destination)

        assert result == destination
        assert destination.read_bytes() == b"%PDF-1.4 fake"
        assert artifact.exists()

    def test_missing_source(self, tmp_path):
        with pytest.raises(RelocationError) as exc_info:
            relocate_artifact(tmp_path / "missing.pdf", tmp_path / "out" / "missing.pdf")
        assert exc_info.value.kind == "RelocationFailure"

    def test_unusable_destination(self, artifact, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("a file, not a directory")

        with pytest.raises(RelocationError):
            relocate_artifact(artifact, blocker / "resume.pdf")

        assert artifact.exists()
