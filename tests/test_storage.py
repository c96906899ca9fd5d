"""Tests for output directory allocation and file writing."""

from pathlib import Path

import pytest

from goesctl.errors import DirectoryError
from goesctl.storage import allocate_output_dir, output_dir_name, write_file


class TestAllocateOutputDir:
    def test_name(self, window):
        assert output_dir_name(window) == "images_20241130T080000_to_20241130T082000_stride_10m"

    def test_creates_directory(self, root_dir, window):
        target = allocate_output_dir(root_dir, window)
        assert target == root_dir / "images_20241130T080000_to_20241130T082000_stride_10m"
        assert target.is_dir()

    def test_root_missing(self, tmp_path, window):
        with pytest.raises(DirectoryError) as exc_info:
            allocate_output_dir(tmp_path / "missing", window)
        assert exc_info.value.reason == "root missing"

    def test_root_is_a_file(self, tmp_path, window):
        root = tmp_path / "file"
        root.write_text("not a directory")
        with pytest.raises(DirectoryError) as exc_info:
            allocate_output_dir(root, window)
        assert exc_info.value.reason == "root missing"

    def test_already_exists(self, root_dir, window):
        allocate_output_dir(root_dir, window)
        with pytest.raises(DirectoryError) as exc_info:
            allocate_output_dir(root_dir, window)
        assert exc_info.value.reason == "already exists"

    def test_create_failed(self, root_dir, window, monkeypatch):
        def refuse(self, *args, **kwargs):
            raise PermissionError("permission denied")

        monkeypatch.setattr(Path, "mkdir", refuse)
        with pytest.raises(DirectoryError) as exc_info:
            allocate_output_dir(root_dir, window)
        assert exc_info.value.reason == "create failed: permission denied"


class TestWriteFile:
    def test_write(self, tmp_path):
        path = tmp_path / "20241130T080000.jpg"
        write_file(path, b"image")
        assert path.read_bytes() == b"image"
        assert list(tmp_path.iterdir()) == [path]

    def test_overwrite(self, tmp_path):
        path = tmp_path / "image.jpg"
        path.write_bytes(b"old")
        write_file(path, b"new")
        assert path.read_bytes() == b"new"

    def test_missing_directory(self, tmp_path):
        with pytest.raises(OSError):
            write_file(tmp_path / "missing" / "image.jpg", b"image")
        assert not (tmp_path / "missing").exists()
