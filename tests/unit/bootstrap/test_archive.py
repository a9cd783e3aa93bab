"""Tests for tarball extraction and install directory cleanup."""

from __future__ import annotations

import io
import sys
import tarfile
from pathlib import Path

import pytest

from borecli.bootstrap.archive import cleanup_install_dir, extract_archive
from borecli.core.errors import ExtractionFailed, FilesystemError

from conftest import build_tarball

_IS_WINDOWS = sys.platform == "win32"


def _write(path: Path, data: bytes) -> Path:
    path.write_bytes(data)
    return path


def _tarball_with_link(name: str, linkname: str, symlink: bool = True) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        info = tarfile.TarInfo(name=name)
        info.type = tarfile.SYMTYPE if symlink else tarfile.LNKTYPE
        info.linkname = linkname
        tar.addfile(info)
    return buffer.getvalue()


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extracts_members(self, tmp_path: Path, release_tarball) -> None:
        archive = _write(tmp_path / "bore.tar.gz", release_tarball())

        extract_archive(archive, tmp_path)

        assert (tmp_path / "bore").read_bytes() == b"bore-binary"
        assert (tmp_path / "bore-server").read_bytes() == b"bore-server-binary"
        assert (tmp_path / "LICENSE").exists()

    def test_extracts_nested_directory(self, tmp_path: Path) -> None:
        archive = _write(tmp_path / "a.tar.gz", build_tarball({"docs/README.md": b"hi"}))
        extract_archive(archive, tmp_path)
        assert (tmp_path / "docs" / "README.md").read_bytes() == b"hi"

    def test_not_a_gzip_file(self, tmp_path: Path) -> None:
        archive = _write(tmp_path / "bore.tar.gz", b"<html>rate limited</html>")
        with pytest.raises(ExtractionFailed) as exc_info:
            extract_archive(archive, tmp_path)
        assert exc_info.value.kind == "extraction_failed"
        assert "bore.tar.gz" in str(exc_info.value)

    def test_truncated_archive(self, tmp_path: Path, release_tarball) -> None:
        data = release_tarball()
        archive = _write(tmp_path / "bore.tar.gz", data[: len(data) // 2])
        with pytest.raises(ExtractionFailed):
            extract_archive(archive, tmp_path)

    def test_missing_archive(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionFailed):
            extract_archive(tmp_path / "nope.tar.gz", tmp_path)

    @pytest.mark.parametrize("name", ["../escape", "sub/../../escape", "/tmp/absolute"])
    def test_rejects_path_traversal(self, tmp_path: Path, name: str) -> None:
        install_dir = tmp_path / "bin"
        install_dir.mkdir()
        archive = _write(tmp_path / "evil.tar.gz", build_tarball({name: b"x"}))

        with pytest.raises(ExtractionFailed) as exc_info:
            extract_archive(archive, install_dir)

        assert "traversal" in str(exc_info.value)
        assert not (tmp_path / "escape").exists()

    def test_unsafe_member_blocks_whole_archive(self, tmp_path: Path) -> None:
        install_dir = tmp_path / "bin"
        install_dir.mkdir()
        archive = _write(
            tmp_path / "evil.tar.gz",
            build_tarball({"bore": b"ok", "../escape": b"x"}),
        )
        with pytest.raises(ExtractionFailed):
            extract_archive(archive, install_dir)
        assert not (install_dir / "bore").exists()

    def test_rejects_escaping_symlink(self, tmp_path: Path) -> None:
        install_dir = tmp_path / "bin"
        install_dir.mkdir()
        archive = _write(tmp_path / "link.tar.gz", _tarball_with_link("bore", "../../etc/passwd"))
        with pytest.raises(ExtractionFailed) as exc_info:
            extract_archive(archive, install_dir)
        assert "escapes" in str(exc_info.value)

    def test_rejects_escaping_hardlink(self, tmp_path: Path) -> None:
        install_dir = tmp_path / "bin"
        install_dir.mkdir()
        archive = _write(
            tmp_path / "link.tar.gz",
            _tarball_with_link("bore", "../outside", symlink=False),
        )
        with pytest.raises(ExtractionFailed):
            extract_archive(archive, install_dir)


class TestCleanupInstallDir:
    """Tests for cleanup_install_dir."""

    def _populate(self, install_dir: Path, names) -> Path:
        archive = _write(install_dir / "bore_1.0.0_linux_amd64.tar.gz", b"archive")
        for name in names:
            _write(install_dir / name, b"bin")
        return archive

    def test_removes_archive_and_companion(self, tmp_path: Path) -> None:
        archive = self._populate(tmp_path, ["bore", "bore-server", "LICENSE"])

        binary = cleanup_install_dir(tmp_path, "linux", archive)

        assert binary == tmp_path / "bore"
        assert not archive.exists()
        assert not (tmp_path / "bore-server").exists()
        assert (tmp_path / "LICENSE").exists()

    def test_companion_absence_is_tolerated(self, tmp_path: Path) -> None:
        archive = self._populate(tmp_path, ["bore"])
        assert cleanup_install_dir(tmp_path, "darwin", archive) == tmp_path / "bore"

    def test_windows_names(self, tmp_path: Path) -> None:
        archive = self._populate(tmp_path, ["bore.exe", "bore-server.exe"])

        binary = cleanup_install_dir(tmp_path, "windows", archive)

        assert binary.name == "bore.exe"
        assert not (tmp_path / "bore-server.exe").exists()

    def test_missing_client_binary(self, tmp_path: Path) -> None:
        archive = self._populate(tmp_path, ["bore-server"])
        with pytest.raises(FilesystemError) as exc_info:
            cleanup_install_dir(tmp_path, "linux", archive)
        assert "bore" in str(exc_info.value)
        assert not archive.exists()

    @pytest.mark.skipif(_IS_WINDOWS, reason="POSIX permission bits")
    def test_binary_made_executable(self, tmp_path: Path) -> None:
        archive = self._populate(tmp_path, ["bore"])
        (tmp_path / "bore").chmod(0o600)

        binary = cleanup_install_dir(tmp_path, "linux", archive)

        assert binary.stat().st_mode & 0o777 == 0o755
