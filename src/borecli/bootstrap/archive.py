"""Extraction of the release tarball and post-extraction cleanup."""

from __future__ import annotations

import tarfile
import zlib
from pathlib import Path, PurePosixPath

from borecli.bootstrap.platform import binary_name, companion_binary_name
from borecli.core.errors import ExtractionFailed, FilesystemError
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)


def _check_member(member: tarfile.TarInfo, root: Path) -> None:
    """Reject members that would land outside root."""
    name = PurePosixPath(member.name)
    if name.is_absolute() or ".." in name.parts:
        raise ValueError(f"Path traversal detected: {member.name}")

    member_path = (root / member.name).resolve()
    if not member_path.is_relative_to(root):
        raise ValueError(f"Path traversal detected: {member.name}")

    if member.issym() or member.islnk():
        if member.issym():
            target = (member_path.parent / member.linkname).resolve()
        else:
            target = (root / member.linkname).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"Link escapes install directory: {member.name} -> {member.linkname}")


def extract_archive(archive_path: Path, install_dir: Path) -> None:
    """Extract a gzip-compressed tarball into install_dir.

    Args:
        archive_path: The downloaded .tar.gz file.
        install_dir: Destination directory; must exist.

    Raises:
        ExtractionFailed: If the archive is unreadable or unsafe.
    """
    root = install_dir.resolve()
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()
            for member in members:
                _check_member(member, root)
            tar.extractall(path=install_dir, members=members, filter="data")
    except (tarfile.TarError, OSError, EOFError, zlib.error, ValueError) as e:
        raise ExtractionFailed(archive_path.name, str(e) or type(e).__name__) from e

    LOGGER.debug(f"Extracted {len(members)} member(s) from {archive_path.name}")


def cleanup_install_dir(install_dir: Path, os_name: str, archive_path: Path) -> Path:
    """Remove files the client-only install does not need and finalize the binary.

    The downloaded archive is removed, and so is the bore-server executable
    when the archive shipped one. The bore client is then made executable.

    Args:
        install_dir: Directory the archive was extracted into.
        os_name: Release OS name ('linux', 'darwin', 'windows').
        archive_path: The downloaded archive.

    Returns:
        Path of the installed bore client.

    Raises:
        FilesystemError: If the client binary is missing or a file cannot be
            removed or chmod-ed.
    """
    try:
        archive_path.unlink(missing_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot remove {archive_path}: {e.strerror or e}") from e

    companion = install_dir / companion_binary_name(os_name)
    try:
        companion.unlink()
    except FileNotFoundError:
        LOGGER.debug(f"{companion.name} not present in archive, nothing to remove")
    except OSError as e:
        raise FilesystemError(f"Cannot remove {companion}: {e.strerror or e}") from e

    binary = install_dir / binary_name(os_name)
    if not binary.is_file():
        raise FilesystemError(f"Archive did not contain {binary.name}; expected it at {binary}")

    try:
        binary.chmod(0o755)
    except OSError as e:
        raise FilesystemError(f"Cannot make {binary} executable: {e.strerror or e}") from e

    return binary
