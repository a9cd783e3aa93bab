"""Install the bore client: resolve, download, extract, clean up.

Each step starts only after the previous one finished: the archive is fully
written and closed before extraction, and permissions are set only after
extraction. A failed install leaves no archive and no executable behind.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from borecli.bootstrap.archive import cleanup_install_dir, extract_archive
from borecli.bootstrap.download import Opener, fetch_artifact
from borecli.bootstrap.paths import BorePaths
from borecli.bootstrap.platform import (
    ArtifactReference,
    PlatformInfo,
    PlatformTriple,
    build_artifact_reference,
    get_platform_info,
    resolve_platform,
)
from borecli.bootstrap.validation import ToolStatus, validate_binary
from borecli.config.models import BoreCliConfig
from borecli.core.errors import BoreCliError, FilesystemError
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class InstalledBinary:
    """The bore client as installed on disk."""

    path: Path
    version: str
    downloaded: bool = True


class Installer:
    """Downloads and unpacks the bore release for this host."""

    def __init__(
        self,
        config: Optional[BoreCliConfig] = None,
        paths: Optional[BorePaths] = None,
        platform_info: Optional[PlatformInfo] = None,
        opener: Optional[Opener] = None,
    ) -> None:
        """Initialize Installer.

        Args:
            config: Effective configuration; defaults are used when omitted.
            paths: Install locations; derived from config when omitted.
            platform_info: Host identifiers; detected when omitted.
            opener: HTTP opener override, passed to fetch_artifact.
        """
        self._config = config or BoreCliConfig()
        self._paths = paths or BorePaths.resolve(self._config.install_dir)
        self._platform_info = platform_info or get_platform_info()
        self._opener = opener

    @property
    def paths(self) -> BorePaths:
        return self._paths

    def resolve(self) -> tuple[PlatformTriple, ArtifactReference]:
        """Resolve the host platform and the artifact to download.

        Raises:
            UnsupportedPlatform: If the host OS is not supported.
            UnsupportedArchitecture: If the host architecture is not supported.
        """
        triple = resolve_platform(
            self._platform_info.os,
            self._platform_info.arch,
            self._config.get_version(),
        )
        artifact = build_artifact_reference(
            triple,
            release_host=self._config.release_host,
            repository=self._config.repository,
        )
        return triple, artifact

    def install(self, force: bool = False) -> InstalledBinary:
        """Install the bore client.

        Args:
            force: Download again even if a binary is already installed.

        Returns:
            The installed binary.

        Raises:
            BoreCliError: Any of the installer failure kinds.
        """
        triple, artifact = self.resolve()

        try:
            self._paths.ensure_directories()
        except OSError as e:
            raise FilesystemError(
                f"Cannot create install directory {self._paths.bin_dir}: {e.strerror or e}"
            ) from e

        binary_path = self._paths.binary_path(triple.os_name)
        if not force and validate_binary(binary_path) == ToolStatus.PRESENT:
            LOGGER.info(f"bore is already installed at {binary_path}")
            return InstalledBinary(path=binary_path, version=triple.version, downloaded=False)

        archive_path = self._paths.archive_path(artifact.file_name)
        LOGGER.info(f"Downloading bore ({artifact.url})...")

        extracting = False
        try:
            fetch_artifact(
                artifact.url,
                archive_path,
                max_redirects=self._config.max_redirects,
                timeout=self._config.timeout,
                opener=self._opener,
            )
            LOGGER.info(f"Downloaded to {archive_path}")

            # Drop a previous install first so a failed extraction cannot
            # leave the old binary looking like the new one.
            extracting = True
            binary_path.unlink(missing_ok=True)
            installed = self._unpack(archive_path, triple.os_name, binary_path)
        except BoreCliError:
            self._discard(archive_path, binary_path if extracting else None)
            raise
        except OSError as e:
            self._discard(archive_path, binary_path if extracting else None)
            raise FilesystemError(f"Install failed: {e.strerror or e}") from e

        LOGGER.info(f"Installation complete: {installed}")
        return InstalledBinary(path=installed, version=triple.version)

    def uninstall(self) -> list[Path]:
        """Remove the installed client and any leftover archive.

        Returns:
            Paths that were removed.
        """
        removed: list[Path] = []
        try:
            triple, artifact = self.resolve()
        except BoreCliError:
            return removed

        candidates = [
            self._paths.binary_path(triple.os_name),
            self._paths.companion_path(triple.os_name),
            self._paths.archive_path(artifact.file_name),
        ]
        for path in candidates:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise FilesystemError(f"Cannot remove {path}: {e.strerror or e}") from e
            removed.append(path)
            LOGGER.debug(f"Removed {path}")
        return removed

    def _unpack(self, archive_path: Path, os_name: str, binary_path: Path) -> Path:
        """Extract into a staging directory and move only the client into place.

        Nothing from the archive reaches bin_dir unless extraction and cleanup
        both succeeded; the staging directory is always removed.
        """
        staging = Path(tempfile.mkdtemp(prefix=".bore-extract-", dir=self._paths.bin_dir))
        try:
            extract_archive(archive_path, staging)
            staged = cleanup_install_dir(staging, os_name, archive_path)
            os.replace(staged, binary_path)
        finally:
            try:
                shutil.rmtree(staging)
            except OSError as e:
                LOGGER.warning(f"Could not remove {staging}: {e}")
        return binary_path

    def _discard(self, *paths: Optional[Path]) -> None:
        """Best-effort removal of partial install artifacts."""
        for path in paths:
            if path is None:
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                LOGGER.warning(f"Could not remove {path}: {e}")
