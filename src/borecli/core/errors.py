"""Error taxonomy for the installer and launcher.

Every error is fatal to the current invocation. Library code raises these;
only the console entry points turn them into a diagnostic line and an exit
status.
"""

from __future__ import annotations

from typing import Optional


class BoreCliError(Exception):
    """Base class for all bore-cli failures."""

    kind = "error"
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnsupportedPlatform(BoreCliError):
    """The host operating system has no published artifact."""

    kind = "unsupported_platform"

    def __init__(self, raw_os: str) -> None:
        super().__init__(f"Unsupported platform: {raw_os}")
        self.raw_os = raw_os


class UnsupportedArchitecture(BoreCliError):
    """The host CPU architecture has no published artifact."""

    kind = "unsupported_architecture"

    def __init__(self, raw_os: str, raw_arch: str) -> None:
        super().__init__(f"Unsupported architecture: {raw_os} {raw_arch}")
        self.raw_os = raw_os
        self.raw_arch = raw_arch


class DownloadFailed(BoreCliError):
    """The artifact could not be downloaded.

    status_code is the HTTP status of the final response, or None when the
    request failed below HTTP (DNS, refused connection, TLS, timeout).
    """

    kind = "download_failed"

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        if status_code is not None:
            message = f"Failed to download {url}: HTTP {status_code}"
        else:
            message = f"Failed to download {url}: {reason or 'unknown error'}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.reason = reason


class TooManyRedirects(BoreCliError):
    kind = "too_many_redirects"

    def __init__(self, url: str, max_redirects: int) -> None:
        super().__init__(f"Too many redirects (more than {max_redirects}) fetching {url}")
        self.url = url
        self.max_redirects = max_redirects


class ExtractionFailed(BoreCliError):
    kind = "extraction_failed"

    def __init__(self, archive: str, reason: str) -> None:
        super().__init__(f"Error extracting archive {archive}: {reason}")
        self.archive = archive
        self.reason = reason


class FilesystemError(BoreCliError):
    kind = "filesystem_error"


class BinaryNotFound(BoreCliError):
    """The launcher could not find the installed binary."""

    kind = "binary_not_found"

    def __init__(self, path: str) -> None:
        super().__init__(f"bore binary not found at {path}")
        self.path = path


class SpawnFailed(BoreCliError):
    kind = "spawn_failed"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to start {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(BoreCliError):
    """Configuration loading or parsing error."""

    kind = "config_error"
