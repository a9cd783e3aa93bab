"""Path management for the installed bore binary and bore-cli configuration.

The binary lives next to the package by default, in <package>/bin, so the
launcher can find it at a fixed location relative to itself:

    borecli/
        bin/
            bore            - installed client (bore.exe on Windows)

Setting BORE_CLI_HOME moves both the binary and the configuration:

    $BORE_CLI_HOME/
        bin/bore
        config/config.yml
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional, Union

from borecli.bootstrap.platform import binary_name, companion_binary_name

# Default directory name under the user home for configuration
DEFAULT_HOME_DIR_NAME = ".bore-cli"

# Environment variable to override the bore-cli home directory
BORE_CLI_HOME_ENV = "BORE_CLI_HOME"

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def get_bore_cli_home() -> Optional[Path]:
    """Return the BORE_CLI_HOME override, or None when it is not set."""
    env_home = os.environ.get(BORE_CLI_HOME_ENV)
    if env_home:
        return Path(env_home).expanduser()
    return None


def get_config_home() -> Path:
    """Directory holding the global configuration.

    Resolution order:
    1. BORE_CLI_HOME environment variable (if set)
    2. ~/.bore-cli (default)
    """
    return get_bore_cli_home() or Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class BorePaths:
    """Locations used by the installer and the launcher."""

    bin_dir: Path

    _BIN_DIR: ClassVar[str] = "bin"

    @classmethod
    def default(cls) -> "BorePaths":
        """Paths from BORE_CLI_HOME, falling back to <package>/bin."""
        home = get_bore_cli_home()
        if home is not None:
            return cls.for_home(home)
        return cls(PACKAGE_DIR / cls._BIN_DIR)

    @classmethod
    def for_home(cls, home: Union[str, Path]) -> "BorePaths":
        """Paths rooted at an explicit home directory."""
        return cls(Path(home) / cls._BIN_DIR)

    @classmethod
    def resolve(cls, install_dir: Optional[Union[str, Path]] = None) -> "BorePaths":
        """Use install_dir as the binary directory when given, else default()."""
        if install_dir:
            return cls(Path(install_dir).expanduser())
        return cls.default()

    def binary_path(self, os_name: str) -> Path:
        """Path of the bore client executable for the given release OS name."""
        return self.bin_dir / binary_name(os_name)

    def companion_path(self, os_name: str) -> Path:
        """Path of the bore-server executable extracted from the archive."""
        return self.bin_dir / companion_binary_name(os_name)

    def archive_path(self, file_name: str) -> Path:
        """Path the downloaded release archive is written to."""
        return self.bin_dir / file_name

    def ensure_directories(self) -> None:
        """Create the binary directory, parents included."""
        self.bin_dir.mkdir(parents=True, exist_ok=True)


def global_config_path() -> Path:
    """Path of the global config file (may not exist)."""
    return get_config_home() / "config" / "config.yml"
