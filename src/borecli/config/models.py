"""Configuration data model for bore-cli.

Example ~/.bore-cli/config/config.yml:
    version: "0.4.1"
    release_host: https://github.com
    repository: Aditya-ds-1806/bore
    max_redirects: 5
    timeout: 60
    install_dir: ~/.local/share/bore
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from borecli.bootstrap.download import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT
from borecli.bootstrap.platform import DEFAULT_RELEASE_HOST, DEFAULT_REPOSITORY
from borecli.bootstrap.versions import get_bore_version


@dataclass
class BoreCliConfig:
    """Complete bore-cli configuration."""

    version: Optional[str] = None  # None = version bundled with the package
    release_host: str = DEFAULT_RELEASE_HOST
    repository: str = DEFAULT_REPOSITORY
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    timeout: float = DEFAULT_TIMEOUT
    install_dir: Optional[str] = None  # None = <package>/bin or $BORE_CLI_HOME/bin

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    def get_version(self) -> str:
        """Version to install, falling back to the bundled default."""
        return self.version or get_bore_version()

    @property
    def config_sources(self) -> List[str]:
        """Where the effective values came from, lowest precedence first."""
        return list(self._config_sources)
