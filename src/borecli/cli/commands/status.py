"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from borecli.config.models import BoreCliConfig

from borecli import __version__
from borecli.bootstrap.installer import Installer
from borecli.bootstrap.platform import PlatformInfo, get_platform_info
from borecli.bootstrap.validation import ToolStatus, validate_binary
from borecli.cli.commands import Command
from borecli.cli.exit_codes import EXIT_SUCCESS
from borecli.core.errors import BoreCliError

_STATUS_LABELS = {
    ToolStatus.PRESENT: "installed",
    ToolStatus.MISSING: "not installed",
    ToolStatus.NOT_EXECUTABLE: "present but not executable",
}


class StatusCommand(Command):
    """Shows platform, artifact and install information."""

    def __init__(self, platform_info: Optional[PlatformInfo] = None) -> None:
        self._platform_info = platform_info

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "BoreCliConfig") -> int:
        """Execute the status command.

        Displays the resolved artifact for this host and whether the bore
        client is installed. Unsupported hosts are reported, not raised.

        Args:
            args: Parsed command-line arguments.
            config: Effective configuration.

        Returns:
            Exit code (always 0 for status).
        """
        platform_info = self._platform_info or get_platform_info()
        installer = Installer(config, platform_info=platform_info)

        print(f"bore-cli version: {__version__}")
        print(f"bore version: {config.get_version()}")
        print(f"Platform: {platform_info.os}-{platform_info.arch}")
        print(f"Install dir: {installer.paths.bin_dir}")

        try:
            triple, artifact = installer.resolve()
        except BoreCliError as e:
            print(f"Artifact: unavailable ({e})")
            return EXIT_SUCCESS

        binary_path = installer.paths.binary_path(triple.os_name)
        status = validate_binary(binary_path)
        print(f"Artifact: {artifact.url}")
        print(f"Binary: {binary_path} ({_STATUS_LABELS[status]})")

        sources = config.config_sources
        print(f"Config sources: {', '.join(sources) if sources else 'defaults'}")
        return EXIT_SUCCESS
