"""Install command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from borecli.config.models import BoreCliConfig

from borecli.bootstrap.installer import Installer
from borecli.cli.commands import Command
from borecli.cli.exit_codes import EXIT_SUCCESS
from borecli.core.console import print_success


class InstallCommand(Command):
    """Downloads and unpacks the bore client for this host."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "BoreCliConfig") -> int:
        """Execute the install command.

        Failures propagate as BoreCliError and are reported by the runner.

        Args:
            args: Parsed command-line arguments.
            config: Effective configuration.

        Returns:
            Exit code (0 on success).
        """
        installer = Installer(config)
        installed = installer.install(force=getattr(args, "force", False))

        if installed.downloaded:
            print_success(f"bore {installed.version} installed at {installed.path}")
        else:
            print_success(
                f"bore is already installed at {installed.path} (use --force to reinstall)"
            )
        return EXIT_SUCCESS
