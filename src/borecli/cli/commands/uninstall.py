"""Uninstall command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from borecli.config.models import BoreCliConfig

from borecli.bootstrap.installer import Installer
from borecli.cli.commands import Command
from borecli.cli.exit_codes import EXIT_SUCCESS


class UninstallCommand(Command):
    """Removes the installed bore client. Safe to run repeatedly."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "uninstall"

    def execute(self, args: Namespace, config: "BoreCliConfig") -> int:
        removed = Installer(config).uninstall()

        if not removed:
            print("Nothing to remove: bore is not installed.")
        for path in removed:
            print(f"Removed {path}")
        return EXIT_SUCCESS
