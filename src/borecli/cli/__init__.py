"""The `bore-cli` command: install, inspect and remove the bore client."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from borecli.cli.commands import Command, InstallCommand, StatusCommand, UninstallCommand
from borecli.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from borecli.config import load_config
from borecli.core.console import print_error
from borecli.core.errors import BoreCliError
from borecli.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def _get_version() -> str:
    try:
        return version("bore-cli")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from borecli import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bore-cli",
        description="bore-cli - install and manage the bore tunnelling client.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show bore-cli version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to a config file (default: ~/.bore-cli/config/config.yml).",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    install = subparsers.add_parser(
        "install",
        help="Download and install the bore binary for this platform.",
    )
    install.add_argument(
        "--version",
        dest="bore_version",
        metavar="VERSION",
        help="bore release to install (default: the version bundled with bore-cli).",
    )
    install.add_argument(
        "--force",
        action="store_true",
        help="Download again even if bore is already installed.",
    )
    _add_install_dir(install)

    status = subparsers.add_parser(
        "status",
        help="Show platform, release artifact and install status.",
    )
    _add_install_dir(status)

    uninstall = subparsers.add_parser(
        "uninstall",
        help="Remove the installed bore binary.",
    )
    _add_install_dir(uninstall)

    return parser


def _add_install_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--install-dir",
        metavar="DIR",
        help="Directory holding the bore binary (default: next to the bore-cli package).",
    )


def cli_args_to_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Convert CLI arguments to a config override dict.

    CLI arguments take precedence over config file values; unset flags
    are left out.
    """
    overrides: Dict[str, Any] = {}
    bore_version = getattr(args, "bore_version", None)
    if bore_version:
        overrides["version"] = bore_version
    install_dir = getattr(args, "install_dir", None)
    if install_dir:
        overrides["install_dir"] = install_dir
    return overrides


class CLIRunner:
    """Parses arguments, loads configuration and dispatches commands."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {
            command.name: command
            for command in (InstallCommand(), StatusCommand(), UninstallCommand())
        }

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        parser = build_parser()
        try:
            args = parser.parse_args(list(argv) if argv is not None else None)
        except SystemExit as e:
            # --help exits 0, usage errors exit 2
            return e.code if isinstance(e.code, int) else EXIT_INVALID_USAGE

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(f"bore-cli {_get_version()}")
            return EXIT_SUCCESS

        command = self._commands.get(args.command or "")
        if command is None:
            parser.print_help()
            return EXIT_INVALID_USAGE

        try:
            config = load_config(
                cli_config_path=args.config,
                cli_overrides=cli_args_to_config_overrides(args),
            )
            return command.execute(args, config)
        except BoreCliError as e:
            LOGGER.debug(f"{command.name} failed ({e.kind})", exc_info=True)
            print_error(str(e))
            return e.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Console-script entry point for `bore-cli`."""
    runner = CLIRunner()
    return runner.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
