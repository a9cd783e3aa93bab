"""The `bore` command: run the installed bore client.

All arguments are forwarded verbatim, standard streams are inherited, and
the process exits with the child's exit code. A missing binary is reported
with a reinstall hint; the launcher never downloads anything itself.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from borecli.bootstrap.paths import BorePaths
from borecli.cli.exit_codes import EXIT_FAILURE
from borecli.config import load_config
from borecli.core.console import print_error, print_hint
from borecli.core.errors import BinaryNotFound, BoreCliError, SpawnFailed
from borecli.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)

REINSTALL_HINTS = (
    "bore-cli install --force",
    "pip install --force-reinstall bore-cli",
)

# Takes the full command line, blocks until the child exits, returns its code.
Spawner = Callable[[List[str]], int]


@dataclass(frozen=True)
class ChildProcessResult:
    exit_code: int


def spawn_inherited(cmd: List[str]) -> int:
    """Run cmd with the parent's stdin, stdout and stderr, and wait for it.

    Ctrl-C reaches the child through the terminal's process group, so the
    launcher keeps waiting and reports whatever code the child exits with.
    """
    process = subprocess.Popen(cmd)
    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            continue


def normalize_exit_code(code: int) -> int:
    """Map a signal death (negative code on POSIX) to the shell's 128 + N."""
    if code < 0:
        return 128 + abs(code)
    return code


class Launcher:
    """Runs the installed bore client as a child process."""

    def __init__(self, binary_path: Path, spawn: Optional[Spawner] = None) -> None:
        self._binary_path = binary_path
        self._spawn = spawn or spawn_inherited

    @property
    def binary_path(self) -> Path:
        return self._binary_path

    def run(self, args: Sequence[str]) -> ChildProcessResult:
        """Run the binary with args.

        Raises:
            BinaryNotFound: If the binary is not installed.
            SpawnFailed: If the process could not be started.
        """
        if not self._binary_path.is_file():
            raise BinaryNotFound(str(self._binary_path))

        cmd = [str(self._binary_path), *args]
        LOGGER.debug(f"Running: {cmd}")
        try:
            code = self._spawn(cmd)
        except OSError as e:
            raise SpawnFailed(str(self._binary_path), e.strerror or str(e)) from e

        return ChildProcessResult(exit_code=normalize_exit_code(code))


def default_binary_path() -> Path:
    """Where the installer put the bore client on this host."""
    config = load_config()
    return BorePaths.resolve(config.install_dir).binary_path(sys.platform)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console-script entry point for `bore`.

    Args:
        argv: Arguments for the bore client; defaults to sys.argv[1:].

    Returns:
        The child's exit code, or EXIT_FAILURE if it could not be run.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    configure_logging(default=logging.WARNING)

    try:
        launcher = Launcher(default_binary_path())
        result = launcher.run(args)
    except BinaryNotFound as e:
        print_error(f"{e}. Try reinstalling:")
        for hint in REINSTALL_HINTS:
            print_hint(hint)
        return EXIT_FAILURE
    except BoreCliError as e:
        print_error(str(e))
        return EXIT_FAILURE

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
