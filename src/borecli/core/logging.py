"""Logging configuration for bore-cli.

All modules obtain their logger through get_logger(__name__), which returns
a child of the package logger. Output goes to stderr through Rich so the
launcher never mixes wrapper chatter into the child's stdout.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "borecli"

_HANDLER_ATTR = "_borecli_handler"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the borecli namespace.

    Args:
        name: Module name, usually __name__. Names outside the package are
            nested under it so they share the configured handler.

    Returns:
        Logger instance.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    default: int = logging.INFO,
) -> int:
    """Map CLI verbosity flags to a logging level.

    --debug wins over --quiet, which wins over --verbose.
    """
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return default


def configure_logging(
    level: Optional[int] = None,
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    default: int = logging.INFO,
) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once: the handler is installed on the first call
    and only the level changes afterwards.

    Args:
        level: Explicit level; overrides the flags when given.
        debug: Enable debug output.
        verbose: Enable info output.
        quiet: Only show errors.
        default: Level used when no flag is set.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level is None:
        level = resolve_level(debug=debug, verbose=verbose, quiet=quiet, default=default)

    handler = getattr(logger, _HANDLER_ATTR, None)
    if handler is None:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        setattr(logger, _HANDLER_ATTR, handler)

    logger.setLevel(level)
    handler.setLevel(level)
    return logger
