"""Version of the bore release that this wrapper installs.

Reads the version from the [tool.borecli] section of pyproject.toml when
running from a source checkout. Installed packages fall back to the wrapper's
own version, which tracks the upstream release it was published for.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Optional

from borecli import __version__
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)

# Kept in sync with pyproject.toml [tool.borecli] bore_version
_FALLBACK_BORE_VERSION = __version__

# src/borecli/bootstrap/versions.py -> ../../../pyproject.toml
_PYPROJECT_PATH = Path(__file__).parent.parent.parent.parent / "pyproject.toml"


@lru_cache(maxsize=1)
def _load_pyproject_version(pyproject_path: Path = _PYPROJECT_PATH) -> Optional[str]:
    """Load bore_version from a pyproject.toml, or None if unavailable."""
    if not pyproject_path.exists():
        return None

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        LOGGER.debug(f"Could not read {pyproject_path}: {e}")
        return None

    value = data.get("tool", {}).get("borecli", {}).get("bore_version")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_bore_version() -> str:
    """Get the default bore release version to install.

    Returns:
        Version string without a leading 'v'.
    """
    return _load_pyproject_version() or _FALLBACK_BORE_VERSION
