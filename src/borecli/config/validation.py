"""Configuration validation for bore-cli.

Unknown keys only produce warnings, with a suggestion when the key looks like
a typo. Values of the wrong type or out of range are errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from borecli.bootstrap.platform import normalize_version
from borecli.core.errors import ConfigError
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_KEYS: Set[str] = {
    "version",
    "release_host",
    "repository",
    "max_redirects",
    "timeout",
    "install_dir",
}

_STRING_KEYS = ("version", "release_host", "repository", "install_dir")


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationWarning]:
    """Validate a configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source description for messages (file path, 'env', 'cli').

    Returns:
        List of validation warnings for unknown keys.

    Raises:
        ConfigError: If a known key has an invalid value.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__} in {source}")

    warnings: List[ConfigValidationWarning] = []

    for key in data.keys():
        if key not in VALID_KEYS:
            warning = ConfigValidationWarning(
                message=f"Unknown key '{key}'",
                source=source,
                key=str(key),
                suggestion=_suggest_key(str(key), VALID_KEYS),
            )
            warnings.append(warning)
            _log_warning(warning)

    for key in _STRING_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            # YAML reads `version: 1.2` as a float
            if key == "version" and isinstance(value, (int, float)) and not isinstance(value, bool):
                continue
            raise ConfigError(f"'{key}' must be a string, got {type(value).__name__} in {source}")

    version = data.get("version")
    if isinstance(version, str) and not normalize_version(version):
        raise ConfigError(f"'version' must name a release, got '{version}' in {source}")

    release_host = data.get("release_host")
    if isinstance(release_host, str) and not release_host.startswith(("https://", "http://")):
        raise ConfigError(f"'release_host' must be an http(s) URL, got '{release_host}' in {source}")

    max_redirects = data.get("max_redirects")
    if max_redirects is not None:
        if isinstance(max_redirects, bool) or not isinstance(max_redirects, int):
            raise ConfigError(
                f"'max_redirects' must be an integer, got {type(max_redirects).__name__} in {source}"
            )
        if max_redirects < 0:
            raise ConfigError(f"'max_redirects' must not be negative in {source}")

    timeout = data.get("timeout")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"'timeout' must be a number, got {type(timeout).__name__} in {source}")
        if timeout <= 0:
            raise ConfigError(f"'timeout' must be positive in {source}")

    return warnings


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
