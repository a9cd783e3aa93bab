"""Configuration file loading and merging.

Handles loading configuration with:
- Global config (~/.bore-cli/config/config.yml, or under $BORE_CLI_HOME)
- Custom config file (--config)
- Environment variables (BORE_VERSION, BORE_RELEASE_HOST, BORE_REPOSITORY)
- Environment variable expansion in YAML values (${VAR}, ${VAR:-default})
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from borecli.bootstrap.paths import global_config_path
from borecli.config.models import BoreCliConfig
from borecli.config.validation import validate_config
from borecli.core.errors import ConfigError
from borecli.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable -> config key
ENV_OVERRIDES: Dict[str, str] = {
    "BORE_VERSION": "version",
    "BORE_RELEASE_HOST": "release_host",
    "BORE_REPOSITORY": "repository",
}

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> BoreCliConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path)
    3. Global config file
    4. Environment variables
    5. Built-in defaults

    Args:
        cli_config_path: Optional path to a config file (--config flag).
        cli_overrides: Dict of CLI flag overrides; None values are ignored.

    Returns:
        Merged BoreCliConfig instance.

    Raises:
        ConfigError: If a config file is missing, unreadable or invalid.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Environment
    env_dict = load_env_overrides()
    if env_dict:
        validate_config(env_dict, source="env")
        merged.update(env_dict)
        sources.append("env")

    # Layer 2: Global config
    global_path = global_config_path()
    if global_path.exists():
        global_dict = load_yaml_file(global_path)
        validate_config(global_dict, source=str(global_path))
        merged.update(global_dict)
        sources.append(f"global:{global_path}")
        LOGGER.debug(f"Loaded global config from {global_path}")

    # Layer 3: Custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        custom_dict = load_yaml_file(cli_config_path)
        validate_config(custom_dict, source=str(cli_config_path))
        merged.update(custom_dict)
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")

    # Layer 4: CLI overrides
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    if overrides:
        validate_config(overrides, source="cli")
        merged.update(overrides)
        sources.append("cli")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def load_env_overrides() -> Dict[str, Any]:
    """Collect config values from BORE_* environment variables."""
    result: Dict[str, Any] = {}
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            result[key] = value
    return result


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed dictionary.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or is
            not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Config data (dict, list, or scalar).

    Returns:
        Data with environment variables expanded.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def dict_to_config(data: Dict[str, Any]) -> BoreCliConfig:
    """Convert a validated dict to a typed BoreCliConfig.

    Args:
        data: Configuration dictionary.

    Returns:
        Typed BoreCliConfig instance.
    """
    defaults = BoreCliConfig()

    version = data.get("version")
    if version is not None:
        version = str(version)

    return BoreCliConfig(
        version=version or None,
        release_host=data.get("release_host") or defaults.release_host,
        repository=data.get("repository") or defaults.repository,
        max_redirects=int(data.get("max_redirects", defaults.max_redirects)),
        timeout=float(data.get("timeout", defaults.timeout)),
        install_dir=data.get("install_dir") or None,
    )
