"""Configuration loading for bore-cli."""

from borecli.config.loader import load_config
from borecli.config.models import BoreCliConfig

__all__ = [
    "BoreCliConfig",
    "load_config",
]
