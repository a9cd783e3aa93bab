"""
Bootstrap module for the bore binary.

This module handles:
- Platform detection and release artifact naming
- Downloading the release archive (bounded redirects)
- Extracting it and finalizing the installed binary
- Locating and validating the installed binary
"""

from borecli.bootstrap.paths import BorePaths
from borecli.bootstrap.platform import (
    ArtifactReference,
    PlatformInfo,
    PlatformTriple,
    get_platform_info,
    resolve_artifact,
)
from borecli.bootstrap.validation import ToolStatus, validate_binary

__all__ = [
    "ArtifactReference",
    "BorePaths",
    "PlatformInfo",
    "PlatformTriple",
    "ToolStatus",
    "get_platform_info",
    "resolve_artifact",
    "validate_binary",
]
