"""Binary validation for the installed bore client."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path


class ToolStatus(str, Enum):
    """Status of the installed binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def validate_binary(path: Path) -> ToolStatus:
    """Validate a single binary file.

    Args:
        path: Path to the binary file.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.is_file():
        return ToolStatus.MISSING

    # Windows has no executable bit; os.access reports True for any file there.
    if not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT
