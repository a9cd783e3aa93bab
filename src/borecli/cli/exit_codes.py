"""Exit codes for bore-cli.

- 0: Success
- 1: Any installer or launcher failure (unsupported host, download,
     extraction, filesystem, missing binary, spawn failure, bad config)
- 2: Invalid usage (argparse errors)

The `bore` launcher itself exits with the child's exit code when the child
ran.
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID_USAGE = 2
