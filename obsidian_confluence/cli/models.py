"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Note synced
    - GENERAL_ERROR (1): Config issues, validation failures, remote errors
    - AUTH_ERROR (3): Authentication or authorization failure (401/403)
    - NETWORK_ERROR (4): Confluence could not be reached

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
