"""Exit codes for formhook CLI commands."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for formhook CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    USER_ERROR = 1
    """Invalid arguments or configuration."""

    SEND_ERROR = 3
    """The request to the external URL failed."""
