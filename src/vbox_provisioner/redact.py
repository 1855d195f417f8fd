"""Utilities for redacting credentials from VBoxManage argument lists."""

from collections.abc import Sequence

REDACTED = "REDACTED"

# Options whose following argument is a credential
SENSITIVE_OPTIONS = frozenset({"--password", "--user-password", "--admin-password", "--key"})


def redact_args(args: Sequence[str]) -> list[str]:
    """
    Replace the value after any sensitive option with a marker.

    Args:
        args: VBoxManage argument list

    Returns:
        A copy of the list that is safe to log or display

    Example:
        >>> redact_args(["unattended", "install", "vm", "--password", "pw1"])
        ['unattended', 'install', 'vm', '--password', 'REDACTED']
    """
    result = list(args)
    for index, arg in enumerate(result[:-1]):
        if arg in SENSITIVE_OPTIONS:
            result[index + 1] = REDACTED
    return result
