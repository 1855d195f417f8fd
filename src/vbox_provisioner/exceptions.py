"""Exceptions raised by the VM provisioner."""

from collections.abc import Sequence
from pathlib import Path


class ProvisionerError(Exception):
    """Base class for provisioner errors."""

    pass


class PreconditionError(ProvisionerError):
    """Raised when a filesystem precondition fails before any side effect."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class IsoNotFoundError(PreconditionError):
    """The ISO path is not an existing regular file."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Cannot find ISO file: {path}")


class VMDirectoryNotFoundError(PreconditionError):
    """The directory that should contain the VM does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Cannot find VM directory: {path}")


class VBoxManageError(ProvisionerError):
    """Raised when a VBoxManage invocation fails."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"VBoxManage {self.args_list[0] if self.args_list else ''} failed: {detail}")
