"""VBoxManage command runner."""

import subprocess
from collections.abc import Sequence

import structlog

from .config import Settings
from .exceptions import VBoxManageError
from .redact import redact_args

logger = structlog.get_logger()

# Shell exit codes for "command not found" and "not executable"
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


class VBoxManageClient:
    """Runs VBoxManage invocations one at a time and checks their exit codes."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.executable = settings.vboxmanage

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        """Execute VBoxManage with the given arguments and wait for it to finish.

        Raises:
            VBoxManageError: If the executable is missing, not executable or exits non-zero
        """
        cmd = [self.executable, *args]
        logger.debug("Running VBoxManage", command=redact_args(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            logger.error("VBoxManage not found", executable=self.executable)
            raise VBoxManageError(
                args,
                COMMAND_NOT_FOUND,
                f"{self.executable}: command not found. Make sure VirtualBox is installed "
                "and VBoxManage is in your PATH.",
            )
        except PermissionError:
            logger.error("VBoxManage not executable", executable=self.executable)
            raise VBoxManageError(
                args,
                COMMAND_NOT_EXECUTABLE,
                f"{self.executable}: permission denied. Check that it is an executable file.",
            )

        if result.returncode != 0:
            logger.error(
                "VBoxManage command failed",
                command=redact_args(cmd),
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            raise VBoxManageError(args, result.returncode, result.stderr)

        # stdout is not logged: unattended install echoes the guest password
        return result
