"""Data models for the VM provisioner."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DISK_EXTENSION = ".vmdk"
PASSWORD_FILE_SUFFIX = ".password.txt"
AUX_DIR_SUFFIX = ".aux"
SIGNAL_EXIT_BASE = 128


class ProvisionStep(Enum):
    """Provisioning steps in execution order."""

    CREATE_VM = "create_vm"
    CREATE_DISK = "create_disk"
    ADD_SATA_CONTROLLER = "add_sata_controller"
    ATTACH_DISK = "attach_disk"
    ADD_IDE_CONTROLLER = "add_ide_controller"
    ATTACH_ISO = "attach_iso"
    SET_MEMORY = "set_memory"
    ENABLE_IOAPIC = "enable_ioapic"
    SET_BOOT_ORDER = "set_boot_order"
    SET_CPUS = "set_cpus"
    WRITE_PASSWORD_FILE = "write_password_file"
    ENCRYPT_DISK = "encrypt_disk"
    CREATE_AUX_DIR = "create_aux_dir"
    UNATTENDED_INSTALL = "unattended_install"
    START_VM = "start_vm"


class StepStatus(Enum):
    """Outcome status of a single step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_RUN = "not_run"


@dataclass(frozen=True)
class ProvisionRequest:
    """The five invocation parameters and the names derived from them."""

    iso_path: Path
    vm_path: Path
    hostname: str
    username: str
    password: str

    def __post_init__(self) -> None:
        # Path() drops trailing separators, so "vms/myvm/" derives "myvm"
        object.__setattr__(self, "iso_path", Path(self.iso_path))
        object.__setattr__(self, "vm_path", Path(self.vm_path))

    @property
    def vm_name(self) -> str:
        return self.vm_path.name

    @property
    def vm_parent(self) -> Path:
        return self.vm_path.parent

    @property
    def iso_name(self) -> str:
        return self.iso_path.name

    @property
    def iso_dir(self) -> Path:
        return self.iso_path.parent

    @property
    def disk_filename(self) -> str:
        return f"{self.vm_name}{DISK_EXTENSION}"

    @property
    def disk_path(self) -> Path:
        return self.vm_path / self.disk_filename

    @property
    def password_file(self) -> Path:
        """Disk encryption password file, kept next to the ISO."""
        return Path(f"{self.iso_path}{PASSWORD_FILE_SUFFIX}")

    @property
    def aux_path(self) -> Path:
        """Auxiliary directory for generated unattended-install files."""
        return Path(f"{self.iso_path}{AUX_DIR_SUFFIX}")


@dataclass
class PlannedStep:
    """A step to execute: either a VBoxManage call or a local filesystem action."""

    step: ProvisionStep
    description: str
    vbox_args: list[str] = field(default_factory=list)
    local_action: Callable[[], None] | None = None

    @property
    def is_local(self) -> bool:
        return self.local_action is not None


@dataclass
class StepOutcome:
    """Tagged result of one step."""

    step: ProvisionStep
    status: StepStatus
    command: list[str] = field(default_factory=list)
    returncode: int | None = None
    stderr: str = ""
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED


@dataclass
class ProvisionResult:
    """Ordered outcomes of a provisioning run."""

    vm_name: str
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Check that every planned step ran and succeeded."""
        return bool(self.outcomes) and all(
            o.status == StepStatus.SUCCEEDED for o in self.outcomes
        )

    @property
    def failure(self) -> StepOutcome | None:
        """The first failed outcome, if any."""
        return next((o for o in self.outcomes if o.failed), None)

    @property
    def failed_step(self) -> ProvisionStep | None:
        failure = self.failure
        return failure.step if failure else None

    @property
    def exit_code(self) -> int:
        """Process exit code: 0, the failing tool's code, or 1 without one.

        A tool killed by signal N reports -N; that maps to 128 + N as a shell would.
        """
        failure = self.failure
        if failure is None:
            return 0 if self.succeeded else 1
        if failure.returncode is None or failure.returncode == 0:
            return 1
        if failure.returncode < 0:
            return SIGNAL_EXIT_BASE - failure.returncode
        return failure.returncode
