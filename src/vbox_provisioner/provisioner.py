"""
VM provisioning workflow.

Creates one VirtualBox VM through a strictly linear sequence of VBoxManage
calls:
- register the VM and create its VMDK disk
- attach the disk (SATA) and the installer ISO (IDE)
- set memory, I/O APIC, boot order and CPU count
- optionally encrypt the disk
- run the unattended Ubuntu install
- start the VM

Execution stops at the first failing step. Nothing is rolled back: whatever
VirtualBox created before the failure stays in place, and the result names the
step that failed.
"""

from pathlib import Path

import structlog

from . import commands
from .config import Settings
from .exceptions import IsoNotFoundError, VBoxManageError, VMDirectoryNotFoundError
from .models import (
    PlannedStep,
    ProvisionRequest,
    ProvisionResult,
    ProvisionStep,
    StepOutcome,
    StepStatus,
)
from .redact import redact_args
from .vboxmanage import VBoxManageClient

logger = structlog.get_logger()


class VMProvisioner:
    """Checks preconditions, plans and runs the provisioning steps for one VM."""

    def __init__(self, settings: Settings, client: VBoxManageClient | None = None) -> None:
        self.settings = settings
        self.client = client or VBoxManageClient(settings)

    def check_preconditions(self, request: ProvisionRequest) -> None:
        """Verify the ISO file and the VM's parent directory exist.

        Raises:
            IsoNotFoundError: If the ISO path is not a regular file
            VMDirectoryNotFoundError: If the VM path's parent directory is missing
        """
        if not request.iso_path.is_file():
            raise IsoNotFoundError(request.iso_path)
        if not request.vm_parent.is_dir():
            raise VMDirectoryNotFoundError(request.vm_path)

    def plan(self, request: ProvisionRequest) -> list[PlannedStep]:
        """Build the ordered steps for a request without running anything."""
        name = request.vm_name
        steps = [
            PlannedStep(
                ProvisionStep.CREATE_VM,
                f"Register VM {name}",
                commands.create_vm(name, request.vm_parent),
            ),
            PlannedStep(
                ProvisionStep.CREATE_DISK,
                f"Create {commands.DISK_SIZE_MB} MB disk {request.disk_filename}",
                commands.create_disk(request.disk_path),
            ),
            PlannedStep(
                ProvisionStep.ADD_SATA_CONTROLLER,
                "Add SATA controller",
                commands.add_sata_controller(name),
            ),
            PlannedStep(
                ProvisionStep.ATTACH_DISK,
                "Attach disk to SATA port 0",
                commands.attach_disk(name, request.disk_path),
            ),
            PlannedStep(
                ProvisionStep.ADD_IDE_CONTROLLER,
                "Add IDE controller",
                commands.add_ide_controller(name),
            ),
            PlannedStep(
                ProvisionStep.ATTACH_ISO,
                f"Attach {request.iso_name} to IDE port 0",
                commands.attach_iso(name, request.iso_path),
            ),
            PlannedStep(
                ProvisionStep.SET_MEMORY,
                f"Set memory {commands.MEMORY_MB} MB, video memory {commands.VRAM_MB} MB",
                commands.set_memory(name),
            ),
            PlannedStep(ProvisionStep.ENABLE_IOAPIC, "Enable I/O APIC", commands.enable_ioapic(name)),
            PlannedStep(
                ProvisionStep.SET_BOOT_ORDER,
                "Boot from DVD, then disk",
                commands.set_boot_order(name),
            ),
            PlannedStep(
                ProvisionStep.SET_CPUS,
                f"Set {commands.CPU_COUNT} CPUs",
                commands.set_cpus(name),
            ),
        ]

        if self.settings.use_encryption:
            steps += [
                PlannedStep(
                    ProvisionStep.WRITE_PASSWORD_FILE,
                    f"Write disk password file {request.password_file}",
                    local_action=lambda: self._write_password_file(request.password_file),
                ),
                PlannedStep(
                    ProvisionStep.ENCRYPT_DISK,
                    f"Encrypt disk with {commands.ENCRYPTION_CIPHER}",
                    commands.encrypt_disk(request.disk_path, request.password_file),
                ),
            ]

        aux_path = None
        if self.settings.use_aux_dir:
            aux_path = request.aux_path
            steps.append(
                PlannedStep(
                    ProvisionStep.CREATE_AUX_DIR,
                    f"Create auxiliary directory {aux_path}",
                    local_action=lambda: aux_path.mkdir(exist_ok=True),
                )
            )

        steps += [
            PlannedStep(
                ProvisionStep.UNATTENDED_INSTALL,
                f"Unattended install for {request.username}@{request.hostname}",
                commands.unattended_install(
                    name,
                    request.iso_path,
                    request.hostname,
                    request.username,
                    request.password,
                    aux_path=aux_path,
                ),
            ),
            PlannedStep(
                ProvisionStep.START_VM,
                f"Start VM {name}",
                commands.start_vm(name, self.settings.start_type),
            ),
        ]
        return steps

    def provision(self, request: ProvisionRequest) -> ProvisionResult:
        """Check preconditions, then run every planned step until one fails.

        Raises:
            PreconditionError: Before any side effect, if a precondition fails
        """
        self.check_preconditions(request)

        steps = self.plan(request)
        result = ProvisionResult(vm_name=request.vm_name)
        logger.info("Provisioning VM", vm=request.vm_name, steps=len(steps))

        for index, planned in enumerate(steps):
            outcome = self._run_step(planned)
            result.outcomes.append(outcome)
            if outcome.failed:
                result.outcomes.extend(
                    StepOutcome(
                        step=remaining.step,
                        status=StepStatus.NOT_RUN,
                        command=redact_args(remaining.vbox_args),
                    )
                    for remaining in steps[index + 1:]
                )
                logger.error(
                    "Provisioning stopped",
                    vm=request.vm_name,
                    failed_step=outcome.step.value,
                    error=outcome.message,
                )
                return result

        logger.info("VM provisioned", vm=request.vm_name)
        return result

    def _run_step(self, planned: PlannedStep) -> StepOutcome:
        command = redact_args(planned.vbox_args)
        logger.info("Running step", step=planned.step.value, description=planned.description)

        if planned.local_action is not None:
            try:
                planned.local_action()
            except OSError as e:
                logger.error("Local step failed", step=planned.step.value, error=str(e))
                return StepOutcome(
                    step=planned.step,
                    status=StepStatus.FAILED,
                    message=f"{planned.description} failed: {e}",
                )
            return StepOutcome(step=planned.step, status=StepStatus.SUCCEEDED)

        try:
            completed = self.client.run(planned.vbox_args)
        except VBoxManageError as e:
            return StepOutcome(
                step=planned.step,
                status=StepStatus.FAILED,
                command=command,
                returncode=e.returncode,
                stderr=e.stderr,
                message=str(e),
            )

        logger.debug("Step succeeded", step=planned.step.value, command=command)
        return StepOutcome(
            step=planned.step,
            status=StepStatus.SUCCEEDED,
            command=command,
            returncode=completed.returncode,
        )

    @staticmethod
    def _write_password_file(path: Path) -> None:
        # Fixed disk password, independent of the guest account password
        path.write_text(commands.ENCRYPTION_PASSWORD)
