"""
Command-line interface for the VirtualBox VM provisioner.

    vbox-provision [ISO_PATH] [VM_PATH] [HOSTNAME] [USERNAME] [PASSWORD]

Omitted positional arguments fall back to the configured defaults.
"""

import logging
import shlex
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .exceptions import PreconditionError
from .logging_config import configure_logging
from .models import PlannedStep, ProvisionRequest, ProvisionResult, StepStatus
from .provisioner import VMProvisioner
from .redact import redact_args

app = typer.Typer(
    name="vbox-provision",
    help="Create and start a VirtualBox VM with an unattended Ubuntu install",
    add_completion=False,
)
console = Console()
logger = structlog.get_logger()

STATUS_ICONS = {
    StepStatus.SUCCEEDED: "✅",
    StepStatus.FAILED: "❌",
    StepStatus.NOT_RUN: "⏭️ ",
}


def _plan_table(steps: list[PlannedStep], executable: str) -> Table:
    table = Table(title="Provisioning Plan")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Command", style="green")

    for number, planned in enumerate(steps, start=1):
        if planned.is_local:
            command = f"(local) {planned.description}"
        else:
            command = shlex.join([executable, *redact_args(planned.vbox_args)])
        table.add_row(str(number), planned.step.value, command)
    return table


def _result_table(result: ProvisionResult) -> Table:
    table = Table(title=f"Provisioning Result - VM: {result.vm_name}")
    table.add_column("Step", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Detail", style="yellow")

    for outcome in result.outcomes:
        icon = STATUS_ICONS[outcome.status]
        detail = outcome.message if outcome.failed else ""
        table.add_row(outcome.step.value, f"{icon} {outcome.status.value}", detail)
    return table


@app.command()
def provision(
    iso_path: Optional[str] = typer.Argument(None, help="Installer ISO file"),
    vm_path: Optional[str] = typer.Argument(None, help="VM directory; its basename is the VM name"),
    hostname: Optional[str] = typer.Argument(None, help="Guest hostname"),
    username: Optional[str] = typer.Argument(None, help="Guest account name"),
    password: Optional[str] = typer.Argument(None, help="Guest account password"),
    encrypt: Optional[bool] = typer.Option(
        None, "--encrypt/--no-encrypt", help="Encrypt the VM disk (overrides VBOX_PROV_USE_ENCRYPTION)"
    ),
    aux_dir: Optional[bool] = typer.Option(
        None, "--aux-dir/--no-aux-dir", help="Use an auxiliary install directory (overrides VBOX_PROV_USE_AUX_DIR)"
    ),
    start_type: Optional[str] = typer.Option(None, help="startvm --type value: gui, headless or separate"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the VBoxManage calls without running them"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Create, configure and start one VirtualBox VM."""
    if debug:
        configure_logging(logging.DEBUG)
    elif verbose:
        configure_logging(logging.INFO)
    else:
        configure_logging()

    settings = get_settings()
    overrides = {
        key: value
        for key, value in {
            "use_encryption": encrypt,
            "use_aux_dir": aux_dir,
            "start_type": start_type,
        }.items()
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    # Empty arguments fall back to the defaults as well
    request = ProvisionRequest(
        iso_path=Path(iso_path) if iso_path else settings.default_iso_path,
        vm_path=Path(vm_path) if vm_path else settings.default_vm_path,
        hostname=hostname or settings.default_hostname,
        username=username or settings.default_username,
        password=password or settings.default_password,
    )
    provisioner = VMProvisioner(settings)

    try:
        if dry_run:
            provisioner.check_preconditions(request)
            console.print(_plan_table(provisioner.plan(request), settings.vboxmanage))
            return
        result = provisioner.provision(request)
    except PreconditionError as e:
        logger.info("Precondition failed", path=str(e.path))
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    console.print(_result_table(result))

    if not result.succeeded:
        failure = result.failure
        step = failure.step.value if failure else "unknown"
        message = failure.message if failure else "no steps ran"
        typer.echo(f"Provisioning failed at step {step}: {message}", err=True)
        raise typer.Exit(result.exit_code)

    console.print(f"✅ VM {result.vm_name} created and started")


if __name__ == "__main__":
    app()
