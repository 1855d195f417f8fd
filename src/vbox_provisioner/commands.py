"""Argument builders for every VBoxManage call the provisioner makes.

Each function returns the argument list that follows the ``VBoxManage``
executable. Values that are fixed for every VM live here as constants.
"""

from pathlib import Path

OS_TYPE = "Ubuntu_64"
DISK_FORMAT = "VMDK"
DISK_SIZE_MB = 20480
MEMORY_MB = 2048
VRAM_MB = 32
CPU_COUNT = 2

SATA_CONTROLLER = "SATA Controller"
SATA_CHIPSET = "IntelAhci"
IDE_CONTROLLER = "IDE Controller"
IDE_CHIPSET = "PIIX4"

BOOT_ORDER = ("dvd", "disk", "none", "none")

ENCRYPTION_CIPHER = "AES-XTS256-PLAIN64"
ENCRYPTION_PASSWORD_ID = "vm-disk"
ENCRYPTION_PASSWORD = "secret"

COUNTRY = "US"
LOCALE = "en_US"
TIME_ZONE = "UTC"
POST_INSTALL_COMMAND = "apt-get update && apt-get --yes upgrade"


def create_vm(vm_name: str, basefolder: Path) -> list[str]:
    return [
        "createvm",
        "--name", vm_name,
        "--ostype", OS_TYPE,
        "--register",
        "--basefolder", str(basefolder),
    ]


def create_disk(disk_path: Path) -> list[str]:
    return [
        "createmedium", "disk",
        "--filename", str(disk_path),
        "--size", str(DISK_SIZE_MB),
        "--format", DISK_FORMAT,
    ]


def add_storage_controller(vm_name: str, name: str, bus: str, chipset: str) -> list[str]:
    return [
        "storagectl", vm_name,
        "--name", name,
        "--add", bus,
        "--controller", chipset,
    ]


def attach_medium(
    vm_name: str, controller: str, medium_type: str, medium: Path, port: int = 0, device: int = 0
) -> list[str]:
    return [
        "storageattach", vm_name,
        "--storagectl", controller,
        "--port", str(port),
        "--device", str(device),
        "--type", medium_type,
        "--medium", str(medium),
    ]


def add_sata_controller(vm_name: str) -> list[str]:
    return add_storage_controller(vm_name, SATA_CONTROLLER, "sata", SATA_CHIPSET)


def attach_disk(vm_name: str, disk_path: Path) -> list[str]:
    return attach_medium(vm_name, SATA_CONTROLLER, "hdd", disk_path)


def add_ide_controller(vm_name: str) -> list[str]:
    return add_storage_controller(vm_name, IDE_CONTROLLER, "ide", IDE_CHIPSET)


def attach_iso(vm_name: str, iso_path: Path) -> list[str]:
    return attach_medium(vm_name, IDE_CONTROLLER, "dvddrive", iso_path)


def set_memory(vm_name: str) -> list[str]:
    return ["modifyvm", vm_name, "--memory", str(MEMORY_MB), "--vram", str(VRAM_MB)]


def enable_ioapic(vm_name: str) -> list[str]:
    return ["modifyvm", vm_name, "--ioapic", "on"]


def set_boot_order(vm_name: str) -> list[str]:
    args = ["modifyvm", vm_name]
    for slot, device in enumerate(BOOT_ORDER, start=1):
        args += [f"--boot{slot}", device]
    return args


def set_cpus(vm_name: str) -> list[str]:
    return ["modifyvm", vm_name, "--cpus", str(CPU_COUNT)]


def encrypt_disk(disk_path: Path, password_file: Path) -> list[str]:
    return [
        "encryptmedium", str(disk_path),
        "--newpassword", str(password_file),
        "--cipher", ENCRYPTION_CIPHER,
        "--newpasswordid", ENCRYPTION_PASSWORD_ID,
    ]


def unattended_install(
    vm_name: str,
    iso_path: Path,
    hostname: str,
    username: str,
    password: str,
    aux_path: Path | None = None,
) -> list[str]:
    """Build the unattended install call.

    The auxiliary base path is only passed when one is given; VBoxManage
    treats it as a prefix, so it carries a trailing separator.
    """
    args = [
        "unattended", "install", vm_name,
        "--iso", str(iso_path),
        "--user", username,
        "--password", password,
        "--country", COUNTRY,
        "--locale", LOCALE,
        "--time-zone", TIME_ZONE,
        "--hostname", hostname,
        "--post-install-command", POST_INSTALL_COMMAND,
    ]
    if aux_path is not None:
        args += ["--auxiliary-base-path", f"{aux_path}/"]
    return args


def start_vm(vm_name: str, start_type: str | None = None) -> list[str]:
    args = ["startvm", vm_name]
    if start_type:
        args += ["--type", start_type]
    return args
