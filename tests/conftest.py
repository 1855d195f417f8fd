"""Pytest fixtures for VM provisioner tests."""

import os
import subprocess
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from vbox_provisioner.config import Settings
from vbox_provisioner.models import ProvisionRequest
from vbox_provisioner.vboxmanage import VBoxManageClient


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Drop any logging configuration a CLI test bound to its own streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep host VBOX_PROV_* variables and .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("VBOX_PROV_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> Settings:
    """Create test settings with every flag off."""
    return Settings(
        vboxmanage="VBoxManage",
        use_encryption=False,
        use_aux_dir=False,
    )


@pytest.fixture
def iso_file(tmp_path: Path) -> Path:
    """Create a placeholder installer ISO."""
    iso = tmp_path / "iso" / "x.iso"
    iso.parent.mkdir()
    iso.write_bytes(b"\x00" * 16)
    return iso


@pytest.fixture
def vms_dir(tmp_path: Path) -> Path:
    """Create the directory that holds VMs."""
    path = tmp_path / "vms"
    path.mkdir()
    return path


@pytest.fixture
def request_for(iso_file: Path, vms_dir: Path) -> ProvisionRequest:
    """Create a valid provisioning request."""
    return ProvisionRequest(
        iso_path=iso_file,
        vm_path=vms_dir / "myvm",
        hostname="host1",
        username="alice",
        password="pw1",
    )


def completed(args: list[str], returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args, returncode, stdout="", stderr=stderr)


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock VBoxManage client whose calls all succeed."""
    client = MagicMock(spec=VBoxManageClient)
    client.run.side_effect = lambda args: completed(list(args))
    return client
