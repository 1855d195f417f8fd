"""Configuration management for the VM provisioner."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RELEASE = "ubuntu-20.04-desktop-amd64"


class Settings(BaseSettings):
    """Provisioner settings loaded from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="VBOX_PROV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # VirtualBox CLI
    vboxmanage: str = Field(default="VBoxManage", description="VBoxManage executable name or path")
    start_type: str | None = Field(
        default=None, description="Optional startvm --type value (gui, headless, separate)"
    )

    # Feature flags
    use_encryption: bool = Field(default=False, description="Encrypt the VM disk after attaching it")
    use_aux_dir: bool = Field(
        default=False, description="Stage unattended-install files in an auxiliary directory"
    )

    # Positional argument defaults
    default_iso_path: Path = Field(
        default_factory=lambda: Path.home() / "iso" / f"{DEFAULT_RELEASE}.iso",
        description="ISO used when none is given",
    )
    default_vm_path: Path = Field(
        default_factory=lambda: Path.home() / "vm" / DEFAULT_RELEASE,
        description="VM path used when none is given",
    )
    default_hostname: str = Field(default="example", description="Guest hostname")
    default_username: str = Field(default="user", description="Guest account name")
    default_password: str = Field(default="secret", description="Guest account password")


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
