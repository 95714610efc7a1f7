from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path.home() / ".config" / "remotemount"


class Settings(BaseSettings):
    # Paths
    base_dir: Path = Path.home() / "remote"  # Mount points live under here
    hosts_file: Optional[Path] = None  # Defaults to <base_dir>/.hosts

    # External commands
    mount_command: str = "sshfs"
    mount_options: List[str] = ["ServerAliveCountMax=3", "ServerAliveInterval=10"]
    mount_list_command: List[str] = ["mount"]

    # Status view
    color: bool = True
    line_width: int = 80

    # Logging
    log_level: str = "WARNING"
    log_file_path: str = ""  # Empty disables the file log
    log_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_prefix="REMOTEMOUNT_",
        env_file=str(CONFIG_DIR / "settings.env"),
        extra="ignore",
    )

    @property
    def mount_base(self) -> Path:
        """Absolute, symlink-free base dir, comparable with `mount` output."""
        return self.base_dir.expanduser().resolve()

    @property
    def hosts_path(self) -> Path:
        """The hosts file to read, explicit or derived from the base dir."""
        if self.hosts_file is not None:
            return self.hosts_file.expanduser()
        return self.mount_base / ".hosts"

    @property
    def log_directory(self) -> Optional[Path]:
        """Returns the log directory as a Path, or None without a file log"""
        if not self.log_file_path:
            return None
        return Path(self.log_file_path).expanduser().parent
