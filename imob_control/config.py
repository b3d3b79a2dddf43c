"""Configuration management for imob_control."""

from dataclasses import dataclass, field
from pathlib import Path

from imob_control.exceptions import ConfigurationError

DEFAULT_USERS: dict[str, str] = {
    "admin": "admin123",
    "corretor": "imob2024",
}


@dataclass
class GeminiConfig:
    """Generative model API configuration."""

    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 60.0

    def endpoint(self, action: str = "generateContent") -> str:
        """Get the REST endpoint for a model action."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:{action}"


@dataclass
class StorageConfig:
    """Local persistence configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    storage_key: str = "imobcontrol_data"


@dataclass
class BackupConfig:
    """Backup configuration."""

    backup_dir: Path = field(default_factory=lambda: Path("backups"))
    auto_backup: bool = False
    delay_seconds: float = 5.0


@dataclass
class AppConfig:
    """Main configuration for imob_control."""

    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)
    log_level: str = "INFO"
    users: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_USERS))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        import json
        import os

        gemini = GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ),
            timeout_seconds=float(os.getenv("GEMINI_TIMEOUT", "60")),
        )

        storage = StorageConfig(
            data_dir=Path(os.getenv("IMOB_DATA_DIR", "data")),
            storage_key=os.getenv("IMOB_STORAGE_KEY", "imobcontrol_data"),
        )

        backup = BackupConfig(
            backup_dir=Path(os.getenv("IMOB_BACKUP_DIR", "backups")),
            auto_backup=os.getenv("AUTO_BACKUP", "false").lower() == "true",
            delay_seconds=float(os.getenv("AUTO_BACKUP_DELAY", "5")),
        )

        users_str = os.getenv("IMOB_USERS")
        if users_str:
            try:
                users = json.loads(users_str)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"IMOB_USERS is not valid JSON: {e}") from e
            if not isinstance(users, dict):
                raise ConfigurationError("IMOB_USERS must be a JSON object of username: password")
        else:
            users = dict(DEFAULT_USERS)

        return cls(
            gemini=gemini,
            storage=storage,
            backup=backup,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            users=users,
        )
