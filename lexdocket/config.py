"""Configuration management with Pydantic and XDG base directory support."""

import os
import sys
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ReminderChannelName = Literal["email", "sms", "notification", "all"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME directory, defaulting to ~/.config."""
    xdg_config = os.getenv("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


class Settings(BaseSettings):
    """LexDocket configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXDOCKET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data directories
    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/lexdocket)",
    )

    config_dir: Path | None = Field(
        default=None,
        description="Override config directory (defaults to XDG_CONFIG_HOME/lexdocket)",
    )

    timezone: str = Field(
        default="Europe/Athens",
        description="IANA timezone used to decide what 'today' is for overdue and reminders",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Root logging level configured by the CLI",
    )

    # Audit settings
    audit_enabled: bool = Field(
        default=True,
        description="Record every committed transition in the append-only ledger",
    )

    # Rules
    rules_dir: Path | None = Field(
        default=None,
        description="Directory holding court rule packs (defaults to the bundled packs)",
    )

    # Lifecycle cascades
    discussion_followup_working_days: int = Field(
        default=5,
        ge=0,
        description="Working days after a discussed hearing for the addition/rebuttal deadline",
    )

    revival_days: int = Field(
        default=90,
        ge=0,
        description="Calendar days after cancellation for the case revival deadline",
    )

    urgent_threshold_days: int = Field(
        default=3,
        ge=0,
        description="Deadlines due within this many days are flagged urgent",
    )

    # Reminders
    default_reminder_offsets: list[int] = Field(
        default_factory=lambda: [7, 3, 1],
        description="Days-before offsets attached to deadlines created from the CLI",
    )

    default_reminder_channel: ReminderChannelName = Field(
        default="notification",
        description="Channel used for the default reminders",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)
    _data_dir_warning_emitted: bool = PrivateAttr(default=False)

    @field_validator("default_reminder_offsets")
    @classmethod
    def _check_offsets(cls, value: list[int]) -> list[int]:
        if any(offset < 0 for offset in value):
            raise ValueError("Reminder offsets must be zero or positive")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def get_tzinfo(self) -> ZoneInfo:
        """Return the configured timezone."""
        return ZoneInfo(self.timezone)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self.data_dir:
            data_dir = self.data_dir
            data_dir.mkdir(parents=True, exist_ok=True)
            return data_dir

        if self._resolved_data_dir is not None:
            return self._resolved_data_dir

        primary_dir = get_xdg_data_home() / "lexdocket"
        try:
            primary_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = Path.cwd() / ".lexdocket-data"
            fallback.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = fallback
            if not self._data_dir_warning_emitted:
                print(
                    f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                    f"Using local '{fallback}' instead. Pass --data-dir to override.",
                    file=sys.stderr,
                )
                self._data_dir_warning_emitted = True
            return fallback

    def get_config_dir(self) -> Path:
        """Get the config directory, creating if necessary."""
        if self.config_dir:
            config_dir = self.config_dir
        else:
            config_dir = get_xdg_config_home() / "lexdocket"

        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    def get_store_path(self) -> Path:
        """Get path to the hearing/deadline record store."""
        return self.get_data_dir() / "records.jsonl"

    def get_audit_path(self) -> Path:
        """Get path to audit ledger file."""
        return self.get_data_dir() / "audit.jsonl"

    def get_rules_dir(self) -> Path:
        """Return the rule pack directory, falling back to the bundled packs."""
        if self.rules_dir is not None:
            return self.rules_dir
        return Path(__file__).parent / "rules"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set global settings instance (for testing or CLI overrides)."""
    global _settings
    _settings = settings
