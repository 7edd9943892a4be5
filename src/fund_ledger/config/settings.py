"""Runtime settings read from ``FUND_LEDGER_*`` environment variables."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DEMO_FUND_IDS = ["002834", "021483", "012365", "001092"]


def get_default_data_dir() -> Path:
    """Return ``~/.fund-ledger``."""
    return Path.home() / ".fund-ledger"


class Settings(BaseSettings):
    """Fund ledger configuration; every field can be set as FUND_LEDGER_<NAME>."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FUND_LEDGER_",
    )

    app_name: str = "Fund Ledger"
    app_version: str = "0.1.0"

    # Root for the store file, SQLite database, exports and log file
    data_dir: Optional[Path] = None

    # Overrides the SQLite file under data_dir
    database_url: Optional[str] = None

    # Where the key-value slots live
    store_backend: Literal["sqlite", "json", "memory"] = "sqlite"

    log_level: str = "INFO"
    # File name under data_dir; stdout only when unset
    log_file: Optional[str] = None

    # Quote refresh
    quote_fetch_workers: int = 8
    quote_fetch_timeout_seconds: float = 10.0

    # Transactions older than this are pruned on save; None keeps everything
    transaction_retention_days: Optional[int] = 3

    # Holdings created on first run when the store is empty
    seed_demo_holdings: bool = False
    demo_fund_ids: list[str] = DEFAULT_DEMO_FUND_IDS

    def get_data_dir(self) -> Path:
        """Return the data directory, creating it on first use."""
        path = self.data_dir or get_default_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.get_data_dir() / 'fund_ledger.db'}"

    def get_json_store_path(self) -> Path:
        return self.get_data_dir() / "fund_ledger.json"

    def get_export_dir(self) -> Path:
        """Return the directory for timestamped JSON backups."""
        path = self.get_data_dir() / "exports"
        path.mkdir(parents=True, exist_ok=True)
        return path


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the process-wide settings."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads the environment."""
    global _settings
    _settings = None
