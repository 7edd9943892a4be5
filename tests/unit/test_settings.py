"""
Unit tests for settings and logging setup.

Tests cover:
- Environment variable prefix
- Derived paths under the data directory
- Rotating log file handler
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from fund_ledger.config import Settings, reset_settings, set_settings, setup_logging


@pytest.fixture(autouse=True)
def _reset():
    yield
    reset_settings()


class TestSettings:
    """Tests for Settings."""

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FUND_LEDGER_STORE_BACKEND", "json")
        monkeypatch.setenv("FUND_LEDGER_TRANSACTION_RETENTION_DAYS", "7")
        monkeypatch.setenv("FUND_LEDGER_DATA_DIR", str(tmp_path))

        settings = Settings()

        assert settings.store_backend == "json"
        assert settings.transaction_retention_days == 7
        assert settings.get_json_store_path() == tmp_path / "fund_ledger.json"

    def test_database_url_under_data_dir(self, tmp_path):
        settings = Settings(data_dir=tmp_path / "data")

        assert settings.get_database_url() == f"sqlite:///{tmp_path / 'data' / 'fund_ledger.db'}"
        assert (tmp_path / "data").is_dir()

    def test_explicit_database_url(self, tmp_path):
        settings = Settings(data_dir=tmp_path, database_url="sqlite:///:memory:")

        assert settings.get_database_url() == "sqlite:///:memory:"

    def test_export_dir_created(self, tmp_path):
        assert Settings(data_dir=tmp_path).get_export_dir() == tmp_path / "exports"
        assert (tmp_path / "exports").is_dir()

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError):
            Settings(store_backend="redis")


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler_added_once(self, tmp_path):
        set_settings(Settings(data_dir=tmp_path, log_file="ledger.log"))
        package_logger = logging.getLogger("fund_ledger")

        try:
            setup_logging("debug")
            setup_logging("debug")

            handlers = [h for h in package_logger.handlers if isinstance(h, RotatingFileHandler)]
            assert len(handlers) == 1
            assert package_logger.level == logging.DEBUG

            logging.getLogger("fund_ledger.tests").info("hello")
            handlers[0].flush()
            assert "hello" in (tmp_path / "ledger.log").read_text(encoding="utf-8")
        finally:
            for handler in list(package_logger.handlers):
                package_logger.removeHandler(handler)
                handler.close()
            package_logger.setLevel(logging.NOTSET)
