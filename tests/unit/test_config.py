"""Unit tests for configuration loading."""

import pytest

from src.services.config import Settings

pytestmark = pytest.mark.unit


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Without environment or .env the documented defaults apply."""
        monkeypatch.chdir(tmp_path)
        for name in ("DATABASE_URL", "LOCALE", "LEDGER_EXTERNAL_PAYMENTS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.database_url == "sqlite:///./finance.db"
        assert settings.locale == "pt_BR"
        assert settings.ledger_external_payments is False
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://finance@localhost/finance")
        monkeypatch.setenv("LEDGER_EXTERNAL_PAYMENTS", "true")
        monkeypatch.setenv("LOCALE", "en_US")

        settings = Settings()

        assert settings.database_url == "postgresql://finance@localhost/finance"
        assert settings.ledger_external_payments is True
        assert settings.locale == "en_US"

    def test_env_file_is_read(self, monkeypatch, tmp_path):
        """Values from .env apply when the variable is not exported."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("LOG_FILE", raising=False)
        (tmp_path / ".env").write_text("LOG_FILE=/var/log/finance.log\nUNRELATED=1\n")

        settings = Settings()

        assert settings.log_file == "/var/log/finance.log"
