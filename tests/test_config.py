"""
DB Time Service: Configuration Tests
======================================

What:  Tests for Settings defaults, environment overrides, and DatabaseConfig.
"""

import pytest
from pydantic import ValidationError

from dbtime.config import DatabaseConfig, Settings

DB_ENV_VARS = ("DB_USER", "DB_HOST", "DB_NAME", "DB_PASSWORD", "DB_PORT", "SERVER_PORT")


@pytest.fixture
def clean_env(monkeypatch):
    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:

    def test_connection_defaults(self, clean_env):
        cfg = Settings(_env_file=None).database_config()

        assert cfg.user == "postgres"
        assert cfg.host == "db"
        assert cfg.database == "mydatabase"
        assert cfg.password == "mypassword"
        assert cfg.port == 5432

    def test_server_and_pool_defaults(self, clean_env):
        s = Settings(_env_file=None)

        assert s.server_port == 3000
        assert s.db_pool_size == 10
        assert s.db_max_overflow == 0
        assert s.expose_error_details is True


class TestSettingsEnvironment:

    def test_env_overrides(self, clean_env):
        clean_env.setenv("DB_HOST", "postgres.local")
        clean_env.setenv("db_port", "6543")
        clean_env.setenv("SERVER_PORT", "8080")
        clean_env.setenv("EXPOSE_ERROR_DETAILS", "false")

        s = Settings(_env_file=None)

        assert s.database_config().host == "postgres.local"
        assert s.database_config().port == 6543
        assert s.server_port == 8080
        assert s.expose_error_details is False

    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_invalid_port_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, db_port=70000)

    def test_settings_are_frozen(self):
        s = Settings(_env_file=None)
        with pytest.raises(ValidationError):
            s.db_host = "elsewhere"


class TestDatabaseConfig:

    def test_url_from_fields(self):
        url = DatabaseConfig().url

        assert url.drivername == "postgresql+asyncpg"
        assert url.username == "postgres"
        assert url.host == "db"
        assert url.port == 5432
        assert url.database == "mydatabase"

    def test_masked_url_hides_password(self):
        masked = DatabaseConfig(password="hunter2").masked_url()

        assert "hunter2" not in masked
        assert masked == "postgresql+asyncpg://postgres:***@db:5432/mydatabase"

    def test_config_is_immutable(self):
        cfg = DatabaseConfig()
        with pytest.raises(ValidationError):
            cfg.host = "other"
