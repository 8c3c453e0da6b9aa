"""Tests for engine settings and logging configuration."""

import pytest
import structlog
from pydantic import ValidationError as ShapeError

from rdcredit_core.config import EngineSettings, get_settings
from rdcredit_core.logging_config import configure_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("RDCREDIT_ENV", "RDCREDIT_LOG_LEVEL", "RDCREDIT_JSON_LOGS", "RDCREDIT_AUDIT_LOGGING"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestEngineSettings:
    """Settings loaded from the environment."""

    def test_defaults(self, clean_env):
        settings = EngineSettings(_env_file=None)

        assert settings.env == "development"
        assert settings.log_level == "INFO"
        assert settings.json_logs is None
        assert settings.use_json_logs is False
        assert settings.audit_logging is True
        assert settings.is_production is False

    def test_env_vars(self, clean_env):
        clean_env.setenv("RDCREDIT_ENV", "Production")
        clean_env.setenv("RDCREDIT_LOG_LEVEL", "debug")
        clean_env.setenv("RDCREDIT_JSON_LOGS", "true")
        clean_env.setenv("RDCREDIT_AUDIT_LOGGING", "false")

        settings = EngineSettings(_env_file=None)

        assert settings.env == "production"
        assert settings.is_production is True
        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True
        assert settings.audit_logging is False

    def test_invalid_env(self, clean_env):
        with pytest.raises(ShapeError, match="Invalid environment"):
            EngineSettings(env="qa", _env_file=None)

    def test_invalid_log_level(self, clean_env):
        with pytest.raises(ShapeError, match="Invalid log level"):
            EngineSettings(log_level="verbose", _env_file=None)

    def test_get_settings_is_cached(self, clean_env):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, clean_env):
        first = get_settings()
        clean_env.setenv("RDCREDIT_ENV", "test")
        get_settings.cache_clear()

        assert get_settings() is not first
        assert get_settings().env == "test"


class TestConfigureLogging:
    """structlog setup."""

    def test_json_output(self, clean_env, capsys):
        configure_logging(EngineSettings(json_logs=True, _env_file=None))
        structlog.get_logger().info("ping", value=1)

        out = capsys.readouterr().out
        assert '"event": "ping"' in out
        assert '"value": 1' in out
        assert '"timestamp"' in out

    def test_console_output(self, clean_env, capsys):
        configure_logging(EngineSettings(json_logs=False, _env_file=None))
        structlog.get_logger().info("ping", value=1)

        out = capsys.readouterr().out
        assert "ping" in out
        assert "value" in out
        assert not out.startswith("{")

    def test_production_defaults_to_json(self, clean_env, capsys):
        settings = EngineSettings(env="production", _env_file=None)
        assert settings.use_json_logs is True

        configure_logging(settings)
        structlog.get_logger().info("ping")

        assert '"event": "ping"' in capsys.readouterr().out

    def test_explicit_setting_overrides_environment(self, clean_env, capsys):
        settings = EngineSettings(env="production", json_logs=False, _env_file=None)
        assert settings.use_json_logs is False

        configure_logging(settings)
        structlog.get_logger().info("ping")

        out = capsys.readouterr().out
        assert "ping" in out
        assert not out.startswith("{")

    def test_level_filter(self, clean_env, capsys):
        configure_logging(EngineSettings(json_logs=True, log_level="ERROR", _env_file=None))
        logger = structlog.get_logger()
        logger.warning("dropped")
        logger.error("kept")

        out = capsys.readouterr().out
        assert "dropped" not in out
        assert "kept" in out

    def test_uses_cached_settings_by_default(self, clean_env, capsys):
        clean_env.setenv("RDCREDIT_JSON_LOGS", "true")
        get_settings.cache_clear()

        configure_logging()
        structlog.get_logger().info("ping")

        assert '"event": "ping"' in capsys.readouterr().out
