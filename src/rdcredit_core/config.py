"""Runtime settings for the credit engine.

Settings cover how the engine reports what it does (logging), never the
credit rules themselves; those live in ``credit_rules``.

Usage:
    from rdcredit_core.config import get_settings

    settings = get_settings()
    if settings.audit_logging:
        ...

Environment Variables:
    RDCREDIT_ENV: Environment name (development, staging, production, test)
    RDCREDIT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    RDCREDIT_JSON_LOGS: Render log events as JSON lines (default: true in production)
    RDCREDIT_AUDIT_LOGGING: Emit a log event for every calculation step
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Root settings for the R&D credit engine."""

    model_config = SettingsConfigDict(
        env_prefix="RDCREDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: Optional[bool] = Field(
        default=None,
        description="Render log events as JSON (default: only in production)",
    )
    audit_logging: bool = Field(
        default=True,
        description="Log each calculation step as it is recorded in the audit trail",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def use_json_logs(self) -> bool:
        """Explicit json_logs setting, otherwise JSON only in production."""
        if self.json_logs is None:
            return self.is_production
        return self.json_logs


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached engine settings loaded from the environment."""
    return EngineSettings()
