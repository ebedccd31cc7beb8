"""Connection and logging settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvironmentName = Literal["development", "test", "ci"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "db_echo": False,
    },
    "test": {
        "log_level": "WARNING",
        "db_echo": False,
    },
    "ci": {
        "log_level": "INFO",
        "db_echo": False,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for a database session."""

    model_config = SettingsConfigDict(
        env_prefix="SQLSESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "sqlsession"
    environment: EnvironmentName = "development"
    db_driver: str = "mysql+mysqlconnector"
    db_host: str = "localhost"
    db_port: int | None = None
    db_user: str = "root"
    db_password: SecretStr = SecretStr("")
    db_name: str = ""
    db_echo: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator("db_port", mode="before")
    @classmethod
    def _blank_port_is_default(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()
