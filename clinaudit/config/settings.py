"""Application settings and configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

STORE_BACKENDS = ("auto", "remote", "local", "memory")


class StoreSettings(BaseSettings):
    """Audit store configuration."""

    backend: str = Field(
        default="auto",
        description="Store backend: auto, remote, local, or memory",
    )
    endpoint: Optional[str] = Field(
        default=None, description="Remote list/replace_all endpoint URL"
    )
    timeout: float = Field(default=10.0, description="Remote request timeout")
    local_path: Path = Field(
        default=Path("data/local_storage.json"),
        description="Key-value file used by the local store",
    )
    storage_key: str = Field(
        default="audits_all_v2", description="Key holding the audit list"
    )

    @field_validator("backend")
    @classmethod
    def check_backend(cls, v: str) -> str:
        """Ensure backend is a known name."""
        v = v.lower()
        if v not in STORE_BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(STORE_BACKENDS)}")
        return v


class DatabaseSettings(BaseSettings):
    """Database configuration for the reference endpoint."""

    url: str = Field(
        default="sqlite:///data/clinaudit.db",
        description="SQLAlchemy connection URL",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Max overflow connections")
    echo: bool = Field(default=False, description="Echo SQL queries")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLINAUDIT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    app_name: str = "ClinAudit"
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format: json or text")

    # Reference endpoint
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    store: StoreSettings = Field(default_factory=StoreSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Environment wins over ``.env``, which wins over ``default.yaml``."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            InitSettingsSource(settings_cls, init_kwargs=load_config()),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_config(config_path: Optional[Path] = None) -> dict[str, Any]:
    """Load configuration from YAML files."""
    import yaml

    if config_path is None:
        config_path = Path("config")

    config: dict[str, Any] = {}

    config_file = config_path / "default.yaml"
    if config_file.exists():
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    return config
