import os
import logging
from typing import Annotated, List, Literal, Optional
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the environment does not describe a valid configuration."""


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_DB_", env_file=".env", extra="ignore")

    mongo_uri: str = Field(..., min_length=1)
    database_name: str = Field(..., min_length=1)
    max_connecting: int = Field(default=2, gt=0, lt=100)
    max_pool_size: int = Field(default=50, gt=0, lt=100)
    max_idle_time: float = Field(default=60.0, ge=0, description="Seconds a pooled connection may stay idle.")
    timeout: float = Field(default=5.0, gt=0, description="Server selection and socket timeout in seconds.")
    use_transactions: bool = Field(default=False, description="Wrap multi-document writes in a transaction (replica set only).")


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_JWT_", env_file=".env", extra="ignore")

    auth_secret: str = Field(..., min_length=1)
    algorithm: str = "HS256"


class Settings(BaseSettings):
    """Validated application configuration, built once at startup."""
    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    port: int = Field(default=8000, gt=0, lt=65535)
    env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    # Comma separated in the environment
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=list)
    accept_edge_retries: int = Field(default=2, ge=0, le=5)
    db: DatabaseSettings
    jwt: JWTSettings

    @field_validator("log_level", mode="before")
    @classmethod
    def lower_log_level(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("cors_origins")
    @classmethod
    def check_origins(cls, origins: List[str]) -> List[str]:
        for origin in origins:
            if not origin.startswith(("http://", "https://")):
                raise ValueError("Each origins item must be valid url")
        return origins


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """
    Read the configuration from the environment (and `.env` if present).
    Environment variables take precedence over the file.

    Raises:
        ConfigError: if any value is missing or invalid.
    """
    if env_file and not os.path.isfile(env_file):
        logger.info("No .env file found, using environment variables only")

    try:
        return Settings(
            _env_file=env_file,
            db=DatabaseSettings(_env_file=env_file),
            jwt=JWTSettings(_env_file=env_file),
        )
    except ValidationError as e:
        details = "; ".join(
            f"{e.title}.{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigError(f"Invalid or missing config: {details}") from e


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
