"""
Runtime settings for ingestion and the warehouse connection.

Values are read from environment variables; constructor arguments
and CLI flags take precedence over the environment.
"""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from psycopg.conninfo import make_conninfo
from pydantic import BaseModel, Field, SecretStr
from pydantic import ValidationError as PydanticValidationError

from loanboard.exceptions import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_UPSERT_BATCH_SIZE = 100


class IngestionSettings(BaseModel):
    """
    Settings that control a single ingestion run.

    Attributes:
        timeout_seconds: Wall-clock limit for parse + persist
        upsert_batch_size: Records per upsert round-trip
        synonyms_path: Optional YAML file overriding the header synonym table
        reference_timezone: Timezone whose midnight defines "today"
    """

    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    upsert_batch_size: int = Field(DEFAULT_UPSERT_BATCH_SIZE, ge=1)
    synonyms_path: Path | None = None
    reference_timezone: str = "UTC"

    def tzinfo(self) -> ZoneInfo:
        """Resolve the reference timezone."""
        try:
            return ZoneInfo(self.reference_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown timezone '{self.reference_timezone}'"
            ) from e

    @classmethod
    def from_env(cls, **overrides) -> "IngestionSettings":
        """
        Build settings from LOANBOARD_* environment variables.

        Args:
            **overrides: Explicit values; None entries are ignored

        Returns:
            IngestionSettings instance

        Raises:
            ConfigurationError: If a value cannot be parsed or is out of range
        """
        values = {
            "timeout_seconds": os.getenv("LOANBOARD_INGEST_TIMEOUT_SECONDS"),
            "upsert_batch_size": os.getenv("LOANBOARD_UPSERT_BATCH_SIZE"),
            "synonyms_path": os.getenv("LOANBOARD_SYNONYMS_PATH"),
            "reference_timezone": os.getenv("LOANBOARD_REFERENCE_TIMEZONE"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values = {k: v for k, v in values.items() if v not in (None, "")}

        try:
            settings = cls(**values)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid ingestion settings: {e}") from e

        # Fail early on a bad timezone name
        settings.tzinfo()
        return settings


class DatabaseSettings(BaseModel):
    """
    Warehouse connection settings.

    Attributes:
        host: Database host
        port: Database port
        database: Database name
        user: Database user
        password: Database password (required)
        min_size: Minimum pooled connections
        max_size: Maximum pooled connections
        connect_timeout: Seconds to wait for a connection
    """

    host: str = "localhost"
    port: int = Field(5432, gt=0, lt=65536)
    database: str = "loanboard"
    user: str = "loanboard"
    password: SecretStr
    min_size: int = Field(1, ge=0)
    max_size: int = Field(5, ge=1)
    connect_timeout: float = Field(30.0, gt=0)

    def conninfo(self) -> str:
        """libpq connection string."""
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password.get_secret_value(),
            connect_timeout=max(1, int(self.connect_timeout)),
        )

    @classmethod
    def from_env(cls, **overrides) -> "DatabaseSettings":
        """
        Build settings from DB_* environment variables.

        Args:
            **overrides: Explicit values; None entries are ignored

        Raises:
            ConfigurationError: If the password is missing or a value is invalid
        """
        values = {
            "host": os.getenv("DB_HOST"),
            "port": os.getenv("DB_PORT"),
            "database": os.getenv("DB_NAME"),
            "user": os.getenv("DB_USER"),
            "password": os.getenv("DB_PASSWORD"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values = {k: v for k, v in values.items() if v not in (None, "")}

        if "password" not in values:
            raise ConfigurationError(
                "Database password must be provided. "
                "Set DB_PASSWORD or pass --db-password."
            )

        try:
            return cls(**values)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid database settings: {e}") from e
