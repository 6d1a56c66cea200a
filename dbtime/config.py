"""
DB Time Service: Application Configuration
============================================

What:  Centralized configuration using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types and ranges, and exposes a frozen `settings` object.
Who:   Read by the application factory and the process entry point.
When:  Loaded once at import time; never mutated afterwards.

Connection defaults target a PostgreSQL container reachable as host `db`
on port 5432 (database `mydatabase`, user `postgres`).
"""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Async driver understood by SQLAlchemy's create_async_engine
DRIVER_NAME = "postgresql+asyncpg"


class DatabaseConfig(BaseModel):
    """
    Immutable connection parameters for the PostgreSQL server.

    Built once at startup (see Settings.database_config) and handed to the
    DatabaseClient constructor.
    """

    model_config = {"frozen": True}

    user: str = "postgres"
    host: str = "db"
    database: str = "mydatabase"
    password: str = "mypassword"
    port: int = Field(default=5432, ge=1, le=65535)

    @property
    def url(self) -> URL:
        """SQLAlchemy URL assembled from the five connection fields."""
        return URL.create(
            drivername=DRIVER_NAME,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def masked_url(self) -> str:
        """URL rendered for logs, with the password replaced by ***."""
        return self.url.render_as_string(hide_password=True)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default, so the service starts with no environment at
    all. Attributes are grouped by concern.
    """

    # ── Database connection ───────────────────────────────────────────────
    db_user: str = Field(default="postgres")
    db_host: str = Field(default="db")
    db_name: str = Field(default="mydatabase")
    db_password: str = Field(default="mypassword")
    db_port: int = Field(default=5432, ge=1, le=65535)

    # ── Connection pool ───────────────────────────────────────────────────
    # Upper bound on open connections is db_pool_size + db_max_overflow
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=0, ge=0, le=50)
    # Seconds to wait for a free pooled connection
    db_pool_timeout: float = Field(default=30.0, gt=0)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # When False, 500 responses carry a generic body and the database error
    # is only written to the log
    expose_error_details: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DB_HOST and db_host both work
        "frozen": True,
        "extra": "ignore",
    }

    def database_config(self) -> DatabaseConfig:
        """Build the immutable connection record from the db_* fields."""
        return DatabaseConfig(
            user=self.db_user,
            host=self.db_host,
            database=self.db_name,
            password=self.db_password,
            port=self.db_port,
        )


# Default instance, used when create_app() is called without settings
settings = Settings()
