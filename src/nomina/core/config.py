"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class MySQLConfig(BaseSettings):
    """MySQL storage for the batch (nomina) and detail (detalle) tables."""

    model_config = {"env_prefix": "NOMINA_MYSQL_"}

    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "nomina"
    batch_table: str = "nomina"
    detail_table: str = "detalle"
    pool_size: int = 5
    timeout: float = 30.0  # seconds per storage phase

    def connect_kwargs(self) -> dict[str, object]:
        """Keyword arguments for mysql.connector.connect()."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "connection_timeout": int(self.timeout),
        }


class UploadConfig(BaseSettings):
    """Upload handling configuration."""

    model_config = {"env_prefix": "NOMINA_UPLOAD_"}

    directory: str = "uploads"


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = {"env_prefix": "NOMINA_SERVER_"}

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "NOMINA_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    # Reject malformed amounts, counts and dates instead of storing NaN/garbage.
    strict_parsing: bool = False
    # Roll back the header row when the detail insert fails.
    atomic_insert: bool = False

    mysql: MySQLConfig = MySQLConfig()
    upload: UploadConfig = UploadConfig()
    server: ServerConfig = ServerConfig()
