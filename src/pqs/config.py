"""
PQS (Prefix Query Service) Configuration

Configuration management for the query service using Pydantic Settings.
All values can be set via environment variables (prefix ``PQS_``) or a .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class PQSConfig(BaseSettings):
    """
    Query Service Configuration

    Example: PQS_BACKEND=mysql PQS_MYSQL_PORT=33061 uvicorn src.pqs.service.query_service:app
    """

    # ========== Service ==========
    host: str = Field(default="0.0.0.0", description="Service host address")
    port: int = Field(default=8010, description="Service port")

    # ========== Backend ==========
    backend: str = Field(
        default="memory",
        description="Table store backend: memory or mysql",
    )

    mysql_host: str = Field(default="127.0.0.1")
    mysql_port: int = Field(default=3306)
    mysql_user: str = Field(default="root")
    mysql_password: str = Field(default="")
    mysql_db: str = Field(default="pq_db")

    # ========== Table layout ==========
    partition_column: str = Field(
        default="PartitionKey",
        description="Column holding the partition key",
    )
    row_key_column: str = Field(
        default="RowKey",
        description="Column holding the row key",
    )

    # ========== Logging ==========
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    class Config:
        env_prefix = "PQS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


config = PQSConfig()


def get_config() -> PQSConfig:
    """Get the global configuration instance."""
    return config
