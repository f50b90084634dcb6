"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration."""

    model_config = {"env_prefix": "HRLEDGER_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "HRLEDGER_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    namespace: str = "hrledger"


class AuthConfig(BaseSettings):
    """Session token and cookie configuration."""

    model_config = {"env_prefix": "HRLEDGER_AUTH_"}

    jwt_secret: str = "SECRET"
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    cookie_name: str = "token"
    cookie_max_age_seconds: int = 7 * 24 * 60 * 60


class UploadConfig(BaseSettings):
    """Upload intake limits and staging directory."""

    model_config = {"env_prefix": "HRLEDGER_UPLOAD_"}

    upload_dir: str = "uploads"
    max_upload_mb: int = 5
    allowed_content_types: list[str] = [
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/csv",
    ]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


class ImportDefaults(BaseSettings):
    """Values the record normalizer fills in when a file leaves them blank."""

    model_config = {"env_prefix": "HRLEDGER_IMPORT_"}

    employment_type: str = "Full-time"
    status: str = "Active"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "HRLEDGER_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    backend: Literal["memory", "dynamodb"] = "memory"

    dynamodb: DynamoDBConfig = DynamoDBConfig()
    redis: RedisConfig = RedisConfig()
    auth: AuthConfig = AuthConfig()
    upload: UploadConfig = UploadConfig()
    import_defaults: ImportDefaults = ImportDefaults()

    @property
    def secure_cookies(self) -> bool:
        return self.environment == "prod"
