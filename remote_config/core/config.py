"""
Application configuration management
"""
import json
from typing import Any, List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Ensure repository .env values win over stale exported shell variables.
load_dotenv(override=True)

VALID_STORE_BACKENDS = {"dynamodb", "sql"}
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings"""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "remote-config"
    ENVIRONMENT: str = "production"

    # Store selection
    STORE_BACKEND: str = "dynamodb"  # dynamodb | sql

    # DynamoDB
    CONTENT_TABLE_NAME: str = ""
    AWS_REGION: Optional[str] = None
    DYNAMODB_ENDPOINT_URL: Optional[str] = None
    STORE_CONNECT_TIMEOUT_SECONDS: float = 3.0
    STORE_READ_TIMEOUT_SECONDS: float = 5.0

    # SQL
    DATABASE_URL: str = "sqlite:///./remote_config.db"

    # Claims forwarded by the upstream authentication layer
    AUTH_ROLE_HEADER: str = "X-Auth-Role"
    AUTH_SUBJECT_HEADER: str = "X-Auth-Subject"
    ADMIN_ROLE: str = "admin"

    # Read path
    CONFIG_CACHE_MAX_AGE_SECONDS: int = 300

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        env = str(v or "").strip()
        if not env:
            raise ValueError('ENVIRONMENT cannot be empty')
        return env

    @field_validator('STORE_BACKEND')
    @classmethod
    def validate_store_backend(cls, v):
        backend = str(v or "").strip().lower()
        if backend not in VALID_STORE_BACKENDS:
            raise ValueError(f'STORE_BACKEND must be one of: {", ".join(sorted(VALID_STORE_BACKENDS))}')
        return backend

    @field_validator('AWS_REGION', 'DYNAMODB_ENDPOINT_URL')
    @classmethod
    def blank_as_none(cls, v):
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator('STORE_CONNECT_TIMEOUT_SECONDS', 'STORE_READ_TIMEOUT_SECONDS')
    @classmethod
    def validate_store_timeouts(cls, v):
        if float(v) <= 0:
            raise ValueError('Store timeouts must be positive')
        return float(v)

    @field_validator('CONFIG_CACHE_MAX_AGE_SECONDS')
    @classmethod
    def validate_cache_max_age(cls, v):
        if int(v) < 0:
            raise ValueError('CONFIG_CACHE_MAX_AGE_SECONDS cannot be negative')
        return int(v)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v or "INFO").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(sorted(VALID_LOG_LEVELS))}')
        return level

    @staticmethod
    def _parse_str_list(value: Any) -> List[str]:
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        if value is None:
            return []
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith('[') and stripped.endswith(']'):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(',') if item.strip()]
        return [str(value).strip()] if str(value).strip() else []

    def get_cors_origins(self) -> List[str]:
        return self._parse_str_list(self.CORS_ORIGINS)

    def cache_control_header(self) -> str:
        return f"public, max-age={self.CONFIG_CACHE_MAX_AGE_SECONDS}"


# Global settings instance
settings = Settings()
