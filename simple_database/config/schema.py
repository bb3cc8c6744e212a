"""
Configuration schema definition using Pydantic.

This module defines the declarative configuration schema that serves as
the single source of truth for database configuration loaded from the
environment.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import DEFAULT_POOL_SIZE, DEFAULT_CONNECTION_TIMEOUT, DEFAULT_AUTO_COMMIT
from ..models import DatabaseType


class ConfigSchema(BaseModel):
    """
    Declarative configuration schema.

    Each field is read from the environment variable named in its
    ``env_var`` metadata. A database is described either by a single
    DATABASE_URL or by DATABASE_TYPE plus DATABASE_NAME and friends.
    """

    database_url: Optional[str] = Field(
        None,
        description="Full database URL (overrides the individual connection fields)",
        json_schema_extra={
            "env_var": "DATABASE_URL",
            "sensitive": True,
        }
    )

    database_type: Optional[str] = Field(
        None,
        description="Backend type: sqlite, mysql or postgresql",
        json_schema_extra={
            "env_var": "DATABASE_TYPE",
        }
    )

    database_name: Optional[str] = Field(
        None,
        description="Database name, or file path for SQLite",
        json_schema_extra={
            "env_var": "DATABASE_NAME",
        }
    )

    database_host: Optional[str] = Field(
        None,
        description="Database server hostname",
        json_schema_extra={
            "env_var": "DATABASE_HOST",
        }
    )

    database_port: int = Field(
        0,
        ge=0,
        le=65535,
        description="Database server port (0 selects the backend default)",
        json_schema_extra={
            "env_var": "DATABASE_PORT",
        }
    )

    database_user: Optional[str] = Field(
        None,
        description="Database login user",
        json_schema_extra={
            "env_var": "DATABASE_USER",
        }
    )

    database_password: Optional[str] = Field(
        None,
        description="Database login password",
        json_schema_extra={
            "env_var": "DATABASE_PASSWORD",
            "sensitive": True,
        }
    )

    pool_size: int = Field(
        DEFAULT_POOL_SIZE,
        ge=0,
        description="Connections opened when the pool is created",
        json_schema_extra={
            "env_var": "DATABASE_POOL_SIZE",
        }
    )

    connection_timeout: int = Field(
        DEFAULT_CONNECTION_TIMEOUT,
        ge=1,
        description="Connect timeout in milliseconds",
        json_schema_extra={
            "env_var": "DATABASE_CONNECTION_TIMEOUT",
        }
    )

    auto_commit: bool = Field(
        DEFAULT_AUTO_COMMIT,
        description="Auto-commit flag applied to new connections",
        json_schema_extra={
            "env_var": "DATABASE_AUTO_COMMIT",
        }
    )

    @field_validator('auto_commit', mode='before')
    @classmethod
    def parse_bool(cls, v: Any) -> bool:
        """Parse boolean from string values."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            v_lower = v.strip().lower()
            if v_lower in ('1', 'true', 'yes', 'on'):
                return True
            elif v_lower in ('0', 'false', 'no', 'off'):
                return False
            else:
                raise ValueError(f"Invalid boolean value: {v}")
        return bool(v)

    @field_validator('database_type')
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        """Reject backend names that no driver supports."""
        if v is None:
            return v
        return DatabaseType.from_name(v).name.lower()

    @model_validator(mode='after')
    def require_target(self) -> "ConfigSchema":
        """A URL or a type plus database name must identify the database."""
        if self.database_url:
            return self
        if not self.database_type or not self.database_name:
            raise ValueError(
                "Set DATABASE_URL, or DATABASE_TYPE together with DATABASE_NAME"
            )
        return self

    model_config = {
        "validate_assignment": True,
        "extra": "forbid"
    }
