"""
Environment configuration management module.

This module provides a centralized Environment manager class that loads,
validates, and serves the database configuration for the application.
It uses the schema-driven ConfigLoader for validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..database.config import create_database_config, parse_database_url
from ..exceptions import ConfigurationError
from ..models import DatabaseConfig, DatabaseType
from .loader import ConfigLoader
from .schema import ConfigSchema

logger = logging.getLogger(__name__)

# Module-level singleton instance
_ENV: Optional["Env"] = None


class ConfigError(ConfigurationError):
    """Raised when environment configuration validation fails."""
    pass


@dataclass(frozen=True)
class Env:
    """Immutable configuration container for environment variables."""

    DATABASE_URL: Optional[str] = None
    DATABASE_TYPE: Optional[str] = None
    DATABASE_NAME: Optional[str] = None
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: int = 0
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_POOL_SIZE: int = ConfigSchema.model_fields["pool_size"].default
    DATABASE_CONNECTION_TIMEOUT: int = ConfigSchema.model_fields["connection_timeout"].default
    DATABASE_AUTO_COMMIT: bool = ConfigSchema.model_fields["auto_commit"].default

    @staticmethod
    def load(overrides: Optional[Mapping[str, Any]] = None) -> "Env":
        """
        Load configuration from all sources with precedence handling.

        Args:
            overrides: Optional mapping of env var names to values

        Returns:
            Configured Env instance

        Raises:
            ConfigError: If required fields are missing or invalid
        """
        global _ENV

        try:
            config = ConfigLoader.load(schema=ConfigSchema, overrides=overrides)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        _ENV = Env(
            DATABASE_URL=config.database_url,
            DATABASE_TYPE=config.database_type,
            DATABASE_NAME=config.database_name,
            DATABASE_HOST=config.database_host,
            DATABASE_PORT=config.database_port,
            DATABASE_USER=config.database_user,
            DATABASE_PASSWORD=config.database_password,
            DATABASE_POOL_SIZE=config.pool_size,
            DATABASE_CONNECTION_TIMEOUT=config.connection_timeout,
            DATABASE_AUTO_COMMIT=config.auto_commit,
        )

        logger.debug("Environment configuration loaded successfully")
        return _ENV

    @staticmethod
    def current() -> "Env":
        """
        Return the globally-initialized Env instance.

        Raises:
            ConfigError: If Env.load() has not been called yet
        """
        if _ENV is None:
            raise ConfigError("Environment not initialized. Call Env.load() first.")
        return _ENV

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Env":
        """
        Create Env instance from mapping (useful for testing).

        Unlike ``load`` this neither reads the process environment nor
        updates the singleton.

        Raises:
            ConfigError: If the mapping does not identify a database or holds invalid values
        """
        try:
            config = ConfigSchema(**{
                field_name: mapping[field_info.json_schema_extra["env_var"]]
                for field_name, field_info in ConfigSchema.model_fields.items()
                if mapping.get(field_info.json_schema_extra["env_var"]) not in (None, "")
            })
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return cls(
            DATABASE_URL=config.database_url,
            DATABASE_TYPE=config.database_type,
            DATABASE_NAME=config.database_name,
            DATABASE_HOST=config.database_host,
            DATABASE_PORT=config.database_port,
            DATABASE_USER=config.database_user,
            DATABASE_PASSWORD=config.database_password,
            DATABASE_POOL_SIZE=config.pool_size,
            DATABASE_CONNECTION_TIMEOUT=config.connection_timeout,
            DATABASE_AUTO_COMMIT=config.auto_commit,
        )

    def to_database_config(self) -> DatabaseConfig:
        """
        Build a DatabaseConfig from this environment.

        DATABASE_URL takes precedence over the individual connection fields;
        pool settings always come from their own variables.

        Raises:
            ConfigError: If the values do not form a valid configuration
        """
        if self.DATABASE_URL:
            parsed = parse_database_url(self.DATABASE_URL)
            if parsed is None:
                raise ConfigError("DATABASE_URL is not a valid database URL")
            db_type, database = parsed.type, parsed.database
            host, port = parsed.host, parsed.port
            username = parsed.username if parsed.username is not None else self.DATABASE_USER
            password = parsed.password if parsed.password is not None else self.DATABASE_PASSWORD
        else:
            db_type = DatabaseType.from_name(self.DATABASE_TYPE) if self.DATABASE_TYPE else None
            database = self.DATABASE_NAME
            host, port = self.DATABASE_HOST, self.DATABASE_PORT
            username, password = self.DATABASE_USER, self.DATABASE_PASSWORD

        config = create_database_config(
            db_type,
            database,
            host=host,
            port=port,
            username=username,
            password=password,
            pool_size=self.DATABASE_POOL_SIZE,
            connection_timeout=self.DATABASE_CONNECTION_TIMEOUT,
            auto_commit=self.DATABASE_AUTO_COMMIT,
        )
        if config is None:
            raise ConfigError("Environment does not describe a valid database configuration")
        return config

    def mask(self) -> dict:
        """
        Return masked version for safe logging (hides sensitive values).

        Returns:
            Dictionary with sensitive values masked
        """
        return {
            "DATABASE_URL": "***" if self.DATABASE_URL else None,
            "DATABASE_TYPE": self.DATABASE_TYPE,
            "DATABASE_NAME": self.DATABASE_NAME,
            "DATABASE_HOST": self.DATABASE_HOST,
            "DATABASE_PORT": self.DATABASE_PORT,
            "DATABASE_USER": self.DATABASE_USER,
            "DATABASE_PASSWORD": "***" if self.DATABASE_PASSWORD else None,
            "DATABASE_POOL_SIZE": self.DATABASE_POOL_SIZE,
            "DATABASE_AUTO_COMMIT": self.DATABASE_AUTO_COMMIT,
        }
