"""
Schema-driven configuration loader.

This module provides a ConfigLoader that uses the configuration schema
to automatically load, validate, and merge configuration from multiple sources.
"""

import logging
import os
from typing import Dict, Any, Optional, Mapping

from dotenv import load_dotenv
from pydantic import ValidationError

from .schema import ConfigSchema


logger = logging.getLogger(__name__)

DOTENV_FILE = ".env.local"


class ConfigLoader:
    """Loads and validates configuration using a schema-driven approach."""

    @staticmethod
    def load(
        schema: type[ConfigSchema] = ConfigSchema,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ConfigSchema:
        """
        Load configuration from all sources with precedence handling.

        Loading order (lowest to highest priority):
        1. Schema defaults
        2. .env.local file (if it exists)
        3. OS environment variables
        4. Explicit overrides keyed by env var name (highest priority)

        Args:
            schema: The configuration schema class to use
            overrides: Mapping of env var names to values

        Returns:
            Validated configuration instance

        Raises:
            ValueError: If configuration validation fails
        """
        config_dict: Dict[str, Any] = {}

        # Step 1: Load from .env.local file if available
        _load_from_dotenv_file()

        # Step 2: Load from environment variables based on schema
        for field_name, field_info in schema.model_fields.items():
            env_var = _env_var_for(field_info)
            if env_var:
                env_value = os.getenv(env_var)
                if env_value is not None:
                    # Strip whitespace and convert empty strings to None
                    stripped = env_value.strip()
                    if stripped:
                        config_dict[field_name] = stripped

        # Step 3: Apply explicit overrides
        if overrides:
            for field_name, field_info in schema.model_fields.items():
                env_var = _env_var_for(field_info)
                if env_var in overrides and overrides[env_var] is not None:
                    value = overrides[env_var]
                    if isinstance(value, str):
                        stripped = value.strip()
                        if stripped:
                            config_dict[field_name] = stripped
                        else:
                            # Treat explicit empty string as an override to clear the value
                            config_dict.pop(field_name, None)
                    else:
                        config_dict[field_name] = value

        # Step 4: Create and validate the configuration
        try:
            config = schema(**config_dict)
            logger.debug("Configuration loaded and validated successfully")
            return config
        except ValidationError as e:
            # Convert Pydantic validation errors to more user-friendly messages
            errors = []
            for error in e.errors():
                msg = error["msg"]
                if not error["loc"]:
                    errors.append(msg)
                    continue
                field = error["loc"][0]
                field_info = schema.model_fields.get(field)
                env_var = _env_var_for(field_info) if field_info else None
                errors.append(f"{env_var or str(field).upper()}: {msg}")

            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {err}" for err in errors)
            raise ValueError(error_msg) from e


def _env_var_for(field_info: Any) -> Optional[str]:
    extra = field_info.json_schema_extra
    return extra.get("env_var") if extra else None


def _load_from_dotenv_file() -> None:
    """Load values from .env.local file if it exists."""
    if os.path.exists(DOTENV_FILE):
        load_dotenv(DOTENV_FILE, override=False)
        logger.debug(f"Loaded configuration from {DOTENV_FILE} file")
    else:
        logger.debug(f"{DOTENV_FILE} file not found, skipping")
