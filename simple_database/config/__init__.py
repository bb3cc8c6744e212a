"""
Configuration management for the simple database library.

This module provides centralized configuration handling with support for
environment variables, .env.local files, and explicit overrides, validated
by a Pydantic schema.
"""

from .env import Env, ConfigError
from .schema import ConfigSchema
from .loader import ConfigLoader

__all__ = ["Env", "ConfigError", "ConfigSchema", "ConfigLoader"]
