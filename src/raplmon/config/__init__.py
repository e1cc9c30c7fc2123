"""Unified configuration management for raplmon.

This module provides a single source of truth for all configuration,
integrating environment variables, .env files, and defaults.
"""

from raplmon.config.env_loader import Environment, get_environment
from raplmon.config.settings import AppConfig, get_settings, load_app_config

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
]
