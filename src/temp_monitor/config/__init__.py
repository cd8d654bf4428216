"""Configuration management for the temperature monitor.

Application settings come from environment variables, .env files and
defaults. User preferences live in temp_monitor.preferences.
"""

from temp_monitor.config.env_loader import Environment, get_environment
from temp_monitor.config.loader import ConfigLoadError, dump_yaml_file, load_yaml_file
from temp_monitor.config.settings import AppConfig, get_settings, load_app_config

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
    "ConfigLoadError",
    "load_yaml_file",
    "dump_yaml_file",
]
