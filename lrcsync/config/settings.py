"""
Configuration management for lrcsync

This module handles loading, validation, and management of application settings
from multiple sources including YAML files and environment variables. It provides
a centralized configuration system that the CLI overrides per invocation.

The configuration is organized into logical sections using dataclasses:
- LRCLIB service settings (base URL, timeout, user agent)
- Library sync behavior (hidden files, ignore rules, search fallback, tolerance)
- Logging output (level, file, rotation, colors)

Sources are applied in order of increasing precedence: defaults, the first
YAML file found, then environment variables (a .env file is honoured).
Command-line options are applied on top by the CLI.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, asdict
from dotenv import load_dotenv

from ..exceptions import ConfigError

# Load environment variables from .env file if present
load_dotenv()


DEFAULT_LRCLIB_URL = "https://lrclib.net"
DEFAULT_IGNORE_FILENAME = ".lrcsyncignore"


@dataclass
class LrclibConfig:
    """
    LRCLIB service configuration

    The base URL is configurable so that self-hosted mirrors of the
    lyrics database can be used. An empty user agent means the client
    builds its default identification string.
    """
    url: str = DEFAULT_LRCLIB_URL
    timeout: float = 30.0
    user_agent: str = ""


@dataclass
class SyncConfig:
    """
    Library synchronization configuration

    Controls which files are visited and how lyrics are looked up for them.
    The ignore list holds raw field tokens ("duration", "album", "artist")
    that are suppressed from lookups; it is resolved into flags once per run.
    """
    include_hidden: bool = False
    force: bool = False
    ignore: List[str] = field(default_factory=list)
    search: bool = False
    tolerance: float = 5.0
    ignore_filenames: List[str] = field(default_factory=lambda: [DEFAULT_IGNORE_FILENAME, ".ignore"])
    dry_run: bool = False


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls application logging behavior including log levels, file output,
    rotation, and console formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


class Settings:
    """
    Main settings class that manages all configuration

    This class serves as the central configuration manager, loading settings
    from multiple sources (YAML files, environment variables) and providing
    a unified interface for accessing configuration throughout the application.

    The class handles:
    - Loading configuration from YAML files
    - Overriding with environment variables
    - Validating configuration values
    - Saving configuration back to files
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations

        Raises:
            ConfigError: If an explicitly given config file cannot be parsed
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".lrcsync"

        # Initialize all configuration objects with default values
        self.lrclib = LrclibConfig()
        self.sync = SyncConfig()
        self.logging = LoggingConfig()

        # Load configuration from various sources in order of precedence
        self._load_config()
        self._load_environment_variables()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in multiple locations in order of
        precedence. The first file found will be used. A broken file that was
        passed explicitly is fatal; a broken default file is reported and skipped.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("lrcsync.yaml"),
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    self.loaded_from = Path(path)
                    break
                except (OSError, yaml.YAMLError) as e:
                    if path == self.config_path:
                        raise ConfigError(
                            f"Failed to load config from {path}: {e}",
                            details={'file_path': str(path), 'original_error': e}
                        )
                    print(f"Warning: Failed to load config from {path}: {e}")
        else:
            self.loaded_from = None

        if self.config_path and not Path(self.config_path).exists():
            raise ConfigError(
                f"Config file not found: {self.config_path}",
                details={'file_path': str(self.config_path)}
            )

        if not isinstance(config_data, dict):
            raise ConfigError("Config file must contain a mapping of sections")

        # Apply loaded configuration to dataclass instances
        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Maps configuration sections from the YAML file to the appropriate
        dataclass instances, updating only the attributes that exist in
        both the config file and the dataclass definition.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = {
            'lrclib': self.lrclib,
            'sync': self.sync,
            'logging': self.logging,
        }

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

        # YAML allows "ignore: duration,album" as well as a list
        if isinstance(self.sync.ignore, str):
            self.sync.ignore = split_ignore_tokens([self.sync.ignore])

    def _load_environment_variables(self) -> None:
        """
        Load configuration overrides from environment variables

        Environment variables take precedence over file-based configuration,
        which is convenient for pointing a run at a different lyrics mirror
        without editing any file.
        """
        env_mappings = {
            'LRCLIB_URL': lambda v: setattr(self.lrclib, 'url', v),
            'LRCSYNC_TOLERANCE': lambda v: setattr(self.sync, 'tolerance', _parse_float('LRCSYNC_TOLERANCE', v)),
            'LRCSYNC_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
            'LRCSYNC_LOG_FILE': lambda v: setattr(self.logging, 'file', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_config_directory(self) -> Path:
        """Return the expanded configuration directory path."""
        return Path(self.config_dir).expanduser()

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to

        Raises:
            ConfigError: If the configuration cannot be saved
        """
        target = Path(path) if path else self.get_config_directory() / "config.yaml"

        config_data = {
            'lrclib': asdict(self.lrclib),
            'sync': asdict(self.sync),
            'logging': asdict(self.logging),
        }

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {target}: {e}", details={'file_path': str(target)})
        return target

    def validate(self) -> List[str]:
        """
        Validate current configuration

        Performs validation of all configuration values so that bad settings
        are caught before the run starts, when failing is still cheap.

        Returns:
            List of error messages, empty if configuration is valid
        """
        # Imported here: the utils package imports this module through the logger
        from ..utils.validation import validate_lrclib_url, validate_log_level

        errors = []

        is_valid, error_msg = validate_lrclib_url(self.lrclib.url)
        if not is_valid:
            errors.append(error_msg)

        try:
            if float(self.lrclib.timeout) <= 0:
                errors.append(f"Request timeout must be positive: {self.lrclib.timeout}")
        except (TypeError, ValueError):
            errors.append(f"Invalid request timeout: {self.lrclib.timeout}")

        try:
            float(self.sync.tolerance)
        except (TypeError, ValueError):
            errors.append(f"Invalid tolerance: {self.sync.tolerance}")

        is_valid, error_msg = validate_log_level(self.logging.level)
        if not is_valid:
            errors.append(error_msg)

        if not isinstance(self.sync.ignore_filenames, list):
            errors.append("sync.ignore_filenames must be a list of file names")

        return errors

    def __str__(self) -> str:
        """
        String representation of settings

        Returns:
            String summary of key configuration values
        """
        sections = [
            f"LRCLIB: {self.lrclib.url}",
            f"Search: {'enabled' if self.sync.search else 'disabled'}",
            f"Tolerance: {self.sync.tolerance}s",
            f"Ignore: {','.join(self.sync.ignore) or '-'}",
        ]
        return f"Settings({', '.join(sections)})"


def split_ignore_tokens(values: List[str]) -> List[str]:
    """
    Flatten comma separated ignore values into individual tokens

    Args:
        values: Raw values, e.g. ["duration,album", "artist"]

    Returns:
        Tokens with surrounding whitespace removed, empty entries dropped
    """
    tokens = []
    for value in values:
        for token in str(value).split(','):
            token = token.strip()
            if token:
                tokens.append(token)
    return tokens


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"Environment variable {name} must be a number, got {value!r}")


# Global settings instance for singleton pattern
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance

    Provides access to the singleton settings instance that is shared
    throughout the application. The instance is created on first access.

    Returns:
        The global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Creates a new settings instance with updated configuration from files
    and environment variables.

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global _settings
    _settings = Settings(config_path)
    return _settings
