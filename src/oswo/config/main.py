"""
Main Config class for oswo.
"""

import os
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomli
    import tomli_w
except ImportError:
    raise ImportError("Required packages 'tomli' and 'tomli-w' not found. Install with: pip install tomli tomli-w")

from ..exceptions import ConfigError, ConfigValidationError

from .dataclasses import (
    DaemonConfig,
    LoggingConfig,
    Profile,
    ProfileStore,
    SwayConfig,
)
from .validation import VALID_LOG_LEVELS, collect_top_level_profiles, validate_toml_structure

CONFIG_FILENAME = "oswo.toml"
SYSTEM_CONFIG_DIR = Path("/etc/xdg")


@dataclass
class Config:
    """
    Main configuration class for oswo.

    Configuration is loaded from a TOML file with environment variable overrides.
    The profile store is read-only once loaded.
    """

    profiles: ProfileStore = field(default_factory=ProfileStore)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sway: SwayConfig = field(default_factory=SwayConfig)
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    source: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level}\n"
                f"Must be one of: {VALID_LOG_LEVELS}"
            )

        if self.sway.timeout <= 0:
            raise ConfigValidationError(
                f"Compositor timeout ({self.sway.timeout}s) must be positive."
            )

    @classmethod
    def get_config_dir(cls) -> Path:
        """
        Get user configuration directory.

        Uses XDG_CONFIG_HOME if set, otherwise defaults to ~/.config.
        """
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config)
        return Path.home() / ".config"

    @classmethod
    def get_config_path(cls) -> Path:
        """
        Get the default config file path.

        The user file wins; the system-wide file is used only when the user
        file does not exist.
        """
        user_file = cls.get_config_dir() / CONFIG_FILENAME
        system_file = SYSTEM_CONFIG_DIR / CONFIG_FILENAME
        if not user_file.exists() and system_file.exists():
            return system_file
        return user_file

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> 'Config':
        """
        Load configuration from TOML file.

        A missing file yields the defaults and an empty profile store.

        Args:
            config_file: Optional path to config TOML file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If the file cannot be read or parsed, or is invalid
        """
        logger = logging.getLogger(__name__)

        if not config_file:
            config_file = cls.get_config_path()

        config_dict: Dict[str, Any] = {}
        if config_file.exists():
            try:
                with open(config_file, 'rb') as f:
                    config_dict = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigError(f"Failed to parse {config_file}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Failed to read {config_file}: {e}") from e

            config_dict = collect_top_level_profiles(config_dict, config_file)
            validate_toml_structure(config_dict, config_file)
            logger.debug(f"Loaded config from {config_file}")
        else:
            logger.info(f"No config file at {config_file}, no profiles available")

        config_dict = cls._merge_configs(config_dict, cls._load_env_overrides())

        profiles = ProfileStore.from_dict(config_dict.get('profiles', {}))
        logger.debug(f"Loaded {len(profiles)} profiles: {profiles.names()}")

        sway_dict = dict(config_dict.get('sway', {}))
        if not sway_dict.get('socket'):
            sway_dict.pop('socket', None)

        return cls(
            profiles=profiles,
            logging=LoggingConfig(**config_dict.get('logging', {})),
            sway=SwayConfig(**sway_dict),
            daemon=DaemonConfig(**config_dict.get('daemon', {})),
            source=config_file,
        )

    @classmethod
    def _load_env_overrides(cls) -> Dict[str, Any]:
        """Load configuration overrides from environment variables."""
        overrides: Dict[str, Any] = {}

        if 'OSWO_LOG_LEVEL' in os.environ:
            overrides.setdefault('logging', {})['level'] = os.environ['OSWO_LOG_LEVEL']

        if 'OSWO_SWAYMSG' in os.environ:
            overrides.setdefault('sway', {})['swaymsg'] = os.environ['OSWO_SWAYMSG']

        if 'OSWO_TIMEOUT' in os.environ:
            try:
                overrides.setdefault('sway', {})['timeout'] = int(os.environ['OSWO_TIMEOUT'])
            except ValueError as e:
                raise ConfigError(f"Invalid OSWO_TIMEOUT value: {os.environ['OSWO_TIMEOUT']}: {e}")

        return overrides

    @classmethod
    def _merge_configs(cls, base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries."""
        result = base.copy()

        for key, value in overrides.items():
            if isinstance(value, dict) and key in result and isinstance(result[key], dict):
                result[key] = {**result[key], **value}
            else:
                result[key] = value

        return result

    def with_profile(self, profile: Profile) -> 'Config':
        """Return a copy with the profile added or replaced."""
        profiles = dict(self.profiles.items())
        profiles[profile.name] = profile
        return replace(self, profiles=ProfileStore(profiles))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the TOML layout understood by load()."""
        config_dict: Dict[str, Any] = {
            'logging': {
                'level': self.logging.level,
            },
            'sway': self.sway.to_dict(),
            'daemon': {
                'echo': self.daemon.echo,
            },
            'profiles': {
                name: self.profiles[name].to_config()
                for name in self.profiles.names()
            },
        }
        return config_dict

    def save(self, config_file: Optional[Path] = None) -> Path:
        """
        Save current configuration to TOML file.

        Args:
            config_file: Path to save configuration (defaults to the loaded
                file, then the user config path)

        Returns:
            Path the configuration was written to
        """
        if not config_file:
            config_file = self.source or (self.get_config_dir() / CONFIG_FILENAME)

        # Ensure directory exists
        config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(config_file, 'wb') as f:
                tomli_w.dump(self.to_dict(), f)

            logging.getLogger(__name__).info(f"Saved config to {config_file}")
        except OSError as e:
            raise ConfigError(f"Failed to save config to {config_file}: {e}")

        return config_file
