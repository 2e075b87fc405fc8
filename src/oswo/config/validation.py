"""
Configuration validation for oswo.
"""

from pathlib import Path
from typing import Dict, Any

from ..exceptions import ConfigError


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Valid sections and their keys. Dynamic sections map to dict.
VALID_STRUCTURE: Dict[str, Any] = {
    'logging': {
        'level': str,
    },
    'sway': {
        'swaymsg': str,
        'socket': str,
        'timeout': int,
    },
    'daemon': {
        'echo': bool,
    },
    'profiles': dict,  # Dynamic: [profiles.{name}] tables
}


def collect_top_level_profiles(config_dict: Dict[str, Any], config_file: Path) -> Dict[str, Any]:
    """
    Move profiles written as top-level tables into the profiles section.

    Both layouts are accepted and may be mixed:

        [work]
        outputs = [...]

        [profiles.home]
        outputs = [...]

    Returns:
        A copy of config_dict with every top-level profile under 'profiles'

    Raises:
        ConfigError: If a profile is defined in both places
    """
    profiles_section = config_dict.get('profiles', {})
    if not isinstance(profiles_section, dict):
        # Structure validation reports the malformed section
        return dict(config_dict)

    result: Dict[str, Any] = {}
    profiles = dict(profiles_section)
    for name, value in config_dict.items():
        if name in VALID_STRUCTURE or not (isinstance(value, dict) and 'outputs' in value):
            if name != 'profiles':
                result[name] = value
            continue
        if name in profiles:
            raise ConfigError(
                f"Profile '{name}' is defined both as [{name}] and [profiles.{name}] in {config_file}"
            )
        profiles[name] = value

    if profiles or 'profiles' in config_dict:
        result['profiles'] = profiles
    return result


def validate_toml_structure(config_dict: Dict[str, Any], config_file: Path) -> None:
    """
    Validate TOML structure before creating dataclasses.

    Checks for unknown sections and keys, providing helpful error messages.

    Args:
        config_dict: Loaded TOML configuration dictionary
        config_file: Path to config file for error messages

    Raises:
        ConfigError: If structure validation fails
    """
    # Check for unknown sections
    for section in config_dict:
        if section not in VALID_STRUCTURE:
            raise ConfigError(
                f"Unknown config section '{section}' in {config_file}. "
                f"Valid sections: {list(VALID_STRUCTURE.keys())}"
            )

    # Check each section for unknown keys and type validation
    for section_name, section_config in config_dict.items():
        if not isinstance(section_config, dict):
            raise ConfigError(
                f"Section '{section_name}' must be a table in {config_file}"
            )

        valid_keys = VALID_STRUCTURE[section_name]

        # Profiles are validated when parsed
        if valid_keys == dict:
            continue

        for key, value in section_config.items():
            if key not in valid_keys:
                raise ConfigError(
                    f"Unknown key '{key}' in section '{section_name}' in {config_file}. "
                    f"Valid keys: {list(valid_keys.keys())}"
                )

            # bool is an int subclass; don't accept it for int keys
            expected_type = valid_keys[key]
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                raise ConfigError(
                    f"Key '{section_name}.{key}' must be of type {expected_type.__name__} "
                    f"in {config_file}, got {type(value).__name__}"
                )
