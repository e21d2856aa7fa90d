"""Configuration management for LHDN Calc.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - data_dir: where deduction/PCB/commitment records are stored
   - rules_dir: override for the bundled tax-rules YAML files

2. profile.yaml - User's personal tax profile
   - income: annual_income / monthly_salary fallbacks for gross income
   - marital_status, assessment_type, dependents

Config directory resolution:
1. LHDN_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/lhdn-calc/ (XDG_CONFIG_HOME fallback)

Data path resolution:
1. settings.json "data_dir" key (if set via CLI)
2. XDG_DATA_HOME/lhdn-calc/ or ~/.local/share/lhdn-calc/
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml


APP_NAME = "lhdn-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. LHDN_CALC_CONFIG_PATH environment variable
    2. ~/.config/lhdn-calc/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("LHDN_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to profile.yaml in the config directory.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create one with: lhdn-calc profile set income.annual_income 84000"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load user profile from profile.yaml.

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save user profile to profile.yaml."""
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key.

    Args:
        key: Dot-notation key (e.g., "income.monthly_salary")
        default: Default value if key not found
    """
    profile = load_profile(require_exists=False)

    value = profile
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key, creating nested keys."""
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    current = profile

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


# =============================================================================
# XDG path helpers
# =============================================================================

def get_data_path() -> Path:
    """Get the data directory path.

    Uses settings.json "data_dir" if set, else XDG_DATA_HOME/lhdn-calc/.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


# =============================================================================
# Profile schema
# =============================================================================

# Keys settable via 'profile set'. Tuples list the allowed values.
PROFILE_SCHEMA = {
    "income": {
        "annual_income": "amount",
        "monthly_salary": "amount",
    },
    "marital_status": ("single", "married", "divorced", "widowed"),
    "assessment_type": ("individual", "joint", "separate"),
    "dependents": {
        "children": "count",
        "disabled_children": "count",
        "parents": "count",
    },
}


def validate_profile_key(key: str) -> tuple[bool, str]:
    """Validate that a dot-notation key is allowed by the schema.

    Args:
        key: Dot-notation key like "income.monthly_salary"

    Returns:
        Tuple of (is_valid, error_message)
    """
    parts = key.split(".")
    top_level = parts[0]

    if top_level not in PROFILE_SCHEMA:
        valid_keys = ", ".join(PROFILE_SCHEMA.keys())
        return False, f"Unknown top-level key '{top_level}'. Valid keys: {valid_keys}"

    schema_section = PROFILE_SCHEMA[top_level]

    if isinstance(schema_section, dict):
        if len(parts) != 2:
            valid_keys = ", ".join(f"{top_level}.{k}" for k in schema_section)
            return False, f"'{key}' is a section. Valid keys: {valid_keys}"
        if parts[1] not in schema_section:
            valid_keys = ", ".join(schema_section.keys())
            return False, f"Unknown key '{parts[1]}' under '{top_level}'. Valid keys: {valid_keys}"
        return True, ""

    if len(parts) != 1:
        return False, f"'{top_level}' takes a single value"
    return True, ""


def get_profile_key_type(key: str) -> Any:
    """Return the schema entry for a valid key: "amount", "count" or a tuple of choices."""
    parts = key.split(".")
    entry = PROFILE_SCHEMA[parts[0]]
    return entry[parts[1]] if isinstance(entry, dict) else entry
