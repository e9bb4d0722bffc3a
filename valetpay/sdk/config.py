"""Settings and company profile for valet-pay.

Two files live in the config directory:

    settings.json   data_dir (record store location), default_format
    profile.yaml    company name and rate records for non-legacy locations

The config directory is $VALET_PAY_CONFIG_PATH when set, otherwise
$XDG_CONFIG_HOME/valet-pay. Records default to $XDG_DATA_HOME/valet-pay
unless settings.json points data_dir elsewhere.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .errors import ValetPayError
from .schemas import CompanyProfile

logger = logging.getLogger(__name__)

APP_NAME = "valet-pay"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

OUTPUT_FORMATS = ("table", "csv", "json")


class ProfileNotFoundError(ValetPayError):
    """Raised when no profile is found."""
    pass


class ProfileValidationError(ValetPayError):
    """Raised when profile.yaml does not match the expected schema."""
    pass


class SettingsError(ValetPayError):
    """Raised when a setting cannot be used as given."""
    pass


def _xdg_home(env_var: str, fallback: str) -> Path:
    return Path(os.environ.get(env_var) or Path.home() / fallback) / APP_NAME


def get_config_dir() -> Path:
    """$VALET_PAY_CONFIG_PATH, else $XDG_CONFIG_HOME/valet-pay."""
    override = os.environ.get("VALET_PAY_CONFIG_PATH")
    if override:
        return Path(override)
    return _xdg_home("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Contents of settings.json, or {} before anything has been saved."""
    path = get_settings_path()
    if not path.exists():
        return {}
    with open(path, "r") as f:
        settings = json.load(f)
    if not isinstance(settings, dict):
        raise SettingsError(f"{path} must contain a JSON object")
    return settings


def save_settings(settings: dict) -> Path:
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings, f, indent=2, sort_keys=True)
    return path


def get_setting(key: str, default: Any = None) -> Any:
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Store one setting. Passing None removes the key."""
    settings = load_settings()
    if value is None:
        settings.pop(key, None)
    else:
        settings[key] = value
    return save_settings(settings)


def get_default_format() -> str:
    """Output format for `summary` when --format is not given.

    An unrecognised stored value is logged and ignored.
    """
    output_format = get_setting("default_format", "table")
    if output_format not in OUTPUT_FORMATS:
        logger.warning(f"ignoring default_format '{output_format}'; expected one of {OUTPUT_FORMATS}")
        return "table"
    return output_format


def get_profile_path(require_exists: bool = False) -> Path:
    """profile.yaml in the config directory.

    Raises:
        ProfileNotFoundError: If require_exists is set and the file is missing
    """
    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Add locations with 'valet-pay profile add-location', or point "
            f"VALET_PAY_CONFIG_PATH at an existing config directory."
        )
    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Raw profile.yaml mapping ({} when absent and not required)."""
    profile_path = get_profile_path(require_exists=require_exists)
    if not profile_path.exists():
        return {}
    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Write PROFILE as YAML, keeping key order, and return the path written."""
    path = path or get_profile_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)
    return path


def load_company_profile(require_exists: bool = False) -> CompanyProfile:
    """Load and validate profile.yaml.

    A missing profile is valid (no dynamic locations configured) unless
    require_exists is set.

    Raises:
        ProfileValidationError: If the YAML does not match CompanyProfile
    """
    raw = load_profile(require_exists=require_exists)
    try:
        return CompanyProfile.model_validate(raw)
    except ValidationError as e:
        raise ProfileValidationError(
            f"Invalid profile {get_profile_path()}:\n{e}"
        ) from e


def prepare_data_dir(path: Union[str, Path]) -> Path:
    """Expand PATH, create it if needed and check that records can be written there.

    Raises:
        SettingsError: If PATH is a file, cannot be created, or is read-only
    """
    data_path = Path(path).expanduser()
    if data_path.exists() and not data_path.is_dir():
        raise SettingsError(f"Not a directory: {data_path}")
    try:
        data_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SettingsError(f"Cannot create data directory {data_path}: {e}") from e
    if not os.access(data_path, os.W_OK):
        raise SettingsError(f"Data directory is not writable: {data_path}")
    return data_path


def get_data_path() -> Path:
    """Record store root: the data_dir setting, else $XDG_DATA_HOME/valet-pay."""
    custom = get_setting("data_dir")
    return prepare_data_dir(custom or _xdg_home("XDG_DATA_HOME", ".local/share"))
