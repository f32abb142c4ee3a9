# src/androidsign/settings.py

import os
from typing import Any, Dict, Optional, Tuple

import platformdirs
import yaml

from androidsign.constants import (
    DEFAULT_APPLICATION_ID,
    DEFAULT_FLUTTER_SOURCE,
    DEFAULT_JAVA_VERSION,
    DEFAULT_KEYSTORE_BASE_DIR,
    DEFAULT_MINIFY_ENABLED,
    DEFAULT_SHRINK_RESOURCES,
    KEY_PROPERTIES_ENV_VAR,
    KEY_PROPERTIES_FILE_NAME,
    SETTINGS_FILE_NAME,
)
from androidsign.exceptions import ConfigFileError, ConfigValidationError
from androidsign.log_utils import logger

# Get the config directory using platformdirs
CONFIG_DIR = platformdirs.user_config_dir("androidsign")
CONFIG_FILE_NAME = SETTINGS_FILE_NAME
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "APPLICATION_ID": DEFAULT_APPLICATION_ID,
    # None means "same as APPLICATION_ID"
    "NAMESPACE": None,
    "JAVA_VERSION": DEFAULT_JAVA_VERSION,
    "KEY_PROPERTIES_FILE": KEY_PROPERTIES_FILE_NAME,
    "KEYSTORE_BASE_DIR": DEFAULT_KEYSTORE_BASE_DIR,
    "MINIFY_ENABLED": DEFAULT_MINIFY_ENABLED,
    "SHRINK_RESOURCES": DEFAULT_SHRINK_RESOURCES,
    "FLUTTER_SOURCE": DEFAULT_FLUTTER_SOURCE,
    "LOG_LEVEL": "",
    # Directory for the rotating log file; file logging is off when unset
    "LOG_DIR": None,
}

_BOOL_KEYS = ("MINIFY_ENABLED", "SHRINK_RESOURCES")
_STRING_KEYS = (
    "APPLICATION_ID",
    "KEY_PROPERTIES_FILE",
    "KEYSTORE_BASE_DIR",
    "FLUTTER_SOURCE",
)


def config_exists(directory: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Locate the settings file.

    If `directory` is given, ``<directory>/androidsign.yaml`` is checked first;
    the platformdirs-managed CONFIG_FILE is the fallback.

    Returns:
        tuple: (exists, path) where `path` is None when no settings file exists.
    """
    if directory:
        project_file = os.path.join(directory, CONFIG_FILE_NAME)
        if os.path.exists(project_file):
            return True, project_file
    if os.path.exists(CONFIG_FILE):
        return True, CONFIG_FILE
    return False, None


def _read_settings_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(
            "Failed to load settings", path=path, details=str(exc)
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError("Settings file is not a mapping", path=path)
    return data


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize and validate a merged settings mapping in place.

    YAML reads ``JAVA_VERSION: 11`` as an int and ``1.8`` as a float, so the
    Java level is coerced to a string.

    Raises:
        ConfigValidationError: If a boolean or string setting has the wrong type.
    """
    for key in _BOOL_KEYS:
        if not isinstance(settings[key], bool):
            raise ConfigValidationError(
                f"{key} must be true or false", field=key, value=settings[key]
            )
    for key in _STRING_KEYS:
        value = settings[key]
        if not isinstance(value, str) or not value.strip():
            raise ConfigValidationError(
                f"{key} must be a non-empty string", field=key, value=value
            )

    java_version = settings["JAVA_VERSION"]
    if isinstance(java_version, bool) or java_version is None:
        raise ConfigValidationError(
            "JAVA_VERSION must be a version string",
            field="JAVA_VERSION",
            value=java_version,
        )
    settings["JAVA_VERSION"] = str(java_version).strip()

    log_level = settings["LOG_LEVEL"]
    if log_level is None:
        settings["LOG_LEVEL"] = ""
    elif not isinstance(log_level, str):
        raise ConfigValidationError(
            "LOG_LEVEL must be a level name", field="LOG_LEVEL", value=log_level
        )

    log_dir = settings["LOG_DIR"]
    if log_dir is None or log_dir == "":
        settings["LOG_DIR"] = None
    elif not isinstance(log_dir, str):
        raise ConfigValidationError(
            "LOG_DIR must be a directory path", field="LOG_DIR", value=log_dir
        )

    if settings["NAMESPACE"] is None:
        settings["NAMESPACE"] = settings["APPLICATION_ID"]
    elif not isinstance(settings["NAMESPACE"], str):
        raise ConfigValidationError(
            "NAMESPACE must be a string",
            field="NAMESPACE",
            value=settings["NAMESPACE"],
        )
    return settings


def load_config(directory: Optional[str] = None) -> Dict[str, Any]:
    """
    Load androidsign settings merged over the defaults.

    Parameters:
        directory (str | None): Android project directory searched before the user config directory.

    Returns:
        dict: The validated settings. Defaults are returned when no settings file exists.
        The environment variable named by KEY_PROPERTIES_ENV_VAR overrides KEY_PROPERTIES_FILE.

    Raises:
        ConfigFileError: If the settings file cannot be parsed.
        ConfigValidationError: If a setting has an invalid value.
    """
    settings = dict(DEFAULT_SETTINGS)

    exists, config_path = config_exists(directory)
    if exists and config_path:
        loaded = _read_settings_file(config_path)
        unknown = sorted(str(k) for k in set(loaded) - set(DEFAULT_SETTINGS))
        if unknown:
            logger.warning(
                f"Ignoring unknown settings in {config_path}: {', '.join(unknown)}"
            )
        settings.update({k: v for k, v in loaded.items() if k in DEFAULT_SETTINGS})
        logger.debug(f"Loaded settings from {config_path}")

    env_key_properties = os.environ.get(KEY_PROPERTIES_ENV_VAR)
    if env_key_properties:
        settings["KEY_PROPERTIES_FILE"] = env_key_properties

    return validate_settings(settings)
