"""
SDK and version values supplied by the Flutter tooling.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from androidsign.constants import (
    DEFAULT_FLUTTER_SOURCE,
    FLUTTER_COMPILE_SDK_VERSION,
    FLUTTER_MIN_SDK_VERSION,
    FLUTTER_NDK_VERSION,
    FLUTTER_TARGET_SDK_VERSION,
    FLUTTER_VERSION_CODE,
    FLUTTER_VERSION_NAME,
    LOCAL_PROP_COMPILE_SDK,
    LOCAL_PROP_MIN_SDK,
    LOCAL_PROP_NDK_VERSION,
    LOCAL_PROP_TARGET_SDK,
    LOCAL_PROP_VERSION_CODE,
    LOCAL_PROP_VERSION_NAME,
    LOCAL_PROPERTIES_FILE_NAME,
    PUBSPEC_FILE_NAME,
)
from androidsign.exceptions import ConfigFileError, ConfigValidationError
from androidsign.log_utils import logger
from androidsign.properties import load_properties

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ToolingContext:
    """
    SDK levels, NDK version and app version supplied by the Flutter tooling.

    Defaults mirror the Flutter Gradle plugin when neither pubspec.yaml nor
    local.properties provides a value.
    """

    compile_sdk: int = FLUTTER_COMPILE_SDK_VERSION
    min_sdk: int = FLUTTER_MIN_SDK_VERSION
    target_sdk: int = FLUTTER_TARGET_SDK_VERSION
    ndk_version: str = FLUTTER_NDK_VERSION
    version_code: int = FLUTTER_VERSION_CODE
    version_name: str = FLUTTER_VERSION_NAME

    def validate(self) -> None:
        """
        Check that ``min_sdk <= target_sdk <= compile_sdk`` and the version code is positive.

        Raises:
            ConfigValidationError: If any bound is violated.
        """
        if self.min_sdk > self.target_sdk:
            raise ConfigValidationError(
                "minSdk must not exceed targetSdk",
                field="min_sdk",
                value=self.min_sdk,
                details=f"minSdk={self.min_sdk}, targetSdk={self.target_sdk}",
            )
        if self.target_sdk > self.compile_sdk:
            raise ConfigValidationError(
                "targetSdk must not exceed compileSdk",
                field="target_sdk",
                value=self.target_sdk,
                details=f"targetSdk={self.target_sdk}, compileSdk={self.compile_sdk}",
            )
        if self.version_code < 1:
            raise ConfigValidationError(
                "versionCode must be a positive integer",
                field="version_code",
                value=self.version_code,
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compileSdk": self.compile_sdk,
            "minSdk": self.min_sdk,
            "targetSdk": self.target_sdk,
            "ndkVersion": self.ndk_version,
            "versionCode": self.version_code,
            "versionName": self.version_name,
        }


def _parse_int(field_name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigValidationError(
            f"{field_name} must be an integer", field=field_name, value=value
        )
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigValidationError(
            f"{field_name} must be an integer", field=field_name, value=value
        ) from exc


def parse_pubspec_version(version: Any) -> Tuple[Optional[str], Optional[int]]:
    """
    Split a pubspec ``version`` value such as ``1.2.3+4`` into name and build number.

    Returns:
        tuple: (version_name, version_code); the code is None when no ``+build`` suffix is present.
    """
    if version is None:
        return None, None
    text = str(version).strip()
    if not text:
        return None, None
    name, sep, build = text.partition("+")
    if not sep:
        return name, None
    return name, _parse_int("versionCode", build)


def read_pubspec(flutter_root: PathLike) -> Dict[str, Any]:
    """
    Load ``pubspec.yaml`` from the Flutter source root, or an empty dict if it does not exist.

    Raises:
        ConfigFileError: If the file cannot be read or is not a YAML mapping.
    """
    pubspec_path = os.path.join(str(flutter_root), PUBSPEC_FILE_NAME)
    if not os.path.exists(pubspec_path):
        logger.debug(f"No pubspec at {pubspec_path}")
        return {}

    try:
        with open(pubspec_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(
            "Could not read pubspec", path=pubspec_path, details=str(exc)
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError("pubspec is not a mapping", path=pubspec_path)
    return data


def read_local_properties(android_dir: PathLike) -> Dict[str, str]:
    """
    Load ``local.properties`` from the Android project directory.

    Returns:
        dict: The properties, or an empty dict when the file does not exist.

    Raises:
        ConfigFileError: If the file exists but cannot be read or parsed.
    """
    local_path = os.path.join(str(android_dir), LOCAL_PROPERTIES_FILE_NAME)
    if not os.path.exists(local_path):
        logger.debug(f"No local.properties at {local_path}")
        return {}
    return load_properties(local_path)


def tooling_context_from_values(
    pubspec: Mapping[str, Any], local_properties: Mapping[str, str]
) -> ToolingContext:
    """
    Build a ToolingContext from already-loaded pubspec and local.properties values.

    local.properties takes precedence over pubspec, which takes precedence over
    the Flutter plugin defaults.
    """
    version_name: str = FLUTTER_VERSION_NAME
    version_code: int = FLUTTER_VERSION_CODE

    pub_name, pub_code = parse_pubspec_version(pubspec.get("version"))
    if pub_name:
        version_name = pub_name
    if pub_code is not None:
        version_code = pub_code

    if local_properties.get(LOCAL_PROP_VERSION_NAME):
        version_name = local_properties[LOCAL_PROP_VERSION_NAME]
    if local_properties.get(LOCAL_PROP_VERSION_CODE):
        version_code = _parse_int(
            "versionCode", local_properties[LOCAL_PROP_VERSION_CODE]
        )

    def sdk(key: str, field_name: str, default: int) -> int:
        value = local_properties.get(key)
        if not value:
            return default
        return _parse_int(field_name, value)

    context = ToolingContext(
        compile_sdk=sdk(LOCAL_PROP_COMPILE_SDK, "compileSdk", FLUTTER_COMPILE_SDK_VERSION),
        min_sdk=sdk(LOCAL_PROP_MIN_SDK, "minSdk", FLUTTER_MIN_SDK_VERSION),
        target_sdk=sdk(LOCAL_PROP_TARGET_SDK, "targetSdk", FLUTTER_TARGET_SDK_VERSION),
        ndk_version=local_properties.get(LOCAL_PROP_NDK_VERSION) or FLUTTER_NDK_VERSION,
        version_code=version_code,
        version_name=version_name,
    )
    context.validate()
    return context


def load_tooling_context(
    android_dir: PathLike, flutter_root: Optional[PathLike] = None
) -> ToolingContext:
    """
    Load the tooling context for an Android project inside a Flutter app.

    Parameters:
        android_dir: The Android project directory (holding local.properties).
        flutter_root: The Flutter source root holding pubspec.yaml; defaults to the parent of `android_dir`.

    Raises:
        ConfigFileError: If pubspec.yaml or local.properties exists but cannot be read.
        ConfigValidationError: If a value is not an integer or the SDK bounds are inconsistent.
    """
    if flutter_root is None:
        flutter_root = os.path.join(str(android_dir), DEFAULT_FLUTTER_SOURCE)
    context = tooling_context_from_values(
        read_pubspec(os.path.normpath(str(flutter_root))),
        read_local_properties(android_dir),
    )
    logger.debug(f"Tooling context: {context}")
    return context
