"""
Signing configuration resolution.

A release build is signed with the identity described by key.properties only
when that file exists and the key-store it names exists on disk. In every
other case the built-in debug identity is used. A key.properties that exists
but lacks required keys is a hard error rather than a fallback, so a broken
release setup can never quietly produce a debug-signed artifact.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from androidsign.constants import (
    DEBUG_KEY_ALIAS,
    DEBUG_KEY_PASSWORD,
    DEBUG_KEYSTORE_PATH,
    DEBUG_SIGNING_NAME,
    DEBUG_STORE_PASSWORD,
    DEFAULT_KEYSTORE_BASE_DIR,
    KEY_PROPERTIES_FILE_NAME,
    PROP_KEY_ALIAS,
    PROP_KEY_PASSWORD,
    PROP_STORE_FILE,
    PROP_STORE_PASSWORD,
    REDACTED_VALUE,
    RELEASE_SIGNING_NAME,
    REQUIRED_CREDENTIAL_KEYS,
)
from androidsign.exceptions import MissingCredentialError
from androidsign.log_utils import logger
from androidsign.properties import load_properties

PathLike = Union[str, Path]
ExistsCheck = Callable[[str], bool]


@dataclass(frozen=True)
class Credentials:
    """Release signing values read from a credentials file."""

    key_alias: str
    key_password: str = field(repr=False)
    store_file: str
    store_password: str = field(repr=False)
    source: Optional[str] = None


@dataclass(frozen=True)
class SigningIdentity:
    """
    The signing materials chosen for the release build type.

    Attributes:
        name: Signing config name, "release" or "debug".
        key_alias: Alias of the key inside the key-store.
        key_password: Password of the key.
        store_file: Absolute path of the key-store file.
        store_password: Password of the key-store.
        reason: Human readable explanation of why this identity was chosen.
    """

    name: str
    key_alias: str
    key_password: str = field(repr=False)
    store_file: str
    store_password: str = field(repr=False)
    reason: str = field(default="", compare=False)

    @property
    def is_release(self) -> bool:
        return self.name == RELEASE_SIGNING_NAME

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        """
        Serialize the identity; passwords are masked unless `redact` is False.
        """
        return {
            "name": self.name,
            "keyAlias": self.key_alias,
            "keyPassword": REDACTED_VALUE if redact else self.key_password,
            "storeFile": self.store_file,
            "storePassword": REDACTED_VALUE if redact else self.store_password,
        }


def debug_identity(reason: str = "") -> SigningIdentity:
    """
    Return the built-in debug identity used by the Android Gradle plugin.

    The debug key-store is not checked for existence; the Android tooling
    creates it on first use.
    """
    return SigningIdentity(
        name=DEBUG_SIGNING_NAME,
        key_alias=DEBUG_KEY_ALIAS,
        key_password=DEBUG_KEY_PASSWORD,
        store_file=os.path.expanduser(DEBUG_KEYSTORE_PATH),
        store_password=DEBUG_STORE_PASSWORD,
        reason=reason,
    )


def load_credentials(
    path: PathLike, exists: ExistsCheck = os.path.isfile
) -> Optional[Credentials]:
    """
    Load release credentials from a key.properties file.

    Parameters:
        path: Location of the credentials file.
        exists: Predicate used to test whether the file is present.

    Returns:
        Credentials | None: The loaded credentials, or None when the file does not exist.

    Raises:
        MissingCredentialError: If the file exists but any required key is absent or empty.
        ConfigFileError: If the file exists but cannot be read or parsed.
    """
    path_str = str(path)
    if not exists(path_str):
        logger.debug(f"No credentials file at {path_str}")
        return None

    properties = load_properties(path_str)
    missing = [key for key in REQUIRED_CREDENTIAL_KEYS if not properties.get(key)]
    if missing:
        raise MissingCredentialError(missing, path=path_str)

    logger.debug(f"Loaded credentials from {path_str}")
    return Credentials(
        key_alias=properties[PROP_KEY_ALIAS],
        key_password=properties[PROP_KEY_PASSWORD],
        store_file=properties[PROP_STORE_FILE],
        store_password=properties[PROP_STORE_PASSWORD],
        source=path_str,
    )


def resolve_store_path(store_file: str, base_dir: PathLike) -> str:
    """
    Resolve a key-store path from a credentials file against `base_dir`.

    Absolute paths and paths starting with ``~`` are used as given.
    """
    expanded = os.path.expanduser(store_file)
    if not os.path.isabs(expanded):
        expanded = os.path.join(str(base_dir), expanded)
    return os.path.normpath(expanded)


def resolve_signing_identity(
    credentials_path: Optional[PathLike],
    base_dir: PathLike,
    exists: ExistsCheck = os.path.isfile,
) -> SigningIdentity:
    """
    Choose the signing identity for the release build type.

    The release identity is selected if and only if the credentials file exists
    and the key-store file it names exists. Otherwise the debug identity is
    returned. The same filesystem state always yields the same identity.

    Parameters:
        credentials_path: The credentials file, or None when none is configured.
        base_dir: Directory that relative ``storeFile`` values are resolved against.
        exists: Predicate used for both existence checks.

    Raises:
        MissingCredentialError: If the credentials file exists but is incomplete.
        ConfigFileError: If the credentials file exists but cannot be read or parsed.
    """
    if credentials_path is None:
        reason = "no credentials file configured"
        logger.info(f"Using debug signing: {reason}")
        return debug_identity(reason)

    credentials = load_credentials(credentials_path, exists=exists)
    if credentials is None:
        reason = f"credentials file {credentials_path} not found"
        logger.info(f"Using debug signing: {reason}")
        return debug_identity(reason)

    store_path = resolve_store_path(credentials.store_file, base_dir)
    if not exists(store_path):
        reason = f"key-store {store_path} not found"
        logger.info(f"Using debug signing: {reason}")
        return debug_identity(reason)

    logger.info(f"Using release signing with key '{credentials.key_alias}'")
    return SigningIdentity(
        name=RELEASE_SIGNING_NAME,
        key_alias=credentials.key_alias,
        key_password=credentials.key_password,
        store_file=store_path,
        store_password=credentials.store_password,
        reason=f"credentials from {credentials.source}",
    )


class SigningConfigResolver:
    """
    Resolve the release signing identity for one Android project directory.

    By default the credentials are read from ``<android_dir>/key.properties``
    and relative key-store paths are resolved against ``<android_dir>/app``.
    """

    def __init__(
        self,
        android_dir: PathLike,
        credentials_path: Optional[PathLike] = None,
        keystore_base_dir: Optional[PathLike] = None,
        exists: ExistsCheck = os.path.isfile,
    ) -> None:
        self.android_dir = str(android_dir)
        self.credentials_path = str(
            credentials_path
            if credentials_path is not None
            else os.path.join(self.android_dir, KEY_PROPERTIES_FILE_NAME)
        )
        self.keystore_base_dir = str(
            keystore_base_dir
            if keystore_base_dir is not None
            else os.path.join(self.android_dir, DEFAULT_KEYSTORE_BASE_DIR)
        )
        self._exists = exists

    def resolve(self) -> SigningIdentity:
        return resolve_signing_identity(
            self.credentials_path, self.keystore_base_dir, exists=self._exists
        )

    def release_signing_available(self) -> bool:
        """
        Return True when the release identity would be selected.

        Configuration errors propagate; they are never reported as False.
        """
        return self.resolve().is_release
