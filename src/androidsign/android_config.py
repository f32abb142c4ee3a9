"""
Android packaging configuration for a Flutter application.
"""

from __future__ import annotations

import os
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from androidsign.constants import (
    DEBUG_SIGNING_NAME,
    DEFAULT_FLUTTER_SOURCE,
    RELEASE_SIGNING_NAME,
    SUPPORTED_JAVA_VERSIONS,
)
from androidsign.exceptions import ConfigValidationError
from androidsign.log_utils import logger
from androidsign.settings import load_config
from androidsign.signing import SigningConfigResolver, SigningIdentity, debug_identity
from androidsign.tooling import ToolingContext, load_tooling_context

PathLike = Union[str, Path]

_PACKAGE_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+$")


def _java_version_label(version: str) -> str:
    # Gradle spells Java 8 as JavaVersion.VERSION_1_8
    if version in ("8", "1.8"):
        return "1.8"
    return version


@dataclass(frozen=True)
class BuildType:
    """
    A Gradle build type and the name of the signing config it uses.
    """

    name: str
    minify_enabled: bool
    shrink_resources: bool
    signing_config: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isMinifyEnabled": self.minify_enabled,
            "isShrinkResources": self.shrink_resources,
            "signingConfig": self.signing_config,
        }


@dataclass(frozen=True)
class AndroidBuildConfig:
    """
    The resolved Android packaging settings handed to the packaging tool.

    Attributes:
        namespace: Package namespace used for generated R and BuildConfig classes.
        application_id: Published application identifier.
        tooling: SDK bounds and version values from the Flutter tooling.
        java_version: Java source/target compatibility level; also the Kotlin jvmTarget.
        signing_configs: Configured signing identities by name. "debug" is always present.
        release_build_type: Settings of the release build type.
        flutter_source: Flutter source root relative to the Android project.
            Gradle sees it relative to the app module; see flutter_source_from_app.
    """

    namespace: str
    application_id: str
    tooling: ToolingContext
    java_version: str
    signing_configs: Mapping[str, SigningIdentity]
    release_build_type: BuildType
    flutter_source: str = DEFAULT_FLUTTER_SOURCE

    @property
    def release_signing(self) -> SigningIdentity:
        return self.signing_configs[self.release_build_type.signing_config]

    @property
    def flutter_source_from_app(self) -> str:
        """
        The Flutter source root as written in the app module's ``flutter { source }`` block.

        Returns:
            str: A POSIX path relative to ``<android>/app``, or the absolute path unchanged.
        """
        source = self.flutter_source.replace(os.sep, "/")
        if posixpath.isabs(source) or os.path.isabs(self.flutter_source):
            return self.flutter_source
        # The app module sits one directory below the Android project
        return posixpath.normpath(posixpath.join("..", source))

    @property
    def source_compatibility(self) -> str:
        return self.java_version

    @property
    def target_compatibility(self) -> str:
        return self.java_version

    @property
    def jvm_target(self) -> str:
        return self.java_version

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        """
        Serialize the configuration using the Gradle DSL property names.

        Paths keep the base directories Gradle uses, so ``flutter.source`` is
        relative to the app module. Passwords are masked unless `redact` is False.
        """
        return {
            "android": {
                "namespace": self.namespace,
                "compileSdk": self.tooling.compile_sdk,
                "ndkVersion": self.tooling.ndk_version,
                "compileOptions": {
                    "sourceCompatibility": self.source_compatibility,
                    "targetCompatibility": self.target_compatibility,
                },
                "kotlinOptions": {"jvmTarget": self.jvm_target},
                "defaultConfig": {
                    "applicationId": self.application_id,
                    "minSdk": self.tooling.min_sdk,
                    "targetSdk": self.tooling.target_sdk,
                    "versionCode": self.tooling.version_code,
                    "versionName": self.tooling.version_name,
                },
                "signingConfigs": {
                    name: identity.to_dict(redact=redact)
                    for name, identity in self.signing_configs.items()
                },
                "buildTypes": {
                    self.release_build_type.name: self.release_build_type.to_dict()
                },
            },
            "flutter": {"source": self.flutter_source_from_app},
        }


def build_android_config(
    settings: Mapping[str, Any],
    tooling: ToolingContext,
    identity: SigningIdentity,
) -> AndroidBuildConfig:
    """
    Combine settings, tooling values and the resolved signing identity.

    Raises:
        ConfigValidationError: If the application id or namespace is not a dotted
            package name, the Java level is unsupported, or resource shrinking is
            requested without minification.
    """
    application_id = settings["APPLICATION_ID"]
    namespace = settings.get("NAMESPACE") or application_id
    for key, value in (("APPLICATION_ID", application_id), ("NAMESPACE", namespace)):
        if not _PACKAGE_NAME.match(value):
            raise ConfigValidationError(
                f"{key} must be a dotted package name", field=key, value=value
            )

    java_version = str(settings["JAVA_VERSION"])
    if java_version not in SUPPORTED_JAVA_VERSIONS:
        raise ConfigValidationError(
            "Unsupported JAVA_VERSION",
            field="JAVA_VERSION",
            value=java_version,
            details=f"choose from {', '.join(SUPPORTED_JAVA_VERSIONS)}",
        )

    minify = settings["MINIFY_ENABLED"]
    shrink = settings["SHRINK_RESOURCES"]
    if shrink and not minify:
        raise ConfigValidationError(
            "SHRINK_RESOURCES requires MINIFY_ENABLED",
            field="SHRINK_RESOURCES",
            value=shrink,
        )

    signing_configs: Dict[str, SigningIdentity] = {identity.name: identity}
    if identity.is_release:
        signing_configs[DEBUG_SIGNING_NAME] = debug_identity()

    tooling.validate()
    return AndroidBuildConfig(
        namespace=namespace,
        application_id=application_id,
        tooling=tooling,
        java_version=_java_version_label(java_version),
        signing_configs=MappingProxyType(signing_configs),
        release_build_type=BuildType(
            name=RELEASE_SIGNING_NAME,
            minify_enabled=minify,
            shrink_resources=shrink,
            signing_config=identity.name,
        ),
        flutter_source=settings.get("FLUTTER_SOURCE", DEFAULT_FLUTTER_SOURCE),
    )


def resolve_android_config(
    android_dir: PathLike, settings: Optional[Mapping[str, Any]] = None
) -> AndroidBuildConfig:
    """
    Resolve the complete Android configuration for the project at `android_dir`.

    Settings are loaded with load_config() unless given. The credentials path
    and key-store base directory from the settings are resolved against
    `android_dir` when relative.

    Raises:
        ConfigurationError: For any invalid or incomplete configuration. A debug
            identity is never returned in place of an error.
    """
    android_dir = os.path.abspath(str(android_dir))
    if settings is None:
        settings = load_config(android_dir)

    resolver = SigningConfigResolver(
        android_dir,
        credentials_path=os.path.join(
            android_dir, os.path.expanduser(settings["KEY_PROPERTIES_FILE"])
        ),
        keystore_base_dir=os.path.join(
            android_dir, os.path.expanduser(settings["KEYSTORE_BASE_DIR"])
        ),
    )
    identity = resolver.resolve()
    tooling = load_tooling_context(
        android_dir,
        flutter_root=os.path.join(android_dir, settings["FLUTTER_SOURCE"]),
    )
    config = build_android_config(settings, tooling, identity)
    logger.debug(
        f"Resolved {config.application_id} with {identity.name} signing "
        f"(compileSdk {tooling.compile_sdk})"
    )
    return config
