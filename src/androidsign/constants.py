"""
Constants and default values for androidsign.

This module contains the file names, property keys, Flutter tooling defaults,
and logging settings used throughout the application.
"""

# File names
KEY_PROPERTIES_FILE_NAME = "key.properties"
LOCAL_PROPERTIES_FILE_NAME = "local.properties"
PUBSPEC_FILE_NAME = "pubspec.yaml"
SETTINGS_FILE_NAME = "androidsign.yaml"

# Key-store paths in key.properties are resolved against <android>/app
DEFAULT_KEYSTORE_BASE_DIR = "app"
# Flutter source root relative to the Android project directory
DEFAULT_FLUTTER_SOURCE = ".."

# Credential property keys (key.properties)
PROP_KEY_ALIAS = "keyAlias"
PROP_KEY_PASSWORD = "keyPassword"
PROP_STORE_FILE = "storeFile"
PROP_STORE_PASSWORD = "storePassword"
REQUIRED_CREDENTIAL_KEYS = (
    PROP_KEY_ALIAS,
    PROP_KEY_PASSWORD,
    PROP_STORE_FILE,
    PROP_STORE_PASSWORD,
)

# Signing config names
RELEASE_SIGNING_NAME = "release"
DEBUG_SIGNING_NAME = "debug"

# Android SDK debug keystore
DEBUG_KEYSTORE_PATH = "~/.android/debug.keystore"
DEBUG_KEY_ALIAS = "androiddebugkey"
DEBUG_KEY_PASSWORD = "android"  # noqa: S105
DEBUG_STORE_PASSWORD = "android"  # noqa: S105

REDACTED_VALUE = "****"

# Application defaults
DEFAULT_APPLICATION_ID = "com.mcb.lxdklp.mcb"
DEFAULT_JAVA_VERSION = "11"
SUPPORTED_JAVA_VERSIONS = ("1.8", "8", "11", "17", "21")
DEFAULT_MINIFY_ENABLED = False
DEFAULT_SHRINK_RESOURCES = False

# Flutter Gradle plugin defaults (FlutterExtension)
FLUTTER_COMPILE_SDK_VERSION = 35
FLUTTER_MIN_SDK_VERSION = 21
FLUTTER_TARGET_SDK_VERSION = 35
FLUTTER_NDK_VERSION = "27.0.12077973"
FLUTTER_VERSION_CODE = 1
FLUTTER_VERSION_NAME = "1.0"

# local.properties keys written by the Flutter tool
LOCAL_PROP_VERSION_NAME = "flutter.versionName"
LOCAL_PROP_VERSION_CODE = "flutter.versionCode"
LOCAL_PROP_COMPILE_SDK = "flutter.compileSdkVersion"
LOCAL_PROP_MIN_SDK = "flutter.minSdkVersion"
LOCAL_PROP_TARGET_SDK = "flutter.targetSdkVersion"
LOCAL_PROP_NDK_VERSION = "flutter.ndkVersion"

# Environment variables
KEY_PROPERTIES_ENV_VAR = "ANDROIDSIGN_KEY_PROPERTIES"

# Logging configuration
LOGGER_NAME = "androidsign"
LOG_LEVEL_ENV_VAR = "ANDROIDSIGN_LOG_LEVEL"
LOG_FILE_NAME = "androidsign.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_FILE_BACKUP_COUNT = 3
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
DEBUG_LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(module)s.%(funcName)s:%(lineno)d]: %(message)s"
)
