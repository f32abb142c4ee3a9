import textwrap
from pathlib import Path

import platformdirs
import pytest


def pytest_configure(config):
    """
    Register the markers used by the androidsign test-suite.
    """
    config.addinivalue_line("markers", "unit: fast isolated unit test")
    config.addinivalue_line(
        "markers", "integration: test touching several modules and the filesystem"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the settings module at temporary directories.

    Also clears the environment variables androidsign reads so a developer's
    shell cannot leak into test results.
    """
    base = tmp_path_factory.mktemp("androidsign")
    config_dir = base / "config"
    home_dir = base / "home"
    for path in (config_dir, home_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("ANDROIDSIGN_KEY_PROPERTIES", raising=False)
    monkeypatch.delenv("ANDROIDSIGN_LOG_LEVEL", raising=False)

    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )

    import androidsign.settings as settings

    monkeypatch.setattr(settings, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        settings, "CONFIG_FILE", str(Path(config_dir) / settings.CONFIG_FILE_NAME)
    )


def _write_key_properties(
    path: Path,
    key_alias="upload",
    key_password="keypass",
    store_file="upload-keystore.jks",
    store_password="storepass",
) -> Path:
    """
    Write a key.properties file, omitting any entry whose value is None.
    """
    entries = {
        "keyAlias": key_alias,
        "keyPassword": key_password,
        "storeFile": store_file,
        "storePassword": store_password,
    }
    lines = [f"{key}={value}" for key, value in entries.items() if value is not None]
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")
    return path


@pytest.fixture(name="write_key_properties")
def write_key_properties_fixture():
    """
    Provide the key.properties writer to tests.
    """
    return _write_key_properties


@pytest.fixture
def android_project(tmp_path):
    """
    Create a Flutter app layout: <app>/pubspec.yaml and <app>/android/app/.

    Returns:
        Path: The Android project directory.
    """
    flutter_root = tmp_path / "my_app"
    android_dir = flutter_root / "android"
    (android_dir / "app").mkdir(parents=True)
    (flutter_root / "pubspec.yaml").write_text(
        textwrap.dedent(
            """
            name: my_app
            version: 2.4.1+17
            environment:
              sdk: ">=3.0.0 <4.0.0"
            """
        ),
        encoding="utf-8",
    )
    return android_dir


@pytest.fixture
def release_project(android_project):
    """
    An Android project with a complete key.properties and an existing key-store.
    """
    _write_key_properties(android_project / "key.properties")
    (android_project / "app" / "upload-keystore.jks").write_bytes(b"\xfe\xed\xfe\xed")
    return android_project
