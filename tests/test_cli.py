import json

import pytest
import yaml

from androidsign import cli


def run_cli(mocker, *argv):
    """
    Run cli.main() with the given arguments and return its exit code.
    """
    mocker.patch("sys.argv", ["androidsign", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


@pytest.mark.unit
def test_cli_no_command_prints_help(mocker, capsys):
    mocker.patch("sys.argv", ["androidsign"])
    cli.main()
    assert "usage:" in capsys.readouterr().out


@pytest.mark.unit
def test_cli_version_command(mocker):
    mocker.patch("sys.argv", ["androidsign", "version"])
    mocker.patch("androidsign.cli.get_version", return_value="1.2.3")
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")

    cli.main()

    mock_logger.info.assert_called_once_with("androidsign v1.2.3")


@pytest.mark.unit
def test_cli_version_unknown_when_not_installed(mocker):
    mocker.patch("sys.argv", ["androidsign", "version"])
    mocker.patch("androidsign.cli.get_version", return_value=None)
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")

    cli.main()

    mock_logger.info.assert_called_once_with("androidsign vunknown")


@pytest.mark.integration
def test_cli_resolve_yaml_redacts_secrets(mocker, capsys, release_project):
    code = run_cli(mocker, "resolve", "--android-dir", str(release_project))

    assert code == 0
    data = yaml.safe_load(capsys.readouterr().out)
    release = data["android"]["signingConfigs"]["release"]
    assert release["keyAlias"] == "upload"
    assert release["keyPassword"] == "****"
    assert release["storePassword"] == "****"
    assert data["android"]["buildTypes"]["release"]["signingConfig"] == "release"


@pytest.mark.integration
def test_cli_resolve_json_with_secrets(mocker, capsys, release_project):
    code = run_cli(
        mocker,
        "resolve",
        "--android-dir",
        str(release_project),
        "--format",
        "json",
        "--show-secrets",
    )

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    release = data["android"]["signingConfigs"]["release"]
    assert release["keyPassword"] == "keypass"
    assert release["storePassword"] == "storepass"


@pytest.mark.integration
def test_cli_resolve_missing_directory(mocker, tmp_path):
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")
    code = run_cli(mocker, "resolve", "--android-dir", str(tmp_path / "missing"))

    assert code == 1
    assert "not found" in mock_logger.error.call_args[0][0]


@pytest.mark.integration
def test_cli_signing_reports_debug_fallback(mocker, android_project):
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")
    code = run_cli(mocker, "signing", "--android-dir", str(android_project))

    assert code == 0
    mock_logger.info.assert_any_call("Release build signing config: debug")
    mock_logger.info.assert_any_call("Key alias: androiddebugkey")


@pytest.mark.integration
def test_cli_signing_does_not_log_passwords(mocker, release_project):
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")
    code = run_cli(mocker, "signing", "--android-dir", str(release_project))

    assert code == 0
    logged = " ".join(str(call) for call in mock_logger.method_calls)
    assert "Release build signing config: release" in logged
    assert "keypass" not in logged
    assert "storepass" not in logged


@pytest.mark.integration
def test_cli_check_ok(mocker, release_project):
    assert run_cli(mocker, "check", "--android-dir", str(release_project)) == 0


@pytest.mark.integration
def test_cli_check_require_release_fails_on_debug(mocker, android_project):
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")
    code = run_cli(
        mocker, "check", "--android-dir", str(android_project), "--require-release"
    )

    assert code == 1
    assert "Release signing is required" in mock_logger.error.call_args[0][0]


@pytest.mark.integration
def test_cli_check_require_release_passes_on_release(mocker, release_project):
    code = run_cli(
        mocker, "check", "--android-dir", str(release_project), "--require-release"
    )
    assert code == 0


@pytest.mark.integration
def test_cli_check_fails_on_incomplete_credentials(
    mocker, android_project, write_key_properties
):
    write_key_properties(android_project / "key.properties", key_alias=None)
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")

    code = run_cli(mocker, "check", "--android-dir", str(android_project))

    assert code == 1
    message = mock_logger.error.call_args[0][0]
    assert message.startswith("Configuration error:")
    assert "keyAlias" in message
    assert str(android_project / "key.properties") in message


@pytest.mark.integration
def test_cli_check_fails_on_invalid_settings(mocker, android_project):
    (android_project / "androidsign.yaml").write_text("MINIFY_ENABLED: maybe\n")
    mock_logger = mocker.patch("androidsign.cli.log_utils.logger")

    code = run_cli(mocker, "check", "--android-dir", str(android_project))

    assert code == 1
    assert mock_logger.error.call_args[0][0].startswith("Invalid settings:")


@pytest.mark.integration
def test_cli_applies_configured_log_level(mocker, android_project):
    (android_project / "androidsign.yaml").write_text("LOG_LEVEL: DEBUG\n")
    mock_set_level = mocker.patch("androidsign.cli.log_utils.set_log_level")

    assert run_cli(mocker, "check", "--android-dir", str(android_project)) == 0
    mock_set_level.assert_called_once_with("DEBUG")


@pytest.mark.unit
def test_format_config_json_and_yaml_agree(release_project):
    from androidsign.android_config import resolve_android_config

    build_config = resolve_android_config(release_project)
    as_json = json.loads(cli.format_config(build_config, "json"))
    as_yaml = yaml.safe_load(cli.format_config(build_config, "yaml"))
    assert as_json == as_yaml


@pytest.mark.integration
def test_cli_enables_file_logging_from_settings(mocker, android_project):
    (android_project / "androidsign.yaml").write_text(
        "LOG_LEVEL: DEBUG\nLOG_DIR: build/logs\n"
    )
    mocker.patch("androidsign.cli.log_utils.set_log_level")
    mock_file_logging = mocker.patch("androidsign.cli.log_utils.add_file_logging")

    assert run_cli(mocker, "check", "--android-dir", str(android_project)) == 0
    mock_file_logging.assert_called_once_with(
        android_project / "build" / "logs", "DEBUG"
    )


@pytest.mark.integration
def test_cli_file_logging_off_by_default(mocker, android_project):
    mock_file_logging = mocker.patch("androidsign.cli.log_utils.add_file_logging")

    assert run_cli(mocker, "check", "--android-dir", str(android_project)) == 0
    mock_file_logging.assert_not_called()
