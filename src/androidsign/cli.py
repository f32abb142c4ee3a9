# src/androidsign/cli.py

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from androidsign import log_utils, settings
from androidsign.android_config import AndroidBuildConfig, resolve_android_config
from androidsign.exceptions import ConfigurationError

OUTPUT_FORMATS = ("yaml", "json")


def get_version() -> Optional[str]:
    """
    Return the installed androidsign version, or None when the package metadata is unavailable.
    """
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("androidsign")
    except PackageNotFoundError:
        return None


def _load_settings(android_dir: str) -> Optional[Dict[str, Any]]:
    """
    Load settings for `android_dir` and apply the configured logging.

    LOG_LEVEL sets the console level. LOG_DIR, resolved against `android_dir`
    when relative, enables the rotating log file.

    Returns:
        dict | None: The settings, or None after logging the error if they are invalid.
    """
    try:
        config = settings.load_config(android_dir)
    except ConfigurationError as error:
        log_utils.logger.error(f"Invalid settings: {error}")
        return None

    if config.get("LOG_LEVEL"):
        log_utils.set_log_level(config["LOG_LEVEL"])
    if config.get("LOG_DIR"):
        log_dir = os.path.join(android_dir, os.path.expanduser(config["LOG_DIR"]))
        log_utils.add_file_logging(Path(log_dir), config.get("LOG_LEVEL") or "INFO")
    return config


def _resolve(android_dir: str) -> Optional[AndroidBuildConfig]:
    """
    Resolve the Android configuration, logging configuration errors instead of raising.
    """
    if not os.path.isdir(android_dir):
        log_utils.logger.error(f"Android project directory not found: {android_dir}")
        return None

    config = _load_settings(android_dir)
    if config is None:
        return None

    try:
        return resolve_android_config(android_dir, settings=config)
    except ConfigurationError as error:
        log_utils.logger.error(f"Configuration error: {error}")
        return None


def format_config(
    build_config: AndroidBuildConfig, output_format: str, redact: bool = True
) -> str:
    """
    Render a resolved configuration for printing.

    Parameters:
        build_config (AndroidBuildConfig): The resolved configuration.
        output_format (str): "json" or "yaml"; anything else is treated as yaml.
        redact (bool): Mask key and key-store passwords when True.

    Returns:
        str: The serialized configuration, keys in Gradle DSL order.
    """
    data = build_config.to_dict(redact=redact)
    if output_format == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False)


def run_resolve(args: argparse.Namespace) -> int:
    """
    Print the resolved configuration for `args.android_dir` to stdout.

    Returns:
        int: 0 on success, 1 if the configuration could not be resolved.
    """
    build_config = _resolve(args.android_dir)
    if build_config is None:
        return 1
    print(format_config(build_config, args.format, redact=not args.show_secrets))
    return 0


def run_signing(args: argparse.Namespace) -> int:
    """
    Log the signing config that release builds use and why it was chosen.

    Passwords are never logged.

    Returns:
        int: 0 on success, 1 if the configuration could not be resolved.
    """
    build_config = _resolve(args.android_dir)
    if build_config is None:
        return 1

    identity = build_config.release_signing
    log_utils.logger.info(f"Release build signing config: {identity.name}")
    log_utils.logger.info(f"Key alias: {identity.key_alias}")
    log_utils.logger.info(f"Key-store: {identity.store_file}")
    if identity.reason:
        log_utils.logger.info(f"Reason: {identity.reason}")
    return 0


def run_check(args: argparse.Namespace) -> int:
    """
    Validate the configuration for CI.

    Parameters:
        args (argparse.Namespace): Parsed arguments; `require_release` makes a debug
            fallback a failure.

    Returns:
        int: 0 when the configuration is valid, 1 otherwise.
    """
    build_config = _resolve(args.android_dir)
    if build_config is None:
        return 1

    identity = build_config.release_signing
    if args.require_release and not identity.is_release:
        log_utils.logger.error(
            f"Release signing is required but the debug identity would be used ({identity.reason})."
        )
        return 1

    log_utils.logger.info(
        f"Configuration OK: {build_config.application_id} signs release builds with '{identity.name}'."
    )
    return 0


def main():
    """
    Entry point for the androidsign command-line interface.

    Parses command-line arguments and dispatches subcommands: resolve, signing,
    check and version. Exits with status 1 when the configuration cannot be
    resolved.
    """
    parser = argparse.ArgumentParser(
        description="androidsign - Android packaging and release signing configuration resolver"
    )
    subparsers = parser.add_subparsers(dest="command")

    def add_android_dir(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--android-dir",
            default=os.getcwd(),
            help="Android project directory holding key.properties (default: current directory)",
        )

    # Command to print the full resolved configuration
    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the resolved Android packaging configuration"
    )
    add_android_dir(resolve_parser)
    resolve_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="yaml",
        help="Output format (default: yaml)",
    )
    resolve_parser.add_argument(
        "--show-secrets",
        action="store_true",
        help="Include key and key-store passwords in the output",
    )

    # Command to explain the signing decision
    signing_parser = subparsers.add_parser(
        "signing", help="Show which signing identity release builds use and why"
    )
    add_android_dir(signing_parser)

    # Command to validate configuration (for CI)
    check_parser = subparsers.add_parser(
        "check", help="Validate the configuration and exit non-zero on errors"
    )
    add_android_dir(check_parser)
    check_parser.add_argument(
        "--require-release",
        action="store_true",
        help="Fail when release builds would fall back to debug signing",
    )

    # Command to display version
    subparsers.add_parser("version", help="Display androidsign version")

    args = parser.parse_args()

    if args.command == "resolve":
        sys.exit(run_resolve(args))
    elif args.command == "signing":
        sys.exit(run_signing(args))
    elif args.command == "check":
        sys.exit(run_check(args))
    elif args.command == "version":
        current_version = get_version()
        log_utils.logger.info(f"androidsign v{current_version or 'unknown'}")
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
