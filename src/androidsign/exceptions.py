"""
Custom exceptions for androidsign.

This module defines domain-specific exceptions that separate the cases where a
build must fail from the cases that fall back to debug signing.
"""


class AndroidSignError(Exception):
    """
    Base exception for all androidsign errors.

    All custom exceptions in androidsign should inherit from this class
    to allow for easy catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AndroidSignError):
    """
    Exception raised when configuration is invalid or missing.

    This includes:
    - Missing required credential keys
    - Invalid settings or tooling values
    - Configuration file parsing errors
    """

    pass


class ConfigFileError(ConfigurationError):
    """
    Exception raised when a settings or properties file cannot be read or parsed.

    Attributes:
        path: The file that caused the error.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class PropertiesFormatError(ConfigFileError):
    """
    Exception raised when a properties file contains invalid syntax.

    Attributes:
        line: 1-based line number of the offending logical line, when known.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, path, details)
        self.line = line


class ConfigValidationError(ConfigurationError):
    """
    Exception raised when configuration validation fails.

    Attributes:
        field: The name of the setting that failed validation.
        value: The offending value.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Credentials Errors
# =============================================================================


class CredentialsError(ConfigurationError):
    """
    Exception raised when a present credentials file cannot be used for signing.

    Attributes:
        path: The credentials file that caused the error.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class MissingCredentialError(CredentialsError):
    """
    Exception raised when a credentials file exists but lacks required keys.

    Falling back to debug signing here would ship a mis-signed release
    artifact, so this is always fatal.

    Attributes:
        missing_keys: The required property keys that are absent or empty.
    """

    def __init__(
        self,
        missing_keys: list[str] | tuple[str, ...],
        path: str | None = None,
    ) -> None:
        self.missing_keys = tuple(missing_keys)
        details = ", ".join(self.missing_keys)
        if path:
            details = f"{details} (in {path})"
        super().__init__(
            "Credentials file is missing required keys", path=path, details=details
        )
