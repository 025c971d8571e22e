"""
Custom exception hierarchy for compatkeeper.

All exceptions inherit from :class:`CompatKeeperError` and carry optional
structured metadata via the ``details`` attribute, which is appended to the
string form for diagnostics and logging.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class CompatKeeperError(Exception):
    """Base exception for all compatkeeper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ParseError(CompatKeeperError):
    """Raised when registry data is structurally malformed.

    Covers manifests and version files with missing fields, unparsable
    version strings, compat strings and range keys.

    Args:
        message: Error description.
        file_path: Path to the file being parsed.
        key: Offending key or value inside the file.
    """

    __slots__ = ("file_path", "key")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        _add_if(details, "key", key)

        super().__init__(message, details)

        self.file_path = file_path
        self.key = key


class RegistryInconsistencyError(CompatKeeperError):
    """Raised when a dependency identity is missing from the registry index.

    A well-formed registry snapshot never triggers this.

    Args:
        message: Error description.
        holder: Name of the package declaring the dependency.
        dependency: Dependency name as declared.
        identity: Dependency identity that could not be found.
    """

    __slots__ = ("holder", "dependency", "identity")

    def __init__(
        self,
        message: str,
        *,
        holder: Optional[str] = None,
        dependency: Optional[str] = None,
        identity: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "holder", holder)
        _add_if(details, "dependency", dependency)
        _add_if(details, "uuid", identity)

        super().__init__(message, details)

        self.holder = holder
        self.dependency = dependency
        self.identity = identity


class ConfigError(CompatKeeperError):
    """Raised when the configuration file is invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file.
        option: Offending option name.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class NetworkError(CompatKeeperError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class CredentialError(CompatKeeperError):
    """Raised when the hosting credential is missing or unusable.

    Args:
        message: Error description.
        env_var: Environment variable expected to hold the credential.
    """

    __slots__ = ("env_var",)

    def __init__(self, message: str, *, env_var: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "env", env_var)

        super().__init__(message, details)

        self.env_var = env_var


class FileOperationError(CompatKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed.
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
