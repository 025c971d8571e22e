"""
Utility helpers for compatkeeper.

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Async HTTP client used by GitHub discovery
- Read-only registry file helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from compatkeeper.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)
from compatkeeper.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)
from compatkeeper.utils.http import HTTPClient
from compatkeeper.utils.filesystem import list_directory_names, read_toml

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "level_for_verbosity",
    "is_logging_configured",
    # HTTP
    "HTTPClient",
    # Filesystem
    "read_toml",
    "list_directory_names",
]
