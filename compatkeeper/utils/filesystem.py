"""
Filesystem utilities for compatkeeper.

Read-only helpers for registry storage. Decoding failures surface as
:class:`~compatkeeper.exceptions.ParseError`, OS-level failures as
:class:`~compatkeeper.exceptions.FileOperationError`.
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Union

from compatkeeper.utils.logger import get_logger
from compatkeeper.exceptions import FileOperationError, ParseError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def read_toml(path: PathLike) -> Dict[str, Any]:
    """Read and decode a TOML file.

    Args:
        path: File to read.

    Returns:
        Decoded document as nested dictionaries.

    Raises:
        ParseError: The file is not valid TOML.
        FileOperationError: The file is missing or unreadable.
    """
    file_path = Path(path)
    logger.debug("Reading %s", file_path)

    try:
        with open(file_path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ParseError(
            f"Invalid TOML in {file_path.name}: {exc}",
            file_path=str(file_path),
        ) from exc
    except OSError as exc:
        raise FileOperationError(
            f"Cannot read {file_path}: {exc}",
            file_path=str(file_path),
            operation="read",
            original_error=exc,
        ) from exc


def list_directory_names(path: PathLike) -> List[str]:
    """Return the sorted entry names of a directory.

    Raises:
        FileOperationError: The directory is missing or unreadable.
    """
    directory = Path(path)
    try:
        return sorted(entry.name for entry in directory.iterdir())
    except OSError as exc:
        raise FileOperationError(
            f"Cannot list {directory}: {exc}",
            file_path=str(directory),
            operation="list",
            original_error=exc,
        ) from exc
