"""
compatkeeper version information.

This module provides a single source of truth for the package version.

Version format:
    MAJOR.MINOR.PATCH[.PRERELEASE]
"""

from __future__ import annotations

import re

__version__ = "0.1.0.dev0"


def _parse_version(version: str):
    """Break the package version into its components.

    Returns:
        dict: ``major``, ``minor``, ``patch`` (ints), ``prerelease``
        (str or None) and ``is_dev`` (bool).
    """
    pattern = r"^(\d+)\.(\d+)\.(\d+)(?:[.-]([a-zA-Z0-9]+))?$"
    match = re.match(pattern, version)

    if not match:
        raise ValueError(f"Invalid version string: {version}")

    major, minor, patch, pre = match.groups()

    return {
        "major": int(major),
        "minor": int(minor),
        "patch": int(patch),
        "prerelease": pre,
        "is_dev": pre is not None and pre.startswith("dev"),
    }


VERSION_INFO = _parse_version(__version__)

VERSION_STRING = f"compatkeeper {__version__}"
