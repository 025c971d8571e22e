"""Lookup in range-compressed registry tables.

``Deps.toml`` and ``Compat.toml`` are keyed by version ranges rather than by
single versions::

    ["0.5-0.7"]
    Example = "7876af07-990d-54b4-ab0e-23690620f79a"

    ["0.6-1"]
    Example = "0.3-0.4"

A version is covered by a range key when its numeric release lies between
the lower and upper bound, each bound being a prefix of 0-3 components
(``*`` or an empty bound is unbounded). Prerelease and build tags are
ignored when matching keys. Several keys can cover the same version; their
tables are merged in file order.

The rest of compatkeeper only calls :func:`lookup`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Collection, Dict, Optional, Tuple

from semver import Version

from compatkeeper.exceptions import ParseError
from compatkeeper.utils.filesystem import read_toml

__all__ = ["VersionRange", "load_table", "lookup"]

_BOUND_RE = re.compile(r"^(?:\*|v?\d+(?:\.\d+){0,2})?$")

RangeTable = Dict[str, Dict[str, Any]]


def _parse_bound(text: str, key: str) -> Tuple[int, ...]:
    text = text.strip()
    if not _BOUND_RE.match(text):
        raise ParseError(f"Invalid version bound {text!r}", key=key)
    if text in ("", "*"):
        return ()
    return tuple(int(part) for part in text.lstrip("v").split("."))


@dataclass(frozen=True)
class VersionRange:
    """A closed range between two version-prefix bounds.

    Attributes:
        lower: Lower bound components; ``()`` is unbounded.
        upper: Upper bound components; ``()`` is unbounded.
    """

    lower: Tuple[int, ...]
    upper: Tuple[int, ...]

    @classmethod
    def parse(cls, key: str) -> "VersionRange":
        """Parse ``"a"``, ``"a-b"`` or ``"*"``.

        Raises:
            ParseError: The key is not a range expression.
        """
        lower, sep, upper = key.partition("-")
        low = _parse_bound(lower, key)
        if not sep:
            return cls(low, low)
        return cls(low, _parse_bound(upper, key))

    def contains(self, version: Version) -> bool:
        """Return True if the release numbers of ``version`` are in range."""
        release = (version.major, version.minor, version.patch)
        if self.lower and release[: len(self.lower)] < self.lower:
            return False
        if self.upper and release[: len(self.upper)] > self.upper:
            return False
        return True

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.contains(version)

    def __str__(self) -> str:
        def fmt(bound: Tuple[int, ...]) -> str:
            return ".".join(str(p) for p in bound) if bound else "*"

        if self.lower == self.upper:
            return fmt(self.lower)
        return f"{fmt(self.lower)}-{fmt(self.upper)}"


def load_table(path: Path) -> RangeTable:
    """Read a range-compressed table file.

    Raises:
        ParseError: The file is not valid TOML or a key does not map to a table.
        FileOperationError: The file cannot be read.
    """
    raw = read_toml(path)
    for key, value in raw.items():
        if not isinstance(value, dict):
            raise ParseError(
                "Range entry must be a table",
                file_path=str(path),
                key=key,
            )
    return raw


def lookup(
    table: RangeTable,
    version: Version,
    registered: Collection[Version],
) -> Optional[Dict[str, Any]]:
    """Return the merged mapping for ``version``, or ``None`` if absent.

    Args:
        table: Decoded range table.
        version: Version to look up.
        registered: Versions the package has registered. A version outside
            this collection has no entry, whatever the range keys cover.

    Raises:
        ParseError: A range key is malformed.
    """
    if version not in registered:
        return None

    merged: Optional[Dict[str, Any]] = None
    for key, values in table.items():
        if VersionRange.parse(key).contains(version):
            if merged is None:
                merged = {}
            merged.update(values)

    return merged
