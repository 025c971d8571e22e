"""Version table loading for compatkeeper.

Reads a package's ``Versions.toml``::

    ["1.0.0"]
    git-tree-sha1 = "..."

    ["1.1.0"]
    git-tree-sha1 = "..."
    yanked = true

and reduces it to the maximum live version, optionally taking a caller
supplied prospective version into account.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID

from semver import Version

from compatkeeper.constants import SENTINEL_TREE_HASH, VERSIONS_FILE
from compatkeeper.exceptions import ParseError
from compatkeeper.utils.filesystem import read_toml
from compatkeeper.utils.logger import get_logger

logger = get_logger("core.versions")

__all__ = [
    "VersionEntry",
    "VersionLike",
    "Overrides",
    "parse_version",
    "load_version_table",
    "live_versions",
    "resolve_override",
    "max_live_version",
]

VersionLike = Union[str, Version]

#: Prospective versions keyed by package UUID (or its string form) or name.
Overrides = Mapping[Union[UUID, str], VersionLike]


@dataclass(frozen=True)
class VersionEntry:
    """One row of a version table.

    Attributes:
        version: The registered version.
        tree_hash: Content hash of the release tree.
        yanked: Whether the release was withdrawn.
    """

    version: Version
    tree_hash: str
    yanked: bool = False


def parse_version(value: VersionLike, *, file_path: Optional[str] = None) -> Version:
    """Parse a semantic version, passing :class:`Version` objects through.

    A leading ``v`` is accepted, and missing minor or patch numbers count
    as zero (``"2"`` is ``2.0.0``). Prerelease and build tags are kept as
    written, so ``str()`` gives back the registry's spelling.

    Raises:
        ParseError: ``value`` is not a valid version.
    """
    if isinstance(value, Version):
        return value

    text = str(value).strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return Version.parse(text, optional_minor_and_patch=True)
    except ValueError as exc:
        raise ParseError(
            f"Invalid version {value!r}",
            file_path=file_path,
            key=str(value),
        ) from exc


def load_version_table(package_path: Path) -> Dict[Version, VersionEntry]:
    """Load every entry of a package's version file, yanked ones included.

    Raises:
        ParseError: An entry is not a table, lacks ``git-tree-sha1`` or has a
            non-boolean ``yanked`` flag, or a key is not a valid version.
        FileOperationError: The version file cannot be read.
    """
    path = package_path / VERSIONS_FILE
    raw = read_toml(path)

    table: Dict[Version, VersionEntry] = {}
    for key, info in raw.items():
        version = parse_version(key, file_path=str(path))
        table[version] = _parse_entry(version, info, file_path=str(path), key=key)

    return table


def _parse_entry(
    version: Version,
    info: Any,
    *,
    file_path: str,
    key: str,
) -> VersionEntry:
    if not isinstance(info, dict):
        raise ParseError("Version entry must be a table", file_path=file_path, key=key)

    tree_hash = info.get("git-tree-sha1")
    if not isinstance(tree_hash, str):
        raise ParseError(
            "Version entry is missing 'git-tree-sha1'",
            file_path=file_path,
            key=key,
        )

    yanked = info.get("yanked", False)
    if not isinstance(yanked, bool):
        raise ParseError("'yanked' must be a boolean", file_path=file_path, key=key)

    return VersionEntry(version=version, tree_hash=tree_hash, yanked=yanked)


def live_versions(table: Mapping[Version, VersionEntry]) -> Dict[Version, str]:
    """Return ``version -> tree hash`` for the non-yanked entries."""
    return {v: entry.tree_hash for v, entry in table.items() if not entry.yanked}


def resolve_override(
    overrides: Optional[Overrides],
    identity: UUID,
    name: str,
) -> Optional[Version]:
    """Find the prospective version for a package.

    Keys are tried in a fixed order: the UUID, its string form, then the
    package name.
    """
    if not overrides:
        return None

    for key in (identity, str(identity), name):
        if key in overrides:
            return parse_version(overrides[key])

    return None


def max_live_version(
    table: Mapping[Version, VersionEntry],
    prospective: Optional[Version] = None,
    *,
    package: str = "",
) -> Version:
    """Return the highest live version, counting ``prospective`` as live.

    The prospective version is added with :data:`SENTINEL_TREE_HASH` and is
    only used for this maximum.

    Raises:
        ParseError: No live version remains.
    """
    live = live_versions(table)
    if prospective is not None:
        logger.debug("Injecting prospective version %s for %s", prospective, package)
        live[prospective] = SENTINEL_TREE_HASH

    if not live:
        raise ParseError(f"Package {package!r} has no live versions", key=package)

    return max(live)
