"""Registry index builder for compatkeeper.

Turns one or more registry directories into a :class:`RegistryIndex`, an
immutable ``UUID -> PackageRecord`` mapping with every package resolved to
its maximum live version.

A registry directory contains a ``Registry.toml`` manifest::

    name = "General"
    uuid = "23338594-aafe-5451-b93e-139f81909106"

    [packages]
    7876af07-990d-54b4-ab0e-23690620f79a = { name = "Example", path = "E/Example" }

Sources are read in the order given. When two sources register the same
UUID the later one wins and a warning is logged.

Typical usage::

    sources = discover_registries()
    index = build_index(sources, overrides={"Example": "0.6.0"})
    index.find("Example")
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
from uuid import UUID

from compatkeeper.constants import (
    DEFAULT_DEPOT_DIR,
    DEPOT_PATH_ENV,
    REGISTRIES_DIR,
    REGISTRY_FILE,
)
from compatkeeper.core.versions import (
    Overrides,
    load_version_table,
    max_live_version,
    resolve_override,
)
from compatkeeper.exceptions import ParseError
from compatkeeper.models.package import PackageRecord
from compatkeeper.utils.filesystem import read_toml
from compatkeeper.utils.logger import get_logger

logger = get_logger("core.registry")

__all__ = [
    "ManifestEntry",
    "RegistryIndex",
    "build_index",
    "depot_paths",
    "discover_registries",
    "load_manifest",
]

PathLike = Union[str, Path]

#: ``(uuid, name, absolute package directory)`` as listed in a manifest.
ManifestEntry = Tuple[UUID, str, Path]


class RegistryIndex(Mapping):
    """Read-only ``UUID -> PackageRecord`` mapping produced by :func:`build_index`.

    Records are immutable and the mapping cannot be changed after
    construction, so one index can be shared by every step of a computation.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Dict[UUID, PackageRecord]) -> None:
        self._records = MappingProxyType(dict(records))

    def __getitem__(self, identity: UUID) -> PackageRecord:
        return self._records[identity]

    def __iter__(self) -> Iterator[UUID]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, name: str) -> List[PackageRecord]:
        """Return every record registered under ``name``."""
        return [record for record in self._records.values() if record.name == name]

    def __repr__(self) -> str:
        return f"RegistryIndex(packages={len(self)})"


def depot_paths(environ: Optional[Mapping] = None) -> List[Path]:
    """Return the depot directories to search for registries.

    Reads :data:`DEPOT_PATH_ENV` (``os.pathsep`` separated). Empty entries
    expand to the default depot; an unset variable means the default alone.
    """
    env = os.environ if environ is None else environ
    default = Path(DEFAULT_DEPOT_DIR).expanduser()

    raw = env.get(DEPOT_PATH_ENV)
    if not raw:
        return [default]

    paths: List[Path] = []
    for entry in raw.split(os.pathsep):
        path = Path(entry).expanduser() if entry else default
        if path not in paths:
            paths.append(path)
    return paths


def discover_registries(depots: Optional[Sequence[PathLike]] = None) -> List[Path]:
    """Find installed registries under each depot's ``registries`` directory.

    Results are ordered by depot, then by registry directory name. Only
    unpacked registries (directories containing ``Registry.toml``) count.

    Args:
        depots: Depot directories; defaults to :func:`depot_paths`.
    """
    found: List[Path] = []
    for depot in depots if depots is not None else depot_paths():
        registries_dir = Path(depot) / REGISTRIES_DIR
        if not registries_dir.is_dir():
            logger.debug("No registries directory in %s", depot)
            continue
        for candidate in sorted(registries_dir.iterdir()):
            if (candidate / REGISTRY_FILE).is_file():
                found.append(candidate)

    logger.debug("Discovered registries: %s", [str(p) for p in found])
    return found


def load_manifest(registry_path: PathLike) -> List[ManifestEntry]:
    """Parse a registry manifest into ``(uuid, name, package dir)`` triples.

    Raises:
        ParseError: The ``packages`` table is missing, a key is not a UUID,
            or an entry lacks ``name`` or ``path``.
        FileOperationError: The manifest cannot be read.
    """
    root = Path(registry_path)
    manifest = root / REGISTRY_FILE
    raw = read_toml(manifest)

    packages = raw.get("packages")
    if not isinstance(packages, dict):
        raise ParseError("Registry manifest has no [packages] table", file_path=str(manifest))

    entries: List[ManifestEntry] = []
    for key, data in packages.items():
        try:
            identity = UUID(key)
        except ValueError as exc:
            raise ParseError("Invalid package UUID", file_path=str(manifest), key=key) from exc

        if not isinstance(data, dict):
            raise ParseError("Package entry must be a table", file_path=str(manifest), key=key)

        name, path = data.get("name"), data.get("path")
        if not isinstance(name, str) or not isinstance(path, str):
            raise ParseError(
                "Package entry needs string 'name' and 'path'",
                file_path=str(manifest),
                key=key,
            )
        entries.append((identity, name, root / path))

    return entries


def build_index(
    sources: Sequence[PathLike],
    overrides: Optional[Overrides] = None,
) -> RegistryIndex:
    """Build the package index from registry directories.

    Storage is re-read on every call; nothing is cached between builds.

    Args:
        sources: Registry directories, in precedence order (last wins).
        overrides: Prospective versions keyed by UUID, UUID string or name.

    Returns:
        A fresh :class:`RegistryIndex`.

    Raises:
        ParseError: A manifest or version file is malformed, or a package has
            no live version.
        FileOperationError: A required file cannot be read.
    """
    records: Dict[UUID, PackageRecord] = {}

    for source in sources:
        entries = load_manifest(source)
        logger.debug("Registry %s lists %d package(s)", source, len(entries))

        for identity, name, path in entries:
            table = load_version_table(path)
            prospective = resolve_override(overrides, identity, name)

            if identity in records:
                logger.warning(
                    "Package %s (%s) from %s supersedes an earlier registry",
                    name,
                    identity,
                    source,
                )

            records[identity] = PackageRecord(
                identity=identity,
                name=name,
                path=path,
                max_version=max_live_version(table, prospective, package=name),
                versions=frozenset(table),
            )

    logger.info("Indexed %d package(s) from %d registr(y/ies)", len(records), len(sources))
    return RegistryIndex(records)
