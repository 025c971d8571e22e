"""Compat/Deps resolution for a single package.

Looks up, for a package's maximum version, the dependencies it declares in
``Deps.toml`` and the compat bounds it declares in ``Compat.toml``. Missing
files and missing per-version entries are expected and come back as
``None``; only malformed data raises.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple
from uuid import UUID

from compatkeeper.constants import COMPAT_FILE, DEPS_FILE
from compatkeeper.core.compress import load_table, lookup
from compatkeeper.exceptions import ParseError
from compatkeeper.models.compat import CompatValue
from compatkeeper.models.package import PackageRecord
from compatkeeper.utils.logger import get_logger

logger = get_logger("core.resolver")

__all__ = ["ResolvedDeps", "ResolvedCompat", "resolve"]

#: Dependency name -> dependency UUID.
ResolvedDeps = Dict[str, UUID]

#: Dependency name -> declared compat string (or list of strings).
ResolvedCompat = Dict[str, CompatValue]


def resolve(
    record: PackageRecord,
) -> Tuple[Optional[ResolvedDeps], Optional[ResolvedCompat]]:
    """Resolve the deps and compat tables of ``record`` at its max version.

    Returns:
        ``(deps, compat)``. Both are ``None`` when the package has no deps
        file at all. Otherwise each is ``None`` when its file or its entry
        for ``record.max_version`` is missing.

    Raises:
        ParseError: A table is malformed or a dependency UUID is invalid.
        FileOperationError: A table exists but cannot be read.
    """
    deps_path = record.path / DEPS_FILE
    if not deps_path.is_file():
        logger.debug("%s declares no dependencies", record.name)
        return None, None

    raw_deps = lookup(load_table(deps_path), record.max_version, record.versions)
    deps = _parse_deps(raw_deps, str(deps_path)) if raw_deps is not None else None

    compat: Optional[ResolvedCompat] = None
    compat_path = record.path / COMPAT_FILE
    if compat_path.is_file():
        compat = lookup(load_table(compat_path), record.max_version, record.versions)

    if deps is None or compat is None:
        logger.debug(
            "%s@%s: deps %s, compat %s",
            record.name,
            record.max_version,
            "found" if deps is not None else "absent",
            "found" if compat is not None else "absent",
        )

    return deps, compat


def _parse_deps(raw: Dict[str, object], file_path: str) -> ResolvedDeps:
    deps: ResolvedDeps = {}
    for name, value in raw.items():
        try:
            deps[name] = UUID(str(value))
        except ValueError as exc:
            raise ParseError(
                "Invalid dependency UUID",
                file_path=file_path,
                key=name,
            ) from exc
    return deps
