"""
Package record model for compatkeeper.

One :class:`PackageRecord` is created per registered package each time the
registry index is built and is never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet
from uuid import UUID

from semver import Version


@dataclass(frozen=True)
class PackageRecord:
    """A registered package resolved to its maximum live version.

    Attributes:
        identity: Registry-wide unique package UUID.
        name: Package name; not guaranteed unique across registries.
        path: Directory holding the package's registry files.
        max_version: Highest non-yanked version, prospective override included.
        versions: Every version listed in the version file, yanked ones too.
            An injected prospective version is deliberately absent, so
            per-version table lookups never match it.
    """

    identity: UUID
    name: str
    path: Path
    max_version: Version
    versions: FrozenSet[Version] = field(default_factory=frozenset, repr=False)

    @property
    def is_prospective(self) -> bool:
        """True when the maximum version is not registered yet."""
        return self.max_version not in self.versions

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "uuid": str(self.identity),
            "name": self.name,
            "path": str(self.path),
            "max_version": str(self.max_version),
        }

    def __str__(self) -> str:
        return f"{self.name}@{self.max_version}"
