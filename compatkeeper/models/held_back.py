"""
Held-back data models for compatkeeper.

A :class:`HeldBack` records that a holder package's compat bound for one of
its dependencies excludes that dependency's latest version. A
:data:`HoldMap` groups them by holder name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from semver import Version

from compatkeeper.models.compat import CompatSpec


@dataclass(frozen=True)
class HeldBack:
    """A dependency held back by its holder's compat bound.

    Attributes:
        name: Name of the dependency being held back.
        last_version: The dependency's maximum live version.
        compat: The holder's compat bound that excludes ``last_version``.
    """

    name: str
    last_version: Version
    compat: CompatSpec

    def to_json(self) -> Dict[str, str]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "last_version": str(self.last_version),
            "compat": str(self.compat),
        }

    def __str__(self) -> str:
        return f"{self.name}@{self.last_version} {{{self.compat}}}"


#: Holder package name -> held-back dependencies in resolution order.
HoldMap = Dict[str, List[HeldBack]]
