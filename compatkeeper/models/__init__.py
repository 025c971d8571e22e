"""
Unified data model exports for compatkeeper.

Example:
    >>> from compatkeeper.models import CompatSpec, HeldBack, PackageRecord
"""

from __future__ import annotations

from compatkeeper.models.compat import CompatSpec, CompatValue
from compatkeeper.models.package import PackageRecord
from compatkeeper.models.held_back import HeldBack, HoldMap

__all__ = [
    "CompatSpec",
    "CompatValue",
    "HeldBack",
    "HoldMap",
    "PackageRecord",
]
