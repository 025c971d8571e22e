"""
Core functionality exports for compatkeeper.

    from compatkeeper.core import build_index, compute_held_back

The held-back engine flows strictly forward: version tables feed the
registry index, the index feeds the resolver and the computation, and the
computation feeds the inversion.
"""

from __future__ import annotations

from compatkeeper.core.registry import (
    RegistryIndex,
    build_index,
    discover_registries,
    load_manifest,
)
from compatkeeper.core.resolver import resolve
from compatkeeper.core.held_back import (
    compute_held_back,
    find_held_back,
    invert_held_back,
)

__all__ = [
    "RegistryIndex",
    "build_index",
    "discover_registries",
    "load_manifest",
    "resolve",
    "compute_held_back",
    "find_held_back",
    "invert_held_back",
]
