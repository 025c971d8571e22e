"""Held-back computation and inversion.

:func:`compute_held_back` cross-references every package's compat bounds
against the maximum versions of its dependencies and returns a
:data:`~compatkeeper.models.held_back.HoldMap`.
:func:`invert_held_back` answers the reverse question, "who is holding back
this package", over any hold map.
"""

from __future__ import annotations

from typing import AbstractSet, List, Mapping, Sequence

from compatkeeper.core.registry import RegistryIndex
from compatkeeper.core.resolver import resolve
from compatkeeper.exceptions import RegistryInconsistencyError
from compatkeeper.models.compat import CompatSpec
from compatkeeper.models.held_back import HeldBack, HoldMap
from compatkeeper.models.package import PackageRecord
from compatkeeper.utils.logger import get_logger

logger = get_logger("core.held_back")

__all__ = ["compute_held_back", "find_held_back", "invert_held_back"]


def find_held_back(
    holder: PackageRecord,
    index: RegistryIndex,
    stdlib_names: AbstractSet[str],
) -> List[HeldBack]:
    """Return the dependencies ``holder`` holds back, in resolution order.

    Raises:
        RegistryInconsistencyError: A dependency UUID is not in ``index``.
        ParseError: Registry data or a compat string is malformed.
    """
    deps, compat = resolve(holder)
    if deps is None or compat is None:
        return []

    held: List[HeldBack] = []
    for dep_name, dep_uuid in deps.items():
        if dep_name in stdlib_names:
            continue

        # Unconstrained dependencies can never be held back
        declared = compat.get(dep_name)
        if declared is None:
            continue

        spec = CompatSpec.parse(declared)

        dependency = index.get(dep_uuid)
        if dependency is None:
            raise RegistryInconsistencyError(
                f"{holder.name} depends on a package missing from the registry index",
                holder=holder.name,
                dependency=dep_name,
                identity=str(dep_uuid),
            )

        if not spec.satisfies(dependency.max_version):
            held.append(HeldBack(dep_name, dependency.max_version, spec))

    return held


def compute_held_back(
    index: RegistryIndex,
    stdlib_names: AbstractSet[str] = frozenset(),
) -> HoldMap:
    """Compute the held-back relation over a whole index.

    Holders with no violations are left out of the result. When two holders
    share a name, the one iterated last wins.

    Args:
        index: Registry index from :func:`~compatkeeper.core.registry.build_index`.
        stdlib_names: Dependency names to ignore.

    Returns:
        Holder name -> held-back dependencies.
    """
    hold_map: HoldMap = {}
    for holder in index.values():
        held = find_held_back(holder, index, stdlib_names)
        if held:
            hold_map[holder.name] = held

    logger.info("%d package(s) hold back at least one dependency", len(hold_map))
    return hold_map


def invert_held_back(name: str, hold_map: Mapping[str, Sequence[HeldBack]]) -> List[str]:
    """Return the sorted, distinct holders that hold back ``name``."""
    holders = {
        holder
        for holder, held in hold_map.items()
        if any(hb.name == name for hb in held)
    }
    return sorted(holders)
