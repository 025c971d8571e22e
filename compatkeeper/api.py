"""Query surface of compatkeeper.

- :func:`held_back_packages`: which dependencies does each package hold back?
- :func:`held_back_by`: which packages hold back a given package?
- :func:`print_held_back`: write the held-back report.
- :func:`find_packages_on_host`: which packages can I push to on GitHub?

Every call without a precomputed hold map rebuilds the registry index from
storage; nothing is cached between calls.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import IO, AbstractSet, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Union

from compatkeeper.constants import DEFAULT_STDLIB_NAMES
from compatkeeper.core.discovery import find_packages_on_host
from compatkeeper.core.held_back import compute_held_back, invert_held_back
from compatkeeper.core.registry import build_index, discover_registries
from compatkeeper.core.versions import Overrides, VersionLike
from compatkeeper.models.held_back import HeldBack, HoldMap
from compatkeeper.report import print_held_back as _write_report
from compatkeeper.utils.filesystem import list_directory_names
from compatkeeper.utils.logger import get_logger

logger = get_logger("api")

__all__ = [
    "stdlib_names",
    "held_back_packages",
    "held_back_by",
    "print_held_back",
    "find_packages_on_host",
]

PathLike = Union[str, Path]


def stdlib_names(
    extra: Optional[Iterable[str]] = None,
    stdlib_dir: Optional[PathLike] = None,
) -> FrozenSet[str]:
    """Return the dependency names treated as standard libraries.

    Args:
        extra: Names added to the built-in list.
        stdlib_dir: Directory whose entry names replace the built-in list,
            e.g. a runtime's bundled standard library directory.
    """
    base = (
        frozenset(list_directory_names(stdlib_dir))
        if stdlib_dir is not None
        else DEFAULT_STDLIB_NAMES
    )
    return base | frozenset(extra or ())


def held_back_packages(
    overrides: Optional[Overrides] = None,
    *,
    registries: Optional[Sequence[PathLike]] = None,
    stdlib: Optional[AbstractSet[str]] = None,
) -> HoldMap:
    """Return holder name -> dependencies held back by the holder's compat.

    Args:
        overrides: Prospective versions keyed by UUID, UUID string or package
            name. Use it to see whose compat would need a bump if those
            versions were released.
        registries: Registry directories in precedence order (last wins);
            defaults to the registries installed in the depots.
        stdlib: Standard-library names to ignore; defaults to
            :func:`stdlib_names`.

    Raises:
        CompatKeeperError: Registry data is malformed or inconsistent.
    """
    sources = list(registries) if registries is not None else discover_registries()
    index = build_index(sources, overrides)
    return compute_held_back(index, stdlib if stdlib is not None else stdlib_names())


def held_back_by(
    name: str,
    source: Union[Mapping[str, Sequence[HeldBack]], VersionLike, None] = None,
    *,
    version: Optional[VersionLike] = None,
    registries: Optional[Sequence[PathLike]] = None,
    stdlib: Optional[AbstractSet[str]] = None,
) -> List[str]:
    """Return the sorted names of the packages holding back ``name``.

    ``source`` selects the data:

    - a hold map (from :func:`held_back_packages`) is inverted as is;
    - a version computes a fresh hold map with ``name`` forced to that
      not-yet-registered version (same as ``version=``);
    - ``None`` computes a fresh hold map with no overrides.

    Raises:
        TypeError: Both a hold map and a version, or two versions, are given.
        CompatKeeperError: Registry data is malformed or inconsistent.
    """
    if isinstance(source, Mapping):
        if version is not None:
            raise TypeError("held_back_by() takes a hold map or a version, not both")
        return invert_held_back(name, source)

    if source is not None:
        if version is not None:
            raise TypeError("held_back_by() got the version twice")
        version = source

    overrides = {name: version} if version is not None else None
    if overrides:
        logger.debug("Computing held-back map with %s at %s", name, version)
    hold_map = held_back_packages(overrides, registries=registries, stdlib=stdlib)
    return invert_held_back(name, hold_map)


def _supports_color(output: IO[str]) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return output.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def print_held_back(
    output: Optional[IO[str]] = None,
    hold_map: Optional[HoldMap] = None,
    *,
    color: Optional[bool] = None,
    registries: Optional[Sequence[PathLike]] = None,
    stdlib: Optional[AbstractSet[str]] = None,
) -> None:
    """Write the held-back report to ``output`` (default stdout).

    Args:
        output: Text stream to write to.
        hold_map: Precomputed hold map; computed fresh when omitted.
        color: Force color on or off; by default color is used when
            ``output`` is a terminal and ``NO_COLOR`` is unset.
    """
    stream = output if output is not None else sys.stdout
    if hold_map is None:
        hold_map = held_back_packages(registries=registries, stdlib=stdlib)
    if color is None:
        color = _supports_color(stream)
    _write_report(stream, hold_map, color=color)
