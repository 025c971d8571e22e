"""
compatkeeper: find packages held back by stale compat bounds

compatkeeper reads a TOML package registry (``Registry.toml`` plus per-package
``Versions.toml``, ``Deps.toml`` and ``Compat.toml``) and reports which
packages declare compatibility bounds that exclude the latest release of one
of their dependencies.

Features include:
    • Held-back report across every reachable registry
    • Reverse lookup: who is holding back a given package
    • Prospective versions: who would hold back a release you have not tagged yet
    • Discovery of the packages you can push to on GitHub

Typical usage::

    from compatkeeper import held_back_by, held_back_packages

    hold_map = held_back_packages()
    held_back_by("Example", hold_map)
"""

from __future__ import annotations

from compatkeeper.__version__ import __version__
from compatkeeper.api import (
    find_packages_on_host,
    held_back_by,
    held_back_packages,
    print_held_back,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "compatkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Find registry packages whose compat bounds hold back their dependencies."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "held_back_packages",
    "held_back_by",
    "print_held_back",
    "find_packages_on_host",
]
