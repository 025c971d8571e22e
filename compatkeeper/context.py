"""
Shared context object for compatkeeper CLI commands.

Created once per CLI invocation by the top-level group and injected into
subcommands with :data:`pass_context`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import click

from compatkeeper.config import CompatKeeperConfig


class CompatKeeperContext:
    """Global context object for compatkeeper CLI commands.

    Attributes:
        config_path: Path to the configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, or ``None`` before loading.
        registries: Registry directories given with ``--registry``.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "registries")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[CompatKeeperConfig] = None
        self.registries: List[Path] = []

    def registry_sources(self) -> Optional[List[Path]]:
        """Return the registries to read, ``None`` meaning auto-discovery.

        ``--registry`` options take precedence over the config file.
        """
        if self.registries:
            return list(self.registries)
        if self.config is not None and self.config.registries:
            return list(self.config.registries)
        return None


#: Click decorator for injecting :class:`CompatKeeperContext` into commands.
pass_context = click.make_pass_decorator(CompatKeeperContext, ensure=True)
