"""Discover command for compatkeeper.

Lists the packages whose GitHub repositories the ``GITHUB_AUTH`` token can
access, by repository naming convention::

    $ GITHUB_AUTH=... compatkeeper discover
    $ compatkeeper discover --suffix .jl --format json
"""

from __future__ import annotations

import sys
import json
from typing import Optional

import click

from compatkeeper.constants import DEFAULT_REPO_SUFFIX
from compatkeeper.context import CompatKeeperContext, pass_context
from compatkeeper.core.discovery import find_packages_on_host
from compatkeeper.exceptions import CompatKeeperError
from compatkeeper.utils import get_logger, print_error

logger = get_logger("commands.discover")


@click.command()
@click.option(
    "--suffix",
    default=None,
    help="Repository name suffix marking a package (default from config, '.jl').",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@pass_context
def discover(
    ctx: CompatKeeperContext,
    suffix: Optional[str],
    output_format: str,
) -> None:
    """List packages you can access on GitHub, sorted by name.

    Requires a GitHub token in the GITHUB_AUTH environment variable.
    """
    if suffix is None:
        suffix = ctx.config.repo_suffix if ctx.config is not None else DEFAULT_REPO_SUFFIX

    try:
        names = sorted(find_packages_on_host(suffix=suffix))
    except CompatKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    logger.info("Found %d package repositories", len(names))

    if output_format.lower() == "json":
        click.echo(json.dumps(names, indent=2))
        return

    for name in names:
        click.echo(name)
