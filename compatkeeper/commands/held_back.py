"""Held-back commands for compatkeeper.

``held-back`` prints every package whose compat bounds exclude the latest
version of one of its dependencies::

    $ compatkeeper held-back
    $ compatkeeper held-back --new-version Example=0.6.0 --format table

``held-back-by`` answers the reverse question for one package::

    $ compatkeeper held-back-by Example
    $ compatkeeper held-back-by Example --version 0.6.0
"""

from __future__ import annotations

import sys
import json
from typing import Any, Dict, FrozenSet, Optional, Tuple

import click

from compatkeeper.api import held_back_by as query_held_back_by
from compatkeeper.api import held_back_packages, print_held_back, stdlib_names
from compatkeeper.context import CompatKeeperContext, pass_context
from compatkeeper.core.versions import parse_version
from compatkeeper.exceptions import CompatKeeperError
from compatkeeper.models.held_back import HoldMap
from compatkeeper.report import hold_map_to_json, hold_map_to_rows
from compatkeeper.utils import (
    get_logger,
    print_error,
    print_success,
    print_table,
)

logger = get_logger("commands.held_back")


def _parse_new_versions(values: Tuple[str, ...]) -> Dict[str, str]:
    """Turn ``NAME=VERSION`` options into an overrides mapping."""
    overrides: Dict[str, str] = {}
    for value in values:
        name, sep, version = value.partition("=")
        if not sep or not name.strip() or not version.strip():
            raise click.BadParameter(
                f"expected NAME=VERSION, got {value!r}",
                param_hint="--new-version",
            )
        overrides[name.strip()] = version.strip()
    return overrides


def _stdlib(ctx: CompatKeeperContext) -> FrozenSet[str]:
    config = ctx.config
    if config is None:
        return stdlib_names()
    return stdlib_names(config.stdlib_names, config.stdlib_dir)


@click.command("held-back")
@click.option(
    "--new-version",
    "new_versions",
    multiple=True,
    metavar="NAME=VERSION",
    help="Treat VERSION as released for NAME (name or UUID; repeatable).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "table", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@pass_context
def held_back(
    ctx: CompatKeeperContext,
    new_versions: Tuple[str, ...],
    output_format: str,
) -> None:
    """Report dependencies held back by their dependents' compat bounds.

    Each line names a holder followed by the dependencies whose latest
    version its compat excludes, as ``name@latest {compat}``.
    """
    overrides = _parse_new_versions(new_versions)

    try:
        hold_map = held_back_packages(
            overrides or None,
            registries=ctx.registry_sources(),
            stdlib=_stdlib(ctx),
        )
    except CompatKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    _display(hold_map, output_format.lower(), color=ctx.color)


def _display(hold_map: HoldMap, output_format: str, *, color: bool) -> None:
    if output_format == "json":
        click.echo(hold_map_to_json(hold_map))
        return

    if not hold_map:
        print_success("No held-back dependencies found")
        return

    if output_format == "table":
        column_styles: Dict[str, Dict[str, Any]] = {
            "Holder": {"style": "holder", "no_wrap": True},
            "Dependency": {"no_wrap": True},
            "Latest": {"justify": "center", "style": "version"},
            "Compat": {"style": "compat"},
        }
        print_table(
            hold_map_to_rows(hold_map),
            title="Held-back Dependencies",
            column_styles=column_styles,
        )
        return

    # Color still needs a terminal; --no-color only turns it off
    print_held_back(sys.stdout, hold_map, color=None if color else False)


@click.command("held-back-by")
@click.argument("name")
@click.option(
    "--version",
    "version",
    default=None,
    help="Prospective, not yet registered version of NAME.",
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
def held_back_by(
    ctx: CompatKeeperContext,
    name: str,
    version: Optional[str],
    output_format: str,
) -> None:
    """List the packages holding back NAME, sorted by name.

    With --version, answers who would hold back NAME once that version is
    released. The registry itself is never modified.
    """
    try:
        prospective = parse_version(version) if version is not None else None
        holders = query_held_back_by(
            name,
            version=prospective,
            registries=ctx.registry_sources(),
            stdlib=_stdlib(ctx),
        )
    except CompatKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    logger.info("%d package(s) hold back %s", len(holders), name)

    if output_format.lower() == "json":
        click.echo(json.dumps(holders, indent=2))
        return

    for holder in holders:
        click.echo(holder)
