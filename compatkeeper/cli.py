"""
Command-line interface for compatkeeper.

Handles global options, logging and configuration loading, and registers
the subcommands.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from compatkeeper.config import load_config
from compatkeeper.__version__ import __version__
from compatkeeper.context import CompatKeeperContext
from compatkeeper.exceptions import CompatKeeperError, ConfigError
from compatkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging
from compatkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="COMPATKEEPER_CONFIG",
)
@click.option(
    "--registry",
    "-r",
    "registries",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Registry directory to read (repeatable, later ones win).",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="COMPATKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="compatkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    registries: Tuple[Path, ...],
    verbose: int,
    color: bool,
) -> None:
    """compatkeeper: find packages whose compat bounds hold back their dependencies.

    \b
    Available commands:
      compatkeeper held-back             Report every held-back dependency
      compatkeeper held-back-by NAME     Who is holding back NAME?
      compatkeeper discover              Packages you can push to on GitHub

    \b
    Examples:
      compatkeeper held-back
      compatkeeper held-back-by Example --version 2.0.0
      compatkeeper -r ~/.julia/registries/General held-back

    Use ``compatkeeper COMMAND --help`` for command-specific options.
    """
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    keeper_ctx = CompatKeeperContext()
    keeper_ctx.config_path = config or loaded_config.source_path
    keeper_ctx.color = color
    keeper_ctx.verbose = verbose
    keeper_ctx.config = loaded_config
    keeper_ctx.registries = [p.expanduser() for p in registries]
    ctx.obj = keeper_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("compatkeeper v%s", __version__)
    logger.debug("Config path: %s", keeper_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


# Register CLI subcommands
from compatkeeper.commands.discover import discover  # noqa: E402
from compatkeeper.commands.held_back import held_back, held_back_by  # noqa: E402

cli.add_command(held_back)
cli.add_command(held_back_by)
cli.add_command(discover)


def main() -> int:
    """Main entry point for the compatkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except CompatKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "CompatKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
