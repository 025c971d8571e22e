"""
Executable module for compatkeeper.

Running ``python -m compatkeeper`` is equivalent to running ``compatkeeper``;
execution is forwarded to :func:`compatkeeper.cli.main`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be imported."""
    sys.stderr.write("compatkeeper CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from compatkeeper.__version__ import __version__

        sys.stderr.write(f"compatkeeper version: {__version__}\n")
    except ImportError:
        sys.stderr.write("compatkeeper version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Entry point for ``python -m compatkeeper``.

    Returns:
        Exit code returned by the CLI, or 1 if it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from compatkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
