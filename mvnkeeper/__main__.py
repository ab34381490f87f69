"""
Executable module for mvnkeeper.

Running ``python -m mvnkeeper`` is equivalent to running ``mvnkeeper``.
"""

from __future__ import annotations

import sys


def main() -> int:
    """Forward to the CLI entry point and return its exit code."""
    try:
        # Imported lazily so a broken install reports cleanly
        from mvnkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


def _print_startup_error(exc: ImportError) -> None:
    sys.stderr.write("mvnkeeper could not start: a dependency failed to import.\n")
    sys.stderr.write(f"Python version   : {sys.version}\n")
    try:
        from mvnkeeper.__version__ import __version__
    except ImportError:
        __version__ = "<unknown>"
    sys.stderr.write(f"mvnkeeper version: {__version__}\n")
    sys.stderr.write(f"ImportError: {exc}\n")


if __name__ == "__main__":
    sys.exit(main())
