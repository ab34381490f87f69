"""
Command-line interface for mvnkeeper.

The ``mvnkeeper`` group resolves everything the subcommands share before
they run: logging verbosity, the configuration file, repository overrides
given on the command line and colour handling. The result is stored in a
:class:`~mvnkeeper.context.MvnKeeperContext`.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

import click

from mvnkeeper.__version__ import __version__
from mvnkeeper.context import MvnKeeperContext
from mvnkeeper.config import MvnKeeperConfig, load_config
from mvnkeeper.exceptions import ConfigError, MvnKeeperError
from mvnkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging
from mvnkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="MVNKEEPER_CONFIG",
)
@click.option(
    "--repository",
    "-r",
    "repositories",
    multiple=True,
    metavar="URL",
    help="Remote repository for dependencies (repeatable); replaces the configured list.",
)
@click.option(
    "--plugin-repository",
    "plugin_repositories",
    multiple=True,
    metavar="URL",
    help="Remote repository for plugins (repeatable); replaces the configured list.",
)
@click.option(
    "--local-repository",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local repository directory (default: ~/.m2/repository).",
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
    envvar="MVNKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="mvnkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    repositories: Sequence[str],
    plugin_repositories: Sequence[str],
    local_repository: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """mvnkeeper: rule-aware update checks for Maven artifacts.

    \b
    Available commands:
      mvnkeeper check COORDINATE...   Look up newer versions
      mvnkeeper rule COORDINATE...    Show which rule applies

    \b
    Examples:
      mvnkeeper check junit:junit:4.12
      mvnkeeper check --plugins org.apache.maven.plugins:maven-compiler-plugin:3.8.1
      mvnkeeper -r https://repo.example.com/releases check com.example:lib:1.0
      mvnkeeper -v rule --rules rules.xml com.example:lib

    Use ``mvnkeeper COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    effective = apply_overrides(
        loaded_config,
        repositories=repositories,
        plugin_repositories=plugin_repositories,
        local_repository=local_repository,
    )

    mvnkeeper_ctx = MvnKeeperContext()
    mvnkeeper_ctx.config_path = config or loaded_config.source_path
    mvnkeeper_ctx.color = color
    mvnkeeper_ctx.verbose = verbose
    mvnkeeper_ctx.config = effective
    ctx.obj = mvnkeeper_ctx

    _configure_color(color)

    logger.debug("mvnkeeper v%s", __version__)
    logger.debug("Config path: %s", mvnkeeper_ctx.config_path)
    logger.debug("Effective configuration: %s", effective.to_log_dict())


def apply_overrides(
    config: MvnKeeperConfig,
    *,
    repositories: Sequence[str] = (),
    plugin_repositories: Sequence[str] = (),
    local_repository: Optional[Path] = None,
) -> MvnKeeperConfig:
    """Return ``config`` with command-line repository options applied.

    Repository options replace the configured lists rather than extending
    them, matching how the configuration file replaces the defaults.
    """
    changes: Dict[str, Any] = {}
    if repositories:
        changes["remote_repositories"] = list(repositories)
    if plugin_repositories:
        changes["plugin_repositories"] = list(plugin_repositories)
    if local_repository is not None:
        changes["local_repository"] = local_repository.expanduser()

    if not changes:
        return config
    logger.debug("Command-line overrides: %s", sorted(changes))
    return replace(config, **changes)


def _configure_logging(verbose: int) -> None:
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


def _configure_color(color: bool) -> None:
    # NO_COLOR is also read by the Rich console on rebuild
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


# Register CLI subcommands
try:
    from mvnkeeper.commands.check import check
    from mvnkeeper.commands.rule import rule

    cli.add_command(check)
    cli.add_command(rule)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the mvnkeeper CLI.

    Returns:
        Exit code:
            0   Success, nothing to update
            1   Updates available, or an application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except MvnKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "MvnKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
