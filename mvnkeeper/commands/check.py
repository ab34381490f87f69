"""Check command implementation for mvnkeeper.

Looks up newer versions for Maven coordinates given on the command line,
honouring the configured rules file: ignored versions are never offered and
each coordinate is ordered with the comparison method its best-fit rule
names.

Coordinates are ``groupId:artifactId[:version]``. With ``--plugins`` they
are treated as build plugins and searched in the plugin repositories.

Typical usage::

    # Dependencies
    $ mvnkeeper check junit:junit:4.12 org.slf4j:slf4j-api:1.7.36

    # Plugins, only those with updates, as JSON
    $ mvnkeeper check --plugins --outdated-only --format json \\
          org.apache.maven.plugins:maven-compiler-plugin:3.8.1

    # Explicit rules file
    $ mvnkeeper check --rules file:///etc/mvnkeeper/rules.xml junit:junit:4.12
"""

from __future__ import annotations

import sys
import click
import asyncio
from typing import Any, Dict, List, Optional, Sequence, Union

from mvnkeeper.exceptions import MvnKeeperError
from mvnkeeper.context import pass_context, MvnKeeperContext
from mvnkeeper.models import ArtifactVersions, Dependency, Plugin
from mvnkeeper.core import MavenMetadataSource, VersionsHelper, load_rule_set
from mvnkeeper.utils import (
    HTTPClient,
    get_logger,
    print_success,
    print_error,
    print_warning,
    print_json,
    print_table,
    PLACEHOLDER,
    format_status,
    get_raw_console,
    colorize_update_type,
    markup_or_placeholder,
    get_update_type,
)

logger = get_logger("commands.check")

ReportEntry = Dict[str, Any]


@click.command()
@click.argument("coordinates", nargs=-1, required=True, metavar="COORDINATE...")
@click.option(
    "--plugins",
    is_flag=True,
    help="Treat coordinates as build plugins.",
)
@click.option(
    "--allow-snapshots",
    is_flag=True,
    help="Offer -SNAPSHOT versions as updates.",
)
@click.option(
    "--rules",
    "rules_uri",
    metavar="URI",
    help="Rules file (path or file:// URI); overrides the configuration.",
)
@click.option(
    "--outdated-only",
    is_flag=True,
    help="Show only artifacts with available updates.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(
    ctx: MvnKeeperContext,
    coordinates: Sequence[str],
    plugins: bool,
    allow_snapshots: bool,
    rules_uri: Optional[str],
    outdated_only: bool,
    format: str,
) -> None:
    """Check Maven coordinates for newer versions.

    Exits with status 0 when everything is up to date and 1 when updates are
    available or an error occurred.
    """
    items = _parse_coordinates(coordinates, plugins)

    try:
        has_updates = asyncio.run(
            _check_async(
                ctx,
                items,
                plugins=plugins,
                allow_snapshots=allow_snapshots or ctx.config.allow_snapshots,
                rules_uri=rules_uri or ctx.config.rules_uri,
                outdated_only=outdated_only,
                format=format.lower(),
            )
        )
        sys.exit(1 if has_updates else 0)

    except MvnKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in check command")
        sys.exit(1)


def _parse_coordinates(
    coordinates: Sequence[str],
    plugins: bool,
) -> List[Union[Dependency, Plugin]]:
    """Parse command-line coordinates, reporting bad ones as usage errors."""
    parsed: List[Union[Dependency, Plugin]] = []
    for value in coordinates:
        try:
            parsed.append(Plugin.parse(value) if plugins else Dependency.parse(value))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="COORDINATE") from exc
    return parsed


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _check_async(
    ctx: MvnKeeperContext,
    items: List[Union[Dependency, Plugin]],
    *,
    plugins: bool,
    allow_snapshots: bool,
    rules_uri: Optional[str],
    outdated_only: bool,
    format: str,
) -> bool:
    """Run the lookups and render the report.

    Returns:
        ``True`` when at least one artifact has an update.

    Raises:
        MvnKeeperError: Rules cannot be loaded or a lookup failed.
    """
    show_progress = format == "table" or ctx.verbose > 0
    config = ctx.config

    # Rules are loaded before any network activity so a bad file fails fast
    rule_set = load_rule_set(rules_uri)
    logger.info("Checking %d coordinate(s)", len(items))

    async with HTTPClient() as http:
        helper = VersionsHelper(
            rule_set,
            MavenMetadataSource(http),
            remote_repositories=config.remote_repositories,
            plugin_repositories=config.plugin_repositories,
            local_repository=config.local_repository,
        )

        if plugins:
            plugin_results = await helper.lookup_plugins_updates(
                [item for item in items if isinstance(item, Plugin)],
                allow_snapshots,
            )
            entries = _plugin_entries(plugin_results)
        else:
            dependency_results = await helper.lookup_dependencies_updates(
                [item for item in items if isinstance(item, Dependency)],
                False,
            )
            entries = []
            for dependency, versions in dependency_results.items():
                versions.include_snapshots = allow_snapshots
                entries.append(
                    _build_entry(
                        "dependency",
                        dependency.coordinate.key,
                        dependency.version,
                        versions,
                    )
                )

    if outdated_only:
        entries = [e for e in entries if e["update_available"]]

    if not entries:
        if show_progress:
            print_success("All artifacts are up to date!")
        return False

    if format == "table":
        _display_table(entries)
    elif format == "simple":
        _display_simple(entries)
    else:  # json
        print_json(entries)

    outdated = sum(1 for e in entries if e["update_available"])
    if show_progress:
        if outdated:
            print_warning(f"\n{outdated} artifact(s) have updates available")
        else:
            print_success("\nAll artifacts are up to date!")

    return outdated > 0


def _plugin_entries(results: Dict[Plugin, Any]) -> List[ReportEntry]:
    """Flatten plugin results: each plugin followed by its own dependencies."""
    entries: List[ReportEntry] = []
    for plugin, details in results.items():
        details.artifact_versions.include_snapshots = details.include_snapshots
        entries.append(
            _build_entry(
                "plugin",
                plugin.coordinate.key,
                plugin.version,
                details.artifact_versions,
            )
        )
        for dependency, versions in details.dependency_versions.items():
            versions.include_snapshots = details.include_snapshots
            entries.append(
                _build_entry(
                    "plugin dependency",
                    dependency.coordinate.key,
                    dependency.version,
                    versions,
                )
            )
    return entries


def _build_entry(
    kind: str,
    coordinate: str,
    current_version: Optional[str],
    versions: ArtifactVersions,
) -> ReportEntry:
    """Summarise one artifact's lookup for the renderers."""
    newer = versions.get_newer_versions(current_version)
    latest = versions.get_newest_version()
    update_type = (
        get_update_type(current_version, newer[-1], versions.comparator)
        if newer
        else None
    )
    return {
        "kind": kind,
        "coordinate": coordinate,
        "current_version": current_version,
        "latest_version": latest,
        "newer_versions": newer,
        "update_available": bool(newer),
        "update_type": update_type,
        "comparison_method": versions.comparator.name,
    }


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _status(entry: ReportEntry) -> str:
    if entry["latest_version"] is None:
        return "NONE"
    return "OUTDATED" if entry["update_available"] else "OK"


def _display_table(entries: List[ReportEntry]) -> None:
    """Render the report as a Rich table."""
    data = [_create_table_row(entry) for entry in entries]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Status": {"justify": "center", "no_wrap": True, "width": 12},
        "Artifact": {"style": "bold cyan", "no_wrap": True},
        "Kind": {"style": "dim"},
        "Current": {"justify": "center", "style": "dim"},
        "Latest": {"justify": "center", "style": "bold green"},
        "Update Type": {"justify": "center"},
        "Method": {"justify": "center"},
    }

    print_table(
        data,
        title="Artifact Updates",
        column_styles=column_styles,
        show_row_lines=True,
    )


def _create_table_row(entry: ReportEntry) -> Dict[str, str]:
    update_type = (
        colorize_update_type(entry["update_type"])
        if entry["update_type"]
        else PLACEHOLDER
    )
    latest = (
        "[red]none[/red]"
        if entry["latest_version"] is None
        else markup_or_placeholder(entry["latest_version"])
    )

    return {
        "Status": format_status(_status(entry)),
        "Artifact": markup_or_placeholder(entry["coordinate"]),
        "Kind": entry["kind"],
        "Current": markup_or_placeholder(entry["current_version"]),
        "Latest": latest,
        "Update Type": update_type,
        "Method": entry["comparison_method"],
    }


def _display_simple(entries: List[ReportEntry]) -> None:
    """Render one line per artifact.

    Example::

        [OUTDATED] junit:junit                     4.12       → 4.13.2
        [OK] org.slf4j:slf4j-api                   2.0.9      → 2.0.9
    """
    console = get_raw_console()
    for entry in entries:
        current = entry["current_version"] or "-"
        latest = entry["latest_version"] or "-"
        console.print(
            f"[{_status(entry)}] {entry['coordinate']:40} {current:10} → {latest:10}",
            markup=False,
            highlight=False,
        )
