"""Rule command implementation for mvnkeeper.

Explains, without touching the network, how the rules file applies to the
given ``groupId:artifactId`` coordinates: the best-fit rule, the comparison
method in effect and the effective ignore list.

Typical usage::

    $ mvnkeeper rule --rules rules.xml com.example:lib org.other:lib
    $ mvnkeeper rule --format json com.example:lib
"""

from __future__ import annotations

import sys
import click
from typing import Any, Dict, List, Optional, Sequence

from mvnkeeper.exceptions import MvnKeeperError
from mvnkeeper.context import pass_context, MvnKeeperContext
from mvnkeeper.models import Coordinate
from mvnkeeper.core import (
    ComparatorSelector,
    IgnoredVersionFilter,
    RuleSelector,
    load_rule_set,
)
from mvnkeeper.utils import (
    get_logger,
    print_error,
    print_json,
    print_table,
    markup_or_placeholder,
)

logger = get_logger("commands.rule")


@click.command()
@click.argument("coordinates", nargs=-1, required=True, metavar="COORDINATE...")
@click.option(
    "--rules",
    "rules_uri",
    metavar="URI",
    help="Rules file (path or file:// URI); overrides the configuration.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def rule(
    ctx: MvnKeeperContext,
    coordinates: Sequence[str],
    rules_uri: Optional[str],
    format: str,
) -> None:
    """Show the rule, comparison method and ignore list per coordinate."""
    parsed: List[Coordinate] = []
    for value in coordinates:
        try:
            parsed.append(Coordinate.parse(value))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="COORDINATE") from exc

    try:
        rule_set = load_rule_set(rules_uri or ctx.config.rules_uri)
    except MvnKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    selector = RuleSelector(rule_set)
    ignore_filter = IgnoredVersionFilter(selector)
    comparators = ComparatorSelector(selector)

    report: List[Dict[str, Any]] = []
    for coordinate in parsed:
        best_fit = selector.best_fit_rule(coordinate.group_id, coordinate.artifact_id)
        ignored = ignore_filter.ignored_versions_for(
            coordinate.group_id, coordinate.artifact_id
        )
        report.append(
            {
                "coordinate": coordinate.key,
                "rule": str(best_fit) if best_fit else None,
                "comparison_method": comparators.comparator_for(
                    coordinate.group_id, coordinate.artifact_id
                ).name,
                "ignored_versions": [str(entry) for entry in ignored],
            }
        )

    if format.lower() == "json":
        print_json(report)
        return

    print_table(
        [_table_row(entry) for entry in report],
        title="Effective Rules",
        column_styles={"Coordinate": {"style": "bold cyan", "no_wrap": True}},
    )


def _table_row(entry: Dict[str, Any]) -> Dict[str, str]:
    # Patterns and regexes contain brackets Rich would read as markup
    return {
        "Coordinate": markup_or_placeholder(entry["coordinate"]),
        "Rule": markup_or_placeholder(entry["rule"])
        if entry["rule"]
        else "[dim]defaults[/dim]",
        "Method": entry["comparison_method"],
        "Ignored": markup_or_placeholder("\n".join(entry["ignored_versions"])),
    }
