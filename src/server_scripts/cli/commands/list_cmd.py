"""List command implementation."""

import click
from rich.text import Text

from server_scripts.cli.alias import alias
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_header, print_info, user_output
from server_scripts.cli.rendering import new_table, print_table, status_text, type_text
from server_scripts.core.context import SscContext
from server_scripts.core.models import ScriptType, Status, Tier
from server_scripts.core.query import ScriptFilter, filter_scripts

# Internal scripts (libraries, helpers) are hidden unless --all or --type is given
DEFAULT_VISIBLE_TIERS = frozenset({Tier.INTERACTIVE, Tier.ONE_TIME, Tier.BACKGROUND})

NAME_WIDTH = 30
TYPE_WIDTH = 12
STATUS_WIDTH = 10
CATEGORY_WIDTH = 15
PATH_NAME_WIDTH = 40


@alias("ls")
@click.command("list")
@click.option("-c", "--category", help="Filter by category (operations, monitoring, ...)")
@click.option(
    "-s",
    "--status",
    type=click.Choice([s.value for s in Status], case_sensitive=False),
    help="Filter by status",
)
@click.option(
    "-t",
    "--type",
    "script_type",
    type=click.Choice([t.value for t in ScriptType], case_sensitive=False),
    help="Filter by type",
)
@click.option("-p", "--paths", is_flag=True, help="Show full paths instead of names")
@click.option(
    "-n", "--limit", type=click.IntRange(min=0), default=0, help="Limit output to N scripts"
)
@click.option("--search", help="Search scripts by name (case-insensitive)")
@click.option(
    "-a", "--all", "show_all", is_flag=True, help="Include internal library and helper scripts"
)
@click.argument("term", required=False)
@click.pass_obj
@cli_error_boundary
def list_cmd(
    ctx: SscContext,
    category: str | None,
    status: str | None,
    script_type: str | None,
    paths: bool,
    limit: int,
    search: str | None,
    show_all: bool,
    term: str | None,
) -> None:
    """List scripts in the manifest.

    A bare TERM is treated like --search TERM.

    \b
    Examples:
      ssc list --status active
      ssc list --category operations --type backup
      ssc list backup
    """
    registry = ctx.load_registry()

    tiers = None if show_all or script_type is not None else DEFAULT_VISIBLE_TIERS
    script_filter = ScriptFilter(
        category=category,
        status=Status.parse(status) if status is not None else None,
        type=ScriptType.parse(script_type) if script_type is not None else None,
        search=search if search is not None else term,
        limit=limit,
        tiers=tiers,
    )
    records = filter_scripts(registry, script_filter)

    print_header("Scripts Registry")
    user_output()

    table = new_table()
    if paths:
        table.add_column("NAME", min_width=PATH_NAME_WIDTH, no_wrap=True)
        table.add_column("PATH", no_wrap=True)
        for record in records:
            table.add_row(Text(record.name), Text(record.path))
    else:
        table.add_column("NAME", min_width=NAME_WIDTH, no_wrap=True)
        table.add_column("TYPE", min_width=TYPE_WIDTH, no_wrap=True)
        table.add_column("STATUS", min_width=STATUS_WIDTH, no_wrap=True)
        table.add_column("CATEGORY", min_width=CATEGORY_WIDTH, no_wrap=True)
        for record in records:
            table.add_row(
                Text(record.name),
                type_text(record),
                status_text(record.status),
                Text(record.category),
            )
    print_table(table)

    user_output()
    print_info(f"Showing: {len(records)} scripts (Total in manifest: {len(registry)})")
