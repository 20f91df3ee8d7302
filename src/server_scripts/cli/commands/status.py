"""Status command implementation."""

import click
from rich.text import Text

from server_scripts.cli.alias import alias
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_header, print_warning, user_output
from server_scripts.cli.rendering import new_table, print_table, state_text
from server_scripts.core.context import SscContext
from server_scripts.core.errors import NoServiceAssociated
from server_scripts.core.models import Registry
from server_scripts.core.resolver import lookup, service_for, validate_script_name
from server_scripts.core.service_ops import SYSTEMCTL, timer_for_service

SERVICE_WIDTH = 40
STATE_WIDTH = 12
TIMER_OVERVIEW_LINES = 25


def _show_script_status(
    ctx: SscContext, registry: Registry, name: str, show_logs: bool, lines: int
) -> None:
    record = lookup(registry, name)
    try:
        service = service_for(record)
    except NoServiceAssociated as e:
        # Warning only; ssc logs treats this as an error
        print_warning(e.message)
        return

    ops = ctx.service_ops
    ops.require_tool(SYSTEMCTL)

    print_header(f"Service: {service}")
    user_output()
    status_text = ops.get_unit_status(service)
    if status_text is None:
        print_warning("Service not found")
    else:
        user_output(status_text.rstrip("\n"))

    timer = timer_for_service(service)
    if ops.has_timer(timer):
        user_output()
        print_header(f"Timer: {timer}")
        user_output(ops.list_timers(timer).rstrip("\n"))

    if show_logs:
        user_output()
        print_header(f"Recent Logs (last {lines} lines)")
        user_output(ops.get_journal(service, lines).rstrip("\n"))


def _show_overview(ctx: SscContext, registry: Registry, show_timers: bool) -> None:
    print_header("Service Status Overview")
    user_output()

    services = registry.services()
    if not services:
        print_warning("No services found in manifest")
        return

    ops = ctx.service_ops
    ops.require_tool(SYSTEMCTL)

    table = new_table()
    table.add_column("SERVICE", min_width=SERVICE_WIDTH, no_wrap=True)
    table.add_column("STATE", min_width=STATE_WIDTH, no_wrap=True)
    table.add_column("SUBSTATE", no_wrap=True)
    for service in services:
        state = ops.get_unit_state(service)
        table.add_row(Text(service), state_text(state.active_state), Text(state.sub_state))
    print_table(table)

    if show_timers:
        user_output()
        print_header("Timer Overview")
        user_output()
        for line in ops.list_timers().splitlines()[:TIMER_OVERVIEW_LINES]:
            user_output(line)


@alias("st")
@click.command("status")
@click.option("-s", "--script", "script_name", help="Show status for a specific script")
@click.option("-t", "--timers", is_flag=True, help="Show timer overview")
@click.option("-l", "--logs", "show_logs", is_flag=True, help="Include recent logs")
@click.option(
    "-n",
    "--lines",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Number of log lines",
)
@click.argument("name", required=False)
@click.pass_obj
@cli_error_boundary
def status_cmd(
    ctx: SscContext,
    script_name: str | None,
    timers: bool,
    show_logs: bool,
    lines: int,
    name: str | None,
) -> None:
    """Show systemd service status.

    Without a script name, shows an overview of every service referenced in
    the manifest.

    \b
    Examples:
      ssc status                         # Overview of all services
      ssc status -s backup-example       # Specific script
      ssc status --timers                # Timer overview
    """
    target = script_name if script_name is not None else name
    if target is not None:
        validate_script_name(target)

    registry = ctx.load_registry()

    if target is not None:
        _show_script_status(ctx, registry, target, show_logs, lines)
    else:
        _show_overview(ctx, registry, timers)
