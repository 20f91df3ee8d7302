"""Logs command implementation."""

import click

from server_scripts.cli.alias import alias
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_info, user_output
from server_scripts.core.context import SscContext
from server_scripts.core.resolver import lookup, service_for, validate_script_name


@alias("log")
@click.command(
    "logs",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("name")
@click.argument("journal_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@cli_error_boundary
def logs_cmd(ctx: SscContext, name: str, journal_args: tuple[str, ...]) -> None:
    """Show service logs (journalctl).

    Everything after NAME is passed to journalctl unchanged.

    \b
    Examples:
      ssc logs health-check -n 50
      ssc logs health-check -f
    """
    validate_script_name(name)
    registry = ctx.load_registry()
    service = service_for(lookup(registry, name))

    plan = ctx.service_ops.build_journal_plan(service, journal_args)

    print_info(f"Showing logs for: {service}")
    user_output()
    ctx.executor.exec_plan(plan)
