import logging

import click

from server_scripts.cli.alias import register_with_aliases
from server_scripts.cli.commands.config import config_group
from server_scripts.cli.commands.generate import generate_cmd
from server_scripts.cli.commands.help import help_cmd
from server_scripts.cli.commands.info import info_cmd
from server_scripts.cli.commands.list_cmd import list_cmd
from server_scripts.cli.commands.logs import logs_cmd
from server_scripts.cli.commands.run import run_cmd
from server_scripts.cli.commands.status import status_cmd
from server_scripts.cli.commands.validate import validate_cmd
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import user_output
from server_scripts.core.context import create_context
from server_scripts.version import __version__

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags
DEBUG_ENV_VAR = "SSC_DEBUG"


def configure_debug_logging() -> None:
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(
    __version__, "-v", "--version", prog_name="ssc", message="%(prog)s v%(version)s"
)
@click.option(
    "--debug",
    is_flag=True,
    envvar=DEBUG_ENV_VAR,
    help=f"Enable debug logging and tracebacks (or set {DEBUG_ENV_VAR}=1).",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Server Scripts CLI - manage operational scripts via a YAML manifest.

    \b
    Examples:
      ssc list --status active
      ssc list --category operations --type backup
      ssc run backup-example --help
      ssc info monitoring-example
      ssc status --timers
      ssc logs health-check -n 50
    """
    if debug:
        configure_debug_logging()

    if ctx.invoked_subcommand is None:
        user_output(ctx.get_help())
        return

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(debug=debug)


# Commands with @alias decorators use register_with_aliases() to auto-register aliases
register_with_aliases(cli, list_cmd)  # Has @alias("ls")
register_with_aliases(cli, run_cmd)  # Has @alias("exec")
register_with_aliases(cli, info_cmd)  # Has @alias("show")
register_with_aliases(cli, status_cmd)  # Has @alias("st")
register_with_aliases(cli, logs_cmd)  # Has @alias("log")
cli.add_command(validate_cmd)
cli.add_command(generate_cmd)
cli.add_command(config_group)
cli.add_command(help_cmd)


@cli_error_boundary
def main() -> None:
    """CLI entry point used by the `ssc` console script."""
    cli()
