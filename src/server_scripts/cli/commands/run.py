"""Run command implementation."""

import click

from server_scripts.cli.alias import alias
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_info, print_warning
from server_scripts.core.context import SscContext
from server_scripts.core.resolver import resolve, validate_script_name


@alias("exec")
@click.command(
    "run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option("-f", "--force", is_flag=True, help="Run even if the script is deprecated")
@click.argument("name")
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@cli_error_boundary
def run_cmd(ctx: SscContext, force: bool, name: str, script_args: tuple[str, ...]) -> None:
    """Execute a script by name.

    Everything after NAME is passed to the script unchanged, including
    options such as --help. The script replaces the ssc process, so its exit
    code becomes the exit code of ssc.

    \b
    Examples:
      ssc run backup-example --help
      ssc run --force deprecated-script
    """
    validate_script_name(name)
    registry = ctx.load_registry()

    plan = resolve(
        registry,
        name,
        repo_root=ctx.repo_root,
        args=script_args,
        force=force,
        privileged=ctx.privileged,
        elevation_command=ctx.config.elevation_command,
    )

    if plan.deprecated_override:
        print_warning("Script is marked as DEPRECATED")
        print_warning("Proceeding with --force (deprecated script)")

    if plan.elevate:
        print_info(f"Script requires root privileges - using {plan.elevation_command}")

    ctx.executor.exec_plan(plan)
