import click

from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_success, user_output
from server_scripts.core.config import config_items, get_config_value, set_config_value
from server_scripts.core.context import SscContext


@click.group("config")
def config_group() -> None:
    """Manage repository configuration (.ssc/config.toml)."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: SscContext) -> None:
    """Print a list of configuration keys and values."""
    user_output(click.style("Repository configuration:", bold=True))
    user_output(f"  repo_root={ctx.repo_root}")
    if not ctx.config.config_path.exists():
        user_output("  (no config file - showing defaults)")
    for key, value in config_items(ctx.config):
        user_output(f"  {key}={value}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
@cli_error_boundary
def config_get(ctx: SscContext, key: str) -> None:
    """Print the value of a given configuration key."""
    user_output(get_config_value(ctx.config, key))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
@cli_error_boundary
def config_set(ctx: SscContext, key: str, value: str) -> None:
    """Set a configuration key.

    List keys (scan_roots, extensions, excluded_dirs, excluded_files) take a
    comma-separated VALUE. Category fields are addressed as
    categories.NAME.description or categories.NAME.path.
    """
    updated = set_config_value(ctx.repo_root, key, value)
    print_success(f"Set {key}={get_config_value(updated, key)}")
