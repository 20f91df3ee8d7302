import click

from server_scripts.cli.output import user_output


@click.command("help")
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """Show this help message."""
    assert ctx.parent is not None
    user_output(ctx.parent.get_help())
