"""Command aliases.

Usage:
    @alias("ls")
    @click.command("list")
    def list_cmd(): ...

    register_with_aliases(cli, list_cmd)

Aliases are registered as hidden copies of the command so they work on the
command line without cluttering `--help`.
"""

import copy

import click

_ALIASES_ATTR = "_ssc_aliases"


def alias(*names: str):
    """Attach alias names to a click command."""

    def decorator(cmd: click.Command) -> click.Command:
        setattr(cmd, _ALIASES_ATTR, tuple(names))
        return cmd

    return decorator


def get_aliases(cmd: click.Command) -> tuple[str, ...]:
    return getattr(cmd, _ALIASES_ATTR, ())


def register_with_aliases(group: click.Group, cmd: click.Command, name: str | None = None) -> None:
    """Add cmd to group under its own name plus a hidden entry per alias."""
    group.add_command(cmd, name=name)
    for alias_name in get_aliases(cmd):
        alias_cmd = copy.copy(cmd)
        alias_cmd.name = alias_name
        alias_cmd.hidden = True
        group.add_command(alias_cmd, name=alias_name)
