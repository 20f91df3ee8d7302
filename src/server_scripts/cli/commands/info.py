"""Info command implementation."""

import click

from server_scripts.cli.alias import alias
from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import print_header, user_output
from server_scripts.cli.rendering import field_line, format_bool, format_size, styled_status
from server_scripts.core.context import SscContext
from server_scripts.core.models import NO_SERVICE
from server_scripts.core.resolver import lookup, validate_script_name
from server_scripts.core.service_ops import SYSTEMCTL, ServiceOps


def _service_state(service_ops: ServiceOps, service: str) -> str:
    if service_ops.get_installed_tool_path(SYSTEMCTL) is None:
        return click.style("unavailable (systemctl not installed)", dim=True)
    if service_ops.is_active(service):
        return click.style("active (running)", fg="green")
    if service_ops.is_enabled(service):
        return click.style("enabled (not running)", fg="yellow")
    return click.style("inactive", dim=True)


@alias("show")
@click.command("info")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def info_cmd(ctx: SscContext, name: str) -> None:
    """Show detailed script information."""
    validate_script_name(name)
    registry = ctx.load_registry()
    record = lookup(registry, name)

    print_header(f"Script: {record.name}")
    user_output()
    user_output(field_line("Path", record.path))
    user_output(field_line("Category", record.category))
    user_output(field_line("Type", record.type.value))
    user_output(field_line("Status", styled_status(record.status)))
    user_output(field_line("Deployment", record.deployment.value))
    user_output(field_line("Service", record.service or NO_SERVICE))
    user_output(field_line("Requires Root", format_bool(record.requires_root)))

    full_path = ctx.repo_root / record.path
    if full_path.is_file():
        content = full_path.read_bytes()
        line_count = content.count(b"\n")
        user_output()
        user_output(field_line("File Size", f"{line_count} lines, {format_size(len(content))}"))

    if record.service is not None:
        user_output()
        print_header(f"Systemd Service: {record.service}")
        user_output(field_line("State", _service_state(ctx.service_ops, record.service)))
