"""Validate command implementation."""

import click

from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import (
    print_failure,
    print_header,
    print_info,
    print_success,
    print_warning,
    user_output,
)
from server_scripts.core.context import SscContext
from server_scripts.core.models import Status
from server_scripts.core.resolver import is_valid_script_name

# Process exit codes are a single byte
MAX_EXIT_CODE = 255


@click.command("validate")
@click.pass_obj
@cli_error_boundary
def validate_cmd(ctx: SscContext) -> None:
    """Validate manifest integrity.

    Checks that the manifest parses and that every script path exists. Exits
    with the number of missing files (capped at 255), or 0 if none are missing.
    """
    print_header("Validating Manifest")
    user_output()

    registry = ctx.load_registry()
    print_success("YAML syntax valid")

    print_info("Checking script paths...")
    missing = 0
    for record in registry.records():
        if not (ctx.repo_root / record.path).is_file():
            print_failure(f"Missing: {record.path} ({record.name})")
            missing += 1

    user_output()
    if missing == 0:
        print_success(f"All {len(registry)} script paths valid")
    else:
        print_failure(f"{missing} missing files found")

    invalid_names = [name for name in registry if not is_valid_script_name(name)]
    if invalid_names:
        print_warning(
            f"{len(invalid_names)} scripts have invalid names and cannot be run: "
            + ", ".join(invalid_names)
        )

    unknown_status = sum(1 for record in registry.records() if record.status is Status.UNKNOWN)
    if unknown_status:
        print_warning(f"{unknown_status} scripts have unknown status (missing declaration)")

    if missing:
        raise SystemExit(min(missing, MAX_EXIT_CODE))
