"""Generate command implementation."""

import click

from server_scripts.cli.error_boundary import cli_error_boundary
from server_scripts.cli.output import (
    print_header,
    print_info,
    print_success,
    print_warning,
    user_output,
)
from server_scripts.core.builder import BuildResult, RegistryBuilder
from server_scripts.core.context import SscContext
from server_scripts.core.snapshot import load_registry, write_snapshot


def _report_scan(ctx: SscContext, result: BuildResult, verbose: bool) -> None:
    scan_dir = result.scan_root.relative_to(ctx.repo_root).as_posix()
    print_info(f"Scanning {scan_dir}/ directory...")

    if verbose:
        for path in result.candidates:
            user_output(f"  Found: {path.relative_to(ctx.repo_root).as_posix()}")

    for warning in result.warnings:
        print_warning(warning.message)
        for hint in warning.hints:
            user_output(f"    {hint}")

    print_info(
        f"Found {len(result.candidates)} scripts "
        f"({result.with_declaration_count} with declaration)"
    )
    user_output()


@click.command("generate")
@click.option("-d", "--dry-run", is_flag=True, help="Preview without writing the manifest")
@click.option("-v", "--verbose", is_flag=True, help="List every script found")
@click.pass_obj
@cli_error_boundary
def generate_cmd(ctx: SscContext, dry_run: bool, verbose: bool) -> None:
    """Regenerate the manifest from script declarations."""
    print_header("Generating Manifest")
    user_output()

    builder = RegistryBuilder(
        repo_root=ctx.repo_root,
        scan_roots=ctx.config.scan_roots,
        policy=ctx.config.scan_policy,
        categories=ctx.config.categories,
        clock=ctx.clock,
    )
    result = builder.build()
    _report_scan(ctx, result, verbose)

    if dry_run:
        print_warning("DRY RUN - Not writing manifest")
        print_info(f"Would generate manifest with {result.script_count} scripts")
        return

    manifest_path = ctx.config.manifest_path
    print_info("Generating manifest...")
    write_snapshot(manifest_path, result.registry)

    user_output()
    print_success(f"Manifest generated: {manifest_path}")
    print_info(f"Total scripts: {result.script_count}")
    if result.script_count > 0:
        percent = result.with_declaration_count * 100 // result.script_count
        print_info(f"With declaration: {result.with_declaration_count} ({percent}%)")

    # Round-trip through the loader; raises ConfigInvalid if the output is unreadable
    load_registry(manifest_path)
    print_success("YAML syntax valid")
