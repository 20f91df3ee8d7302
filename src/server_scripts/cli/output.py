"""Output utilities for CLI commands with clear intent.

Regular output goes to stdout; failures go to stderr so that `ssc list` output
can be piped without error noise. Colour is dropped automatically by click when
the stream is not a terminal.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a line of regular output to stdout."""
    click.echo(message, nl=nl)


def error_output(message: str = "") -> None:
    """Write a line to stderr."""
    click.echo(message, err=True)


def print_header(text: str) -> None:
    user_output(click.style(text, bold=True))


def print_success(text: str) -> None:
    user_output(click.style("✓", fg="green") + f" {text}")


def print_warning(text: str) -> None:
    user_output(click.style("⚠", fg="yellow") + f" {text}")


def print_info(text: str) -> None:
    user_output(click.style("→", fg="blue") + f" {text}")


def print_failure(text: str) -> None:
    """Non-terminal failure line, e.g. one missing file during validation."""
    error_output(click.style("✗", fg="red") + f" {text}")


def print_error(message: str, hint: str | None = None) -> None:
    """Red `Error:` line with an optional arrow-prefixed remediation hint."""
    error_output(click.style("Error: ", fg="red") + message)
    if hint:
        error_output(click.style("→", fg="blue") + f" {hint}")
