"""Table and field formatting shared by the list, info and status commands."""

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from server_scripts.core.models import ScriptRecord, Status, Tier

# Wide enough that table rows never wrap, whatever the terminal reports
TABLE_WIDTH = 200

_STATUS_STYLES: dict[Status, str] = {
    Status.ACTIVE: "green",
    Status.PRODUCTION: "green",
    Status.DEPRECATED: "red",
    Status.UNKNOWN: "dim",
}

_TIER_STYLES: dict[Tier, str] = {
    Tier.ONE_TIME: "blue",
    Tier.BACKGROUND: "yellow",
    Tier.INTERNAL: "cyan",
}

_STATE_STYLES: dict[str, str] = {
    "active": "green",
    "failed": "red",
    "inactive": "dim",
}


def new_table() -> Table:
    """Borderless table with a bold header row."""
    return Table(show_header=True, header_style="bold", box=None)


def print_table(table: Table) -> None:
    """Render table to stdout; colour is dropped when stdout is not a terminal."""
    console = Console(width=TABLE_WIDTH)
    console.print(table)


def status_text(status: Status) -> Text:
    return Text(status.value, style=_STATUS_STYLES.get(status, ""))


def type_text(record: ScriptRecord) -> Text:
    return Text(record.type.value, style=_TIER_STYLES.get(record.tier, ""))


def state_text(state: str) -> Text:
    return Text(state, style=_STATE_STYLES.get(state, ""))


def field_line(label: str, value: str) -> str:
    """`  Label:          value` line used by `ssc info`."""
    return f"  {label + ':':<15} {value}"


def format_size(num_bytes: int) -> str:
    """Human-readable size in the style of `du -h`."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    size = num_bytes / 1024
    for unit in ("K", "M"):
        if size < 1024:
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}G"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def styled_status(status: Status) -> str:
    """Status value styled with click, for single-line output outside tables."""
    style = _STATUS_STYLES.get(status)
    if style is None:
        return status.value
    if style == "dim":
        return click.style(status.value, dim=True)
    return click.style(status.value, fg=style)
