"""Rich-powered tables for decoded access-log records and their statistics."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..record import LogRecord

_console = Console()

# Columns shown by default; the rest are available via --fields
DEFAULT_COLUMNS: list[str] = [
    "time",
    "client",
    "backend",
    "elb_status_code",
    "backend_processing_time",
    "sent_bytes",
    "request",
]


def status_style(code: int, ok: str = "") -> str:
    """Rich style for an ELB status code: 5xx red, 4xx yellow, else ``ok``."""
    if code >= 500:
        return "red"
    if code >= 400:
        return "yellow"
    return ok


def print_records_table(
    records: list[LogRecord],
    columns: list[str] | None = None,
    title: str = "Access log",
    console: Console | None = None,
) -> None:
    """Render records as a Rich table, one row per record.

    Rows are coloured by ELB status: 4xx yellow, 5xx red.
    """
    out = console or _console
    if not records:
        out.print("[yellow]No records to display.[/yellow]")
        return

    cols = columns or DEFAULT_COLUMNS
    table = Table(title=title, box=box.ROUNDED, show_lines=False, highlight=True)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=70)

    for record in records:
        row = record.to_dict()
        table.add_row(
            *[escape(str(row.get(c, ""))) for c in cols],
            style=status_style(record.elb_status_code),
        )

    out.print(table)


def print_counter_table(
    counts: list[tuple[str, int]],
    title: str = "Top values",
    value_col: str = "Value",
    count_col: str = "Count",
    console: Console | None = None,
) -> None:
    """Render a Counter.top() result as a Rich table."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column(value_col)
    table.add_column(count_col, justify="right", style="cyan")

    for rank, (value, count) in enumerate(counts, start=1):
        table.add_row(str(rank), value, str(count))

    (console or _console).print(table)


def print_percentiles_table(
    summary: dict[str, float],
    title: str = "Latency (ms)",
    field: str = "",
    console: Console | None = None,
) -> None:
    """Render a Percentiles.summary() dict as a Rich table."""
    display_title = f"{title}: {field}" if field else title
    table = Table(title=display_title, box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right", style="cyan")

    for key in ("min", "p50", "p90", "p95", "p99", "max", "mean"):
        if key in summary:
            table.add_row(key, f"{summary[key]:.3f}")
    table.add_row("count", str(int(summary.get("count", 0))))

    (console or _console).print(table)
