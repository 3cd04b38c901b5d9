"""elblog CLI entry point.

Commands:
    elblog parse  <file>    Decode and display access-log records
    elblog stats  <file>    Status-code counts and latency percentiles
"""
from __future__ import annotations

import json
import logging
import sys
from itertools import islice
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.markup import escape

from .config import settings
from .decoder import Decoder
from .errors import ParseError, StreamReadError
from .parsers.elb import FIELD_NAMES
from .record import LogRecord
from .visualization.tables import print_records_table, status_style

console = Console()
err_console = Console(stderr=True)

_DURATION_FIELDS = [f for f in FIELD_NAMES if f.endswith("_processing_time")]

# ── Helpers ─────────────────────────────────────────────────────────────────


def _results(file: Path, workers: int) -> Iterator[tuple[int, LogRecord | ParseError]]:
    """Yield ``(line_number, record_or_error)`` sequentially or via the pool."""
    if workers != 1:
        from .perf.parallel_parser import parse_file_parallel

        results = parse_file_parallel(
            str(file), workers=workers or None, chunksize=settings.chunksize
        )
        try:
            yield from enumerate(results, start=1)
        finally:
            results.close()
        return

    with file.open("rb") as fh:
        yield from Decoder(fh).iter_results()


def _records(file: Path, workers: int, strict: bool) -> Iterator[LogRecord]:
    """Yield records, reporting bad lines on stderr (or exiting when strict)."""
    for number, result in _results(file, workers):
        if isinstance(result, ParseError):
            if strict:
                err_console.print(f"[red]{file.name}: {escape(str(result))}[/red]")
                sys.exit(1)
            err_console.print(f"[yellow]skipped[/yellow] [dim]{file.name}:{number}: {escape(str(result))}[/dim]")
            continue
        yield result


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="elblog")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """elblog: decode and summarise load balancer access logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_fmt", default=settings.default_output,
    type=click.Choice(["table", "stream", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=click.IntRange(min=0), help="Max records to display (0 = all).")
@click.option("--fields", default="", help="Comma-separated record fields to include.")
@click.option(
    "--skip-errors/--strict", default=settings.skip_errors, show_default=True,
    help="Skip malformed lines, or stop at the first one.",
)
@click.option("--workers", "-w", default=settings.max_workers, type=click.IntRange(min=0),
              help="Parallel workers (0 = one per CPU, 1 = streaming).")
def parse(
    file: Path,
    output_fmt: str,
    limit: int,
    fields: str,
    skip_errors: bool,
    workers: int,
) -> None:
    """Decode an access log and display its records.

    \b
    Examples:
      elblog parse access.log
      elblog parse access.log --output json --limit 100
      elblog parse access.log --fields time,client,request --strict
      elblog parse huge.log --workers 0
    """
    selected = [f.strip() for f in fields.split(",") if f.strip()]
    unknown = [f for f in selected if f not in FIELD_NAMES]
    if unknown:
        raise click.BadParameter(f"unknown field(s): {', '.join(unknown)}", param_hint="--fields")

    count = 0
    collected: list[LogRecord] = []
    records = _records(file, workers, strict=not skip_errors)
    try:
        for record in islice(records, limit or None):
            count += 1
            if output_fmt == "json":
                row = record.to_dict()
                out = {k: row[k] for k in selected} if selected else row
                click.echo(json.dumps(out))
            elif output_fmt == "table":
                collected.append(record)
            else:
                colour = status_style(record.elb_status_code, ok="green")
                console.print(
                    f"[dim]{record.to_dict()['time']}[/dim] "
                    f"[{colour}]{record.elb_status_code}[/{colour}] "
                    f"{record.client or '-'} {escape(record.request)}"
                )
    except StreamReadError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(2)
    finally:
        # Stop reading past --limit; also shuts down a worker pool
        records.close()

    if output_fmt == "table":
        print_records_table(collected, columns=selected or None, title=file.name, console=console)

    err_console.print(f"[dim]Decoded {count} records from {file.name}[/dim]")


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--by", "-b", default="elb_status_code", show_default=True,
    type=click.Choice(list(FIELD_NAMES)), help="Record field to count by.",
)
@click.option("--top", "-t", default=10, type=int, help="Show top N values.", show_default=True)
@click.option(
    "--latency", "-l", default="backend_processing_time", show_default=True,
    type=click.Choice(_DURATION_FIELDS), help="Duration field for percentiles.",
)
@click.option("--workers", "-w", default=settings.max_workers, type=click.IntRange(min=0),
              help="Parallel workers (0 = one per CPU, 1 = streaming).")
def stats(
    file: Path,
    by: str,
    top: int,
    latency: str,
    workers: int,
) -> None:
    """Show aggregate statistics for an access log.

    Malformed lines are reported on stderr and left out of the totals.

    \b
    Examples:
      elblog stats access.log
      elblog stats access.log --by backend --top 5
      elblog stats access.log --latency request_processing_time
    """
    from .aggregators.counter import Counter
    from .aggregators.percentiles import Percentiles
    from .visualization.tables import print_counter_table, print_percentiles_table

    counter = Counter(field=by)
    percentiles = Percentiles(field=latency)

    try:
        for record in _records(file, workers, strict=False):
            counter.add(record)
            percentiles.add(record)
    except StreamReadError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(2)

    console.print(f"\n[bold]File:[/bold] {file.name}  [bold]Total records:[/bold] {counter.total}")
    print_counter_table(
        counter.top(top), title=f"Top {top} by '{by}'",
        value_col=by, count_col="Count", console=console,
    )
    print_percentiles_table(percentiles.summary(), field=latency, console=console)


if __name__ == "__main__":
    main()
