from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from querybench.domain.models import QueryRecord
from querybench.utils.logging import get_logger

if TYPE_CHECKING:
    from querybench.executor import BatchOutcome

log = get_logger(__name__)


def _ms(delta: Optional[timedelta]) -> Optional[float]:
    if delta is None:
        return None
    return round(delta.total_seconds() * 1000.0, 2)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def build_record_report(record: QueryRecord, mode: str = "live") -> Dict[str, Any]:
    """
    Summarize one executed record.

    A failed record reports only its identity and the error, since its timings
    may be partial. A successful live record reports submission and row
    retrieval timings; a successful dry run reports submission timing and the
    bytes the engine estimated it would scan.
    """
    report: Dict[str, Any] = {
        "sequence": record.sequence,
        "input_path": str(record.input_path),
    }
    if record.error is not None:
        report["error"] = str(record.error) or type(record.error).__name__
        return report

    if mode == "dry_run":
        report.update(
            {
                "start_time": _iso(record.start_time),
                "end_time": _iso(record.end_time),
                "execution_ms": _ms(record.submission_duration),
                "bytes_processed": record.bytes_processed,
            }
        )
        return report

    report.update(
        {
            "output_path": str(record.output_path),
            "start_time": _iso(record.start_time),
            "end_time": _iso(record.end_time),
            "execution_ms": _ms(record.submission_duration),
            "first_row_time": _iso(record.first_row_time),
            "last_row_time": _iso(record.last_row_time),
            "return_ms": _ms(record.retrieval_duration),
            "rows": record.row_count,
        }
    )
    return report


def report_record(record: QueryRecord, mode: str = "live", logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    Emit the record's report to the log sink and return it.
    """
    sink = logger or log
    report = build_record_report(record, mode)
    title = "Query dry run" if mode == "dry_run" else "Query execution"
    if "error" in report:
        sink.error(f"[{title.upper()} FAILED] #{record.sequence}", extra=report)
    else:
        sink.info(f"[{title.upper()}] #{record.sequence}", extra=report)
    return report


def print_summary(outcome: "BatchOutcome", console: Optional[Console] = None) -> None:
    """
    Render the batch outcome as a rich table, one row per query in execution order.
    """
    console = console or Console()

    if not outcome.records:
        console.print("[yellow]No queries were executed.[/yellow]")
        return

    dry_run = outcome.mode == "dry_run"
    table = Table(
        title=f"Query Benchmark Results ({outcome.mode})",
        box=box.ROUNDED,
        caption=f"{outcome.total} queries, {outcome.failed_count} failed",
    )

    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Query File", style="magenta")
    table.add_column("Status", justify="center")
    table.add_column("Execution (ms)", justify="right", style="green")
    if dry_run:
        table.add_column("Bytes Processed", justify="right", style="yellow")
    else:
        table.add_column("Return (ms)", justify="right", style="green")
        table.add_column("Rows", justify="right", style="bold green")

    for record in outcome.records:
        status = "[green]ok[/green]" if record.succeeded else "[red]failed[/red]"
        execution = _ms(record.submission_duration) if record.succeeded else None
        execution_str = f"{execution:,.2f}" if execution is not None else "-"
        row = [str(record.sequence), record.input_path.name, status, execution_str]
        if dry_run:
            scanned = record.bytes_processed if record.succeeded else None
            row.append(f"{scanned:,}" if scanned is not None else "-")
        else:
            returned = _ms(record.retrieval_duration) if record.succeeded else None
            row.append(f"{returned:,.2f}" if returned is not None else "-")
            row.append(f"{record.row_count:,}" if record.succeeded else "-")
        table.add_row(*row)

    console.print(table)


__all__ = ["build_record_report", "print_summary", "report_record"]
