from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from querybench.config import get_settings
from querybench.errors import QueryBenchError
from querybench.executor import run_batch
from querybench.reporter import print_summary
from querybench.runners import available_modes
from querybench.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Run a batch of SQL query files against BigQuery and time each one.")

log = get_logger(__name__)

EXIT_QUERIES_FAILED = 1
EXIT_RUN_ABORTED = 2


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"project={settings.project} dataset={settings.dataset} location={settings.location} | "
        f"input={settings.input_pattern} output={settings.output_dir} | "
        f"disable_cache={settings.disable_query_cache} dry_run={settings.dry_run} "
        f"shuffle={settings.shuffle} delimiter={settings.delimiter!r}"
    )


@app.command()
def modes() -> None:
    """
    List execution modes.
    """
    typer.echo("Available modes: " + ", ".join(available_modes()))


@app.command()
def run(
    input_pattern: Optional[str] = typer.Option(
        None, "--input", "-i", help="Glob pattern for the SQL query files."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Root directory for the timestamped results directory."
    ),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="BigQuery project ID."),
    dataset: Optional[str] = typer.Option(None, "--dataset", "-d", help="Default dataset for unqualified tables."),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="BigQuery location (e.g. US, EU)."),
    disable_cache: Optional[bool] = typer.Option(
        None, "--disable-cache/--use-cache", help="Disable the BigQuery query results cache."
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--live", help="Validate and plan queries without running them."
    ),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="Single-character output field delimiter."),
    shuffle: Optional[bool] = typer.Option(
        None, "--shuffle/--no-shuffle", help="Randomize the query execution order."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)."),
    json_logs: Optional[bool] = typer.Option(None, "--json-logs/--text-logs", help="Emit logs as JSON."),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Print a results table at the end."),
) -> None:
    """
    Load, optionally shuffle, and execute the query files, then report per-query timings.
    """
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_logs=settings.log_json if json_logs is None else json_logs,
    )

    try:
        config = settings.to_run_config(
            input_pattern=input_pattern,
            output_dir=output_dir,
            project=project,
            dataset=dataset,
            location=location,
            disable_query_cache=disable_cache,
            dry_run=dry_run,
            delimiter=delimiter,
            shuffle=shuffle,
        )
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=EXIT_RUN_ABORTED)

    try:
        outcome = run_batch(config)
    except QueryBenchError as exc:
        log.error(f"[RUN ABORTED] {exc}")
        raise typer.Exit(code=EXIT_RUN_ABORTED)

    if summary:
        print_summary(outcome)

    if not outcome.ok:
        raise typer.Exit(code=EXIT_QUERIES_FAILED)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
