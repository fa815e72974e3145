"""
Batch execution for querybench.

Runs every record of a planned Batch, one at a time, over a single engine client
opened for the whole batch. A failing query never stops the ones after it; each
failure stays on its record and the batch verdict is derived at the end.

Usage (example from CLI):
    from querybench.config import get_settings
    from querybench.executor import run_batch

    outcome = run_batch(get_settings().to_run_config(input_pattern="queries/*.sql"))
    outcome.raise_for_failures()

Live runs also write `summary.json` next to the per-query result files.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from querybench.config import RunConfig
from querybench.domain.models import Batch, QueryRecord
from querybench.errors import BatchFailedError
from querybench.infrastructure.bigquery import open_bigquery_engine
from querybench.infrastructure.engine import EngineFactory
from querybench.loader import load_queries
from querybench.planner import plan_batch
from querybench.reporter import build_record_report, report_record
from querybench.runners import QueryRunner, create_runner
from querybench.utils.logging import get_logger
from querybench.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

SUMMARY_FILENAME = "summary.json"

RecordReporter = Callable[[QueryRecord, str], Any]


@dataclass
class BatchOutcome:
    """
    Result of executing a batch: the records in the order they ran.
    """

    mode: str
    records: List[QueryRecord] = field(default_factory=list)
    run_dir: Optional[Path] = None
    profile: Optional[ProfileStats] = None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def failed(self) -> List[QueryRecord]:
        return [record for record in self.records if record.error is not None]

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def ok(self) -> bool:
        return self.failed_count == 0

    def raise_for_failures(self) -> None:
        if not self.ok:
            raise BatchFailedError(self.failed)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "run_dir": str(self.run_dir) if self.run_dir else None,
            "total": self.total,
            "failed": self.failed_count,
            "failed_sequences": [record.sequence for record in self.failed],
            "execution_order": [record.sequence for record in self.records],
            "profile": self.profile.as_dict() if self.profile else None,
            "queries": [build_record_report(record, self.mode) for record in self.records],
        }


def execute_batch(
    batch: Batch,
    runner: QueryRunner,
    engine_factory: EngineFactory,
    report: RecordReporter = report_record,
) -> BatchOutcome:
    """
    Execute every record of `batch` in its execution order.

    Parameters
    ----------
    batch : Batch
        Loaded records and their planned order.
    runner : QueryRunner
        Execution mode applied to every record.
    engine_factory : EngineFactory
        Returns a context manager yielding the engine client; entered once and
        exited when the batch ends, whatever the outcome.
    report : callable
        Called with each record and the mode name after the record runs.

    Returns
    -------
    BatchOutcome
        Records in execution order; `ok` is False iff any record failed.

    Raises
    ------
    EngineError
        Only if the engine client itself cannot be opened.
    """
    with engine_factory() as client:
        for index in batch.execution_order:
            record = batch.records[index]
            try:
                runner.execute(record, client)
            except Exception as exc:  # noqa: BLE001 - intentional broad catch to record failures
                log.exception(
                    f"[QUERY CRASHED] #{record.sequence}", extra={"sequence": record.sequence}
                )
                record.fail(exc)
            report(record, runner.name)

    outcome = BatchOutcome(mode=runner.name, records=batch.in_execution_order(), run_dir=batch.run_dir)
    if outcome.ok:
        log.info("All queries succeeded", extra={"total": outcome.total})
    else:
        log.error(
            "One or more queries failed",
            extra={
                "total": outcome.total,
                "failed": outcome.failed_count,
                "failed_sequences": [record.sequence for record in outcome.failed],
            },
        )
    return outcome


def _persist_summary(outcome: BatchOutcome) -> Optional[Path]:
    if outcome.run_dir is None:
        return None
    summary_path = outcome.run_dir / SUMMARY_FILENAME
    try:
        outcome.run_dir.mkdir(parents=True, exist_ok=True)
        with summary_path.open("w", encoding="utf-8") as f:
            json.dump(outcome.as_dict(), f, indent=2, sort_keys=True)
    except OSError as exc:
        log.error(f"Failed to write summary: {exc}", extra={"summary": str(summary_path)})
        return None
    log.info("Summary persisted", extra={"summary": str(summary_path)})
    return summary_path


def run_batch(
    config: RunConfig,
    *,
    engine_factory: Optional[EngineFactory] = None,
    rng: Optional[random.Random] = None,
    report: RecordReporter = report_record,
    persist: bool = True,
) -> BatchOutcome:
    """
    Load, plan and execute the queries described by `config`.

    Parameters
    ----------
    config : RunConfig
        Input pattern, output directory, engine options and execution flags.
    engine_factory : EngineFactory, optional
        Defaults to a BigQuery client for `config.project` / `config.location`.
    rng : random.Random, optional
        Random source for shuffling; defaults to an OS-seeded one.
    report : callable
        Per-record reporter, see `execute_batch`.
    persist : bool
        Whether a live run writes `summary.json` into its run directory. Dry
        runs never write anything.

    Raises
    ------
    DiscoveryError, ReadError
        If the queries cannot be loaded; nothing is executed.
    EngineError
        If the engine client cannot be opened.
    """
    batch = load_queries(config.input_pattern, config.output_dir)
    batch = plan_batch(batch, config.shuffle, rng)
    runner = create_runner(config.mode, config)

    if not batch.records:
        return BatchOutcome(mode=runner.name, run_dir=batch.run_dir)

    factory = engine_factory or (lambda: open_bigquery_engine(config.project, config.location))

    log.info(
        f"[BATCH START] {runner.name}",
        extra={"queries": len(batch), "mode": runner.name, "shuffle": config.shuffle},
    )
    with profile_block(f"batch-{runner.name}") as stats:
        outcome = execute_batch(batch, runner, factory, report)
    outcome.profile = stats

    if persist and runner.name == "live":
        _persist_summary(outcome)

    log.info(
        f"[BATCH COMPLETE] {runner.name}",
        extra={
            "queries": outcome.total,
            "failed": outcome.failed_count,
            "duration_seconds": round(stats.duration_seconds, 2),
        },
    )
    return outcome


__all__ = [
    "BatchOutcome",
    "execute_batch",
    "run_batch",
]
