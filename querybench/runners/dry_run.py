"""
Dry-run execution: the engine validates and plans each query without running it.

No output files are created and row fields stay untouched, so repeated dry runs
of the same SQL never modify anything on disk.
"""

from __future__ import annotations

from querybench.domain.models import QueryRecord
from querybench.errors import EngineError
from querybench.infrastructure.engine import EngineClient
from querybench.runners.abstract import AbstractQueryRunner


class DryRunQueryRunner(AbstractQueryRunner):
    """
    Submit each query with the dry-run flag and record the job status.
    """

    name: str = "dry_run"
    description: str = "Validate and plan each query without materializing results."

    def execute(self, record: QueryRecord, client: EngineClient) -> None:
        record.mark_started()
        try:
            status = client.submit(record.sql, self.options, dry_run=True)
        except EngineError as exc:
            record.fail(exc)
            return

        error = status.error()
        record.mark_completed()
        record.job_id = status.job_id
        record.bytes_processed = status.bytes_processed
        if error is not None:
            record.fail(error)


__all__ = ["DryRunQueryRunner"]
