"""
Live execution: submit the query, wait for the job, stream every row to disk.

Timing points recorded on the record:
- start_time: immediately before submission
- end_time: immediately after the engine reports the job complete
- first_row_time: when the first row is retrieved, kept only once it is written
  (unset whenever no row reached the file)
- last_row_time: when the cursor is exhausted without error

Rows go straight from the cursor to a buffered csv writer, so memory stays flat
regardless of result size. A failure mid-stream leaves the rows already written
on disk.
"""

from __future__ import annotations

import csv
from typing import Any

from querybench.domain.models import QueryRecord, utcnow
from querybench.errors import EngineError, OutputError
from querybench.infrastructure.engine import EngineClient, QueryOptions
from querybench.runners.abstract import AbstractQueryRunner
from querybench.utils.logging import get_logger

log = get_logger(__name__)

OUTPUT_BUFFER_BYTES = 1 << 16
OUTPUT_DIR_MODE = 0o700


class LiveQueryRunner(AbstractQueryRunner):
    """
    Execute queries for real and write their result rows to delimited files.
    """

    name: str = "live"
    description: str = "Run each query and stream its rows to a delimited output file."

    def __init__(self, options: QueryOptions, delimiter: str = ",") -> None:
        super().__init__(options)
        self.delimiter = delimiter

    def execute(self, record: QueryRecord, client: EngineClient) -> None:
        output_dir = record.output_path.parent
        try:
            output_dir.mkdir(mode=OUTPUT_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            record.fail(OutputError(f"Failed to create the output path {output_dir}: {exc}"))
            return

        record.mark_started()
        try:
            cursor = client.submit(record.sql, self.options, dry_run=False)
        except EngineError as exc:
            record.fail(exc)
            return
        record.mark_completed()
        record.job_id = getattr(cursor, "job_id", None)
        record.bytes_processed = getattr(cursor, "bytes_processed", None)

        try:
            handle = record.output_path.open(
                "w", newline="", encoding="utf-8", buffering=OUTPUT_BUFFER_BYTES
            )
        except OSError as exc:
            record.fail(OutputError(f"Failed to open the output file {record.output_path}: {exc}"))
            return

        try:
            with handle:
                writer = csv.writer(handle, delimiter=self.delimiter, lineterminator="\n")
                self._stream_rows(record, cursor, writer)
        except OSError as exc:
            # Raised by the final flush/close.
            record.fail(OutputError(f"Failed writing to the output file {record.output_path}: {exc}"))

        log.debug(
            "Query streamed",
            extra={"sequence": record.sequence, "rows": record.row_count, "failed": not record.succeeded},
        )

    def _stream_rows(self, record: QueryRecord, cursor: Any, writer: Any) -> None:
        rows = iter(cursor)
        while True:
            try:
                row = next(rows)
            except StopIteration:
                break
            except EngineError as exc:
                record.fail(exc)
                return

            retrieved_at = utcnow()
            try:
                writer.writerow(row)
            except (csv.Error, OSError) as exc:
                record.fail(OutputError(f"Failed writing to the output file {record.output_path}: {exc}"))
                return
            if record.row_count == 0:
                record.mark_first_row(retrieved_at)
            record.row_count += 1

        record.mark_last_row()


__all__ = ["LiveQueryRunner"]
