"""
Query discovery for querybench.

Expands a glob pattern, reads every matching file as one query, and assigns each
a 1-based sequence number in the order the filesystem listing yields them. The
output path of a query depends only on that sequence number and the run
timestamp, so it does not change when the execution order is shuffled.

Nothing is written to disk here; runners create the run directory lazily.
"""

from __future__ import annotations

import glob
import os
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from querybench.domain.models import Batch, QueryRecord
from querybench.errors import DiscoveryError, ReadError
from querybench.utils.logging import get_logger

log = get_logger(__name__)

RUN_TIMESTAMP_FORMAT = "%Y-%m-%d.%H%M%S"
OUTPUT_FILE_TEMPLATE = "results-query-{sequence:06d}.output"


def run_directory(output_root: Path | str, now: Optional[datetime] = None) -> Path:
    """Absolute run directory `{output_root}/{YYYY-MM-DD.HHMMSS}`."""
    stamp = (now or datetime.now()).strftime(RUN_TIMESTAMP_FORMAT)
    return Path(os.path.abspath(os.path.join(output_root, stamp)))


def output_path_for(run_dir: Path, sequence: int) -> Path:
    return run_dir / OUTPUT_FILE_TEMPLATE.format(sequence=sequence)


def _discover(pattern: str) -> List[str]:
    if not pattern:
        raise DiscoveryError("Query file pattern is empty")
    try:
        matches = glob.glob(pattern)
    except (OSError, ValueError, re.error) as exc:
        raise DiscoveryError(f"Glob failed for pattern {pattern!r}: {exc}") from exc

    files: List[str] = []
    for match in matches:
        try:
            if os.path.isdir(match):
                continue
            os.stat(match)
        except OSError as exc:
            raise DiscoveryError(f"Failed to get file info for {match}: {exc}") from exc
        files.append(match)
    return files


def _decode_sql(raw: bytes, input_path: Path) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        log.warning(
            f"Query file is not valid UTF-8, undecodable bytes replaced: {exc}",
            extra={"input_file": str(input_path)},
        )
        return raw.decode("utf-8", errors="replace")


def load_queries(
    pattern: str,
    output_root: Path | str,
    *,
    now: Optional[datetime] = None,
) -> Batch:
    """
    Load every query file matching `pattern` into a Batch in identity order.

    Parameters
    ----------
    pattern : str
        Glob pattern for the query files (e.g. "queries/*.sql").
    output_root : Path | str
        Root directory for results; a timestamped run directory goes below it.
    now : datetime, optional
        Run start time used for the run directory name. Defaults to the current
        local time, taken once for the whole load.

    Raises
    ------
    DiscoveryError
        If the pattern is unusable or a match cannot be inspected.
    ReadError
        If any matching file cannot be read. No partial batch is returned.
        Files that are not valid UTF-8 still load, with undecodable bytes
        replaced by U+FFFD.
    """
    run_dir = run_directory(output_root, now)
    records: List[QueryRecord] = []

    for sequence, filename in enumerate(_discover(pattern), start=1):
        input_path = Path(os.path.abspath(filename))
        try:
            raw = input_path.read_bytes()
        except OSError as exc:
            raise ReadError(f"Read input file failed for {input_path}: {exc}") from exc
        sql = _decode_sql(raw, input_path)

        record = QueryRecord(
            sql=sql,
            input_path=input_path,
            output_path=output_path_for(run_dir, sequence),
            sequence=sequence,
        )
        log.debug(
            "Query details",
            extra={
                "sequence": record.sequence,
                "input_file": str(record.input_path),
                "output_file": str(record.output_path),
            },
        )
        records.append(record)

    if not records:
        log.warning("No query files matched", extra={"pattern": pattern})
    else:
        log.info("Queries loaded", extra={"count": len(records), "run_dir": str(run_dir)})

    return Batch(records=records, execution_order=list(range(len(records))), run_dir=run_dir)


__all__ = [
    "OUTPUT_FILE_TEMPLATE",
    "RUN_TIMESTAMP_FORMAT",
    "load_queries",
    "output_path_for",
    "run_directory",
]
