"""
Error taxonomy for querybench.

Load-time errors (`DiscoveryError`, `ReadError`) abort the whole run. Per-record
errors (`OutputError`, `EngineError`) are captured on the QueryRecord and never
interrupt sibling records; they surface in aggregate through `BatchFailedError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from querybench.domain.models import QueryRecord


class QueryBenchError(Exception):
    """Base class for all querybench errors."""


class DiscoveryError(QueryBenchError):
    """The query file pattern is malformed or the filesystem could not be listed."""


class ReadError(QueryBenchError):
    """A matched query file could not be read."""


class OutputError(QueryBenchError):
    """Output directory or file could not be created or written."""


class EngineError(QueryBenchError):
    """The query engine rejected a submission, a row fetch, or a dry-run."""


class BatchFailedError(QueryBenchError):
    """One or more queries in a batch failed."""

    def __init__(self, failed: Sequence["QueryRecord"]) -> None:
        self.failed = list(failed)
        sequences = ", ".join(str(record.sequence) for record in self.failed)
        super().__init__(f"{len(self.failed)} query/queries failed (sequence: {sequences})")


__all__ = [
    "QueryBenchError",
    "DiscoveryError",
    "ReadError",
    "OutputError",
    "EngineError",
    "BatchFailedError",
]
