"""
Query engine interface consumed by the runners.

The runners only ever talk to an `EngineClient`. A live submission returns a
`RowCursor` once the engine reports the job complete; a dry-run submission
returns a `JobStatus`. Implementations raise `EngineError` for submission and
row-fetch failures so the runners never need to know the client library.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Protocol, Sequence, runtime_checkable

Row = Sequence[Any]


@dataclass(frozen=True)
class QueryOptions:
    """Per-batch settings applied to every submitted query."""

    project: Optional[str] = None
    dataset: Optional[str] = None
    location: Optional[str] = None
    disable_cache: bool = True


@runtime_checkable
class RowCursor(Protocol):
    """
    Lazy, finite, forward-only sequence of result rows.

    Iterating after exhaustion yields nothing. A fetch failure mid-iteration
    raises `EngineError`.
    """

    job_id: Optional[str]
    bytes_processed: Optional[int]

    def __iter__(self) -> Iterator[Row]: ...


@runtime_checkable
class JobStatus(Protocol):
    """Outcome of a dry-run submission."""

    job_id: Optional[str]
    bytes_processed: Optional[int]

    def error(self) -> Optional[Exception]: ...


@runtime_checkable
class EngineClient(Protocol):
    """Submits SQL to the warehouse."""

    def submit(self, sql: str, options: QueryOptions, *, dry_run: bool = False) -> Any:
        """
        Submit a query.

        Returns a `RowCursor` when `dry_run` is false, otherwise a `JobStatus`.

        Raises
        ------
        EngineError
            If the engine rejects the submission.
        """
        ...

    def close(self) -> None: ...


# Scoped acquisition of one client for a whole batch.
EngineFactory = Callable[[], AbstractContextManager[EngineClient]]


__all__ = [
    "EngineClient",
    "EngineFactory",
    "JobStatus",
    "QueryOptions",
    "Row",
    "RowCursor",
]
