"""
Domain models for querybench.

A `QueryRecord` is created by the loader, mutated exactly once by a runner during
its single execution pass, and read by the reporter afterwards. Timing fields and
the error are set-once: the mutators below ignore a second write, and once an
error is recorded no further timing field changes.

A `Batch` pairs the discovered records with the order in which they execute.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueryRecord(BaseModel):
    """
    One discovered query file and the outcome of executing it.
    """

    sql: str = Field(..., frozen=True, description="Query body as read from disk.")
    input_path: Path = Field(..., frozen=True, description="Absolute path of the query file.")
    output_path: Path = Field(..., frozen=True, description="Absolute path of the result file.")
    sequence: int = Field(..., frozen=True, ge=1, description="1-based discovery order.")

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    first_row_time: Optional[datetime] = None
    last_row_time: Optional[datetime] = None
    row_count: int = Field(0, ge=0)
    error: Optional[BaseException] = None

    job_id: Optional[str] = None
    bytes_processed: Optional[int] = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def submission_duration(self) -> Optional[timedelta]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    @property
    def retrieval_duration(self) -> Optional[timedelta]:
        if self.end_time is None or self.last_row_time is None:
            return None
        return self.last_row_time - self.end_time

    def mark_started(self, when: Optional[datetime] = None) -> None:
        if self.error is None and self.start_time is None:
            self.start_time = when or utcnow()

    def mark_completed(self, when: Optional[datetime] = None) -> None:
        if self.error is None and self.end_time is None:
            self.end_time = when or utcnow()

    def mark_first_row(self, when: Optional[datetime] = None) -> None:
        if self.error is None and self.first_row_time is None:
            self.first_row_time = when or utcnow()

    def mark_last_row(self, when: Optional[datetime] = None) -> None:
        if self.error is None and self.last_row_time is None:
            self.last_row_time = when or utcnow()

    def fail(self, error: BaseException) -> None:
        """Record the first failure; later failures are ignored."""
        if self.error is None:
            self.error = error


class Batch(BaseModel):
    """
    Loaded records plus the permutation of indices they execute in.
    """

    records: List[QueryRecord] = Field(default_factory=list)
    execution_order: List[int] = Field(default_factory=list)
    run_dir: Optional[Path] = None

    model_config = {"arbitrary_types_allowed": True}

    @model_validator(mode="after")
    def _check_execution_order(self) -> "Batch":
        if sorted(self.execution_order) != list(range(len(self.records))):
            raise ValueError(
                "execution_order must be a permutation of "
                f"[0, {len(self.records)}), got {self.execution_order}"
            )
        return self

    def __len__(self) -> int:
        return len(self.records)

    def planned(self, order: Sequence[int]) -> "Batch":
        """Return a batch over the same records with a new execution order."""
        return Batch(records=self.records, execution_order=list(order), run_dir=self.run_dir)

    def in_execution_order(self) -> List[QueryRecord]:
        return [self.records[index] for index in self.execution_order]


__all__ = ["Batch", "QueryRecord", "utcnow"]
