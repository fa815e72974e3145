"""
Runner interfaces for querybench.

A runner executes one QueryRecord against an engine client, recording timings,
row counts and any failure on the record itself. Runners never raise for
per-record failures; the executor inspects `record.error` afterwards.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from querybench.domain.models import QueryRecord
from querybench.infrastructure.engine import EngineClient, QueryOptions


@runtime_checkable
class QueryRunner(Protocol):
    """
    Common interface for execution modes.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier ("live", "dry_run").
    description : str
        A human-friendly summary of the mode.
    """

    name: str
    description: str

    def execute(self, record: QueryRecord, client: EngineClient) -> None:
        """
        Execute one query and record the outcome on `record`.

        Parameters
        ----------
        record : QueryRecord
            The record to execute; owned by the runner for the duration of the call.
        client : EngineClient
            The batch's shared engine client.
        """
        ...


class AbstractQueryRunner(abc.ABC):
    """
    ABC helper for class-based runners.

    Subclasses set `name` and `description` and implement `execute`.
    """

    name: str
    description: str

    def __init__(self, options: QueryOptions) -> None:
        self.options = options

    @abc.abstractmethod
    def execute(self, record: QueryRecord, client: EngineClient) -> None:  # pragma: no cover
        """Run the query and record the outcome."""
        raise NotImplementedError


__all__ = [
    "AbstractQueryRunner",
    "QueryRunner",
]
