"""
Infrastructure package for querybench.

Centralizes query engine connectivity: the engine protocol the runners depend
on and the BigQuery client that implements it. Keep this layer focused on I/O
and resource management, decoupled from runner/executor logic.
"""

from querybench.infrastructure.bigquery import BigQueryEngine, open_bigquery_engine
from querybench.infrastructure.engine import (
    EngineClient,
    EngineFactory,
    JobStatus,
    QueryOptions,
    RowCursor,
)

__all__ = [
    "BigQueryEngine",
    "EngineClient",
    "EngineFactory",
    "JobStatus",
    "QueryOptions",
    "RowCursor",
    "open_bigquery_engine",
]
