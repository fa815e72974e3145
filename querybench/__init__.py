"""
querybench - timing harness for batches of SQL queries on BigQuery.

Loads a set of SQL files, optionally shuffles their execution order, runs each
one (live or dry-run) over a single client connection, and records:

- Submission start and completion times
- First-row and last-row retrieval times
- Row counts, with every result streamed to its own delimited file
- A per-query error outcome and an overall pass/fail verdict
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "Apache-2.0"

# Public API exports
from querybench.config import RunConfig, Settings, get_settings
from querybench.domain.models import Batch, QueryRecord
from querybench.errors import (
    BatchFailedError,
    DiscoveryError,
    EngineError,
    OutputError,
    QueryBenchError,
    ReadError,
)
from querybench.executor import BatchOutcome, execute_batch, run_batch
from querybench.loader import load_queries
from querybench.planner import plan_batch, plan_execution_order
from querybench.reporter import build_record_report, print_summary, report_record
from querybench.runners import (
    DryRunQueryRunner,
    LiveQueryRunner,
    QueryRunner,
    available_modes,
    create_runner,
)
from querybench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "RunConfig",
    "Settings",
    "get_settings",
    # Domain
    "Batch",
    "QueryRecord",
    # Errors
    "BatchFailedError",
    "DiscoveryError",
    "EngineError",
    "OutputError",
    "QueryBenchError",
    "ReadError",
    # Pipeline
    "load_queries",
    "plan_batch",
    "plan_execution_order",
    "execute_batch",
    "run_batch",
    "BatchOutcome",
    # Runners
    "QueryRunner",
    "LiveQueryRunner",
    "DryRunQueryRunner",
    "available_modes",
    "create_runner",
    # Reporting
    "build_record_report",
    "print_summary",
    "report_record",
    # Logging
    "configure_logging",
    "get_logger",
]
