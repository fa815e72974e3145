"""
BigQuery implementation of the query engine interface.

Wraps `google.cloud.bigquery.Client` so runners can submit SQL, wait for the job
to finish, and iterate result rows page by page without materializing the full
result set. All client-library failures are re-raised as `EngineError`.

Client construction is retried with tenacity: resolving default credentials on
GCE/GKE goes through the metadata server, which can fail transiently.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

import google.auth.exceptions
from google.api_core import exceptions as api_exceptions
from google.cloud import bigquery
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from querybench.errors import EngineError
from querybench.infrastructure.engine import QueryOptions, Row
from querybench.utils.logging import get_logger

log = get_logger(__name__)

_ENGINE_ERRORS = (api_exceptions.GoogleAPIError, google.auth.exceptions.GoogleAuthError)
# bigquery.Client raises OSError when no project can be determined.
_CLIENT_ERRORS = _ENGINE_ERRORS + (OSError,)


def _render_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class BigQueryRowCursor:
    """Row cursor over a completed query job's RowIterator."""

    def __init__(self, rows: Iterable[Any], job_id: Optional[str] = None,
                 bytes_processed: Optional[int] = None) -> None:
        self._rows = iter(rows)
        self.job_id = job_id
        self.bytes_processed = bytes_processed

    def __iter__(self) -> Iterator[Row]:
        while True:
            try:
                row = next(self._rows)
            except StopIteration:
                return
            except _ENGINE_ERRORS as exc:
                raise EngineError(f"Fetching result rows failed: {exc}") from exc
            yield [_render_value(value) for value in row.values()]


class BigQueryJobStatus:
    """Status of a dry-run query job."""

    def __init__(self, job: bigquery.QueryJob) -> None:
        self._job = job
        self.job_id = job.job_id
        self.bytes_processed = job.total_bytes_processed

    def error(self) -> Optional[Exception]:
        result = self._job.error_result
        if not result:
            return None
        reason = result.get("reason", "unknown")
        message = result.get("message", "dry run failed")
        return EngineError(f"{reason}: {message}")


class BigQueryEngine:
    """
    EngineClient backed by a single `bigquery.Client`.
    """

    def __init__(self, client: bigquery.Client) -> None:
        self._client = client

    def _job_config(self, options: QueryOptions, dry_run: bool) -> bigquery.QueryJobConfig:
        default_dataset = None
        if options.dataset:
            if "." in options.dataset:
                default_dataset = options.dataset
            else:
                project = options.project or self._client.project
                default_dataset = f"{project}.{options.dataset}"
        return bigquery.QueryJobConfig(
            default_dataset=default_dataset,
            use_query_cache=not options.disable_cache,
            dry_run=dry_run,
        )

    def submit(self, sql: str, options: QueryOptions, *, dry_run: bool = False) -> Any:
        job_config = self._job_config(options, dry_run)
        try:
            job = self._client.query(
                sql,
                job_config=job_config,
                project=options.project,
                location=options.location,
            )
            if dry_run:
                return BigQueryJobStatus(job)
            # result() blocks until the job is DONE; rows are then paged lazily.
            rows = job.result()
        except _ENGINE_ERRORS as exc:
            raise EngineError(f"Query submission failed: {exc}") from exc
        return BigQueryRowCursor(rows, job_id=job.job_id, bytes_processed=job.total_bytes_processed)

    def close(self) -> None:
        self._client.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(google.auth.exceptions.TransportError),
    reraise=True,
)
def create_client(project: Optional[str] = None, location: Optional[str] = None) -> bigquery.Client:
    """
    Build a BigQuery client with automatic retry on credential transport errors.

    Raises
    ------
    google.auth.exceptions.TransportError
        If the credential endpoint stays unreachable after all retry attempts.
    """
    return bigquery.Client(project=project, location=location)


@contextmanager
def open_bigquery_engine(
    project: Optional[str] = None, location: Optional[str] = None
) -> Iterator[BigQueryEngine]:
    """
    Open one BigQuery client for a batch and close it on every exit path.

    Example
    -------
        with open_bigquery_engine("my-project", "US") as engine:
            cursor = engine.submit("SELECT 1", QueryOptions(project="my-project"))
    """
    log.info("Establishing BigQuery client connection", extra={"project": project, "location": location})
    try:
        client = create_client(project=project, location=location)
    except _CLIENT_ERRORS as exc:
        raise EngineError(f"Failed establishing BigQuery client connection: {exc}") from exc

    engine = BigQueryEngine(client)
    try:
        yield engine
    finally:
        engine.close()
        log.debug("BigQuery client connection closed")


__all__ = [
    "BigQueryEngine",
    "BigQueryJobStatus",
    "BigQueryRowCursor",
    "create_client",
    "open_bigquery_engine",
]
