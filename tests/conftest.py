"""
Pytest configuration for querybench.

Provides fixtures for:
- An in-memory engine client standing in for BigQuery
- Query directories seeded with SQL files
- Settings isolated from the developer's environment
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest

from querybench.config import RunConfig, get_settings
from querybench.errors import EngineError
from querybench.infrastructure.engine import QueryOptions

RUN_STARTED_AT = datetime(2024, 3, 9, 14, 5, 7)


class FakeCursor:
    """Row cursor that can fail before yielding the row at `fail_at`."""

    def __init__(
        self,
        rows: Sequence[Any],
        fail_at: Optional[int] = None,
        error: Optional[Exception] = None,
        job_id: str = "job-live",
        bytes_processed: Optional[int] = 2048,
    ) -> None:
        self._rows = list(rows)
        self._fail_at = fail_at
        self._error = error or EngineError("connection reset while fetching rows")
        self._consumed = False
        self.job_id = job_id
        self.bytes_processed = bytes_processed

    def __iter__(self) -> Iterator[Any]:
        if self._consumed:
            return
        self._consumed = True
        for index, row in enumerate(self._rows):
            if index == self._fail_at:
                raise self._error
            yield row
        if self._fail_at is not None and self._fail_at >= len(self._rows):
            raise self._error


class FakeStatus:
    def __init__(
        self,
        error: Optional[Exception] = None,
        job_id: Optional[str] = None,
        bytes_processed: Optional[int] = 1024,
    ) -> None:
        self._error = error
        self.job_id = job_id
        self.bytes_processed = bytes_processed

    def error(self) -> Optional[Exception]:
        return self._error


class FakeEngine:
    """
    Engine client answering from a SQL -> response map.

    A response may be a list of rows, a FakeCursor, a FakeStatus, or an exception
    to raise from `submit`. Unknown SQL returns no rows.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[Tuple[str, QueryOptions, bool]] = []
        self.closed = False

    def submit(self, sql: str, options: QueryOptions, *, dry_run: bool = False) -> Any:
        if self.closed:
            raise RuntimeError("engine is already closed")
        self.calls.append((sql, options, dry_run))
        response = self.responses.get(sql, [])
        if isinstance(response, Exception):
            raise response
        if dry_run:
            return response if isinstance(response, FakeStatus) else FakeStatus()
        if isinstance(response, FakeCursor):
            return response
        return FakeCursor(response)

    def close(self) -> None:
        self.closed = True

    @property
    def submitted_sql(self) -> List[str]:
        return [sql for sql, _, _ in self.calls]


class FakeEngineFactory:
    """Scoped acquisition of a FakeEngine that counts opens and closes."""

    def __init__(self, engine: FakeEngine) -> None:
        self.engine = engine
        self.opened = 0

    @contextmanager
    def __call__(self) -> Iterator[FakeEngine]:
        self.opened += 1
        try:
            yield self.engine
        finally:
            self.engine.close()


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """
    Keep tests independent of QB_* variables and any .env in the working tree.
    """
    for name in (
        "QB_PROJECT",
        "QB_DATASET",
        "QB_LOCATION",
        "QB_DISABLE_QUERY_CACHE",
        "QB_DRY_RUN",
        "QB_DELIMITER",
        "QB_SHUFFLE",
        "QB_INPUT_PATTERN",
        "QB_OUTPUT_DIR",
        "LOG_LEVEL",
        "LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def engine_factory(fake_engine: FakeEngine) -> FakeEngineFactory:
    return FakeEngineFactory(fake_engine)


@pytest.fixture
def query_dir(tmp_path: Path) -> Path:
    """
    Directory holding a.sql, b.sql and c.sql.
    """
    directory = tmp_path / "queries"
    directory.mkdir()
    (directory / "a.sql").write_text("SELECT 'a' AS name", encoding="utf-8")
    (directory / "b.sql").write_text("SELECT 'b' AS name", encoding="utf-8")
    (directory / "c.sql").write_text("SELECT 'c' AS name", encoding="utf-8")
    return directory


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "results"


@pytest.fixture
def run_config(query_dir: Path, output_root: Path) -> RunConfig:
    return RunConfig(
        input_pattern=str(query_dir / "*.sql"),
        output_dir=output_root,
        project="bench-project",
        dataset="tpch",
        location="US",
    )
