"""
Integration tests for querybench against a real BigQuery project.

These tests verify that:
1. A live batch streams rows from BigQuery into result files
2. A dry run validates queries without writing anything
3. An invalid query fails only its own record

Run with: RUN_INTEGRATION_TESTS=1 BIGQUERY_TEST_PROJECT=<project> pytest tests/integration/
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from querybench.config import RunConfig
from querybench.executor import run_batch

EXPECTED_ROWS = 3

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1" or not os.getenv("BIGQUERY_TEST_PROJECT"),
    reason="Integration tests require RUN_INTEGRATION_TESTS=1, BIGQUERY_TEST_PROJECT and credentials",
)


@pytest.fixture
def project() -> str:
    return os.environ["BIGQUERY_TEST_PROJECT"]


@pytest.fixture
def smoke_queries(tmp_path: Path) -> Path:
    directory = tmp_path / "smoke"
    directory.mkdir()
    (directory / "numbers.sql").write_text(
        "SELECT n, CONCAT('row ', CAST(n AS STRING)) AS label FROM UNNEST([1, 2, 3]) AS n ORDER BY n",
        encoding="utf-8",
    )
    (directory / "empty.sql").write_text("SELECT 1 AS x FROM UNNEST([1]) WHERE FALSE", encoding="utf-8")
    return directory


class TestLiveBatch:
    def test_rows_are_streamed_to_result_files(self, smoke_queries: Path, tmp_path: Path, project: str):
        config = RunConfig(
            input_pattern=str(smoke_queries / "*.sql"),
            output_dir=tmp_path / "results",
            project=project,
        )

        outcome = run_batch(config)

        assert outcome.ok, [str(record.error) for record in outcome.failed]
        by_name = {record.input_path.name: record for record in outcome.records}
        numbers = by_name["numbers.sql"]
        assert numbers.row_count == EXPECTED_ROWS
        assert numbers.output_path.read_text(encoding="utf-8").splitlines() == [
            "1,row 1",
            "2,row 2",
            "3,row 3",
        ]
        empty = by_name["empty.sql"]
        assert empty.row_count == 0
        assert empty.first_row_time is None
        assert empty.last_row_time is not None

    def test_invalid_query_fails_only_itself(self, smoke_queries: Path, tmp_path: Path, project: str):
        (smoke_queries / "broken.sql").write_text("SELEC 1", encoding="utf-8")
        config = RunConfig(
            input_pattern=str(smoke_queries / "*.sql"),
            output_dir=tmp_path / "results",
            project=project,
        )

        outcome = run_batch(config)

        assert [record.input_path.name for record in outcome.failed] == ["broken.sql"]
        assert outcome.total == 3


class TestDryRun:
    def test_dry_run_reports_bytes_and_writes_nothing(
        self, smoke_queries: Path, tmp_path: Path, project: str
    ):
        config = RunConfig(
            input_pattern=str(smoke_queries / "*.sql"),
            output_dir=tmp_path / "results",
            project=project,
            dry_run=True,
        )

        outcome = run_batch(config)

        assert outcome.ok
        assert all(record.bytes_processed is not None for record in outcome.records)
        assert not (tmp_path / "results").exists()
