from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from querybench import config
from querybench.config import RunConfig, Settings


def test_get_settings_defaults() -> None:
    settings = config.get_settings()

    assert settings.project is None
    assert settings.location == "US"
    assert settings.disable_query_cache is True
    assert settings.dry_run is False
    assert settings.delimiter == ","
    assert settings.shuffle is False
    assert settings.output_dir == Path("results")
    assert settings.log_level == "INFO"


def test_get_settings_is_cached() -> None:
    assert config.get_settings() is config.get_settings()


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QB_PROJECT", "bench-project")
    monkeypatch.setenv("QB_DATASET", "tpch_sf100")
    monkeypatch.setenv("QB_SHUFFLE", "true")
    monkeypatch.setenv("QB_DELIMITER", "|")

    settings = Settings()

    assert settings.project == "bench-project"
    assert settings.dataset == "tpch_sf100"
    assert settings.shuffle is True
    assert settings.delimiter == "|"


def test_settings_read_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("QB_LOCATION=EU\nQB_DRY_RUN=1\n", encoding="utf-8")

    settings = Settings()

    assert settings.location == "EU"
    assert settings.dry_run is True


@pytest.mark.parametrize("delimiter", ["", ";;", "\n", '"'])
def test_invalid_delimiters_are_rejected(delimiter: str) -> None:
    with pytest.raises(pydantic.ValidationError):
        RunConfig(delimiter=delimiter)


@pytest.mark.parametrize("alias", ["\\t", "tab", "\t"])
def test_tab_delimiter_aliases(alias: str) -> None:
    assert RunConfig(delimiter=alias).delimiter == "\t"


def test_to_run_config_applies_non_none_overrides() -> None:
    settings = Settings(QB_PROJECT="from-env", QB_SHUFFLE=True)

    run_config = settings.to_run_config(project="from-cli", dataset=None, shuffle=None, dry_run=True)

    assert run_config.project == "from-cli"
    assert run_config.shuffle is True
    assert run_config.dry_run is True
    assert run_config.mode == "dry_run"


def test_run_config_mode_defaults_to_live() -> None:
    assert RunConfig().mode == "live"
