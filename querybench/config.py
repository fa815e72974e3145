"""
Configuration settings for querybench.

Uses Pydantic Settings to load environment variables for the target warehouse,
query execution options, and logging. `RunConfig` is the explicit configuration
object handed to the loader, runners and executor; it is built from `Settings`
with CLI overrides applied on top.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DELIMITER_ALIASES = {"\\t": "\t", "tab": "\t"}


def _single_character(value: str) -> str:
    value = _DELIMITER_ALIASES.get(value, value)
    if len(value) != 1:
        raise ValueError(f"delimiter must be exactly one character, got {value!r}")
    if value in ("\r", "\n", '"'):
        raise ValueError(f"delimiter {value!r} cannot be used in delimited output")
    return value


class RunConfig(BaseModel):
    """
    Options consumed by one benchmark run.
    """

    input_pattern: str = "queries/*.sql"
    output_dir: Path = Path("results")
    project: Optional[str] = None
    dataset: Optional[str] = None
    location: Optional[str] = "US"
    disable_query_cache: bool = True
    dry_run: bool = False
    delimiter: str = ","
    shuffle: bool = False

    model_config = {"frozen": True}

    @field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        return _single_character(value)

    @property
    def mode(self) -> str:
        return "dry_run" if self.dry_run else "live"


class Settings(BaseSettings):
    # Warehouse
    project: Optional[str] = Field(None, alias="QB_PROJECT")
    dataset: Optional[str] = Field(None, alias="QB_DATASET")
    location: Optional[str] = Field("US", alias="QB_LOCATION")

    # Execution
    disable_query_cache: bool = Field(True, alias="QB_DISABLE_QUERY_CACHE")
    dry_run: bool = Field(False, alias="QB_DRY_RUN")
    delimiter: str = Field(",", alias="QB_DELIMITER")
    shuffle: bool = Field(False, alias="QB_SHUFFLE")

    # Files
    input_pattern: str = Field("queries/*.sql", alias="QB_INPUT_PATTERN")
    output_dir: Path = Field(Path("results"), alias="QB_OUTPUT_DIR")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        return _single_character(value)

    def to_run_config(self, **overrides: Any) -> RunConfig:
        """
        Build a RunConfig from these settings; non-None overrides win.
        """
        values = {name: getattr(self, name) for name in RunConfig.model_fields}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return RunConfig(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["RunConfig", "Settings", "get_settings"]
