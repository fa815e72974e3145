"""
Runners package for querybench.

Re-exports the runner interfaces and the two execution modes, and keeps the
registry that maps mode names to runner factories.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from querybench.config import RunConfig
from querybench.infrastructure.engine import QueryOptions
from querybench.runners.abstract import AbstractQueryRunner, QueryRunner
from querybench.runners.dry_run import DryRunQueryRunner
from querybench.runners.live import LiveQueryRunner


def query_options(config: RunConfig) -> QueryOptions:
    """Engine options shared by every query in a batch."""
    return QueryOptions(
        project=config.project,
        dataset=config.dataset,
        location=config.location,
        disable_cache=config.disable_query_cache,
    )


def _runner_factories() -> Dict[str, Callable[[RunConfig], QueryRunner]]:
    """Registry of available execution modes."""
    return {
        "live": lambda config: LiveQueryRunner(query_options(config), delimiter=config.delimiter),
        "dry_run": lambda config: DryRunQueryRunner(query_options(config)),
    }


def available_modes() -> List[str]:
    """List available execution mode names."""
    return sorted(_runner_factories().keys())


def create_runner(mode: str, config: RunConfig) -> QueryRunner:
    factories = _runner_factories()
    if mode not in factories:
        raise ValueError(f"Unknown execution mode '{mode}'. Available: {', '.join(factories)}")
    return factories[mode](config)


__all__ = [
    # Abstracts
    "AbstractQueryRunner",
    "QueryRunner",
    # Concrete runners
    "DryRunQueryRunner",
    "LiveQueryRunner",
    # Registry
    "available_modes",
    "create_runner",
    "query_options",
]
