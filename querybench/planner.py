"""
Execution order planning.

The order is a permutation of record indices. Shuffling only changes which
record runs when; sequence numbers and output paths stay as loaded.
"""

from __future__ import annotations

import random
from typing import List, Optional

from querybench.domain.models import Batch
from querybench.utils.logging import get_logger

log = get_logger(__name__)


def plan_execution_order(count: int, shuffle: bool, rng: Optional[random.Random] = None) -> List[int]:
    """
    Return `[0, count)` in identity order, or a uniformly random permutation.

    The default random source is seeded from the OS, so shuffled orders are not
    reproducible across runs. Pass a seeded `random.Random` for a fixed order.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    order = list(range(count))
    if shuffle:
        (rng or random.Random()).shuffle(order)
        log.info("Query execution order shuffle complete", extra={"order": order})
    return order


def plan_batch(batch: Batch, shuffle: bool, rng: Optional[random.Random] = None) -> Batch:
    return batch.planned(plan_execution_order(len(batch), shuffle, rng))


__all__ = ["plan_batch", "plan_execution_order"]
