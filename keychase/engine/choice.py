from __future__ import annotations

import random
from typing import Hashable, Mapping, TypeVar

from keychase.common.errors import InvalidDistribution

T = TypeVar("T", bound=Hashable)


def weighted_choice(weights: Mapping[T, float], rng: random.Random) -> T:
    """Pick one key of ``weights`` with probability proportional to its weight.

    Uses a single uniform draw scaled to the total weight and walks the
    cumulative weights in mapping order.
    """
    total = sum(weights.values())
    if not weights or total <= 0:
        raise InvalidDistribution(
            f"weights are empty or all zero (entries: {len(weights)}, total: {total})"
        )
    r = rng.random() * total
    last_positive = None
    for choice, weight in weights.items():
        if weight <= 0:
            continue
        if r < weight:
            return choice
        r -= weight
        last_positive = choice
    # Float drift can leave a sliver past the final bucket.
    return last_positive
