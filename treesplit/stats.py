"""Empirical checks that :func:`random_child` samples nodes uniformly.

Selected subtrees are bucketed by a checksum (the label sum by default);
on a tree where several nodes share a checksum the expected count of that
bucket is proportionally larger.
"""
from __future__ import annotations

import random
from collections import Counter
from typing import Callable, Dict, Hashable, Iterable, Mapping, Optional

from treesplit.rng import UniformSource
from treesplit.split import SplitEvent, random_split
from treesplit.trees import Tree, iter_subtrees, sum_labels


def selection_histogram(
    tree: Tree,
    draws: int,
    rng: Optional[UniformSource] = None,
    *,
    key: Callable[[Tree], Hashable] = sum_labels,
    hooks: Optional[Iterable[Callable[[SplitEvent], None]]] = None,
) -> Counter:
    """Count how often each checksum is selected over ``draws`` calls.

    ``hooks`` are passed to every underlying :func:`random_split`.
    """

    if draws <= 0:
        raise ValueError("draws must be positive")
    rng = rng or random.Random()
    hooks = list(hooks or [])
    return Counter(key(random_split(lambda t: t, tree, rng, hooks=hooks)[1]) for _ in range(draws))


def expected_histogram(
    tree: Tree,
    draws: int,
    *,
    key: Callable[[Tree], Hashable] = sum_labels,
) -> Dict[Hashable, float]:
    """Expected bucket counts under a perfectly uniform node choice."""

    buckets = Counter(key(node) for node in iter_subtrees(tree))
    total = sum(buckets.values())
    return {bucket: draws * count / total for bucket, count in buckets.items()}


def chi_squared(observed: Mapping[Hashable, int], expected: Mapping[Hashable, float]) -> float:
    """Pearson's statistic; observed buckets absent from ``expected`` are an error."""

    unexpected = set(observed) - set(expected)
    if unexpected:
        raise ValueError(f"observed buckets with zero expectation: {sorted(map(str, unexpected))}")
    return sum((observed.get(bucket, 0) - exp) ** 2 / exp for bucket, exp in expected.items())
