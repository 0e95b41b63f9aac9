from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from treesplit.rng import UniformSource
from treesplit.trees import Branch, Leaf, Tree


class GeneratorBudgetExceeded(Exception):
    """A single sampling attempt grew past ``max_size``; the sampler retries."""


class GeneratorExhausted(RuntimeError):
    """Raised when ``max_attempts`` attempts all fell outside the size band."""


def random_leaf(n: int, rng: Optional[UniformSource] = None) -> Leaf:
    """Leaf with a label drawn uniformly from ``[1, n]``."""

    rng = rng or random.Random()
    return Leaf(label=rng.randint(1, n), n=n)


@dataclass(frozen=True)
class BoltzmannSampler:
    """Configuration for Boltzmann sampling trees of label family ``n``.

    Accepted trees have strictly more than ``min_size`` and strictly fewer
    than ``max_size`` nodes. With ``max_attempts`` left as ``None`` the sampler
    retries until it succeeds, so a band that no full binary tree fits into
    (every tree has an odd node count) never returns.
    """

    min_size: int
    max_size: int
    n: int
    max_attempts: int | None = None

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError(f"label family size must be at least 1, got {self.n}")
        if self.min_size < 0:
            raise ValueError("min_size must be non-negative")
        if self.min_size >= self.max_size:
            raise ValueError(f"min_size ({self.min_size}) must be below max_size ({self.max_size})")
        if self.max_attempts is not None and self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive when provided")

    def _attempt(self, rng: UniformSource, cursize: int) -> Tuple[Tree, int]:
        # ``cursize`` counts the node about to be placed.
        if cursize >= self.max_size:
            raise GeneratorBudgetExceeded(cursize)
        if rng.random() <= 0.5:
            return random_leaf(self.n, rng), cursize

        left, cursize = self._attempt(rng, cursize + 1)
        right, cursize = self._attempt(rng, cursize + 1)
        return Branch(left, right), cursize

    def sample(self, rng: Optional[UniformSource] = None) -> Tree:
        rng = rng or random.Random()
        attempts = 0
        while self.max_attempts is None or attempts < self.max_attempts:
            attempts += 1
            try:
                candidate, size = self._attempt(rng, 1)
            except GeneratorBudgetExceeded:
                continue
            if size > self.min_size:
                return candidate

        raise GeneratorExhausted(
            f"no tree with {self.min_size} < size < {self.max_size} after {attempts} attempts"
        )


def generate_random_tree(
    min_size: int,
    max_size: int,
    n: int,
    rng: Optional[UniformSource] = None,
    *,
    max_attempts: int | None = None,
) -> Tree:
    """Sample a random tree whose node count lies strictly between the bounds."""

    sampler = BoltzmannSampler(min_size=min_size, max_size=max_size, n=n, max_attempts=max_attempts)
    return sampler.sample(rng)
