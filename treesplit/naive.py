"""Closure-based presentation of the random split.

Here the context above the focus is a function built by wrapping the
parent's function once per level, and the winner is a continuation closing
over it. It draws in the same order as :mod:`treesplit.split` and returns the
same result for the same source; it is kept as a baseline for comparisons and
benchmarks, not for library use.
"""
from __future__ import annotations

import random
from typing import Callable, Optional, Tuple

from treesplit.rng import UniformSource
from treesplit.trees import Branch, Tree

Rebuild = Callable[[Tree], Tree]
Continuation = Callable[[Callable[[Tree], Tree]], Tuple[Tree, Tree]]


def _continuation(context: Rebuild, chunk: Tree) -> Continuation:
    return lambda action: (context(action(chunk)), chunk)


def _visit_naive(
    tree: Tree,
    n: int,
    context: Rebuild,
    continuation: Optional[Continuation],
    rng: UniformSource,
) -> Tuple[Optional[Continuation], int]:
    if isinstance(tree, Branch):
        left, right = tree.left, tree.right
        continuation, n = _visit_naive(
            left, n, lambda t: context(Branch(t, right)), continuation, rng
        )
        continuation, n = _visit_naive(
            right, n, lambda t: context(Branch(left, t)), continuation, rng
        )

    n += 1
    if rng.random() <= 1 / n:
        continuation = _continuation(context, tree)
    return continuation, n


def random_split_naive(
    action: Callable[[Tree], Tree],
    tree: Tree,
    rng: Optional[UniformSource] = None,
) -> Tuple[Tree, Tree]:
    rng = rng or random.Random()
    # The first visited node wins with probability 1, so ``None`` is always replaced.
    continuation, _ = _visit_naive(tree, 0, lambda t: t, None, rng)
    return continuation(action)


def random_child_naive(tree: Tree, rng: Optional[UniformSource] = None) -> Tree:
    return random_split_naive(lambda t: t, tree, rng)[1]
