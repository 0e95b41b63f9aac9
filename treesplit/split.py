from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from treesplit.fingerprint import fingerprint_tree
from treesplit.rng import UniformSource
from treesplit.trees import Tree, count_nodes
from treesplit.zipper import Candidate, Context, NoContext, iter_focus


@dataclass(frozen=True)
class SplitEvent:
    """Outcome of a single :func:`random_split` call, for tracing hooks."""

    visited: int
    path: Tuple[str, ...]
    selected: Tree
    replacement: Tree
    result: Tree

    def to_record(self) -> Dict[str, object]:
        """JSON-ready event representation for tracing."""

        return {
            "visited": self.visited,
            "path": "".join(self.path),
            "depth": len(self.path),
            "selected_nodes": count_nodes(self.selected),
            "replacement_nodes": count_nodes(self.replacement),
            "selected_fingerprint": fingerprint_tree(self.selected),
            "result_fingerprint": fingerprint_tree(self.result),
        }


def _visit(
    tree: Tree,
    context: Context,
    winner: Candidate,
    n: int,
    rng: UniformSource,
) -> Tuple[Candidate, int]:
    # One draw per node in post-order; the k-th visited node replaces the
    # winner with probability 1/k.
    for candidate in iter_focus(tree, context):
        n += 1
        if rng.random() <= 1 / n:
            winner = candidate
    return winner, n


def select_candidate(tree: Tree, rng: Optional[UniformSource] = None) -> Tuple[Candidate, int]:
    """Reservoir-sample one node of ``tree`` in a single traversal.

    Returns the winning candidate and the number of nodes visited. Every node,
    the root included, wins with probability ``1 / count_nodes(tree)``.
    """

    rng = rng or random.Random()
    root_context = NoContext()
    return _visit(tree, root_context, Candidate(root_context, tree), 0, rng)


def random_split(
    action: Callable[[Tree], Tree],
    tree: Tree,
    rng: Optional[UniformSource] = None,
    *,
    hooks: Optional[Iterable[Callable[[SplitEvent], None]]] = None,
) -> Tuple[Tree, Tree]:
    """Select a uniformly random subtree ``s`` of ``tree`` and replace it by ``action(s)``.

    Returns ``(new_tree, s)``. ``tree`` itself is left untouched; only the
    ancestors of the selected node are rebuilt, every other subtree is shared.
    Whatever ``action`` raises propagates to the caller.
    """

    winner, visited = select_candidate(tree, rng)
    replacement = action(winner.chunk)
    new_tree = winner.context.rebuild(replacement)

    if hooks:
        event = SplitEvent(
            visited=visited,
            path=winner.context.path,
            selected=winner.chunk,
            replacement=replacement,
            result=new_tree,
        )
        for hook in hooks:
            hook(event)

    return new_tree, winner.chunk


def _identity(tree: Tree) -> Tree:
    return tree


def random_child(tree: Tree, rng: Optional[UniformSource] = None) -> Tree:
    """Return a uniformly random node of ``tree`` (leaves and branches alike)."""

    return random_split(_identity, tree, rng)[1]
