from __future__ import annotations

import hashlib
from typing import Dict, Iterable

from treesplit.trees import Branch, Tree, iter_subtrees


def _hash_components(parts: Iterable[str]) -> str:
    raw = "|".join(parts)
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


def fingerprint_tree(tree: Tree) -> str:
    """Deterministic structural fingerprint for a tree.

    Two trees share a fingerprint exactly when they are structurally equal
    (up to hash collisions), including the label family size.
    """

    digests: Dict[int, str] = {}
    for node in iter_subtrees(tree):
        if isinstance(node, Branch):
            parts = ["branch", digests[id(node.left)], digests[id(node.right)]]
        else:
            parts = ["leaf", str(node.label), str(node.n)]
        digests[id(node)] = _hash_components(parts)
    return digests[id(tree)]
