from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Tuple


class InvalidLabel(ValueError):
    """Raised when a leaf label is not an integer in its family's ``[1, n]`` range."""


class TreeSyntaxError(ValueError):
    """Raised when a textual or dict tree payload cannot be decoded."""


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Tree:
    """Immutable binary tree with labelled leaves.

    The variant set is closed: every tree is either a :class:`Leaf` or a
    :class:`Branch`. Both variants are frozen dataclasses, so equality is
    structural and trees can be shared freely between callers.
    """

    __slots__ = ()


@dataclass(frozen=True)
class Leaf(Tree):
    label: int
    n: int

    def __post_init__(self) -> None:
        if not _is_int(self.n):
            raise InvalidLabel(f"label family size must be an int, got {self.n!r}")
        if self.n < 1:
            raise InvalidLabel(f"label family size must be at least 1, got {self.n}")
        if not _is_int(self.label):
            raise InvalidLabel(f"label must be an int, got {self.label!r}")
        if not 1 <= self.label <= self.n:
            raise InvalidLabel(f"label {self.label} outside [1, {self.n}]")

    @classmethod
    def new(cls, label: int, n: int) -> "Leaf":
        return cls(label=label, n=n)


@dataclass(frozen=True, eq=False)
class Branch(Tree):
    """Inner node.

    ``n`` and the hash are taken from the children once at construction, so
    building, hashing and comparing stay independent of the tree's depth.
    """

    left: Tree
    right: Tree
    n: int = field(init=False, repr=False)
    _hash: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        for side, child in (("left", self.left), ("right", self.right)):
            if not isinstance(child, Tree):
                raise TypeError(f"{side} child must be a Tree, got {type(child).__name__}")
        if self.left.n != self.right.n:
            raise ValueError(
                f"branch children belong to different label families ({self.left.n} != {self.right.n})"
            )
        object.__setattr__(self, "n", self.left.n)
        object.__setattr__(self, "_hash", hash(("branch", hash(self.left), hash(self.right))))

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Branch):
            return NotImplemented
        stack: List[Tuple[Tree, Tree]] = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a is b:
                continue
            if isinstance(a, Branch) and isinstance(b, Branch):
                if a._hash != b._hash:
                    return False
                stack.append((a.right, b.right))
                stack.append((a.left, b.left))
            elif a != b:
                return False
        return True

    @classmethod
    def new(cls, left: Tree, right: Tree) -> "Branch":
        return cls(left=left, right=right)


def leaf(label: int, n: int) -> Leaf:
    return Leaf(label=label, n=n)


def branch(left: Tree, right: Tree) -> Branch:
    return Branch(left=left, right=right)


def iter_subtrees(tree: Tree) -> Iterator[Tree]:
    """Yield every node of ``tree`` in left, right, self order."""

    stack: List[Tuple[Tree, bool]] = [(tree, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, Branch) and not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            yield node


def count_nodes(tree: Tree) -> int:
    """Number of nodes in ``tree``, leaves and branches together."""

    return sum(1 for _ in iter_subtrees(tree))


def count_leaves(tree: Tree) -> int:
    return sum(1 for node in iter_subtrees(tree) if isinstance(node, Leaf))


def depth(tree: Tree) -> int:
    """Height of ``tree``; a single leaf has depth 1."""

    deepest = 0
    stack: List[Tuple[Tree, int]] = [(tree, 1)]
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        if isinstance(node, Branch):
            stack.append((node.right, level + 1))
            stack.append((node.left, level + 1))
    return deepest


def sum_labels(tree: Tree) -> int:
    """Checksum of a subtree: the sum of its reachable leaf labels."""

    return sum(node.label for node in iter_subtrees(tree) if isinstance(node, Leaf))


def tree_to_dict(tree: Tree) -> Dict[str, Any]:
    """Serialize a tree into a JSON-friendly nested mapping."""

    if isinstance(tree, Branch):
        return {"branch": [tree_to_dict(tree.left), tree_to_dict(tree.right)]}
    return {"leaf": tree.label}


def tree_from_dict(data: Mapping[str, Any], n: int) -> Tree:
    """Rebuild a tree from :func:`tree_to_dict` output within label family ``n``."""

    if not isinstance(data, Mapping) or len(data) != 1:
        raise TreeSyntaxError(f"expected a single-key mapping, got {data!r}")
    if "leaf" in data:
        label = data["leaf"]
        if not _is_int(label):
            raise TreeSyntaxError(f"leaf label must be an integer, got {label!r}")
        return Leaf(label=label, n=n)
    if "branch" in data:
        children = data["branch"]
        if not isinstance(children, (list, tuple)) or len(children) != 2:
            raise TreeSyntaxError("branch payload must hold exactly two children")
        return Branch(tree_from_dict(children[0], n), tree_from_dict(children[1], n))
    raise TreeSyntaxError(f"unknown tree node kind: {sorted(data)}")
