"""Explicit one-hole contexts over binary trees.

A :class:`Context` records everything above a focused node: for each ancestor
the sibling subtree and which side the hole is on. The three variants are
plain data, so a context has the same shape no matter how deep the focus
sits, and :meth:`Context.rebuild` plugs a value back into the hole.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Tuple

from treesplit.trees import Branch, Tree


class Context:
    """A tree with exactly one hole.

    ``fill`` plugs a value into the innermost level only; ``rebuild`` keeps
    filling up the parent chain until it reaches the root.
    """

    __slots__ = ()

    def fill(self, value: Tree) -> Tree:  # pragma: no cover - overridden by every variant
        raise NotImplementedError

    def rebuild(self, value: Tree) -> Tree:
        context: Context = self
        while isinstance(context, _Hole):
            value = context.fill(value)
            context = context.parent
        return value


@dataclass(frozen=True)
class NoContext(Context):
    """The hole is the whole tree."""

    def fill(self, value: Tree) -> Tree:
        return value

    def rebuild(self, value: Tree) -> Tree:
        return value

    @property
    def depth(self) -> int:
        return 0

    @property
    def path(self) -> Tuple[str, ...]:
        return ()


@dataclass(frozen=True, eq=False)
class _Hole(Context):
    sibling: Tree
    parent: Context
    depth: int = field(init=False, repr=False)

    side = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", self.parent.depth + 1)

    @property
    def path(self) -> Tuple[str, ...]:
        sides: List[str] = []
        context: Context = self
        while isinstance(context, _Hole):
            sides.append(context.side)
            context = context.parent
        return tuple(reversed(sides))

    def __hash__(self) -> int:
        return hash((self.side, self.depth, self.sibling))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        a: Context = self
        b: Context = other
        while isinstance(a, _Hole) and isinstance(b, _Hole):
            if a is b:
                return True
            if a.side != b.side or a.depth != b.depth or a.sibling != b.sibling:
                return False
            a, b = a.parent, b.parent
        return type(a) is type(b)


@dataclass(frozen=True, eq=False)
class LeftHole(_Hole):
    """The hole is the left child of a branch whose right child is ``sibling``."""

    side = "L"

    def fill(self, value: Tree) -> Tree:
        return Branch(value, self.sibling)


@dataclass(frozen=True, eq=False)
class RightHole(_Hole):
    """The hole is the right child of a branch whose left child is ``sibling``."""

    side = "R"

    def fill(self, value: Tree) -> Tree:
        return Branch(self.sibling, value)


@dataclass(frozen=True)
class Candidate:
    """A focused subtree (``chunk``) together with the context around it."""

    context: Context
    chunk: Tree

    def apply(self, action: Callable[[Tree], Tree]) -> Tuple[Tree, Tree]:
        """Replace the chunk by ``action(chunk)``.

        Returns the rebuilt tree and the untouched original chunk.
        """

        new_chunk = action(self.chunk)
        return self.context.rebuild(new_chunk), self.chunk


def iter_focus(tree: Tree, context: Context | None = None) -> Iterator[Candidate]:
    """Yield a :class:`Candidate` for every node, left subtree then right then self."""

    stack: List[Tuple[Tree, Context, bool]] = [(tree, context if context is not None else NoContext(), False)]
    while stack:
        node, ctx, expanded = stack.pop()
        if isinstance(node, Branch) and not expanded:
            stack.append((node, ctx, True))
            stack.append((node.right, RightHole(node.left, ctx), False))
            stack.append((node.left, LeftHole(node.right, ctx), False))
        else:
            yield Candidate(ctx, node)
