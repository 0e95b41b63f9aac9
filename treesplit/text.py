from __future__ import annotations

import re
from collections import deque
from typing import List

from treesplit.trees import Branch, Leaf, Tree, TreeSyntaxError


Token = str

_TOKEN_RE = re.compile(r"[A-Za-z_]+|-?\d+|[(),]|\S")


def _render(tree: Tree, indent: int, out: List[str]) -> None:
    out.append(" " * indent)
    if isinstance(tree, Branch):
        out.append("Branch(\n")
        _render(tree.left, indent + 2, out)
        out.append(",\n")
        _render(tree.right, indent + 2, out)
        out.append(")")
    else:
        out.append(f"Leaf({tree.label})")


def render_tree(tree: Tree, indent: int = 0) -> str:
    """Indented S-expression rendering, e.g. ``Branch(\\n  Leaf(1),\\n  Leaf(2))``."""

    out: List[str] = []
    _render(tree, indent, out)
    return "".join(out)


def _tokenize(src: str) -> List[Token]:
    # ';' starts a comment running to end of line.
    cleaned = "\n".join(line.split(";", 1)[0] for line in src.splitlines())
    return _TOKEN_RE.findall(cleaned)


def _expect(queue: deque, expected: Token) -> None:
    if not queue:
        raise TreeSyntaxError(f"unexpected end of input, expected {expected!r}")
    tok = queue.popleft()
    if tok != expected:
        raise TreeSyntaxError(f"expected {expected!r}, got {tok!r}")


def parse_tree(src: str, n: int) -> Tree:
    """Parse the output of :func:`render_tree` back into a tree of family ``n``.

    Whitespace and line breaks are insignificant.
    """

    queue = deque(_tokenize(src))

    def read() -> Tree:
        if not queue:
            raise TreeSyntaxError("unexpected end of input")
        head = queue.popleft()
        if head == "Leaf":
            _expect(queue, "(")
            if not queue:
                raise TreeSyntaxError("unexpected end of input, expected a label")
            raw = queue.popleft()
            try:
                label = int(raw)
            except ValueError as exc:
                raise TreeSyntaxError(f"leaf label must be an integer, got {raw!r}") from exc
            _expect(queue, ")")
            return Leaf(label=label, n=n)
        if head == "Branch":
            _expect(queue, "(")
            left = read()
            _expect(queue, ",")
            right = read()
            _expect(queue, ")")
            return Branch(left, right)
        raise TreeSyntaxError(f"unexpected token {head!r}")

    tree = read()
    if queue:
        raise TreeSyntaxError(f"trailing tokens after tree: {list(queue)[:5]}")
    return tree
