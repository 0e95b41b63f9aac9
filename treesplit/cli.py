from __future__ import annotations

import argparse
import json
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, Iterable, List

from treesplit.boltzmann import generate_random_tree
from treesplit.fingerprint import fingerprint_tree
from treesplit.rng import make_source
from treesplit.split import SplitEvent, random_split
from treesplit.stats import chi_squared, expected_histogram, selection_histogram
from treesplit.text import parse_tree, render_tree
from treesplit.trace import open_trace
from treesplit.trees import Tree, count_nodes, tree_from_dict, tree_to_dict


def _load_tree(path: str, n: int) -> Tree:
    """Load a tree, as rendered text or JSON, from a file path or stdin.

    Passing ``-`` reads from stdin to support piping trees into the CLI.
    """

    if path == "-":
        src = sys.stdin.read()
    else:
        target = Path(path)
        if not target.exists():
            raise FileNotFoundError(path)
        src = target.read_text()

    if src.lstrip().startswith("{"):
        return tree_from_dict(json.loads(src), n)
    return parse_tree(src, n)


def _trace_hooks(stack: ExitStack, args: argparse.Namespace) -> List[Callable[[SplitEvent], None]]:
    if not args.trace_jsonl:
        return []
    return [stack.enter_context(open_trace(args.trace_jsonl, seed=args.seed))]


def _cmd_generate(args: argparse.Namespace) -> dict | str:
    tree = generate_random_tree(
        args.min_size,
        args.max_size,
        args.labels,
        make_source(args.seed),
        max_attempts=args.max_attempts,
    )
    if args.json:
        return {"nodes": count_nodes(tree), "tree": tree_to_dict(tree)}
    return render_tree(tree)


def _cmd_split(args: argparse.Namespace) -> dict:
    tree = _load_tree(args.tree, args.labels)
    events: List[SplitEvent] = []
    with ExitStack() as stack:
        hooks = [events.append, *_trace_hooks(stack, args)]
        _, selected = random_split(lambda t: t, tree, make_source(args.seed), hooks=hooks)

    event = events[0]
    return {
        "nodes": event.visited,
        "path": "".join(event.path),
        "selected": tree_to_dict(selected),
        "selected_text": render_tree(selected),
        "fingerprint": fingerprint_tree(selected),
    }


def _cmd_histogram(args: argparse.Namespace) -> dict:
    tree = _load_tree(args.tree, args.labels)
    with ExitStack() as stack:
        hooks = _trace_hooks(stack, args)
        observed = selection_histogram(tree, args.draws, make_source(args.seed), hooks=hooks)
    expected = expected_histogram(tree, args.draws)
    return {
        "nodes": count_nodes(tree),
        "draws": args.draws,
        "observed": {str(k): observed[k] for k in sorted(observed)},
        "expected": {str(k): expected[k] for k in sorted(expected)},
        "chi_squared": chi_squared(observed, expected),
        "degrees_of_freedom": len(expected) - 1,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treesplit",
        description="Generate random labelled binary trees and split them at uniformly random nodes.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Boltzmann-sample a tree within a size band")
    gen.add_argument("--min-size", dest="min_size", type=int, required=True, help="Exclusive lower node bound")
    gen.add_argument("--max-size", dest="max_size", type=int, required=True, help="Exclusive upper node bound")
    gen.add_argument("--labels", type=int, required=True, help="Leaf labels are drawn from [1, LABELS]")
    gen.add_argument("--seed", type=int, help="Seed for a reproducible tree")
    gen.add_argument(
        "--max-attempts",
        dest="max_attempts",
        type=int,
        help="Give up after this many rejected attempts instead of retrying forever",
    )
    gen.add_argument("--json", action="store_true", help="Emit the tree as JSON instead of indented text")
    gen.set_defaults(handler=_cmd_generate)

    split = sub.add_parser("split", help="Select one uniformly random subtree")
    split.add_argument("tree", help="Path to a tree file (text or JSON), or - for stdin")
    split.add_argument("--labels", type=int, required=True, help="Label family size of the tree")
    split.add_argument("--seed", type=int, help="Seed for a reproducible selection")
    split.add_argument("--trace-jsonl", dest="trace_jsonl", help="Write the split event to a JSONL file")
    split.set_defaults(handler=_cmd_split)

    hist = sub.add_parser("histogram", help="Tabulate repeated selections by label-sum checksum")
    hist.add_argument("tree", help="Path to a tree file (text or JSON), or - for stdin")
    hist.add_argument("--labels", type=int, required=True, help="Label family size of the tree")
    hist.add_argument("--draws", type=int, default=10000, help="Number of selections to tabulate")
    hist.add_argument("--seed", type=int, help="Seed for reproducible draws")
    hist.add_argument("--trace-jsonl", dest="trace_jsonl", help="Write one JSONL record per draw")
    hist.set_defaults(handler=_cmd_histogram)

    return parser


def run_cli(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        result = args.handler(args)
    except Exception as exc:
        print(f"treesplit: {exc}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))
    return 0


def main() -> int:  # pragma: no cover - thin wrapper
    return run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    sys.exit(main())
