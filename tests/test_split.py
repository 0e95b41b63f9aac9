from random import Random

import pytest

from treesplit.boltzmann import generate_random_tree
from treesplit.fingerprint import fingerprint_tree
from treesplit.rng import SequenceSource
from treesplit.split import SplitEvent, random_child, random_split, select_candidate
from treesplit.trees import Branch, count_nodes, iter_subtrees, leaf
from treesplit.zipper import NoContext, iter_focus

T2 = Branch(leaf(1, 4), leaf(2, 4))


def test_scripted_draws_select_root():
    # visit order: Leaf(1), Leaf(2), root; thresholds 1, 1/2, 1/3
    assert random_child(T2, SequenceSource([1.0, 1.0, 0.0])) == T2


def test_scripted_draws_select_right_leaf():
    assert random_child(T2, SequenceSource([0.0, 0.4, 0.9])) == leaf(2, 4)


def test_scripted_draws_keep_first_leaf():
    assert random_child(T2, SequenceSource([0.0, 0.9, 0.9])) == leaf(1, 4)


def test_single_leaf_always_selects_itself():
    only = leaf(3, 4)
    for seed in range(20):
        new_tree, chunk = random_split(lambda _t: leaf(1, 4), only, Random(seed))
        assert chunk == only
        assert new_tree == leaf(1, 4)


def test_one_draw_per_node():
    tree = generate_random_tree(10, 60, 4, Random(3))
    source = SequenceSource([0.5] * count_nodes(tree))

    _, visited = select_candidate(tree, source)

    assert visited == count_nodes(tree)
    assert source.remaining() == (0, 0)


def test_split_replaces_exactly_the_selected_node():
    rng = Random(5)
    replacement = Branch(leaf(4, 4), leaf(4, 4))

    for _ in range(50):
        tree = generate_random_tree(3, 30, 4, rng)
        new_tree, chunk = random_split(lambda _t: replacement, tree, rng)

        matches = [
            c for c in iter_focus(tree) if c.chunk == chunk and c.context.rebuild(replacement) == new_tree
        ]
        assert matches


def test_identity_split_rebuilds_original_tree():
    rng = Random(9)
    for _ in range(30):
        tree = generate_random_tree(3, 30, 4, rng)
        new_tree, chunk = random_split(lambda t: t, tree, rng)
        assert new_tree == tree
        assert chunk in list(iter_subtrees(tree))


def test_split_reuses_untouched_subtrees():
    right = Branch(leaf(3, 4), leaf(4, 4))
    tree = Branch(leaf(1, 4), right)
    # Leaf(1) wins on the first draw and is never displaced.
    source = SequenceSource([0.0, 1.0, 1.0, 1.0, 1.0])

    new_tree, chunk = random_split(lambda _t: leaf(2, 4), tree, source)

    assert chunk == leaf(1, 4)
    assert new_tree == Branch(leaf(2, 4), right)
    assert new_tree.right is right


def test_action_errors_propagate():
    def explode(_tree):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        random_split(explode, T2, Random(0))


def test_select_candidate_defaults_to_root_context():
    candidate, visited = select_candidate(T2, SequenceSource([1.0, 1.0, 1.0]))

    assert candidate.chunk == leaf(1, 4)
    assert visited == 3

    candidate, _ = select_candidate(T2, SequenceSource([1.0, 1.0, 0.0]))
    assert candidate.context == NoContext()


def test_hooks_receive_split_event():
    events: list[SplitEvent] = []
    tree = Branch(leaf(1, 4), Branch(leaf(2, 4), leaf(3, 4)))
    # Leaf(1), Leaf(2), Leaf(3), inner branch, root
    source = SequenceSource([0.0, 1.0, 0.0, 1.0, 1.0])

    new_tree, chunk = random_split(lambda _t: leaf(4, 4), tree, source, hooks=[events.append])

    assert chunk == leaf(3, 4)
    assert len(events) == 1
    event = events[0]
    assert event.visited == 5
    assert event.path == ("R", "R")
    assert event.selected == leaf(3, 4)
    assert event.replacement == leaf(4, 4)
    assert event.result == new_tree

    record = event.to_record()
    assert record["path"] == "RR"
    assert record["depth"] == 2
    assert record["selected_nodes"] == 1
    assert record["replacement_nodes"] == 1
    assert record["result_fingerprint"] == fingerprint_tree(new_tree)


def test_random_child_is_uniform_over_nodes():
    tree = Branch(Branch(leaf(1, 5), leaf(2, 5)), Branch(leaf(3, 5), Branch(leaf(4, 5), leaf(5, 5))))
    nodes = list(iter_subtrees(tree))
    draws = 20000
    rng = Random(1234)

    counts = {fingerprint_tree(node): 0 for node in nodes}
    for _ in range(draws):
        counts[fingerprint_tree(random_child(tree, rng))] += 1

    assert len(counts) == len(nodes)
    for count in counts.values():
        assert abs(count / draws - 1 / len(nodes)) < 0.02


def _left_spine(levels: int):
    tree = leaf(1, 4)
    for i in range(levels):
        tree = Branch(tree, leaf(i % 4 + 1, 4))
    return tree


def _right_spine(levels: int):
    tree = leaf(1, 4)
    for i in range(levels):
        tree = Branch(leaf(i % 4 + 1, 4), tree)
    return tree


def _zigzag(levels: int):
    tree = leaf(1, 4)
    for i in range(levels):
        tree = Branch(tree, leaf(2, 4)) if i % 2 else Branch(leaf(3, 4), tree)
    return tree


@pytest.mark.parametrize("build", [_left_spine, _right_spine, _zigzag])
def test_split_handles_deep_trees(build):
    tree = build(5000)
    rng = Random(17)

    for _ in range(3):
        new_tree, chunk = random_split(lambda _t: leaf(4, 4), tree, rng)
        assert count_nodes(new_tree) == count_nodes(tree) - count_nodes(chunk) + 1
        assert count_nodes(random_child(tree, rng)) <= count_nodes(tree)


def test_deep_tree_split_selects_root_and_bottom_leaf():
    tree = _left_spine(5000)
    total = count_nodes(tree)

    # Only the final (root) draw succeeds past the first node.
    _, chunk = random_split(lambda t: t, tree, SequenceSource([0.0] + [1.0] * (total - 2) + [0.0]))
    assert chunk is tree

    events: list[SplitEvent] = []
    new_tree, chunk = random_split(
        lambda _t: leaf(4, 4), tree, SequenceSource([0.0] + [1.0] * (total - 1)), hooks=[events.append]
    )
    assert chunk == leaf(1, 4)
    assert events[0].path == ("L",) * 5000
    assert events[0].to_record()["depth"] == 5000
    assert new_tree != tree
    assert count_nodes(new_tree) == total


def test_identity_split_of_deep_tree_is_structurally_equal():
    tree = _zigzag(3000)
    new_tree, _ = random_split(lambda t: t, tree, Random(2))

    assert new_tree == tree
    assert hash(new_tree) == hash(tree)
    assert fingerprint_tree(new_tree) == fingerprint_tree(tree)
