from random import Random

import pytest

from treesplit.stats import chi_squared, expected_histogram, selection_histogram
from treesplit.trees import Branch, leaf


def test_expected_histogram_weights_shared_checksums():
    # Branch(1, 2) and Leaf(3) share checksum 3.
    tree = Branch(Branch(leaf(1, 4), leaf(2, 4)), leaf(3, 4))

    expected = expected_histogram(tree, 500)

    assert expected == {1: 100.0, 2: 100.0, 3: 200.0, 6: 100.0}


def test_selection_histogram_counts_every_draw():
    tree = Branch(leaf(1, 4), leaf(2, 4))

    observed = selection_histogram(tree, 300, Random(2))

    assert sum(observed.values()) == 300
    assert set(observed) <= {1, 2, 3}


def test_selection_histogram_passes_chi_squared():
    tree = Branch(Branch(leaf(1, 4), leaf(2, 4)), Branch(leaf(4, 4), Branch(leaf(4, 4), leaf(4, 4))))
    draws = 18000

    observed = selection_histogram(tree, draws, Random(99))
    expected = expected_histogram(tree, draws)

    # 99.9th percentile of chi-squared with 6 degrees of freedom is about 22.5.
    assert len(expected) - 1 == 6
    assert chi_squared(observed, expected) < 22.5


def test_chi_squared_of_exact_match_is_zero():
    assert chi_squared({1: 10, 2: 20}, {1: 10.0, 2: 20.0}) == 0.0
    assert chi_squared({1: 12}, {1: 10.0, 2: 2.0}) == pytest.approx(0.4 + 2.0)


def test_chi_squared_rejects_unexpected_buckets():
    with pytest.raises(ValueError, match="zero expectation"):
        chi_squared({7: 1}, {1: 1.0})


def test_selection_histogram_rejects_non_positive_draws():
    with pytest.raises(ValueError):
        selection_histogram(leaf(1, 1), 0)
