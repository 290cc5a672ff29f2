import random

import pytest

from parlab.scan import exclusive_scan, exclusive_scan_tree, find_repeats


def test_exclusive_scan_of_ones_counts_positions():
    assert exclusive_scan([1] * 8) == list(range(8))


def test_exclusive_scan_empty():
    assert exclusive_scan([]) == []


def test_exclusive_scan_starts_at_zero_and_differences_match():
    values = [3, 0, 7, 2, 9]
    result = exclusive_scan(values)
    assert result[0] == 0
    assert len(result) == len(values)
    for i in range(1, len(values)):
        assert result[i] - result[i - 1] == values[i - 1]


@pytest.mark.parametrize("n", [1, 2, 4, 8, 16, 64])
def test_tree_scan_matches_linear(n):
    rng = random.Random(n)
    values = [rng.randrange(10) for _ in range(n)]
    assert exclusive_scan_tree(values) == exclusive_scan(values)


def test_tree_scan_does_not_modify_input():
    values = [1, 2, 3, 4]
    exclusive_scan_tree(values)
    assert values == [1, 2, 3, 4]


@pytest.mark.parametrize("n", [3, 5, 6, 12])
def test_tree_scan_rejects_non_power_of_two(n):
    with pytest.raises(ValueError):
        exclusive_scan_tree([1] * n)


def test_find_repeats():
    assert find_repeats([1, 1, 2, 2, 2, 3]) == [0, 2, 3]


def test_find_repeats_all_ones():
    assert find_repeats([1] * 6) == list(range(5))


def test_find_repeats_no_repeats_and_short_inputs():
    assert find_repeats([1, 2, 1, 2]) == []
    assert find_repeats([5]) == []
    assert find_repeats([]) == []


def test_find_repeats_indices_point_at_equal_pairs():
    rng = random.Random(7)
    values = [rng.randrange(3) for _ in range(50)]
    indices = find_repeats(values)
    assert all(values[i] == values[i + 1] for i in indices)
    assert len(indices) == sum(a == b for a, b in zip(values, values[1:]))