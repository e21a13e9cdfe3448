import random

import pytest

from simulations import sorting
from simulations.sorting import SORTED, SORTERS, generate_array


@pytest.mark.parametrize("name", sorted(SORTERS))
@pytest.mark.parametrize("order", sorting.ORDERS)
def test_every_sorter_ends_sorted(name, order):
    arr = generate_array(12, order, random.Random(2))
    steps = SORTERS[name](arr)
    last = steps[-1]
    assert list(last.values) == sorted(arr)
    assert last.highlights == (SORTED,) * 12
    assert last.is_final
    assert last.result.startswith("Sorted with")


def test_input_is_not_mutated():
    arr = [3, 1, 2]
    steps = sorting.bubble_sort(arr)
    assert arr == [3, 1, 2]
    assert steps[0].values == (3, 1, 2)


def test_bubble_sort_counts():
    last = sorting.bubble_sort([3, 2, 1])[-1]
    assert last.swaps == 3
    assert last.comparisons == 3


def test_bubble_sort_stops_early_on_sorted_input():
    last = sorting.bubble_sort([1, 2, 3, 4])[-1]
    assert last.comparisons == 3
    assert last.swaps == 0


def test_swap_steps_record_the_pair():
    steps = sorting.bubble_sort([2, 1])
    swaps = [s for s in steps if s.swap_pair]
    assert swaps[0].swap_pair == (0, 1)
    assert swaps[0].values == (1, 2)


def test_generate_array_orders():
    assert generate_array(5, "sorted") == [1, 2, 3, 4, 5]
    assert generate_array(5, "reversed") == [5, 4, 3, 2, 1]
    nearly = generate_array(20, "nearly", random.Random(0))
    assert sorted(nearly) == list(range(1, 21))
    assert generate_array(0, "random") == []


def test_empty_array():
    steps = sorting.generate({"size": 0}, rng=random.Random(0))
    assert len(steps) == 1
    assert steps[0].result == "Nothing to sort"


def test_generate_array_draws_randomness_only_through_fisher_yates(monkeypatch):
    calls = []

    def recording_shuffle(seq, rng):
        calls.append(list(seq))
        seq.reverse()
        return seq

    monkeypatch.setattr(sorting, "fisher_yates", recording_shuffle)
    # an rng with no methods: any direct draw would raise AttributeError
    rng = object()
    for order in sorting.ORDERS:
        arr = generate_array(10, order, rng)
        assert sorted(arr) == list(range(1, 11))

    assert calls == [list(range(1, 11)), list(range(9))]
    # reversed positions: swap at index 8 only
    assert generate_array(10, "nearly", rng) == [1, 2, 3, 4, 5, 6, 7, 8, 10, 9]
