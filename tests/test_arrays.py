"""Tests for source array generation."""

import random
from collections import Counter

import pytest

from arrays import Distribution, generate_array, is_sorted, parse_distribution
from errors import ConfigOutOfRange

PERMUTATIONS = [d for d in Distribution if d is not Distribution.FEW_UNIQUE]


class TestDistributions:
    @pytest.mark.parametrize("dist", PERMUTATIONS)
    @pytest.mark.parametrize("count", [10, 11, 57, 200])
    def test_permutation_of_one_to_count(self, dist, count):
        values = generate_array(count, dist, rng=random.Random(3))
        assert sorted(values) == list(range(1, count + 1))

    def test_ascending(self):
        assert generate_array(10, "ascending") == list(range(1, 11))

    def test_descending(self):
        assert generate_array(10, "descending") == list(range(10, 0, -1))

    def test_split_ascending(self):
        assert generate_array(10, "split-ascending") == [6, 7, 8, 9, 10, 1, 2, 3, 4, 5]

    def test_split_descending(self):
        assert generate_array(10, "split-descending") == [10, 9, 8, 7, 6, 5, 4, 3, 2, 1]

    def test_split_ascending_odd_count(self):
        assert generate_array(11, "split-ascending") == [6, 7, 8, 9, 10, 11, 1, 2, 3, 4, 5]

    def test_nearly_sorted_is_close_to_sorted(self):
        values = generate_array(100, "nearly-sorted", rng=random.Random(8))
        misplaced = sum(1 for i, v in enumerate(values) if v != i + 1)
        # 10 swaps move at most 20 positions
        assert misplaced <= 20

    @pytest.mark.parametrize("count,unique", [(10, 2), (50, 5), (100, 10), (200, 10)])
    def test_few_unique_value_range(self, count, unique):
        values = generate_array(count, "few-unique", rng=random.Random(4))
        assert len(values) == count
        assert set(values) <= set(range(1, unique + 1))

    def test_few_unique_repeats(self):
        values = generate_array(100, "few-unique", rng=random.Random(4))
        assert max(Counter(values).values()) > 1

    def test_values_are_positive_ints(self):
        for dist in Distribution:
            assert all(isinstance(v, int) and v > 0 for v in generate_array(30, dist, seed=1))


class TestReproducibility:
    @pytest.mark.parametrize("dist", ["random", "nearly-sorted", "few-unique"])
    def test_same_seed_same_array(self, dist):
        assert generate_array(40, dist, seed=11) == generate_array(40, dist, seed=11)

    def test_injected_rng_wins_over_seed(self):
        a = generate_array(40, rng=random.Random(2), seed=99)
        b = generate_array(40, rng=random.Random(2), seed=5)
        assert a == b

    def test_random_actually_shuffles(self):
        assert generate_array(50, seed=1) != list(range(1, 51))


class TestParsing:
    @pytest.mark.parametrize("name", ["random", "RANDOM", " Random "])
    def test_case_and_whitespace_insensitive(self, name):
        assert parse_distribution(name) is Distribution.RANDOM

    def test_enum_passthrough(self):
        assert parse_distribution(Distribution.FEW_UNIQUE) is Distribution.FEW_UNIQUE

    def test_unknown_rejected(self):
        with pytest.raises(ConfigOutOfRange):
            parse_distribution("bell-curve")

    def test_generate_rejects_unknown(self):
        with pytest.raises(ValueError):
            generate_array(10, "bell-curve")

    def test_labels(self):
        assert Distribution.SPLIT_ASCENDING.label == "Split Ascending"
        assert Distribution.NEARLY_SORTED.label == "Nearly Sorted"


class TestIsSorted:
    @pytest.mark.parametrize("values,expected", [
        ([], True),
        ([1], True),
        ([1, 1, 2], True),
        ([2, 1], False),
        ([1, 3, 2, 4], False),
    ])
    def test_is_sorted(self, values, expected):
        assert is_sorted(values) is expected
