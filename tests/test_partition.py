"""Tests for holdout and k-fold partitioning."""

from __future__ import annotations

import logging
import math
import random
from collections import Counter

import pytest

from categorical_nb.models import Dataset, Record
from categorical_nb.partition import (
    cross_validation_split,
    dropped_count,
    make_folds,
    resolve_rng,
    train_test_split,
)


def _ids(*datasets: Dataset) -> Counter[int]:
    """Multiset of record identities across datasets."""
    return Counter(id(r) for d in datasets for r in d)


# ---------------------------------------------------------------------------
# resolve_rng
# ---------------------------------------------------------------------------


class TestResolveRng:
    def test_passes_generator_through(self) -> None:
        rng = random.Random(5)
        assert resolve_rng(rng) is rng

    def test_seed_is_reproducible(self) -> None:
        assert resolve_rng(3).random() == resolve_rng(3).random()

    def test_none_gives_generator(self) -> None:
        assert isinstance(resolve_rng(None), random.Random)


# ---------------------------------------------------------------------------
# Holdout split
# ---------------------------------------------------------------------------


class TestTrainTestSplit:
    """Tests for train_test_split."""

    @pytest.mark.parametrize("ratio", [0.0, 0.25, 0.5, 0.7, 0.99, 1.0])
    def test_sizes(self, weather: Dataset, ratio: float) -> None:
        train, test = train_test_split(weather, ratio, rng=1)
        assert len(train) == math.floor(len(weather) * ratio)
        assert len(train) + len(test) == len(weather)

    def test_every_record_in_exactly_one_side(self, numbered_dataset: Dataset) -> None:
        train, test = train_test_split(numbered_dataset, 0.5, rng=7)
        assert _ids(train, test) == _ids(numbered_dataset)
        assert not set(map(id, train)) & set(map(id, test))

    def test_duplicate_records_kept(self) -> None:
        record = Record(("a",), "x")
        dataset = Dataset([record, record, Record(("b",), "y")])
        train, test = train_test_split(dataset, 0.5, rng=0)
        assert _ids(train, test) == _ids(dataset)

    def test_original_not_mutated(self, numbered_dataset: Dataset) -> None:
        before = list(numbered_dataset)
        train_test_split(numbered_dataset, 0.6, rng=2)
        assert list(numbered_dataset) == before
        assert len(numbered_dataset) == 12

    def test_same_seed_same_split(self, numbered_dataset: Dataset) -> None:
        a_train, a_test = train_test_split(numbered_dataset, 0.5, rng=42)
        b_train, b_test = train_test_split(numbered_dataset, 0.5, rng=42)
        assert [id(r) for r in a_train] == [id(r) for r in b_train]
        assert [id(r) for r in a_test] == [id(r) for r in b_test]

    def test_accepts_random_instance(self, numbered_dataset: Dataset) -> None:
        a, _ = train_test_split(numbered_dataset, 0.5, rng=random.Random(9))
        b, _ = train_test_split(numbered_dataset, 0.5, rng=9)
        assert [id(r) for r in a] == [id(r) for r in b]

    def test_draw_order_is_random(self, numbered_dataset: Dataset) -> None:
        orders = {
            tuple(r.attributes[0] for r in train_test_split(numbered_dataset, 1.0, rng=s)[0])
            for s in range(5)
        }
        assert len(orders) > 1

    @pytest.mark.parametrize("ratio", [-0.1, 1.01, 2])
    def test_invalid_ratio(self, weather: Dataset, ratio: float) -> None:
        with pytest.raises(ValueError, match="ratio"):
            train_test_split(weather, ratio)

    def test_empty_dataset(self) -> None:
        train, test = train_test_split(Dataset(), 0.5, rng=0)
        assert len(train) == 0
        assert len(test) == 0

    def test_outputs_keep_schema(self, weather: Dataset) -> None:
        train, test = train_test_split(weather, 0.5, rng=0)
        assert train.num_attributes == 4
        assert test.num_attributes == 4


# ---------------------------------------------------------------------------
# k-fold split
# ---------------------------------------------------------------------------


class TestCrossValidationSplit:
    """Tests for cross_validation_split and make_folds."""

    @pytest.mark.parametrize("k", [2, 3, 4, 6, 12])
    def test_each_record_tested_once_trained_k_minus_one(
        self, numbered_dataset: Dataset, k: int
    ) -> None:
        pairs = cross_validation_split(numbered_dataset, k, rng=11)
        assert len(pairs) == k

        tested = _ids(*(test for _, test in pairs))
        trained = _ids(*(train for train, _ in pairs))
        for record in numbered_dataset:
            assert tested[id(record)] == 1
            assert trained[id(record)] == k - 1

    def test_folds_disjoint(self, numbered_dataset: Dataset) -> None:
        folds = make_folds(numbered_dataset, 4, rng=3)
        seen: set[int] = set()
        for fold in folds:
            ids = {id(r) for r in fold}
            assert not ids & seen
            seen |= ids
        assert len(seen) == 12

    def test_pair_sizes(self, numbered_dataset: Dataset) -> None:
        for train, test in cross_validation_split(numbered_dataset, 3, rng=0):
            assert len(test) == 4
            assert len(train) == 8

    def test_training_is_other_folds_in_order(self, numbered_dataset: Dataset) -> None:
        folds = make_folds(numbered_dataset, 3, rng=5)
        pairs = cross_validation_split(numbered_dataset, 3, rng=5)
        train, test = pairs[1]
        assert list(test) == list(folds[1])
        assert list(train) == list(folds[0]) + list(folds[2])

    def test_remainder_dropped(
        self, numbered_dataset: Dataset, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="categorical_nb.partition"):
            pairs = cross_validation_split(numbered_dataset, 5, rng=1)
        assert all(len(test) == 2 for _, test in pairs)
        assert all(len(train) == 8 for train, _ in pairs)
        retained = _ids(*(test for _, test in pairs))
        assert sum(retained.values()) == 10
        assert "2 of 12 records not assigned" in caplog.text

    def test_dropped_count(self) -> None:
        assert dropped_count(12, 5) == 2
        assert dropped_count(12, 4) == 0

    @pytest.mark.parametrize("k", [-1, 0])
    def test_dropped_count_rejects_non_positive_k(self, k: int) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            dropped_count(12, k)

    def test_original_not_mutated(self, numbered_dataset: Dataset) -> None:
        before = list(numbered_dataset)
        cross_validation_split(numbered_dataset, 4, rng=0)
        assert list(numbered_dataset) == before

    def test_same_seed_same_folds(self, weather: Dataset) -> None:
        a = make_folds(weather, 7, rng=99)
        b = make_folds(weather, 7, rng=99)
        assert [[id(r) for r in f] for f in a] == [[id(r) for r in f] for f in b]

    @pytest.mark.parametrize("k", [-1, 0, 1])
    def test_k_too_small(self, weather: Dataset, k: int) -> None:
        with pytest.raises(ValueError, match="at least 2"):
            cross_validation_split(weather, k)

    def test_k_larger_than_dataset(self, weather: Dataset) -> None:
        with pytest.raises(ValueError, match="cannot exceed"):
            cross_validation_split(weather, 15)

    def test_leave_one_out(self, weather: Dataset) -> None:
        pairs = cross_validation_split(weather, len(weather), rng=0)
        assert all(len(test) == 1 for _, test in pairs)
        assert all(len(train) == len(weather) - 1 for train, _ in pairs)
