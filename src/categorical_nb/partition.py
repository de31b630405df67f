"""Training/testing partitioning for categorical datasets.

Two strategies are provided:

- Holdout: a single random split at a given training ratio.
- k-fold cross-validation: ``k`` disjoint folds, each used once as the
  testing set while the remaining folds form the training set.

Both take an explicit random stream (a ``random.Random`` or an int seed) so
that splits are reproducible, and neither mutates the caller's dataset.
Sampling shuffles positions over the input rather than removing records from
a working copy.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Union

from .models import Dataset

logger = logging.getLogger(__name__)

RandomLike = Union[random.Random, int, None]


def resolve_rng(rng: RandomLike = None) -> random.Random:
    """Return a ``random.Random`` from a generator, a seed, or ``None``."""
    if isinstance(rng, random.Random):
        return rng
    return random.Random(rng)


def _draw_order(size: int, rng: random.Random) -> list[int]:
    """Uniformly random permutation of ``range(size)``."""
    order = list(range(size))
    rng.shuffle(order)
    return order


# ---------------------------------------------------------------------------
# Holdout
# ---------------------------------------------------------------------------

def train_test_split(
    dataset: Dataset,
    ratio: float,
    rng: RandomLike = None,
) -> tuple[Dataset, Dataset]:
    """Split a dataset into a training and a testing set.

    The training set receives ``floor(len(dataset) * ratio)`` records in
    random draw order; the testing set receives the rest, also in draw order.

    Args:
        dataset: Source dataset (left unmodified).
        ratio: Fraction of records reserved for training, in ``[0, 1]``.
        rng: Random generator or seed.

    Returns:
        Tuple of (training, testing) datasets.

    Raises:
        ValueError: If ``ratio`` is outside ``[0, 1]``.
    """
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"ratio must be in [0, 1], got {ratio}")

    generator = resolve_rng(rng)
    size = len(dataset)
    train_size = math.floor(size * ratio)
    order = _draw_order(size, generator)

    training = Dataset(dataset[i] for i in order[:train_size])
    testing = Dataset(dataset[i] for i in order[train_size:])

    logger.debug(
        "Holdout split: %d training, %d testing (ratio=%s)",
        len(training), len(testing), ratio,
    )
    return training, testing


# ---------------------------------------------------------------------------
# k-fold cross-validation
# ---------------------------------------------------------------------------

def make_folds(
    dataset: Dataset,
    k: int,
    rng: RandomLike = None,
) -> list[Dataset]:
    """Draw ``k`` disjoint folds of ``floor(len(dataset) / k)`` records each.

    When the dataset size is not divisible by ``k``, the leftover records
    are not assigned to any fold.

    Raises:
        ValueError: If ``k`` is not in ``[2, len(dataset)]``.
    """
    size = len(dataset)
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")
    if k > size:
        raise ValueError(f"k ({k}) cannot exceed dataset size ({size})")

    generator = resolve_rng(rng)
    fold_size = size // k
    order = _draw_order(size, generator)

    folds = [
        Dataset(dataset[i] for i in order[f * fold_size : (f + 1) * fold_size])
        for f in range(k)
    ]

    dropped = size - fold_size * k
    if dropped:
        logger.warning(
            "%d of %d records not assigned to any fold (size not divisible by k=%d)",
            dropped, size, k,
        )
    return folds


def cross_validation_split(
    dataset: Dataset,
    k: int,
    rng: RandomLike = None,
) -> list[tuple[Dataset, Dataset]]:
    """Generate ``k`` (training, testing) pairs for cross-validation.

    Pair ``i`` tests on fold ``i`` and trains on every other fold,
    concatenated in fold-index order. Each retained record is tested exactly
    once and used for training in ``k - 1`` pairs.

    Args:
        dataset: Source dataset (left unmodified).
        k: Number of folds, ``2 <= k <= len(dataset)``.
        rng: Random generator or seed.

    Returns:
        List of (training, testing) tuples, one per fold.
    """
    folds = make_folds(dataset, k, rng)

    pairs: list[tuple[Dataset, Dataset]] = []
    for i, test in enumerate(folds):
        train = Dataset()
        for j, fold in enumerate(folds):
            if j != i:
                train.add_all(fold)
        pairs.append((train, test))

    logger.debug("Cross-validation split: %d folds of %d records", k, len(folds[0]))
    return pairs


def dropped_count(size: int, k: int) -> int:
    """Number of records a ``k``-fold split leaves unassigned."""
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    return size % k
