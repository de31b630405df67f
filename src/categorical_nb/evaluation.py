"""Evaluation of a trained classifier against labeled data.

Accuracy is reported as a percentage in ``[0, 100]``. Higher-level helpers
run the full holdout and k-fold cross-validation experiments, training a
fresh classifier for every split.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from .classifier import CategoricalNaiveBayes
from .models import DataIntegrityError, Dataset, EmptyDatasetError
from .partition import RandomLike, cross_validation_split, dropped_count, train_test_split

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Accuracy
# ---------------------------------------------------------------------------

def calculate_accuracy(classifier: CategoricalNaiveBayes, testing: Dataset) -> float:
    """Predict every testing record and return the percentage predicted correctly.

    Predictions are written to the records, and a record's prediction is
    write-once. To score the same testing set with another classifier, pass
    ``Dataset(r.unpredicted_copy() for r in testing)``.

    Args:
        classifier: A trained classifier.
        testing: Labeled testing records.

    Returns:
        Accuracy as a percentage in ``[0, 100]``.

    Raises:
        EmptyDatasetError: If ``testing`` has no records.
        DataIntegrityError: If a testing record has no actual label.
        NotTrainedError: If the classifier has not been trained.
    """
    if len(testing) == 0:
        raise EmptyDatasetError("Cannot compute accuracy over an empty testing set")
    for record in testing:
        if record.actual is None:
            raise DataIntegrityError(f"Testing record has no class label: {record}")

    correct = 0
    for record in testing:
        if classifier.predict(record) == record.actual:
            correct += 1
    return 100.0 * correct / len(testing)


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

@dataclass
class ClassificationMetrics:
    """Evaluation metrics for a set of predictions.

    Attributes:
        accuracy: Percentage of exact matches, in ``[0, 100]``.
        per_class: Per-class precision, recall and F1 (fractions).
        macro_precision: Unweighted mean precision across classes.
        macro_recall: Unweighted mean recall across classes.
        macro_f1: Unweighted mean F1 across classes.
        confusion_matrix: Nested dict ``{true: {predicted: count}}``.
        support: Per-class counts in the true labels.
    """

    accuracy: float = 0.0
    per_class: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 2),
            "macro_precision": round(self.macro_precision, 4),
            "macro_recall": round(self.macro_recall, 4),
            "macro_f1": round(self.macro_f1, 4),
            "per_class": {
                cls: {k: round(v, 4) for k, v in metrics.items()}
                for cls, metrics in self.per_class.items()
            },
            "confusion_matrix": self.confusion_matrix,
            "support": self.support,
        }


def compute_metrics(y_true: list[str], y_pred: list[str]) -> ClassificationMetrics:
    """Compute accuracy, per-class scores and a confusion matrix.

    Raises:
        ValueError: If the label lists differ in length.
        EmptyDatasetError: If there are no labels.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")
    if not y_true:
        raise EmptyDatasetError("Cannot compute metrics without any labels")

    classes = sorted(set(y_true) | set(y_pred))

    cm: dict[str, dict[str, int]] = {c: {c2: 0 for c2 in classes} for c in classes}
    for true, pred in zip(y_true, y_pred):
        cm[true][pred] += 1

    correct = sum(1 for t, p in zip(y_true, y_pred) if t == p)
    accuracy = 100.0 * correct / len(y_true)

    per_class: dict[str, dict[str, float]] = {}
    for cls in classes:
        tp = cm[cls][cls]
        fp = sum(cm[other][cls] for other in classes if other != cls)
        fn = sum(cm[cls][other] for other in classes if other != cls)

        precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
        recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
        f1 = (
            2 * precision * recall / (precision + recall)
            if (precision + recall) > 0
            else 0.0
        )
        per_class[cls] = {"precision": precision, "recall": recall, "f1": f1}

    n_classes = len(classes)
    return ClassificationMetrics(
        accuracy=accuracy,
        per_class=per_class,
        macro_precision=sum(m["precision"] for m in per_class.values()) / n_classes,
        macro_recall=sum(m["recall"] for m in per_class.values()) / n_classes,
        macro_f1=sum(m["f1"] for m in per_class.values()) / n_classes,
        confusion_matrix=cm,
        support=dict(Counter(y_true)),
    )


# ---------------------------------------------------------------------------
# Experiments
# ---------------------------------------------------------------------------

@dataclass
class HoldoutResult:
    """Outcome of a single holdout experiment."""

    accuracy: float
    train_size: int
    test_size: int
    metrics: ClassificationMetrics

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 2),
            "train_size": self.train_size,
            "test_size": self.test_size,
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class CrossValidationResult:
    """Outcome of a k-fold cross-validation experiment."""

    fold_accuracies: list[float] = field(default_factory=list)
    dropped: int = 0

    @property
    def k(self) -> int:
        return len(self.fold_accuracies)

    @property
    def mean_accuracy(self) -> float:
        if not self.fold_accuracies:
            return 0.0
        return sum(self.fold_accuracies) / len(self.fold_accuracies)

    def to_dict(self) -> dict:
        return {
            "k": self.k,
            "fold_accuracies": [round(a, 2) for a in self.fold_accuracies],
            "mean_accuracy": round(self.mean_accuracy, 2),
            "dropped": self.dropped,
        }


def _detached(dataset: Dataset) -> Dataset:
    # Predictions are write-once, so experiments predict on copies and
    # leave the caller's records untouched.
    return Dataset(record.unpredicted_copy() for record in dataset)


def holdout_evaluate(
    dataset: Dataset,
    ratio: float,
    rng: RandomLike = None,
) -> HoldoutResult:
    """Split once, train a fresh classifier and score it on the held-out part.

    Raises:
        ValueError: If ``ratio`` is outside ``[0, 1]``.
        EmptyDatasetError: If either side of the split ends up empty.
        DataIntegrityError: If a record has no class label.
    """
    training, testing = train_test_split(_detached(dataset), ratio, rng)
    classifier = CategoricalNaiveBayes().fit(training)
    accuracy = calculate_accuracy(classifier, testing)
    metrics = compute_metrics(testing.labels(), [r.predicted for r in testing])

    logger.info("Holdout accuracy %.2f%% (%d train / %d test)", accuracy, len(training), len(testing))
    return HoldoutResult(
        accuracy=accuracy,
        train_size=len(training),
        test_size=len(testing),
        metrics=metrics,
    )


def cross_validate(
    dataset: Dataset,
    k: int,
    rng: RandomLike = None,
) -> CrossValidationResult:
    """Run k-fold cross-validation with a fresh classifier per fold.

    Args:
        dataset: Labeled dataset (left unmodified).
        k: Number of folds.
        rng: Random generator or seed.

    Returns:
        CrossValidationResult with one accuracy per fold.

    Raises:
        ValueError: If ``k`` is not in ``[2, len(dataset)]``.
        DataIntegrityError: If a record has no class label.
    """
    pairs = cross_validation_split(_detached(dataset), k, rng)
    result = CrossValidationResult(dropped=dropped_count(len(dataset), k))
    for fold, (training, testing) in enumerate(pairs):
        classifier = CategoricalNaiveBayes().fit(training)
        accuracy = calculate_accuracy(classifier, testing)
        logger.debug("Fold %d accuracy %.2f%%", fold, accuracy)
        result.fold_accuracies.append(accuracy)

    logger.info("Cross-validation mean accuracy %.2f%% over %d folds", result.mean_accuracy, k)
    return result
