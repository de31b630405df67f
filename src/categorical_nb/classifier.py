"""Categorical Naive Bayes with Laplace smoothing.

Learns class priors and class-conditional likelihoods from purely
categorical (string-valued) attributes and predicts the most probable class
for new records, scoring in the log domain under the naive
conditional-independence assumption.

Lifecycle::

    nb = CategoricalNaiveBayes()
    nb.build_classifier(training)   # accumulate counts
    nb.train()                      # counts -> log probabilities
    nb.predict(record)              # query

Attribute values are keyed by ``(position, value)`` so that the same literal
appearing under two different attributes never shares statistics.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Union

from .models import (
    DataIntegrityError,
    Dataset,
    EmptyDatasetError,
    NotTrainedError,
    Record,
)

logger = logging.getLogger(__name__)

AttributeKey = tuple[int, str]


class CategoricalNaiveBayes:
    """Naive Bayes classifier over categorical attributes.

    Every instance owns its own counts and probability tables; two
    classifiers never share state.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._observations = 0
        self._num_attributes = 0
        self._distinct_values: list[set[str]] = []
        self._attribute_counts: dict[AttributeKey, int] = {}
        # Insertion-ordered: iteration order is the first-seen class order.
        self._class_counts: dict[str, int] = {}
        self._joint_counts: dict[AttributeKey, dict[str, int]] = {}
        self._class_log_prior: dict[str, float] = {}
        self._conditional_log_prob: dict[AttributeKey, dict[str, float]] = {}
        self._is_trained = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def is_trained(self) -> bool:
        """Whether probability tables have been computed."""
        return self._is_trained

    @property
    def classes(self) -> list[str]:
        """Known classes in first-seen order."""
        return list(self._class_counts)

    @property
    def observations(self) -> int:
        return self._observations

    @property
    def num_attributes(self) -> int:
        return self._num_attributes

    @property
    def class_counts(self) -> dict[str, int]:
        return dict(self._class_counts)

    @property
    def class_log_prior(self) -> dict[str, float]:
        return dict(self._class_log_prior)

    @property
    def conditional_log_prob(self) -> dict[AttributeKey, dict[str, float]]:
        return {key: dict(probs) for key, probs in self._conditional_log_prob.items()}

    def domain_size(self, position: int) -> int:
        """Number of distinct values observed at an attribute position."""
        return len(self._distinct_values[position])

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def build_classifier(self, training: Dataset) -> "CategoricalNaiveBayes":
        """Accumulate frequency counts from a training dataset.

        Any previous counts and probability tables are discarded.

        Args:
            training: Labeled training records.

        Returns:
            Self (for method chaining).

        Raises:
            EmptyDatasetError: If ``training`` has no records.
            DataIntegrityError: If a record has no actual label.
        """
        if len(training) == 0:
            raise EmptyDatasetError("Cannot build a classifier from an empty dataset")

        self._reset()
        self._num_attributes = training.num_attributes or 0
        self._distinct_values = [set() for _ in range(self._num_attributes)]

        for record in training:
            label = record.actual
            if label is None:
                raise DataIntegrityError(f"Training record has no class label: {record}")

            self._observations += 1
            self._class_counts[label] = self._class_counts.get(label, 0) + 1

            for position, value in enumerate(record.attributes):
                key = (position, value)
                self._attribute_counts[key] = self._attribute_counts.get(key, 0) + 1
                self._distinct_values[position].add(value)
                by_class = self._joint_counts.setdefault(key, {})
                by_class[label] = by_class.get(label, 0) + 1

        logger.debug(
            "Built counts: %d observations, %d classes, %d attributes, %d attribute values",
            self._observations,
            len(self._class_counts),
            self._num_attributes,
            len(self._joint_counts),
        )
        return self

    def train(self) -> "CategoricalNaiveBayes":
        """Compute log priors and Laplace-smoothed log likelihoods from counts.

        ``P(v | c) = (count(v, c) + 1) / (count(c) + |values at v's position|)``

        Tables are rebuilt from scratch on every call, so repeated calls over
        the same counts yield identical tables.

        Returns:
            Self (for method chaining).

        Raises:
            NotTrainedError: If ``build_classifier`` has not been called.
        """
        if self._observations == 0:
            raise NotTrainedError("No counts to train on. Call build_classifier() first.")

        self._class_log_prior = {
            cls: math.log(count / self._observations)
            for cls, count in self._class_counts.items()
        }

        self._conditional_log_prob = {}
        for key, by_class in self._joint_counts.items():
            position, _ = key
            domain = len(self._distinct_values[position])
            self._conditional_log_prob[key] = {
                cls: math.log((by_class.get(cls, 0) + 1) / (class_count + domain))
                for cls, class_count in self._class_counts.items()
            }

        self._is_trained = True
        return self

    def fit(self, training: Dataset) -> "CategoricalNaiveBayes":
        """Build counts and train in one step."""
        return self.build_classifier(training).train()

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def _require_trained(self) -> None:
        if not self._is_trained:
            raise NotTrainedError("Classifier not trained. Call build_classifier() and train() first.")

    def log_scores(self, record: Union[Record, Sequence[str]]) -> dict[str, float]:
        """Unnormalized log posterior score for every class.

        Attribute values not seen during training contribute nothing.
        """
        self._require_trained()
        attributes = record.attributes if isinstance(record, Record) else tuple(record)

        scores: dict[str, float] = {}
        for cls, prior in self._class_log_prior.items():
            score = prior
            for position, value in enumerate(attributes):
                likelihoods = self._conditional_log_prob.get((position, value))
                if likelihoods is None:
                    continue
                score += likelihoods[cls]
            scores[cls] = score
        return scores

    def predict(self, record: Union[Record, Sequence[str]]) -> str:
        """Predict the most probable class of a record.

        Ties go to the class seen first during training. When given a
        ``Record``, the label is also written to ``record.predicted``.

        Raises:
            NotTrainedError: If the classifier has not been trained.
        """
        scores = self.log_scores(record)

        best = next(iter(scores))
        best_score = scores[best]
        for cls, score in scores.items():
            if score > best_score:
                best, best_score = cls, score

        if isinstance(record, Record):
            record.predicted = best
        return best

    def predict_proba(self, record: Union[Record, Sequence[str]]) -> dict[str, float]:
        """Class probabilities for a record, normalized with log-sum-exp."""
        log_scores = self.log_scores(record)
        max_score = max(log_scores.values())
        exp_scores = {cls: math.exp(s - max_score) for cls, s in log_scores.items()}
        total = sum(exp_scores.values())
        return {cls: score / total for cls, score in exp_scores.items()}

    def get_predictions(self, testing: Dataset) -> list[str]:
        """Predict every record of a dataset, in order."""
        self._require_trained()
        return [self.predict(record) for record in testing]

    def calculate_accuracy(self, testing: Dataset) -> float:
        """Percentage of testing records whose prediction matches the label."""
        from .evaluation import calculate_accuracy

        return calculate_accuracy(self, testing)
