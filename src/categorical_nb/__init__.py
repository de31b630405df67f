"""Categorical Naive Bayes -- Laplace-smoothed classification of categorical data."""

__version__ = "0.1.0"

from .classifier import CategoricalNaiveBayes
from .config import Settings, load_settings
from .evaluation import (
    ClassificationMetrics,
    CrossValidationResult,
    HoldoutResult,
    calculate_accuracy,
    compute_metrics,
    cross_validate,
    holdout_evaluate,
)
from .models import (
    DataIntegrityError,
    Dataset,
    EmptyDatasetError,
    NotTrainedError,
    Record,
)
from .parsers import parse_attributes, parse_line, parse_lines, read_dataset
from .partition import cross_validation_split, make_folds, train_test_split

__all__ = [
    # Core
    "CategoricalNaiveBayes",
    "Dataset",
    "Record",
    # Errors
    "DataIntegrityError",
    "EmptyDatasetError",
    "NotTrainedError",
    # Partitioning
    "train_test_split",
    "cross_validation_split",
    "make_folds",
    # Evaluation
    "calculate_accuracy",
    "compute_metrics",
    "holdout_evaluate",
    "cross_validate",
    "ClassificationMetrics",
    "HoldoutResult",
    "CrossValidationResult",
    # Input
    "read_dataset",
    "parse_line",
    "parse_lines",
    "parse_attributes",
    # Configuration
    "Settings",
    "load_settings",
]
