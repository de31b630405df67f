"""Data models for categorical datasets."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Optional


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DataIntegrityError(ValueError):
    """Raised when records are malformed or disagree on attribute count."""


class NotTrainedError(RuntimeError):
    """Raised when a classifier is queried before it has been trained."""


class EmptyDatasetError(ValueError):
    """Raised when an operation needs at least one record but got none."""


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

@dataclass
class Record:
    """A single observation: ordered categorical attributes plus labels.

    ``predicted`` is write-once. It is filled in by the classifier during
    prediction and may not be overwritten with a different label.
    """

    attributes: tuple[str, ...]
    actual: Optional[str] = None
    _predicted: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.attributes = tuple(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def __str__(self) -> str:
        return " ".join([*self.attributes, str(self.actual)])

    @property
    def predicted(self) -> Optional[str]:
        return self._predicted

    @predicted.setter
    def predicted(self, label: str) -> None:
        if self._predicted is not None and self._predicted != label:
            raise ValueError(
                f"Record already predicted as {self._predicted!r}; "
                f"refusing to overwrite with {label!r}"
            )
        self._predicted = label

    @property
    def is_correct(self) -> bool:
        """Whether a prediction exists and matches the actual label."""
        return self._predicted is not None and self._predicted == self.actual

    def unpredicted_copy(self) -> "Record":
        """Copy of this record with no prediction recorded."""
        return Record(self.attributes, self.actual)

    def to_dict(self) -> dict:
        return {
            "attributes": list(self.attributes),
            "actual": self.actual,
            "predicted": self._predicted,
        }


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

class Dataset:
    """An ordered collection of records sharing one attribute schema.

    The attribute count is fixed by the first record and checked on every
    insertion, so a dataset never holds rows of mixed width.

    Args:
        records: Optional initial records, added in order.
    """

    def __init__(self, records: Optional[Iterable[Record]] = None) -> None:
        self._records: list[Record] = []
        self._num_attributes: Optional[int] = None
        if records is not None:
            for record in records:
                self.add(record)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> "Dataset":
        """Build a dataset from rows whose last element is the class label."""
        dataset = cls()
        for row in rows:
            if len(row) < 2:
                raise DataIntegrityError(
                    f"Row {list(row)!r} needs at least one attribute and a label"
                )
            dataset.add(Record(tuple(row[:-1]), row[-1]))
        return dataset

    @property
    def num_attributes(self) -> Optional[int]:
        """Attribute count shared by every record (``None`` until first add)."""
        return self._num_attributes

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __getitem__(self, index: int) -> Record:
        return self._records[index]

    def __repr__(self) -> str:
        return f"Dataset(size={len(self)}, num_attributes={self._num_attributes})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(r) for r in self._records) + "]"

    def add(self, record: Record) -> None:
        """Append a record, enforcing a consistent attribute count.

        Raises:
            DataIntegrityError: If the record's width differs from the dataset's.
        """
        if self._num_attributes is None:
            self._num_attributes = len(record)
        elif len(record) != self._num_attributes:
            raise DataIntegrityError(
                f"Record has {len(record)} attributes, dataset expects "
                f"{self._num_attributes}: {record}"
            )
        self._records.append(record)

    def add_all(self, other: "Dataset") -> None:
        """Append every record of ``other`` in order. ``other`` is not modified."""
        for record in other:
            self.add(record)

    def remove(self, index: int) -> Record:
        """Remove and return the record at ``index``.

        Raises:
            IndexError: If ``index`` is not in ``[0, size)``.
        """
        if not 0 <= index < len(self._records):
            raise IndexError(
                f"Index {index} out of range for dataset of size {len(self._records)}"
            )
        return self._records.pop(index)

    def copy(self) -> "Dataset":
        """Shallow copy: a new list holding the same record objects."""
        clone = Dataset()
        clone._records = list(self._records)
        clone._num_attributes = self._num_attributes
        return clone

    def labels(self) -> list[Optional[str]]:
        """Actual labels in record order."""
        return [r.actual for r in self._records]

    def class_distribution(self) -> Counter[str]:
        return Counter(r.actual for r in self._records if r.actual is not None)
