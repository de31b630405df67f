"""Readers for delimited categorical data.

Each non-blank line is one record: delimiter-separated tokens where the last
token is the class label and the preceding tokens are attribute values,
positionally aligned across all lines. Lines beginning with ``#`` are
treated as comments.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Union

from .models import DataIntegrityError, Dataset, Record

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ","


def _tokens(line: str, delimiter: str) -> list[str]:
    return [token.strip() for token in line.split(delimiter)]


def parse_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> Record:
    """Parse one labeled line into a Record.

    Raises:
        DataIntegrityError: If the line has fewer than two tokens.
    """
    tokens = _tokens(line.strip(), delimiter)
    if len(tokens) < 2:
        raise DataIntegrityError(
            f"Expected at least one attribute and a class label, got {line.strip()!r}"
        )
    return Record(tuple(tokens[:-1]), tokens[-1])


def parse_attributes(text: str, delimiter: str = DEFAULT_DELIMITER) -> Record:
    """Parse an unlabeled instance (attributes only) for ad-hoc prediction."""
    tokens = _tokens(text.strip(), delimiter)
    if not tokens or tokens == [""]:
        raise DataIntegrityError("Instance has no attribute values")
    return Record(tuple(tokens))


def parse_lines(lines: Iterable[str], delimiter: str = DEFAULT_DELIMITER) -> Dataset:
    """Build a Dataset from an iterable of text lines.

    Raises:
        DataIntegrityError: If a line is malformed or its attribute count
            differs from the first record's. The message quotes the line number.
    """
    dataset = Dataset()
    for line_no, line in enumerate(lines, 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            dataset.add(parse_line(stripped, delimiter))
        except DataIntegrityError as e:
            raise DataIntegrityError(f"Line {line_no}: {e}") from e
    return dataset


def read_dataset(
    source: Union[str, Path],
    delimiter: str = DEFAULT_DELIMITER,
) -> Dataset:
    """Read a delimited text file into a Dataset.

    Args:
        source: Path to the data file.
        delimiter: Field separator.

    Returns:
        Dataset with one record per non-blank, non-comment line.

    Raises:
        FileNotFoundError: If the file does not exist.
        DataIntegrityError: If any row is malformed.
    """
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        dataset = parse_lines(f, delimiter)

    logger.debug(
        "Read %d records with %s attributes from %s",
        len(dataset), dataset.num_attributes, path,
    )
    return dataset
