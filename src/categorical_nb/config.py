"""Runtime settings loaded from the environment.

Values come from process environment variables, optionally seeded from a
``.env`` file in the working directory:

- ``CATEGORICAL_NB_SEED``: integer seed for partitioning (unset = unseeded)
- ``CATEGORICAL_NB_RATIO``: default holdout training ratio
- ``CATEGORICAL_NB_FOLDS``: default number of cross-validation folds
- ``CATEGORICAL_NB_DELIMITER``: field delimiter for data files
- ``CATEGORICAL_NB_LOG_LEVEL``: logging level name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "CATEGORICAL_NB_"


@dataclass
class Settings:
    """Defaults for the command-line interface and experiments."""

    seed: Optional[int] = None
    ratio: float = 0.7
    folds: int = 7
    delimiter: str = ","
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not 0.0 <= self.ratio <= 1.0:
            raise ValueError(f"{ENV_PREFIX}RATIO must be in [0, 1], got {self.ratio}")
        if self.folds < 2:
            raise ValueError(f"{ENV_PREFIX}FOLDS must be at least 2, got {self.folds}")
        if not self.delimiter:
            raise ValueError(f"{ENV_PREFIX}DELIMITER must not be empty")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {self.log_level}")


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _parse(name: str, cast):
    raw = _env(name)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} has an invalid value: {raw!r}") from None


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from the environment, reading ``.env`` first if present."""
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    overrides = {
        "seed": _parse("SEED", int),
        "ratio": _parse("RATIO", float),
        "folds": _parse("FOLDS", int),
        "delimiter": os.getenv(ENV_PREFIX + "DELIMITER") or None,
        "log_level": _env("LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
