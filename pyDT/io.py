from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Iterable, List, Union

import numpy as np
from loguru import logger

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class CSVTable:
    """Rectangular numeric table read from a comma-separated file."""

    filename: str
    data: np.ndarray
    row_count: int
    column_count: int

    def _column(self, col: int) -> np.ndarray:
        if not 0 <= col < self.column_count:
            raise IndexError(f"Column {col} out of range for {self.column_count} columns")
        return self.data[:, col]

    def col_min(self, col: int) -> float:
        return float(self._column(col).min()) if self.row_count else 0.0

    def col_max(self, col: int) -> float:
        return float(self._column(col).max()) if self.row_count else 0.0

    def col_mean(self, col: int) -> float:
        if not self.row_count:
            return 0.0
        return float(self._column(col).sum(dtype=np.float64) / self.row_count)

    def col_variance(self, col: int) -> float:
        if not self.row_count:
            return 0.0
        diff = self._column(col).astype(np.float64) - self.col_mean(col)
        return float(np.mean(diff * diff))


def _parse_line(line: str, lineno: int, path: str) -> List[float]:
    try:
        return [float(tok) for tok in line.split(",")]
    except ValueError:
        raise ValueError(f"{path}:{lineno}: non-numeric value in {line!r}") from None


def read_csv(path: PathLike) -> CSVTable:
    """Read a header-less file of comma-separated numbers.

    The first non-blank line fixes the column count. Rows with a different
    number of values are padded with zeros or truncated, with a warning.
    Parsed line by line rather than with ``np.genfromtxt``, which drops ragged
    rows (``invalid_raise=False``) instead of padding them.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ValueError
        If a field is not a number.
    """
    path = os.fspath(path)
    rows: List[List[float]] = []
    column_count = None
    with open(path, "r", encoding="utf-8") as handle:
        for lineno, raw in enumerate(handle, start=1):
            line = raw.strip()
            if not line:
                continue
            values = _parse_line(line, lineno, path)
            if column_count is None:
                column_count = len(values)
            elif len(values) != column_count:
                logger.warning(
                    "Expected {} columns, got {} on line {}", column_count, len(values), lineno
                )
                values = (values + [0.0] * column_count)[:column_count]
            rows.append(values)

    column_count = column_count or 0
    data = np.array(rows, dtype=np.float32).reshape(len(rows), column_count)
    logger.debug("Read {} rows, {} columns from {}", len(rows), column_count, path)
    return CSVTable(filename=path, data=data, row_count=len(rows), column_count=column_count)


def write_predictions(path: PathLike, predictions: Iterable[float]) -> int:
    """Write ``Id,Prediction`` rows (1-based ids, integer-truncated classes).

    Undefined predictions (NaN) are written with an empty prediction field.
    Returns the number of rows written.
    """
    count = 0
    with open(os.fspath(path), "w", encoding="utf-8", newline="") as handle:
        handle.write("Id,Prediction\n")
        for i, pred in enumerate(predictions, start=1):
            value = "" if math.isnan(pred) else str(int(pred))
            handle.write(f"{i},{value}\n")
            count += 1
    return count
