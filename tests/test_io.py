import io

import numpy as np
import pytest

from pyDT import enable_logging
from pyDT.io import read_csv, write_predictions


def test_read_rectangular_file(tmp_path):
    path = tmp_path / "train.csv"
    path.write_text("1,2,0\n3,4,1\n\n5,6.5,1\n")

    table = read_csv(path)
    assert table.row_count == 3
    assert table.column_count == 3
    assert table.data.dtype == np.float32
    assert table.data[2].tolist() == [5.0, 6.5, 1.0]
    assert table.filename == str(path)


def test_ragged_rows_are_padded_or_truncated_with_warning(tmp_path):
    path = tmp_path / "ragged.csv"
    path.write_text("1,2,3\n4,5\n6,7,8,9\n")

    buf = io.StringIO()
    with enable_logging(level="WARNING", sink=buf):
        table = read_csv(path)

    assert table.data.tolist() == [[1, 2, 3], [4, 5, 0], [6, 7, 8]]
    log = buf.getvalue()
    assert "Expected 3 columns, got 2 on line 2" in log
    assert "Expected 3 columns, got 4 on line 3" in log


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_csv(tmp_path / "nope.csv")


def test_non_numeric_field_raises(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1,2\n3,abc\n")
    with pytest.raises(ValueError, match=":2:"):
        read_csv(path)


def test_empty_file_gives_empty_table(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    table = read_csv(path)
    assert table.row_count == 0
    assert table.column_count == 0


def test_table_column_statistics(tmp_path):
    path = tmp_path / "stats.csv"
    path.write_text("1,10\n2,20\n3,30\n4,40\n")
    table = read_csv(path)

    assert table.col_min(0) == 1.0
    assert table.col_max(1) == 40.0
    assert table.col_mean(0) == pytest.approx(2.5)
    assert table.col_variance(0) == pytest.approx(1.25)
    with pytest.raises(IndexError):
        table.col_mean(2)


def test_write_predictions(tmp_path):
    path = tmp_path / "preds.csv"
    written = write_predictions(path, np.array([0.0, 1.0, 2.9, np.nan]))

    assert written == 4
    assert path.read_text() == "Id,Prediction\n1,0\n2,1\n3,2\n4,\n"
