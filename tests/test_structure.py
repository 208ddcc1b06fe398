"""
Tests for structural edits (row/column insert and delete).
"""

import pytest

from gridcalc.spreadsheet.model import Cell, SheetSnapshot
from gridcalc.spreadsheet.structure import (
    delete_column,
    delete_row,
    insert_column,
    insert_row,
)


@pytest.fixture
def column_a() -> SheetSnapshot:
    """Three values down column A, with two custom row heights."""
    return SheetSnapshot(
        cells={
            "A1": Cell(value="1"),
            "A2": Cell(value="2"),
            "A3": Cell(value="3"),
        },
        row_heights={"1": 30, "3": 40},
        total_rows=3,
        total_columns=3,
    )


@pytest.fixture
def row_1() -> SheetSnapshot:
    """Three values across row 1, with custom column widths."""
    return SheetSnapshot(
        cells={
            "A1": Cell(value="a"),
            "B1": Cell(value="b"),
            "C1": Cell(value="c"),
        },
        column_widths={"A": 100, "B": 120, "C": 80},
        total_rows=3,
        total_columns=3,
    )


class TestInsertRow:

    def test_cells_below_move_down(self, column_a):
        result = insert_row(column_a, 0)
        assert {k: c.value for k, c in result.cells.items()} == {"A1": "1", "A3": "2", "A4": "3"}
        assert result.total_rows == 4

    def test_new_row_is_empty_with_default_height(self, column_a):
        result = insert_row(column_a, 0, default_height=24)
        assert "A2" not in result.cells
        assert result.row_heights == {"1": 30, "2": 24, "4": 40}

    def test_insert_before_first_row(self, column_a):
        result = insert_row(column_a, -1)
        assert result.cells["A2"].value == "1"
        assert "A1" not in result.cells
        assert result.row_heights["1"] == 24

    def test_insert_after_last_row(self, column_a):
        result = insert_row(column_a, 2)
        assert result.cells == column_a.cells
        assert result.row_heights["4"] == 24

    def test_original_snapshot_unchanged(self, column_a):
        insert_row(column_a, 0)
        assert set(column_a.cells) == {"A1", "A2", "A3"}
        assert column_a.total_rows == 3
        assert column_a.row_heights == {"1": 30, "3": 40}

    def test_out_of_range(self, column_a):
        with pytest.raises(IndexError):
            insert_row(column_a, 3)
        with pytest.raises(IndexError):
            insert_row(column_a, -2)

    def test_formulas_are_not_reevaluated(self):
        snapshot = SheetSnapshot(
            cells={"A1": Cell(value="5"), "A2": Cell(value="10", formula="=A1*2")},
            total_rows=2,
            total_columns=1,
        )
        result = insert_row(snapshot, 0)
        assert result.cells["A3"] == Cell(value="10", formula="=A1*2")


class TestDeleteRow:

    def test_cells_below_move_up(self, column_a):
        result = delete_row(column_a, 1)
        assert {k: c.value for k, c in result.cells.items()} == {"A1": "1", "A2": "3"}
        assert result.total_rows == 2

    def test_heights_shift_and_deleted_entry_dropped(self, column_a):
        assert delete_row(column_a, 0).row_heights == {"2": 40}
        assert delete_row(column_a, 2).row_heights == {"1": 30}

    def test_last_row_is_noop(self):
        snapshot = SheetSnapshot(cells={"A1": Cell(value="x")}, total_rows=1, total_columns=2)
        assert delete_row(snapshot, 0) is snapshot

    def test_out_of_range(self, column_a):
        with pytest.raises(IndexError):
            delete_row(column_a, 3)
        with pytest.raises(IndexError):
            delete_row(column_a, -1)

    @pytest.mark.parametrize("index", [-1, 0, 1, 2])
    def test_deleting_inserted_row_restores_snapshot(self, column_a, index):
        """The row opened by insert_row(i) sits at i + 1."""
        assert delete_row(insert_row(column_a, index), index + 1) == column_a


class TestInsertColumn:

    def test_cells_right_move_right(self, row_1):
        result = insert_column(row_1, 0, default_width=100)
        assert {k: c.value for k, c in result.cells.items()} == {"A1": "a", "C1": "b", "D1": "c"}
        assert result.column_widths == {"A": 100, "B": 100, "C": 120, "D": 80}
        assert result.total_columns == 4

    def test_crossing_into_multi_letter_columns(self):
        snapshot = SheetSnapshot(
            cells={"Z1": Cell(value="z")},
            column_widths={"Z": 50},
            total_rows=1,
            total_columns=26,
        )
        result = insert_column(snapshot, 0)
        assert result.cells["AA1"].value == "z"
        assert result.column_widths["AA"] == 50


class TestDeleteColumn:

    def test_cells_right_move_left(self, row_1):
        result = delete_column(row_1, 1)
        assert {k: c.value for k, c in result.cells.items()} == {"A1": "a", "B1": "c"}
        assert result.column_widths == {"A": 100, "B": 80}
        assert result.total_columns == 2

    def test_last_column_is_noop(self):
        snapshot = SheetSnapshot(total_rows=3, total_columns=1)
        assert delete_column(snapshot, 0) is snapshot

    @pytest.mark.parametrize("index", [-1, 0, 1, 2])
    def test_deleting_inserted_column_restores_snapshot(self, row_1, index):
        assert delete_column(insert_column(row_1, index), index + 1) == row_1
