"""
Structural edits: inserting and deleting rows and columns.

Each edit takes a snapshot and returns a new one. The cell map and the
affected sizing map are rebuilt from scratch, so an identifier is never
overwritten mid-shift. Formulas are not re-evaluated: a cell keeps its stored
value and formula text even when the references inside that text now point
at shifted data.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

from gridcalc.spreadsheet.model import (
    Cell,
    SheetSnapshot,
    column_index,
    column_label,
    from_identifier,
    to_identifier,
)

DEFAULT_COLUMN_WIDTH = 100
DEFAULT_ROW_HEIGHT = 24

# Maps an index to its new index, or None to drop the entry
_Shift = Callable[[int], Optional[int]]


def _inserted_after(index: int) -> _Shift:
    return lambda i: i + 1 if i > index else i


def _deleted_at(index: int) -> _Shift:
    def shift(i: int) -> Optional[int]:
        if i == index:
            return None
        return i - 1 if i > index else i
    return shift


def _remap_cells_by_row(cells: dict[str, Cell], shift: _Shift) -> dict[str, Cell]:
    remapped: dict[str, Cell] = {}
    for identifier, cell in cells.items():
        row, col = from_identifier(identifier)
        new_row = shift(row)
        if new_row is not None:
            remapped[to_identifier(new_row, col)] = cell
    return remapped


def _remap_cells_by_column(cells: dict[str, Cell], shift: _Shift) -> dict[str, Cell]:
    remapped: dict[str, Cell] = {}
    for identifier, cell in cells.items():
        row, col = from_identifier(identifier)
        new_col = shift(col)
        if new_col is not None:
            remapped[to_identifier(row, new_col)] = cell
    return remapped


def _remap_row_heights(heights: dict[str, float], shift: _Shift) -> dict[str, float]:
    # Keys are 1-based row numbers
    remapped: dict[str, float] = {}
    for key, height in heights.items():
        new_row = shift(int(key) - 1)
        if new_row is not None:
            remapped[str(new_row + 1)] = height
    return remapped


def _remap_column_widths(widths: dict[str, float], shift: _Shift) -> dict[str, float]:
    remapped: dict[str, float] = {}
    for label, width in widths.items():
        new_col = shift(column_index(label))
        if new_col is not None:
            remapped[column_label(new_col)] = width
    return remapped


def _check_insert_index(index: int, total: int, axis: str) -> None:
    # -1 opens a new first row/column
    if not -1 <= index < total:
        raise IndexError(f"Cannot insert {axis} after index {index} (total {total})")


def _check_delete_index(index: int, total: int, axis: str) -> None:
    if not 0 <= index < total:
        raise IndexError(f"{axis.capitalize()} index {index} out of range (total {total})")


def insert_row(
    snapshot: SheetSnapshot,
    index: int,
    default_height: float = DEFAULT_ROW_HEIGHT,
) -> SheetSnapshot:
    """Open an empty row directly after row ``index``.

    Cells below ``index`` move down one row. The new row gets a height entry
    of ``default_height`` but no cells.

    Args:
        snapshot: Sheet state to edit
        index: Row index (0-indexed) the new row follows; -1 inserts at the top
        default_height: Height for the opened row

    Returns:
        New snapshot with ``total_rows`` increased by one
    """
    _check_insert_index(index, snapshot.total_rows, "row")
    shift = _inserted_after(index)

    heights = _remap_row_heights(snapshot.row_heights, shift)
    heights[str(index + 2)] = default_height

    return replace(
        snapshot,
        cells=_remap_cells_by_row(snapshot.cells, shift),
        row_heights=heights,
        total_rows=snapshot.total_rows + 1,
    )


def insert_column(
    snapshot: SheetSnapshot,
    index: int,
    default_width: float = DEFAULT_COLUMN_WIDTH,
) -> SheetSnapshot:
    """Open an empty column directly after column ``index``.

    Mirror of insert_row() for columns and the column-width map.
    """
    _check_insert_index(index, snapshot.total_columns, "column")
    shift = _inserted_after(index)

    widths = _remap_column_widths(snapshot.column_widths, shift)
    widths[column_label(index + 1)] = default_width

    return replace(
        snapshot,
        cells=_remap_cells_by_column(snapshot.cells, shift),
        column_widths=widths,
        total_columns=snapshot.total_columns + 1,
    )


def delete_row(snapshot: SheetSnapshot, index: int) -> SheetSnapshot:
    """Remove row ``index`` and every cell in it.

    Cells below move up one row and row heights shift with them. Deleting
    the only remaining row returns ``snapshot`` itself, unchanged.

    Raises:
        IndexError: If index is outside the sheet
    """
    if snapshot.total_rows <= 1:
        return snapshot
    _check_delete_index(index, snapshot.total_rows, "row")
    shift = _deleted_at(index)

    return replace(
        snapshot,
        cells=_remap_cells_by_row(snapshot.cells, shift),
        row_heights=_remap_row_heights(snapshot.row_heights, shift),
        total_rows=snapshot.total_rows - 1,
    )


def delete_column(snapshot: SheetSnapshot, index: int) -> SheetSnapshot:
    """Remove column ``index`` and every cell in it.

    Mirror of delete_row(). Deleting the only remaining column returns
    ``snapshot`` itself, unchanged.
    """
    if snapshot.total_columns <= 1:
        return snapshot
    _check_delete_index(index, snapshot.total_columns, "column")
    shift = _deleted_at(index)

    return replace(
        snapshot,
        cells=_remap_cells_by_column(snapshot.cells, shift),
        column_widths=_remap_column_widths(snapshot.column_widths, shift),
        total_columns=snapshot.total_columns - 1,
    )
