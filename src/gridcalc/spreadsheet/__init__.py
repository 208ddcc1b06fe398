"""
Spreadsheet model module.

This module provides the sheet value objects, cell addressing, structural
edits and the mutation operations a UI sends to the store.
"""

from gridcalc.spreadsheet.model import (
    Cell,
    CellStyle,
    DEFAULT_STYLE,
    Range,
    SheetSnapshot,
    column_index,
    column_label,
    from_identifier,
    is_identifier,
    to_identifier,
)
from gridcalc.spreadsheet.operations import (
    DeleteColumn,
    DeleteRow,
    FindAndReplace,
    InsertColumn,
    InsertRow,
    Redo,
    SetCellFormula,
    SetCellStyle,
    SetCellValue,
    SetColumnWidth,
    SetRowHeight,
    SheetOp,
    Undo,
    op_from_dict,
)
from gridcalc.spreadsheet.structure import (
    delete_column,
    delete_row,
    insert_column,
    insert_row,
)

__all__ = [
    "Cell",
    "CellStyle",
    "DEFAULT_STYLE",
    "Range",
    "SheetSnapshot",
    "column_index",
    "column_label",
    "from_identifier",
    "is_identifier",
    "to_identifier",
    "DeleteColumn",
    "DeleteRow",
    "FindAndReplace",
    "InsertColumn",
    "InsertRow",
    "Redo",
    "SetCellFormula",
    "SetCellStyle",
    "SetCellValue",
    "SetColumnWidth",
    "SetRowHeight",
    "SheetOp",
    "Undo",
    "op_from_dict",
    "delete_column",
    "delete_row",
    "insert_column",
    "insert_row",
]
