"""
gridcalc - the evaluation and state core of a browser spreadsheet editor.

The package turns raw cell input into display values, applies structural
edits (row/column insert and delete), and keeps undo/redo history of whole
sheet snapshots. Rendering and persistence are left to the caller.

Usage:
    >>> from gridcalc import SheetStore
    >>> store = SheetStore()
    >>> store.set_cell_value("A1", "5")
    >>> store.set_cell_formula("A2", "=SUM(A1:A1)")
    >>> store.get_cell("A2").value
    '5'

Key components:
- evaluate: Formula evaluation with the #ERROR! token for failures
- SheetSnapshot / Cell / CellStyle: Immutable sheet state
- insert_row / insert_column / delete_row / delete_column: Structural edits
- HistoryManager: Undo/redo stacks of snapshots
- SheetStore: Mutation API, selection and change notification
"""

from .config import Settings, get_settings
from .engine import ERROR_TOKEN, evaluate
from .exceptions import *
from .history import HistoryManager
from .spreadsheet import (
    Cell,
    CellStyle,
    Range,
    SheetSnapshot,
    delete_column,
    delete_row,
    from_identifier,
    insert_column,
    insert_row,
    op_from_dict,
    to_identifier,
)
from .store import SheetState, SheetStore

# Version
__version__ = "0.1.0"

__all__ = [
    'Settings',
    'get_settings',
    'ERROR_TOKEN',
    'evaluate',
    'MalformedIdentifier',
    'FormulaError',
    'SnapshotFormatError',
    'HistoryManager',
    'Cell',
    'CellStyle',
    'Range',
    'SheetSnapshot',
    'delete_column',
    'delete_row',
    'from_identifier',
    'insert_column',
    'insert_row',
    'op_from_dict',
    'to_identifier',
    'SheetState',
    'SheetStore',
]
