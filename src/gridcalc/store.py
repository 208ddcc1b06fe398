"""
Sheet store: the state container behind the spreadsheet UI.

The store owns the live SheetSnapshot, the selection and the undo/redo
history. Every mutation follows the same sequence:

1. Record the current snapshot in the history manager
2. Build the new snapshot (direct write, formula evaluation, or a
   structural edit)
3. Publish the new SheetState to subscribers

Mutations arrive either as method calls or as operation messages passed to
``apply()``. All work is synchronous; a mutation completes before the next
one starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional

from gridcalc.config import Settings, get_settings
from gridcalc.engine.evaluator import ERROR_TOKEN, evaluate
from gridcalc.engine.quality import apply_data_quality_function
from gridcalc.history import HistoryManager
from gridcalc.spreadsheet import structure
from gridcalc.spreadsheet.model import (
    Cell,
    SheetSnapshot,
    column_index,
    column_label,
    from_identifier,
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
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetState:
    """What the rendering layer reads after each change.

    Attributes:
        snapshot: Cells, sizing maps and dimensions
        can_undo: Whether undo() would change anything
        can_redo: Whether redo() would change anything
        selected_cell: Identifier of the selected cell, if any
        selected_range: Identifiers of the selected range, if any
    """
    snapshot: SheetSnapshot
    can_undo: bool
    can_redo: bool
    selected_cell: Optional[str] = None
    selected_range: Optional[tuple[str, ...]] = None


Listener = Callable[[SheetState], None]


def blank_snapshot(settings: Settings) -> SheetSnapshot:
    """Create an empty sheet sized by settings, with every column width set."""
    widths = {
        column_label(col): settings.default_column_width
        for col in range(settings.default_columns)
    }
    return SheetSnapshot(
        column_widths=widths,
        total_rows=settings.default_rows,
        total_columns=settings.default_columns,
    )


class SheetStore:
    """Mutation API and observable state for one sheet.

    Usage::

        store = SheetStore()
        unsubscribe = store.subscribe(render)
        store.set_cell_value("A1", "5")
        store.set_cell_formula("B1", "=A1*2")   # B1 displays "10"
        store.undo()

    Attributes:
        settings: Defaults for new sheets, inserted rows/columns and history
    """

    def __init__(
        self,
        snapshot: Optional[SheetSnapshot] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._snapshot = snapshot if snapshot is not None else blank_snapshot(self.settings)
        self._history = HistoryManager(limit=self.settings.history_limit)
        self._selected_cell: Optional[str] = None
        self._selected_range: Optional[tuple[str, ...]] = None
        self._listeners: list[Listener] = []

    # =========================================================================
    # Read API
    # =========================================================================

    @property
    def snapshot(self) -> SheetSnapshot:
        return self._snapshot

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def selected_cell(self) -> Optional[str]:
        return self._selected_cell

    @property
    def selected_range(self) -> Optional[tuple[str, ...]]:
        return self._selected_range

    @property
    def state(self) -> SheetState:
        return SheetState(
            snapshot=self._snapshot,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
            selected_cell=self._selected_cell,
            selected_range=self._selected_range,
        )

    def get_cell(self, cell_id: str) -> Cell:
        """Return the cell at cell_id (an empty default cell if never written)."""
        self._check_cell(cell_id)
        return self._snapshot.get_cell(cell_id)

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with the SheetState after each change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def _commit(self, snapshot: SheetSnapshot) -> None:
        """Record the current snapshot in history, install the new one, publish."""
        self._history.snapshot_before_mutation(self._snapshot)
        self._snapshot = snapshot
        self._publish()

    # =========================================================================
    # Cell writes
    # =========================================================================

    def set_cell_value(self, cell_id: str, value: str) -> None:
        """Write literal text to a cell and clear its formula."""
        self._check_cell(cell_id)
        cell = self._snapshot.get_cell(cell_id)
        self._commit(self._snapshot.with_cell(cell_id, replace(cell, value=value, formula="")))

    def set_cell_formula(self, cell_id: str, formula: str) -> None:
        """Store a formula and its value, evaluated now against the current cells.

        Text without a leading '=' is stored as a literal value.
        """
        self._check_cell(cell_id)
        cell = self._snapshot.get_cell(cell_id)
        if not formula.startswith("="):
            updated = replace(cell, value=formula, formula="")
        else:
            updated = replace(cell, value=evaluate(formula, self._snapshot.cells), formula=formula)
        self._commit(self._snapshot.with_cell(cell_id, updated))

    def set_cell_style(self, cell_id: str, **style: Any) -> None:
        """Merge style attributes (e.g. ``bold=True``) into a cell's style.

        Raises:
            ValueError: If an attribute is not a CellStyle field
        """
        self._check_cell(cell_id)
        cell = self._snapshot.get_cell(cell_id)
        updated = replace(cell, style=cell.style.merge(**style))
        self._commit(self._snapshot.with_cell(cell_id, updated))

    def apply_data_quality(self, cell_id: str, func: str) -> None:
        """Rewrite a cell's value with a data quality transform (e.g. TRIM).

        The result is stored as a literal; any formula is cleared.
        """
        self._check_cell(cell_id)
        cell = self._snapshot.get_cell(cell_id)
        value = apply_data_quality_function(func, cell.value)
        self._commit(self._snapshot.with_cell(cell_id, replace(cell, value=value, formula="")))

    # =========================================================================
    # Sizing
    # =========================================================================

    def set_column_width(self, label: str, width: float) -> None:
        col = column_index(label)
        if col >= self._snapshot.total_columns:
            raise IndexError(f"Column {label} is outside the sheet")
        self._commit(self._snapshot.with_column_width(label, width))

    def set_row_height(self, label: str, height: float) -> None:
        """Set the height of the row with 1-based number ``label``."""
        label = str(label)
        if not label.isdigit() or not 1 <= int(label) <= self._snapshot.total_rows:
            raise IndexError(f"Row {label} is outside the sheet")
        self._commit(self._snapshot.with_row_height(str(int(label)), height))

    # =========================================================================
    # Structural edits
    # =========================================================================

    def add_row(self, after_index: int) -> None:
        """Insert an empty row after row ``after_index`` (-1 for a new first row)."""
        self._commit(
            structure.insert_row(self._snapshot, after_index, self.settings.default_row_height)
        )

    def add_column(self, after_index: int) -> None:
        """Insert an empty column after column ``after_index`` (-1 for a new first column)."""
        self._commit(
            structure.insert_column(
                self._snapshot, after_index, self.settings.default_column_width
            )
        )

    def delete_row(self, index: int) -> None:
        """Delete row ``index``. Does nothing when only one row is left."""
        if self._snapshot.total_rows <= 1:
            return
        self._commit(structure.delete_row(self._snapshot, index))

    def delete_column(self, index: int) -> None:
        """Delete column ``index``. Does nothing when only one column is left."""
        if self._snapshot.total_columns <= 1:
            return
        self._commit(structure.delete_column(self._snapshot, index))

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> None:
        previous = self._history.undo(self._snapshot)
        if previous is None:
            return
        self._snapshot = previous
        self._publish()

    def redo(self) -> None:
        following = self._history.redo(self._snapshot)
        if following is None:
            return
        self._snapshot = following
        self._publish()

    # =========================================================================
    # Compound operations
    # =========================================================================

    def find_and_replace(self, find: str, replace_with: str) -> None:
        """Replace every occurrence of ``find`` in cell values and formulas.

        Cells whose formula text changed are re-evaluated against the cells
        as rewritten so far; other formula cells keep their stored values.
        A pass that changes nothing leaves no history entry.
        """
        if not find:
            return

        had_redo = self._history.can_redo
        self._history.snapshot_before_mutation(self._snapshot)

        cells = dict(self._snapshot.cells)
        changes = 0
        for cell_id, cell in list(cells.items()):
            value, formula = cell.value, cell.formula
            if value and find in value:
                value = value.replace(find, replace_with)
            if formula and find in formula:
                formula = formula.replace(find, replace_with)
                value = self._reevaluate(cell_id, formula, cells)
            if value != cell.value or formula != cell.formula:
                cells[cell_id] = replace(cell, value=value, formula=formula)
                changes += 1

        if not changes:
            self._history.discard_last()
            if had_redo:
                self._publish()
            return

        logger.debug("Find and replace %r -> %r changed %d cells", find, replace_with, changes)
        self._snapshot = replace(self._snapshot, cells=cells)
        self._publish()

    @staticmethod
    def _reevaluate(cell_id: str, formula: str, cells: dict[str, Cell]) -> str:
        try:
            return evaluate(formula, cells)
        except Exception as e:
            logger.warning("Re-evaluating %s (%r) failed: %s", cell_id, formula, e)
            return ERROR_TOKEN

    # =========================================================================
    # Selection
    # =========================================================================

    def set_selected_cell(self, cell_id: Optional[str]) -> None:
        if cell_id is not None:
            self._check_cell(cell_id)
        self._selected_cell = cell_id
        self._publish()

    def set_selected_range(self, cell_ids: Optional[Iterable[str]]) -> None:
        if cell_ids is None:
            self._selected_range = None
        else:
            selected = tuple(cell_ids)
            for cell_id in selected:
                self._check_cell(cell_id)
            self._selected_range = selected
        self._publish()

    # =========================================================================
    # Loading and message dispatch
    # =========================================================================

    def load(self, snapshot: SheetSnapshot) -> None:
        """Replace the sheet with a loaded snapshot and start a fresh history."""
        self._snapshot = snapshot
        self._history.clear()
        self._selected_cell = None
        self._selected_range = None
        logger.info(
            "Loaded sheet: %d cells, %d rows, %d columns",
            len(snapshot.cells), snapshot.total_rows, snapshot.total_columns,
        )
        self._publish()

    def apply(self, op: SheetOp) -> None:
        """Execute a mutation operation message.

        Raises:
            TypeError: If op is not a known operation
        """
        if isinstance(op, SetCellValue):
            self.set_cell_value(op.cell_id, op.value)
        elif isinstance(op, SetCellFormula):
            self.set_cell_formula(op.cell_id, op.formula)
        elif isinstance(op, SetCellStyle):
            self.set_cell_style(op.cell_id, **op.style)
        elif isinstance(op, SetColumnWidth):
            self.set_column_width(op.label, op.width)
        elif isinstance(op, SetRowHeight):
            self.set_row_height(op.label, op.height)
        elif isinstance(op, InsertRow):
            self.add_row(op.after_index)
        elif isinstance(op, InsertColumn):
            self.add_column(op.after_index)
        elif isinstance(op, DeleteRow):
            self.delete_row(op.index)
        elif isinstance(op, DeleteColumn):
            self.delete_column(op.index)
        elif isinstance(op, FindAndReplace):
            self.find_and_replace(op.find, op.replace)
        elif isinstance(op, Undo):
            self.undo()
        elif isinstance(op, Redo):
            self.redo()
        else:
            raise TypeError(f"Unknown operation: {op!r}")

    def _check_cell(self, cell_id: str) -> None:
        row, col = from_identifier(cell_id)
        if row >= self._snapshot.total_rows or col >= self._snapshot.total_columns:
            raise IndexError(f"Cell {cell_id} is outside the sheet")

    def __repr__(self) -> str:
        return f"SheetStore({self._snapshot!r}, history={self._history!r})"
