"""
Sheet mutation operation classes.

This module defines the messages a UI sends to the SheetStore:
- SetCellValue / SetCellFormula / SetCellStyle: write one cell
- SetColumnWidth / SetRowHeight: resize a column or row
- InsertRow / InsertColumn / DeleteRow / DeleteColumn: structural edits
- FindAndReplace: rewrite text across every cell
- Undo / Redo: history navigation

Operations are plain data. They serialize to dictionaries so they can cross
a process or network boundary, and SheetStore.apply() executes them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union


@dataclass
class SetCellValue:
    """Write literal text to a cell, clearing any formula.

    Attributes:
        cell_id: Target cell identifier (e.g. "B3")
        value: Literal text
    """
    cell_id: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "SetCellValue", "cell_id": self.cell_id, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetCellValue":
        """Create from dictionary representation."""
        return cls(cell_id=data["cell_id"], value=data["value"])


@dataclass
class SetCellFormula:
    """Install a formula in a cell and store its evaluated value.

    Attributes:
        cell_id: Target cell identifier
        formula: Formula text (literals without a leading '=' pass through)
    """
    cell_id: str
    formula: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "SetCellFormula", "cell_id": self.cell_id, "formula": self.formula}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetCellFormula":
        """Create from dictionary representation."""
        return cls(cell_id=data["cell_id"], formula=data["formula"])


@dataclass
class SetCellStyle:
    """Merge style attributes into a cell's style.

    Attributes:
        cell_id: Target cell identifier
        style: Partial style, keyed by CellStyle attribute name
    """
    cell_id: str
    style: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "SetCellStyle", "cell_id": self.cell_id, "style": dict(self.style)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetCellStyle":
        """Create from dictionary representation."""
        return cls(cell_id=data["cell_id"], style=dict(data.get("style", {})))


@dataclass
class SetColumnWidth:
    """Set a column's width.

    Attributes:
        label: Column label (e.g. "C")
        width: Width in px
    """
    label: str
    width: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "SetColumnWidth", "label": self.label, "width": self.width}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetColumnWidth":
        """Create from dictionary representation."""
        return cls(label=data["label"], width=data["width"])


@dataclass
class SetRowHeight:
    """Set a row's height.

    Attributes:
        label: 1-based row number as a string (e.g. "7")
        height: Height in px
    """
    label: str
    height: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "SetRowHeight", "label": self.label, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetRowHeight":
        """Create from dictionary representation."""
        return cls(label=str(data["label"]), height=data["height"])


@dataclass
class InsertRow:
    """Open an empty row after row ``after_index`` (0-indexed)."""
    after_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "InsertRow", "after_index": self.after_index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InsertRow":
        return cls(after_index=data["after_index"])


@dataclass
class InsertColumn:
    """Open an empty column after column ``after_index`` (0-indexed)."""
    after_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "InsertColumn", "after_index": self.after_index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InsertColumn":
        return cls(after_index=data["after_index"])


@dataclass
class DeleteRow:
    """Delete row ``index`` (0-indexed)."""
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteRow", "index": self.index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteRow":
        return cls(index=data["index"])


@dataclass
class DeleteColumn:
    """Delete column ``index`` (0-indexed)."""
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "DeleteColumn", "index": self.index}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteColumn":
        return cls(index=data["index"])


@dataclass
class FindAndReplace:
    """Replace every occurrence of ``find`` in cell values and formulas.

    Attributes:
        find: Text to search for (an empty string makes the operation a no-op)
        replace: Replacement text
    """
    find: str
    replace: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "FindAndReplace", "find": self.find, "replace": self.replace}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FindAndReplace":
        """Create from dictionary representation."""
        return cls(find=data["find"], replace=data["replace"])


@dataclass
class Undo:
    """Restore the state before the most recent mutation."""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Undo"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Undo":
        return cls()


@dataclass
class Redo:
    """Re-apply the most recently undone mutation."""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Redo"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Redo":
        return cls()


# Type alias for all operation types
SheetOp = Union[
    SetCellValue,
    SetCellFormula,
    SetCellStyle,
    SetColumnWidth,
    SetRowHeight,
    InsertRow,
    InsertColumn,
    DeleteRow,
    DeleteColumn,
    FindAndReplace,
    Undo,
    Redo,
]

_OP_TYPES = {
    cls.__name__: cls
    for cls in (
        SetCellValue,
        SetCellFormula,
        SetCellStyle,
        SetColumnWidth,
        SetRowHeight,
        InsertRow,
        InsertColumn,
        DeleteRow,
        DeleteColumn,
        FindAndReplace,
        Undo,
        Redo,
    )
}


def op_from_dict(data: Dict[str, Any]) -> SheetOp:
    """Deserialize an operation from dictionary representation.

    Args:
        data: Dictionary with 'type' key indicating operation type

    Returns:
        The corresponding operation object

    Raises:
        ValueError: If the operation type is unknown
    """
    op_type = data.get("type")
    op_cls = _OP_TYPES.get(op_type) if isinstance(op_type, str) else None
    if op_cls is None:
        raise ValueError(f"Unknown operation type: {op_type}")
    return op_cls.from_dict(data)
