"""
Spreadsheet model classes.

This module provides the value objects the sheet core works with:
- Cell addressing: conversion between (row, col) indices and A1 identifiers
- Range: A rectangular cell region (e.g., A1:C10)
- CellStyle: Visual attributes of a cell
- Cell: Display value, formula text and style of one cell
- SheetSnapshot: The full mutable state of a sheet at one instant

Cells and snapshots are immutable. Mutations build new objects that share
unchanged cells with the previous snapshot, so a snapshot handed to a reader
or kept in history never changes underneath it.
"""

import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterator, Optional, Tuple

from gridcalc.exceptions import MalformedIdentifier

IDENTIFIER_RE = re.compile(r"^([A-Z]+)([0-9]+)$")


def column_label(col: int) -> str:
    """Convert a column index (0-indexed) to its letter label.

    Args:
        col: Column index (0 = A, 25 = Z, 26 = AA, etc.)

    Returns:
        Column label in A1 notation
    """
    if col < 0:
        raise ValueError(f"Column index must be non-negative, got {col}")
    col_1indexed = col + 1
    result = ""
    while col_1indexed > 0:
        col_1indexed -= 1
        result = chr(65 + (col_1indexed % 26)) + result
        col_1indexed //= 26
    return result


def column_index(label: str) -> int:
    """Convert a column label to its index (0-indexed).

    Args:
        label: Column letter(s) in A1 notation (A, Z, AA, etc.)

    Returns:
        Column index (A = 0, Z = 25, AA = 26, etc.)
    """
    if not label or not label.isalpha() or not label.isupper():
        raise MalformedIdentifier(f"Invalid column label: {label!r}")
    col_1indexed = 0
    for char in label:
        col_1indexed = col_1indexed * 26 + (ord(char) - 64)
    return col_1indexed - 1


def to_identifier(row: int, col: int) -> str:
    """Build the display identifier for a structural position.

    Args:
        row: Row index (0-indexed)
        col: Column index (0-indexed)

    Returns:
        Identifier such as ``"B12"`` (column label + 1-based row number)
    """
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    return f"{column_label(col)}{row + 1}"


def from_identifier(identifier: str) -> Tuple[int, int]:
    """Parse a display identifier into a structural position.

    Args:
        identifier: Identifier such as ``"B12"``

    Returns:
        (row, col) tuple, both 0-indexed

    Raises:
        MalformedIdentifier: If identifier does not match ``[A-Z]+[0-9]+``
            or names row 0
    """
    if not isinstance(identifier, str):
        raise MalformedIdentifier(f"Cell identifier must be a string, got {identifier!r}")
    match = IDENTIFIER_RE.match(identifier)
    if not match:
        raise MalformedIdentifier(f"Invalid cell identifier: {identifier!r}")

    letters, digits = match.groups()
    row_1indexed = int(digits)
    if row_1indexed < 1:
        raise MalformedIdentifier(f"Row numbers start at 1: {identifier!r}")
    return row_1indexed - 1, column_index(letters)


def is_identifier(text: str) -> bool:
    """Check whether text is a well-formed cell identifier."""
    return bool(IDENTIFIER_RE.match(text))


class Range:
    """Represents a rectangular cell region in A1 notation.

    Coordinates are 0-indexed internally and converted to 1-indexed A1
    notation by to_a1(). A range whose end lies before its start on either
    axis is allowed and simply contains no cells.

    Attributes:
        row: Starting row (0-indexed)
        col: Starting column (0-indexed)
        row_end: Ending row (0-indexed, inclusive)
        col_end: Ending column (0-indexed, inclusive)
    """

    def __init__(
        self,
        row: int,
        col: int,
        row_end: Optional[int] = None,
        col_end: Optional[int] = None
    ) -> None:
        if row < 0 or col < 0:
            raise ValueError("Row and column must be non-negative (0-indexed)")

        self.row = row
        self.col = col
        self.row_end = row_end if row_end is not None else row
        self.col_end = col_end if col_end is not None else col

    @classmethod
    def from_a1(cls, notation: str) -> "Range":
        """Parse ``A1`` or ``A1:B10`` notation.

        Args:
            notation: A1 notation string (1-indexed spreadsheet convention)

        Returns:
            Range object with 0-indexed internal coordinates

        Raises:
            MalformedIdentifier: If either corner is not a valid identifier
        """
        notation = notation.strip()
        if ":" in notation:
            start_cell, _, end_cell = notation.partition(":")
            row, col = from_identifier(start_cell.strip())
            row_end, col_end = from_identifier(end_cell.strip())
            return cls(row=row, col=col, row_end=row_end, col_end=col_end)

        row, col = from_identifier(notation)
        return cls(row=row, col=col)

    def is_empty(self) -> bool:
        """Check whether the range covers no cells (reversed corners)."""
        return self.row_end < self.row or self.col_end < self.col

    def identifiers(self) -> Iterator[str]:
        """Iterate cell identifiers column by column, top to bottom."""
        for col in range(self.col, self.col_end + 1):
            for row in range(self.row, self.row_end + 1):
                yield to_identifier(row, col)

    def to_a1(self) -> str:
        """Convert Range to A1 notation string (e.g. ``"A1"`` or ``"A1:B10"``)."""
        start_cell = to_identifier(self.row, self.col)
        if self.row == self.row_end and self.col == self.col_end:
            return start_cell
        return f"{start_cell}:{to_identifier(self.row_end, self.col_end)}"

    def __len__(self) -> int:
        if self.is_empty():
            return 0
        return (self.row_end - self.row + 1) * (self.col_end - self.col + 1)

    def __repr__(self) -> str:
        return f"Range({self.to_a1()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return (
            self.row == other.row
            and self.col == other.col
            and self.row_end == other.row_end
            and self.col_end == other.col_end
        )


# Python attribute name -> key used by the browser app's persisted form
_STYLE_KEYS = {
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "strikethrough": "strikethrough",
    "font_size": "fontSize",
    "color": "color",
    "background_color": "backgroundColor",
    "text_align": "textAlign",
    "font_family": "fontFamily",
}

TEXT_ALIGNMENTS = ("left", "center", "right")


@dataclass(frozen=True)
class CellStyle:
    """Visual attributes of a cell.

    Attributes:
        bold: Bold text
        italic: Italic text
        underline: Underlined text
        strikethrough: Struck-through text
        font_size: Font size in px
        color: Text color (hex)
        background_color: Background color (hex)
        text_align: Horizontal alignment, one of left/center/right
        font_family: CSS font family
    """
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    font_size: int = 14
    color: str = "#000000"
    background_color: str = "#ffffff"
    text_align: str = "left"
    font_family: str = "Arial, sans-serif"

    def __post_init__(self) -> None:
        if self.text_align not in TEXT_ALIGNMENTS:
            raise ValueError(
                f"text_align must be one of {', '.join(TEXT_ALIGNMENTS)}, got {self.text_align!r}"
            )

    def merge(self, **partial: Any) -> "CellStyle":
        """Return a copy with the given attributes overridden.

        Raises:
            ValueError: If an attribute name is not a style field
        """
        unknown = set(partial) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown style attributes: {', '.join(sorted(unknown))}")
        return replace(self, **partial)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted (camelCase) dictionary form."""
        return {key: getattr(self, name) for name, key in _STYLE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CellStyle":
        """Create from the persisted form; missing keys take their defaults."""
        kwargs = {name: data[key] for name, key in _STYLE_KEYS.items() if key in data}
        return cls(**kwargs)


DEFAULT_STYLE = CellStyle()


@dataclass(frozen=True)
class Cell:
    """One cell's content.

    Attributes:
        value: Display string, either literal text or the stored result of
            the last evaluation of ``formula``
        formula: Formula text starting with ``=``, or empty for literals
        style: Visual attributes
    """
    value: str = ""
    formula: str = ""
    style: CellStyle = DEFAULT_STYLE

    @property
    def is_formula(self) -> bool:
        return bool(self.formula)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "value": self.value,
            "formula": self.formula,
            "style": self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        """Create from dictionary representation."""
        return cls(
            value=str(data.get("value") or ""),
            formula=str(data.get("formula") or ""),
            style=CellStyle.from_dict(data.get("style") or {}),
        )


@dataclass(frozen=True)
class SheetSnapshot:
    """The full mutable state of a sheet.

    Cells absent from ``cells`` are implicitly empty with the default style.
    Snapshots are never modified after construction; the ``with_*`` helpers
    return new snapshots.

    Attributes:
        cells: Mapping of cell identifier to Cell
        column_widths: Mapping of column label to width in px
        row_heights: Mapping of 1-based row number (as a string) to height in px
        total_rows: Number of addressable rows (at least 1)
        total_columns: Number of addressable columns (at least 1)
    """
    cells: Dict[str, Cell] = field(default_factory=dict)
    column_widths: Dict[str, float] = field(default_factory=dict)
    row_heights: Dict[str, float] = field(default_factory=dict)
    total_rows: int = 100
    total_columns: int = 100

    def __post_init__(self) -> None:
        if self.total_rows < 1 or self.total_columns < 1:
            raise ValueError("Sheet dimensions must be positive integers")

    def get_cell(self, identifier: str) -> Cell:
        """Return the cell at identifier, or an empty default cell."""
        return self.cells.get(identifier) or Cell()

    def with_cell(self, identifier: str, cell: Cell) -> "SheetSnapshot":
        """Return a copy with one cell replaced."""
        cells = dict(self.cells)
        cells[identifier] = cell
        return replace(self, cells=cells)

    def with_column_width(self, label: str, width: float) -> "SheetSnapshot":
        """Return a copy with one column width set."""
        widths = dict(self.column_widths)
        widths[label] = width
        return replace(self, column_widths=widths)

    def with_row_height(self, label: str, height: float) -> "SheetSnapshot":
        """Return a copy with one row height set."""
        heights = dict(self.row_heights)
        heights[label] = height
        return replace(self, row_heights=heights)

    def __repr__(self) -> str:
        return (
            f"SheetSnapshot(cells={len(self.cells)}, rows={self.total_rows}, "
            f"cols={self.total_columns})"
        )
