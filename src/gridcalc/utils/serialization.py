"""
Snapshot serialization utilities.

Converts a SheetSnapshot to and from the five-field form the browser app
persists (``cells``, ``columnWidths``, ``rowHeights``, ``totalRows``,
``totalColumns``). Written blobs carry a version; blobs without one (saved
by the browser app itself) are accepted as the current version.

Loading validates field types and fills defaults the same way the app does
on load: at least one row and column, and a width for every column.
"""

import json
from typing import Any, Dict

from gridcalc.exceptions import MalformedIdentifier, SnapshotFormatError
from gridcalc.spreadsheet.model import (
    Cell,
    SheetSnapshot,
    column_index,
    column_label,
    from_identifier,
)
from gridcalc.spreadsheet.structure import DEFAULT_COLUMN_WIDTH


# Current serialization format version
SERIALIZATION_VERSION = "1.0"

# Dimensions used when a blob does not record them
DEFAULT_DIMENSION = 10


def serialize(snapshot: SheetSnapshot) -> Dict[str, Any]:
    """Serialize a snapshot to a JSON-serializable dictionary.

    Args:
        snapshot: The snapshot to serialize

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If snapshot is not a SheetSnapshot instance

    Example:
        >>> data = serialize(SheetSnapshot(total_rows=5, total_columns=3))
        >>> data["totalRows"]
        5
    """
    if not isinstance(snapshot, SheetSnapshot):
        raise TypeError(f"Expected SheetSnapshot, got {type(snapshot)}")

    return {
        "version": SERIALIZATION_VERSION,
        "cells": {cell_id: cell.to_dict() for cell_id, cell in snapshot.cells.items()},
        "columnWidths": dict(snapshot.column_widths),
        "rowHeights": dict(snapshot.row_heights),
        "totalRows": snapshot.total_rows,
        "totalColumns": snapshot.total_columns,
    }


def deserialize(
    data: Dict[str, Any],
    default_column_width: float = DEFAULT_COLUMN_WIDTH,
) -> SheetSnapshot:
    """Deserialize a snapshot from a dictionary.

    Missing fields are defaulted: no cells, no row heights, 10 rows and 10
    columns. Dimensions below 1 are raised to 1, and every column without a
    width gets ``default_column_width``.

    Args:
        data: Dictionary containing serialized snapshot data
        default_column_width: Width filled in for columns without one

    Returns:
        Reconstructed SheetSnapshot instance

    Raises:
        SnapshotFormatError: If data has an unsupported version or fields of
            the wrong type
        TypeError: If data is not a dictionary
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    version = data.get("version", SERIALIZATION_VERSION)
    if version != SERIALIZATION_VERSION:
        raise SnapshotFormatError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    total_rows = max(1, _dimension(data, "totalRows"))
    total_columns = max(1, _dimension(data, "totalColumns"))

    raw_cells = _mapping(data, "cells")
    cells: Dict[str, Cell] = {}
    for cell_id, raw_cell in raw_cells.items():
        if not isinstance(raw_cell, dict):
            raise SnapshotFormatError(f"Cell {cell_id!r} must be an object")
        try:
            from_identifier(cell_id)
            cells[cell_id] = Cell.from_dict(raw_cell)
        except (MalformedIdentifier, ValueError, TypeError) as e:
            raise SnapshotFormatError(f"Invalid cell {cell_id!r}: {e}") from e

    column_widths = _sizes(data, "columnWidths")
    for label in column_widths:
        try:
            column_index(label)
        except MalformedIdentifier as e:
            raise SnapshotFormatError(f"Invalid column label {label!r}") from e
    for col in range(total_columns):
        column_widths.setdefault(column_label(col), default_column_width)

    row_heights = _sizes(data, "rowHeights")
    for label in row_heights:
        if not label.isdigit() or int(label) < 1:
            raise SnapshotFormatError(f"Invalid row label {label!r}")

    return SheetSnapshot(
        cells=cells,
        column_widths=column_widths,
        row_heights=row_heights,
        total_rows=total_rows,
        total_columns=total_columns,
    )


def _dimension(data: Dict[str, Any], key: str) -> int:
    value = data.get(key) or DEFAULT_DIMENSION
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotFormatError(f"'{key}' must be a number, got {value!r}")
    return int(value)


def _mapping(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise SnapshotFormatError(f"'{key}' must be an object")
    return value


def _sizes(data: Dict[str, Any], key: str) -> Dict[str, float]:
    sizes: Dict[str, float] = {}
    for label, size in _mapping(data, key).items():
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            raise SnapshotFormatError(f"'{key}' entry {label!r} must be a number")
        sizes[str(label)] = size
    return sizes


def to_json(snapshot: SheetSnapshot, **kwargs) -> str:
    """Serialize a snapshot to a JSON string.

    Args:
        snapshot: The snapshot to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)

    Returns:
        JSON string representation of the snapshot
    """
    return json.dumps(serialize(snapshot), **kwargs)


def from_json(json_str: str, **kwargs) -> SheetSnapshot:
    """Deserialize a snapshot from a JSON string.

    Args:
        json_str: JSON string containing a serialized snapshot
        **kwargs: Passed through to deserialize()

    Returns:
        Reconstructed SheetSnapshot instance

    Raises:
        SnapshotFormatError: If JSON is malformed or not an object, or the
            snapshot structure is invalid
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotFormatError("Serialized snapshot must be a JSON object")
    return deserialize(data, **kwargs)
