"""Shared pytest configuration and fixtures for gridcalc tests."""

import pytest

from gridcalc.config import Settings
from gridcalc.spreadsheet.model import Cell
from gridcalc.store import SheetStore


def _make_cells(values):
    return {cell_id: Cell(value=value) for cell_id, value in values.items()}


@pytest.fixture
def make_cells():
    """Build a cell map from identifier -> display value."""
    return _make_cells


@pytest.fixture
def settings() -> Settings:
    return Settings(
        default_rows=10,
        default_columns=5,
        default_column_width=100,
        default_row_height=24,
    )


@pytest.fixture
def store(settings) -> SheetStore:
    return SheetStore(settings=settings)


@pytest.fixture
def published(store) -> list:
    """States published by the store fixture, in order."""
    states: list = []
    store.subscribe(states.append)
    return states
