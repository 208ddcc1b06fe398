"""
Tests for SheetStore, the orchestrating state container.

Every mutation should push one history entry before it applies, publish the
new state, and be reversible with undo().
"""

import pytest

from gridcalc.engine import ERROR_TOKEN
from gridcalc.exceptions import MalformedIdentifier
from gridcalc.spreadsheet.model import CellStyle, SheetSnapshot
from gridcalc.spreadsheet.operations import (
    DeleteRow,
    FindAndReplace,
    InsertColumn,
    Redo,
    SetCellFormula,
    SetCellStyle,
    SetCellValue,
    Undo,
    op_from_dict,
)
from gridcalc.store import SheetState, SheetStore


class TestInitialState:

    def test_fresh_sheet_from_settings(self, store):
        snapshot = store.snapshot
        assert snapshot.cells == {}
        assert snapshot.total_rows == 10
        assert snapshot.total_columns == 5
        assert snapshot.column_widths == {label: 100 for label in "ABCDE"}
        assert snapshot.row_heights == {}
        assert not store.can_undo
        assert not store.can_redo
        assert store.selected_cell is None

    def test_explicit_snapshot(self, settings):
        snapshot = SheetSnapshot(total_rows=3, total_columns=2)
        assert SheetStore(snapshot, settings=settings).snapshot is snapshot


class TestCellWrites:

    def test_set_cell_value_creates_default_cell(self, store):
        store.set_cell_value("B2", "hello")
        cell = store.get_cell("B2")
        assert cell.value == "hello"
        assert cell.formula == ""
        assert cell.style == CellStyle()
        assert store.can_undo

    def test_set_cell_value_clears_formula(self, store):
        store.set_cell_formula("A1", "=SUM(B1:B2)")
        store.set_cell_value("A1", "plain")
        assert store.get_cell("A1").formula == ""
        assert store.get_cell("A1").value == "plain"

    def test_set_cell_formula_evaluates_eagerly(self, store):
        store.set_cell_value("A1", "5")
        store.set_cell_value("A2", "7")
        store.set_cell_formula("A3", "=SUM(A1:A2)")
        assert store.get_cell("A3").value == "12"
        assert store.get_cell("A3").formula == "=SUM(A1:A2)"

    def test_general_expression_formula(self, store):
        store.set_cell_value("A1", "5")
        store.set_cell_formula("B1", "=A1*2")
        assert store.get_cell("B1").value == "10"

    def test_dependents_are_not_recomputed(self, store):
        store.set_cell_value("A1", "5")
        store.set_cell_formula("B1", "=SUM(A1:A1)")
        store.set_cell_value("A1", "100")
        assert store.get_cell("B1").value == "5"

    def test_formula_error_is_stored(self, store):
        store.set_cell_formula("A1", "=SUM(A2)")
        assert store.get_cell("A1").value == ERROR_TOKEN

    def test_formula_without_equals_is_literal(self, store):
        store.set_cell_formula("A1", "just text")
        assert store.get_cell("A1").value == "just text"
        assert store.get_cell("A1").formula == ""

    def test_set_cell_style_merges(self, store):
        store.set_cell_value("A1", "x")
        store.set_cell_style("A1", bold=True)
        store.set_cell_style("A1", color="#ff0000")
        style = store.get_cell("A1").style
        assert style.bold is True
        assert style.color == "#ff0000"
        assert store.get_cell("A1").value == "x"

    def test_unknown_style_pushes_no_history(self, store):
        with pytest.raises(ValueError):
            store.set_cell_style("A1", blink=True)
        assert not store.can_undo

    def test_malformed_identifier(self, store):
        with pytest.raises(MalformedIdentifier):
            store.set_cell_value("a1", "x")
        assert not store.can_undo

    def test_out_of_bounds(self, store):
        with pytest.raises(IndexError):
            store.set_cell_value("F1", "x")
        with pytest.raises(IndexError):
            store.set_cell_value("A11", "x")
        assert not store.can_undo

    def test_apply_data_quality(self, store):
        store.set_cell_value("A1", "  hello world ")
        store.apply_data_quality("A1", "trim")
        assert store.get_cell("A1").value == "hello world"
        store.undo()
        assert store.get_cell("A1").value == "  hello world "


class TestSizing:

    def test_set_column_width(self, store):
        store.set_column_width("C", 180)
        assert store.snapshot.column_widths["C"] == 180
        assert store.can_undo

    def test_set_row_height(self, store):
        store.set_row_height("4", 60)
        assert store.snapshot.row_heights == {"4": 60}

    def test_sizes_outside_sheet(self, store):
        with pytest.raises(IndexError):
            store.set_column_width("F", 100)
        with pytest.raises(IndexError):
            store.set_row_height("11", 30)
        with pytest.raises(IndexError):
            store.set_row_height("0", 30)
        assert not store.can_undo


class TestStructuralEdits:

    def test_add_row_shifts_cells(self, store):
        store.set_cell_value("A2", "moved")
        store.add_row(0)
        assert store.get_cell("A3").value == "moved"
        assert store.snapshot.total_rows == 11
        assert store.snapshot.row_heights["2"] == 24

    def test_add_column_uses_default_width(self, settings):
        store = SheetStore(settings=settings.model_copy(update={"default_column_width": 90}))
        store.set_cell_value("B1", "moved")
        store.add_column(0)
        assert store.get_cell("C1").value == "moved"
        assert store.snapshot.column_widths["B"] == 90
        assert store.snapshot.total_columns == 6

    def test_delete_row_and_undo(self, store):
        store.set_cell_value("A1", "keep")
        store.set_cell_value("A2", "drop")
        store.set_cell_value("A3", "shift")
        before = store.snapshot

        store.delete_row(1)
        assert store.get_cell("A2").value == "shift"
        assert "A3" not in store.snapshot.cells

        store.undo()
        assert store.snapshot == before

    def test_delete_column(self, store):
        store.set_cell_value("C1", "x")
        store.delete_column(0)
        assert store.get_cell("B1").value == "x"
        assert store.snapshot.total_columns == 4

    def test_deleting_last_row_is_true_noop(self, settings):
        store = SheetStore(settings=settings.model_copy(update={"default_rows": 1}))
        states = []
        store.subscribe(states.append)
        before = store.snapshot

        store.delete_row(0)

        assert store.snapshot is before
        assert not store.can_undo
        assert states == []

    def test_deleting_last_column_is_true_noop(self, settings):
        store = SheetStore(settings=settings.model_copy(update={"default_columns": 1}))
        store.set_cell_value("A1", "x")
        before = store.snapshot

        store.delete_column(0)

        assert store.snapshot is before
        assert store.get_cell("A1").value == "x"
        store.undo()
        assert not store.can_undo


class TestUndoRedo:

    def test_undo_redo_flags(self, store):
        store.set_cell_value("A1", "1")
        assert store.can_undo and not store.can_redo
        store.undo()
        assert not store.can_undo and store.can_redo
        store.redo()
        assert store.can_undo and not store.can_redo

    def test_undo_on_empty_history_is_noop(self, store, published):
        store.undo()
        store.redo()
        assert published == []

    def test_symmetry_over_mutation_sequence(self, store):
        states = [store.snapshot]
        mutations = [
            lambda: store.set_cell_value("A1", "3"),
            lambda: store.set_cell_formula("A2", "=SUM(A1:A1)"),
            lambda: store.set_cell_style("A1", italic=True),
            lambda: store.set_column_width("B", 140),
            lambda: store.set_row_height("2", 33),
            lambda: store.add_row(0),
            lambda: store.add_column(1),
            lambda: store.delete_row(3),
            lambda: store.delete_column(2),
            lambda: store.find_and_replace("3", "4"),
        ]
        for mutate in mutations:
            mutate()
            states.append(store.snapshot)

        n = len(mutations)
        for k in range(1, n + 1):
            store.undo()
            assert store.snapshot == states[n - k]
        assert not store.can_undo

        for k in range(1, n + 1):
            store.redo()
            assert store.snapshot == states[k]
        assert not store.can_redo

    def test_new_mutation_after_undo_clears_redo(self, store):
        store.set_cell_value("A1", "1")
        store.set_cell_value("A1", "2")
        store.undo()
        store.set_cell_value("B1", "x")
        assert not store.can_redo
        store.redo()
        assert store.get_cell("A1").value == "1"

    def test_history_snapshots_do_not_alias_live_state(self, store):
        store.set_cell_value("A1", "before")
        store.set_cell_style("A1", bold=True)
        store.set_cell_value("A1", "after")
        store.undo()
        assert store.get_cell("A1").value == "before"
        assert store.get_cell("A1").style.bold is True
        store.undo()
        assert store.get_cell("A1").style.bold is False

    def test_history_limit_from_settings(self, settings):
        store = SheetStore(settings=settings.model_copy(update={"history_limit": 2}))
        for value in "abc":
            store.set_cell_value("A1", value)
        store.undo()
        store.undo()
        assert not store.can_undo
        assert store.get_cell("A1").value == "a"


class TestFindAndReplace:

    def test_replaces_values(self, store):
        store.set_cell_value("A1", "apple pie")
        store.set_cell_value("A2", "apple")
        store.find_and_replace("apple", "pear")
        assert store.get_cell("A1").value == "pear pie"
        assert store.get_cell("A2").value == "pear"

    def test_rewritten_formula_is_reevaluated(self, store):
        store.set_cell_value("A1", "5")
        store.set_cell_value("A2", "7")
        store.set_cell_formula("B1", "=SUM(A1:A1)")
        store.find_and_replace("A1:A1", "A2:A2")
        assert store.get_cell("B1").formula == "=SUM(A2:A2)"
        assert store.get_cell("B1").value == "7"

    def test_other_formula_cells_keep_stored_values(self, store):
        store.set_cell_value("A1", "apple")
        store.set_cell_formula("B1", "=UPPER(A1)")
        store.find_and_replace("apple", "pear")
        assert store.get_cell("A1").value == "pear"
        assert store.get_cell("B1").value == "APPLE"

    def test_broken_formula_becomes_error(self, store):
        store.set_cell_formula("B1", "=SUM(A1:A3)")
        store.find_and_replace(":", "")
        assert store.get_cell("B1").formula == "=SUM(A1A3)"
        assert store.get_cell("B1").value == ERROR_TOKEN

    def test_single_undo_step(self, store):
        store.set_cell_value("A1", "cat")
        store.set_cell_value("A2", "cat")
        before = store.snapshot
        store.find_and_replace("cat", "dog")
        store.undo()
        assert store.snapshot == before

    def test_no_match_leaves_history_unchanged(self, store, published):
        store.set_cell_value("A1", "x")
        published.clear()
        depth_before = store.can_undo

        store.find_and_replace("zzz", "y")

        assert store.can_undo == depth_before
        assert published == []
        store.undo()
        assert not store.can_undo

    def test_no_match_still_drops_redo(self, store, published):
        store.set_cell_value("A1", "x")
        store.undo()
        published.clear()

        store.find_and_replace("zzz", "y")

        assert not store.can_redo
        assert not store.can_undo
        assert len(published) == 1
        assert published[0].can_redo is False

    def test_no_match_on_clean_history(self, store):
        store.find_and_replace("zzz", "y")
        assert not store.can_undo

    def test_empty_find_is_ignored(self, store):
        store.set_cell_value("A1", "x")
        store.undo()
        store.find_and_replace("", "y")
        assert store.can_redo
        assert store.get_cell("A1").value == ""


class TestObservers:

    def test_publishes_state_after_mutation(self, store, published):
        store.set_cell_value("A1", "x")
        assert len(published) == 1
        state = published[0]
        assert isinstance(state, SheetState)
        assert state.snapshot.cells["A1"].value == "x"
        assert state.can_undo is True
        assert state.can_redo is False

    def test_undo_and_redo_publish(self, store, published):
        store.set_cell_value("A1", "x")
        store.undo()
        store.redo()
        assert [s.can_redo for s in published] == [False, True, False]

    def test_unsubscribe(self, store):
        states = []
        unsubscribe = store.subscribe(states.append)
        store.set_cell_value("A1", "x")
        unsubscribe()
        store.set_cell_value("A1", "y")
        assert len(states) == 1

    def test_published_snapshot_is_not_mutated_later(self, store, published):
        store.set_cell_value("A1", "x")
        store.set_cell_value("A1", "y")
        assert published[0].snapshot.cells["A1"].value == "x"

    def test_selection(self, store, published):
        store.set_selected_cell("B3")
        store.set_selected_range(["A1", "A2"])
        assert store.selected_cell == "B3"
        assert store.selected_range == ("A1", "A2")
        assert published[-1].selected_range == ("A1", "A2")
        assert not store.can_undo

    def test_clear_selection(self, store):
        store.set_selected_cell("B3")
        store.set_selected_cell(None)
        store.set_selected_range(None)
        assert store.selected_cell is None
        assert store.selected_range is None


class TestLoadAndApply:

    def test_load_replaces_snapshot_and_clears_history(self, store, published):
        store.set_cell_value("A1", "x")
        loaded = SheetSnapshot(total_rows=2, total_columns=2)
        store.load(loaded)
        assert store.snapshot is loaded
        assert not store.can_undo
        assert published[-1].snapshot is loaded

    def test_apply_operations(self, store):
        store.apply(SetCellValue(cell_id="A1", value="4"))
        store.apply(SetCellFormula(cell_id="A2", formula="=SUM(A1:A1)"))
        store.apply(SetCellStyle(cell_id="A2", style={"underline": True}))
        store.apply(InsertColumn(after_index=-1))
        assert store.get_cell("B2").value == "4"
        assert store.get_cell("B2").style.underline is True

        store.apply(Undo())
        assert store.get_cell("A2").value == "4"
        store.apply(Redo())
        store.apply(FindAndReplace(find="4", replace="5"))
        assert store.get_cell("B1").value == "5"
        store.apply(DeleteRow(index=0))
        assert store.get_cell("B1").value == "5"

    def test_apply_from_dict(self, store):
        store.apply(op_from_dict({"type": "SetCellValue", "cell_id": "C3", "value": "z"}))
        assert store.get_cell("C3").value == "z"

    def test_apply_unknown(self, store):
        with pytest.raises(TypeError):
            store.apply("not an operation")  # type: ignore
