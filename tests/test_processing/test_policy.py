"""Tests for per-cell policy decisions."""

import pytest

from nbscrub.models import CodeCell, IdAction, MarkdownCell, Notebook, RawCell, Settings
from nbscrub.processing.policy import (
    cell_tags,
    effective_drop_output,
    is_clear_exec_count,
    is_clear_id,
    needs_id_update,
    new_cell_id,
    should_clear_output,
    should_drop_cell,
    source_is_empty,
)


class TestSourceIsEmpty:
    """Tests for blank source detection."""

    @pytest.mark.parametrize("source", ["", "  \n\t", [], ["", "   ", "\n"]])
    def test_blank(self, source):
        """Test whitespace-only sources are empty."""
        assert source_is_empty(source)

    @pytest.mark.parametrize("source", ["x", ["", "x = 1"], ["\n", "# note"]])
    def test_not_blank(self, source):
        """Test any visible character makes a source non-empty."""
        assert not source_is_empty(source)


class TestShouldDropCell:
    """Tests for should_drop_cell."""

    def test_empty_cells_kept_by_default(self):
        """Test empty cells survive unless drop_empty_cells is set."""
        cell = CodeCell(source="")
        assert not should_drop_cell(cell, False, frozenset())
        assert should_drop_cell(cell, True, frozenset())

    def test_tagged_cell(self):
        """Test a cell carrying a drop tag is dropped."""
        cell = RawCell(metadata={"tags": ["scratch", "remove"]}, source="notes")
        assert should_drop_cell(cell, False, frozenset({"remove"}))
        assert not should_drop_cell(cell, False, frozenset({"other"}))

    def test_non_string_tags_ignored(self):
        """Test malformed tag entries never match."""
        cell = MarkdownCell(metadata={"tags": [1, None, "ok"]}, source="text")
        assert cell_tags(cell) == ["ok"]
        assert not should_drop_cell(cell, False, frozenset({"1"}))

    def test_non_object_metadata(self):
        """Test cells with malformed metadata carry no tags."""
        cell = CodeCell(metadata=[], source="x")
        assert cell_tags(cell) == []
        assert not should_drop_cell(cell, False, frozenset({"remove"}))


class TestShouldClearOutput:
    """Tests for should_clear_output."""

    def test_plain_cell(self):
        """Test outputs follow the drop_output policy."""
        cell = CodeCell(outputs=[{"output_type": "stream"}])
        assert should_clear_output(cell, True, False)
        assert not should_clear_output(cell, False, False)

    def test_keep_output_key(self):
        """Test a keep_output metadata key protects the cell whatever its value."""
        cell = CodeCell(metadata={"keep_output": False})
        assert not should_clear_output(cell, True, False)

    def test_keep_output_tag(self):
        """Test a keep_output tag protects the cell."""
        cell = CodeCell(metadata={"tags": ["keep_output"]})
        assert not should_clear_output(cell, True, False)

    def test_init_cell_kept(self):
        """Test init cells keep their output unless strip_init_cell is set."""
        cell = CodeCell(metadata={"init_cell": True})
        assert not should_clear_output(cell, True, False)
        assert should_clear_output(cell, True, True)

    def test_init_cell_false_clears(self):
        """Test a false init_cell marker clears even when outputs are kept."""
        cell = CodeCell(metadata={"init_cell": False})
        assert should_clear_output(cell, False, False)

    def test_non_object_metadata(self):
        """Test malformed metadata falls back to drop_output."""
        assert should_clear_output(CodeCell(metadata=[]), True, False)
        assert not should_clear_output(CodeCell(metadata=[]), False, False)


class TestEffectiveDropOutput:
    """Tests for the notebook-level keep_output switch."""

    def test_notebook_keep_output(self):
        """Test metadata.keep_output true disables output clearing."""
        nb = Notebook(metadata={"keep_output": True})
        assert not effective_drop_output(nb, Settings())

    def test_only_true_counts(self):
        """Test other values of keep_output are ignored."""
        nb = Notebook(metadata={"keep_output": "yes"})
        assert effective_drop_output(nb, Settings())

    def test_settings_respected(self):
        """Test a disabled policy stays disabled."""
        assert not effective_drop_output(Notebook(), Settings(drop_output=False))


class TestExecutionCounts:
    """Tests for is_clear_exec_count."""

    def test_clear_cell(self):
        """Test a cell without any counts is clear."""
        assert is_clear_exec_count(CodeCell(outputs=[{"output_type": "stream"}]))

    def test_cell_count(self):
        """Test the cell's own count is detected."""
        assert not is_clear_exec_count(CodeCell(execution_count=3))

    def test_output_count(self):
        """Test a count left in an output is detected."""
        cell = CodeCell(outputs=[{"output_type": "execute_result", "execution_count": 3}])
        assert not is_clear_exec_count(cell)

    @pytest.mark.parametrize("value", [None, True, "3"])
    def test_non_numeric_output_count(self, value):
        """Test only numeric output counts are counted."""
        cell = CodeCell(outputs=[{"output_type": "execute_result", "execution_count": value}])
        assert is_clear_exec_count(cell)


class TestCellIds:
    """Tests for id policy helpers."""

    def test_is_clear_id(self):
        """Test absent ids and positional ids are clear."""
        assert is_clear_id(CodeCell(), 3)
        assert is_clear_id(CodeCell(id="3"), 3)
        assert not is_clear_id(CodeCell(id="abc"), 3)

    def test_keep_never_updates(self):
        """Test KEEP leaves every id alone."""
        assert not needs_id_update(CodeCell(id="abc"), 0, IdAction.KEEP)
        assert not needs_id_update(CodeCell(), 0, IdAction.KEEP)

    def test_drop(self):
        """Test DROP updates any cell with an id."""
        assert needs_id_update(CodeCell(id="0"), 0, IdAction.DROP)
        assert not needs_id_update(CodeCell(), 0, IdAction.DROP)
        assert new_cell_id(0, IdAction.DROP) is None

    def test_sequential(self):
        """Test SEQUENTIAL updates missing and non-positional ids."""
        assert needs_id_update(CodeCell(), 0, IdAction.SEQUENTIAL)
        assert needs_id_update(CodeCell(id="abc"), 1, IdAction.SEQUENTIAL)
        assert not needs_id_update(CodeCell(id="1"), 1, IdAction.SEQUENTIAL)
        assert new_cell_id(4, IdAction.SEQUENTIAL) == "4"
