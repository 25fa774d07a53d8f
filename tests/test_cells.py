"""
Tests for cell-level stripping.
"""

import pytest

from nbscrub.cells import should_drop_cell, source_lines, strip_cell
from nbscrub.errors import MalformedDocumentError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _code_cell(source, outputs=None, execution_count=None, metadata=None, **extra) -> dict:
    cell = {
        "cell_type": "code",
        "execution_count": execution_count,
        "metadata": metadata if metadata is not None else {},
        "outputs": outputs if outputs is not None else [],
        "source": source,
    }
    cell.update(extra)
    return cell


def _markdown_cell(source) -> dict:
    return {"cell_type": "markdown", "metadata": {}, "source": source}


def _stream(text: str) -> dict:
    return {"name": "stdout", "output_type": "stream", "text": [text]}


def _execute_result(text: str, execution_count: int) -> dict:
    return {
        "data": {"text/plain": [text]},
        "execution_count": execution_count,
        "metadata": {},
        "output_type": "execute_result",
    }


# ---------------------------------------------------------------------------
# Dropping empty cells
# ---------------------------------------------------------------------------

class TestShouldDropCell:

    def test_whitespace_lines_are_dropped(self):
        """A source made only of whitespace lines counts as empty."""
        assert should_drop_cell(_code_cell(["   ", "\n"]), True) is True

    def test_code_is_kept(self):
        assert should_drop_cell(_code_cell(["x"]), True) is False

    def test_empty_list_is_dropped(self):
        assert should_drop_cell(_code_cell([]), True) is True

    def test_string_source(self):
        """A source given as one string is checked the same way."""
        assert should_drop_cell(_markdown_cell(" \n\t"), True) is True
        assert should_drop_cell(_markdown_cell("# Title"), True) is False

    def test_one_non_blank_line_keeps_cell(self):
        assert should_drop_cell(_code_cell(["\n", "  y = 1\n", ""]), True) is False

    def test_disabled(self):
        """Nothing is dropped unless empty-cell dropping is on."""
        assert should_drop_cell(_code_cell([]), False) is False

    def test_non_string_lines_count_as_empty(self):
        assert should_drop_cell(_code_cell([None, 3]), True) is True

    def test_non_mapping_cell_is_not_dropped(self):
        """Malformed cells are left for the stripper to skip."""
        assert should_drop_cell("not a cell", True) is False

    def test_missing_source(self):
        with pytest.raises(MalformedDocumentError):
            should_drop_cell({"cell_type": "code"}, True)

    def test_wrong_source_type(self):
        """A source that is neither string nor list is malformed."""
        with pytest.raises(MalformedDocumentError):
            should_drop_cell(_code_cell({"a": 1}), True)

    def test_source_lines(self):
        assert source_lines({"source": "a\nb"}) == ["a\nb"]
        assert source_lines({"source": ["a\n", 1]}) == ["a\n", ""]


# ---------------------------------------------------------------------------
# Stripping a cell
# ---------------------------------------------------------------------------

class TestStripCell:

    def test_filters_outputs_by_position(self):
        """Outputs are kept by position and their order is preserved."""
        outputs = [_stream("a"), _stream("b"), _stream("c")]
        cell = _code_cell(["x"], outputs=outputs, execution_count=3)
        strip_cell(cell, True, [], [True, False, True])

        assert [o["text"] for o in cell["outputs"]] == [["a"], ["c"]]
        assert cell["execution_count"] == 3

    def test_no_decisions_strips_every_output(self):
        """Missing decisions remove every output."""
        cell = _code_cell(["x"], outputs=[_stream("a")])
        strip_cell(cell, True, [], None)
        assert cell["outputs"] == []

    def test_empty_decisions_strips_every_output(self):
        cell = _code_cell(["x"], outputs=[_stream("a")])
        strip_cell(cell, True, [], [])
        assert cell["outputs"] == []

    def test_outputs_list_is_mutated_in_place(self):
        outputs = [_stream("a"), _stream("b")]
        cell = _code_cell(["x"], outputs=outputs)
        strip_cell(cell, True, [], [False, True])
        assert cell["outputs"] is outputs
        assert outputs == [_stream("b")]

    def test_clears_counts(self):
        """The cell count becomes null and kept outputs lose theirs."""
        cell = _code_cell(["1"], outputs=[_execute_result("1", 7)], execution_count=7)
        strip_cell(cell, False, [], [True])

        assert cell["execution_count"] is None
        assert "execution_count" in cell
        assert "execution_count" not in cell["outputs"][0]

    def test_clears_prompt_number(self):
        """Old-style prompt_number is cleared like execution_count."""
        cell = {"cell_type": "code", "prompt_number": 4, "input": "1", "outputs": []}
        strip_cell(cell, False, [], None)
        assert cell["prompt_number"] is None
        assert "execution_count" not in cell

    def test_keep_count(self):
        cell = _code_cell(["1"], outputs=[_execute_result("1", 7)], execution_count=7)
        strip_cell(cell, True, [], [True])

        assert cell["execution_count"] == 7
        assert cell["outputs"][0]["execution_count"] == 7

    def test_does_not_add_counts(self):
        """Markdown cells do not gain count or output fields."""
        cell = _markdown_cell(["# Title"])
        strip_cell(cell, False, [], None)
        assert "execution_count" not in cell
        assert "outputs" not in cell

    def test_removes_cell_keys(self):
        """Flat and dotted cell keys are removed; missing ones are ignored."""
        cell = _code_cell(["x"], metadata={"scrolled": True, "tags": ["a"]}, id="abc")
        strip_cell(cell, False, ["metadata.scrolled", "id", "metadata.missing"], None)

        assert cell["metadata"] == {"tags": ["a"]}
        assert "id" not in cell

    def test_outputs_must_be_a_list(self):
        with pytest.raises(MalformedDocumentError):
            strip_cell(_code_cell(["x"], outputs={"0": _stream("a")}), False, [], None)

    def test_kept_output_must_be_an_object(self):
        """Clearing counts on a kept non-object output is malformed."""
        cell = _code_cell(["x"], outputs=["junk"])
        with pytest.raises(MalformedDocumentError):
            strip_cell(cell, False, [], [True])
