"""
Cell-level stripping: dropping empty cells, filtering outputs, clearing counts.
"""

from typing import Any, Optional, Sequence

from nbscrub.errors import MalformedDocumentError
from nbscrub.keys import pop_recursive

COUNT_KEYS = ("prompt_number", "execution_count")


def source_lines(cell: dict[str, Any]) -> list[str]:
    """
    Get a cell's source as a list of lines.

    Non-string entries of a list source are treated as empty lines.

    Raises:
        MalformedDocumentError: if the source is missing or not a string/list
    """
    if "source" not in cell:
        raise MalformedDocumentError("Cell does not have a 'source' key; notebook is malformed.")
    source = cell["source"]
    if isinstance(source, str):
        return [source]
    if isinstance(source, list):
        return [line if isinstance(line, str) else "" for line in source]
    raise MalformedDocumentError(
        f"Cell source must be a string or an array of strings, got {type(source).__name__}."
    )


def should_drop_cell(cell: Any, drop_empty_cells: bool) -> bool:
    """True if empty-cell dropping is on and the cell's source is only whitespace."""
    if not drop_empty_cells or not isinstance(cell, dict):
        return False
    return all(not line.strip() for line in source_lines(cell))


def strip_cell(
    cell: dict[str, Any],
    keep_count: bool,
    cell_keys: Sequence[str],
    keep: Optional[Sequence[bool]] = None,
) -> None:
    """
    Strip a single cell in place.

    Args:
        cell: Cell dictionary
        keep_count: Leave execution counts alone
        cell_keys: Dotted keys to remove from the cell
        keep: One decision per output; None or empty removes every output
    """
    if "outputs" in cell:
        outputs = cell["outputs"]
        if not isinstance(outputs, list):
            raise MalformedDocumentError("Cell outputs must be an array; notebook is malformed.")

        if keep:
            outputs[:] = [
                output for i, output in enumerate(outputs)
                if i < len(keep) and keep[i]
            ]
        else:
            outputs.clear()

        if not keep_count:
            for output in outputs:
                if not isinstance(output, dict):
                    raise MalformedDocumentError(
                        "Cell output is not a JSON object; notebook is malformed."
                    )
                output.pop("execution_count", None)

    if not keep_count:
        for key in COUNT_KEYS:
            if key in cell:
                cell[key] = None

    for key in cell_keys:
        pop_recursive(cell, key)
