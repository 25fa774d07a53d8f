"""
Stripper: removes outputs, execution counts and extra keys from a notebook.
"""

import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, Field

from nbscrub.cells import should_drop_cell, strip_cell
from nbscrub.errors import ConfigurationError, MalformedDocumentError
from nbscrub.keys import pop_recursive, split_extra_keys
from nbscrub.retention import determine_keep_output

logger = logging.getLogger(__name__)


class StripOptions(BaseModel):
    """Settings for a single stripping pass."""
    keep_output: bool = False
    keep_count: bool = False
    extra_keys: list[str] = Field(default_factory=list)
    drop_empty_cells: bool = False
    strip_regex: Optional[str] = None


def compile_pattern(strip_regex: Optional[str]) -> Optional[re.Pattern]:
    """Compile the strip regex, or return None if there is none."""
    if strip_regex is None:
        return None
    try:
        return re.compile(strip_regex)
    except re.error as e:
        raise ConfigurationError(f"'{strip_regex}' is not a valid regex: {e}") from e


def strip_notebook(nb: dict[str, Any], options: Optional[StripOptions] = None) -> dict[str, Any]:
    """
    Strip a notebook in place.

    Processing stops at the first error; cells handled before it stay modified.

    Args:
        nb: Notebook dictionary as loaded from JSON
        options: Stripping settings (defaults strip all outputs and counts)

    Returns:
        The same notebook, for chaining
    """
    options = options or StripOptions()
    logger.debug(
        "keep-output: %s, keep-count: %s, extra-keys: %s, drop-empty-cells: %s, strip-regex: %r",
        options.keep_output,
        options.keep_count,
        options.extra_keys,
        options.drop_empty_cells,
        options.strip_regex,
    )

    metadata_keys, cell_keys = split_extra_keys(options.extra_keys)
    pattern = compile_pattern(options.strip_regex)

    metadata = nb.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise MalformedDocumentError("Notebook metadata must be an object; notebook is malformed.")

    keep_output = options.keep_output or (metadata or {}).get("keep_output") is True

    if metadata is not None:
        for key in metadata_keys:
            pop_recursive(metadata, key)

    if "cells" not in nb:
        return nb
    cells = nb["cells"]
    if not isinstance(cells, list):
        raise MalformedDocumentError("Notebook cells must be an array; notebook is malformed.")

    if options.drop_empty_cells:
        before = len(cells)
        cells[:] = [cell for cell in cells if not should_drop_cell(cell, True)]
        logger.debug("Dropped %d empty cells", before - len(cells))

    for cell in cells:
        if not isinstance(cell, dict):
            logger.debug("Skipping non-object cell")
            continue

        keep = None
        if "outputs" in cell:
            outputs = cell["outputs"]
            if not isinstance(outputs, list):
                raise MalformedDocumentError(
                    "Cell outputs must be an array; notebook is malformed."
                )
            keep = determine_keep_output(cell.get("metadata"), outputs, keep_output, pattern)

        strip_cell(cell, options.keep_count, cell_keys, keep)

    return nb
