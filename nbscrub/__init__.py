"""
nbscrub: Strip outputs, execution counts and volatile metadata from Jupyter notebooks.

This package turns notebooks into a deterministic, diff-friendly form:
- Cell outputs are removed unless the notebook or cell asks to keep them
- Execution counts are cleared
- Configurable metadata keys are removed
- Stripping is idempotent, so it is safe to run as a git filter
"""

from nbscrub.errors import (
    StripError,
    ConfigurationError,
    MalformedDocumentError,
    ContradictoryMetadataError,
)
from nbscrub.keys import pop_recursive, split_extra_keys
from nbscrub.retention import determine_keep_output
from nbscrub.cells import should_drop_cell, strip_cell
from nbscrub.stripper import StripOptions, strip_notebook
from nbscrub.notebook import loads, dumps, strip_text, stripout, WIDGET_OUTPUT_PATTERN
from nbscrub.config import DEFAULT_EXTRA_KEYS, find_nbconfig, merge_settings

__version__ = "0.1.0"
__all__ = [
    "StripError",
    "ConfigurationError",
    "MalformedDocumentError",
    "ContradictoryMetadataError",
    "pop_recursive",
    "split_extra_keys",
    "determine_keep_output",
    "should_drop_cell",
    "strip_cell",
    "StripOptions",
    "strip_notebook",
    "loads",
    "dumps",
    "strip_text",
    "stripout",
    "WIDGET_OUTPUT_PATTERN",
    "DEFAULT_EXTRA_KEYS",
    "find_nbconfig",
    "merge_settings",
]
