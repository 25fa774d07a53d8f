"""
Notebook: .ipynb text <-> JSON tree, and text-level stripping.
"""

import json
from typing import Any, Iterable, Optional

from nbscrub.errors import MalformedDocumentError
from nbscrub.stripper import StripOptions, strip_notebook

# repr of an empty ipywidgets Output() left behind after the widget state is gone
WIDGET_OUTPUT_PATTERN = r"^Output\(\);?$"


def loads(contents: str) -> dict[str, Any]:
    """
    Parse notebook text.

    Raises:
        MalformedDocumentError: if the text is not JSON or not a JSON object
    """
    try:
        nb = json.loads(contents)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"JSON was not well-formatted: {e}") from e
    if not isinstance(nb, dict):
        raise MalformedDocumentError("Notebook must be a JSON object.")
    return nb


def dumps(nb: dict[str, Any], trailing_newline: bool = False) -> str:
    """
    Serialize a notebook the way Jupyter writes it: one-space indent, keys in order.

    Args:
        nb: Notebook dictionary
        trailing_newline: End the text with a newline
    """
    text = json.dumps(nb, indent=1, ensure_ascii=False)
    if trailing_newline and not text.endswith("\n"):
        text += "\n"
    return text


def strip_text(contents: str, options: Optional[StripOptions] = None) -> str:
    """
    Strip notebook text and return the new text.

    The result ends with a newline if and only if `contents` did, so an
    already-clean notebook comes back byte-for-byte unchanged.
    """
    nb = strip_notebook(loads(contents), options)
    return dumps(nb, trailing_newline=contents.endswith("\n"))


def stripout(
    contents: str,
    keep_output: bool,
    keep_count: bool,
    extra_keys: Iterable[str],
    drop_empty_cells: bool,
    strip_regex: Optional[str] = WIDGET_OUTPUT_PATTERN,
) -> str:
    """
    Strip output from a notebook (string) and return a notebook (string).

    Entry point for embedding: callers pass already-merged settings and get
    the stripped text back. Widget ``Output()`` placeholders are scrubbed
    unless `strip_regex` is overridden or set to None.
    """
    options = StripOptions(
        keep_output=keep_output,
        keep_count=keep_count,
        extra_keys=list(extra_keys),
        drop_empty_cells=drop_empty_cells,
        strip_regex=strip_regex,
    )
    return strip_text(contents, options)
