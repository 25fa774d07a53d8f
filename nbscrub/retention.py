"""
Retention: which outputs of a cell survive stripping.

The decision for each output follows a fixed precedence:

1. A configured pattern matching the output's rendered text discards it.
2. Otherwise a ``keep_output`` flag or tag in the cell metadata keeps it.
3. Otherwise the notebook-wide default applies.
"""

import re
from typing import Any, Optional, Sequence

from nbscrub.errors import ContradictoryMetadataError, MalformedDocumentError

KEEP_OUTPUT = "keep_output"


def output_text(output: Any) -> Optional[str]:
    """
    Get the rendered text of an output, joined into a single string.

    Args:
        output: Output dictionary from a cell's ``outputs``

    Returns:
        The text, or None for outputs that carry none (errors, unknown types)

    Raises:
        MalformedDocumentError: if a field the output type requires is missing
    """
    if not isinstance(output, dict):
        raise MalformedDocumentError("Cell output is not a JSON object; notebook is malformed.")
    if "output_type" not in output:
        raise MalformedDocumentError(
            "Cell output does not contain an output type; notebook is malformed."
        )
    output_type = output["output_type"]
    if not isinstance(output_type, str):
        raise MalformedDocumentError("Cell output type is not a string; notebook is malformed.")

    if output_type == "stream":
        if "text" not in output:
            raise MalformedDocumentError(
                "Cell output of type 'stream' does not have 'text' key; notebook is malformed."
            )
        text = output["text"]
    elif output_type in ("display_data", "execute_result"):
        data = output.get("data")
        if not isinstance(data, dict):
            raise MalformedDocumentError(
                f"Cell output of type '{output_type}' does not have 'data' key; "
                "notebook is malformed."
            )
        if "text/plain" not in data:
            raise MalformedDocumentError(
                f"Cell output of type '{output_type}' does not have 'text/plain' key "
                "in its 'data' value; notebook is malformed."
            )
        text = data["text/plain"]
    else:
        return None

    if isinstance(text, str):
        return text
    if isinstance(text, list):
        return "".join(line if isinstance(line, str) else "" for line in text)
    raise MalformedDocumentError(
        f"Could not get contents of a cell output of type '{output_type}'."
    )


def output_matches(output: Any, pattern: re.Pattern) -> bool:
    """Check whether the output's rendered text matches `pattern`."""
    text = output_text(output)
    if text is None:
        return False
    return pattern.search(text) is not None


def has_keep_output_tag(metadata: dict[str, Any]) -> bool:
    tags = metadata.get("tags")
    return isinstance(tags, list) and KEEP_OUTPUT in tags


def determine_keep_output(
    metadata: Any,
    outputs: Sequence[Any],
    default: bool,
    pattern: Optional[re.Pattern] = None,
) -> list[bool]:
    """
    Decide, for each output of a cell, whether to keep it.

    Args:
        metadata: The cell's metadata (may be None)
        outputs: The cell's outputs
        default: Whether outputs are kept when nothing else decides
        pattern: Compiled regex; outputs whose text matches are always dropped

    Returns:
        One boolean per output, in order

    Raises:
        ContradictoryMetadataError: if ``keep_output`` is false but tagged
        MalformedDocumentError: if an output lacks its text while a pattern is set
    """
    if not isinstance(metadata, dict):
        return [default] * len(outputs)

    has_flag = KEEP_OUTPUT in metadata
    flag = metadata.get(KEEP_OUTPUT)
    flag_value = flag if isinstance(flag, bool) else False
    has_tag = has_keep_output_tag(metadata)

    if has_flag and not flag_value and has_tag:
        raise ContradictoryMetadataError(
            "cell metadata contradicts tags: `keep_output` is false, "
            "but `keep_output` in tags"
        )

    keep = has_flag or has_tag
    if pattern is None:
        return [True if keep else default] * len(outputs)

    result = []
    for output in outputs:
        if output_matches(output, pattern):
            result.append(False)
        elif keep:
            result.append(True)
        else:
            result.append(default)
    return result
