"""
Dotted key paths: splitting extra keys and removing nested values.
"""

from typing import Any, Iterable

from nbscrub.errors import ConfigurationError


def pop_recursive(d: Any, key: str) -> bool:
    """
    Remove the value addressed by a dotted key from a mapping.

    A literal key always wins: for ``"a.b"`` the top-level key ``"a.b"`` is
    removed if present, and only otherwise is ``"b"`` removed from ``d["a"]``.

    Args:
        d: Mapping to remove from; anything else is left alone
        key: Literal or dotted key

    Returns:
        True if something was removed
    """
    if not isinstance(d, dict):
        return False
    if key in d:
        del d[key]
        return True
    if "." not in key:
        return False
    head, tail = key.split(".", 1)
    if head not in d:
        return False
    return pop_recursive(d[head], tail)


def split_extra_keys(extra_keys: Iterable[str]) -> tuple[list[str], list[str]]:
    """
    Split namespaced extra keys into notebook metadata keys and cell keys.

    ``"metadata.signature"`` becomes the metadata key ``"signature"`` and
    ``"cell.metadata.scrolled"`` the cell key ``"metadata.scrolled"``.

    Raises:
        ConfigurationError: if an entry is not ``metadata.<key>`` or ``cell.<key>``
    """
    metadata_keys: list[str] = []
    cell_keys: list[str] = []
    for key in extra_keys:
        if "." not in key:
            raise ConfigurationError(
                f"extra key '{key}' does not contain a '.' - "
                "must be of the form cell.foo or metadata.bar"
            )
        namespace, subkey = key.split(".", 1)
        if namespace == "metadata":
            metadata_keys.append(subkey)
        elif namespace == "cell":
            cell_keys.append(subkey)
        else:
            raise ConfigurationError(
                f"extra key '{key}' must be of the form cell.foo or metadata.bar"
            )
    return metadata_keys, cell_keys
