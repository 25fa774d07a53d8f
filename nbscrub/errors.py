"""
Exceptions raised while stripping a notebook.
"""


class StripError(Exception):
    """Base class for all errors raised by nbscrub."""


class ConfigurationError(StripError):
    """Invalid options: a malformed extra key, a bad regex or config file."""


class MalformedDocumentError(StripError):
    """The notebook is missing a field or holds the wrong type of value."""


class ContradictoryMetadataError(StripError):
    """A cell's `keep_output` flag is false but its tags ask to keep output."""
