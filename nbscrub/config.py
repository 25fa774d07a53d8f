"""
Configuration: built-in defaults, .git-nbconfig.yaml and command-line overrides.

Settings are merged in order of increasing precedence:
defaults < .git-nbconfig.yaml < command line.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, ValidationError

from nbscrub.errors import ConfigurationError
from nbscrub.stripper import StripOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".git-nbconfig.yaml"
CONFIG_SECTION = "nbscrub"

DEFAULT_EXTRA_KEYS = (
    "metadata.signature",
    "metadata.vscode",
    "metadata.widgets",
    "cell.metadata.collapsed",
    "cell.metadata.ExecuteTime",
    "cell.metadata.execution",
    "cell.metadata.heading_collapsed",
    "cell.metadata.hidden",
    "cell.metadata.scrolled",
)


class FileSettings(BaseModel):
    """The ``nbscrub`` section of .git-nbconfig.yaml. Unset fields defer to defaults."""
    keep_output: Optional[bool] = None
    keep_count: Optional[bool] = None
    drop_empty_cells: Optional[bool] = None
    extra_keys: Optional[list[str]] = None
    keep_keys: Optional[list[str]] = None
    strip_regex: Optional[str] = None


def find_git_root(start: Optional[Path] = None) -> Optional[Path]:
    """Find the closest directory at or above `start` containing ``.git``."""
    directory = Path(start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        logger.debug("Looking for .git in %s", candidate)
        # worktrees and submodules use a .git file instead of a directory
        if (candidate / ".git").exists():
            return candidate
    return None


def load_nbconfig(path: Path) -> Optional[FileSettings]:
    """
    Load settings from a .git-nbconfig.yaml file.

    Returns:
        The settings, or None if the file has no ``nbscrub`` section

    Raises:
        ConfigurationError: if the file cannot be read, parsed or validated
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not open {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError(f"Could not parse {path}: expected a mapping at the top level")

    section = data.get(CONFIG_SECTION)
    if section is None:
        return None
    try:
        settings = FileSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid '{CONFIG_SECTION}' section in {path}: {e}") from e
    logger.debug("Loaded %s: %s", path, settings)
    return settings


def find_nbconfig(start: Optional[Path] = None) -> Optional[FileSettings]:
    """
    Find and load the .git-nbconfig.yaml next to the enclosing git checkout.

    Args:
        start: Directory to search from (default: current directory)

    Returns:
        The settings, or None when outside a checkout or no file exists
    """
    root = find_git_root(start)
    if root is None:
        logger.debug("Did not find a git directory, skipping loading yaml config")
        return None

    path = root / CONFIG_FILENAME
    if not path.is_file():
        logger.debug("Could not find %s, skipping loading settings from yaml.", path)
        return None
    return load_nbconfig(path)


def _remove_keys(extra_keys: list[str], keep_keys: Iterable[str]) -> list[str]:
    keep = set(keep_keys)
    return [key for key in extra_keys if key not in keep]


def merge_settings(
    file_settings: Optional[FileSettings] = None,
    extra_keys: Iterable[str] = (),
    keep_keys: Iterable[str] = (),
    keep_output: bool = False,
    keep_count: bool = False,
    drop_empty_cells: bool = False,
    strip_regex: Optional[str] = None,
    defaults: Iterable[str] = DEFAULT_EXTRA_KEYS,
) -> StripOptions:
    """
    Merge defaults, file settings and explicit overrides into StripOptions.

    Extra keys accumulate from every source; keep keys remove all matching
    entries accumulated up to that point. Boolean overrides can only turn a
    setting on.

    Args:
        file_settings: Settings from .git-nbconfig.yaml, if any
        extra_keys: Additional keys to strip
        keep_keys: Keys not to strip, even if in defaults or extra keys
        keep_output: Keep outputs
        keep_count: Keep execution counts
        drop_empty_cells: Remove cells with blank source
        strip_regex: Regex for outputs to discard; overrides the file's
        defaults: Extra keys stripped unless kept
    """
    options = StripOptions(extra_keys=list(defaults))

    if file_settings is not None:
        if file_settings.keep_output is not None:
            options.keep_output = file_settings.keep_output
        if file_settings.keep_count is not None:
            options.keep_count = file_settings.keep_count
        if file_settings.drop_empty_cells is not None:
            options.drop_empty_cells = file_settings.drop_empty_cells
        if file_settings.strip_regex is not None:
            options.strip_regex = file_settings.strip_regex
        options.extra_keys.extend(file_settings.extra_keys or [])
        options.extra_keys = _remove_keys(options.extra_keys, file_settings.keep_keys or [])

    options.extra_keys.extend(extra_keys)
    options.extra_keys = _remove_keys(options.extra_keys, keep_keys)

    options.keep_output = options.keep_output or keep_output
    options.keep_count = options.keep_count or keep_count
    options.drop_empty_cells = options.drop_empty_cells or drop_empty_cells
    if strip_regex is not None:
        options.strip_regex = strip_regex

    logger.debug(
        "Using keep_count: %s keep_output: %s drop_empty_cells: %s extra_keys: %s",
        options.keep_count,
        options.keep_output,
        options.drop_empty_cells,
        options.extra_keys,
    )
    return options

