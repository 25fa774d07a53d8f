"""
CLI interface for nbscrub.

Strips notebooks in place by default; works as a git clean/textconv filter
when reading stdin or with --textconv.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from nbscrub import __version__
from nbscrub.config import find_nbconfig, merge_settings
from nbscrub.errors import StripError
from nbscrub.keys import split_extra_keys
from nbscrub.notebook import strip_text
from nbscrub.stripper import StripOptions, compile_pattern

logger = logging.getLogger(__name__)

console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def setup_logging(level: str):
    """Route nbscrub log records to stderr through Rich."""
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    package_logger = logging.getLogger("nbscrub")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False


def report_error(source: str, error: Exception):
    """Print `<source>: <ErrorKind>: <message>` to stderr."""
    console.print(
        f"[red]{escape(source)}: [bold]{type(error).__name__}[/bold]: {escape(str(error))}[/red]",
        highlight=False,
        soft_wrap=True,
    )


def show_settings(options: StripOptions):
    """Display the merged settings as a table."""
    table = Table(title="nbscrub settings", border_style="blue", show_lines=True)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value", style="white")

    table.add_row("keep_output", str(options.keep_output))
    table.add_row("keep_count", str(options.keep_count))
    table.add_row("drop_empty_cells", str(options.drop_empty_cells))
    table.add_row("strip_regex", escape(options.strip_regex or "") or "[dim]none[/dim]")
    table.add_row("extra_keys", escape("\n".join(options.extra_keys)) or "[dim]none[/dim]")

    console.print(table)


def process_file(path: Path, options: StripOptions, textconv: bool) -> bool:
    """
    Strip one notebook file.

    Writes the file back only when stripping changed it, so unchanged
    notebooks keep their modification time.

    Returns:
        True if the file was rewritten
    """
    logger.debug("Processing file %s", path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        contents = f.read()

    cleaned = strip_text(contents, options)

    if textconv:
        click.echo(cleaned, nl=False)
        return False

    if cleaned == contents:
        logger.debug("Content unchanged. File not modified: %s", path)
        return False

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(cleaned)
    logger.info("Stripped %s", path)
    return True


@click.command()
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--keep-count", is_flag=True, help="Do not strip the execution count/prompt number")
@click.option("--keep-output", is_flag=True, help="Do not strip output")
@click.option(
    "--drop-empty-cells", is_flag=True,
    help="Remove cells where `source` is empty or contains only whitespace",
)
@click.option("--textconv", "-t", is_flag=True, help="Prints stripped files to STDOUT")
@click.option("--extra-keys", "-e", default=None, help="Space separated list of extra keys to strip")
@click.option(
    "--keep-keys", "-k", default=None,
    help="Space separated list of extra keys NOT to strip (even if in defaults or extra_keys)",
)
@click.option(
    "--ignore-git-nb-config", "-i", is_flag=True,
    help="Ignore settings from .git-nbconfig.yaml",
)
@click.option(
    "--strip-regex", "-r", default=None,
    help="Discard outputs whose text matches this regex, even if marked to keep",
)
@click.option("--show-config", is_flag=True, help="Show the merged settings and exit")
@click.option(
    "--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING", envvar="NBSCRUB_LOG_LEVEL", show_default=True,
    help="Logging verbosity",
)
@click.version_option(__version__, prog_name="nbscrub")
def main(
    files: tuple[Path, ...],
    keep_count: bool,
    keep_output: bool,
    drop_empty_cells: bool,
    textconv: bool,
    extra_keys: Optional[str],
    keep_keys: Optional[str],
    ignore_git_nb_config: bool,
    strip_regex: Optional[str],
    show_config: bool,
    log_level: str,
):
    """Strip output from Jupyter notebooks (modifies the files in place by default).

    This is often used as a git filter when you don't want to track output.
    Settings are read from .git-nbconfig.yaml at the root of the enclosing
    git checkout; command-line options take precedence.

    With no FILES, reads a notebook from stdin and writes it to stdout.
    """
    setup_logging(log_level.upper())

    try:
        file_settings = None if ignore_git_nb_config else find_nbconfig()
        options = merge_settings(
            file_settings,
            extra_keys=extra_keys.split() if extra_keys else (),
            keep_keys=keep_keys.split() if keep_keys else (),
            keep_output=keep_output,
            keep_count=keep_count,
            drop_empty_cells=drop_empty_cells,
            strip_regex=strip_regex,
        )
        split_extra_keys(options.extra_keys)
        compile_pattern(options.strip_regex)
    except StripError as e:
        report_error("configuration", e)
        sys.exit(1)

    if show_config:
        show_settings(options)
        return

    if not files:
        logger.debug("Processing stdin")
        try:
            contents = click.get_binary_stream("stdin").read().decode("utf-8")
            cleaned = strip_text(contents, options)
        except (UnicodeDecodeError, StripError) as e:
            report_error("<stdin>", e)
            sys.exit(1)
        click.echo(cleaned, nl=False)
        return

    failed = 0
    for path in files:
        try:
            process_file(path, options, textconv)
        except (OSError, UnicodeDecodeError, StripError) as e:
            report_error(str(path), e)
            failed += 1

    if failed:
        console.print(f"[yellow]Failed to strip {failed}/{len(files)} notebooks[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
