"""Command-line interface for unigramlm using Click."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional
import logging

import click

from unigramlm import __version__
from unigramlm.config import Config
from unigramlm.corpus.extractors import extractor_names, get_extractor
from unigramlm.models.unigram import UnigramModel


class _ClickEchoHandler(logging.Handler):
    """Route log records to stderr through click.echo."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("unigramlm")
    for handler in list(logger.handlers):
        if isinstance(handler, _ClickEchoHandler):
            logger.removeHandler(handler)
    handler = _ClickEchoHandler()
    handler.setFormatter(logging.Formatter(Config.LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@click.command(name="unigramlm")
@click.argument(
    "corpus",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--extractor",
    type=click.Choice(extractor_names()),
    default=Config.DEFAULT_EXTRACTOR,
    show_default=True,
    help="Document extractor; 'auto' detects the format of each file.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=Config.DEFAULT_WORKERS,
    show_default=True,
    help="Threads used to extract and count documents.",
)
@click.option("--top", type=click.IntRange(min=0), default=None, help="Print only the N most frequent tokens.")
@click.option("-v", "--verbose", is_flag=True, help="Log progress and extraction failures at DEBUG level.")
@click.version_option(version=__version__)
def cli(corpus: Optional[Path], extractor: str, workers: int, top: Optional[int], verbose: bool) -> None:
    """Count word frequencies over the documents in CORPUS.

    Prints one "token<TAB>count" line per distinct token, most frequent
    first. Without CORPUS nothing is printed.

    Examples:
      unigramlm docs/
      unigramlm --extractor text --top 20 notes/
    """

    if corpus is None:
        return
    _configure_logging(verbose)

    model = UnigramModel(get_extractor(extractor), workers=workers).with_corpus(corpus).fit()
    for token, count in model.most_common(top):
        click.echo(f"{token}\t{count}")


def main() -> NoReturn:
    """Entry point for the CLI."""
    cli()
