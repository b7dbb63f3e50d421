"""Corpus directory enumeration."""

from __future__ import annotations

from pathlib import Path
from typing import Union
import logging


_LOGGER = logging.getLogger(__name__)


def list_corpus_targets(directory: Union[str, Path]) -> set[Path]:
    """Return the absolute paths of the immediate children of ``directory``.

    Listing is non-recursive. Subdirectories and symbolic links are returned
    like any other entry; extractors decide later whether they hold text.

    Raises
    ------
    OSError
        If ``directory`` does not exist, is not a directory, or cannot be read.
    """

    base = Path(directory).absolute()
    targets = {child for child in base.iterdir()}
    _LOGGER.debug("Found %d corpus entries in %s", len(targets), base)
    return targets
