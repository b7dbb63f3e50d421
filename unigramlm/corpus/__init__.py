"""Corpus ingestion: enumerate corpus directories and extract document text."""

from __future__ import annotations

# Public API re-exports (keep minimal to avoid circular imports)
from unigramlm.corpus.extractors import (  # noqa: F401
    AutoDetectExtractor,
    DocumentExtractor,
    ExtractionError,
    PlainTextExtractor,
    get_extractor,
    strip_tags,
)
from unigramlm.corpus.targets import list_corpus_targets  # noqa: F401
