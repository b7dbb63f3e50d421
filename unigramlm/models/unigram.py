"""Unigram frequency model over a directory of documents.

The model owns a set of pending corpus targets and a `FrequencyAccumulator`.
`with_corpus` queues the entries of a directory, `fit` extracts, tokenizes and
counts every queued document and then clears the queue, and `get_counts`
returns the counts sorted by frequency. Fits are additive: fitting the same
corpus twice doubles every count.

Example
-------
```python
counts = UnigramModel().with_corpus("docs/").fit().get_counts()
for token, count in counts.items():
    print(f"{token}\t{count}")
```
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterator, Optional, Union
import logging

from unigramlm.alphabet import TokenAlphabet, WORD_ALPHABET
from unigramlm.config import get_config
from unigramlm.corpus.extractors import AutoDetectExtractor, DocumentExtractor
from unigramlm.corpus.targets import list_corpus_targets
from unigramlm.counts import FrequencyAccumulator
from unigramlm.tokenizer import tokenize


_LOGGER = logging.getLogger(__name__)


class UnigramModel:
    """Token-frequency model fitted from corpus directories.

    Parameters
    ----------
    extractor:
        Maps a document path to lowercased, tag-stripped text. Defaults to an
        `AutoDetectExtractor`, which is reused across documents and fits.
    workers:
        Number of threads used by `fit`. With more than one worker, each
        document is counted into its own accumulator and merged afterwards.
    alphabet:
        Characters kept inside tokens.
    """

    def __init__(
        self,
        extractor: Optional[DocumentExtractor] = None,
        *,
        workers: Optional[int] = None,
        alphabet: TokenAlphabet = WORD_ALPHABET,
    ) -> None:
        if workers is None:
            workers = get_config().DEFAULT_WORKERS
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.extractor: DocumentExtractor = extractor if extractor is not None else AutoDetectExtractor()
        self.workers: int = workers
        self.alphabet: TokenAlphabet = alphabet
        self.name: str = "unigram"
        self._targets: set[Path] = set()
        self._counts = FrequencyAccumulator()
        self._documents_fitted: int = 0

    # Corpus registration ------------------------------------------------------
    def with_corpus(self, corpus: Union[str, Path]) -> "UnigramModel":
        """Queue every entry of the directory ``corpus`` for the next `fit`.

        Listing failures are logged and leave the queued targets unchanged.
        """

        try:
            found = list_corpus_targets(corpus)
        except OSError as e:
            _LOGGER.error("Cannot list corpus directory %s: %s", corpus, e)
            return self
        self._targets.update(found)
        _LOGGER.info("Queued %d documents from %s", len(found), corpus)
        return self

    @property
    def targets(self) -> frozenset[Path]:
        """Paths queued for the next `fit`."""

        return frozenset(self._targets)

    # Training -----------------------------------------------------------------
    def fit(self) -> "UnigramModel":
        """Count the tokens of every queued document, then clear the queue."""

        targets = list(self._targets)
        if self.workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                for local in pool.map(self._count_document, targets):
                    self._counts.merge(local)
        else:
            for path in targets:
                self._counts.update(self._document_tokens(path))

        self._documents_fitted += len(targets)
        _LOGGER.info(
            "Fitted %d documents; vocabulary size is now %d", len(targets), len(self._counts)
        )
        self._targets = set()
        return self

    def _document_tokens(self, path: Path) -> Iterator[str]:
        return tokenize(self.extractor.extract(path), self.alphabet)

    def _count_document(self, path: Path) -> FrequencyAccumulator:
        local = FrequencyAccumulator()
        local.update(self._document_tokens(path))
        return local

    # Results ------------------------------------------------------------------
    def get_counts(self) -> dict[str, int]:
        """Return token counts ordered by count descending.

        Tokens with equal counts are ordered alphabetically. The returned dict
        is a new snapshot owned by the caller.
        """

        items = sorted(self._counts.snapshot().items(), key=lambda kv: (-kv[1], kv[0]))
        return dict(items)

    def most_common(self, n: Optional[int] = None) -> list[tuple[str, int]]:
        """Return the ``n`` most frequent ``(token, count)`` pairs (all if None)."""

        rows = list(self.get_counts().items())
        return rows if n is None else rows[: max(0, n)]

    # Metadata -----------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Return model metadata suitable for JSON serialization."""

        return {
            "model_type": self.name,
            "alphabet_name": self.alphabet.name,
            "extractor": self.extractor.name,
            "workers": self.workers,
            "documents_fitted": self._documents_fitted,
            "vocabulary_size": len(self._counts),
            "total_tokens": self._counts.total(),
        }
