"""
unigramlm: Count word frequencies across a directory of documents.

Extracts the body text of every document in a corpus directory (plain text,
HTML, XML, PDF, DOCX, zip and gzip archives), splits it into lowercase word
tokens, and reports how often each token occurs.
"""

__all__ = [
    "TokenAlphabet",
    "WORD_ALPHABET",
    "Config",
    "FrequencyAccumulator",
    "tokenize",
    "__version__",
    # Lazy-imported via __getattr__
    "UnigramModel",
    "DocumentExtractor",
    "get_extractor",
]

__version__ = "0.1.0"

from typing import Any

from unigramlm.alphabet import TokenAlphabet, WORD_ALPHABET
from unigramlm.config import Config
from unigramlm.counts import FrequencyAccumulator
from unigramlm.tokenizer import tokenize


def __getattr__(name: str) -> Any:  # lazy attribute access to avoid loading bs4/pypdf at import time
    if name == "UnigramModel":
        from unigramlm.models.unigram import UnigramModel as _UG

        return _UG
    if name == "DocumentExtractor":
        from unigramlm.corpus.extractors import DocumentExtractor as _DE

        return _DE
    if name == "get_extractor":
        from unigramlm.corpus.extractors import get_extractor as _ge

        return _ge
    raise AttributeError(f"module 'unigramlm' has no attribute {name!r}")
