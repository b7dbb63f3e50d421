"""Centralized configuration for corpus ingestion and counting.

Defines immutable defaults for worker counts, extractor selection, text
decoding, and logging so that every entry point (library and CLI) agrees on
the same behavior.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Config:
    """Immutable configuration defaults for the project."""

    # Fitting
    DEFAULT_WORKERS: int = 1
    DEFAULT_EXTRACTOR: str = "auto"

    # Extraction
    TAG_PATTERN: str = r"<[^>]+>"
    TEXT_ENCODING: str = "utf-8"
    FALLBACK_ENCODING: str = "latin-1"
    SNIFF_BYTES: int = 1024

    # Logging
    LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# File suffixes recognized by the format-detecting extractor.
HTML_SUFFIXES: frozenset[str] = frozenset({".html", ".htm", ".xhtml"})
XML_SUFFIXES: frozenset[str] = frozenset({".xml"})
PDF_SUFFIXES: frozenset[str] = frozenset({".pdf"})
DOCX_SUFFIXES: frozenset[str] = frozenset({".docx"})
ZIP_SUFFIXES: frozenset[str] = frozenset({".zip"})
GZIP_SUFFIXES: frozenset[str] = frozenset({".gz"})


_CONFIG_SINGLETON: Optional[Config] = None


def get_config() -> Config:
    """Return a singleton `Config` instance."""

    global _CONFIG_SINGLETON
    if _CONFIG_SINGLETON is None:
        _CONFIG_SINGLETON = Config()
    return _CONFIG_SINGLETON
