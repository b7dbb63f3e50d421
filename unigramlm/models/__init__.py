"""Frequency models built from document corpora."""

from __future__ import annotations

from typing import Any

__all__ = [
    "UnigramModel",
]


def __getattr__(name: str) -> Any:  # lazy import keeps document parsers off the package import path
    if name == "UnigramModel":
        from unigramlm.models.unigram import UnigramModel as _UG

        return _UG
    raise AttributeError(f"module 'unigramlm.models' has no attribute {name!r}")
