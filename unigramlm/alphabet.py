"""Token alphabet definitions for unigram counting.

This module defines the `TokenAlphabet` class describing which characters may
appear inside a token and which of them are stripped from token boundaries.
Everything outside the alphabet acts as a word separator.

Examples
--------
>>> from unigramlm.alphabet import WORD_ALPHABET
>>> WORD_ALPHABET.size
27
>>> WORD_ALPHABET.filter("hello, world!")
'hello  world '
>>> WORD_ALPHABET.is_valid_token("don't")
True
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenAlphabet:
    """A finite character set from which tokens are built.

    Parameters
    ----------
    symbols:
        Immutable ordered collection of characters kept inside tokens.
    name:
        Human-friendly name, e.g., "ASCII-Words-27".
    boundary:
        Characters that are legal inside a token but stripped from its
        leading and trailing edges. Must be a subset of ``symbols``.
    separator:
        Replacement for every character outside ``symbols``.
    """

    symbols: tuple[str, ...]
    name: str
    boundary: str = "'"
    separator: str = " "

    def __post_init__(self) -> None:
        missing = [ch for ch in self.boundary if ch not in self.symbols]
        if missing:
            raise ValueError(f"Boundary characters not in alphabet: {missing!r}")
        if self.separator in self.symbols:
            raise ValueError("separator must not be an alphabet symbol")

    @property
    def size(self) -> int:
        """Number of symbols in the alphabet."""

        return len(self.symbols)

    @property
    def symbol_set(self) -> frozenset[str]:
        return frozenset(self.symbols)

    def is_valid_char(self, char: str) -> bool:
        """Return True if `char` is kept inside tokens."""

        return char in self.symbols

    def filter(self, text: str) -> str:
        """Replace every character outside the alphabet with ``separator``.

        The result has the same length as ``text``. No case folding happens
        here; callers pass text that is already lowercased.
        """

        if not text:
            return ""
        keep = self.symbol_set
        sep = self.separator
        return "".join(ch if ch in keep else sep for ch in text)

    def strip_boundary(self, fragment: str) -> str:
        """Remove every leading and trailing boundary character."""

        return fragment.strip(self.boundary)

    def is_valid_token(self, token: str) -> bool:
        """Return True if ``token`` could have been emitted by the tokenizer."""

        if not token:
            return False
        if token[0] in self.boundary or token[-1] in self.boundary:
            return False
        keep = self.symbol_set
        return all(ch in keep for ch in token)


# Lowercase ASCII letters (97..122) plus the ASCII apostrophe (39).
WORD_ALPHABET = TokenAlphabet(
    symbols=tuple("abcdefghijklmnopqrstuvwxyz'"),
    name="ASCII-Words-27",
)
