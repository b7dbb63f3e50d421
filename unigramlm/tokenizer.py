"""Split extracted document text into normalized word tokens."""

from __future__ import annotations

from typing import Iterator

from unigramlm.alphabet import TokenAlphabet, WORD_ALPHABET


def tokenize(text: str, alphabet: TokenAlphabet = WORD_ALPHABET) -> Iterator[str]:
    """Yield the tokens of ``text`` in source order.

    Characters outside ``alphabet`` separate fragments; each fragment loses
    its leading and trailing boundary characters (apostrophes) and is dropped
    if nothing remains. This is a single pass equivalent to
    ``alphabet.filter(text).split(" ")`` followed by stripping and filtering.

    Parameters
    ----------
    text:
        Lowercased, tag-stripped document text.
    alphabet:
        Characters kept inside tokens.
    """

    keep = alphabet.symbol_set
    start = -1
    for i, ch in enumerate(text):
        if ch in keep:
            if start < 0:
                start = i
            continue
        if start >= 0:
            token = alphabet.strip_boundary(text[start:i])
            if token:
                yield token
            start = -1
    if start >= 0:
        token = alphabet.strip_boundary(text[start:])
        if token:
            yield token
