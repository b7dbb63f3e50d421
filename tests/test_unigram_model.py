from __future__ import annotations

from pathlib import Path
from unittest.mock import patch
import logging
import os
import threading

import pytest

from unigramlm.alphabet import WORD_ALPHABET
from unigramlm.corpus.extractors import DocumentExtractor, PlainTextExtractor
from unigramlm.counts import FrequencyAccumulator
from unigramlm.models import UnigramModel


def _corpus(tmp_path: Path, *contents: str) -> Path:
    corpus = tmp_path / "corpus"
    corpus.mkdir(parents=True)
    for i, text in enumerate(contents):
        (corpus / f"doc{i}.txt").write_text(text, encoding="utf-8")
    return corpus


def _fit(corpus: Path, **kwargs) -> dict[str, int]:
    return UnigramModel(PlainTextExtractor(), **kwargs).with_corpus(corpus).fit().get_counts()


class _RecordingExtractor(DocumentExtractor):
    """Return canned text per file name and remember every call."""

    name = "recording"

    def __init__(self, texts: dict[str, str]) -> None:
        self.texts = texts
        self.calls: list[Path] = []

    def parse(self, data: bytes, name: str = "") -> str:
        return self.texts[name]

    def read_body(self, path: Path) -> str:
        self.calls.append(path)
        return self.texts[path.name]


def test_quick_brown_fox(tmp_path: Path):
    counts = _fit(_corpus(tmp_path, "The quick brown fox jumps over the lazy dog."))
    assert counts == {
        "the": 2,
        "quick": 1,
        "brown": 1,
        "fox": 1,
        "jumps": 1,
        "over": 1,
        "lazy": 1,
        "dog": 1,
    }
    assert next(iter(counts.items())) == ("the", 2)


def test_apostrophes(tmp_path: Path):
    counts = _fit(_corpus(tmp_path, "Don't stop believin'. Don't!"))
    assert counts == {"don't": 2, "stop": 1, "believin": 1}


def test_case_folding(tmp_path: Path):
    assert _fit(_corpus(tmp_path, "HELLO hello Hello hellO")) == {"hello": 4}


def test_tags_and_digits_removed(tmp_path: Path):
    assert _fit(_corpus(tmp_path, "<p>hello <b>world</b></p> 42")) == {"hello": 1, "world": 1}


def test_only_apostrophes(tmp_path: Path):
    assert _fit(_corpus(tmp_path, "'''''")) == {}


def test_two_documents(tmp_path: Path):
    counts = _fit(_corpus(tmp_path, "a a b", "b c c c"))
    assert counts == {"c": 3, "a": 2, "b": 2}
    assert next(iter(counts.values())) == 3


def test_default_extractor_handles_mixed_formats(tmp_path: Path):
    corpus = tmp_path / "corpus"
    corpus.mkdir()
    (corpus / "a.txt").write_text("alpha beta", encoding="utf-8")
    (corpus / "b.html").write_text(
        "<html><head><title>skip</title></head><body><p>Beta gamma</p></body></html>",
        encoding="utf-8",
    )
    (corpus / "c.xml").write_text("<doc><p>gamma</p><p>gamma</p></doc>", encoding="utf-8")
    counts = UnigramModel().with_corpus(corpus).fit().get_counts()
    assert counts == {"gamma": 3, "beta": 2, "alpha": 1}


def test_fit_is_additive(tmp_path: Path):
    corpus = _corpus(tmp_path, "one two two", "three three three two")
    model = UnigramModel(PlainTextExtractor())
    once = model.with_corpus(corpus).fit().get_counts()
    twice = model.with_corpus(corpus).fit().get_counts()
    assert twice == {token: 2 * count for token, count in once.items()}


def test_fit_without_new_corpus_changes_nothing(tmp_path: Path):
    model = UnigramModel(PlainTextExtractor()).with_corpus(_corpus(tmp_path, "a b")).fit()
    before = model.get_counts()
    assert model.fit().get_counts() == before


def test_targets_cleared_after_fit(tmp_path: Path):
    corpus = _corpus(tmp_path, "x", "y")
    model = UnigramModel(PlainTextExtractor()).with_corpus(corpus)
    assert model.targets == {corpus / "doc0.txt", corpus / "doc1.txt"}
    model.fit()
    assert model.targets == frozenset()


def test_with_corpus_deduplicates(tmp_path: Path):
    corpus = _corpus(tmp_path, "x")
    extractor = _RecordingExtractor({"doc0.txt": "x"})
    model = UnigramModel(extractor).with_corpus(corpus).with_corpus(str(corpus))
    assert len(model.targets) == 1
    assert model.fit().get_counts() == {"x": 1}
    assert len(extractor.calls) == 1


def test_with_corpus_returns_self_on_listing_failure(tmp_path: Path, caplog):
    caplog.set_level(logging.ERROR, logger="unigramlm")
    model = UnigramModel(PlainTextExtractor())
    assert model.with_corpus(tmp_path / "missing") is model
    assert model.targets == frozenset()
    assert "missing" in caplog.text


def test_listing_failure_keeps_existing_targets(tmp_path: Path):
    corpus = _corpus(tmp_path, "kept")
    model = UnigramModel(PlainTextExtractor()).with_corpus(corpus)
    model.with_corpus(tmp_path / "missing")
    assert model.targets == {corpus / "doc0.txt"}
    assert model.fit().get_counts() == {"kept": 1}


def test_subdirectory_yields_no_tokens(tmp_path: Path):
    corpus = _corpus(tmp_path, "word")
    (corpus / "nested").mkdir()
    (corpus / "nested" / "inner.txt").write_text("hidden", encoding="utf-8")
    model = UnigramModel(PlainTextExtractor()).with_corpus(corpus)
    assert corpus / "nested" in model.targets
    assert model.fit().get_counts() == {"word": 1}


def test_unreadable_document_does_not_abort(tmp_path: Path):
    corpus = _corpus(tmp_path, "good words")
    (corpus / "bad.xml").write_text("<broken>", encoding="utf-8")
    counts = UnigramModel().with_corpus(corpus).fit().get_counts()
    assert counts == {"good": 1, "words": 1}


def test_parallel_fit_matches_sequential(tmp_path: Path):
    texts = [f"doc {i} " + "common " * (i + 1) + f"unique{chr(97 + i)}" for i in range(12)]
    corpus = _corpus(tmp_path, *texts)
    sequential = _fit(corpus)
    parallel = _fit(corpus, workers=4)
    assert parallel == sequential
    assert parallel["common"] == sum(range(1, 13))
    assert parallel["doc"] == 12


def test_get_counts_is_sorted_and_legal(tmp_path: Path):
    corpus = _corpus(
        tmp_path,
        "''Tis the season -- isn't it? 'Quoted' words, e-mail & rock'n'roll!",
        "it it it the the 123 ''' ",
    )
    counts = _fit(corpus)
    values = list(counts.values())
    assert values == sorted(values, reverse=True)
    for token, count in counts.items():
        assert WORD_ALPHABET.is_valid_token(token)
        assert count >= 1


def test_get_counts_returns_snapshot(tmp_path: Path):
    model = UnigramModel(PlainTextExtractor()).with_corpus(_corpus(tmp_path, "a a b")).fit()
    counts = model.get_counts()
    counts["a"] = 99
    counts["z"] = 1
    assert model.get_counts() == {"a": 2, "b": 1}


def test_case_insensitivity(tmp_path: Path):
    lower = _fit(_corpus(tmp_path / "l", "mixed case text here"))
    upper = _fit(_corpus(tmp_path / "u", "MIXED Case TeXt HERE"))
    assert lower == upper


def test_punctuation_neutrality(tmp_path: Path):
    a = _fit(_corpus(tmp_path / "a", "one,two.three 4four;five"))
    b = _fit(_corpus(tmp_path / "b", "one?two!three#9four five"))
    assert a == b


def test_most_common(tmp_path: Path):
    model = UnigramModel(PlainTextExtractor()).with_corpus(_corpus(tmp_path, "c c c a a b")).fit()
    assert model.most_common(2) == [("c", 3), ("a", 2)]
    assert model.most_common() == [("c", 3), ("a", 2), ("b", 1)]
    assert model.most_common(0) == []


def test_to_dict(tmp_path: Path):
    model = UnigramModel(PlainTextExtractor()).with_corpus(_corpus(tmp_path, "a b a", "c")).fit()
    meta = model.to_dict()
    assert meta["model_type"] == "unigram"
    assert meta["extractor"] == "text"
    assert meta["documents_fitted"] == 2
    assert meta["vocabulary_size"] == 3
    assert meta["total_tokens"] == 4


def test_empty_model():
    model = UnigramModel()
    assert model.get_counts() == {}
    assert model.fit().get_counts() == {}
    assert model.to_dict()["extractor"] == "auto"


def test_invalid_workers():
    with pytest.raises(ValueError):
        UnigramModel(workers=0)


def _symlink(link: Path, target: Path, target_is_directory: bool = False) -> None:
    try:
        os.symlink(target, link, target_is_directory=target_is_directory)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlinks unavailable: {e}")


def test_symlinked_entries_are_followed(tmp_path: Path):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "real.txt").write_text("linked words", encoding="utf-8")
    (outside / "inner.txt").write_text("hidden", encoding="utf-8")
    corpus = _corpus(tmp_path, "words")
    _symlink(corpus / "link.txt", outside / "real.txt")
    _symlink(corpus / "linkdir", outside, target_is_directory=True)

    model = UnigramModel().with_corpus(corpus)
    assert corpus / "linkdir" in model.targets
    assert model.fit().get_counts() == {"words": 2, "linked": 1}


def test_parallel_fit_merges_on_calling_thread(tmp_path: Path):
    corpus = _corpus(tmp_path, "a b", "b c", "c d", "d e")
    merged_on: list[threading.Thread] = []
    original = FrequencyAccumulator.merge

    def recording_merge(self, other):
        merged_on.append(threading.current_thread())
        original(self, other)

    with patch.object(FrequencyAccumulator, "merge", recording_merge):
        counts = _fit(corpus, workers=4)
    assert counts == {"b": 2, "c": 2, "d": 2, "a": 1, "e": 1}
    assert merged_on and all(t is threading.current_thread() for t in merged_on)
