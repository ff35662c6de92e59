"""
Shared fixtures: deterministic in-process embedding providers so tests never
touch a remote API.
"""
import re
import threading
from typing import Iterable, List

import pytest

from case_retrieval.core.errors import EmbeddingFailure
from case_retrieval.core.sample_corpus import SAMPLE_PASSAGES
from case_retrieval.embedding.embedder import Embedder
from case_retrieval.services.retrieval_service import RetrievalService

FIR_QUESTION = "Was the accused granted bail?"


def tokenize(text: str) -> List[str]:
    return re.findall(r"[a-z0-9]+", text.lower())


class BagOfWordsProvider:
    """Word-count vectors over a fixed vocabulary; unknown words are ignored."""

    def __init__(self, vocabulary_texts: Iterable[str]) -> None:
        words = sorted({w for t in vocabulary_texts for w in tokenize(t)})
        self.vocab = {w: i for i, w in enumerate(words)}
        self.calls = 0

    @property
    def dim(self) -> int:
        return len(self.vocab)

    def vector(self, text: str) -> List[float]:
        v = [0.0] * len(self.vocab)
        for w in tokenize(text):
            if w in self.vocab:
                v[self.vocab[w]] += 1.0
        return v

    def embed_texts(self, texts, *, input_type="search_document"):
        self.calls += 1
        return [self.vector(t) for t in texts]


class TableProvider:
    """Returns pre-set vectors by exact text; anything else fails."""

    def __init__(self, table: dict) -> None:
        self.table = table

    def embed_texts(self, texts, *, input_type="search_document"):
        try:
            return [list(self.table[t]) for t in texts]
        except KeyError as e:
            raise EmbeddingFailure(f"no vector for {e}") from e


class GatedProvider(BagOfWordsProvider):
    """Blocks corpus embedding until released, to hold a rebuild open."""

    def __init__(self, vocabulary_texts: Iterable[str]) -> None:
        super().__init__(vocabulary_texts)
        self.entered = threading.Event()
        self.release = threading.Event()
        self.gate_enabled = False

    def embed_texts(self, texts, *, input_type="search_document"):
        if self.gate_enabled and input_type == "search_document":
            self.entered.set()
            assert self.release.wait(timeout=5)
        return super().embed_texts(texts, input_type=input_type)


@pytest.fixture
def fir_provider():
    return BagOfWordsProvider(SAMPLE_PASSAGES + [FIR_QUESTION])


@pytest.fixture
def fir_service(fir_provider):
    return RetrievalService(embedder=Embedder(fir_provider), index_kind="brute")
