"""
Tests for the exact L2 indexes and index generations.
"""
import numpy as np
import pytest

from case_retrieval.core.errors import ConfigurationError, DimensionMismatch, EmptyCorpus, UninitializedIndex
from case_retrieval.indexing import (
    BruteForceL2Index,
    BruteForceL2IndexPure,
    IndexGeneration,
    build,
    build_generation,
    search,
)
from case_retrieval.registry.corpus_registry import CorpusRegistry

INDEX_CLASSES = [BruteForceL2Index, BruteForceL2IndexPure]

VECTORS = [
    np.array([0.0, 0.0]),
    np.array([1.0, 0.0]),
    np.array([0.0, 2.0]),
    np.array([3.0, 4.0]),
]


@pytest.mark.parametrize("index_cls", INDEX_CLASSES)
class TestBruteForceL2:
    """Both implementations share one contract."""

    def test_empty_build_rejected(self, index_cls):
        with pytest.raises(EmptyCorpus):
            index_cls([])

    def test_mixed_dims_rejected(self, index_cls):
        with pytest.raises(DimensionMismatch):
            index_cls([np.array([1.0, 2.0]), np.array([1.0, 2.0, 3.0])])

    def test_query_dim_mismatch(self, index_cls):
        idx = index_cls(VECTORS)
        with pytest.raises(DimensionMismatch):
            idx.search(np.array([1.0, 2.0, 3.0]), 2)

    def test_squared_distances_ascending(self, index_cls):
        idx = index_cls(VECTORS)
        hits = idx.search(np.array([0.0, 0.0]), 4)
        assert hits == [(0, 0.0), (1, 1.0), (2, 4.0), (3, 25.0)]

    def test_distances_non_decreasing(self, index_cls):
        rng = np.random.default_rng(7)
        vecs = [rng.normal(size=8) for _ in range(50)]
        idx = index_cls(vecs)
        dists = [d for _, d in idx.search(rng.normal(size=8), 50)]
        assert all(a <= b for a, b in zip(dists, dists[1:]))

    def test_ties_broken_by_lowest_position(self, index_cls):
        idx = index_cls([
            np.array([1.0, 0.0]),
            np.array([0.0, 1.0]),
            np.array([-1.0, 0.0]),
            np.array([0.0, -1.0]),
        ])
        hits = idx.search(np.array([0.0, 0.0]), 4)
        assert [p for p, _ in hits] == [0, 1, 2, 3]
        assert all(d == 1.0 for _, d in hits)

    def test_k_larger_than_corpus_returns_everything(self, index_cls):
        idx = index_cls(VECTORS)
        hits = idx.search(np.array([3.0, 4.0]), 100)
        assert len(hits) == len(VECTORS)
        assert hits[0] == (3, 0.0)

    def test_k_caps_results(self, index_cls):
        idx = index_cls(VECTORS)
        assert len(idx.search(np.array([0.0, 0.0]), 2)) == 2

    def test_non_positive_k_returns_nothing(self, index_cls):
        idx = index_cls(VECTORS)
        assert idx.search(np.array([0.0, 0.0]), 0) == []

    def test_search_is_deterministic(self, index_cls):
        idx = index_cls(VECTORS)
        q = np.array([0.5, 0.5])
        assert idx.search(q, 3) == idx.search(q, 3)

    def test_len_and_dim(self, index_cls):
        idx = index_cls(VECTORS)
        assert len(idx) == 4
        assert idx.dim == 2


class TestBruteForceStorage:
    def test_build_copies_input(self):
        vecs = [np.array([1.0, 1.0]), np.array([2.0, 2.0])]
        idx = BruteForceL2Index(vecs)
        vecs[0][0] = 100.0
        assert idx.search(np.array([1.0, 1.0]), 1) == [(0, 0.0)]

    def test_implementations_agree(self):
        rng = np.random.default_rng(3)
        vecs = [rng.integers(-3, 3, size=5).astype(float) for _ in range(40)]
        q = rng.integers(-3, 3, size=5).astype(float)
        fast = BruteForceL2Index(vecs).search(q, 40)
        pure = BruteForceL2IndexPure(vecs).search(q, 40)
        assert [p for p, _ in fast] == [p for p, _ in pure]
        assert [d for _, d in fast] == pytest.approx([d for _, d in pure])


class TestGeneration:
    def test_build_generation_pairs_index_and_registry(self):
        registry = CorpusRegistry.from_texts(["a", "b", "c", "d"])
        gen = build_generation(1, VECTORS, registry)
        assert gen.size == 4
        assert gen.dim == 2
        assert len(gen.index) == len(gen.registry)

    def test_size_mismatch_rejected(self):
        registry = CorpusRegistry.from_texts(["a", "b"])
        with pytest.raises(ValueError):
            IndexGeneration(generation_id=1, index=build(VECTORS), registry=registry)

    def test_search_without_generation(self):
        with pytest.raises(UninitializedIndex):
            search(None, np.array([0.0, 0.0]), 1)

    def test_search_delegates_to_index(self):
        gen = build_generation(1, VECTORS, CorpusRegistry.from_texts(list("abcd")))
        assert search(gen, np.array([1.0, 0.0]), 1) == [(1, 0.0)]

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError):
            build(VECTORS, kind="lsh")

    def test_pure_kind(self):
        assert isinstance(build(VECTORS, kind="brute_pure"), BruteForceL2IndexPure)
