from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
import numpy as np

from case_retrieval.core.errors import ConfigurationError, UninitializedIndex
from case_retrieval.registry.corpus_registry import CorpusRegistry
from .base import Index
from .brute_force import BruteForceL2Index, BruteForceL2IndexPure

INDEX_KINDS = {
    "brute": BruteForceL2Index,
    "brute_pure": BruteForceL2IndexPure,
}


@dataclass(frozen=True)
class IndexGeneration:
    """
    One immutable, internally consistent build: the index over the corpus
    vectors plus the registry describing the same positions.
    `generation_id` ties query results back to the build they came from.
    """
    generation_id: int
    index: Index
    registry: CorpusRegistry
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if len(self.index) != len(self.registry):
            raise ValueError(
                f"index holds {len(self.index)} vectors but registry holds {len(self.registry)} passages"
            )

    @property
    def dim(self) -> int:
        return self.index.dim

    @property
    def size(self) -> int:
        return len(self.registry)


def build(vectors: Sequence[np.ndarray], kind: str = "brute") -> Index:
    """Build an index of the requested kind from vectors in corpus order."""
    try:
        index_cls = INDEX_KINDS[kind]
    except KeyError:
        raise ConfigurationError(f"index kind must be one of {sorted(INDEX_KINDS)}, got {kind!r}") from None
    return index_cls(vectors)


def build_generation(
    generation_id: int,
    vectors: Sequence[np.ndarray],
    registry: CorpusRegistry,
    kind: str = "brute",
) -> IndexGeneration:
    """Build the index and pair it with its registry in one immutable value."""
    return IndexGeneration(generation_id=generation_id, index=build(vectors, kind), registry=registry)


def search(generation: Optional[IndexGeneration], query: np.ndarray, k: int) -> List[Tuple[int, float]]:
    if generation is None:
        raise UninitializedIndex("no index generation supplied")
    return generation.index.search(query, k)
