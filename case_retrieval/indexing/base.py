from __future__ import annotations
from typing import List, Protocol, Sequence, Tuple
import numpy as np

from case_retrieval.core.errors import DimensionMismatch, EmptyCorpus


class Index(Protocol):
    """
    Interface for all vector indexes.
    Implementations must support `search(query, k)` returning up to k
    (position, distance) pairs, nearest first, ties by ascending position.
    """
    dim: int

    def __len__(self) -> int:
        ...

    def search(self, query: np.ndarray, k: int) -> List[Tuple[int, float]]:
        ...


def check_vectors(vectors: Sequence[Sequence[float]]) -> int:
    """Validate a build input and return its shared dimension."""
    if len(vectors) == 0:
        raise EmptyCorpus("cannot build an index from zero vectors")
    dim = len(vectors[0])
    if dim == 0:
        raise DimensionMismatch("vectors must have at least one dimension")
    for i, v in enumerate(vectors):
        if len(v) != dim:
            raise DimensionMismatch(f"vector {i} has dim {len(v)}, expected {dim}")
    return dim
