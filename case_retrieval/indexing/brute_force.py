from __future__ import annotations
from typing import List, Sequence, Tuple
import numpy as np

from case_retrieval.core.errors import DimensionMismatch
from .base import Index, check_vectors


class BruteForceL2Index(Index):
    """
    Exact squared-Euclidean search using NumPy.
    Build  : O(ND)   (copy into one matrix)
    Search : O(ND)   (N squared differences of length D)
    Space  : O(ND)
    """

    def __init__(self, vectors: Sequence[np.ndarray]) -> None:
        self.dim = check_vectors(vectors)
        self._matrix = np.array(vectors, dtype=float)  # always a copy
        self._matrix.setflags(write=False)

    def __len__(self) -> int:
        return self._matrix.shape[0]

    def search(self, query: np.ndarray, k: int) -> List[Tuple[int, float]]:
        if k <= 0:
            return []
        q = np.asarray(query, dtype=float)
        if q.ndim != 1 or q.shape[0] != self.dim:
            raise DimensionMismatch(f"query dim {q.shape[-1] if q.ndim else 0} != index dim {self.dim}")

        diffs = self._matrix - q
        dists = np.einsum("ij,ij->i", diffs, diffs)

        # lexsort keys are read last-first: distance, then position
        positions = np.arange(len(dists))
        order = np.lexsort((positions, dists))
        top = order[: min(k, len(order))]
        return [(int(i), float(dists[i])) for i in top]


# Plain Python version, same ordering rules; useful for reference/testing
def _sq_l2_pure(a: List[float], b: List[float]) -> float:
    # assumes same length
    return sum((x - y) * (x - y) for x, y in zip(a, b))


class BruteForceL2IndexPure(Index):
    """
    Exact squared-Euclidean search, implemented without NumPy.
    Build  : O(ND)
    Search : O(ND + N log N)
    """

    def __init__(self, vectors: Sequence[Sequence[float]]) -> None:
        self.dim = check_vectors(vectors)
        self._vecs: List[List[float]] = [[float(x) for x in v] for v in vectors]

    def __len__(self) -> int:
        return len(self._vecs)

    def search(self, query: Sequence[float], k: int) -> List[Tuple[int, float]]:
        if k <= 0:
            return []
        q = [float(x) for x in query]
        if len(q) != self.dim:
            raise DimensionMismatch(f"query dim {len(q)} != index dim {self.dim}")

        scored = [(i, _sq_l2_pure(v, q)) for i, v in enumerate(self._vecs)]
        scored.sort(key=lambda t: (t[1], t[0]))
        return scored[: min(k, len(scored))]
