from __future__ import annotations
from typing import List, Optional, Sequence
import logging
import numpy as np

from case_retrieval.adapters.embedding_providers.base import EmbeddingProvider
from case_retrieval.core.config import settings
from case_retrieval.core.errors import ConfigurationError, DimensionMismatch, EmbeddingFailure

logger = logging.getLogger(__name__)


def get_provider(name: str | None = None) -> EmbeddingProvider:
    """Construct the configured remote embedding provider."""
    name = (name or settings.EMBEDDING_PROVIDER).lower()
    if name == "openai":
        from case_retrieval.adapters.embedding_providers.openai_provider import OpenAIProvider
        return OpenAIProvider()
    if name == "cohere":
        from case_retrieval.adapters.embedding_providers.cohere_provider import CohereProvider
        return CohereProvider()
    raise ConfigurationError("EMBEDDING_PROVIDER must be 'openai' or 'cohere'")


class Embedder:
    """
    Turns text into fixed-dimension vectors through a remote provider.

    Every vector it hands out is a 1-D float64 array. Within one batch all
    vectors share a dimension; with `expected_dim` set, every vector must
    have exactly that dimension. Text is passed through untruncated.
    """

    def __init__(
        self,
        provider: EmbeddingProvider | None = None,
        *,
        expected_dim: Optional[int] = None,
        batch_size: Optional[int] = None,
    ) -> None:
        self.provider = provider or get_provider()
        self.expected_dim = expected_dim if expected_dim is not None else settings.EMBEDDING_DIM
        self.batch_size = batch_size or settings.EMBED_BATCH_SIZE
        if self.batch_size <= 0:
            raise ConfigurationError("batch_size must be positive")

    def close(self) -> None:
        close = getattr(self.provider, "close", None)
        if close is not None:
            close()

    def embed(self, text: str) -> np.ndarray:
        """Embed a single query string."""
        raw = self.provider.embed_texts([text], input_type="search_query")
        if not isinstance(raw, list) or len(raw) != 1:
            raise EmbeddingFailure(f"expected 1 embedding, got {len(raw) if isinstance(raw, list) else type(raw).__name__}")
        vec = self._to_vector(raw[0])
        self._check_dim([vec])
        return vec

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        """
        Embed passages in order. Any failing request fails the whole batch;
        callers never receive a partially embedded corpus.
        """
        texts = list(texts)
        vectors: List[np.ndarray] = []
        for start in range(0, len(texts), self.batch_size):
            chunk = texts[start:start + self.batch_size]
            raw = self.provider.embed_texts(chunk, input_type="search_document")
            if not isinstance(raw, list) or len(raw) != len(chunk):
                got = len(raw) if isinstance(raw, list) else type(raw).__name__
                raise EmbeddingFailure(f"requested {len(chunk)} embeddings, got {got}")
            vectors.extend(self._to_vector(r) for r in raw)
            logger.debug(f"Embedded {start + len(chunk)}/{len(texts)} passages")
        self._check_dim(vectors)
        return vectors

    @staticmethod
    def _to_vector(raw: object) -> np.ndarray:
        if not isinstance(raw, (list, tuple)) or len(raw) == 0:
            raise EmbeddingFailure("provider returned an empty or non-list embedding")
        try:
            vec = np.array(raw, dtype=float)
        except (TypeError, ValueError) as e:
            raise EmbeddingFailure("provider returned non-numeric embedding values") from e
        if vec.ndim != 1:
            raise EmbeddingFailure(f"embedding must be flat, got shape {vec.shape}")
        if not np.all(np.isfinite(vec)):
            raise EmbeddingFailure("provider returned non-finite embedding values")
        return vec

    def _check_dim(self, vectors: Sequence[np.ndarray]) -> None:
        if not vectors:
            return
        dim = self.expected_dim if self.expected_dim is not None else len(vectors[0])
        for i, v in enumerate(vectors):
            if len(v) != dim:
                raise DimensionMismatch(f"embedding {i} has dim {len(v)}, expected {dim}")
