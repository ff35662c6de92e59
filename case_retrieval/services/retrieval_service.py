from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import itertools
import logging
import threading

from case_retrieval.concurrency.generation_slot import GenerationSlot
from case_retrieval.core.config import settings
from case_retrieval.core.errors import (
    BuildInProgress,
    ConfigurationError,
    EmptyCorpus,
    IndexNotReady,
    InvalidQuery,
    PositionOutOfRange,
)
from case_retrieval.embedding.embedder import Embedder
from case_retrieval.indexing.generation import INDEX_KINDS, IndexGeneration, build_generation, search
from case_retrieval.models.retrieval import IndexStatus, RetrievedPassage, ServiceState
from case_retrieval.registry.corpus_registry import CorpusRegistry

logger = logging.getLogger(__name__)


class RetrievalService:
    """
    Owns the current index generation and its lifecycle:
    embed corpus -> build index + registry -> publish; and on query,
    embed query -> search the captured generation -> map positions to passages.

    Rebuilds are single-flight. Queries never wait on a rebuild: they use
    whichever generation was current when they started.
    """
    _singleton: "RetrievalService | None" = None
    _singleton_lock = threading.Lock()

    def __init__(self, embedder: Optional[Embedder] = None, index_kind: Optional[str] = None) -> None:
        self._embedder = embedder
        self.index_kind = index_kind or settings.INDEX_KIND
        if self.index_kind not in INDEX_KINDS:
            raise ConfigurationError(
                f"index kind must be one of {sorted(INDEX_KINDS)}, got {self.index_kind!r}"
            )
        self._slot: GenerationSlot[IndexGeneration] = GenerationSlot()
        self._build_guard = threading.Lock()
        self._generation_ids = itertools.count(1)

    @classmethod
    def instance(cls) -> "RetrievalService":
        with cls._singleton_lock:
            if not cls._singleton:
                cls._singleton = cls()
            return cls._singleton

    @classmethod
    def close_instance(cls) -> None:
        with cls._singleton_lock:
            if cls._singleton is not None:
                cls._singleton.close()

    @property
    def embedder(self) -> Embedder:
        # created lazily so the app can start without provider credentials
        if self._embedder is None:
            self._embedder = Embedder()
        return self._embedder

    def close(self) -> None:
        """Release the embedding provider's connections, if one was created."""
        if self._embedder is not None:
            self._embedder.close()

    # --------------- state ---------------
    @property
    def state(self) -> ServiceState:
        if self._build_guard.locked():
            return ServiceState.BUILDING
        if self._slot.current() is None:
            return ServiceState.UNINITIALIZED
        return ServiceState.READY

    def current_generation(self) -> Optional[IndexGeneration]:
        return self._slot.current()

    def wait_until_ready(self, timeout: Optional[float] = None) -> Optional[IndexGeneration]:
        return self._slot.wait_for_generation(timeout)

    def status(self) -> IndexStatus:
        state = self.state
        gen = self._slot.current()
        if gen is None:
            return IndexStatus(state=state)
        return IndexStatus(
            state=state,
            generation_id=gen.generation_id,
            dim=gen.dim,
            size=gen.size,
            built_at=gen.built_at,
        )

    # --------------- build ---------------
    def rebuild(self, passages: Sequence[str]) -> IndexGeneration:
        """
        Build a new generation from `passages` (in order) and make it current.
        On any failure the previous generation, if any, stays current.
        """
        if not self._build_guard.acquire(blocking=False):
            raise BuildInProgress("a rebuild is already running")
        try:
            texts = list(passages)
            if not texts:
                raise EmptyCorpus("rebuild called with zero passages")
            logger.info(f"Rebuilding index from {len(texts)} passages (kind={self.index_kind})")

            vectors = self.embedder.embed_batch(texts)
            registry = CorpusRegistry.from_texts(texts)
            generation = build_generation(next(self._generation_ids), vectors, registry, self.index_kind)

            previous = self._slot.publish(generation)
            logger.info(
                f"✓ Generation {generation.generation_id} ready: {generation.size} vectors, dim={generation.dim}"
                + (f" (replaced generation {previous.generation_id})" if previous else "")
            )
            return generation
        except Exception as e:
            current = self._slot.current()
            logger.error(
                f"Rebuild failed ({type(e).__name__}: {e}); "
                + (f"generation {current.generation_id} stays current" if current else "index remains uninitialized")
            )
            raise
        finally:
            self._build_guard.release()

    # --------------- query ---------------
    def query(self, text: str, k: Optional[int] = None) -> List[RetrievedPassage]:
        """Return up to k passages nearest to `text`, closest first."""
        return self.query_with_generation(text, k)[1]

    def query_with_generation(self, text: str, k: Optional[int] = None) -> Tuple[int, List[RetrievedPassage]]:
        """Like `query`, also returning the id of the generation that was searched."""
        k = settings.DEFAULT_TOP_K if k is None else k
        if k < 1:
            raise InvalidQuery("k must be a positive integer")

        generation = self._slot.current()  # snapshot for the whole query
        if generation is None:
            raise IndexNotReady("index has not been built yet")

        q = self.embedder.embed(text)
        hits = search(generation, q, k)

        results: List[RetrievedPassage] = []
        for position, distance in hits:
            try:
                passage = generation.registry.resolve(position)
            except PositionOutOfRange:
                logger.warning(f"Dropping hit with invalid position {position} in generation {generation.generation_id}")
                continue
            results.append(
                RetrievedPassage(
                    text=passage.text,
                    distance=distance,
                    position=passage.position,
                    generation_id=generation.generation_id,
                )
            )
        return generation.generation_id, results
