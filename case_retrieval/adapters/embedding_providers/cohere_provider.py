from __future__ import annotations
from typing import Any, List

from case_retrieval.core.config import settings
from case_retrieval.core.errors import EmbeddingFailure
from .base import HttpEmbeddingProvider

COHERE_EMBED_URL = "https://api.cohere.ai/v1/embed"


class CohereProvider(HttpEmbeddingProvider):
    """Cohere embedder; passages and queries use different input types."""
    name = "cohere"

    def __init__(self, api_key: str | None = None, model: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key or settings.COHERE_API_KEY
        self.model = model or settings.COHERE_EMBEDDING_MODEL

    def embed_texts(self, texts: List[str], *, input_type: str = "search_document") -> List[List[float]]:
        if not self.api_key:
            raise EmbeddingFailure("COHERE_API_KEY not configured")
        body = self._post_json(
            COHERE_EMBED_URL,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            payload={
                "texts": texts,
                "model": self.model,
                "input_type": input_type,  # Required for v3.0 models
            },
        )
        try:
            return body["embeddings"]  # keep as-is; don't resize here
        except (KeyError, TypeError) as e:
            raise EmbeddingFailure("malformed cohere response: no embeddings") from e
