from __future__ import annotations
from typing import Any, List

from case_retrieval.core.config import settings
from case_retrieval.core.errors import EmbeddingFailure
from .base import HttpEmbeddingProvider


class OpenAIProvider(HttpEmbeddingProvider):
    """OpenAI embeddings endpoint; one request per batch of texts."""
    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_EMBEDDING_MODEL
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")

    def embed_texts(self, texts: List[str], *, input_type: str = "search_document") -> List[List[float]]:
        # OpenAI embeddings are symmetric; input_type only matters for Cohere
        if not self.api_key:
            raise EmbeddingFailure("OPENAI_API_KEY not configured")
        body = self._post_json(
            f"{self.base_url}/embeddings",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            payload={"model": self.model, "input": texts},
        )
        try:
            items = sorted(body["data"], key=lambda d: d["index"])
            indices = [item["index"] for item in items]
            vectors = [item["embedding"] for item in items]
        except (KeyError, TypeError) as e:
            raise EmbeddingFailure(f"malformed openai response: missing {e}") from e
        if indices != list(range(len(texts))):
            raise EmbeddingFailure(f"openai response indices {indices} do not match {len(texts)} inputs")
        return vectors
