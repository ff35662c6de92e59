from __future__ import annotations
from typing import Any, Dict, List, Protocol
import logging
import time

import httpx

from case_retrieval.core.config import settings
from case_retrieval.core.errors import EmbeddingFailure

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {408, 429}


class EmbeddingProvider(Protocol):
    """
    Remote text -> vector capability.
    `embed_texts` returns one vector per input text, in input order.
    """
    def embed_texts(self, texts: List[str], *, input_type: str = "search_document") -> List[List[float]]:
        ...


def _is_retryable(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS or status_code >= 500


class HttpEmbeddingProvider:
    """
    Shared transport for HTTP embedding APIs: one httpx client, bounded
    retry with exponential backoff on network errors, 408/429 and 5xx.
    Other 4xx responses mean the input was rejected and are not retried.
    """
    name = "http"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        backoff_max: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.max_retries = settings.EMBED_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_base = settings.EMBED_BACKOFF_BASE if backoff_base is None else backoff_base
        self.backoff_max = settings.EMBED_BACKOFF_MAX if backoff_max is None else backoff_max
        self._client = httpx.Client(
            timeout=settings.EMBED_TIMEOUT if timeout is None else timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_max, self.backoff_base * (2 ** attempt))

    def _post_json(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        attempt = 0
        while True:
            try:
                r = self._client.post(url, headers=headers, json=payload)
            except httpx.TransportError as e:
                reason = f"{type(e).__name__}: {e}"
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                # decoding, redirect and URL errors will not go away on retry
                raise EmbeddingFailure(f"{self.name} request failed: {type(e).__name__}: {e}") from e
            else:
                if r.status_code < 400:
                    try:
                        return r.json()
                    except ValueError as e:
                        raise EmbeddingFailure(f"{self.name} returned a non-JSON body") from e
                if not _is_retryable(r.status_code):
                    raise EmbeddingFailure(
                        f"{self.name} rejected the request with HTTP {r.status_code}: {r.text[:200]}"
                    )
                reason = f"HTTP {r.status_code}"

            if attempt >= self.max_retries:
                raise EmbeddingFailure(f"{self.name} unavailable after {attempt + 1} attempts ({reason})")
            delay = self._backoff(attempt)
            logger.warning(f"{self.name} embedding call failed ({reason}), retry {attempt + 1}/{self.max_retries} in {delay:.2f}s")
            time.sleep(delay)
            attempt += 1
