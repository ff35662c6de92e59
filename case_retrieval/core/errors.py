"""
Named failure conditions of the retrieval core.

Every error carries the HTTP status the API layer answers with, so callers
above the core only ever see one of these conditions, never a raw fault.
"""

from __future__ import annotations


class RetrievalError(Exception):
    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        return {"error": self.name, "message": self.message}


class EmbeddingFailure(RetrievalError):
    """Remote embedding capability unreachable, rate-limited past retries, or malformed."""
    status_code = 502


class EmptyCorpus(RetrievalError, ValueError):
    """Rebuild called with zero passages."""
    status_code = 400


class DimensionMismatch(RetrievalError, ValueError):
    """Vectors of different lengths met where one dimension is required."""
    status_code = 500


class PositionOutOfRange(RetrievalError, IndexError):
    status_code = 500


class BuildInProgress(RetrievalError):
    """Another rebuild is already running; back off and retry later."""
    status_code = 409


class IndexNotReady(RetrievalError):
    """No generation has been built yet; trigger a rebuild first."""
    status_code = 409


class UninitializedIndex(RetrievalError):
    status_code = 409


class InvalidQuery(RetrievalError, ValueError):
    status_code = 400


class ConfigurationError(RetrievalError):
    """Unknown index kind, embedding provider or other invalid setting."""
    status_code = 500
