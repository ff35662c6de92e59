"""
Request/response models for the retrieval surface.
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"


class RetrievedPassage(BaseModel):
    """One ranked hit: the passage text and its squared L2 distance to the query."""
    model_config = ConfigDict(frozen=True)

    text: str
    distance: float
    position: int
    generation_id: int


class IndexStatus(BaseModel):
    state: ServiceState
    generation_id: Optional[int] = None
    dim: Optional[int] = None
    size: int = 0
    built_at: Optional[datetime] = None


class RebuildRequest(BaseModel):
    passages: List[str] = Field(default_factory=list, description="Passages in corpus order")


class QueryRequest(BaseModel):
    query_text: str = Field(min_length=1)
    k: Optional[int] = Field(default=None, description="Number of hits; server default when omitted")


class QueryHit(BaseModel):
    text: str
    distance: float
    position: int


class QueryResponse(BaseModel):
    hits: List[QueryHit]
    generation_id: Optional[int] = None
