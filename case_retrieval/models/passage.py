from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field


class Passage(BaseModel):
    """
    A unit of source text eligible for retrieval.
    - position: ordinal assigned by corpus order at build time; the only
      identity the index knows about, valid only inside its own generation
    - text: the passage content
    """
    model_config = ConfigDict(frozen=True)

    position: int = Field(ge=0)
    text: str
