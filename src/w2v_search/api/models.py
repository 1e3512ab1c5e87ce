"""
API Models for the Query Service

This module defines the Pydantic models used for request/response validation
across the vector query endpoints.

Design Goals
------------
- Strong typing
- Safe defaults (no shared mutable state)
- Clear schema documentation
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from ..config import settings


# ---------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------

class NearestRequest(BaseModel):
    """
    Nearest-neighbour query payload.
    """
    word: str = Field(..., min_length=1)
    n: int = Field(default=settings.default_top_n, ge=0, le=settings.max_top_n)

    model_config = ConfigDict(extra="forbid")


class AnalogyRequest(BaseModel):
    """
    Analogy query payload.

    ``king - man + woman`` is ``positive=["king", "woman"], negative=["man"]``.
    Emptiness of both lists is reported by the query engine, not here.
    """
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)
    n: int = Field(default=settings.default_top_n, ge=0, le=settings.max_top_n)

    model_config = ConfigDict(extra="forbid")


class SimilarityRequest(BaseModel):
    word_a: str = Field(..., min_length=1)
    word_b: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------

class NeighborResult(BaseModel):
    """
    One ranked query result. ``cluster`` is set only when the loaded model
    carries cluster labels.
    """
    word: str
    score: float
    cluster: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class SimilarityResult(BaseModel):
    word_a: str
    word_b: str
    score: float

    model_config = ConfigDict(extra="forbid")


class WordVectorResult(BaseModel):
    word: str
    index: int = Field(..., ge=0)
    vector: List[float]

    model_config = ConfigDict(extra="forbid")


class VectorsInfo(BaseModel):
    vocab_size: int = Field(..., ge=0)
    vector_size: int = Field(..., ge=1)
    has_clusters: bool

    model_config = ConfigDict(extra="forbid")
