"""
Query Routes

This module exposes the similarity query engine over HTTP. All endpoints
read from the single model store supplied by ``get_word_vectors``.

Query errors are not handled here: ``UnknownWordError`` and
``EmptyQueryError`` propagate to the handlers registered in
``core.errors``.
"""

from typing import List, Annotated

from fastapi import APIRouter, Depends, status

from .models import (
    AnalogyRequest,
    NearestRequest,
    NeighborResult,
    SimilarityRequest,
    SimilarityResult,
    VectorsInfo,
    WordVectorResult,
)
from .dependencies import get_word_vectors
from ..vectors.errors import UnknownWordError
from ..vectors.query import Neighbor, analogy, nearest, similarity
from ..vectors.store import WordVectors

router = APIRouter(prefix="/vectors", tags=["vectors"])


def _to_results(store: WordVectors, neighbors: List[Neighbor]) -> List[NeighborResult]:
    return [
        NeighborResult(
            word=nb.word,
            score=nb.score,
            cluster=store.cluster_at(nb.index),
        )
        for nb in neighbors
    ]


@router.get(
    "/info",
    response_model=VectorsInfo,
    summary="Loaded model dimensions",
)
def info(
    store: Annotated[WordVectors, Depends(get_word_vectors)],
) -> VectorsInfo:
    return VectorsInfo(
        vocab_size=len(store),
        vector_size=store.vector_size,
        has_clusters=store.clusters is not None,
    )


@router.get(
    "/words/{word}",
    response_model=WordVectorResult,
    summary="Vector lookup for a single word",
)
def word_vector(
    word: str,
    store: Annotated[WordVectors, Depends(get_word_vectors)],
) -> WordVectorResult:
    idx = store.index_of(word)
    if idx is None:
        raise UnknownWordError(word)

    return WordVectorResult(
        word=word,
        index=idx,
        vector=store.vectors[idx].tolist(),
    )


@router.post(
    "/nearest",
    response_model=List[NeighborResult],
    summary="Nearest neighbours by cosine similarity",
    status_code=status.HTTP_200_OK,
)
def nearest_words(
    req: NearestRequest,
    store: Annotated[WordVectors, Depends(get_word_vectors)],
) -> List[NeighborResult]:
    """
    Return the ``n`` words closest to ``req.word``, excluding the word itself.
    """
    return _to_results(store, nearest(store, req.word, req.n))


@router.post(
    "/analogy",
    response_model=List[NeighborResult],
    summary="Analogy query by vector arithmetic",
    status_code=status.HTTP_200_OK,
)
def analogy_words(
    req: AnalogyRequest,
    store: Annotated[WordVectors, Depends(get_word_vectors)],
) -> List[NeighborResult]:
    """
    Return the ``n`` words closest to the mean of the positive vectors and
    the negated negative vectors, excluding every query word.
    """
    neighbors = analogy(store, req.positive, req.negative, req.n)
    return _to_results(store, neighbors)


@router.post(
    "/similarity",
    response_model=SimilarityResult,
    summary="Cosine similarity between two words",
)
def word_similarity(
    req: SimilarityRequest,
    store: Annotated[WordVectors, Depends(get_word_vectors)],
) -> SimilarityResult:
    return SimilarityResult(
        word_a=req.word_a,
        word_b=req.word_b,
        score=similarity(store, req.word_a, req.word_b),
    )
