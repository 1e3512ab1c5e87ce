from fastapi import APIRouter

from ..config import settings
from .dependencies import get_word_vectors

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    # Reads the process cache only; never triggers a load.
    loaded = get_word_vectors.cache_info().currsize > 0
    body = {
        "status": "ok",
        "model_loaded": loaded,
        "vectors_path": settings.vectors_path,
    }
    if loaded:
        store = get_word_vectors()
        body["vocab_size"] = len(store)
        body["vector_size"] = store.vector_size
    return body
