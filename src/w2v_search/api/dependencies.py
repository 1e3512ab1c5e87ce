from functools import lru_cache

from ..config import settings
from ..vectors.loader import load_word_vectors
from ..vectors.store import WordVectors


@lru_cache
def get_word_vectors() -> WordVectors:
    # A failed load is not cached, so the next request retries it.
    return load_word_vectors(
        settings.vectors_path,
        binary=settings.vectors_binary,
        encoding=settings.vectors_encoding,
        limit=settings.vocab_limit,
    )
