"""
Similarity Queries

Nearest-neighbour and analogy queries over a loaded
:class:`~w2v_search.vectors.store.WordVectors` store.

Vectors are stored at unit length by the store, so a plain dot product is the
cosine similarity. Queries are pure functions: they never mutate the store
and can run concurrently.

Ranking
-------
- Descending score
- Ties broken by ascending vocabulary index
- Query words are always excluded from the results
"""

from __future__ import annotations

from typing import List, NamedTuple, Sequence, Set

import numpy as np

from .errors import EmptyQueryError, UnknownWordError
from .store import WordVectors


class Neighbor(NamedTuple):
    """A single ranked query result."""

    word: str
    score: float
    index: int


# ---------------------------------------------------------------------
# Internal Helpers
# ---------------------------------------------------------------------

def _require_index(store: WordVectors, word: str) -> int:
    idx = store.index_of(word)
    if idx is None:
        raise UnknownWordError(word)
    return idx


def _check_count(n: int) -> None:
    if n < 0:
        raise ValueError(f"Result count must be non-negative, got {n}.")


def _rank(
    store: WordVectors,
    scores: np.ndarray,
    exclude: Set[int],
    n: int,
) -> List[Neighbor]:
    """
    Return the top ``n`` entries by score, skipping indices in ``exclude``.
    """
    if n == 0:
        return []

    # A stable sort on the negated scores keeps equal scores in index order.
    order = np.argsort(-scores, kind="stable")

    results: List[Neighbor] = []
    for idx in order:
        idx = int(idx)
        if idx in exclude:
            continue
        results.append(Neighbor(store.word_at(idx), float(scores[idx]), idx))
        if len(results) == n:
            break

    return results


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def nearest(store: WordVectors, word: str, n: int = 10) -> List[Neighbor]:
    """
    Cosine similarity query.

    Parameters
    ----------
    store : WordVectors
        Loaded model.

    word : str
        Query word; must be in the vocabulary.

    n : int
        Maximum number of neighbours to return.

    Returns
    -------
    List[Neighbor]
        Up to ``n`` neighbours in descending score order, never including
        ``word`` itself.

    Raises
    ------
    UnknownWordError
        If ``word`` is not in the vocabulary.
    """
    _check_count(n)
    idx = _require_index(store, word)

    scores = store.vectors @ store.vectors[idx]
    return _rank(store, scores, {idx}, n)


def analogy(
    store: WordVectors,
    positive: Sequence[str],
    negative: Sequence[str] = (),
    n: int = 10,
) -> List[Neighbor]:
    """
    Analogy query using vector arithmetic.

    ``king - man + woman`` is expressed as
    ``positive=["king", "woman"], negative=["man"]``.

    The target is the mean of the positive vectors and the negated negative
    vectors. Every query word is excluded from the results.

    Raises
    ------
    EmptyQueryError
        If both ``positive`` and ``negative`` are empty.

    UnknownWordError
        Naming the first query word (positives first) not in the vocabulary.
    """
    _check_count(n)
    if not positive and not negative:
        raise EmptyQueryError("Analogy query needs at least one word.")

    pos_idx = [_require_index(store, w) for w in positive]
    neg_idx = [_require_index(store, w) for w in negative]

    terms = [store.vectors[i] for i in pos_idx]
    terms.extend(-store.vectors[i] for i in neg_idx)
    target = np.mean(terms, axis=0)

    scores = store.vectors @ target
    return _rank(store, scores, set(pos_idx) | set(neg_idx), n)


def similarity(store: WordVectors, word_a: str, word_b: str) -> float:
    """
    Cosine similarity between two vocabulary words.
    """
    a = _require_index(store, word_a)
    b = _require_index(store, word_b)
    return float(np.dot(store.vectors[a], store.vectors[b]))
