"""
Word Vector Store

This module defines the in-memory model store: an ordered vocabulary, the
matching vector table, and a word-to-index mapping built once at
construction time.

Key Properties
--------------
- Row ``i`` of the vector table belongs to ``vocab[i]``
- Every row is unit length (zero rows kept as-is)
- O(1) word lookup through the word index
- Immutable after construction (tuple vocabulary, read-only numpy table)
- Safe to share across concurrent readers without locking
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger("w2v.store")


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """
    Scale every row of ``matrix`` to unit Euclidean length.

    Norms are taken in float64 so rows beyond the float32 range do not
    overflow. Rows with a zero norm are returned unchanged.
    """
    wide = np.asarray(matrix, dtype=np.float64)
    norms = np.linalg.norm(wide, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return (wide / norms).astype(np.float32)


class WordVectors:
    """
    Immutable container for a loaded word embedding model.

    Instances are normally produced by the functions in
    :mod:`w2v_search.vectors.loader`; direct construction is supported for
    tests and for callers that already hold arrays in memory.
    """

    def __init__(
        self,
        vocab: Sequence[str],
        vectors: np.ndarray,
        clusters: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Build a store from a vocabulary and its vector table.

        Parameters
        ----------
        vocab : Sequence[str]
            Words in index order.

        vectors : np.ndarray
            2-D array with one row per word.

        clusters : Optional[Sequence[str]]
            Optional cluster label per word, aligned with ``vocab``.

        Raises
        ------
        ValueError
            If the shapes of the inputs do not line up, or the table holds
            non-finite values.
        """
        table = np.asarray(vectors, dtype=np.float64)
        if table.ndim != 2:
            raise ValueError(
                f"Vector table must be 2-dimensional, got {table.ndim} dimensions."
            )

        words: Tuple[str, ...] = tuple(vocab)
        if len(words) != table.shape[0]:
            raise ValueError(
                f"Vocabulary size {len(words)} does not match "
                f"vector count {table.shape[0]}."
            )

        labels: Optional[Tuple[str, ...]] = None
        if clusters is not None:
            labels = tuple(clusters)
            if len(labels) != len(words):
                raise ValueError(
                    f"Cluster count {len(labels)} does not match "
                    f"vocabulary size {len(words)}."
                )

        if not np.all(np.isfinite(table)):
            raise ValueError("Vector table contains non-finite values.")

        # Rows are stored at unit length; queries rely on dot product == cosine.
        table = normalize_rows(table)
        table.setflags(write=False)

        self._vocab = words
        self._vectors = table
        self._clusters = labels
        self._index = self._build_index(words)

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_index(words: Tuple[str, ...]) -> Dict[str, int]:
        # First occurrence wins for repeated words.
        index: Dict[str, int] = {}
        for i, word in enumerate(words):
            if word in index:
                logger.warning(
                    "duplicate word %r at index %d shadowed by index %d",
                    word,
                    i,
                    index[word],
                )
                continue
            index[word] = i
        return index

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def vocab(self) -> Tuple[str, ...]:
        return self._vocab

    @property
    def vectors(self) -> np.ndarray:
        return self._vectors

    @property
    def clusters(self) -> Optional[Tuple[str, ...]]:
        return self._clusters

    @property
    def vector_size(self) -> int:
        return int(self._vectors.shape[1])

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def index_of(self, word: str) -> Optional[int]:
        """
        Return the position of ``word`` in the vocabulary, or None if absent.
        """
        return self._index.get(word)

    def vector_of(self, word: str) -> Optional[np.ndarray]:
        """
        Return the (read-only) vector for ``word``, or None if absent.
        """
        idx = self._index.get(word)
        if idx is None:
            return None
        return self._vectors[idx]

    def contains(self, word: str) -> bool:
        return word in self._index

    def word_at(self, index: int) -> str:
        return self._vocab[index]

    def cluster_at(self, index: int) -> Optional[str]:
        if self._clusters is None:
            return None
        return self._clusters[index]

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word in self._index

    def __len__(self) -> int:
        return len(self._vocab)

    def __iter__(self) -> Iterator[str]:
        return iter(self._vocab)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vocab_size={len(self)}, "
            f"vector_size={self.vector_size})"
        )
