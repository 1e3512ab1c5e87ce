"""
Word Vectors Package

Loading of word2vec models and similarity queries over them.
"""

from .errors import (
    WordVectorsError,
    LoadError,
    FormatError,
    TruncatedDataError,
    TruncatedWordError,
    QueryError,
    UnknownWordError,
    EmptyQueryError,
)
from .store import WordVectors
from .loader import load_binary, load_text, load_word_vectors
from .query import Neighbor, nearest, analogy, similarity

__all__ = [
    "WordVectorsError",
    "LoadError",
    "FormatError",
    "TruncatedDataError",
    "TruncatedWordError",
    "QueryError",
    "UnknownWordError",
    "EmptyQueryError",
    "WordVectors",
    "load_binary",
    "load_text",
    "load_word_vectors",
    "Neighbor",
    "nearest",
    "analogy",
    "similarity",
]
