"""
Word Vector Errors

Exception hierarchy shared by the loader and the query engine.

Load errors are fatal to a single load attempt: no partially built store is
ever returned. Query errors are local to one call and leave the store usable.
"""

from __future__ import annotations


class WordVectorsError(Exception):
    """Base error for word vector loading and querying."""


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------

class LoadError(WordVectorsError):
    """Base error for a failed model load."""


class FormatError(LoadError):
    """Raised when the header or a word token is malformed."""


class TruncatedDataError(LoadError):
    """Raised when the stream ends in the middle of an entry."""


class TruncatedWordError(TruncatedDataError, FormatError):
    """
    Raised when the stream ends before a word's terminating space.

    The word token is both malformed and cut short, so this error is caught
    by handlers of either parent.
    """


# ---------------------------------------------------------------------
# Querying
# ---------------------------------------------------------------------

class QueryError(WordVectorsError):
    """Base error for a rejected similarity query."""


class UnknownWordError(QueryError, KeyError):
    """Raised when a query references a word absent from the vocabulary."""

    def __init__(self, word: str) -> None:
        super().__init__(word)
        self.word = word

    def __str__(self) -> str:
        return f"Word not in vocabulary: {self.word!r}"


class EmptyQueryError(QueryError, ValueError):
    """Raised when an analogy query has neither positive nor negative terms."""
