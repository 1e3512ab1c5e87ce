"""
word2vec Model Loader

This module parses the word2vec binary and text formats into a
:class:`~w2v_search.vectors.store.WordVectors` store.

Binary layout
-------------
    <vocab_size> SP <vector_size> LF
    repeated vocab_size times:
        <word bytes> SP <vector_size * 4 bytes, little-endian float32> LF

Text layout
-----------
    <vocab_size> SP <vector_size> LF
    repeated vocab_size times:
        <word> SP <float> SP ... SP <float> LF

Key Properties
--------------
- Single sequential pass over the stream
- Explicit little-endian float decoding with length validation
- Every vector unit-normalized by the store it is loaded into
- Repeated words: first occurrence wins, later ones are skipped
- Either a complete store is returned or an exception is raised
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import BinaryIO, Collection, List, Optional, Tuple, Union

import numpy as np

from .errors import FormatError, TruncatedDataError, TruncatedWordError
from .store import WordVectors

logger = logging.getLogger("w2v.loader")

FLOAT32_LE = np.dtype("<f4")

_SPACE = b" "


# ---------------------------------------------------------------------
# Decoding Helpers
# ---------------------------------------------------------------------

def decode_vector(buf: bytes, vector_size: int) -> np.ndarray:
    """
    Decode ``vector_size`` little-endian float32 values from ``buf``.

    Raises
    ------
    TruncatedDataError
        If ``buf`` does not hold exactly ``4 * vector_size`` bytes.
    """
    expected = FLOAT32_LE.itemsize * vector_size
    if len(buf) != expected:
        raise TruncatedDataError(
            f"Expected {expected} vector bytes, got {len(buf)}."
        )
    return np.frombuffer(buf, dtype=FLOAT32_LE, count=vector_size).astype(np.float32)


def _check_finite(vector: np.ndarray, entry: int, word: str) -> None:
    if not np.all(np.isfinite(vector)):
        raise FormatError(
            f"Non-finite vector component for word {word!r} at entry {entry}."
        )


# ---------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------

def _read_header(stream: BinaryIO) -> Tuple[int, int]:
    raw = stream.readline()
    if not raw:
        raise FormatError("Missing header line.")

    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError("Header line is not ASCII.") from exc

    parts = text.split()
    if len(parts) != 2:
        raise FormatError(
            f"Header must contain exactly two integers, got {text.strip()!r}."
        )

    try:
        vocab_size, vector_size = (int(p) for p in parts)
    except ValueError as exc:
        raise FormatError(f"Non-numeric header: {text.strip()!r}.") from exc

    if vocab_size <= 0 or vector_size <= 0:
        raise FormatError(
            f"Header sizes must be positive, got {vocab_size} and {vector_size}."
        )

    return vocab_size, vector_size


def _entry_count(vocab_size: int, limit: Optional[int]) -> int:
    if limit is None:
        return vocab_size
    if limit < 0:
        raise ValueError("limit must be non-negative.")
    return min(vocab_size, limit)


# ---------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------

class _Collector:
    """Accumulates accepted entries, skipping duplicates and filtered words."""

    def __init__(
        self,
        vector_size: int,
        desired_vocab: Optional[Collection[str]],
    ) -> None:
        self.vector_size = vector_size
        self.desired_vocab = desired_vocab
        self.words: List[str] = []
        self.rows: List[np.ndarray] = []
        self._seen: set = set()
        self.skipped_duplicates = 0
        self.skipped_filtered = 0

    def add(self, word: str, vector: np.ndarray) -> None:
        if self.desired_vocab is not None and word not in self.desired_vocab:
            self.skipped_filtered += 1
            return
        if word in self._seen:
            logger.warning(
                "duplicate word %r in word2vec input, keeping first occurrence",
                word,
            )
            self.skipped_duplicates += 1
            return
        self._seen.add(word)
        self.words.append(word)
        self.rows.append(vector)

    def build(self) -> WordVectors:
        if self.rows:
            matrix = np.vstack(self.rows)
        else:
            matrix = np.empty((0, self.vector_size), dtype=np.float32)

        if self.skipped_filtered:
            logger.info("skipped %d words outside desired_vocab", self.skipped_filtered)

        return WordVectors(vocab=self.words, vectors=matrix)


# ---------------------------------------------------------------------
# Binary Format
# ---------------------------------------------------------------------

def _read_word(stream: BinaryIO, entry: int, encoding: str) -> str:
    buf = bytearray()
    while True:
        ch = stream.read(1)
        if not ch:
            raise TruncatedWordError(
                f"Unexpected end of stream while reading word at entry {entry}."
            )
        if ch == _SPACE:
            break
        buf += ch

    if not buf:
        raise FormatError(f"Empty word token at entry {entry}.")

    try:
        return bytes(buf).decode(encoding)
    except UnicodeDecodeError as exc:
        raise FormatError(
            f"Word at entry {entry} is not valid {encoding}."
        ) from exc


def load_binary(
    stream: BinaryIO,
    *,
    encoding: str = "utf-8",
    limit: Optional[int] = None,
    desired_vocab: Optional[Collection[str]] = None,
) -> WordVectors:
    """
    Load a word2vec binary model from ``stream``.

    Parameters
    ----------
    stream : BinaryIO
        Readable byte stream positioned at the start of the header.

    encoding : str
        Encoding of the word tokens.

    limit : Optional[int]
        Maximum number of entries to read. Defaults to the declared size.

    desired_vocab : Optional[Collection[str]]
        If given, words outside this collection are read and discarded.

    Returns
    -------
    WordVectors
        Fully built, normalized store.

    Raises
    ------
    FormatError
        Malformed header or word token.

    TruncatedDataError
        The stream ends in the middle of an entry.
    """
    vocab_size, vector_size = _read_header(stream)
    count = _entry_count(vocab_size, limit)
    logger.info(
        "reading %d of %d binary entries (vector_size=%d)",
        count,
        vocab_size,
        vector_size,
    )

    binary_len = FLOAT32_LE.itemsize * vector_size
    collector = _Collector(vector_size, desired_vocab)

    for i in range(count):
        word = _read_word(stream, i, encoding)

        raw = stream.read(binary_len)
        if len(raw) < binary_len:
            raise TruncatedDataError(
                f"Vector for word {word!r} at entry {i} is truncated: "
                f"expected {binary_len} bytes, got {len(raw)}."
            )
        vector = decode_vector(raw, vector_size)
        _check_finite(vector, i, word)

        # The separator may be missing after the very last entry of a file.
        if not stream.read(1) and i != vocab_size - 1:
            raise TruncatedDataError(
                f"Missing separator after word {word!r} at entry {i}."
            )

        collector.add(word, vector)

    return collector.build()


# ---------------------------------------------------------------------
# Text Format
# ---------------------------------------------------------------------

def _parse_text_entry(
    line: bytes,
    entry: int,
    vector_size: int,
    encoding: str,
) -> Tuple[str, np.ndarray]:
    try:
        parts = line.decode(encoding).split()
    except UnicodeDecodeError as exc:
        raise FormatError(f"Line for entry {entry} is not valid {encoding}.") from exc

    if not parts:
        raise FormatError(f"Empty line at entry {entry}.")

    word, components = parts[0], parts[1:]
    if len(components) != vector_size:
        raise FormatError(
            f"Word {word!r} at entry {entry} has {len(components)} "
            f"components, expected {vector_size}."
        )

    try:
        vector = np.array([float(x) for x in components], dtype=np.float32)
    except ValueError as exc:
        raise FormatError(
            f"Unparsable vector component for word {word!r} at entry {entry}."
        ) from exc

    return word, vector


def load_text(
    stream: BinaryIO,
    *,
    encoding: str = "utf-8",
    limit: Optional[int] = None,
    desired_vocab: Optional[Collection[str]] = None,
) -> WordVectors:
    """
    Load a word2vec text model from ``stream``.

    Takes the same parameters and raises the same errors as
    :func:`load_binary`.
    """
    vocab_size, vector_size = _read_header(stream)
    count = _entry_count(vocab_size, limit)
    logger.info(
        "reading %d of %d text entries (vector_size=%d)",
        count,
        vocab_size,
        vector_size,
    )

    collector = _Collector(vector_size, desired_vocab)

    for i in range(count):
        line = stream.readline()
        if not line:
            raise TruncatedDataError(
                f"Unexpected end of stream at entry {i} of {vocab_size}."
            )
        word, vector = _parse_text_entry(line, i, vector_size, encoding)
        _check_finite(vector, i, word)
        collector.add(word, vector)

    return collector.build()


# ---------------------------------------------------------------------
# File Entry Point
# ---------------------------------------------------------------------

def load_word_vectors(
    path: Union[str, Path],
    *,
    binary: Optional[bool] = None,
    encoding: str = "utf-8",
    limit: Optional[int] = None,
    desired_vocab: Optional[Collection[str]] = None,
) -> WordVectors:
    """
    Open ``path`` and load it as a word2vec model.

    When ``binary`` is None the format is picked from the file suffix:
    ``.bin`` is binary, anything else is text.
    """
    path = Path(path)
    if binary is None:
        binary = path.suffix.lower() == ".bin"

    loader = load_binary if binary else load_text
    fmt = "binary" if binary else "text"

    logger.info("loading %s word vectors from %s", fmt, path)
    start = time.perf_counter()

    with path.open("rb") as fin:
        store = loader(
            fin,
            encoding=encoding,
            limit=limit,
            desired_vocab=desired_vocab,
        )

    logger.info(
        "loaded %d x %d vectors from %s in %.2fs",
        len(store),
        store.vector_size,
        path,
        time.perf_counter() - start,
    )
    return store
