import io
import struct

import pytest

from w2v_search.vectors.loader import load_binary


def _binary_bytes(entries, header=None, trailing_newline=True):
    if header is None:
        dim = len(entries[0][1]) if entries else 1
        header = f"{len(entries)} {dim}\n"

    out = io.BytesIO()
    out.write(header.encode("ascii") if isinstance(header, str) else header)
    for i, (word, vector) in enumerate(entries):
        out.write(word.encode("utf-8") if isinstance(word, str) else word)
        out.write(b" ")
        out.write(struct.pack("<%df" % len(vector), *vector))
        if trailing_newline or i < len(entries) - 1:
            out.write(b"\n")
    return out.getvalue()


def _text_bytes(entries, header=None):
    if header is None:
        dim = len(entries[0][1]) if entries else 1
        header = f"{len(entries)} {dim}\n"

    lines = [header]
    for word, vector in entries:
        lines.append(word + " " + " ".join(repr(float(x)) for x in vector) + "\n")
    return "".join(lines).encode("utf-8")


@pytest.fixture
def binary_bytes():
    """Factory building word2vec binary payloads from (word, vector) pairs."""
    return _binary_bytes


@pytest.fixture
def text_bytes():
    """Factory building word2vec text payloads from (word, vector) pairs."""
    return _text_bytes


@pytest.fixture
def pets_store():
    entries = [
        ("cat", [1.0, 0.0]),
        ("dog", [0.0, 1.0]),
        ("fish", [0.7071, 0.7071]),
    ]
    return load_binary(io.BytesIO(_binary_bytes(entries)))


@pytest.fixture
def royalty_store():
    # king - man + woman lands on queen, but "woman" itself scores
    # highest against the target.
    entries = [
        ("king", [1.0, 1.0, 0.0]),
        ("man", [1.0, 0.0, 0.0]),
        ("woman", [0.0, 0.0, 1.0]),
        ("queen", [0.0, 1.0, 0.3]),
        ("apple", [0.0, -1.0, 0.0]),
        ("prince", [1.0, 1.0, 0.2]),
    ]
    return load_binary(io.BytesIO(_binary_bytes(entries)))
