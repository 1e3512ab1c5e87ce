"""
Loader Tests

Covers:
- Binary and text parsing into a normalized store
- Header validation
- Truncated and malformed entries
- Duplicate words, vocabulary caps and filters
- Loading from a file path
"""

import io
import logging
import struct

import numpy as np
import pytest

from w2v_search.vectors.errors import (
    FormatError,
    LoadError,
    TruncatedDataError,
    TruncatedWordError,
)
from w2v_search.vectors.loader import (
    decode_vector,
    load_binary,
    load_text,
    load_word_vectors,
)
from w2v_search.vectors.store import normalize_rows


ENTRIES = [
    ("alpha", [3.0, 4.0]),
    ("beta", [0.0, 2.0]),
    ("gamma", [-1.0, 0.0]),
]


class TestBinaryLoader:
    """Tests for load_binary on well-formed input."""

    def test_round_trip_vocab_and_vectors(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)))

        assert store.vocab == ("alpha", "beta", "gamma")
        assert store.vector_size == 2
        np.testing.assert_allclose(
            store.vectors,
            [[0.6, 0.8], [0.0, 1.0], [-1.0, 0.0]],
            rtol=1e-6,
        )

    def test_vectors_are_unit_length(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)))
        norms = np.linalg.norm(store.vectors, axis=1)
        np.testing.assert_allclose(norms, 1.0, rtol=1e-6)

    def test_zero_vector_is_kept(self, binary_bytes):
        entries = [("zero", [0.0, 0.0]), ("one", [1.0, 0.0])]
        store = load_binary(io.BytesIO(binary_bytes(entries)))

        np.testing.assert_array_equal(store.vector_of("zero"), [0.0, 0.0])
        assert not np.isnan(store.vectors).any()

    def test_index_of_inverts_vocab(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)))
        for i, word in enumerate(store.vocab):
            assert store.index_of(word) == i

    def test_utf8_words(self, binary_bytes):
        entries = [("café", [1.0, 0.0]), ("naïve", [0.0, 1.0])]
        store = load_binary(io.BytesIO(binary_bytes(entries)))
        assert store.vocab == ("café", "naïve")

    def test_custom_encoding(self, binary_bytes):
        entries = [("café".encode("latin-1"), [1.0, 0.0])]
        store = load_binary(io.BytesIO(binary_bytes(entries)), encoding="latin-1")
        assert store.vocab == ("café",)

    def test_missing_final_newline_tolerated(self, binary_bytes):
        data = binary_bytes(ENTRIES, trailing_newline=False)
        store = load_binary(io.BytesIO(data))
        assert len(store) == 3

    def test_stream_is_read_to_the_end(self, binary_bytes):
        stream = io.BytesIO(binary_bytes(ENTRIES))
        load_binary(stream)
        assert stream.read() == b""

    def test_pre_normalized_example(self, pets_store):
        assert pets_store.vocab == ("cat", "dog", "fish")
        np.testing.assert_allclose(
            pets_store.vector_of("fish"), [0.70710677, 0.70710677], rtol=1e-5
        )


class TestBinaryLoaderOptions:
    """Tests for duplicates, limit and desired_vocab."""

    def test_duplicate_words_keep_first(self, binary_bytes, caplog):
        entries = [
            ("a", [1.0, 0.0]),
            ("b", [0.0, 1.0]),
            ("a", [0.0, -1.0]),
        ]
        with caplog.at_level(logging.WARNING, logger="w2v.loader"):
            store = load_binary(io.BytesIO(binary_bytes(entries)))

        assert store.vocab == ("a", "b")
        np.testing.assert_array_equal(store.vector_of("a"), [1.0, 0.0])
        assert "duplicate word" in caplog.text

    def test_limit_caps_entries(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)), limit=2)
        assert store.vocab == ("alpha", "beta")

    def test_limit_above_size_reads_everything(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)), limit=100)
        assert len(store) == 3

    def test_limit_zero_gives_empty_store(self, binary_bytes):
        store = load_binary(io.BytesIO(binary_bytes(ENTRIES)), limit=0)
        assert len(store) == 0
        assert store.vectors.shape == (0, 2)

    def test_negative_limit_rejected(self, binary_bytes):
        with pytest.raises(ValueError):
            load_binary(io.BytesIO(binary_bytes(ENTRIES)), limit=-1)

    def test_desired_vocab_filters_words(self, binary_bytes):
        store = load_binary(
            io.BytesIO(binary_bytes(ENTRIES)),
            desired_vocab={"gamma", "alpha"},
        )
        assert store.vocab == ("alpha", "gamma")
        np.testing.assert_allclose(store.vector_of("gamma"), [-1.0, 0.0])


class TestHeaderErrors:
    """The header must be two positive integers."""

    @pytest.mark.parametrize(
        "header",
        [
            b"",
            b"\n",
            b"abc def\n",
            b"3 x\n",
            b"3\n",
            b"3 2 1\n",
            b"0 2\n",
            b"3 0\n",
            b"-1 2\n",
            b"3.5 2\n",
        ],
    )
    def test_bad_header_raises_format_error(self, header):
        with pytest.raises(FormatError):
            load_binary(io.BytesIO(header + b"cat \x00\x00\x80\x3f\n"))

    def test_non_ascii_header(self):
        with pytest.raises(FormatError):
            load_binary(io.BytesIO(b"\xff\xfe 2\n"))


class TestTruncatedInput:
    """The stream ends before the declared entries are complete."""

    def test_truncated_mid_vector(self):
        data = b"1 300\n" + b"word " + struct.pack("<100f", *([0.5] * 100))
        with pytest.raises(TruncatedDataError):
            load_binary(io.BytesIO(data))

    def test_fewer_entries_than_declared(self, binary_bytes):
        data = binary_bytes(ENTRIES, header="5 2\n")
        with pytest.raises(TruncatedDataError):
            load_binary(io.BytesIO(data))

    def test_stream_ends_mid_word(self, binary_bytes):
        data = binary_bytes(ENTRIES[:1], header="2 2\n") + b"bet"
        with pytest.raises(TruncatedWordError) as exc_info:
            load_binary(io.BytesIO(data))

        assert isinstance(exc_info.value, FormatError)
        assert isinstance(exc_info.value, TruncatedDataError)

    def test_missing_separator_before_next_entry(self):
        data = b"2 1\n" + b"a " + struct.pack("<f", 1.0)
        with pytest.raises(TruncatedDataError):
            load_binary(io.BytesIO(data))

    def test_errors_share_a_base(self):
        with pytest.raises(LoadError):
            load_binary(io.BytesIO(b"1 4\nword \x00\x00"))


class TestMalformedEntries:
    """Word tokens and vector values must be well-formed."""

    def test_invalid_utf8_word(self):
        data = b"1 1\n\xff\xfe " + struct.pack("<f", 1.0) + b"\n"
        with pytest.raises(FormatError):
            load_binary(io.BytesIO(data))

    def test_empty_word(self):
        data = b"1 1\n " + struct.pack("<f", 1.0) + b"\n"
        with pytest.raises(FormatError):
            load_binary(io.BytesIO(data))

    def test_nan_component_rejected(self, binary_bytes):
        entries = [("bad", [float("nan"), 1.0])]
        with pytest.raises(FormatError):
            load_binary(io.BytesIO(binary_bytes(entries)))


class TestDecoding:
    """Explicit little-endian float decoding."""

    def test_decode_little_endian(self):
        buf = struct.pack("<3f", 1.5, -2.25, 0.0)
        np.testing.assert_array_equal(decode_vector(buf, 3), [1.5, -2.25, 0.0])

    def test_decode_ignores_host_byte_order(self):
        buf = bytes([0x00, 0x00, 0x80, 0x3F])  # 1.0 little-endian
        assert decode_vector(buf, 1)[0] == 1.0

    def test_decode_rejects_short_buffer(self):
        with pytest.raises(TruncatedDataError):
            decode_vector(b"\x00\x00\x80", 1)

    def test_decode_result_is_writable_copy(self):
        vec = decode_vector(struct.pack("<f", 1.0), 1)
        assert vec.dtype == np.float32
        assert vec.flags.writeable

    def test_normalize_rows_skips_zero_rows(self):
        out = normalize_rows(np.array([[0.0, 0.0], [0.0, 5.0]], dtype=np.float32))
        np.testing.assert_array_equal(out, [[0.0, 0.0], [0.0, 1.0]])

    def test_huge_components_normalize_without_overflow(self, binary_bytes):
        entries = [("big", [3e38, 3e38]), ("small", [1.0, 0.0])]
        store = load_binary(io.BytesIO(binary_bytes(entries)))

        np.testing.assert_allclose(
            store.vector_of("big"), [0.70710677, 0.70710677], rtol=1e-6
        )
        assert np.linalg.norm(store.vector_of("big")) == pytest.approx(1.0)


class TestTextLoader:
    """Tests for load_text."""

    def test_matches_binary_loader(self, binary_bytes, text_bytes):
        from_binary = load_binary(io.BytesIO(binary_bytes(ENTRIES)))
        from_text = load_text(io.BytesIO(text_bytes(ENTRIES)))

        assert from_text.vocab == from_binary.vocab
        np.testing.assert_allclose(from_text.vectors, from_binary.vectors, rtol=1e-6)

    def test_wrong_component_count(self, text_bytes):
        data = text_bytes([("a", [1.0, 2.0])], header="1 3\n")
        with pytest.raises(FormatError):
            load_text(io.BytesIO(data))

    def test_unparsable_component(self):
        with pytest.raises(FormatError):
            load_text(io.BytesIO(b"1 2\na 1.0 abc\n"))

    def test_blank_line(self):
        with pytest.raises(FormatError):
            load_text(io.BytesIO(b"1 2\n\n"))

    def test_fewer_lines_than_declared(self, text_bytes):
        data = text_bytes(ENTRIES, header="4 2\n")
        with pytest.raises(TruncatedDataError):
            load_text(io.BytesIO(data))

    def test_bad_header(self):
        with pytest.raises(FormatError):
            load_text(io.BytesIO(b"two 2\na 1 2\n"))

    def test_limit_and_desired_vocab(self, text_bytes):
        store = load_text(
            io.BytesIO(text_bytes(ENTRIES)),
            limit=2,
            desired_vocab={"beta", "gamma"},
        )
        assert store.vocab == ("beta",)


class TestLoadFromPath:
    """Tests for load_word_vectors."""

    def test_bin_suffix_reads_binary(self, tmp_path, binary_bytes):
        path = tmp_path / "model.bin"
        path.write_bytes(binary_bytes(ENTRIES))

        store = load_word_vectors(path)
        assert store.vocab == ("alpha", "beta", "gamma")

    def test_other_suffix_reads_text(self, tmp_path, text_bytes):
        path = tmp_path / "model.txt"
        path.write_bytes(text_bytes(ENTRIES))

        store = load_word_vectors(str(path))
        assert len(store) == 3

    def test_explicit_format_overrides_suffix(self, tmp_path, binary_bytes):
        path = tmp_path / "model.vec"
        path.write_bytes(binary_bytes(ENTRIES))

        store = load_word_vectors(path, binary=True)
        assert store.vocab[0] == "alpha"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_word_vectors(tmp_path / "absent.bin")
