"""
Tests for the binary STL codec.

Tests cover:
- Exact byte layout
- Round trips through bytes and files
- ASCII detection, truncation and conflicts
- Allocation failures
- Human-readable dump
"""

import io
import struct

import numpy as np
import pytest

from reliefstl import (
    ConflictError,
    InvalidArgumentError,
    Model,
    ModelIOError,
    ModelMemoryError,
    TruncatedInputError,
    UnsupportedFormatError,
    build_model,
    build_model_from_file,
)
from reliefstl.io import (
    decode_model,
    encode_model,
    expected_file_size,
    format_model,
    load_model,
    print_model,
    read_raw_heightmap,
    save_model,
)
from reliefstl.io import readers
from reliefstl.io.writers import _write_all


# ============== Layout Tests ==============

class TestByteLayout:
    """Encoded bytes match the binary STL layout."""

    def test_single_facet_bytes(self, unit_facet_model):
        unit_facet_model.attributes[0] = 0xBEEF
        data = encode_model(unit_facet_model)

        expected = (
            bytes(80)
            + struct.pack("<I", 1)
            + struct.pack("<12fH", 1, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 1, 0xBEEF)
        )
        assert data == expected

    def test_size(self, random_model):
        data = encode_model(random_model)
        assert len(data) == 84 + 50 * len(random_model)
        assert len(data) == expected_file_size(len(random_model))

    def test_count_is_little_endian(self, random_model):
        data = encode_model(random_model)
        assert data[80:84] == (7).to_bytes(4, "little")

    def test_empty_model(self):
        data = encode_model(Model(header=b"empty"))
        assert len(data) == 84
        assert decode_model(data) == Model(header=b"empty")

    def test_encode_none(self):
        with pytest.raises(InvalidArgumentError):
            encode_model(None)


# ============== Round Trip Tests ==============

class TestRoundTrip:
    """decode(encode(m)) == m, field by field."""

    def test_bytes_round_trip(self, random_model):
        decoded = decode_model(encode_model(random_model))

        assert decoded == random_model
        assert decoded.header == random_model.header
        np.testing.assert_array_equal(decoded.attributes, random_model.attributes)

    def test_file_round_trip(self, tmp_path, random_model):
        path = tmp_path / "model.stl"
        save_model(random_model, path)

        assert path.stat().st_size == expected_file_size(7)
        assert load_model(path) == random_model

    def test_built_model_round_trip(self, tmp_path, hill_samples):
        model = build_model(hill_samples.ravel(), "top_left", 5, 4, 75, 1.0, 0.5)
        path = tmp_path / "hill.stl"
        save_model(model, str(path))
        assert load_model(str(path)) == model

    def test_non_finite_values_pass_through(self):
        model = Model.empty(1)
        model.vertices[0, 0] = [np.nan, np.inf, -np.inf]
        decoded = decode_model(encode_model(model))
        assert decoded == model
        assert np.isnan(decoded.vertices[0, 0, 0])

    def test_inconsistent_normal_is_kept(self, unit_facet_model):
        unit_facet_model.normals[0] = [9.0, 9.0, 9.0]
        decoded = decode_model(encode_model(unit_facet_model))
        np.testing.assert_array_equal(decoded.normals[0], [9.0, 9.0, 9.0])

    def test_trailing_bytes_ignored(self, random_model):
        data = encode_model(random_model) + b"trailing"
        assert decode_model(data) == random_model

    def test_decoded_model_does_not_alias_input(self, random_model):
        data = bytearray(encode_model(random_model))
        decoded = decode_model(data)
        data[84:134] = bytes(50)
        assert decoded == random_model

    def test_memoryview_input(self, random_model):
        assert decode_model(memoryview(encode_model(random_model))) == random_model


# ============== Failure Tests ==============

class TestDecodeFailures:
    """Invalid inputs raise the documented errors."""

    def test_ascii_header(self):
        data = b"solid terrain".ljust(80, b" ") + struct.pack("<I", 0)
        with pytest.raises(UnsupportedFormatError):
            decode_model(data)

    def test_ascii_header_regardless_of_content(self, random_model):
        random_model.header = b"solidworks export"
        with pytest.raises(UnsupportedFormatError):
            decode_model(encode_model(random_model))

    def test_ascii_prefix_only(self):
        with pytest.raises(UnsupportedFormatError):
            decode_model(b"solid" + bytes(75))

    def test_short_header(self):
        with pytest.raises(TruncatedInputError):
            decode_model(bytes(79))

    def test_missing_count(self):
        with pytest.raises(TruncatedInputError):
            decode_model(bytes(82))

    def test_truncated_mid_facet(self, random_model):
        data = encode_model(random_model)
        with pytest.raises(TruncatedInputError):
            decode_model(data[:84 + 50 * 3 + 17])

    def test_truncated_at_facet_boundary(self, random_model):
        data = encode_model(random_model)
        with pytest.raises(TruncatedInputError):
            decode_model(data[:-50])

    def test_huge_count_is_truncated(self):
        data = bytes(80) + struct.pack("<I", 0xFFFFFFFF) + bytes(50)
        with pytest.raises(TruncatedInputError):
            decode_model(data)

    def test_none(self):
        with pytest.raises(InvalidArgumentError):
            decode_model(None)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ModelIOError):
            load_model(tmp_path / "missing.stl")

    def test_load_truncated_file(self, tmp_path, random_model):
        path = tmp_path / "cut.stl"
        path.write_bytes(encode_model(random_model)[:-1])
        with pytest.raises(TruncatedInputError):
            load_model(path)


class TestSaveFailures:
    """save_model never overwrites and reports short writes."""

    def test_second_save_conflicts(self, tmp_path, random_model):
        path = tmp_path / "model.stl"
        save_model(random_model, path)
        with pytest.raises(ConflictError):
            save_model(random_model, path)

    def test_conflict_leaves_file_untouched(self, tmp_path, random_model):
        path = tmp_path / "model.stl"
        path.write_bytes(b"keep me")
        with pytest.raises(ConflictError):
            save_model(random_model, path)
        assert path.read_bytes() == b"keep me"

    def test_conflict_is_file_exists_error(self, tmp_path, random_model):
        path = tmp_path / "model.stl"
        path.touch()
        with pytest.raises(FileExistsError):
            save_model(random_model, path)

    def test_missing_directory(self, tmp_path, random_model):
        with pytest.raises(ModelIOError):
            save_model(random_model, tmp_path / "no" / "such" / "dir.stl")

    def test_none_arguments(self, tmp_path, random_model):
        with pytest.raises(InvalidArgumentError):
            save_model(None, tmp_path / "a.stl")
        with pytest.raises(InvalidArgumentError):
            save_model(random_model, None)

    def test_short_write(self, tmp_path):
        class ShortFile:
            def write(self, chunk):
                return len(chunk) - 1

        with pytest.raises(ModelIOError):
            _write_all(ShortFile(), b"abcd", "header", tmp_path / "x.stl")


class TestRawHeightmap:
    """Raw heightmap reader."""

    def test_reads_rows(self, tmp_path):
        path = tmp_path / "map.raw"
        path.write_bytes(bytes([1, 2, 3, 4, 5, 6, 99]))
        samples = read_raw_heightmap(path, cols=3, rows=2)
        assert samples.dtype == np.uint8
        np.testing.assert_array_equal(samples, [[1, 2, 3], [4, 5, 6]])

    def test_invalid_size(self, tmp_path):
        with pytest.raises(InvalidArgumentError):
            read_raw_heightmap(tmp_path / "map.raw", cols=0, rows=2)


class _ExhaustingFile:
    """File object whose read() cannot allocate its buffer."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self, *args):
        raise MemoryError


def _exhausting_open(*args, **kwargs):
    return _ExhaustingFile()


class TestOutOfMemory:
    """Allocation failures surface as ModelMemoryError."""

    def test_decode(self, monkeypatch, random_model):
        data = encode_model(random_model)

        def _out_of_memory(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(np, "zeros", _out_of_memory)
        with pytest.raises(ModelMemoryError):
            decode_model(data)

    def test_load(self, monkeypatch, tmp_path, random_model):
        path = tmp_path / "model.stl"
        save_model(random_model, path)

        monkeypatch.setattr(readers, "open", _exhausting_open, raising=False)
        with pytest.raises(ModelMemoryError):
            load_model(path)

    def test_raw_heightmap(self, monkeypatch, tmp_path):
        path = tmp_path / "map.raw"
        path.write_bytes(bytes(6))

        monkeypatch.setattr(readers, "open", _exhausting_open, raising=False)
        with pytest.raises(ModelMemoryError):
            read_raw_heightmap(path, cols=3, rows=2)
        with pytest.raises(ModelMemoryError):
            build_model_from_file(path, "bottom_left", 3, 2, 100, 0, 1)


# ============== Dump Tests ==============

class TestDump:
    """Human-readable output."""

    def test_format(self, unit_facet_model):
        text = format_model(unit_facet_model)
        lines = text.splitlines()
        assert lines[0] == "facet count: 1"
        assert lines[1] == "Facet 1:"
        assert lines[2].split() == ["Norm:", "1.000000", "0.000000", "0.000000"]
        assert lines[5].strip().startswith("V3")

    def test_none_model(self):
        assert format_model(None) == "NULL model\n"

    def test_print_to_stream(self, random_model):
        stream = io.StringIO()
        print_model(random_model, file=stream)
        assert stream.getvalue().count("Facet ") == 7
