"""Tests for size calculation and buffer inspection."""

from __future__ import annotations

from typing import Any

import pytest

from kindpack import (
    BigInt,
    CodecOptions,
    EmptyInputError,
    KindMismatchError,
    UnsupportedTypeError,
    encode,
    encoded_size,
    field_sizes,
    object_layout,
)


class TestEncodedSize:
    """Test encoded_size matches the encoder."""

    def test_known_sizes(self, sample_object: dict[str, Any]) -> None:
        """Test sizes of small fixed values."""
        assert encoded_size(sample_object) == 14
        assert encoded_size({}) == 6
        assert encoded_size([]) == 3

    @pytest.mark.parametrize(
        "value",
        [
            {"s": "x" * 300, "n": 2**40, "big": BigInt(2**300), "flag": True},
            [[], {}, [[1, 2], {"a": [3]}]],
            {"wide": list(range(200)), "nested": {"deeper": {"deepest": "é" * 100}}},
            [BigInt(0), BigInt(252), BigInt(253), 0xFFFF, 0x10000],
        ],
    )
    def test_matches_encode(self, value: Any) -> None:
        """Test sizes across varint width boundaries."""
        assert encoded_size(value) == len(encode(value))

    def test_extension_records(self, point_type: Any) -> None:
        """Test extension items count their own bytes."""
        value = [point_type(1, 2), {"p": [point_type(3, 4)]}]
        assert encoded_size(value) == len(encode(value))
        assert encoded_size(point_type(1, 2)) == 3

    def test_custom_options(self) -> None:
        """Test sizes under custom structural kinds."""
        options = CodecOptions(packed_object_kind=0x00, packed_array_kind=0x01)
        value = {"a": [1, 2]}
        assert encoded_size(value, options) == len(encode(value, options))

    def test_top_level_leaf(self) -> None:
        """Test bare values have no top-level size."""
        with pytest.raises(UnsupportedTypeError):
            encoded_size("x")


class TestFieldSizes:
    """Test per-field entry sizes."""

    def test_leaf_fields(self) -> None:
        """Test tag plus value bytes, in wire order."""
        sizes = field_sizes({"ok": True, "name": "a"})
        assert sizes == {"name": 3, "ok": 2}
        assert list(sizes) == ["name", "ok"]

    def test_container_field(self) -> None:
        """Test container entries include their length prefix."""
        assert field_sizes({"x": [1]}) == {"x": 7}

    def test_requires_mapping(self) -> None:
        """Test field_sizes only takes mappings."""
        with pytest.raises(UnsupportedTypeError):
            field_sizes([1])  # type: ignore[arg-type]


class TestObjectLayout:
    """Test object_layout."""

    def test_layout(self, sample_object_bytes: bytes) -> None:
        """Test the header fields of a known buffer."""
        layout = object_layout(sample_object_bytes)
        assert layout.kind == 0x20
        assert layout.header_len == 4
        assert layout.total_len == 10
        assert layout.names_len == 6
        assert layout.values_len == 4
        assert layout.field_names == ("name",)
        assert layout.size == len(sample_object_bytes)

    def test_layout_order(self) -> None:
        """Test names are reported in wire order."""
        assert object_layout(encode({"b": 1, "a": 2})).field_names == ("a", "b")

    def test_not_an_object(self) -> None:
        """Test arrays are refused."""
        with pytest.raises(KindMismatchError):
            object_layout(encode([]))

    def test_empty(self) -> None:
        """Test empty buffers are refused."""
        with pytest.raises(EmptyInputError):
            object_layout(b"")
