"""Unit tests for packed array encoding/decoding."""

from __future__ import annotations

from typing import Any

import pytest

from kindpack import (
    CodecOptions,
    EncodeError,
    ItemsLengthMismatchError,
    KindMismatchError,
    KindRegistry,
    MissingRegistryError,
    TruncatedDataError,
    UnsupportedTypeError,
    decode_array,
    encode,
    encode_array,
)
from kindpack.models import ExtensionRecord

LENIENT = CodecOptions(strict_array_length=False)


class MislabelledRecord(ExtensionRecord):
    """Record whose bytes do not start with its kind."""

    kind = 0x41

    def to_bytes(self, options: Any = None, depth: int = 0) -> bytes:
        return b"\x42\x00"

    @classmethod
    def from_bytes(cls, data: Any, registry: Any = None, **kwargs: Any) -> tuple[Any, int]:
        return cls(), 2


class RawRecord(ExtensionRecord):
    """Record that emits the bytes it was built with."""

    kind = 0x41

    def __init__(self, raw: bytes) -> None:
        self.raw = raw

    def to_bytes(self, options: Any = None, depth: int = 0) -> bytes:
        return self.raw

    @classmethod
    def from_bytes(cls, data: Any, registry: Any = None, **kwargs: Any) -> tuple[Any, int]:
        return cls(bytes(data[:1])), 1


class WireTagRecord(RawRecord):
    """Record claiming the boolean wire tag as its kind."""

    kind = 0x55


class StructuralKindRecord(RawRecord):
    """Record claiming the packed array kind."""

    kind = 0x21


class TestArrayEncoding:
    """Test the packed array layout."""

    def test_empty_array(self) -> None:
        """Test an empty array is kind, zero count, zero length."""
        assert encode([]).hex() == "210000"

    def test_leaf_items(self) -> None:
        """Test leaf items are tag + value with no length prefixes."""
        assert encode([1, "a", True]).hex() == "210307510150016155" + "01"

    def test_object_item_has_no_prefix(self) -> None:
        """Test a nested object inside an array is embedded directly."""
        assert encode([{"a": 1}]).hex() == "21010b54" + "20060303010161015101"

    def test_tuple_encodes_like_list(self) -> None:
        """Test tuples are arrays."""
        assert encode((1, 2)) == encode([1, 2])

    def test_extension_item_embedded_verbatim(self, point_type: Any) -> None:
        """Test extension records contribute their own bytes without a tag."""
        assert encode([point_type(1, 2)]).hex() == "210103400102"

    def test_extension_must_start_with_kind(self) -> None:
        """Test a record whose first byte is not its kind is rejected."""
        with pytest.raises(EncodeError, match="must start with its kind"):
            encode([MislabelledRecord()])

    def test_extension_kind_cannot_be_wire_tag(self) -> None:
        """Test a record whose kind is a wire tag is rejected before it is embedded."""
        # Without the check these bytes would decode as [True]
        with pytest.raises(EncodeError, match="invalid kind"):
            encode([WireTagRecord(b"\x55\x01")])
        with pytest.raises(EncodeError, match="invalid kind"):
            encode(WireTagRecord(b"\x55\x01"))

    def test_extension_kind_cannot_be_structural(self) -> None:
        """Test a record cannot claim the packed array kind."""
        with pytest.raises(EncodeError, match="invalid kind"):
            encode([StructuralKindRecord(b"\x21\x00\x00")])

    def test_extension_kind_cannot_be_custom_structural(self) -> None:
        """Test kinds taken by custom options are rejected too."""
        assert encode([RawRecord(b"\x41")]).hex() == "21010141"

        options = CodecOptions(packed_array_kind=0x41)
        with pytest.raises(EncodeError, match="structural kind"):
            encode([RawRecord(b"\x41")], options)
        with pytest.raises(EncodeError, match="structural kind"):
            encode(RawRecord(b"\x41"), options)

    def test_encode_array_requires_sequence(self) -> None:
        """Test encode_array rejects mappings and strings."""
        with pytest.raises(UnsupportedTypeError):
            encode_array({"a": 1})  # type: ignore[arg-type]
        with pytest.raises(UnsupportedTypeError):
            encode_array("abc")  # type: ignore[arg-type]


class TestArrayDecoding:
    """Test decoding packed arrays."""

    def test_empty_array(self) -> None:
        """Test an empty array decodes with its three header bytes consumed."""
        assert decode_array(bytes.fromhex("210000")) == ([], 3)

    def test_object_inside_array(self) -> None:
        """Test recursion from array into object."""
        data = encode([{"a": 1}])
        assert decode_array(data) == ([{"a": 1}], 14)

    def test_nested_arrays(self) -> None:
        """Test arrays of arrays, including empty ones."""
        value = [[1], [[]], [], ["x", [True, False]]]
        data = encode(value)
        assert decode_array(data) == (value, len(data))

    def test_tuple_decodes_as_list(self) -> None:
        """Test there is no tuple on the decode side."""
        assert decode_array(encode((1, "a")))[0] == [1, "a"]

    def test_extension_items(self, point_type: Any, point_registry: KindRegistry) -> None:
        """Test extension items are rebuilt through the registry."""
        value = [point_type(1, 2), "x", point_type(3, 4), {"k": [point_type(5, 6)]}]
        data = encode(value)
        decoded, consumed = decode_array(data, registry=point_registry)
        assert decoded == value
        assert consumed == len(data)

    def test_extension_without_registry(self, point_type: Any) -> None:
        """Test extension items need a registry."""
        with pytest.raises(MissingRegistryError):
            decode_array(encode([point_type(1, 2)]))

    def test_unknown_kind(self, point_registry: KindRegistry) -> None:
        """Test an unregistered kind with a registry present."""
        with pytest.raises(UnsupportedTypeError, match="Unknown kind: 0x41"):
            decode_array(bytes.fromhex("210103410102"), registry=point_registry)

    def test_object_bytes_rejected(self) -> None:
        """Test decode_array refuses a packed object."""
        with pytest.raises(KindMismatchError):
            decode_array(encode({}))


class TestArrayLengthChecking:
    """Test strict and lenient handling of the declared items length."""

    def test_declared_length_too_long(self) -> None:
        """Test items that stop short of the declared length."""
        data = bytes.fromhex("21010351" + "0100")
        with pytest.raises(ItemsLengthMismatchError):
            decode_array(data)
        assert decode_array(data, options=LENIENT) == ([1], 5)

    def test_declared_length_too_short(self) -> None:
        """Test items that run past the declared length."""
        data = bytes.fromhex("2101015101")
        with pytest.raises(ItemsLengthMismatchError):
            decode_array(data)
        assert decode_array(data, options=LENIENT) == ([1], 5)

    def test_declared_length_past_buffer(self) -> None:
        """Test a declared length larger than the buffer."""
        data = bytes.fromhex("2101055101")
        with pytest.raises(ItemsLengthMismatchError):
            decode_array(data)
        assert decode_array(data, options=LENIENT) == ([1], 5)

    def test_missing_items(self) -> None:
        """Test a count larger than the items present."""
        data = bytes.fromhex("2102025101")
        with pytest.raises(ItemsLengthMismatchError):
            decode_array(data)
        with pytest.raises(TruncatedDataError):
            decode_array(data, options=LENIENT)

    def test_extension_overrunning_window(self, point_registry: KindRegistry) -> None:
        """Test an extension record cut off by the declared items length."""
        data = bytes.fromhex("210102400102")
        with pytest.raises(ItemsLengthMismatchError):
            decode_array(data, registry=point_registry)
