"""Byte-level packing and unpacking primitives.

This module provides the leaf encodings every container is built from:
CompactSize-style varints, arbitrary-precision varbigints, length-prefixed
UTF-8 strings and single-byte booleans. All multi-byte varint payloads are
little-endian; varbigint magnitudes are big-endian.
"""

from __future__ import annotations

from typing import Union

from ..exceptions import DecodeError, EncodeError, NonCanonicalError, TruncatedDataError

BytesLike = Union[bytes, bytearray, memoryview]

MAX_VARINT = (1 << 64) - 1

# Lead bytes announcing a wider varint payload
VARINT_U16 = 0xFD
VARINT_U32 = 0xFE
VARINT_U64 = 0xFF

# lead byte -> (payload width, smallest value that needs this form)
_VARINT_FORMS = {
    VARINT_U16: (2, VARINT_U16),
    VARINT_U32: (4, 0x10000),
    VARINT_U64: (8, 0x100000000),
}

# Lead byte announcing a length-prefixed varbigint magnitude
VARBIGINT_ESCAPE = 0xFF


class ByteWriter:
    """Appends encoded primitives to a growing byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_varint(300)
        >>> writer.write_string("hi")
        >>> writer.to_bytes().hex()
        'fd2c01026869'
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def write_byte(self, value: int) -> None:
        """Write a single byte.

        Args:
            value: Byte value (0-255)
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"write_byte requires 0-255, got {value}")
        self._buf.append(value)

    def write_bytes(self, data: BytesLike) -> None:
        """Write raw bytes verbatim."""
        self._buf.extend(data)

    def write_varint(self, value: int) -> None:
        """Write an unsigned integer using the shortest CompactSize form.

        Args:
            value: Unsigned integer (0 to 2**64 - 1)

        Raises:
            EncodeError: If value is negative or wider than 64 bits
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(f"varint requires an int, got {type(value).__name__}")
        if value < 0:
            raise EncodeError(f"varint requires a non-negative value, got {value}")
        if value < VARINT_U16:
            self._buf.append(value)
        elif value <= 0xFFFF:
            self._buf.append(VARINT_U16)
            self._buf.extend(value.to_bytes(2, "little"))
        elif value <= 0xFFFFFFFF:
            self._buf.append(VARINT_U32)
            self._buf.extend(value.to_bytes(4, "little"))
        elif value <= MAX_VARINT:
            self._buf.append(VARINT_U64)
            self._buf.extend(value.to_bytes(8, "little"))
        else:
            raise EncodeError(
                f"Value {value} does not fit in a varint (max {MAX_VARINT}); "
                f"wrap it in BigInt for arbitrary precision"
            )

    def write_varbigint(self, value: int) -> None:
        """Write an arbitrary-precision unsigned integer.

        Values below 0xFD take one byte. Larger values are written as the
        escape byte, a varint byte count and the minimal big-endian magnitude.

        Raises:
            EncodeError: If value is negative
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(f"varbigint requires an int, got {type(value).__name__}")
        if value < 0:
            raise EncodeError(f"varbigint requires a non-negative value, got {value}")
        if value < VARINT_U16:
            self._buf.append(value)
            return
        magnitude = value.to_bytes((value.bit_length() + 7) // 8, "big")
        self._buf.append(VARBIGINT_ESCAPE)
        self.write_varint(len(magnitude))
        self._buf.extend(magnitude)

    def write_string(self, value: str) -> None:
        """Write a varint byte length followed by the UTF-8 bytes."""
        raw = encode_utf8(value)
        self.write_varint(len(raw))
        self._buf.extend(raw)

    def write_boolean(self, value: bool) -> None:
        """Write a boolean as 0x01 (True) or 0x00 (False)."""
        self._buf.append(0x01 if value else 0x00)

    def to_bytes(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buf)


class ByteReader:
    """Reads encoded primitives from a read-only view, advancing an offset.

    The reader never copies its input; ``read_view`` hands out sub-views so
    nested sections can be parsed in isolation.

    Example:
        >>> reader = ByteReader(bytes.fromhex("fd2c01026869"))
        >>> reader.read_varint()
        300
        >>> reader.read_string()
        'hi'
    """

    def __init__(self, data: BytesLike) -> None:
        """Initialize a reader over the given data.

        Args:
            data: Buffer to read from
        """
        view = memoryview(data)
        if view.format != "B":
            view = view.cast("B")
        self._view = view.toreadonly()
        self._position = 0

    @property
    def position(self) -> int:
        """Current read offset in bytes."""
        return self._position

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._view) - self._position

    def at_end(self) -> bool:
        return self._position >= len(self._view)

    def _require(self, count: int) -> None:
        if self._position + count > len(self._view):
            raise TruncatedDataError(
                f"Truncated data: need {count} byte(s) at offset {self._position}, "
                f"have {self.remaining()}"
            )

    def peek_byte(self) -> int:
        """Return the next byte without consuming it."""
        self._require(1)
        return self._view[self._position]

    def peek_varint(self) -> int:
        """Return the next varint without consuming it."""
        value, _ = decode_varint(self._view[self._position:])
        return value

    def read_byte(self) -> int:
        self._require(1)
        value = self._view[self._position]
        self._position += 1
        return value

    def read_view(self, count: int) -> memoryview:
        """Consume ``count`` bytes and return them as a sub-view."""
        self._require(count)
        view = self._view[self._position:self._position + count]
        self._position += count
        return view

    def tail(self) -> memoryview:
        """Return the unread bytes as a view without consuming them."""
        return self._view[self._position:]

    def skip(self, count: int) -> None:
        self._require(count)
        self._position += count

    def read_varint(self) -> int:
        """Read a CompactSize varint.

        Raises:
            TruncatedDataError: If the buffer ends inside the varint
            NonCanonicalError: If a wider form than necessary was used
        """
        lead = self.read_byte()
        if lead < VARINT_U16:
            return lead
        width, minimum = _VARINT_FORMS[lead]
        value = int.from_bytes(self.read_view(width), "little")
        if value < minimum:
            raise NonCanonicalError(
                f"Non-canonical varint: {value} encoded with {width + 1} bytes"
            )
        return value

    def read_varbigint(self) -> int:
        """Read an arbitrary-precision unsigned integer."""
        lead = self.read_byte()
        if lead < VARINT_U16:
            return lead
        if lead != VARBIGINT_ESCAPE:
            raise DecodeError(f"Invalid varbigint lead byte 0x{lead:02x}")
        size = self.read_varint()
        if size == 0:
            raise NonCanonicalError("Non-canonical varbigint: empty magnitude")
        magnitude = self.read_view(size)
        if magnitude[0] == 0:
            raise NonCanonicalError("Non-canonical varbigint: leading zero byte")
        value = int.from_bytes(magnitude, "big")
        if value < VARINT_U16:
            raise NonCanonicalError(
                f"Non-canonical varbigint: {value} must be encoded in one byte"
            )
        return value

    def read_string(self) -> str:
        """Read a varint-length-prefixed UTF-8 string."""
        size = self.read_varint()
        return decode_utf8(self.read_view(size))

    def read_boolean(self, strict: bool = False) -> bool:
        """Read a one-byte boolean.

        Args:
            strict: If True, reject any byte other than 0x00 and 0x01

        Returns:
            False for 0x00, True otherwise
        """
        value = self.read_byte()
        if strict and value not in (0x00, 0x01):
            raise NonCanonicalError(f"Invalid boolean byte 0x{value:02x}")
        return value != 0x00


# ============================================================================
# Functional API
# ============================================================================


def varint_size(value: int) -> int:
    """Return the number of bytes the minimal varint form of ``value`` takes."""
    if value < VARINT_U16:
        return 1
    if value <= 0xFFFF:
        return 3
    if value <= 0xFFFFFFFF:
        return 5
    return 9


def encode_varint(value: int) -> bytes:
    """Encode an unsigned integer as a minimal varint."""
    writer = ByteWriter()
    writer.write_varint(value)
    return writer.to_bytes()


def decode_varint(data: BytesLike) -> tuple[int, int]:
    """Decode a varint, returning ``(value, bytes_consumed)``."""
    reader = ByteReader(data)
    value = reader.read_varint()
    return value, reader.position


def encode_varbigint(value: int) -> bytes:
    """Encode an arbitrary-precision unsigned integer."""
    writer = ByteWriter()
    writer.write_varbigint(value)
    return writer.to_bytes()


def decode_varbigint(data: BytesLike) -> tuple[int, int]:
    """Decode a varbigint, returning ``(value, bytes_consumed)``."""
    reader = ByteReader(data)
    value = reader.read_varbigint()
    return value, reader.position


def encode_utf8(value: str) -> bytes:
    """Convert a string to UTF-8 bytes.

    Raises:
        EncodeError: If the string holds lone surrogates
    """
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodeError(f"String is not encodable as UTF-8: {e}") from e


def decode_utf8(data: BytesLike) -> str:
    """Convert UTF-8 bytes to a string.

    Raises:
        DecodeError: If the bytes are not valid UTF-8
    """
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid UTF-8 encoding: {e}") from e


def encode_string(value: str) -> bytes:
    """Encode a string as varint(byte length) + UTF-8 bytes."""
    writer = ByteWriter()
    writer.write_string(value)
    return writer.to_bytes()


def decode_string(data: BytesLike) -> tuple[str, int]:
    """Decode a length-prefixed string, returning ``(value, bytes_consumed)``."""
    reader = ByteReader(data)
    value = reader.read_string()
    return value, reader.position


def encode_boolean(value: bool) -> bytes:
    """Encode a boolean as a single byte."""
    return b"\x01" if value else b"\x00"


def decode_boolean(data: BytesLike, strict: bool = False) -> tuple[bool, int]:
    """Decode a one-byte boolean, returning ``(value, 1)``."""
    reader = ByteReader(data)
    value = reader.read_boolean(strict=strict)
    return value, reader.position
