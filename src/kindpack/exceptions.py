"""Exception hierarchy for kindpack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from KindpackError for easy catching of any kindpack-specific error.
"""

from __future__ import annotations


class KindpackError(Exception):
    """Base exception for all kindpack errors."""

    pass


class EncodeError(KindpackError):
    """Raised when encoding a value fails.

    Examples:
        - Integer out of range for a bounded integer
        - Non-string object key
        - Extension record whose bytes do not start with its kind
    """

    pass


class DecodeError(KindpackError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Section length that disagrees with the bytes it holds
        - Invalid UTF-8 in a string
        - Unexpected container kind
    """

    pass


class EmptyInputError(DecodeError):
    """Raised when a zero-length buffer is given where a value was expected."""

    pass


class MalformedLengthError(DecodeError):
    """Raised when a declared length disagrees with the bytes actually consumed."""

    pass


class TruncatedDataError(MalformedLengthError):
    """Raised when a read runs past the end of the available bytes."""

    pass


class FieldNamesLengthMismatchError(MalformedLengthError):
    """Raised when an object's names section does not match its declared length."""

    pass


class FieldValuesLengthMismatchError(MalformedLengthError):
    """Raised when an object's values section does not match its declared length."""

    pass


class ItemsLengthMismatchError(MalformedLengthError):
    """Raised when an array's items section does not match its declared length."""

    pass


class FieldCountMismatchError(DecodeError):
    """Raised when an object's name count differs from its value count."""

    pass


class MissingRegistryError(DecodeError):
    """Raised when an extension kind is found but no registry was supplied."""

    pass


class KindMismatchError(DecodeError):
    """Raised when a container starts with a kind other than the expected one."""

    pass


class NonCanonicalError(DecodeError):
    """Raised when bytes decode to a value but are not its canonical encoding.

    Examples:
        - Varint using a wider form than needed
        - Object field names out of order or duplicated
        - Boolean byte other than 0x00/0x01 under strict decoding
    """

    pass


class TrailingBytesError(DecodeError):
    """Raised when bytes remain after a complete top-level value."""

    pass


class UnsupportedTypeError(EncodeError, DecodeError):
    """Raised for a value type or wire tag the codec cannot handle.

    On encode this covers Python types outside the value model (float, None,
    bytes, ...). On decode it covers tag bytes outside the reserved range and
    kinds the supplied registry does not know.
    """

    pass


class DepthExceededError(EncodeError, DecodeError):
    """Raised when container nesting exceeds the configured maximum depth."""

    pass


class RegistryError(KindpackError, ValueError):
    """Raised when a kind cannot be registered.

    Examples:
        - Kind collides with a reserved wire tag or structural kind
        - Kind already registered to a different decoder
    """

    pass
