"""kindpack: Canonical Binary Encoding for Structured Values

A Python library producing deterministic bytes for nested objects, arrays,
strings, integers and booleans, with a registry hook that lets applications
embed their own kind-tagged record types in the same wire format.

Key Features:
- Canonical output: equal values always encode to identical bytes
- Length-prefixed sections checked strictly on decode
- Arbitrary-precision integers through the BigInt marker
- Pydantic-based extension records

Quick Start:
    >>> from kindpack import BigInt, decode_value, encode
    >>>
    >>> data = encode({"name": "a", "supply": BigInt(10**30), "tags": ["x", "y"]})
    >>> decode_value(data)
    {'name': 'a', 'supply': BigInt(1000000000000000000000000000000), 'tags': ['x', 'y']}

Extension records:
    >>> from typing import ClassVar
    >>> from kindpack import BaseRecord, KindRegistry
    >>>
    >>> class Transfer(BaseRecord):
    ...     kind: ClassVar[int] = 0x08
    ...     sender: str
    ...     amount: int
    >>>
    >>> registry = KindRegistry()
    >>> registry.register_record(Transfer)
    >>> items = decode_value(encode([Transfer(sender="alice", amount=5)]), registry=registry)
"""

from __future__ import annotations

import logging

from .codec import (
    decode,
    decode_array,
    decode_object,
    decode_value,
    encode,
    encode_array,
    encode_object,
)
from .config import CodecOptions
from .exceptions import (
    DecodeError,
    DepthExceededError,
    EmptyInputError,
    EncodeError,
    FieldCountMismatchError,
    FieldNamesLengthMismatchError,
    FieldValuesLengthMismatchError,
    ItemsLengthMismatchError,
    KindMismatchError,
    KindpackError,
    MalformedLengthError,
    MissingRegistryError,
    NonCanonicalError,
    RegistryError,
    TrailingBytesError,
    TruncatedDataError,
    UnsupportedTypeError,
)
from .models import BaseRecord, BigInt, ExtensionRecord, UInt64, VarInt
from .registry import PACKED_ARRAY, PACKED_OBJECT, KindRegistry
from .utils import configure_tracing, encoded_size, field_sizes, object_layout

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_value",
    "encode_object",
    "decode_object",
    "encode_array",
    "decode_array",
    # Configuration
    "CodecOptions",
    # Registry
    "KindRegistry",
    "PACKED_OBJECT",
    "PACKED_ARRAY",
    # Records and field helpers
    "ExtensionRecord",
    "BaseRecord",
    "BigInt",
    "UInt64",
    "VarInt",
    # Exceptions
    "KindpackError",
    "EncodeError",
    "DecodeError",
    "EmptyInputError",
    "MalformedLengthError",
    "TruncatedDataError",
    "FieldNamesLengthMismatchError",
    "FieldValuesLengthMismatchError",
    "ItemsLengthMismatchError",
    "FieldCountMismatchError",
    "MissingRegistryError",
    "KindMismatchError",
    "NonCanonicalError",
    "TrailingBytesError",
    "UnsupportedTypeError",
    "DepthExceededError",
    "RegistryError",
    # Utilities
    "encoded_size",
    "field_sizes",
    "object_layout",
    "configure_tracing",
    # Version
    "__version__",
]
