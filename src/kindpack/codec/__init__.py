"""Canonical binary codec for kindpack.

This module provides the top-level encode/decode dispatch, the packed object
and array codecs, and the primitive encodings they are built from.
"""

from __future__ import annotations

from .decoder import decode, decode_array, decode_object, decode_value
from .encoder import encode, encode_array, encode_object
from .primitives import (
    ByteReader,
    ByteWriter,
    decode_boolean,
    decode_string,
    decode_varbigint,
    decode_varint,
    encode_boolean,
    encode_string,
    encode_varbigint,
    encode_varint,
)
from .shape import FieldShape, ValueShape
from .tags import Category, WireTag

__all__ = [
    "encode",
    "decode",
    "decode_value",
    "encode_object",
    "decode_object",
    "encode_array",
    "decode_array",
    "ValueShape",
    "FieldShape",
    "WireTag",
    "Category",
    "ByteReader",
    "ByteWriter",
    "encode_varint",
    "decode_varint",
    "encode_varbigint",
    "decode_varbigint",
    "encode_string",
    "decode_string",
    "encode_boolean",
    "decode_boolean",
]
