"""Packed object and array encoder.

This module provides the encode() entry point and the container encoders it
dispatches to. Values are classified once into a ValueShape tree; the
encoders below only ever look at shapes.

Packed object layout::

    varint(PACKED_OBJECT kind)
    varint(names_len + values_len)
    varint(names_len)
    varint(values_len)
    names:  varint(count) + count * [varint(len) + utf8 name]
    values: varint(count) + count * [tag + value]

Nested arrays and objects inside the values section are preceded by their own
varint byte length. Packed array layout::

    varint(PACKED_ARRAY kind)
    varint(item count)
    varint(items_len)
    items: per item [tag + value] or an extension record's own bytes
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import EncodeError, RegistryError, UnsupportedTypeError
from ..registry import validate_kind
from .primitives import ByteWriter
from .shape import ValueShape
from .tags import Category, tag_for

logger = logging.getLogger(__name__)


def encode(value: Any, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a top-level value.

    Extension records encode as their own bytes with no container around them,
    lists and tuples as packed arrays, and mappings as packed objects.

    Args:
        value: Mapping, list/tuple, or ExtensionRecord
        options: Codec options (defaults to CodecOptions())

    Returns:
        Canonical binary representation

    Raises:
        UnsupportedTypeError: If value (or anything inside it) is outside the value model
        DepthExceededError: If containers nest deeper than options.max_depth
        EncodeError: If a value cannot be encoded

    Examples:
        ```python
        from kindpack import BigInt, encode

        data = encode({"name": "a"})
        data.hex()  # '200a060401046e616d6501500161'

        # Field order never changes the bytes
        assert encode({"b": 2, "a": 1}) == encode({"a": 1, "b": 2})

        # Arbitrary precision is opt-in
        data = encode({"supply": BigInt(10**30)})
        ```
    """
    options = options or DEFAULT_OPTIONS
    shape = ValueShape.from_value(value, options.max_depth)

    if shape.category is Category.EXTENSION:
        encoded = _encode_extension(shape, options, depth=0)
    elif shape.category is Category.ARRAY:
        encoded = _encode_array(shape, options, depth=1)
    elif shape.category is Category.OBJECT:
        encoded = _encode_object(shape, options, depth=1)
    else:
        raise UnsupportedTypeError(
            f"Top-level value must be a mapping, sequence, or extension record, "
            f"got {type(value).__name__}"
        )

    logger.debug("encoded %s -> %d bytes", shape.category.value, len(encoded))
    return encoded


def encode_object(
    value: Mapping[str, Any], options: Optional[CodecOptions] = None, depth: int = 1
) -> bytes:
    """Encode a mapping as a packed object.

    Args:
        value: Mapping of field names to values
        options: Codec options (defaults to CodecOptions())
        depth: Nesting depth of this object (1 when it stands alone)

    Raises:
        UnsupportedTypeError: If value is not a mapping or holds unsupported values
        DepthExceededError: If containers nest deeper than options.max_depth
    """
    options = options or DEFAULT_OPTIONS
    if not isinstance(value, Mapping):
        raise UnsupportedTypeError(f"Expected a mapping, got {type(value).__name__}")
    shape = ValueShape.from_value(value, options.max_depth, depth - 1)
    return _encode_object(shape, options, depth)


def encode_array(
    value: Sequence[Any], options: Optional[CodecOptions] = None, depth: int = 1
) -> bytes:
    """Encode a list or tuple as a packed array.

    Raises:
        UnsupportedTypeError: If value is not a list/tuple or holds unsupported values
        DepthExceededError: If containers nest deeper than options.max_depth
    """
    options = options or DEFAULT_OPTIONS
    if not isinstance(value, (list, tuple)):
        raise UnsupportedTypeError(f"Expected a list or tuple, got {type(value).__name__}")
    shape = ValueShape.from_value(value, options.max_depth, depth - 1)
    return _encode_array(shape, options, depth)


def _encode_object(shape: ValueShape, options: CodecOptions, depth: int) -> bytes:
    """Encode an OBJECT shape whose fields are already in canonical order."""
    names = ByteWriter()
    names.write_varint(len(shape.fields))
    for field in shape.fields:
        names.write_varint(len(field.encoded_name))
        names.write_bytes(field.encoded_name)

    values = ByteWriter()
    values.write_varint(len(shape.fields))
    for field in shape.fields:
        values.write_byte(tag_for(field.shape.category))
        if field.shape.category.is_container:
            # Nested containers carry their byte length so they can be isolated
            nested = _encode_container(field.shape, options, depth + 1)
            values.write_varint(len(nested))
            values.write_bytes(nested)
        else:
            _write_leaf(values, field.shape)
        logger.debug("  field %r: %s", field.name, field.shape.category.value)

    result = ByteWriter()
    result.write_varint(options.packed_object_kind)
    result.write_varint(len(names) + len(values))
    result.write_varint(len(names))
    result.write_varint(len(values))
    result.write_bytes(names.to_bytes())
    result.write_bytes(values.to_bytes())

    logger.debug(
        "packed object: %d field(s), names=%d bytes, values=%d bytes",
        len(shape.fields),
        len(names),
        len(values),
    )
    return result.to_bytes()


def _encode_array(shape: ValueShape, options: CodecOptions, depth: int) -> bytes:
    """Encode an ARRAY shape."""
    items = ByteWriter()
    for item in shape.items:
        if item.category is Category.EXTENSION:
            # Embedded verbatim; its first byte is its kind, not a wire tag
            items.write_bytes(_encode_extension(item, options, depth))
        elif item.category.is_container:
            items.write_byte(tag_for(item.category))
            items.write_bytes(_encode_container(item, options, depth + 1))
        else:
            items.write_byte(tag_for(item.category))
            _write_leaf(items, item)

    result = ByteWriter()
    result.write_varint(options.packed_array_kind)
    result.write_varint(len(shape.items))
    result.write_varint(len(items))
    result.write_bytes(items.to_bytes())

    logger.debug("packed array: %d item(s), items=%d bytes", len(shape.items), len(items))
    return result.to_bytes()


def _encode_container(shape: ValueShape, options: CodecOptions, depth: int) -> bytes:
    if shape.category is Category.ARRAY:
        return _encode_array(shape, options, depth)
    return _encode_object(shape, options, depth)


def _encode_extension(shape: ValueShape, options: CodecOptions, depth: int) -> bytes:
    """Return an extension record's own bytes.

    The record's kind must be a valid extension kind that the active options
    do not use for containers, and its bytes must start with that kind.
    ``depth`` is the nesting depth of the container holding the record.
    """
    record = shape.value
    name = type(record).__name__
    kind = type(record).kind
    try:
        validate_kind(kind)
    except RegistryError as e:
        raise EncodeError(f"{name} has an invalid kind: {e}") from e
    if kind in options.structural_kinds:
        raise EncodeError(
            f"{name} kind 0x{kind:02x} is a structural kind under the active options"
        )

    encoded = bytes(record.to_bytes(options=options, depth=depth))
    if not encoded or encoded[0] != kind:
        lead = f"0x{encoded[0]:02x}" if encoded else "nothing"
        raise EncodeError(f"{name}.to_bytes() must start with its kind 0x{kind:02x}, got {lead}")
    return encoded


def _write_leaf(writer: ByteWriter, shape: ValueShape) -> None:
    """Write the value of a STRING, VARINT, VARBIGINT or BOOLEAN shape (no tag)."""
    if shape.category is Category.STRING:
        writer.write_string(shape.value)
    elif shape.category is Category.VARINT:
        writer.write_varint(shape.value)
    elif shape.category is Category.VARBIGINT:
        writer.write_varbigint(shape.value)
    elif shape.category is Category.BOOLEAN:
        writer.write_boolean(shape.value)
    else:
        raise UnsupportedTypeError(f"Category {shape.category.value} is not a leaf")
