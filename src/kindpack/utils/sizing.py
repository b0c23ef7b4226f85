"""Encoded size calculation and buffer inspection.

This module provides functions to calculate the encoded size of values
without actually encoding them, and to describe the layout of an encoded
packed object.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from ..codec.primitives import ByteReader, BytesLike, encode_utf8, encode_varbigint, varint_size
from ..codec.shape import FieldShape, ValueShape
from ..codec.tags import Category
from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import EmptyInputError, KindMismatchError, UnsupportedTypeError


@dataclass(frozen=True)
class ObjectLayout:
    """Header and names section of an encoded packed object.

    Attributes:
        kind: Leading kind (the packed object kind)
        header_len: Bytes taken by the four header varints
        total_len: Declared names_len + values_len
        names_len: Declared names section length
        values_len: Declared values section length
        field_names: Field names in wire order
    """

    kind: int
    header_len: int
    total_len: int
    names_len: int
    values_len: int
    field_names: tuple[str, ...]

    @property
    def size(self) -> int:
        """Total encoded size in bytes (header plus both sections)."""
        return self.header_len + self.total_len


def encoded_size(value: Any, options: Optional[CodecOptions] = None) -> int:
    """Calculate the encoded size of a value in bytes.

    The size is computed from the value's shape; containers are never
    serialized. Extension records are asked for their bytes.

    Args:
        value: Mapping, list/tuple, or ExtensionRecord
        options: Codec options (defaults to CodecOptions())

    Returns:
        Size in bytes, equal to ``len(encode(value, options))``

    Raises:
        UnsupportedTypeError: If the value cannot be encoded at the top level

    Example:
        >>> encoded_size({"name": "a"})
        14
        >>> encoded_size([])
        3
    """
    options = options or DEFAULT_OPTIONS
    shape = ValueShape.from_value(value, options.max_depth)
    if not (shape.category.is_container or shape.category is Category.EXTENSION):
        raise UnsupportedTypeError(
            f"Top-level value must be a mapping, sequence, or extension record, "
            f"got {type(value).__name__}"
        )
    return _shape_size(shape, options, depth=0)


def field_sizes(value: Mapping[str, Any], options: Optional[CodecOptions] = None) -> dict[str, int]:
    """Get the size in bytes of each field's entry in the values section.

    An entry is the tag byte, the nested length prefix for containers, and
    the encoded value.

    Args:
        value: Mapping to analyze
        options: Codec options (defaults to CodecOptions())

    Returns:
        Dictionary mapping field names to entry sizes, in wire order

    Example:
        >>> field_sizes({"name": "a", "ok": True})
        {'name': 3, 'ok': 2}
    """
    options = options or DEFAULT_OPTIONS
    if not isinstance(value, Mapping):
        raise UnsupportedTypeError(f"Expected a mapping, got {type(value).__name__}")
    shape = ValueShape.from_value(value, options.max_depth)
    return {field.name: _field_entry_size(field, options, depth=1) for field in shape.fields}


def object_layout(data: BytesLike, options: Optional[CodecOptions] = None) -> ObjectLayout:
    """Describe the header and field names of an encoded packed object.

    Only the header and names section are parsed; field values are not
    decoded.

    Raises:
        EmptyInputError: If data is empty
        KindMismatchError: If data does not start with the packed object kind
        DecodeError: If the header or names section is malformed
    """
    options = options or DEFAULT_OPTIONS
    reader = ByteReader(data)
    if reader.at_end():
        raise EmptyInputError("Cannot inspect empty data")

    kind = reader.read_varint()
    if kind != options.packed_object_kind:
        raise KindMismatchError(
            f"Invalid kind: 0x{kind:02x} - expected packed object "
            f"(0x{options.packed_object_kind:02x})"
        )
    total_len = reader.read_varint()
    names_len = reader.read_varint()
    values_len = reader.read_varint()
    header_len = reader.position

    names = ByteReader(reader.read_view(names_len))
    count = names.read_varint()
    field_names = tuple(names.read_string() for _ in range(count))

    return ObjectLayout(
        kind=kind,
        header_len=header_len,
        total_len=total_len,
        names_len=names_len,
        values_len=values_len,
        field_names=field_names,
    )


def _shape_size(shape: ValueShape, options: CodecOptions, depth: int) -> int:
    # depth is the nesting depth of the container holding the shape
    category = shape.category
    if category is Category.EXTENSION:
        return len(shape.value.to_bytes(options=options, depth=depth))
    if category is Category.STRING:
        size = len(encode_utf8(shape.value))
        return varint_size(size) + size
    if category is Category.VARINT:
        return varint_size(shape.value)
    if category is Category.VARBIGINT:
        return len(encode_varbigint(shape.value))
    if category is Category.BOOLEAN:
        return 1
    if category is Category.ARRAY:
        items_len = sum(
            _shape_size(item, options, depth + 1)
            + (0 if item.category is Category.EXTENSION else 1)
            for item in shape.items
        )
        return (
            varint_size(options.packed_array_kind)
            + varint_size(len(shape.items))
            + varint_size(items_len)
            + items_len
        )

    names_len = varint_size(len(shape.fields)) + sum(
        varint_size(len(field.encoded_name)) + len(field.encoded_name) for field in shape.fields
    )
    values_len = varint_size(len(shape.fields)) + sum(
        _field_entry_size(field, options, depth + 1) for field in shape.fields
    )
    return (
        varint_size(options.packed_object_kind)
        + varint_size(names_len + values_len)
        + varint_size(names_len)
        + varint_size(values_len)
        + names_len
        + values_len
    )


def _field_entry_size(field: FieldShape, options: CodecOptions, depth: int) -> int:
    size = _shape_size(field.shape, options, depth)
    if field.shape.category.is_container:
        # Nested containers carry a length prefix
        size += varint_size(size)
    return 1 + size
