"""Packed object and array decoder.

This module provides the decode() entry point and the container decoders it
dispatches to. Input buffers are wrapped in read-only memoryviews and every
section is parsed inside a window cut to its declared length, so a section
that is longer or shorter than announced is caught at its own boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import (
    DecodeError,
    DepthExceededError,
    EmptyInputError,
    FieldCountMismatchError,
    FieldNamesLengthMismatchError,
    FieldValuesLengthMismatchError,
    ItemsLengthMismatchError,
    KindMismatchError,
    KindpackError,
    MalformedLengthError,
    MissingRegistryError,
    NonCanonicalError,
    TrailingBytesError,
    TruncatedDataError,
    UnsupportedTypeError,
)
from ..models.fields import BigInt
from ..registry import KindRegistry
from .primitives import ByteReader, BytesLike, encode_utf8
from .tags import Category, category_for_tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Context:
    registry: Optional[KindRegistry]
    options: CodecOptions


def decode(
    data: BytesLike,
    registry: Optional[KindRegistry] = None,
    options: Optional[CodecOptions] = None,
) -> tuple[Any, int]:
    """Decode the value at the start of ``data``.

    The leading kind decides the route: packed arrays and packed objects are
    decoded here, any other kind is handed to the decoder registered for it.

    Args:
        data: Encoded bytes
        registry: Registry resolving extension kinds (required if any appear)
        options: Codec options (defaults to CodecOptions())

    Returns:
        Tuple of (value, bytes_consumed)

    Raises:
        EmptyInputError: If data is empty
        MissingRegistryError: If an extension kind appears and no registry was given
        RegistryError: If the registry holds a kind the options use for containers
        UnsupportedTypeError: If a tag or kind is not recognized
        MalformedLengthError: If a declared length disagrees with the content
        DepthExceededError: If containers nest deeper than options.max_depth
        DecodeError: For any other malformed input

    Examples:
        ```python
        from kindpack import KindRegistry, decode, encode

        value, consumed = decode(encode({"name": "a"}))
        assert value == {"name": "a"}

        registry = KindRegistry()
        registry.register_record(Transfer)
        items, consumed = decode(encode([Transfer(...)]), registry=registry)
        ```
    """
    view = _as_view(data)
    ctx = _make_context(registry, options)

    kind = ByteReader(view).peek_varint()
    logger.debug("decode: leading kind 0x%02x, %d bytes available", kind, len(view))

    if kind == ctx.options.packed_array_kind:
        return _decode_array(view, ctx, depth=1)
    if kind == ctx.options.packed_object_kind:
        return _decode_object(view, ctx, depth=1)
    return _decode_extension(view, kind, ctx, depth=0)


def decode_value(
    data: BytesLike,
    registry: Optional[KindRegistry] = None,
    options: Optional[CodecOptions] = None,
) -> Any:
    """Decode a buffer holding exactly one value and return the value.

    Raises:
        TrailingBytesError: If bytes remain after the value
        (plus everything decode() raises)
    """
    view = _as_view(data)
    value, consumed = decode(view, registry=registry, options=options)
    if consumed != len(view):
        raise TrailingBytesError(
            f"{len(view) - consumed} trailing byte(s) after a {consumed}-byte value"
        )
    return value


def decode_object(
    data: BytesLike,
    registry: Optional[KindRegistry] = None,
    options: Optional[CodecOptions] = None,
    depth: int = 1,
) -> tuple[dict[str, Any], int]:
    """Decode a packed object, returning ``(mapping, bytes_consumed)``.

    The registry is only used by arrays nested inside the object; object
    fields themselves never hold extension records. ``depth`` is the nesting
    depth of this object, 1 when it stands alone.
    """
    ctx = _make_context(registry, options)
    return _decode_object(_as_view(data), ctx, depth=depth)


def decode_array(
    data: BytesLike,
    registry: Optional[KindRegistry] = None,
    options: Optional[CodecOptions] = None,
    depth: int = 1,
) -> tuple[list[Any], int]:
    """Decode a packed array, returning ``(items, bytes_consumed)``."""
    ctx = _make_context(registry, options)
    return _decode_array(_as_view(data), ctx, depth=depth)


def _make_context(
    registry: Optional[KindRegistry], options: Optional[CodecOptions]
) -> _Context:
    options = options or DEFAULT_OPTIONS
    if registry is not None:
        registry.check_structural_kinds(options.structural_kinds)
    return _Context(registry=registry, options=options)


def _as_view(data: BytesLike) -> memoryview:
    view = memoryview(data)
    if view.format != "B":
        view = view.cast("B")
    if len(view) == 0:
        raise EmptyInputError("Cannot decode empty data")
    return view.toreadonly()


def _check_depth(depth: int, options: CodecOptions) -> None:
    if depth > options.max_depth:
        raise DepthExceededError(
            f"Nesting depth {depth} exceeds max_depth={options.max_depth}"
        )


# ============================================================================
# Packed objects
# ============================================================================


def _decode_object(view: memoryview, ctx: _Context, depth: int) -> tuple[dict[str, Any], int]:
    _check_depth(depth, ctx.options)
    reader = ByteReader(view)

    kind = reader.read_varint()
    if kind != ctx.options.packed_object_kind:
        raise KindMismatchError(
            f"Invalid kind: 0x{kind:02x} - expected packed object "
            f"(0x{ctx.options.packed_object_kind:02x})"
        )

    total_len = reader.read_varint()
    names_len = reader.read_varint()
    values_len = reader.read_varint()
    if total_len != names_len + values_len:
        raise MalformedLengthError(
            f"Object length mismatch: total {total_len} != "
            f"names {names_len} + values {values_len}"
        )

    names_start = reader.position
    names_view = view[names_start:names_start + names_len]
    if len(names_view) < names_len:
        raise FieldNamesLengthMismatchError(
            f"Field names length mismatch: declared {names_len}, "
            f"only {len(names_view)} available"
        )
    names = _decode_names(names_view)

    values_start = names_start + names_len
    values_view = view[values_start:values_start + values_len]
    if len(values_view) < values_len:
        raise FieldValuesLengthMismatchError(
            f"Field values length mismatch: declared {values_len}, "
            f"only {len(values_view)} available"
        )
    result = _decode_values(values_view, names, ctx, depth)

    logger.debug(
        "packed object: %d field(s), names=%d bytes, values=%d bytes",
        len(names),
        names_len,
        values_len,
    )
    return result, values_start + values_len


def _decode_names(view: memoryview) -> list[str]:
    """Parse a names section that must fill ``view`` exactly."""
    reader = ByteReader(view)
    try:
        count = reader.read_varint()
        names = [reader.read_string() for _ in range(count)]
    except TruncatedDataError as e:
        raise FieldNamesLengthMismatchError(
            f"Field names overrun their declared length {len(view)}: {e}"
        ) from e

    if reader.position != len(view):
        raise FieldNamesLengthMismatchError(
            f"Field names length mismatch: expected {len(view)}, got {reader.position}"
        )

    encoded = [encode_utf8(name) for name in names]
    for previous, current in zip(encoded, encoded[1:]):
        if previous >= current:
            raise NonCanonicalError(
                f"Field names not in canonical order: {previous!r} before {current!r}"
            )
    return names


def _decode_values(
    view: memoryview, names: list[str], ctx: _Context, depth: int
) -> dict[str, Any]:
    """Parse a values section that must fill ``view`` exactly."""
    reader = ByteReader(view)
    result: dict[str, Any] = {}
    try:
        count = reader.read_varint()
        if count != len(names):
            raise FieldCountMismatchError(
                f"Field count mismatch: names={len(names)}, values={count}"
            )

        for name in names:
            tag = reader.read_byte()
            category = category_for_tag(tag)
            if category is None:
                raise UnsupportedTypeError(f"Field {name}: unsupported field type byte 0x{tag:02x}")

            if category.is_container:
                nested_len = reader.read_varint()
                nested_view = reader.read_view(nested_len)
                value, consumed = _decode_container(category, nested_view, ctx, depth + 1)
                if consumed != nested_len:
                    raise MalformedLengthError(
                        f"Field {name}: nested {category.value} declared {nested_len} bytes, "
                        f"consumed {consumed}"
                    )
            else:
                value = _read_leaf(reader, category, ctx.options)

            result[name] = value
            logger.debug("  field %r: %s", name, category.value)
    except TruncatedDataError as e:
        raise FieldValuesLengthMismatchError(
            f"Field values overrun their declared length {len(view)}: {e}"
        ) from e

    if reader.position != len(view):
        raise FieldValuesLengthMismatchError(
            f"Field values length mismatch: expected {len(view)}, got {reader.position}"
        )
    return result


# ============================================================================
# Packed arrays
# ============================================================================


def _decode_array(view: memoryview, ctx: _Context, depth: int) -> tuple[list[Any], int]:
    _check_depth(depth, ctx.options)
    strict = ctx.options.strict_array_length
    reader = ByteReader(view)

    kind = reader.read_varint()
    if kind != ctx.options.packed_array_kind:
        raise KindMismatchError(
            f"Invalid kind: 0x{kind:02x} - expected packed array "
            f"(0x{ctx.options.packed_array_kind:02x})"
        )

    count = reader.read_varint()
    items_len = reader.read_varint()

    items_start = reader.position
    if strict:
        items_view = view[items_start:items_start + items_len]
        if len(items_view) < items_len:
            raise ItemsLengthMismatchError(
                f"Items length mismatch: declared {items_len}, "
                f"only {len(items_view)} available"
            )
    else:
        items_view = view[items_start:]

    items_reader = ByteReader(items_view)
    items: list[Any] = []
    try:
        for index in range(count):
            lead = items_reader.peek_byte()
            category = category_for_tag(lead)

            if category is None:
                # Not a wire tag: an extension record starting with its kind
                value, consumed = _decode_extension(items_reader.tail(), lead, ctx, depth)
                items_reader.skip(consumed)
            elif category.is_container:
                items_reader.skip(1)
                value, consumed = _decode_container(
                    category, items_reader.tail(), ctx, depth + 1
                )
                items_reader.skip(consumed)
            else:
                items_reader.skip(1)
                value = _read_leaf(items_reader, category, ctx.options)

            items.append(value)
            logger.debug("  item %d: %s", index, category.value if category else "extension")
    except TruncatedDataError as e:
        if not strict:
            raise
        raise ItemsLengthMismatchError(
            f"Array items overrun their declared length {items_len}: {e}"
        ) from e

    if strict and items_reader.position != items_len:
        raise ItemsLengthMismatchError(
            f"Items length mismatch: expected {items_len}, got {items_reader.position}"
        )

    logger.debug("packed array: %d item(s), items=%d bytes", count, items_reader.position)
    return items, items_start + items_reader.position


def _decode_container(
    category: Category, view: memoryview, ctx: _Context, depth: int
) -> tuple[Any, int]:
    if category is Category.ARRAY:
        return _decode_array(view, ctx, depth)
    return _decode_object(view, ctx, depth)


# ============================================================================
# Leaves and extensions
# ============================================================================


def _read_leaf(reader: ByteReader, category: Category, options: CodecOptions) -> Any:
    if category is Category.STRING:
        return reader.read_string()
    if category is Category.VARINT:
        return reader.read_varint()
    if category is Category.VARBIGINT:
        return BigInt(reader.read_varbigint())
    if category is Category.BOOLEAN:
        return reader.read_boolean(strict=options.strict_booleans)
    raise UnsupportedTypeError(f"Category {category.value} is not a leaf")


def _decode_extension(
    view: memoryview, kind: int, ctx: _Context, depth: int
) -> tuple[Any, int]:
    """Hand ``view`` (starting at the record's kind byte) to its registered decoder.

    ``depth`` is the nesting depth of the container holding the record, 0 at
    the top level. The decoder receives it along with the active options.
    """
    if ctx.registry is None:
        raise MissingRegistryError(
            f"Kind 0x{kind:02x} is not a packed container; a KindRegistry is required "
            f"to decode extension records"
        )

    decoder = ctx.registry.resolve_decoder(kind)
    if decoder is None:
        raise UnsupportedTypeError(
            f"Unknown kind: 0x{kind:02x}. Registered kinds: "
            f"{[f'0x{k:02x}' for k in ctx.registry.kinds()]}"
        )

    try:
        value, consumed = decoder(view, options=ctx.options, depth=depth)
    except KindpackError:
        raise
    except Exception as e:
        raise DecodeError(
            f"Decoder for kind {ctx.registry.describe(kind)} failed: {e}"
        ) from e

    if not 0 < consumed <= len(view):
        raise MalformedLengthError(
            f"Decoder for kind {ctx.registry.describe(kind)} reported {consumed} bytes "
            f"consumed, {len(view)} available"
        )

    logger.debug("extension %s: %d bytes", ctx.registry.describe(kind), consumed)
    return value, consumed
