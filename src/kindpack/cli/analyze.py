"""Packed object inspection CLI command."""

from __future__ import annotations

from typing import Optional

from ..codec.decoder import decode_object
from ..config import CodecOptions
from ..utils.sizing import field_sizes, object_layout


def inspect_object(data: bytes, options: Optional[CodecOptions] = None) -> None:
    """Print the layout of an encoded packed object.

    Args:
        data: Encoded packed object
        options: Codec options used to parse it
    """
    layout = object_layout(data, options)
    fields, consumed = decode_object(data, options=options)
    sizes = field_sizes(fields, options)

    print(f"{'=' * 19} Packed object (kind 0x{layout.kind:02x}) {'=' * 19}")
    print(f"Encoded size: {layout.size} bytes")
    print(f"        header{'.' * 32}{layout.header_len}")
    print(f"        names{'.' * 33}{layout.names_len}")
    print(f"        values{'.' * 32}{layout.values_len}")
    if consumed < len(data):
        print(f"        trailing{'.' * 30}{len(data) - consumed}")
    print()

    print(f"{'-' * 27} Fields {'-' * 27}")
    for i, name in enumerate(layout.field_names, 1):
        field_desc = f"{i}. {name}"
        size = sizes.get(name, 0)
        kind = type(fields[name]).__name__
        dots = "." * max(1, 54 - len(field_desc) - len(str(size)) - len(" bytes") - len(kind) - 1)
        print(f"        {field_desc}{dots}{size} bytes {kind}")

    print()
