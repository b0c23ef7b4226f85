#!/usr/bin/env python3
"""Basic usage example for kindpack.

This example demonstrates:
1. Encoding nested objects and arrays
2. Canonical field ordering
3. Decoding back to Python values
4. Calculating sizes and inspecting layouts
"""

from __future__ import annotations

from kindpack import BigInt, decode, encode, encoded_size, field_sizes, object_layout


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("kindpack Basic Usage Example")
    print("=" * 60)
    print()

    # Build a value
    print("1. Building a value...")
    profile = {
        "name": "alice",
        "age": 34,
        "verified": True,
        "stake": BigInt(10**24),
        "roles": ["admin", "ops"],
        "limits": {"daily": 500, "monthly": 10_000},
    }
    for key, value in profile.items():
        print(f"   {key}: {value!r}")
    print()

    # Analyze field sizes
    print("2. Analyzing field sizes...")
    sizes = field_sizes(profile)
    for field_name, size in sizes.items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(profile)} bytes")
    print()

    # Encode
    print("3. Encoding...")
    encoded_data = encode(profile)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex()}")
    print()

    # Field order never matters
    print("4. Checking canonical ordering...")
    shuffled = dict(reversed(list(profile.items())))
    print(f"   Same bytes after reordering: {encode(shuffled) == encoded_data}")
    print()

    # Inspect the layout
    print("5. Inspecting the layout...")
    layout = object_layout(encoded_data)
    print(f"   Header: {layout.header_len} bytes")
    print(f"   Names section: {layout.names_len} bytes")
    print(f"   Values section: {layout.values_len} bytes")
    print(f"   Field order: {', '.join(layout.field_names)}")
    print()

    # Decode
    print("6. Decoding...")
    decoded, consumed = decode(encoded_data)
    print(f"   Consumed: {consumed} bytes")
    print(f"   Stake type: {type(decoded['stake']).__name__}")
    print()

    print("7. Verifying round-trip...")
    if decoded == profile:
        print("   ✓ Round-trip successful!")
    else:
        print("   ✗ Round-trip failed!")
    print()


if __name__ == "__main__":
    main()
