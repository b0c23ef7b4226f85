#!/usr/bin/env python3
"""Extension record example for kindpack.

This example demonstrates:
1. Declaring records with pydantic (BaseRecord)
2. Writing a record by hand (ExtensionRecord)
3. Registering records in a KindRegistry
4. Decoding arrays that mix records and plain values
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import Field

from kindpack import (
    BaseRecord,
    BigInt,
    ExtensionRecord,
    KindRegistry,
    MissingRegistryError,
    decode,
    encode,
)


class Transfer(BaseRecord):
    """Funds moving between two accounts."""

    kind: ClassVar[int] = 0x08
    sender: str = Field(description="Sending account")
    recipient: str = Field(description="Receiving account")
    amount: BigInt = Field(description="Amount in base units")


class Color(ExtensionRecord):
    """RGB color written as four bytes: kind, red, green, blue."""

    kind = 0x40

    def __init__(self, red: int, green: int, blue: int) -> None:
        self.rgb = (red, green, blue)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Color) and self.rgb == other.rgb

    def __repr__(self) -> str:
        return "Color(#{:02x}{:02x}{:02x})".format(*self.rgb)

    def to_bytes(self, options: Any = None, depth: int = 0) -> bytes:
        return bytes([self.kind, *self.rgb])

    @classmethod
    def from_bytes(
        cls,
        data: Any,
        registry: Optional[KindRegistry] = None,
        options: Any = None,
        depth: int = 0,
    ) -> tuple[Color, int]:
        view = memoryview(data)
        return cls(view[1], view[2], view[3]), 4


def main() -> None:
    """Run the extension record example."""
    print("=" * 60)
    print("kindpack Extension Record Example")
    print("=" * 60)
    print()

    print("1. Building a payload...")
    payload = [
        Transfer(sender="alice", recipient="bob", amount=BigInt(10**21)),
        Color(0x33, 0x66, 0x99),
        {"memo": "invoice 42"},
    ]
    for item in payload:
        print(f"   {item!r}")
    print()

    print("2. Encoding...")
    data = encode(payload)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex()}")
    print()

    print("3. Decoding without a registry...")
    try:
        decode(data)
    except MissingRegistryError as e:
        print(f"   ✗ {e}")
    print()

    print("4. Decoding with a registry...")
    registry = KindRegistry()
    registry.register_record(Transfer)
    registry.register_record(Color)
    print(f"   Registered kinds: {[registry.describe(kind) for kind in registry]}")

    decoded, consumed = decode(data, registry=registry)
    for item in decoded:
        print(f"   {item!r}")
    print(f"   Consumed: {consumed} bytes")
    print()

    print("5. Verifying round-trip...")
    if decoded == payload:
        print("   ✓ Round-trip successful!")
    else:
        print("   ✗ Round-trip failed!")
    print()


if __name__ == "__main__":
    main()
