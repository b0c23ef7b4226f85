"""Value and record modeling for kindpack.

This module provides the arbitrary-precision integer marker, the extension
record interface, and the pydantic-based BaseRecord.
"""

from __future__ import annotations

from .base import BaseRecord
from .extension import ExtensionRecord
from .fields import MAX_UINT64, BigInt, UInt64, VarInt

__all__ = [
    "BaseRecord",
    "ExtensionRecord",
    "BigInt",
    "UInt64",
    "VarInt",
    "MAX_UINT64",
]
