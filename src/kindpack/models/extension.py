"""Extension record interface.

Any value that knows its own kind and produces its own bytes can travel inside
a packed array or stand alone at the top level. The codec never looks inside
such a value: it embeds ``to_bytes()`` verbatim on encode and hands the buffer
to the registered decoder on decode.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, ClassVar, Optional

if TYPE_CHECKING:
    from ..config import CodecOptions
    from ..registry import KindRegistry


class ExtensionRecord(abc.ABC):
    """Base class for self-describing extension values.

    Subclasses set ``kind`` and implement both directions. The first byte of
    ``to_bytes()`` must equal ``kind``; ``from_bytes`` receives a view that
    starts at that byte and reports how many bytes it consumed.

    Both directions receive the codec options in effect and ``depth``, the
    nesting depth of the container holding the record (0 at the top level).
    Records that embed packed objects or arrays must encode and decode them
    with those options, starting at ``depth + 1``, so the nesting limit
    covers record contents too.

    Example:
        >>> class Ping(ExtensionRecord):
        ...     kind = 0x40
        ...     def to_bytes(self, options=None, depth=0) -> bytes:
        ...         return bytes([self.kind])
        ...     @classmethod
        ...     def from_bytes(cls, data, registry=None, options=None, depth=0):
        ...         return cls(), 1
    """

    kind: ClassVar[int]

    @abc.abstractmethod
    def to_bytes(self, options: Optional[CodecOptions] = None, depth: int = 0) -> bytes:
        """Return this record's complete encoding, starting with its kind."""

    @classmethod
    @abc.abstractmethod
    def from_bytes(
        cls,
        data: memoryview,
        registry: Optional[KindRegistry] = None,
        options: Optional[CodecOptions] = None,
        depth: int = 0,
    ) -> tuple[Any, int]:
        """Rebuild a record from ``data``, returning ``(record, bytes_consumed)``."""
