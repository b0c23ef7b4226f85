"""Kind registry for extension records.

This module provides:
- The structural kinds announcing packed objects and packed arrays
- KindRegistry: a per-call mapping from extension kind to decoder

A registry is an ordinary object handed to each decode call. There is no
module-level registry, so independent sets of extension kinds can be used
side by side.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator

from .codec.tags import RESERVED_TAGS
from .exceptions import RegistryError

if TYPE_CHECKING:
    from .models.extension import ExtensionRecord

logger = logging.getLogger(__name__)

# Structural kinds. Extension kinds must not reuse these values.
PACKED_OBJECT = 0x20
PACKED_ARRAY = 0x21

# Extension kinds are single-byte varints so a record's first byte is its kind
MAX_EXTENSION_KIND = 0xFC

# Called as decoder(view, options=..., depth=...)
ExtensionDecoder = Callable[..., tuple[Any, int]]


def validate_kind(kind: int) -> None:
    """Check that ``kind`` can identify an extension record.

    Raises:
        RegistryError: If kind is out of range, a reserved wire tag, or structural
    """
    if isinstance(kind, bool) or not isinstance(kind, int):
        raise RegistryError(f"Kind must be an integer, got {type(kind).__name__}")
    if not 0 <= kind <= MAX_EXTENSION_KIND:
        raise RegistryError(f"Kind must be an integer 0-{MAX_EXTENSION_KIND}, got {kind}")
    if kind in RESERVED_TAGS:
        raise RegistryError(f"Kind 0x{kind:02x} collides with a reserved wire tag")
    if kind in (PACKED_OBJECT, PACKED_ARRAY):
        raise RegistryError(f"Kind 0x{kind:02x} is reserved for packed containers")


class KindRegistry:
    """Maps extension kinds to the decoders that rebuild them.

    Example:
        >>> registry = KindRegistry()
        >>> registry.register_record(Transfer)
        >>> value, consumed = decode(data, registry=registry)
    """

    def __init__(self) -> None:
        self._decoders: dict[int, ExtensionDecoder] = {}
        self._names: dict[int, str] = {}

    def __contains__(self, kind: object) -> bool:
        return kind in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._decoders))

    def kinds(self) -> list[int]:
        """Return the registered kinds in ascending order."""
        return sorted(self._decoders)

    def name_of(self, kind: int) -> str | None:
        """Return the display name registered for ``kind``, if any."""
        return self._names.get(kind)

    def register(self, kind: int, decoder: ExtensionDecoder, name: str | None = None) -> None:
        """Register a decoder for an extension kind.

        The decoder is called as ``decoder(view, options=..., depth=...)`` with a
        view starting at the record's kind byte, the active codec options and the
        nesting depth of the container holding the record. It returns
        ``(value, bytes_consumed)``.

        Args:
            kind: Extension kind (0-252, not a wire tag or structural kind)
            decoder: Callable rebuilding the value
            name: Optional display name used in error messages

        Raises:
            RegistryError: If the kind is invalid or already registered to a
                different decoder
        """
        validate_kind(kind)

        existing = self._decoders.get(kind)
        if existing is not None:
            if existing == decoder:
                return
            raise RegistryError(
                f"Kind {kind} already registered to {self._names.get(kind, existing)}. "
                f"Cannot register {name or decoder} with the same kind."
            )

        self._decoders[kind] = decoder
        self._names[kind] = name or getattr(decoder, "__qualname__", repr(decoder))
        logger.debug("registered kind 0x%02x -> %s", kind, self._names[kind])

    def register_record(self, record_class: type[ExtensionRecord]) -> None:
        """Register an ExtensionRecord subclass under its own kind.

        The record's ``from_bytes`` is bound to this registry, so records that
        hold arrays of other extension records decode too.

        Raises:
            RegistryError: If the class has no valid kind or it is taken
        """
        kind = getattr(record_class, "kind", None)
        if kind is None:
            raise RegistryError(
                f"{record_class.__name__} has no kind attribute. "
                f"Cannot register for decoding."
            )
        existing = self._decoders.get(kind)
        if isinstance(existing, functools.partial) and existing.func == record_class.from_bytes:
            return
        decoder = functools.partial(record_class.from_bytes, registry=self)
        self.register(kind, decoder, name=record_class.__name__)

    def check_structural_kinds(self, structural_kinds: Iterable[int]) -> None:
        """Check that no registered kind is used for packed containers.

        Codec options may move the structural kinds away from the defaults.
        A registered kind equal to one of them could never be dispatched, so
        the combination is rejected before decoding starts.

        Raises:
            RegistryError: If a structural kind is registered as an extension
        """
        clashes = sorted(kind for kind in set(structural_kinds) if kind in self._decoders)
        if clashes:
            raise RegistryError(
                f"Kind(s) {[self.describe(kind) for kind in clashes]} are registered "
                f"as extensions but used for packed containers by the codec options"
            )

    def resolve_decoder(self, kind: int) -> ExtensionDecoder | None:
        """Return the decoder for ``kind``, or None if it is not registered."""
        return self._decoders.get(kind)

    def describe(self, kind: int) -> str:
        name = self._names.get(kind)
        return f"0x{kind:02x} ({name})" if name else f"0x{kind:02x}"
