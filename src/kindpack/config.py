"""Codec configuration.

This module provides the options dataclass threaded through every encode and
decode call. Nothing here is global: two calls with different options never
affect each other.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .codec.tags import RESERVED_TAGS
from .registry import PACKED_ARRAY, PACKED_OBJECT

DEFAULT_MAX_DEPTH = 64

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CodecOptions:
    """Options controlling encode/decode behavior.

    Attributes:
        max_depth: Maximum container nesting (default 64). The top-level
            object or array counts as depth 1, and the fields of an
            extension record sit one level below the container holding it.
            Exceeding it raises DepthExceededError on both encode and decode.

        strict_booleans: Reject boolean bytes other than 0x00/0x01 on decode
            (default False, any nonzero byte decodes as True).

        strict_array_length: Require an array's declared items length to
            match the bytes its items consume (default True). When False the
            declared length is read but not enforced.

        packed_object_kind: Kind announcing a packed object (default 0x20).

        packed_array_kind: Kind announcing a packed array (default 0x21).

        Custom structural kinds must not be registered as extension kinds.
        Decoding with a KindRegistry that holds one raises RegistryError, and
        encoding a record of that kind raises EncodeError.

    Examples:
        ```python
        from kindpack import CodecOptions, decode

        # Shallow payloads only, canonical booleans
        options = CodecOptions(max_depth=8, strict_booleans=True)
        value, consumed = decode(data, options=options)
        ```
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_booleans: bool = False
    strict_array_length: bool = True
    packed_object_kind: int = PACKED_OBJECT
    packed_array_kind: int = PACKED_ARRAY

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

        for name in ("packed_object_kind", "packed_array_kind"):
            kind = getattr(self, name)
            if not 0 <= kind < 0xFD:
                raise ValueError(f"{name} must be 0-252, got {kind}")
            if kind in RESERVED_TAGS:
                raise ValueError(f"{name} 0x{kind:02x} collides with a reserved wire tag")

        if self.packed_object_kind == self.packed_array_kind:
            raise ValueError(
                f"packed_object_kind and packed_array_kind must differ, "
                f"both are {self.packed_object_kind}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CodecOptions:
        """Build options from ``KINDPACK_*`` environment variables.

        Recognized variables: ``KINDPACK_MAX_DEPTH``,
        ``KINDPACK_STRICT_BOOLEANS`` and ``KINDPACK_STRICT_ARRAY_LENGTH``.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        if "KINDPACK_MAX_DEPTH" in env:
            try:
                kwargs["max_depth"] = int(env["KINDPACK_MAX_DEPTH"])
            except ValueError as e:
                raise ValueError(
                    f"KINDPACK_MAX_DEPTH must be an integer, got {env['KINDPACK_MAX_DEPTH']!r}"
                ) from e
        if "KINDPACK_STRICT_BOOLEANS" in env:
            kwargs["strict_booleans"] = env["KINDPACK_STRICT_BOOLEANS"].lower() in TRUE_VALUES
        if "KINDPACK_STRICT_ARRAY_LENGTH" in env:
            kwargs["strict_array_length"] = (
                env["KINDPACK_STRICT_ARRAY_LENGTH"].lower() in TRUE_VALUES
            )

        return cls(**kwargs)  # type: ignore[arg-type]

    @property
    def structural_kinds(self) -> frozenset[int]:
        return frozenset((self.packed_object_kind, self.packed_array_kind))


DEFAULT_OPTIONS = CodecOptions()
