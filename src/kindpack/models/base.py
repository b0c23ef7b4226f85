"""Base record class built on pydantic.

This module provides BaseRecord, the ready-made ExtensionRecord for
applications that describe their record types as pydantic models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import DecodeError, KindMismatchError
from .extension import ExtensionRecord

if TYPE_CHECKING:
    from ..config import CodecOptions
    from ..registry import KindRegistry


class BaseRecord(BaseModel, ExtensionRecord):
    """Base class for pydantic-modelled extension records.

    Records declare a kind and ordinary pydantic fields. On the wire a record
    is its kind as a varint followed by a packed object holding the declared
    fields, so the field layout follows the same canonical rules as any other
    object. Decoding validates the rebuilt fields through the model.

    Example:
        >>> from typing import ClassVar
        >>> class Transfer(BaseRecord):
        ...     kind: ClassVar[int] = 0x08
        ...     sender: str
        ...     amount: BigInt
        >>>
        >>> data = Transfer(sender="alice", amount=BigInt(10**20)).to_bytes()
        >>> record, consumed = Transfer.from_bytes(data)

    Attributes:
        kind: Extension kind (0-252, not a wire tag or structural kind)
    """

    model_config = ConfigDict(
        # Lax validation so decoded values coerce into declared types
        strict=False,
        arbitrary_types_allowed=True,
        # Values are immutable once constructed
        frozen=True,
        extra="forbid",
    )

    kind: ClassVar[int]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Validate the kind declared by a concrete subclass."""
        super().__init_subclass__(**kwargs)

        kind = cls.__dict__.get("kind")
        if kind is not None:
            # Import here to avoid circular dependency
            from ..registry import validate_kind

            validate_kind(kind)

    def field_values(self) -> dict[str, Any]:
        """Return the declared fields by name, without converting nested values."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def to_bytes(self, options: Optional[CodecOptions] = None, depth: int = 0) -> bytes:
        """Encode as varint(kind) followed by the packed field object.

        Args:
            options: Codec options for the field object
            depth: Nesting depth of the container holding this record
        """
        from ..codec.encoder import encode_object
        from ..codec.primitives import encode_varint

        return encode_varint(type(self).kind) + encode_object(
            self.field_values(), options, depth=depth + 1
        )

    @classmethod
    def from_bytes(
        cls,
        data: Any,
        registry: Optional[KindRegistry] = None,
        options: Optional[CodecOptions] = None,
        depth: int = 0,
    ) -> tuple[BaseRecord, int]:
        """Decode a record from ``data``.

        Args:
            data: Buffer starting at the record's kind byte
            registry: Registry for extension records nested in array fields
            options: Codec options for the field object
            depth: Nesting depth of the container holding this record

        Returns:
            Tuple of (record, bytes_consumed)

        Raises:
            KindMismatchError: If the buffer holds a different kind
            DepthExceededError: If the fields nest deeper than ``options.max_depth``
            DecodeError: If the fields are malformed or fail model validation
        """
        from ..codec.decoder import decode_object
        from ..codec.primitives import ByteReader

        reader = ByteReader(data)
        kind = reader.read_varint()
        if kind != cls.kind:
            raise KindMismatchError(
                f"Kind mismatch: decoded 0x{kind:02x}, expected 0x{cls.kind:02x} "
                f"for {cls.__name__}"
            )

        fields, consumed = decode_object(
            reader.tail(), registry=registry, options=options, depth=depth + 1
        )

        try:
            record = cls(**fields)
        except ValidationError as e:
            raise DecodeError(f"Failed to construct {cls.__name__}: {e}") from e

        return record, reader.position + consumed
