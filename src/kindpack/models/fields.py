"""Value types and field helpers.

This module provides the arbitrary-precision integer marker and convenience
annotations for declaring record fields with pydantic.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, GetCoreSchemaHandler
from pydantic_core import core_schema

MAX_UINT64 = (1 << 64) - 1


class BigInt(int):
    """An integer encoded with the arbitrary-precision wire form.

    Plain ``int`` values are bounded integers (0 to 2**64 - 1). Wrapping a
    value in BigInt selects the varbigint encoding instead, and decoding a
    varbigint always yields a BigInt, so re-encoding reproduces the same bytes.
    BigInt compares equal to the int it wraps.

    Example:
        >>> encode({"supply": BigInt(10**30)})
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"BigInt({int(self)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(ge=0),
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )


def VarInt(**kwargs: Any) -> Any:
    """Create a bounded integer field (0 to 2**64 - 1).

    Args:
        **kwargs: Additional Field() arguments (description, default, etc.)

    Example:
        >>> class Transfer(BaseRecord):
        ...     amount: int = VarInt(description="Amount in base units")
    """
    return Field(ge=0, le=MAX_UINT64, **kwargs)


UInt64 = Annotated[int, Field(ge=0, le=MAX_UINT64)]
