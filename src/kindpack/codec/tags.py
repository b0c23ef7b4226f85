"""Wire tags and value categories.

Every object field and array item (other than extension records) is prefixed
by one of six reserved tag bytes naming its category.
"""

from __future__ import annotations

import enum
from typing import Optional

from ..exceptions import UnsupportedTypeError


class WireTag(enum.IntEnum):
    """One-byte tags for the six built-in categories."""

    STRING = 0x50
    VARINT = 0x51
    VARBIGINT = 0x52
    ARRAY = 0x53
    OBJECT = 0x54
    BOOLEAN = 0x55


class Category(enum.Enum):
    """Closed set of value categories a ValueShape can take."""

    STRING = "string"
    VARINT = "varint"
    VARBIGINT = "varbigint"
    ARRAY = "array"
    OBJECT = "object"
    BOOLEAN = "boolean"
    EXTENSION = "extension"

    @property
    def is_container(self) -> bool:
        return self in (Category.ARRAY, Category.OBJECT)


_CATEGORY_TO_TAG = {
    Category.STRING: WireTag.STRING,
    Category.VARINT: WireTag.VARINT,
    Category.VARBIGINT: WireTag.VARBIGINT,
    Category.ARRAY: WireTag.ARRAY,
    Category.OBJECT: WireTag.OBJECT,
    Category.BOOLEAN: WireTag.BOOLEAN,
}

_TAG_TO_CATEGORY = {tag: category for category, tag in _CATEGORY_TO_TAG.items()}

RESERVED_TAGS = frozenset(int(tag) for tag in WireTag)


def tag_for(category: Category) -> WireTag:
    """Return the wire tag for a category.

    Raises:
        UnsupportedTypeError: For EXTENSION, which carries its own kind instead
    """
    try:
        return _CATEGORY_TO_TAG[category]
    except KeyError:
        raise UnsupportedTypeError(f"Category {category.value} has no wire tag") from None


def category_for_tag(tag: int) -> Optional[Category]:
    """Return the category for a reserved tag byte, or None for any other byte."""
    if tag not in RESERVED_TAGS:
        return None
    return _TAG_TO_CATEGORY[WireTag(tag)]


def is_reserved_tag(value: int) -> bool:
    return value in RESERVED_TAGS
