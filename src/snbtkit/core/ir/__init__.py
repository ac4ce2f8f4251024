"""
snbtkit tag tree types.

All types are re-exported from this package.
"""

from .tags import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    Int8,
    Int16,
    Int32,
    Int64,
    Float64,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    Tag,
    TagKind,
    round_float32,
)

__all__ = [
    "ByteArrayTag",
    "ByteTag",
    "CompoundTag",
    "DoubleTag",
    "FloatTag",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float64",
    "IntArrayTag",
    "IntTag",
    "ListTag",
    "LongArrayTag",
    "LongTag",
    "ShortTag",
    "StringTag",
    "Tag",
    "TagKind",
    "round_float32",
]
