"""
Tag types for the NBT value tree.

Every tag is an immutable pydantic model. Integer widths are enforced by
field constraints, floats are stored already rounded to their declared
precision, and lists carry the kind of their elements explicitly so an
empty list still knows what it holds.

Compounds keep their ``(key, value)`` pairs exactly as given, including
duplicate keys; deciding which duplicate wins belongs to whoever turns
the compound into a mapping.
"""

from __future__ import annotations

import struct
from enum import StrEnum
from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Tag kinds
# ---------------------------------------------------------------------------


class TagKind(StrEnum):
    """The twelve NBT value kinds."""

    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTE_ARRAY = "byte_array"
    STRING = "string"
    LIST = "list"
    COMPOUND = "compound"
    INT_ARRAY = "int_array"
    LONG_ARRAY = "long_array"

    @property
    def tag_id(self) -> int:
        """Numeric NBT tag id (1-12)."""
        return _TAG_IDS[self]


_TAG_IDS: dict[TagKind, int] = {kind: index for index, kind in enumerate(TagKind, start=1)}


# ---------------------------------------------------------------------------
# Exact-width integer aliases
# ---------------------------------------------------------------------------

Int8 = Annotated[int, Field(ge=-(2**7), le=2**7 - 1)]
Int16 = Annotated[int, Field(ge=-(2**15), le=2**15 - 1)]
Int32 = Annotated[int, Field(ge=-(2**31), le=2**31 - 1)]
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]
Float64 = Annotated[float, Field(allow_inf_nan=False)]


def round_float32(value: float) -> float:
    """Round a double to the nearest 32-bit float, rejecting overflow."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError as e:
        raise ValueError(f"{value!r} does not fit a 32-bit float") from e


# ---------------------------------------------------------------------------
# Scalar tags
# ---------------------------------------------------------------------------


class ByteTag(BaseModel):
    """Signed 8-bit integer."""

    kind: ClassVar[TagKind] = TagKind.BYTE
    value: Int8

    model_config = ConfigDict(frozen=True)


class ShortTag(BaseModel):
    """Signed 16-bit integer."""

    kind: ClassVar[TagKind] = TagKind.SHORT
    value: Int16

    model_config = ConfigDict(frozen=True)


class IntTag(BaseModel):
    """Signed 32-bit integer."""

    kind: ClassVar[TagKind] = TagKind.INT
    value: Int32

    model_config = ConfigDict(frozen=True)


class LongTag(BaseModel):
    """Signed 64-bit integer."""

    kind: ClassVar[TagKind] = TagKind.LONG
    value: Int64

    model_config = ConfigDict(frozen=True)


class FloatTag(BaseModel):
    """32-bit float. The stored value is finite and representable in f32."""

    kind: ClassVar[TagKind] = TagKind.FLOAT
    value: Float64

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    @classmethod
    def _to_single_precision(cls, v: float) -> float:
        return round_float32(v)


class DoubleTag(BaseModel):
    """64-bit float. NaN and infinities are rejected."""

    kind: ClassVar[TagKind] = TagKind.DOUBLE
    value: Float64

    model_config = ConfigDict(frozen=True)


class StringTag(BaseModel):
    """Text string."""

    kind: ClassVar[TagKind] = TagKind.STRING
    value: str

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Array tags
# ---------------------------------------------------------------------------


class ByteArrayTag(BaseModel):
    """Sequence of signed 8-bit integers."""

    kind: ClassVar[TagKind] = TagKind.BYTE_ARRAY
    values: list[Int8] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IntArrayTag(BaseModel):
    """Sequence of signed 32-bit integers."""

    kind: ClassVar[TagKind] = TagKind.INT_ARRAY
    values: list[Int32] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class LongArrayTag(BaseModel):
    """Sequence of signed 64-bit integers."""

    kind: ClassVar[TagKind] = TagKind.LONG_ARRAY
    values: list[Int64] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Container tags
# ---------------------------------------------------------------------------


class ListTag(BaseModel):
    """
    Homogeneous list of tags.

    ``element_kind`` is stored rather than derived from the first item, so
    ``ListTag(element_kind=TagKind.BYTE)`` and
    ``ListTag(element_kind=TagKind.STRING)`` are different empty lists.
    """

    kind: ClassVar[TagKind] = TagKind.LIST
    element_kind: TagKind
    items: list[Tag] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_homogeneous(self) -> ListTag:
        for index, item in enumerate(self.items):
            if item.kind != self.element_kind:
                raise ValueError(
                    f"list of {self.element_kind} cannot hold {item.kind} at index {index}"
                )
        return self


class CompoundTag(BaseModel):
    """
    Ordered ``(key, value)`` pairs.

    Duplicate keys are preserved as parsed.
    """

    kind: ClassVar[TagKind] = TagKind.COMPOUND
    entries: list[tuple[str, Tag]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def get_all(self, key: str) -> list[Tag]:
        """All values recorded under ``key``, in source order."""
        return [value for k, value in self.entries if k == key]

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Tag = (
    ByteTag
    | ShortTag
    | IntTag
    | LongTag
    | FloatTag
    | DoubleTag
    | ByteArrayTag
    | StringTag
    | ListTag
    | CompoundTag
    | IntArrayTag
    | LongArrayTag
)

# Rebuild models for recursive forward references
ListTag.model_rebuild()
CompoundTag.model_rebuild()
