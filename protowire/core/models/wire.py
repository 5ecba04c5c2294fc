from __future__ import annotations

import enum
from dataclasses import dataclass


class WireType(enum.IntEnum):
    """
    Framing codes carried in the low 3 bits of every tag.

    The wire type only says how many bytes follow (or how they are
    length-prefixed). It never identifies the logical type: int32, int64
    and bool all travel as VARINT.
    """
    VARINT = 0      # int32, int64, bool
    FIXED64 = 1     # double
    LEN = 2         # string, bytes, embedded messages
    FIXED32 = 5     # float


TAG_TYPE_BITS = 3
TAG_TYPE_MASK = (1 << TAG_TYPE_BITS) - 1

KNOWN_WIRE_TYPES = frozenset(int(w) for w in WireType)


@dataclass(frozen=True, slots=True)
class Tag:
    """
    Field key preceding every value on the wire:

        tag = (field_number << 3) | wire_type

    transmitted as a varint.
    """
    field_number: int
    wire_type: int

    def pack(self) -> int:
        return (self.field_number << TAG_TYPE_BITS) | self.wire_type

    @classmethod
    def unpack(cls, key: int) -> Tag:
        return cls(
            field_number=key >> TAG_TYPE_BITS,
            wire_type=key & TAG_TYPE_MASK,
        )

    @property
    def is_known(self) -> bool:
        return self.wire_type in KNOWN_WIRE_TYPES
