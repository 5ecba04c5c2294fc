"""
Base-128 varint arithmetic shared by the reader and the writer.

Each byte carries 7 bits of payload, least significant group first; the
MSB is set on every byte except the last one.
"""
from collections.abc import Callable

from protowire.core.errors import MalformedVarintError

UINT64_MAX = (1 << 64) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

# ceil(64 / 7)
MAX_VARINT_BYTES = 10


def encode_varint(value: int) -> bytes:
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"Varint out of range: {value}")

    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(read_byte: Callable[[], int]) -> int:
    """
    Decode one varint, pulling bytes from `read_byte` until a byte
    without continuation bit is seen.

    Bits beyond the 64th are dropped. A tenth byte that still carries the
    continuation bit raises MalformedVarintError.
    """
    result = 0
    shift = 0
    while True:
        byte = read_byte()
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & UINT64_MAX
        shift += 7
        if shift >= 7 * MAX_VARINT_BYTES:
            raise MalformedVarintError("Varint too long")


def to_unsigned(value: int, bits: int = 64) -> int:
    """Two's-complement bit pattern of `value` over `bits` bits."""
    return value & ((1 << bits) - 1)


def to_signed(value: int, bits: int = 64) -> int:
    """Reinterpret the low `bits` bits of `value` as a signed integer."""
    value &= (1 << bits) - 1
    if value >> (bits - 1):
        value -= 1 << bits
    return value
