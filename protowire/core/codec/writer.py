import io
import struct
from collections.abc import Iterable
from typing import BinaryIO, Self

from protowire.core.codec.varint import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    encode_varint,
    to_unsigned,
)
from protowire.core.models.wire import Tag, WireType
from protowire.core.ports.serializable import Serializable


class ProtobufWriter:
    """
    Sequential encoder appending protobuf wire data to a binary sink.

    Every typed `write_*` operation emits its own tag first, so a message is
    produced by calling one operation per field. Absent (None) strings,
    byte payloads and embedded messages are omitted from the output
    entirely; numeric and boolean values have no absent form and are always
    written.

    Repeated values use the unpacked encoding: one tag+value pair per
    element, in iteration order. Readers accumulate them by looping over
    `advance()`.

    Writes cannot fail on a growable sink. Out-of-range integers and invalid
    field numbers are programming errors and raise ValueError before anything
    is written.
    """
    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink

    @classmethod
    def buffer(cls) -> Self:
        """Writer over a fresh in-memory buffer, see `getvalue()`."""
        return cls(io.BytesIO())

    def getvalue(self) -> bytes:
        return self._sink.getvalue()    # type: ignore[attr-defined]

    def write_tag(self, field_number: int, wire_type: int) -> None:
        if field_number < 1:
            raise ValueError(f"Field number must be positive, got {field_number}")
        tag = Tag(field_number, wire_type)
        if not tag.is_known:
            raise ValueError(f"Unsupported wire type: {wire_type}")
        self.write_varint(tag.pack())

    def write_int32(self, field_number: int, value: int) -> None:
        _check_range(value, INT32_MIN, INT32_MAX, "int32")
        self.write_tag(field_number, WireType.VARINT)
        # negative int32 is sign-extended to 64 bits, hence 10 bytes on the wire
        self.write_varint(to_unsigned(value, 64))

    def write_int64(self, field_number: int, value: int) -> None:
        _check_range(value, INT64_MIN, INT64_MAX, "int64")
        self.write_tag(field_number, WireType.VARINT)
        self.write_varint(to_unsigned(value, 64))

    def write_bool(self, field_number: int, value: bool) -> None:
        self.write_tag(field_number, WireType.VARINT)
        self.write_varint(1 if value else 0)

    def write_float(self, field_number: int, value: float) -> None:
        payload = struct.pack("<f", value)
        self.write_tag(field_number, WireType.FIXED32)
        self.write_raw_bytes(payload)

    def write_double(self, field_number: int, value: float) -> None:
        payload = struct.pack("<d", value)
        self.write_tag(field_number, WireType.FIXED64)
        self.write_raw_bytes(payload)

    def write_string(self, field_number: int, value: str | None) -> None:
        if value is None:
            return
        self.write_bytes(field_number, value.encode("utf-8"))

    def write_bytes(self, field_number: int, value: bytes | None) -> None:
        if value is None:
            return
        self.write_tag(field_number, WireType.LEN)
        self.write_varint(len(value))
        self.write_raw_bytes(value)

    def write_message(self, field_number: int, value: Serializable | None) -> None:
        """
        Serialize `value` into a temporary buffer through its `write_to`
        capability, then emit it as a length-delimited field.
        """
        if value is None:
            return
        with io.BytesIO() as inner:
            value.write_to(inner)
            self.write_bytes(field_number, inner.getvalue())

    def write_repeated_int32(self, field_number: int, values: Iterable[int] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_int32(field_number, value)

    def write_repeated_int64(self, field_number: int, values: Iterable[int] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_int64(field_number, value)

    def write_repeated_bool(self, field_number: int, values: Iterable[bool] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_bool(field_number, value)

    def write_repeated_float(self, field_number: int, values: Iterable[float] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_float(field_number, value)

    def write_repeated_double(self, field_number: int, values: Iterable[float] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_double(field_number, value)

    def write_repeated_string(self, field_number: int, values: Iterable[str | None] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_string(field_number, value)

    def write_repeated_bytes(self, field_number: int, values: Iterable[bytes | None] | None) -> None:
        if values is None:
            return
        for value in values:
            self.write_bytes(field_number, value)

    def write_repeated_message(
        self,
        field_number: int,
        values: Iterable[Serializable | None] | None
    ) -> None:
        if values is None:
            return
        for value in values:
            self.write_message(field_number, value)

    def write_varint(self, value: int) -> None:
        self._sink.write(encode_varint(value))

    def write_raw_bytes(self, data: bytes) -> None:
        self._sink.write(data)


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range: {value}")
