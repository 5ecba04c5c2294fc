import io
import logging
import struct
from collections.abc import Callable, Iterator
from typing import BinaryIO, Self, TypeVar

from protowire.core.codec.varint import decode_varint, to_signed
from protowire.core.errors import (
    EndOfStreamError,
    MessageTooLargeError,
    UnknownWireTypeError,
    WireTypeMismatchError,
)
from protowire.core.models.wire import Tag, WireType

T = TypeVar("T")


class ProtobufReader:
    """
    Sequential, schema-less decoder for one protobuf message.

    The reader wraps a readable and seekable binary stream whose length is
    measured once at construction. Parsing is driven by the caller:

        reader = ProtobufReader(stream)
        while reader.advance():
            match reader.field_number:
                case 1:
                    name = reader.read_string()
                case 2:
                    age = reader.read_int32()
                case _:
                    reader.skip_field()

    `advance()` parses the next tag and stores it as the cursor; exactly one
    extraction (or `skip_field()`) must follow before the next `advance()`.
    Calling `advance()` twice in a row leaves the previous value's bytes
    unread and desynchronizes the stream; the reader cannot detect this.

    By default, extractions do not check that the requested type matches
    the wire type of the current tag: reading a string out of a varint field
    returns garbage or fails later. With `strict=True`, a mismatch raises
    WireTypeMismatchError before any byte is consumed.

    A reader instance is bound to its stream for a single message and is not
    safe to share between concurrent callers.
    """
    def __init__(
        self,
        stream: BinaryIO,
        *,
        strict: bool = False,
        max_length: int | None = None,
    ) -> None:
        self._stream = stream
        self._length = self._measure(stream)
        self._strict = strict
        self._max_length = max_length
        self._field_number = 0
        self._wire_type = 0
        self._logger = logging.getLogger("core.codec.reader")

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs) -> Self:
        return cls(io.BytesIO(data), **kwargs)

    @property
    def field_number(self) -> int:
        return self._field_number

    @property
    def wire_type(self) -> int:
        return self._wire_type

    @property
    def tag(self) -> Tag:
        return Tag(self._field_number, self._wire_type)

    @property
    def remaining(self) -> int:
        return self._length - self._stream.tell()

    def advance(self) -> bool:
        """
        Parse the next tag. Returns False once the stream is exhausted,
        leaving the previous cursor untouched.
        """
        if self._stream.tell() >= self._length:
            return False

        tag = Tag.unpack(self._read_varint())
        self._field_number = tag.field_number
        self._wire_type = tag.wire_type
        return True

    def __iter__(self) -> Iterator[Tag]:
        while self.advance():
            yield self.tag

    def read_varint(self) -> int:
        """Current varint value as an unsigned 64-bit integer."""
        self._expect(WireType.VARINT)
        return self._read_varint()

    def read_int32(self) -> int:
        self._expect(WireType.VARINT)
        return to_signed(self._read_varint(), 32)

    def read_int64(self) -> int:
        self._expect(WireType.VARINT)
        return to_signed(self._read_varint(), 64)

    def read_bool(self) -> bool:
        self._expect(WireType.VARINT)
        return self._read_varint() != 0

    def read_fixed32(self) -> int:
        self._expect(WireType.FIXED32)
        return struct.unpack("<I", self._read_exact(4))[0]

    def read_fixed64(self) -> int:
        self._expect(WireType.FIXED64)
        return struct.unpack("<Q", self._read_exact(8))[0]

    def read_float(self) -> float:
        self._expect(WireType.FIXED32)
        # "<f" = IEEE-754 binary32, little-endian whatever the host order
        return struct.unpack("<f", self._read_exact(4))[0]

    def read_double(self) -> float:
        self._expect(WireType.FIXED64)
        return struct.unpack("<d", self._read_exact(8))[0]

    def read_string(self) -> str:
        return self.read_bytes().decode("utf-8")

    def read_bytes(self) -> bytes:
        self._expect(WireType.LEN)
        return self._read_exact(self._read_length())

    def read_message(self, parser: Callable[[BinaryIO], T]) -> T:
        """
        Read a length-delimited embedded message and hand an isolated
        in-memory copy of exactly its bytes to `parser`.

        The parser cannot observe anything past the length prefix, so a
        corrupt inner message never desynchronizes the outer stream.
        """
        payload = self.read_bytes()
        with io.BytesIO(payload) as sub:
            return parser(sub)

    def skip_field(self) -> None:
        """
        Consume the value of the current tag without interpreting it.
        Only the wire type is used to find out how many bytes to drop.
        """
        if not self.tag.is_known:
            self._logger.debug(
                f"Cannot skip field {self._field_number}: "
                f"wire type {self._wire_type}"
            )
            raise UnknownWireTypeError(self._wire_type)

        match self._wire_type:
            case WireType.VARINT:
                self._read_varint()
            case WireType.FIXED64:
                self._read_exact(8)
            case WireType.LEN:
                self._read_exact(self._read_length())
            case WireType.FIXED32:
                self._read_exact(4)

    def _expect(self, wire_type: WireType) -> None:
        if self._strict and self._wire_type != wire_type:
            raise WireTypeMismatchError(
                self._field_number, self._wire_type, int(wire_type)
            )

    def _read_varint(self) -> int:
        return decode_varint(self._read_byte)

    def _read_length(self) -> int:
        length = self._read_varint()
        if self._max_length is not None and length > self._max_length:
            raise MessageTooLargeError(length, self._max_length)
        return length

    def _read_byte(self) -> int:
        data = self._stream.read(1)
        if not data:
            self._logger.debug(f"Unexpected end of stream in field {self._field_number}")
            raise EndOfStreamError("Unexpected end of stream")
        return data[0]

    def _read_exact(self, count: int) -> bytes:
        if count > self.remaining:
            self._logger.debug(
                f"Field {self._field_number} needs {count} bytes, "
                f"{self.remaining} left"
            )
            raise EndOfStreamError(
                f"Need {count} bytes, only {self.remaining} remaining"
            )

        buffer = bytearray()
        while len(buffer) < count:
            chunk = self._stream.read(count - len(buffer))
            if not chunk:
                raise EndOfStreamError("Unexpected end of stream")
            buffer.extend(chunk)
        return bytes(buffer)

    @staticmethod
    def _measure(stream: BinaryIO) -> int:
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
        return end
