"""
Schema-less inspection of protobuf messages.

Without a schema a length-delimited payload is ambiguous: it may be text,
raw bytes or an embedded message. The inspector guesses in this order:

    1. printable UTF-8 text
    2. embedded message, if the whole payload parses cleanly
    3. any other UTF-8 text
    4. raw bytes

Varint and fixed-width values are reported as unsigned integers since their
signedness and float-ness are not recorded on the wire.
"""
import logging

from protowire.core.codec.reader import ProtobufReader
from protowire.core.errors import DecodeError, UnknownWireTypeError
from protowire.core.models.field import Field
from protowire.core.models.wire import Tag, WireType

DEFAULT_MAX_DEPTH = 16

logger = logging.getLogger("core.codec.inspect")


def inspect_message(
    data: bytes,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_length: int | None = None,
) -> list[Field]:
    """
    Decode every field of `data`. Decode errors propagate to the caller,
    only nested guesses swallow them.
    """
    reader = ProtobufReader.from_bytes(data, max_length=max_length)
    fields: list[Field] = []

    for tag in reader:
        if tag.field_number == 0:
            raise DecodeError("Invalid field number 0")
        value = _read_value(reader, tag, max_depth, max_length)
        fields.append(Field(tag.field_number, tag.wire_type, value))

    return fields


def _read_value(
    reader: ProtobufReader,
    tag: Tag,
    depth: int,
    max_length: int | None,
) -> int | str | bytes | list[Field]:
    match tag.wire_type:
        case WireType.VARINT:
            return reader.read_varint()
        case WireType.FIXED64:
            return reader.read_fixed64()
        case WireType.FIXED32:
            return reader.read_fixed32()
        case WireType.LEN:
            return _guess_payload(reader.read_bytes(), depth - 1, max_length)
        case _:
            raise UnknownWireTypeError(tag.wire_type)


def _guess_payload(
    payload: bytes,
    depth: int,
    max_length: int | None,
) -> str | bytes | list[Field]:
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        text = None

    if text is not None and text.isprintable():
        return text

    if payload and depth > 0:
        try:
            return inspect_message(payload, max_depth=depth, max_length=max_length)
        except DecodeError as exc:
            logger.debug(f"Payload of {len(payload)} bytes is not a message: {exc}")

    if text is not None:
        return text
    return payload
