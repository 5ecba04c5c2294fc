class ProtowireError(Exception):
    """Base class for every error raised by the codec."""


class DecodeError(ProtowireError):
    """
    Raised when a byte stream cannot be parsed as protobuf wire data.

    A decode error is fatal to the message being parsed: the reader's
    position is left wherever the failure happened and the partially
    built message must be discarded by the caller.
    """


class EndOfStreamError(DecodeError, EOFError):
    """Fewer bytes remain in the source than the current read requires."""


class MalformedVarintError(DecodeError):
    """A varint kept its continuation bit set past the tenth byte."""


class UnknownWireTypeError(DecodeError):
    """The current tag carries a wire type the codec cannot skip."""

    def __init__(self, wire_type: int) -> None:
        super().__init__(f"Unknown wire type: {wire_type}")
        self.wire_type = wire_type


class WireTypeMismatchError(DecodeError):
    """
    Raised by a strict reader when an extraction does not match the wire
    type of the current tag (for example `read_string()` on a varint).
    """

    def __init__(self, field_number: int, actual: int, expected: int) -> None:
        super().__init__(
            f"Field {field_number} has wire type {actual}, expected {expected}"
        )
        self.field_number = field_number
        self.actual = actual
        self.expected = expected


class MessageTooLargeError(DecodeError):
    """A length prefix exceeds the limit configured on the reader."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Length prefix {length} exceeds limit {limit}")
        self.length = length
        self.limit = limit
