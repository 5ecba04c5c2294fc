from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class Serializable(Protocol):
    """
    Capability of a message-shaped value to serialize itself.

    Any object exposing `write_to` can be embedded as a nested message
    by the writer; no base class is required. Implementations write
    their own fields, in field-number order or any self-consistent order,
    by driving a `ProtobufWriter` over the given sink.

    The sink is a fresh in-memory buffer owned by the caller. It must not
    be closed or retained after `write_to` returns.
    """

    def write_to(self, sink: BinaryIO) -> None:
        """Write every set field of this message into `sink`."""
