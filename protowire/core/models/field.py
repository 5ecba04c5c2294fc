from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from protowire.core.models.wire import WireType


@dataclass
class Field:
    """
    One decoded occurrence of a field, as seen without a schema.
    """
    number: int
    """
    Field number taken from the tag.
    """

    wire_type: int
    """
    Wire type taken from the tag.
    """

    value: int | str | bytes | list[Field]
    """
    Raw value: unsigned int for varint and fixed-width fields, a list of
    nested fields when a length-delimited payload parses as a message,
    otherwise text or raw bytes.
    """

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, list):
            value = [field.to_dict() for field in value]

        return {
            "field": self.number,
            "wire_type": WireType(self.wire_type).name.lower(),
            "value": value,
        }
