#!/usr/bin/env python3

"""Member descriptor model for record layouts."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MemberDescriptor:
    """One data member (or base class subobject) of a record, as measured by the extraction layer."""

    name: str
    type: str
    offset: int
    size: int
    alignment: int
    is_bitfield: bool = False
    bitfield_width: int = 0  # Bits, meaningful only for bitfields
    bitfield_bit_offset: int = 0  # Bit offset within the containing byte

    @property
    def end(self) -> int:
        """Byte offset one past the member's last byte."""
        return self.offset + self.size

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "offset": self.offset,
            "size": self.size,
            "alignment": self.alignment,
            "is_bitfield": self.is_bitfield,
            "bitfield_width": self.bitfield_width,
            "bitfield_bit_offset": self.bitfield_bit_offset,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemberDescriptor":
        return cls(
            name=data["name"],
            type=data.get("type", ""),
            offset=data["offset"],
            size=data["size"],
            alignment=data.get("alignment", 1),
            is_bitfield=data.get("is_bitfield", False),
            bitfield_width=data.get("bitfield_width", 0),
            bitfield_bit_offset=data.get("bitfield_bit_offset", 0),
        )
