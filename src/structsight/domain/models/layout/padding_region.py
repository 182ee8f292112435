#!/usr/bin/env python3

"""Padding region model for record layouts."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PaddingReason(Enum):
    """Why a gap exists in the byte layout."""

    INTER_MEMBER_ALIGNMENT = "inter-member alignment"
    TAIL_PADDING = "tail padding"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PaddingRegion:
    """A run of unused bytes inside a record.

    Regions are derived by the padding detector and regenerated on every
    analysis; they are never authored by the extraction layer.
    """

    offset: int
    size: int
    reason: PaddingReason
    next_member: str | None = None  # Member whose alignment caused the gap

    @property
    def end(self) -> int:
        return self.offset + self.size

    @property
    def description(self) -> str:
        """Human-readable reason, naming the following member when known."""
        if self.reason is PaddingReason.INTER_MEMBER_ALIGNMENT and self.next_member:
            return f"Alignment of next member ({self.next_member})"
        if self.reason is PaddingReason.TAIL_PADDING:
            return "Tail padding for struct alignment"
        return str(self.reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "size": self.size,
            "reason": self.reason.value,
            "next_member": self.next_member,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaddingRegion":
        return cls(
            offset=data["offset"],
            size=data["size"],
            reason=PaddingReason(data["reason"]),
            next_member=data.get("next_member"),
        )
