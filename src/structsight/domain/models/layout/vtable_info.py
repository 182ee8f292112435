#!/usr/bin/env python3

"""Virtual table model for polymorphic records."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class VTableInfo:
    """Virtual dispatch information for a polymorphic record.

    Only a single leading vtable pointer is modeled; secondary vtables from
    multiple inheritance and virtual-base offsets are not represented.
    """

    pointer_offset: int = 0
    virtual_function_names: tuple[str, ...] = field(default_factory=tuple)
    has_virtual_base: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "pointer_offset": self.pointer_offset,
            "virtual_function_names": list(self.virtual_function_names),
            "has_virtual_base": self.has_virtual_base,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VTableInfo":
        return cls(
            pointer_offset=data.get("pointer_offset", 0),
            virtual_function_names=tuple(data.get("virtual_function_names", ())),
            has_virtual_base=data.get("has_virtual_base", False),
        )
