#!/usr/bin/env python3

"""Layout descriptor model: the aggregate record under analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .member_descriptor import MemberDescriptor
from .optimization_suggestion import OptimizationSuggestion
from .padding_region import PaddingRegion
from .vtable_info import VTableInfo


@dataclass
class LayoutDescriptor:
    """Memory layout of one struct or class.

    Built by an extractor with members, sizes and polymorphism populated.
    ``base_subobjects`` holds non-virtual base classes that carry data, at
    their measured offsets; they precede every own member in memory and are
    never reordered.
    The layout engine fills ``padding`` and ``optimizations`` on a copy and
    never touches member offsets, sizes or declaration order.
    """

    name: str
    qualified_name: str
    total_size: int
    alignment: int
    members: list[MemberDescriptor] = field(default_factory=list)
    padding: list[PaddingRegion] = field(default_factory=list)
    vtable: VTableInfo | None = None
    is_polymorphic: bool = False
    is_standard_layout: bool = True
    optimizations: list[OptimizationSuggestion] = field(default_factory=list)
    base_subobjects: list[MemberDescriptor] = field(default_factory=list)

    @property
    def useful_size(self) -> int:
        """Offset plus size of the last declared member (size without tail padding)."""
        if not self.members:
            return 0
        last = self.members[-1]
        return last.offset + last.size

    @property
    def total_padding(self) -> int:
        return sum(region.size for region in self.padding)

    @property
    def member_names(self) -> list[str]:
        return [member.name for member in self.members]

    def find_member(self, name: str) -> MemberDescriptor | None:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "total_size": self.total_size,
            "alignment": self.alignment,
            "useful_size": self.useful_size,
            "is_polymorphic": self.is_polymorphic,
            "is_standard_layout": self.is_standard_layout,
            "members": [member.to_dict() for member in self.members],
            "padding": [region.to_dict() for region in self.padding],
            "vtable": self.vtable.to_dict() if self.vtable else None,
            "optimizations": [opt.to_dict() for opt in self.optimizations],
            "base_subobjects": [base.to_dict() for base in self.base_subobjects],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutDescriptor:
        vtable_data = data.get("vtable")
        return cls(
            name=data["name"],
            qualified_name=data.get("qualified_name", data["name"]),
            total_size=data["total_size"],
            alignment=data.get("alignment", 1),
            members=[MemberDescriptor.from_dict(m) for m in data.get("members", [])],
            padding=[PaddingRegion.from_dict(p) for p in data.get("padding", [])],
            vtable=VTableInfo.from_dict(vtable_data) if vtable_data else None,
            is_polymorphic=data.get("is_polymorphic", False),
            is_standard_layout=data.get("is_standard_layout", True),
            optimizations=[
                OptimizationSuggestion.from_dict(o) for o in data.get("optimizations", [])
            ],
            base_subobjects=[
                MemberDescriptor.from_dict(b) for b in data.get("base_subobjects", [])
            ],
        )
