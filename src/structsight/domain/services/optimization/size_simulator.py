#!/usr/bin/env python3

"""Record size simulation for a candidate member order."""

from collections.abc import Iterable, Mapping, Sequence

from ....infrastructure.logging import get_logger
from ...models.layout import MemberDescriptor

logger = get_logger(__name__)


def align_up(value: int, alignment: int) -> int:
    """Round ``value`` up to a multiple of ``alignment``; non-positive alignments leave it unchanged."""
    if alignment <= 0:
        return value
    return (value + alignment - 1) // alignment * alignment


class SizeSimulator:
    """Computes the size a record would have if its members were placed in a given order.

    Polymorphic records are modeled with a single pointer-sized vtable slot at
    offset 0. Base class subobjects stay where the compiler put them, and
    reordered members are placed after the last of them. Secondary vtables
    from multiple inheritance, virtual-base offset adjustments and members
    placed in a base's tail padding are not modeled, so sizes for complex
    hierarchies are approximate.
    """

    def simulate_size(
        self,
        members_by_name: Mapping[str, MemberDescriptor],
        order: Iterable[str],
        is_polymorphic: bool,
        pointer_size: int,
        base_subobjects: Sequence[MemberDescriptor] = (),
    ) -> int:
        """Return the simulated total size in bytes.

        Args:
            members_by_name: Lookup table of the record's members
            order: Member names in placement order; unknown names are skipped
            is_polymorphic: Reserve a leading vtable pointer when True
            pointer_size: Target pointer size (4 for 32-bit, 8 for 64-bit)
            base_subobjects: Bases with data, at their measured offsets

        Returns:
            Size after placing every member and rounding to the largest alignment
        """
        cursor = 0
        max_alignment = 1

        if is_polymorphic:
            cursor = pointer_size
            max_alignment = pointer_size

        # A leading vtable pointer lies before or inside the first base
        for base in base_subobjects:
            cursor = max(cursor, base.end)
            max_alignment = max(max_alignment, base.alignment)

        for name in order:
            member = members_by_name.get(name)
            if member is None:
                logger.debug(f"Skipping unknown member in simulated order: {name}")
                continue

            cursor = align_up(cursor, member.alignment)
            cursor += member.size
            max_alignment = max(max_alignment, member.alignment)

        size = align_up(cursor, max_alignment)
        logger.debug(f"Simulated size {size} (max alignment {max_alignment})")
        return size
