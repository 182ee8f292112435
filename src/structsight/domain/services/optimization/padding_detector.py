#!/usr/bin/env python3

"""Padding detection for measured record layouts.

Scans members in declaration order and reports the gaps the compiler
inserted between them and after the last one.
"""

from ....infrastructure.logging import get_logger
from ...models.layout import LayoutDescriptor, PaddingReason, PaddingRegion

logger = get_logger(__name__)


class PaddingDetector:
    """Finds inter-member and tail padding regions in a layout.

    Members must already be in offset order. Layouts produced by a compiler
    are monotonic in declaration order, so the declared order is used as-is.
    """

    def detect(self, descriptor: LayoutDescriptor) -> list[PaddingRegion]:
        """Return the padding regions of ``descriptor``.

        Args:
            descriptor: Layout with members and total size populated

        Returns:
            Regions in ascending offset order; empty for records without members
        """
        members = descriptor.members
        regions: list[PaddingRegion] = []

        if not members:
            return regions

        # Bases precede every own member, so gaps after them count too
        placed = list(descriptor.base_subobjects) + list(members)
        for current, following in zip(placed, placed[1:]):
            current_end = current.offset + current.size
            if following.offset > current_end:
                regions.append(
                    PaddingRegion(
                        offset=current_end,
                        size=following.offset - current_end,
                        reason=PaddingReason.INTER_MEMBER_ALIGNMENT,
                        next_member=following.name,
                    )
                )

        last_end = members[-1].offset + members[-1].size
        if descriptor.total_size > last_end:
            regions.append(
                PaddingRegion(
                    offset=last_end,
                    size=descriptor.total_size - last_end,
                    reason=PaddingReason.TAIL_PADDING,
                )
            )

        if regions:
            logger.debug(
                f"{descriptor.qualified_name}: {len(regions)} padding region(s), "
                f"{sum(r.size for r in regions)} byte(s) total"
            )

        return regions
