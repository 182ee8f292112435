#!/usr/bin/env python3

"""Heuristic member ordering that reduces alignment padding."""

from collections.abc import Sequence

from ....infrastructure.logging import get_logger
from ...models.layout import MemberDescriptor

logger = get_logger(__name__)


class OrderOptimizer:
    """Proposes a member order with the strictest-aligned, largest members first.

    This greedy ordering works well for common ABIs but is not guaranteed to
    reach the minimum possible padding; no exhaustive search is attempted.
    Bitfields are ordered like any other member using their storage size and
    alignment, and are never repacked into shared storage units.
    """

    def propose_order(self, members: Sequence[MemberDescriptor]) -> list[str]:
        """Return a permutation of member names sorted by (alignment desc, size desc).

        Python's sort is stable, so members that tie on both keys keep their
        declaration order and the result is deterministic.
        """
        ordered = sorted(members, key=lambda m: (-m.alignment, -m.size))
        order = [member.name for member in ordered]
        logger.debug(f"Proposed member order: {order}")
        return order
