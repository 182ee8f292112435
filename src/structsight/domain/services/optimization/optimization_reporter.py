#!/usr/bin/env python3

"""Optimization suggestions for analyzed record layouts.

Two independent findings are produced:

- Reordering: the declared order wastes padding that the greedy
  alignment-first order would reclaim.
- Cache-line spanning: a member smaller than a cache line straddles a
  cache-line boundary. Zero-size members (empty arrays, empty structs
  under [[no_unique_address]]) occupy no bytes and are never reported,
  even at a line boundary.

The confidence values are fixed per finding kind. They are static
heuristics and must not be read as calibrated probabilities.
"""

from ....infrastructure.logging import get_logger
from ...models.layout import LayoutDescriptor, MemberDescriptor, OptimizationSuggestion
from .order_optimizer import OrderOptimizer
from .size_simulator import SizeSimulator

logger = get_logger(__name__)

CACHE_LINE_SIZE = 64
REORDER_CONFIDENCE = 0.95
CACHE_LINE_SPAN_CONFIDENCE = 0.8


class OptimizationReporter:
    """Compares the declared layout against the proposed one and flags cache-line splits."""

    def __init__(
        self,
        order_optimizer: OrderOptimizer | None = None,
        size_simulator: SizeSimulator | None = None,
    ):
        self.order_optimizer = order_optimizer or OrderOptimizer()
        self.size_simulator = size_simulator or SizeSimulator()

    def generate(
        self, descriptor: LayoutDescriptor, pointer_size: int
    ) -> list[OptimizationSuggestion]:
        """Return every suggestion for ``descriptor``; the reordering finding comes first."""
        suggestions: list[OptimizationSuggestion] = []

        reorder = self._reordering_suggestion(descriptor, pointer_size)
        if reorder is not None:
            suggestions.append(reorder)

        suggestions.extend(self._cache_line_suggestions(descriptor.members))
        return suggestions

    def _reordering_suggestion(
        self, descriptor: LayoutDescriptor, pointer_size: int
    ) -> OptimizationSuggestion | None:
        members = descriptor.members
        if len(members) < 2:
            return None

        optimal_order = self.order_optimizer.propose_order(members)
        if optimal_order == descriptor.member_names:
            return None

        members_by_name = {member.name: member for member in members}
        optimized_size = self.size_simulator.simulate_size(
            members_by_name,
            optimal_order,
            descriptor.is_polymorphic,
            pointer_size,
            descriptor.base_subobjects,
        )
        if optimized_size >= descriptor.total_size:
            logger.debug(
                f"{descriptor.qualified_name}: reordering gives {optimized_size} bytes, "
                f"no smaller than {descriptor.total_size}"
            )
            return None

        bytes_saved = descriptor.total_size - optimized_size
        logger.debug(f"{descriptor.qualified_name}: reordering saves {bytes_saved} byte(s)")
        return OptimizationSuggestion(
            description="Reorder members by alignment to reduce padding",
            bytes_saved=bytes_saved,
            suggested_order=tuple(optimal_order),
            confidence=REORDER_CONFIDENCE,
        )

    def _cache_line_suggestions(
        self, members: list[MemberDescriptor]
    ) -> list[OptimizationSuggestion]:
        suggestions = []
        for member in members:
            # Zero-sized and line-sized members are not actionable
            if member.size <= 0 or member.size >= CACHE_LINE_SIZE:
                continue

            start_line = member.offset // CACHE_LINE_SIZE
            end_line = (member.offset + member.size - 1) // CACHE_LINE_SIZE
            if start_line != end_line:
                suggestions.append(
                    OptimizationSuggestion(
                        description=(
                            f"Member '{member.name}' spans multiple cache lines "
                            f"(lines {start_line}-{end_line})"
                        ),
                        bytes_saved=0,
                        suggested_order=(),
                        confidence=CACHE_LINE_SPAN_CONFIDENCE,
                    )
                )
        return suggestions
