#!/usr/bin/env python3

"""Plain-text rendering of analyzed record layouts.

Produces a table of members and padding interleaved by offset, followed by
the padding summary and any optimization suggestions.
"""

from ....infrastructure.logging import get_logger
from ...models.layout import AnalysisResult, LayoutDescriptor, MemberDescriptor, PaddingRegion

logger = get_logger(__name__)

RULE_WIDTH = 72


class LayoutReportFormatter:
    """Formats LayoutDescriptors and AnalysisResults as text reports."""

    def format(self, layout: LayoutDescriptor) -> str:
        """Render one analyzed layout."""
        lines = [
            f"{layout.qualified_name}: {layout.total_size} bytes, "
            f"align {layout.alignment}, useful {layout.useful_size} bytes",
        ]

        if layout.total_padding:
            percent = layout.total_padding / layout.total_size * 100 if layout.total_size else 0.0
            lines.append(f"Padding: {layout.total_padding} bytes ({percent:.1f}%)")

        if layout.is_polymorphic:
            vtable = layout.vtable
            virtuals = ", ".join(vtable.virtual_function_names) if vtable else ""
            note = "Polymorphic: yes (has vtable)"
            if virtuals:
                note += f", virtual: {virtuals}"
            if vtable and vtable.has_virtual_base:
                note += ", has virtual base"
            lines.append(note)

        if not layout.is_standard_layout:
            lines.append("Standard layout: no")

        lines.append("-" * RULE_WIDTH)
        lines.append(f"{'OFFSET':>8}  {'SIZE':>6}  {'ALIGN':>5}  MEMBER")
        lines.extend(self._format_rows(layout))
        lines.append("-" * RULE_WIDTH)

        for suggestion in layout.optimizations:
            line = f"* {suggestion.description}"
            if suggestion.bytes_saved:
                line += f" (saves {suggestion.bytes_saved} bytes)"
            line += f" [confidence {suggestion.confidence:.2f}]"
            lines.append(line)
            if suggestion.suggested_order:
                lines.append(f"  Suggested order: {', '.join(suggestion.suggested_order)}")

        return "\n".join(lines)

    def format_result(self, result: AnalysisResult) -> str:
        """Render every layout of a result, or its error message."""
        if not result.success:
            return f"Analysis failed: {result.error_message}"
        if not result.layouts:
            return "No structs/classes found"
        return "\n\n".join(self.format(layout) for layout in result.layouts)

    def _format_rows(self, layout: LayoutDescriptor) -> list[str]:
        rows = []
        pending = list(layout.padding)

        for base in layout.base_subobjects:
            while pending and pending[0].end <= base.offset:
                rows.append(self._format_padding(pending.pop(0)))
            rows.append(
                f"{base.offset:>8}  {base.size:>6}  {base.alignment:>5}  <base: {base.type}>"
            )

        for member in layout.members:
            while pending and pending[0].end <= member.offset:
                rows.append(self._format_padding(pending.pop(0)))
            rows.append(self._format_member(member))

        rows.extend(self._format_padding(region) for region in pending)
        return rows

    @staticmethod
    def _format_member(member: MemberDescriptor) -> str:
        label = f"{member.type} {member.name}"
        if member.is_bitfield:
            label += f" : {member.bitfield_width} (bit {member.bitfield_bit_offset})"
        return f"{member.offset:>8}  {member.size:>6}  {member.alignment:>5}  {label}"

    @staticmethod
    def _format_padding(region: PaddingRegion) -> str:
        return f"{region.offset:>8}  {region.size:>6}  {'':>5}  <padding: {region.description}>"
