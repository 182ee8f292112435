#!/usr/bin/env python3

"""Tests for the layout engine facade: scenarios and layout properties."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError

import pytest

from structsight.domain.models.layout import LayoutDescriptor, PaddingReason
from structsight.domain.services.optimization import LayoutEngine, SizeSimulator, analyze_layout
from tests.layout_factories import member


def non_polymorphic_layouts() -> list[LayoutDescriptor]:
    """Realistic x86-64 layouts whose first member sits at offset 0."""
    return [
        LayoutDescriptor(
            "TestStruct",
            "TestStruct",
            24,
            8,
            [
                member("a", 1, 1, 0),
                member("b", 4, 4, 4),
                member("c", 1, 1, 8),
                member("d", 8, 8, 16),
            ],
        ),
        LayoutDescriptor(
            "Header",
            "net::Header",
            16,
            8,
            [member("kind", 2, 2, 0), member("payload", 8, 8, 8)],
        ),
        LayoutDescriptor(
            "Pixel",
            "Pixel",
            6,
            2,
            [member("r", 1, 1, 0), member("depth", 2, 2, 2), member("g", 1, 1, 4)],
        ),
        LayoutDescriptor(
            "Matrix",
            "Matrix",
            72,
            8,
            [member("cells", 64, 8, 0, "double[8]"), member("rank", 1, 1, 64)],
        ),
    ]


class TestLayoutEngine:
    """Test suite for analyze_layout."""

    @pytest.fixture
    def engine(self):
        return LayoutEngine()

    @pytest.mark.unit
    def test_scenario_padded_struct(self, engine, padded_layout):
        result = engine.analyze_layout(padded_layout, pointer_size=8)

        assert [(r.offset, r.size, r.reason) for r in result.padding] == [
            (1, 3, PaddingReason.INTER_MEMBER_ALIGNMENT),
            (9, 7, PaddingReason.INTER_MEMBER_ALIGNMENT),
        ]
        assert len(result.optimizations) == 1
        reorder = result.optimizations[0]
        assert reorder.suggested_order == ("d", "b", "a", "c")
        assert reorder.bytes_saved == 8

        members_by_name = {m.name: m for m in result.members}
        simulated = SizeSimulator().simulate_size(members_by_name, reorder.suggested_order, False, 8)
        assert simulated == 16

    @pytest.mark.unit
    def test_scenario_single_member(self, engine):
        layout = LayoutDescriptor("One", "One", 4, 4, [member("x", 4, 4, 0)])

        result = engine.analyze_layout(layout, pointer_size=8)

        assert result.padding == []
        assert result.optimizations == []

    @pytest.mark.unit
    def test_scenario_polymorphic_single_member_size(self):
        simulated = SizeSimulator().simulate_size({"x": member("x", 4, 4, 8)}, ["x"], True, 8)

        assert simulated == 16

    @pytest.mark.unit
    def test_scenario_cache_line_straddle(self, engine):
        layout = LayoutDescriptor(
            "Straddle",
            "Straddle",
            72,
            4,
            [
                member("prefix", 60, 1, 0, "char[60]"),
                member("value", 8, 4, 60, "long long"),
                member("suffix", 1, 1, 68, "char"),
            ],
        )

        result = engine.analyze_layout(layout, pointer_size=8)

        assert len(result.optimizations) == 1
        finding = result.optimizations[0]
        assert "value" in finding.description
        assert finding.bytes_saved == 0
        assert finding.confidence == 0.8
        assert finding.suggested_order == ()

    @pytest.mark.unit
    def test_empty_record(self, engine):
        layout = LayoutDescriptor("Empty", "Empty", 1, 1)

        result = engine.analyze_layout(layout, pointer_size=8)

        assert result.padding == []
        assert result.optimizations == []
        assert result.useful_size == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("layout", non_polymorphic_layouts(), ids=lambda l: l.name)
    def test_padding_completeness(self, engine, layout):
        result = engine.analyze_layout(layout, pointer_size=8)

        member_bytes = sum(m.size for m in result.members)
        assert member_bytes + result.total_padding == result.total_size

    @pytest.mark.unit
    def test_padding_excludes_leading_vtable_pointer(self, engine, polymorphic_layout):
        result = engine.analyze_layout(polymorphic_layout, pointer_size=8)

        member_bytes = sum(m.size for m in result.members)
        assert member_bytes + result.total_padding + 8 == result.total_size
        for region in result.padding:
            for m in result.members:
                assert region.end <= m.offset or region.offset >= m.end

    @pytest.mark.unit
    @pytest.mark.parametrize("layout", non_polymorphic_layouts(), ids=lambda l: l.name)
    def test_suggested_order_is_permutation(self, engine, layout):
        result = engine.analyze_layout(layout, pointer_size=8)

        for suggestion in result.optimizations:
            if suggestion.suggested_order:
                assert sorted(suggestion.suggested_order) == sorted(layout.member_names)
                assert len(set(suggestion.suggested_order)) == len(layout.members)

    @pytest.mark.unit
    @pytest.mark.parametrize("layout", non_polymorphic_layouts(), ids=lambda l: l.name)
    def test_reordering_strictly_improves(self, engine, layout):
        result = engine.analyze_layout(layout, pointer_size=8)
        members_by_name = {m.name: m for m in layout.members}

        for suggestion in result.optimizations:
            if suggestion.suggested_order:
                assert suggestion.bytes_saved > 0
                simulated = SizeSimulator().simulate_size(
                    members_by_name, suggestion.suggested_order, layout.is_polymorphic, 8
                )
                assert simulated < layout.total_size
                assert simulated == layout.total_size - suggestion.bytes_saved

    @pytest.mark.unit
    def test_deterministic_and_idempotent(self, engine, padded_layout):
        first = engine.analyze_layout(padded_layout, pointer_size=8)
        second = engine.analyze_layout(padded_layout, pointer_size=8)
        reanalyzed = engine.analyze_layout(first, pointer_size=8)

        assert first.padding == second.padding == reanalyzed.padding
        assert first.optimizations == second.optimizations == reanalyzed.optimizations

    @pytest.mark.unit
    def test_input_descriptor_is_not_mutated(self, engine, padded_layout):
        original_members = list(padded_layout.members)

        result = engine.analyze_layout(padded_layout, pointer_size=8)

        assert padded_layout.padding == []
        assert padded_layout.optimizations == []
        assert padded_layout.members == original_members
        assert result is not padded_layout
        assert result.members == original_members

    @pytest.mark.unit
    def test_shared_records_are_immutable(self, engine, polymorphic_layout):
        result = engine.analyze_layout(polymorphic_layout, pointer_size=8)

        with pytest.raises(FrozenInstanceError):
            result.members[0].offset = 99
        with pytest.raises(FrozenInstanceError):
            result.vtable.has_virtual_base = True
        result.members.append(result.members[0])
        result.base_subobjects.append(result.members[0])

        assert len(polymorphic_layout.members) == 2
        assert polymorphic_layout.base_subobjects == []
        assert polymorphic_layout.members[0].offset == 8

    @pytest.mark.unit
    def test_other_fields_unchanged(self, engine, polymorphic_layout):
        result = engine.analyze_layout(polymorphic_layout, pointer_size=8)

        assert result.name == polymorphic_layout.name
        assert result.qualified_name == polymorphic_layout.qualified_name
        assert result.total_size == polymorphic_layout.total_size
        assert result.alignment == polymorphic_layout.alignment
        assert result.vtable == polymorphic_layout.vtable
        assert result.is_polymorphic is True
        assert result.is_standard_layout is False

    @pytest.mark.unit
    def test_concurrent_analysis_matches_sequential(self):
        layouts = non_polymorphic_layouts()
        sequential = [analyze_layout(layout, 8) for layout in layouts]

        with ThreadPoolExecutor(max_workers=4) as pool:
            concurrent = list(pool.map(lambda layout: analyze_layout(layout, 8), layouts))

        assert [r.to_dict() for r in concurrent] == [r.to_dict() for r in sequential]
