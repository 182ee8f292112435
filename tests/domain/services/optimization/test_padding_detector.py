#!/usr/bin/env python3

"""Unit tests for padding detection."""

import pytest

from structsight.domain.models.layout import LayoutDescriptor, PaddingReason, PaddingRegion
from structsight.domain.services.optimization import PaddingDetector
from tests.layout_factories import member


class TestPaddingDetector:
    """Test suite for inter-member and tail padding detection."""

    @pytest.fixture
    def detector(self):
        return PaddingDetector()

    @pytest.mark.unit
    def test_inter_member_padding(self, detector, padded_layout):
        """Gaps before 'b' and 'd' are reported; 'd' ends exactly at the record end."""
        regions = detector.detect(padded_layout)

        assert regions == [
            PaddingRegion(1, 3, PaddingReason.INTER_MEMBER_ALIGNMENT, "b"),
            PaddingRegion(9, 7, PaddingReason.INTER_MEMBER_ALIGNMENT, "d"),
        ]

    @pytest.mark.unit
    def test_tail_padding(self, detector, optimal_layout):
        regions = detector.detect(optimal_layout)

        assert regions == [PaddingRegion(14, 2, PaddingReason.TAIL_PADDING)]
        assert regions[0].description == "Tail padding for struct alignment"

    @pytest.mark.unit
    def test_inter_member_description_names_following_member(self, detector, padded_layout):
        regions = detector.detect(padded_layout)

        assert regions[0].description == "Alignment of next member (b)"

    @pytest.mark.unit
    def test_empty_record_has_no_padding(self, detector):
        layout = LayoutDescriptor("Empty", "Empty", total_size=1, alignment=1)

        assert detector.detect(layout) == []

    @pytest.mark.unit
    def test_single_member_with_tail(self, detector):
        layout = LayoutDescriptor(
            "Wide", "Wide", total_size=16, alignment=16, members=[member("x", 1, 1, 0)]
        )

        assert detector.detect(layout) == [PaddingRegion(1, 15, PaddingReason.TAIL_PADDING)]

    @pytest.mark.unit
    def test_tightly_packed_record(self, detector):
        layout = LayoutDescriptor(
            "Bytes",
            "Bytes",
            total_size=4,
            alignment=1,
            members=[member(f"byte_{i}", 1, 1, i) for i in range(4)],
        )

        assert detector.detect(layout) == []

    @pytest.mark.unit
    def test_bitfields_sharing_storage_produce_no_gap(self, detector):
        layout = LayoutDescriptor(
            "Flags",
            "Flags",
            total_size=8,
            alignment=4,
            members=[
                member("visible", 4, 4, 0, is_bitfield=True, bitfield_width=1),
                member("dirty", 4, 4, 0, is_bitfield=True, bitfield_width=1, bitfield_bit_offset=1),
                member("count", 4, 4, 4),
            ],
        )

        assert detector.detect(layout) == []

    @pytest.mark.unit
    def test_gap_after_base_subobject(self, detector):
        # struct B { int x; }; struct D : B { double d; };
        layout = LayoutDescriptor(
            "D",
            "D",
            16,
            8,
            [member("d", 8, 8, 8)],
            base_subobjects=[member("B", 4, 4, 0, "B")],
        )

        assert detector.detect(layout) == [
            PaddingRegion(4, 4, PaddingReason.INTER_MEMBER_ALIGNMENT, "d"),
        ]

    @pytest.mark.unit
    def test_does_not_modify_descriptor(self, detector, padded_layout):
        detector.detect(padded_layout)

        assert padded_layout.padding == []

    @pytest.mark.unit
    def test_regions_never_overlap_members(self, detector, padded_layout, optimal_layout):
        for layout in (padded_layout, optimal_layout):
            for region in detector.detect(layout):
                assert region.size > 0
                for m in layout.members:
                    assert region.end <= m.offset or region.offset >= m.end
