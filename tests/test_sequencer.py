"""Tests for back-to-back segment sequencing."""

from datetime import timedelta

import pytest

from quicker_checker.booking.sequencer import (
    anchor_add_ons,
    resource_for_service,
    sequence_segments,
)
from tests.conftest import (
    BATH_ID,
    DAYCARE_ID,
    FACIAL_ID,
    NAILS_ID,
    TEETH_ID,
    TOWNIE_BATH_ID,
    utc,
)


class TestSequenceSegments:
    def test_bath_with_townie_bath(self, catalog, service_map):
        segments = sequence_segments([BATH_ID, TOWNIE_BATH_ID], utc(2026, 1, 6, 11), catalog, service_map)

        assert [s.service_id for s in segments] == [BATH_ID, TOWNIE_BATH_ID]
        assert segments[0].begin_at == utc(2026, 1, 6, 11, 0)
        assert segments[0].end_at == utc(2026, 1, 6, 11, 1)
        assert segments[1].begin_at == utc(2026, 1, 6, 11, 1)
        assert segments[1].end_at == utc(2026, 1, 6, 11, 16)

    def test_segments_are_contiguous(self, catalog, service_map):
        ids = [BATH_ID, NAILS_ID, TEETH_ID, FACIAL_ID]
        segments = sequence_segments(ids, utc(2026, 1, 6, 9), catalog, service_map)

        for previous, current in zip(segments, segments[1:]):
            assert current.begin_at == previous.end_at
        assert segments[-1].end_at == utc(2026, 1, 6, 9) + timedelta(minutes=1 + 10 + 5 + 5)

    def test_add_ons_point_at_primary(self, catalog, service_map):
        segments = sequence_segments([BATH_ID, NAILS_ID, TEETH_ID], utc(2026, 1, 6, 9), catalog, service_map)

        assert segments[0].parent_service_id is None
        assert not segments[0].is_add_on
        assert all(s.parent_service_id == BATH_ID for s in segments[1:])

    def test_single_service(self, catalog, service_map):
        segments = sequence_segments([DAYCARE_ID], utc(2026, 1, 6, 12), catalog, service_map)
        assert len(segments) == 1
        assert segments[0].duration_minutes == 600

    def test_prices_carried_from_catalog(self, catalog, service_map):
        segments = sequence_segments([BATH_ID, TOWNIE_BATH_ID], utc(2026, 1, 6, 11), catalog, service_map)
        assert [s.unit_price for s in segments] == [30.0, 12.0]

    def test_unknown_service_uses_fallback(self, catalog, service_map):
        segments = sequence_segments(["42"], utc(2026, 1, 6, 11), catalog, service_map)
        assert segments[0].duration_minutes == 15
        assert segments[0].unit_price == 0.0

    def test_empty_ids_rejected(self, catalog, service_map):
        with pytest.raises(ValueError):
            sequence_segments([], utc(2026, 1, 6, 11), catalog, service_map)


class TestAddOnAnchoring:
    def test_all_add_ons_get_primary_prepended(self, catalog, service_map):
        ids = anchor_add_ons([NAILS_ID, TEETH_ID], catalog, service_map)
        assert ids == [service_map.primary_spa_service_id, NAILS_ID, TEETH_ID]

    def test_sequencing_add_ons_only(self, catalog, service_map):
        segments = sequence_segments([NAILS_ID], utc(2026, 1, 6, 10), catalog, service_map)

        assert [s.service_id for s in segments] == [BATH_ID, NAILS_ID]
        assert segments[1].parent_service_id == BATH_ID
        assert segments[1].begin_at == utc(2026, 1, 6, 10, 1)

    def test_primary_present_not_prepended(self, catalog, service_map):
        assert anchor_add_ons([BATH_ID, NAILS_ID], catalog, service_map) == [BATH_ID, NAILS_ID]

    def test_unknown_ids_not_treated_as_add_ons(self, catalog, service_map):
        assert anchor_add_ons(["42"], catalog, service_map) == ["42"]


class TestResourceAssignment:
    def test_explicit_wins(self, service_map):
        assert resource_for_service(DAYCARE_ID, service_map, explicit="777") == "777"

    def test_mapped_resource(self, service_map):
        assert resource_for_service(DAYCARE_ID, service_map) == "295287"

    def test_unmapped_falls_back_to_spa_resource(self, service_map):
        assert resource_for_service(NAILS_ID, service_map) == service_map.spa_resource_id

    def test_explicit_applies_to_every_segment(self, catalog, service_map):
        segments = sequence_segments(
            [BATH_ID, NAILS_ID], utc(2026, 1, 6, 11), catalog, service_map, resource_id="777"
        )
        assert {s.resource_id for s in segments} == {"777"}
