"""
Tests for haversine distance and date-range overlap.
"""

import numpy as np
import pytest

from helpers import LISBON, north_of

from route_matcher.core.dates import dates_overlap, overlap_window, parse_date
from route_matcher.core.geo import haversine_distance, pairwise_haversine


class TestHaversineDistance:
    """Tests for haversine distance calculation."""

    def test_same_location(self):
        """Distance to same point is 0."""
        assert haversine_distance(38.72, -9.14, 38.72, -9.14) == 0.0

    def test_along_meridian(self):
        """50 km due north measures 50 km."""
        lat, lng = north_of(LISBON, 50)
        dist = haversine_distance(LISBON[0], LISBON[1], lat, lng)
        assert dist == pytest.approx(50.0, abs=1e-6)

    def test_lisbon_to_porto(self):
        """Lisbon to Porto should be ~275 km."""
        dist = haversine_distance(38.7223, -9.1393, 41.1579, -8.6291)
        assert 265 < dist < 285, f"Lisbon-Porto should be ~275km, got {dist}km"

    def test_symmetric(self):
        """Distance A->B should equal B->A."""
        dist_ab = haversine_distance(38.7223, -9.1393, 37.1028, -8.6730)
        dist_ba = haversine_distance(37.1028, -8.6730, 38.7223, -9.1393)
        assert dist_ab == pytest.approx(dist_ba)

    def test_antipodes_do_not_fail(self):
        dist = haversine_distance(0.0, 0.0, 0.0, 180.0)
        assert dist == pytest.approx(np.pi * 6371.0)

    def test_pairwise_matches_scalar(self):
        lats_a = np.array([38.7223, 37.0891])
        lngs_a = np.array([-9.1393, -8.2479])
        lats_b = np.array([38.6979, 37.1028, 41.1579])
        lngs_b = np.array([-9.4215, -8.6730, -8.6291])

        matrix = pairwise_haversine(lats_a, lngs_a, lats_b, lngs_b)

        assert matrix.shape == (2, 3)
        for i in range(2):
            for j in range(3):
                expected = haversine_distance(lats_a[i], lngs_a[i], lats_b[j], lngs_b[j])
                assert matrix[i, j] == pytest.approx(expected)


class TestParseDate:

    def test_calendar_date_is_utc_midnight(self):
        parsed = parse_date("2024-06-01")
        assert parsed.isoformat() == "2024-06-01T00:00:00+00:00"

    def test_zulu_timestamp(self):
        parsed = parse_date("2024-06-01T10:30:00.000Z")
        assert parsed.isoformat() == "2024-06-01T10:30:00+00:00"

    def test_offset_is_normalised_to_utc(self):
        parsed = parse_date("2024-06-01T01:00:00+02:00")
        assert parsed.isoformat() == "2024-05-31T23:00:00+00:00"

    @pytest.mark.parametrize("value", ["", None, "next tuesday", "2024-13-45"])
    def test_malformed_is_none(self, value):
        assert parse_date(value) is None


class TestDatesOverlap:
    """Tests for inclusive date-range intersection."""

    def test_overlapping(self):
        assert dates_overlap("2024-06-01", "2024-06-10", "2024-06-05", "2024-06-15")

    def test_touching_boundary_counts(self):
        """[Jan1, Jan5] and [Jan5, Jan10] overlap."""
        assert dates_overlap("2024-01-01", "2024-01-05", "2024-01-05", "2024-01-10")

    def test_disjoint(self):
        assert not dates_overlap("2024-01-01", "2024-01-04", "2024-01-05", "2024-01-10")

    def test_containment(self):
        assert dates_overlap("2024-01-01", "2024-01-31", "2024-01-10", "2024-01-12")

    def test_symmetric(self):
        pairs = [
            ("2024-01-01", "2024-01-05", "2024-01-05", "2024-01-10"),
            ("2024-01-01", "2024-01-04", "2024-01-05", "2024-01-10"),
            ("2024-02-01", "2024-02-28", "2024-02-10", "2024-02-12"),
        ]
        for s1, e1, s2, e2 in pairs:
            assert dates_overlap(s1, e1, s2, e2) == dates_overlap(s2, e2, s1, e1)

    def test_mixed_date_and_timestamp(self):
        assert dates_overlap(
            "2024-06-01", "2024-06-10",
            "2024-06-10T00:00:00.000Z", "2024-06-20T00:00:00.000Z"
        )

    def test_malformed_never_overlaps(self):
        assert not dates_overlap("garbage", "2024-06-10", "2024-06-01", "2024-06-10")
        assert not dates_overlap("2024-06-01", "2024-06-10", "2024-06-01", "")


class TestOverlapWindow:

    def test_window_is_intersection(self):
        assert overlap_window(
            "2024-06-01", "2024-06-10", "2024-06-05", "2024-06-15"
        ) == ("2024-06-05", "2024-06-10")

    def test_single_day_window(self):
        assert overlap_window(
            "2024-01-01", "2024-01-05", "2024-01-05", "2024-01-10"
        ) == ("2024-01-05", "2024-01-05")

    def test_timestamps_drop_time_of_day(self):
        assert overlap_window(
            "2024-06-01T08:00:00Z", "2024-06-10T18:00:00Z",
            "2024-06-03T20:00:00Z", "2024-06-12T09:00:00Z"
        ) == ("2024-06-03", "2024-06-10")

    def test_no_window_without_overlap(self):
        assert overlap_window("2024-01-01", "2024-01-04", "2024-01-05", "2024-01-10") is None
