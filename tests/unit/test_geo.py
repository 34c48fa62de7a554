"""Great-circle helpers."""

import pytest

from tests.factories import ORIGIN, offset_point
from tutorsearch.services.search.geo import GeoPoint, bounding_box, haversine_m


class TestGeoPoint:
    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            GeoPoint(longitude=181, latitude=0)
        with pytest.raises(ValueError):
            GeoPoint(longitude=0, latitude=-90.5)

    def test_coordinates_are_lng_lat(self):
        assert GeoPoint(longitude=77.2, latitude=28.6).to_coordinates() == [77.2, 28.6]


class TestHaversine:
    def test_one_degree_of_latitude(self):
        distance = haversine_m(GeoPoint(0.0, 0.0), 1.0, 0.0)
        assert distance == pytest.approx(111_195, abs=1)

    def test_zero_distance(self):
        assert haversine_m(ORIGIN, ORIGIN.latitude, ORIGIN.longitude) == 0

    @pytest.mark.parametrize("distance_m,bearing", [(2000, 0), (8000, 90), (40000, 225)])
    def test_matches_offset_points(self, distance_m, bearing):
        lat, lng = offset_point(ORIGIN, distance_m, bearing)
        assert haversine_m(ORIGIN, lat, lng) == pytest.approx(distance_m, abs=0.5)


class TestBoundingBox:
    def test_contains_circle(self):
        lat_min, lat_max, lng_min, lng_max = bounding_box(ORIGIN, 25000)
        for bearing in range(0, 360, 15):
            lat, lng = offset_point(ORIGIN, 24999, bearing)
            assert lat_min <= lat <= lat_max
            assert lng_min <= lng <= lng_max

    def test_near_pole_drops_longitude_bounds(self):
        _, lat_max, lng_min, lng_max = bounding_box(GeoPoint(0.0, 89.9), 50000)
        assert lat_max == 90.0
        assert lng_min is None and lng_max is None

    def test_antimeridian_drops_longitude_bounds(self):
        _, _, lng_min, lng_max = bounding_box(GeoPoint(179.99, 0.0), 10000)
        assert lng_min is None and lng_max is None
