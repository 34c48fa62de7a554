"""Pagination arithmetic and distance bucketing of a result page."""

import pytest

from tutorsearch.services.search.distance_buckets import (
    DISTANCE_BUCKETS,
    bucket_for,
    count_by_bucket,
    group_by_bucket,
)
from tutorsearch.services.search.pager import PageRequest, Pagination, total_pages


class TestPager:
    @pytest.mark.parametrize(
        "total,limit,expected", [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (15, 10, 2)]
    )
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected

    def test_skip(self):
        assert PageRequest(page=1, limit=10).skip == 0
        assert PageRequest(page=3, limit=10).skip == 20

    def test_pagination_for_request(self):
        assert Pagination.for_request(PageRequest(2, 10), 15) == Pagination(2, 10, 15, 2)


class TestBuckets:
    def test_bands_are_contiguous(self):
        for lower, upper in zip(DISTANCE_BUCKETS, DISTANCE_BUCKETS[1:]):
            assert lower.max_m == upper.min_m
        assert DISTANCE_BUCKETS[0].min_m == 0
        assert DISTANCE_BUCKETS[-1].max_m == 100000

    def test_half_open_boundaries(self):
        assert bucket_for(0).label == "0-5 km"
        assert bucket_for(4999.9).label == "0-5 km"
        assert bucket_for(5000).label == "5-10 km"
        assert bucket_for(99999.9).label == "25+ km"
        assert bucket_for(100000) is None
        assert bucket_for(None) is None

    def test_counts_every_band_in_order(self):
        counts = count_by_bucket([2000, 8000, 24999.5, None, 150000])
        assert [c.bucket.label for c in counts] == [b.label for b in DISTANCE_BUCKETS]
        assert [c.count for c in counts] == [1, 1, 0, 1, 0]

    def test_sum_bounded_by_page_size(self):
        distances = [100, 6000, 6100, 120000, None]
        assert sum(c.count for c in count_by_bucket(distances)) <= len(distances)

    def test_to_dict(self):
        assert count_by_bucket([100])[0].to_dict() == {
            "label": "0-5 km",
            "min": 0,
            "max": 5000,
            "count": 1,
        }

    def test_group_drops_empty_bands_and_keeps_order(self):
        items = [("a", 100), ("b", 12000), ("c", 300), ("d", None)]
        groups = group_by_bucket(items, lambda item: item[1])
        assert [(bucket.label, [i[0] for i in members]) for bucket, members in groups] == [
            ("0-5 km", ["a", "c"]),
            ("10-15 km", ["b"]),
        ]
