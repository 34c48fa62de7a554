# tutorsearch/services/search/distance_buckets.py
"""
Fixed distance bands used to summarize geo results.

Bands are half-open ``[min, max)`` in meters. Distances past the last band
(only possible with a very large radius) fall into no bucket.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from tutorsearch.core.constants import DISTANCE_BANDS

T = TypeVar("T")


@dataclass(frozen=True)
class DistanceBucket:
    label: str
    min_m: int
    max_m: int

    def contains(self, distance_m: float) -> bool:
        return self.min_m <= distance_m < self.max_m


DISTANCE_BUCKETS: Tuple[DistanceBucket, ...] = tuple(
    DistanceBucket(label, low, high) for label, low, high in DISTANCE_BANDS
)


@dataclass(frozen=True)
class BucketCount:
    bucket: DistanceBucket
    count: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "label": self.bucket.label,
            "min": self.bucket.min_m,
            "max": self.bucket.max_m,
            "count": self.count,
        }


def bucket_for(distance_m: Optional[float]) -> Optional[DistanceBucket]:
    if distance_m is None:
        return None
    for bucket in DISTANCE_BUCKETS:
        if bucket.contains(distance_m):
            return bucket
    return None


def count_by_bucket(distances: Sequence[Optional[float]]) -> List[BucketCount]:
    """Count every band, including empty ones, in band order."""
    counts = {bucket: 0 for bucket in DISTANCE_BUCKETS}
    for distance in distances:
        bucket = bucket_for(distance)
        if bucket is not None:
            counts[bucket] += 1
    return [BucketCount(bucket, count) for bucket, count in counts.items()]


def group_by_bucket(
    items: Sequence[T], distance_of: Callable[[T], Optional[float]]
) -> List[Tuple[DistanceBucket, List[T]]]:
    """Group items per band, keeping input order and dropping empty bands."""
    grouped: Dict[DistanceBucket, List[T]] = {bucket: [] for bucket in DISTANCE_BUCKETS}
    for item in items:
        bucket = bucket_for(distance_of(item))
        if bucket is not None:
            grouped[bucket].append(item)
    return [(bucket, members) for bucket, members in grouped.items() if members]
