"""Collapse simulated fantasy-point samples into fixed-width buckets."""

from __future__ import annotations

import math
from typing import Iterable, List

from dfsproj.models import HISTOGRAM_BUCKETS


BUCKET_WIDTH = 10.0
TOP_BUCKET_FLOOR = BUCKET_WIDTH * (HISTOGRAM_BUCKETS - 2)


def bucket_index(value: float) -> int:
    # NaN lands with the non-positive outcomes so every value is counted
    if value <= 0 or math.isnan(value):
        return 0
    if value >= TOP_BUCKET_FLOOR:
        return HISTOGRAM_BUCKETS - 1
    return int(value // BUCKET_WIDTH) + 1


def build_histogram(sample: Iterable[float]) -> List[int]:
    """Count sample values per bucket: ``(-inf,0]``, then width-10 bins, then ``[60,inf)``."""

    counts = [0] * HISTOGRAM_BUCKETS
    for value in sample:
        counts[bucket_index(value)] += 1
    return counts
