from __future__ import annotations

from BundleUpload.backend.app.core.aggregator import (
    UNKNOWN_LABEL,
    aggregate_allocations,
    aggregate_text,
    bucket_label,
    chart_series,
)
from BundleUpload.backend.app.models.domain import AllocationBucket


def test_bucket_label_uses_first_digit_run():
    assert bucket_label("20GB") == "20 GB"
    assert bucket_label("gb15") == "15 GB"
    assert bucket_label("abc") == UNKNOWN_LABEL


def test_aggregate_counts_in_first_seen_order():
    lines = [
        "0554739033 20GB",
        "0201234567 10GB",
        "0554739033 20gb",
        "bogus line-xx",
        "0556789012 10",
    ]

    buckets = aggregate_allocations(lines)

    assert buckets == [
        AllocationBucket(label="20 GB", count=2),
        AllocationBucket(label="10 GB", count=2),
        AllocationBucket(label="Unknown", count=1),
    ]


def test_aggregate_does_not_validate_or_dedupe():
    buckets = aggregate_allocations(["123 5GB", "123 5GB", "notanumber 5GB"])

    assert buckets == [AllocationBucket(label="5 GB", count=3)]


def test_line_without_second_token_is_unknown():
    assert aggregate_allocations(["0554739033"]) == [AllocationBucket(label="Unknown", count=1)]


def test_aggregate_text_normalizes_first():
    buckets = aggregate_text("\r\n 0554739033 20GB \r\n\r\n")

    assert buckets == [AllocationBucket(label="20 GB", count=1)]


def test_chart_series_mirrors_bucket_order():
    buckets = [AllocationBucket("20 GB", 3), AllocationBucket("Unknown", 1)]

    assert chart_series(buckets) == {"labels": ["20 GB", "Unknown"], "counts": [3, 1]}
    assert chart_series([]) == {"labels": [], "counts": []}
