"""Tally allocations by size for the summary table and chart."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from BundleUpload.backend.app.core.normalizer import normalize_lines
from BundleUpload.backend.app.models.domain import AllocationBucket

UNKNOWN_LABEL = "Unknown"

_DELIMITER_RE = re.compile(r"[\s\-]+")
_DIGITS_RE = re.compile(r"[0-9]+")


def bucket_label(token: str) -> str:
    match = _DIGITS_RE.search(token)
    if match is None:
        return UNKNOWN_LABEL
    return f"{match.group(0)} GB"


def aggregate_allocations(lines: Iterable[str]) -> List[AllocationBucket]:
    """Count lines per allocation label, keeping first-seen label order.

    No validation or duplicate detection happens here; a line without a
    second token lands in the ``Unknown`` bucket.
    """

    counts: Dict[str, int] = {}
    for line in lines:
        tokens = [token for token in _DELIMITER_RE.split(line) if token]
        label = bucket_label(tokens[1]) if len(tokens) >= 2 else UNKNOWN_LABEL
        counts[label] = counts.get(label, 0) + 1
    return [AllocationBucket(label=label, count=count) for label, count in counts.items()]


def aggregate_text(text: str) -> List[AllocationBucket]:
    return aggregate_allocations(normalize_lines(text))


def chart_series(buckets: Iterable[AllocationBucket]) -> Dict[str, list]:
    labels: List[str] = []
    counts: List[int] = []
    for bucket in buckets:
        labels.append(bucket.label)
        counts.append(bucket.count)
    return {"labels": labels, "counts": counts}
