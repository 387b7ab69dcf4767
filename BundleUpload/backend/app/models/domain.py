from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

MB_PER_GB = 1024


@dataclass(frozen=True, slots=True)
class Record:
    """One subscriber row parsed from the input text."""

    identifier: str
    allocation_gb: float
    is_valid: bool
    is_duplicate: bool = False

    @property
    def allocation_mb(self) -> float:
        return self.allocation_gb * MB_PER_GB


@dataclass(frozen=True, slots=True)
class TokenizedLine:
    """Identifier and parsed allocation for a line that survived tokenizing."""

    identifier: str
    allocation_gb: float


@dataclass(slots=True)
class RecordSet:
    """Ordered records plus the duplicate identifiers that flagged them."""

    records: List[Record] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    line_count: int = 0

    @property
    def dropped_lines(self) -> int:
        return self.line_count - len(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True, slots=True)
class AllocationBucket:
    label: str
    count: int


@dataclass(frozen=True, slots=True)
class RecordSummary:
    """Counts and totals reported to the caller before and after export."""

    total: int
    valid: int
    duplicates: int
    invalid: int
    total_gb: float
    total_mb: float


@dataclass(frozen=True, slots=True)
class DuplicateAdvisory:
    identifiers: List[str]
    message: str


@dataclass(frozen=True, slots=True)
class ExportResult:
    content: bytes
    filename: str
    summary: RecordSummary
