from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from BundleUpload.backend.app.models.domain import (
    AllocationBucket,
    DuplicateAdvisory,
    Record,
    RecordSet,
    RecordSummary,
)


class TextPayload(BaseModel):
    text: str = Field(default="", description="Lines of '<msisdn> <allocation>GB'")


class RecordItem(BaseModel):
    identifier: str
    allocation_gb: float
    allocation_mb: float
    is_valid: bool
    is_duplicate: bool

    @classmethod
    def from_record(cls, record: Record) -> "RecordItem":
        return cls(
            identifier=record.identifier,
            allocation_gb=record.allocation_gb,
            allocation_mb=record.allocation_mb,
            is_valid=record.is_valid,
            is_duplicate=record.is_duplicate,
        )


class SummaryModel(BaseModel):
    total: int = 0
    valid: int = 0
    duplicates: int = 0
    invalid: int = 0
    total_gb: float = 0.0
    total_mb: float = 0.0

    @classmethod
    def from_summary(cls, summary: RecordSummary) -> "SummaryModel":
        return cls(
            total=summary.total,
            valid=summary.valid,
            duplicates=summary.duplicates,
            invalid=summary.invalid,
            total_gb=summary.total_gb,
            total_mb=summary.total_mb,
        )


class AdvisoryModel(BaseModel):
    identifiers: List[str]
    message: str


class RecordsResponse(BaseModel):
    filename: Optional[str] = Field(default=None, description="Source file, when uploaded")
    records: List[RecordItem] = Field(default_factory=list)
    summary: SummaryModel = Field(default_factory=SummaryModel)
    advisory: Optional[AdvisoryModel] = None
    dropped_lines: int = 0
    error: Optional[str] = Field(default=None, description="Why an uploaded file was skipped")

    @classmethod
    def build(
        cls,
        record_set: RecordSet,
        summary: RecordSummary,
        advisory: Optional[DuplicateAdvisory],
        filename: Optional[str] = None,
    ) -> "RecordsResponse":
        return cls(
            filename=filename,
            records=[RecordItem.from_record(record) for record in record_set.records],
            summary=SummaryModel.from_summary(summary),
            advisory=AdvisoryModel(identifiers=advisory.identifiers, message=advisory.message) if advisory else None,
            dropped_lines=record_set.dropped_lines,
        )


class BucketModel(BaseModel):
    label: str
    count: int


class ChartSeries(BaseModel):
    labels: List[str] = Field(default_factory=list)
    counts: List[int] = Field(default_factory=list)


class BucketsResponse(BaseModel):
    buckets: List[BucketModel]
    chart: ChartSeries

    @classmethod
    def build(cls, buckets: List[AllocationBucket], chart: dict) -> "BucketsResponse":
        return cls(
            buckets=[BucketModel(label=bucket.label, count=bucket.count) for bucket in buckets],
            chart=ChartSeries(**chart),
        )
