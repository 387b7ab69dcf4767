from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from BundleUpload.backend.app.core.aggregator import aggregate_text
from BundleUpload.backend.app.core.duplicates import find_duplicates
from BundleUpload.backend.app.core.exporter import DEFAULT_FILENAME, UploadTemplateExporter
from BundleUpload.backend.app.core.normalizer import normalize_lines
from BundleUpload.backend.app.core.tokenizer import tokenize_line
from BundleUpload.backend.app.core.validation import is_valid_identifier
from BundleUpload.backend.app.models.domain import (
    MB_PER_GB,
    AllocationBucket,
    DuplicateAdvisory,
    ExportResult,
    Record,
    RecordSet,
    RecordSummary,
    TokenizedLine,
)

logger = logging.getLogger(__name__)


class UploadService:
    """Coordinates parsing, validation, duplicate detection and workbook export."""

    def __init__(self, exporter: Optional[UploadTemplateExporter] = None) -> None:
        self._exporter = exporter or UploadTemplateExporter()

    def build_record_set(self, text: str) -> RecordSet:
        lines = normalize_lines(text)
        parsed: List[TokenizedLine] = []
        for line in lines:
            tokenized = tokenize_line(line)
            if tokenized is not None:
                parsed.append(tokenized)

        duplicates = find_duplicates(item.identifier for item in parsed)
        flagged = set(duplicates)
        records = [
            Record(
                identifier=item.identifier,
                allocation_gb=item.allocation_gb,
                is_valid=is_valid_identifier(item.identifier),
                is_duplicate=item.identifier in flagged,
            )
            for item in parsed
        ]

        record_set = RecordSet(records=records, duplicates=duplicates, line_count=len(lines))
        logger.info(
            "Parsed input: lines=%s records=%s dropped=%s duplicates=%s",
            record_set.line_count,
            len(records),
            record_set.dropped_lines,
            len(duplicates),
        )
        return record_set

    def summarize(self, records: Sequence[Record]) -> RecordSummary:
        total_gb = sum(record.allocation_gb for record in records)
        return RecordSummary(
            total=len(records),
            valid=sum(1 for record in records if record.is_valid and not record.is_duplicate),
            duplicates=sum(1 for record in records if record.is_duplicate),
            invalid=sum(1 for record in records if not record.is_valid),
            total_gb=total_gb,
            total_mb=total_gb * MB_PER_GB,
        )

    def build_advisory(self, record_set: RecordSet) -> Optional[DuplicateAdvisory]:
        if not record_set.duplicates:
            return None

        listing = ", ".join(record_set.duplicates)
        message = (
            f"Duplicate phone numbers detected:\n{listing}\n\n"
            "Duplicates will be highlighted in yellow in the Excel export."
        )
        logger.warning("Duplicate identifiers in input: %s", listing)
        return DuplicateAdvisory(identifiers=list(record_set.duplicates), message=message)

    def build_buckets(self, text: str) -> List[AllocationBucket]:
        return aggregate_text(text)

    def export(self, record_set: RecordSet, filename: str = DEFAULT_FILENAME) -> ExportResult:
        content = self._exporter.build_workbook(record_set.records)
        summary = self.summarize(record_set.records)
        logger.info(
            "Exported workbook: filename=%s total=%s valid=%s duplicates=%s invalid=%s bytes=%s",
            filename,
            summary.total,
            summary.valid,
            summary.duplicates,
            summary.invalid,
            len(content),
        )
        return ExportResult(content=content, filename=filename, summary=summary)


class UploadSession:
    """Single-use export cycle: the input is cleared only after a successful export."""

    def __init__(
        self,
        service: Optional[UploadService] = None,
        filename: str = DEFAULT_FILENAME,
    ) -> None:
        self._service = service or UploadService()
        self._filename = filename
        self.input_text = ""
        self.record_set = RecordSet()

    def update_input(self, text: str) -> RecordSet:
        self.input_text = text
        self.record_set = self._service.build_record_set(text)
        return self.record_set

    @property
    def records(self) -> List[Record]:
        return self.record_set.records

    def advisory(self) -> Optional[DuplicateAdvisory]:
        return self._service.build_advisory(self.record_set)

    def summary(self) -> RecordSummary:
        return self._service.summarize(self.record_set.records)

    def export(self, deliver: Optional[Callable[[ExportResult], None]] = None) -> ExportResult:
        """Build the workbook, hand it to ``deliver`` and clear the session.

        Any error from building or delivering leaves the input in place.
        """
        result = self._service.export(self.record_set, filename=self._filename)
        if deliver is not None:
            deliver(result)
        self.input_text = ""
        self.record_set = RecordSet()
        return result
