from __future__ import annotations

import io
import logging
import re
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from BundleUpload.backend.app.core.aggregator import chart_series
from BundleUpload.backend.app.core.config import Settings, get_settings
from BundleUpload.backend.app.core.exporter import DEFAULT_FILENAME, XLSX_MEDIA_TYPE
from BundleUpload.backend.app.core.text_reader import decode_text
from BundleUpload.backend.app.models.api import BucketsResponse, RecordsResponse, TextPayload
from BundleUpload.backend.app.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter()
service = UploadService()


@router.post("/records", response_model=RecordsResponse)
def parse_records(payload: TextPayload) -> RecordsResponse:
    return _records_response(payload.text)


@router.post("/records/files", response_model=List[RecordsResponse])
async def parse_record_files(
    files: List[UploadFile] = File(..., description="Plain-text files of msisdn/allocation lines"),
    settings: Settings = Depends(get_settings),
) -> List[RecordsResponse]:
    responses: List[RecordsResponse] = []
    for upload in files:
        file_bytes = await upload.read()
        if not file_bytes:
            logger.warning("Skipping empty upload %s", upload.filename)
            responses.append(RecordsResponse(filename=upload.filename, error="Uploaded file is empty"))
            continue
        if len(file_bytes) > settings.max_upload_bytes:
            logger.warning("Skipping upload %s: %d bytes", upload.filename, len(file_bytes))
            responses.append(RecordsResponse(filename=upload.filename, error="Uploaded file is too large"))
            continue
        responses.append(_records_response(decode_text(file_bytes), filename=upload.filename))
    return responses


@router.post("/buckets", response_model=BucketsResponse)
def bucket_allocations(payload: TextPayload) -> BucketsResponse:
    buckets = service.build_buckets(payload.text)
    return BucketsResponse.build(buckets, chart_series(buckets))


@router.post("/export")
async def export_workbook(
    payload: TextPayload,
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    record_set = service.build_record_set(payload.text)
    result = await run_in_threadpool(service.export, record_set, settings.export_filename)

    summary = result.summary
    headers = {
        "Content-Disposition": (
            f"attachment; filename=\"{_ascii_fallback(result.filename)}\"; "
            f"filename*=UTF-8''{quote(result.filename)}"
        ),
        "X-Total-Count": str(summary.total),
        "X-Valid-Count": str(summary.valid),
        "X-Duplicate-Count": str(summary.duplicates),
        "X-Invalid-Count": str(summary.invalid),
        "X-Total-GB": f"{summary.total_gb:g}",
        "X-Total-MB": f"{summary.total_mb:g}",
    }

    return StreamingResponse(
        content=io.BytesIO(result.content),
        media_type=XLSX_MEDIA_TYPE,
        headers=headers,
    )


def _records_response(text: str, filename: str | None = None) -> RecordsResponse:
    record_set = service.build_record_set(text)
    return RecordsResponse.build(
        record_set,
        summary=service.summarize(record_set.records),
        advisory=service.build_advisory(record_set),
        filename=filename,
    )


def _ascii_fallback(name: str) -> str:
    sanitized = re.sub(r"[^A-Za-z0-9_.-]", "_", name)
    return sanitized or DEFAULT_FILENAME
