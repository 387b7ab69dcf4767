from __future__ import annotations

import logging
from io import BytesIO
from typing import Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from BundleUpload.backend.app.models.domain import MB_PER_GB, Record

logger = logging.getLogger(__name__)

HEADERS = (
    "Beneficiary Msisdn",
    "Beneficiary Name",
    "Voice(Minutes)",
    "Data (MB) (1024MB = 1GB)",
    "Sms(Unit)",
)
SHEET_TITLE = "Sheet1"
DEFAULT_FILENAME = "UploadTemplate.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

FIRST_DATA_ROW = 2
TOTALS_ROW_OFFSET = 5
TOTAL_MB_COLUMN = "F"
TOTAL_GB_COLUMN = "G"
MIN_COLUMN_WIDTH = 10
COLUMN_PADDING = 2

ALERT_COLOR = "FFFF0000"
WARNING_COLOR = "FFFFFF00"
FONT_COLOR = "FF000000"
BORDER_COLOR = "FFE5E7EB"

_ALERT_FILL = PatternFill(fill_type="solid", fgColor=ALERT_COLOR)
_WARNING_FILL = PatternFill(fill_type="solid", fgColor=WARNING_COLOR)
_FLAG_FONT = Font(color=FONT_COLOR, bold=True)
_TOTAL_FONT = Font(bold=True)
_THIN = Side(style="thin", color=BORDER_COLOR)
_ROW_BORDER = Border(top=_THIN, bottom=_THIN, left=_THIN, right=_THIN)


class ExportError(Exception):
    """Raised when the upload workbook cannot be produced."""


class EmptyExportError(ExportError):
    """Raised when an export is requested for an empty record set."""


class UploadTemplateExporter:
    """Build the bulk upload workbook from an ordered record set."""

    def build_workbook(self, records: Sequence[Record]) -> bytes:
        if not records:
            raise EmptyExportError("No data to export")

        try:
            workbook = Workbook()
            worksheet = workbook.active
            worksheet.title = SHEET_TITLE
            self._write_sheet(worksheet, records)

            buffer = BytesIO()
            workbook.save(buffer)
            return buffer.getvalue()
        except Exception as exc:
            logger.exception("Workbook assembly failed: records=%s", len(records))
            raise ExportError("Error exporting to Excel. Please try again.") from exc

    def _write_sheet(self, worksheet, records: Sequence[Record]) -> None:
        worksheet.append(list(HEADERS))

        for record in records:
            worksheet.append([record.identifier, "", 0, _megabytes(record.allocation_gb), 0])
            self._style_row(worksheet, worksheet.max_row, record)

        self._auto_size_columns(worksheet)

        last_row = FIRST_DATA_ROW + len(records) - 1
        self._write_totals(worksheet, last_row)

    def _style_row(self, worksheet, row_index: int, record: Record) -> None:
        fill = None
        if not record.is_valid:
            fill = _ALERT_FILL
        elif record.is_duplicate:
            fill = _WARNING_FILL

        for column in range(1, len(HEADERS) + 1):
            cell = worksheet.cell(row=row_index, column=column)
            cell.border = _ROW_BORDER
            if fill is not None:
                cell.fill = fill
                cell.font = _FLAG_FONT

    def _auto_size_columns(self, worksheet) -> None:
        for column_cells in worksheet.columns:
            column = get_column_letter(column_cells[0].column)
            max_length = 0
            for cell in column_cells:
                if cell.value is None or cell.value == "":
                    continue
                max_length = max(max_length, len(str(cell.value)))
            worksheet.column_dimensions[column].width = max(MIN_COLUMN_WIDTH, max_length) + COLUMN_PADDING

    def _write_totals(self, worksheet, last_row: int) -> None:
        totals_row = last_row + TOTALS_ROW_OFFSET
        mb_cell = worksheet[f"{TOTAL_MB_COLUMN}{totals_row}"]
        gb_cell = worksheet[f"{TOTAL_GB_COLUMN}{totals_row}"]

        mb_cell.value = f"=SUM(D{FIRST_DATA_ROW}:D{last_row})"
        gb_cell.value = f"={TOTAL_MB_COLUMN}{totals_row}/{MB_PER_GB}"
        mb_cell.font = _TOTAL_FONT
        gb_cell.font = _TOTAL_FONT


def _megabytes(allocation_gb: float) -> Union[int, float]:
    value = allocation_gb * MB_PER_GB
    if float(value).is_integer():
        return int(value)
    return value
