from __future__ import annotations

import io

import pytest
from openpyxl import load_workbook

from BundleUpload.backend.app.core.exporter import (
    ALERT_COLOR,
    HEADERS,
    WARNING_COLOR,
    EmptyExportError,
    ExportError,
    UploadTemplateExporter,
)
from BundleUpload.backend.app.models.domain import Record


def _records():
    return [
        Record(identifier="0201234567", allocation_gb=10, is_valid=True, is_duplicate=True),
        Record(identifier="554739033", allocation_gb=2.5, is_valid=False, is_duplicate=False),
        Record(identifier="0556789012", allocation_gb=20, is_valid=True, is_duplicate=False),
    ]


def _load(content: bytes):
    workbook = load_workbook(io.BytesIO(content))
    return workbook, workbook.active


def test_build_workbook_writes_headers_and_rows_in_order():
    workbook, sheet = _load(UploadTemplateExporter().build_workbook(_records()))

    assert workbook.sheetnames == ["Sheet1"]
    assert tuple(cell.value for cell in sheet[1][: len(HEADERS)]) == HEADERS
    assert sheet["A2"].value == "0201234567"
    assert sheet["A3"].value == "554739033"
    assert sheet["A4"].value == "0556789012"
    for row in (2, 3, 4):
        assert sheet.cell(row=row, column=2).value in (None, "")
        assert sheet.cell(row=row, column=3).value == 0
        assert sheet.cell(row=row, column=5).value == 0


def test_allocation_is_converted_to_megabytes_exactly():
    _, sheet = _load(UploadTemplateExporter().build_workbook(_records()))

    assert sheet["D2"].value == 10240
    assert sheet["D3"].value == 2560
    assert sheet["D4"].value == 20480


def test_fractional_megabytes_are_kept():
    records = [Record(identifier="0554739033", allocation_gb=0.0001, is_valid=True)]
    _, sheet = _load(UploadTemplateExporter().build_workbook(records))

    assert sheet["D2"].value == pytest.approx(0.1024)


def test_invalid_rows_use_alert_style_and_duplicates_use_warning_style():
    _, sheet = _load(UploadTemplateExporter().build_workbook(_records()))

    duplicate_cell = sheet["A2"]
    assert duplicate_cell.fill.fill_type == "solid"
    assert duplicate_cell.fill.fgColor.rgb == WARNING_COLOR
    assert duplicate_cell.font.bold

    invalid_cell = sheet["A3"]
    assert invalid_cell.fill.fill_type == "solid"
    assert invalid_cell.fill.fgColor.rgb == ALERT_COLOR
    assert invalid_cell.font.bold

    plain_cell = sheet["A4"]
    assert plain_cell.fill.fill_type is None
    assert not plain_cell.font.bold


def test_invalid_takes_precedence_over_duplicate():
    records = [
        Record(identifier="123", allocation_gb=1, is_valid=False, is_duplicate=True),
        Record(identifier="123", allocation_gb=1, is_valid=False, is_duplicate=True),
    ]
    _, sheet = _load(UploadTemplateExporter().build_workbook(records))

    assert sheet["A2"].fill.fgColor.rgb == ALERT_COLOR
    assert sheet["A3"].fill.fgColor.rgb == ALERT_COLOR


def test_totals_formulas_are_placed_five_rows_below_data():
    _, sheet = _load(UploadTemplateExporter().build_workbook(_records()))

    assert sheet["F9"].value == "=SUM(D2:D4)"
    assert sheet["G9"].value == "=F9/1024"
    assert sheet["F9"].font.bold
    assert sheet["G9"].font.bold
    assert sheet.max_row == 9


def test_single_record_totals_row():
    records = [Record(identifier="0554739033", allocation_gb=1, is_valid=True)]
    _, sheet = _load(UploadTemplateExporter().build_workbook(records))

    assert sheet["F7"].value == "=SUM(D2:D2)"
    assert sheet["G7"].value == "=F7/1024"


def test_columns_are_sized_from_longest_text():
    records = [Record(identifier="0554739033-with-a-long-tail", allocation_gb=1, is_valid=False)]
    _, sheet = _load(UploadTemplateExporter().build_workbook(records))

    assert sheet.column_dimensions["A"].width == len("0554739033-with-a-long-tail") + 2
    assert sheet.column_dimensions["B"].width == len("Beneficiary Name") + 2
    assert sheet.column_dimensions["D"].width == len("Data (MB) (1024MB = 1GB)") + 2
    # "Sms(Unit)" is shorter than the minimum width
    assert sheet.column_dimensions["E"].width == 12


def test_empty_record_set_is_rejected():
    with pytest.raises(EmptyExportError):
        UploadTemplateExporter().build_workbook([])


def test_assembly_failure_is_wrapped(monkeypatch):
    def explode(self, worksheet, records):
        raise MemoryError("out of memory")

    monkeypatch.setattr(UploadTemplateExporter, "_write_sheet", explode)

    with pytest.raises(ExportError) as excinfo:
        UploadTemplateExporter().build_workbook(_records())

    assert not isinstance(excinfo.value, EmptyExportError)
    assert isinstance(excinfo.value.__cause__, MemoryError)
