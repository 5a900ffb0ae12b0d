"""Tests for payroll report export."""

import io

import pytest
from datetime import date
from decimal import Decimal
from openpyxl import load_workbook

from payslip_engine.services.exporter import (
    ExportFormat,
    PayrollReport,
    ReportLine,
    export_report,
    filename_for,
    format_period_label,
)


@pytest.fixture
def report() -> PayrollReport:
    return PayrollReport(
        period_label="Jan 1-31, 2026",
        status="paid",
        total=Decimal("115510.00"),
        line_items=[
            ReportLine("Ada", Decimal("100000.00"), Decimal("23190.00"), Decimal("106810.00")),
            ReportLine("Bola", Decimal("10000.00"), Decimal("1300.00"), Decimal("8700.00")),
        ],
    )


class TestPeriodLabel:

    def test_same_month(self):
        assert format_period_label(date(2026, 1, 1), date(2026, 1, 31)) == "Jan 1-31, 2026"

    def test_spans_months(self):
        assert format_period_label(date(2026, 1, 25), date(2026, 2, 5)) == "Jan 25-Feb 5, 2026"

    def test_filename(self, report: PayrollReport):
        assert filename_for(report, ExportFormat.CSV) == "Payroll-Jan-1-31-2026.csv"
        assert filename_for(report, ExportFormat.PDF) == "Payroll-Jan-1-31-2026.pdf"


class TestExportFormats:
    """Test each document format."""

    def test_csv(self, report: PayrollReport):
        lines = export_report(report, ExportFormat.CSV).decode("utf-8").splitlines()

        assert lines == [
            "Employee,Base Salary,Taxes,Net Pay",
            "Ada,100000.00,23190.00,106810.00",
            "Bola,10000.00,1300.00,8700.00",
        ]

    def test_xlsx_sheets(self, report: PayrollReport):
        wb = load_workbook(io.BytesIO(export_report(report, "xlsx")))

        assert wb.sheetnames == ["Payroll Details", "Summary"]

        details = wb["Payroll Details"]
        assert [c.value for c in details[1]] == ["Employee", "Base Salary", "Taxes", "Net Pay"]
        assert details["A2"].value == "Ada"
        assert float(details["D2"].value) == 106810.0
        assert details["A3"].value == "Bola"

        summary = wb["Summary"]
        assert summary["A1"].value == "Period"
        assert summary["B1"].value == "Jan 1-31, 2026"
        assert summary["B2"].value == "paid"
        assert float(summary["B3"].value) == 115510.0

    def test_pdf(self, report: PayrollReport):
        data = export_report(report, ExportFormat.PDF)

        assert data.startswith(b"%PDF")

    def test_empty_report(self):
        empty = PayrollReport(period_label="Feb 1-28, 2026", status="draft", total=Decimal("0"))

        lines = export_report(empty, ExportFormat.CSV).decode("utf-8").splitlines()

        assert lines == ["Employee,Base Salary,Taxes,Net Pay"]
        assert export_report(empty, ExportFormat.PDF).startswith(b"%PDF")

    def test_unknown_format(self, report: PayrollReport):
        with pytest.raises(ValueError):
            export_report(report, "docx")

    def test_media_types(self):
        assert ExportFormat.PDF.media_type == "application/pdf"
        assert ExportFormat.CSV.media_type.startswith("text/csv")
        assert "spreadsheetml" in ExportFormat.XLSX.media_type
