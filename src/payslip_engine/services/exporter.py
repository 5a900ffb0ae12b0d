"""Payroll report export to spreadsheet, CSV and PDF."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

REPORT_HEADERS = ["Employee", "Base Salary", "Taxes", "Net Pay"]


class ExportFormat(str, Enum):
    """Supported export document formats."""

    XLSX = "xlsx"
    CSV = "csv"
    PDF = "pdf"

    @property
    def media_type(self) -> str:
        return {
            ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            ExportFormat.CSV: "text/csv; charset=utf-8",
            ExportFormat.PDF: "application/pdf",
        }[self]


@dataclass(frozen=True)
class ReportLine:
    name: str
    base_salary: Decimal
    taxes: Decimal
    net: Decimal


@dataclass(frozen=True)
class PayrollReport:
    """Everything an exported document shows."""

    period_label: str
    status: str
    total: Decimal
    line_items: list[ReportLine] = field(default_factory=list)


def format_period_label(start: date, end: date) -> str:
    """Short label for a pay period, e.g. "Jan 1-31, 2026" or "Jan 25-Feb 5, 2026"."""
    start_month = start.strftime("%b")
    end_month = end.strftime("%b")
    if start_month == end_month and start.year == end.year:
        return f"{start_month} {start.day}-{end.day}, {end.year}"
    return f"{start_month} {start.day}-{end_month} {end.day}, {end.year}"


def filename_for(report: PayrollReport, fmt: ExportFormat) -> str:
    label = report.period_label.replace(",", "").replace(" ", "-")
    return f"Payroll-{label}.{fmt.value}"


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def export_report(report: PayrollReport, fmt: ExportFormat | str) -> bytes:
    """Render a payroll report in the requested format."""
    fmt = ExportFormat(fmt)
    if fmt is ExportFormat.XLSX:
        return _export_xlsx(report)
    if fmt is ExportFormat.CSV:
        return _export_csv(report)
    return _export_pdf(report)


def _export_xlsx(report: PayrollReport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Payroll Details"

    ws.append(REPORT_HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(vertical="center")

    for line in report.line_items:
        ws.append([line.name, line.base_salary, line.taxes, line.net])

    widths = [28, 16, 16, 16]
    for i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = w

    for row in ws.iter_rows(min_row=2, min_col=2, max_col=4):
        for cell in row:
            cell.number_format = "#,##0.00"

    summary = wb.create_sheet("Summary")
    summary.append(["Period", report.period_label])
    summary.append(["Status", report.status])
    summary.append(["Total", report.total])
    summary["B3"].number_format = "#,##0.00"

    buff = io.BytesIO()
    wb.save(buff)
    return buff.getvalue()


def _export_csv(report: PayrollReport) -> bytes:
    buff = io.StringIO()
    writer = csv.writer(buff, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    for line in report.line_items:
        writer.writerow([line.name, str(line.base_salary), str(line.taxes), str(line.net)])
    return buff.getvalue().encode("utf-8")


def _export_pdf(report: PayrollReport) -> bytes:
    buff = io.BytesIO()
    doc = SimpleDocTemplate(buff, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)

    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"Payroll Report: {report.period_label}", styles["Title"]),
        Paragraph(f"Status: {report.status}", styles["Normal"]),
        Paragraph(f"Total: {_money(report.total)}", styles["Normal"]),
        Spacer(1, 12),
    ]

    data = [REPORT_HEADERS]
    for line in report.line_items:
        data.append([line.name, _money(line.base_salary), _money(line.taxes), _money(line.net)])

    tbl = Table(data, repeatRows=1)
    tbl.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(tbl)

    doc.build(story)
    return buff.getvalue()
