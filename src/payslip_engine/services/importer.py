"""Spreadsheet import: rows of employee compensation into batch items."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Mapping, Union

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from payslip_engine.calculators.custom_fields import normalize_name
from payslip_engine.calculators.types import CANONICAL_FIELDS, CustomField, PayrollBatchItem

logger = logging.getLogger(__name__)

Source = Union[bytes, BinaryIO, str, Path]

# Header shown in the download template, per canonical field.
DISPLAY_NAMES: dict[str, str] = {
    "employee_name": "Employee Name",
    "basic_salary": "Basic Salary",
    "housing_allowance": "Housing Allowance",
    "transport_allowance": "Transport Allowance",
    "utility_allowance": "Utility Allowance",
    "lunch_allowance": "Lunch Allowance",
    "entertainment_allowance": "Entertainment Allowance",
    "leave_allowance": "Leave Allowance",
    "other_allowances": "Other Allowances",
    "bonus": "Bonus",
    "overtime": "Overtime",
    "employee_deductions": "Employee Deductions",
    "loan_repayment": "Loan Repayment",
}

# Normalized header -> canonical field. Normalization drops case, spaces,
# underscores and hyphens, so "Basic Salary", "BasicSalary" and
# "basic_salary" all land on the same key.
COLUMN_ALIASES: dict[str, str] = {
    "employeename": "employee_name",
    "employee": "employee_name",
    "name": "employee_name",
    "basicsalary": "basic_salary",
    "basesalary": "basic_salary",
    "basic": "basic_salary",
    "salary": "basic_salary",
    "housingallowance": "housing_allowance",
    "housing": "housing_allowance",
    "transportallowance": "transport_allowance",
    "transport": "transport_allowance",
    "utilityallowance": "utility_allowance",
    "utility": "utility_allowance",
    "lunchallowance": "lunch_allowance",
    "lunch": "lunch_allowance",
    "entertainmentallowance": "entertainment_allowance",
    "entertainment": "entertainment_allowance",
    "leaveallowance": "leave_allowance",
    "leave": "leave_allowance",
    "otherallowances": "other_allowances",
    "otherallowance": "other_allowances",
    "bonus": "bonus",
    "bonusamount": "bonus",
    "overtime": "overtime",
    "overtimepay": "overtime",
    "employeedeductions": "employee_deductions",
    "deductions": "employee_deductions",
    "loanrepayment": "loan_repayment",
    "loan": "loan_repayment",
}

XLSX_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


class ImportFormatError(Exception):
    """Raised when an uploaded file cannot be turned into payroll records."""

    def __init__(self, message: str, filename: str | None = None):
        self.filename = filename
        if filename:
            message = f"{filename}: {message}"
        super().__init__(message)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _read_bytes(source: Source) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    return source.read()


def read_rows(source: Source, filename: str | None = None) -> list[dict[str, Any]]:
    """Read the first sheet of a spreadsheet as a list of header-keyed rows.

    The file type comes from ``filename`` (or from ``source`` when it is a
    path). Rows with no values are skipped.
    """
    if filename is None and isinstance(source, (str, Path)):
        filename = str(source)
    suffix = Path(filename or "").suffix.lower()
    data = _read_bytes(source)

    if suffix in XLSX_SUFFIXES:
        rows = _read_xlsx(data, filename)
    elif suffix in CSV_SUFFIXES:
        rows = _read_csv(data, filename)
    else:
        raise ImportFormatError(
            "unsupported file type; upload an .xlsx or .csv file", filename
        )

    return [row for row in rows if not all(_is_blank(v) for v in row.values())]


def _read_xlsx(data: bytes, filename: str | None) -> list[dict[str, Any]]:
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        raise ImportFormatError(f"could not open workbook ({e})", filename) from e

    try:
        ws = wb.worksheets[0]
        row_iter = ws.iter_rows(values_only=True)
        header = next(row_iter, None)
        if header is None:
            return []
        columns = [str(h).strip() if h is not None else "" for h in header]

        rows: list[dict[str, Any]] = []
        for values in row_iter:
            row = {
                col: value
                for col, value in zip(columns, values)
                if col
            }
            rows.append(row)
        return rows
    finally:
        wb.close()


def _read_csv(data: bytes, filename: str | None) -> list[dict[str, Any]]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFormatError("CSV file is not UTF-8 encoded", filename) from e

    reader = csv.DictReader(io.StringIO(text))
    return [
        {col.strip(): value for col, value in row.items() if col}
        for row in reader
    ]


def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Map recognized column aliases to canonical field names.

    Unrecognized columns are kept unchanged. When two columns map to the
    same field, the first non-blank one wins.
    """
    normalized: dict[str, Any] = {}
    for column, value in row.items():
        canonical = COLUMN_ALIASES.get(normalize_name(str(column)))
        if canonical is None:
            normalized[column] = value
        elif canonical not in normalized or _is_blank(normalized[canonical]):
            normalized[canonical] = value
    return normalized


def rows_to_batch_items(
    rows: Iterable[Mapping[str, Any]],
    custom_fields: Iterable[CustomField] = (),
    first_row_number: int = 2,
) -> list[PayrollBatchItem]:
    """Turn raw spreadsheet rows into batch items.

    Extra columns whose header matches a custom field name are keyed by that
    field's id. Values are left unconverted so that a bad cell fails only its
    own employee when the batch runs. Rows with neither a name nor any
    compensation value are dropped.
    """
    fields_by_name = {normalize_name(f.name): f for f in custom_fields}
    items: list[PayrollBatchItem] = []

    for row_number, raw in enumerate(rows, start=first_row_number):
        row = normalize_row(raw)
        values: dict[str, Any] = {}
        for key, value in row.items():
            if key == "employee_name":
                continue
            if key in CANONICAL_FIELDS:
                values[key] = value
                continue
            field = fields_by_name.get(normalize_name(str(key)))
            values[field.id if field else key] = value

        name = row.get("employee_name")
        has_amounts = any(not _is_blank(values.get(k)) for k in CANONICAL_FIELDS)
        if _is_blank(name) and not has_amounts:
            logger.debug("Skipping row %d: no employee name or amounts", row_number)
            continue

        items.append(
            PayrollBatchItem(
                employee_name=str(name).strip() if not _is_blank(name) else "",
                input=values,
                source_row=row_number,
            )
        )

    return items


def import_batch_items(
    source: Source,
    filename: str | None = None,
    custom_fields: Iterable[CustomField] = (),
) -> list[PayrollBatchItem]:
    """Read a spreadsheet and return its usable employee records."""
    rows = read_rows(source, filename)
    items = rows_to_batch_items(rows, custom_fields)
    if not items:
        raise ImportFormatError("no employee records found", filename)
    logger.info("Imported %d employee records from %s", len(items), filename or "upload")
    return items


def build_template() -> bytes:
    """Return an .xlsx import template with the canonical headers and two sample rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Payroll Template"

    columns = list(DISPLAY_NAMES)
    ws.append([DISPLAY_NAMES[c] for c in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)

    samples = [
        {"employee_name": "John Doe", "basic_salary": 100000, "housing_allowance": 20000,
         "transport_allowance": 10000, "bonus": 5000},
        {"employee_name": "Jane Smith", "basic_salary": 150000, "housing_allowance": 30000,
         "transport_allowance": 15000, "lunch_allowance": 5000},
    ]
    for sample in samples:
        ws.append([sample.get(c, 0) for c in columns])

    buff = io.BytesIO()
    wb.save(buff)
    return buff.getvalue()
