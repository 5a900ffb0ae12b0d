"""Payslip engine command line interface.

Usage:
    payslip-engine calculate --basic-salary 100000 --housing-allowance 20000
    payslip-engine batch employees.xlsx --output results.json
    payslip-engine template payroll_template.xlsx
    payslip-engine export employees.csv --format pdf --period-label "Jan 1-31, 2026" --output jan.pdf
    payslip-engine serve
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

from payslip_engine.calculators.engine import BatchProcessor, PayrollCalculator
from payslip_engine.calculators.types import CANONICAL_FIELDS, CalculationError, CustomField
from payslip_engine.config import Settings, get_settings
from payslip_engine.services.exporter import ExportFormat, export_report
from payslip_engine.services.importer import ImportFormatError, build_template, import_batch_items
from payslip_engine.services.payroll_service import PayrollRunService


def parse_custom(s: str) -> tuple[str, str]:
    """Parse a NAME=VALUE custom value."""
    name, sep, value = s.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {s!r}")
    return name.strip(), value.strip()


class PayslipCli:
    """Payslip engine command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.calculator = PayrollCalculator.from_settings(self.settings)
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="payslip-engine",
            description="Monthly payslip calculation tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # calculate command
        calculate = subparsers.add_parser(
            "calculate",
            help="Calculate one employee's payslip",
        )
        for name in CANONICAL_FIELDS:
            calculate.add_argument(
                f"--{name.replace('_', '-')}",
                dest=name,
                type=str,
                help=f"Monthly {name.replace('_', ' ')}",
            )
        calculate.add_argument(
            "--custom",
            type=parse_custom,
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="Extra amount added to gross (repeatable)",
        )

        # batch command
        batch = subparsers.add_parser(
            "batch",
            help="Calculate payslips for every employee in a spreadsheet",
        )
        batch.add_argument("file", type=Path, help="Input .xlsx or .csv file")
        batch.add_argument(
            "--output",
            type=Path,
            help="Write the JSON result here instead of stdout",
        )

        # template command
        template = subparsers.add_parser(
            "template",
            help="Write the spreadsheet import template",
        )
        template.add_argument("output", type=Path, help="Output .xlsx path")

        # export command
        export = subparsers.add_parser(
            "export",
            help="Calculate a spreadsheet and export the payroll report",
        )
        export.add_argument("file", type=Path, help="Input .xlsx or .csv file")
        export.add_argument(
            "--format",
            choices=[f.value for f in ExportFormat],
            default=ExportFormat.XLSX.value,
            help="Report format (default: xlsx)",
        )
        export.add_argument(
            "--period-label",
            type=str,
            required=True,
            help='Period shown on the report, e.g. "Jan 1-31, 2026"',
        )
        export.add_argument(
            "--output",
            type=Path,
            required=True,
            help="Output file path",
        )

        # serve command
        subparsers.add_parser(
            "serve",
            help="Run the HTTP API",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "calculate": self._cmd_calculate,
            "batch": self._cmd_batch,
            "template": self._cmd_template,
            "export": self._cmd_export,
            "serve": self._cmd_serve,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return handler(parsed)
        except (CalculationError, ImportFormatError, OSError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate a single payslip and print it as JSON."""
        data: dict[str, Any] = {
            name: getattr(args, name)
            for name in CANONICAL_FIELDS
            if getattr(args, name) is not None
        }
        fields = []
        for position, (name, value) in enumerate(args.custom):
            field = CustomField(id=f"cli_{position}", name=name)
            fields.append(field)
            data[field.id] = value
        result = self.calculator.calculate(data, fields)
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    def _cmd_batch(self, args: argparse.Namespace) -> int:
        """Import a spreadsheet and print the batch result."""
        batch = BatchProcessor(self.calculator).process_batch(
            import_batch_items(args.file)
        )
        output = json.dumps(batch.to_dict(), indent=2)
        if args.output:
            args.output.write_text(output + "\n", encoding="utf-8")
            print(
                f"Wrote {batch.success_count} payslips "
                f"({batch.failure_count} failed) to {args.output}"
            )
        else:
            print(output)
        return 0 if batch.failure_count == 0 else 2

    def _cmd_template(self, args: argparse.Namespace) -> int:
        """Write the import template."""
        args.output.write_bytes(build_template())
        print(f"Template written to {args.output}")
        return 0

    def _cmd_export(self, args: argparse.Namespace) -> int:
        """Calculate a spreadsheet and write the payroll report."""
        batch = BatchProcessor(self.calculator).process_batch(
            import_batch_items(args.file)
        )
        report = PayrollRunService.report_for_batch(args.period_label, batch)
        args.output.write_bytes(export_report(report, ExportFormat(args.format)))

        print(f"Exported {len(report.line_items)} employees to {args.output}")
        print(f"  Total net pay: {report.total:,.2f}")
        for error in batch.errors:
            print(f"  Skipped {error.employee_name}: {error.message}", file=sys.stderr)
        return 0 if batch.failure_count == 0 else 2

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the API with uvicorn."""
        from payslip_engine.__main__ import main as serve

        serve()
        return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    cli = PayslipCli(settings)
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
