#!/usr/bin/env python3
"""
Generate the monthly alfa report from an Excel timesheet.

Reads dated rows from the first worksheet of the input workbook, keeps those
in the requested month and fills the rapportino_alfa.xlsx template.

Usage:
    uv run python src/scripts/create_alfa_report.py <input.xlsx> --month 2 --year 2024 --employee "Anna Rossi"

Example:
    uv run python src/scripts/create_alfa_report.py timesheet.xlsx --month 2 --year 2024 --employee "Anna Rossi" --output output/reports
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import OUTPUT_DIR
from services.alfa_report import TEMPLATE_PATH, ReportError, generate_alfa_report


def main():
    parser = argparse.ArgumentParser(
        description="Generate the monthly alfa report from an Excel timesheet"
    )
    parser.add_argument("input_file", type=Path, help="Path to the timesheet workbook")
    parser.add_argument("--month", type=int, required=True, help="Report month (1-12)")
    parser.add_argument("--year", type=int, required=True, help="Report year")
    parser.add_argument("--employee", required=True, help="Employee name printed on the report")
    parser.add_argument(
        "--template",
        type=Path,
        default=TEMPLATE_PATH,
        help=f"Report template (default: {TEMPLATE_PATH})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT_DIR / "reports",
        help="Output directory",
    )

    args = parser.parse_args()

    try:
        if not args.input_file.exists():
            raise FileNotFoundError(f"Input file not found: {args.input_file}")

        print(f"Reading input file: {args.input_file}")
        report = generate_alfa_report(
            args.input_file.read_bytes(),
            args.month,
            args.year,
            args.employee,
            args.template,
        )

        args.output.mkdir(parents=True, exist_ok=True)
        output_path = args.output / report.file_name
        output_path.write_bytes(report.content)

        print(f"Wrote {report.row_count} rows for {args.month:02d}/{args.year}")
        print(f"\nReport generated: {output_path}")
    except (ReportError, FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
