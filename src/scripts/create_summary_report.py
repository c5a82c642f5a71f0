#!/usr/bin/env python3
"""
Create a timecard summary report as an Excel workbook.

Summarizes facility and driving hours per employee and period, with a
second sheet of totals across the whole range.

Usage:
    uv run python src/scripts/create_summary_report.py --period monthly --month 2025-11
    uv run python src/scripts/create_summary_report.py --period weekly \
        --start 2025-11-01 --end 2025-11-30 --employee 7
"""

import argparse
import asyncio
import calendar
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import ALL_EMPLOYEES, DB_PATH, OUTPUT_DIR
from core.database import Database
from core.validation import parse_period
from services.reports import ReportService
from services.spreadsheets import save_summary_workbook


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_monthly_date_range(month_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for a month.

    Args:
        month_str: Optional month string (YYYY-MM). Uses previous month if None.

    Returns:
        Tuple of (first_of_month, last_of_month)
    """
    if month_str:
        year, month = map(int, month_str.split("-"))
        target_date = date(year, month, 1)
    else:
        today = date.today()
        if today.month == 1:
            target_date = date(today.year - 1, 12, 1)
        else:
            target_date = date(today.year, today.month - 1, 1)

    _, last_day = calendar.monthrange(target_date.year, target_date.month)
    return target_date, target_date.replace(day=last_day)


# =============================================================================
# MAIN
# =============================================================================


async def main(
    period: str,
    employee_id: str = ALL_EMPLOYEES,
    month_str: str | None = None,
    start: str | None = None,
    end: str | None = None,
) -> Path | None:
    """Main entry point."""
    if start and end:
        start_date, end_date = date.fromisoformat(start), date.fromisoformat(end)
    else:
        start_date, end_date = get_monthly_date_range(month_str)
    resolved_period = parse_period(period)
    print(f"Generating {resolved_period.value} summary for {start_date} to {end_date}")

    database = Database(DB_PATH)
    database.open()
    try:
        service = ReportService(database)
        summaries = await service.report_for_employee(
            employee_id, resolved_period, start_date, end_date
        )
        totals = await service.range_totals(employee_id, start_date, end_date)
    finally:
        database.close()

    if not summaries:
        print("No timecards found for the requested range!")
        return None

    print(f"Summary rows: {len(summaries)}, employees: {len(totals)}")

    scope = "all" if employee_id == ALL_EMPLOYEES else f"employee_{employee_id}"
    output_path = (
        OUTPUT_DIR
        / "reports"
        / resolved_period.value
        / f"timecard_summary_{scope}_{start_date:%Y_%m_%d}_{end_date:%Y_%m_%d}.xlsx"
    )
    save_summary_workbook(summaries, output_path, totals)

    print("\nDone!")
    return output_path


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate timecard summary report")
    parser.add_argument(
        "--period",
        default="monthly",
        help="daily, weekly, monthly or yearly. Defaults to monthly.",
    )
    parser.add_argument(
        "--employee",
        default=ALL_EMPLOYEES,
        help="Employee ID, or ALL (default).",
    )
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to previous month. Ignored with --start/--end.",
    )
    parser.add_argument("--start", help="Start date (YYYY-MM-DD).")
    parser.add_argument("--end", help="End date (YYYY-MM-DD).")
    args = parser.parse_args()

    asyncio.run(main(args.period, args.employee, args.month, args.start, args.end))
