"""
Timecard report assembly.

Validates the request, runs one query against the database in a worker
thread, and folds the rows into normalized report records.
"""

import asyncio
import logging
import sqlite3
from datetime import date

from core.config import ALL_EMPLOYEES
from core.database import Database
from core.validation import (
    InvalidReportRequest,
    parse_employee_id,
    parse_period,
    validate_date_range,
)
from models.timecards import (
    DetailedEntry,
    DetailedEntryRow,
    DetailedReport,
    Period,
    PeriodSummary,
    RangeTotal,
    RangeTotalRow,
)
from services.aggregation import summarize_grouped
from services.durations import extract, extract_pair, normalize, sum_raw

logger = logging.getLogger(__name__)


class ReportQueryError(RuntimeError):
    """The database failed while building a report."""


def build_range_total(row: RangeTotalRow) -> RangeTotal:
    return RangeTotal(
        employee_id=row["employee_id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        facility_total=normalize(
            *extract_pair(row["raw_facility_hours"], row["raw_facility_minutes"])
        ),
        driving_total=normalize(
            *extract_pair(row["raw_driving_hours"], row["raw_driving_minutes"])
        ),
    )


def build_detailed_report(employee_id: int, rows: list[DetailedEntryRow]) -> DetailedReport:
    """
    Normalize each day and total the range.

    Totals are summed from the raw per-day pairs and normalized once.
    """
    entries = []
    facility_pairs = []
    driving_pairs = []
    for row in rows:
        facility_pair = extract(row["facility_total_hours"])
        driving_pair = extract(row["driving_total_hours"])
        facility_pairs.append(facility_pair)
        driving_pairs.append(driving_pair)
        entries.append(
            DetailedEntry(
                timecard_id=row["timecard_id"],
                work_date=date.fromisoformat(row["work_date"][:10]),
                facility_start_time=row["facility_start_time"],
                facility_end_time=row["facility_end_time"],
                facility_lunch_start=row["facility_lunch_start"],
                facility_lunch_end=row["facility_lunch_end"],
                driving_start_time=row["driving_start_time"],
                driving_end_time=row["driving_end_time"],
                driving_lunch_start=row["driving_lunch_start"],
                driving_lunch_end=row["driving_lunch_end"],
                facility_total=normalize(*facility_pair),
                driving_total=normalize(*driving_pair),
            )
        )

    return DetailedReport(
        employee_id=employee_id,
        entries=entries,
        facility_total=normalize(*sum_raw(facility_pairs)),
        driving_total=normalize(*sum_raw(driving_pairs)),
    )


class ReportService:
    """Builds timecard reports against an injected database handle."""

    def __init__(self, database: Database):
        self.database = database

    async def _query(self, operation: str, context: str, func, *args):
        """Run a blocking query in a worker thread, wrapping database errors."""
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as e:
            logger.error("Error in %s (%s): %s", operation, context, e)
            raise ReportQueryError(f"Error retrieving {operation} ({context})") from e

    # =========================================================================
    # PERIOD SUMMARIES
    # =========================================================================

    async def report_for_employee(
        self,
        employee_id: int | str,
        period: str | Period,
        start_date: str | date,
        end_date: str | date,
    ) -> list[PeriodSummary]:
        """
        Summarize one employee's timecards per period bucket.

        The ALL sentinel returns the all-employees report instead.
        """
        employee = parse_employee_id(employee_id)
        if employee == ALL_EMPLOYEES:
            return await self.report_for_all_employees(period, start_date, end_date)

        resolved_period = parse_period(period)
        start, end = validate_date_range(start_date, end_date)
        logger.info(
            "Fetching employee summary for %s, period %s, %s to %s",
            employee, resolved_period.value, start, end,
        )

        rows = await self._query(
            "employee summary report",
            f"employee {employee}, {resolved_period.value}, {start} to {end}",
            self.database.query_grouped_durations,
            employee, start, end, resolved_period,
        )
        return summarize_grouped(rows, resolved_period)

    async def report_for_all_employees(
        self,
        period: str | Period,
        start_date: str | date,
        end_date: str | date,
    ) -> list[PeriodSummary]:
        """Summarize every employee's timecards per period bucket."""
        resolved_period = parse_period(period)
        start, end = validate_date_range(start_date, end_date)
        logger.info(
            "Fetching employee summary for ALL employees, period %s, %s to %s",
            resolved_period.value, start, end,
        )

        rows = await self._query(
            "employee summary report",
            f"all employees, {resolved_period.value}, {start} to {end}",
            self.database.query_grouped_durations,
            ALL_EMPLOYEES, start, end, resolved_period,
        )
        return summarize_grouped(rows, resolved_period)

    # =========================================================================
    # RANGE TOTALS
    # =========================================================================

    async def range_totals(
        self,
        employee_id: int | str,
        start_date: str | date,
        end_date: str | date,
    ) -> list[RangeTotal]:
        """Total facility and driving time for one employee (or ALL) over a range."""
        employee = parse_employee_id(employee_id)
        if employee == ALL_EMPLOYEES:
            return await self.range_totals_for_all(start_date, end_date)

        start, end = validate_date_range(start_date, end_date)
        rows = await self._query(
            "total hours worked",
            f"employee {employee}, {start} to {end}",
            self.database.query_range_totals,
            employee, start, end,
        )
        return [build_range_total(row) for row in rows]

    async def range_totals_for_all(
        self, start_date: str | date, end_date: str | date
    ) -> list[RangeTotal]:
        """Total facility and driving time per employee over a range."""
        start, end = validate_date_range(start_date, end_date)
        rows = await self._query(
            "total hours worked",
            f"all employees, {start} to {end}",
            self.database.query_range_totals,
            ALL_EMPLOYEES, start, end,
        )
        return [build_range_total(row) for row in rows]

    # =========================================================================
    # DETAILED ENTRIES
    # =========================================================================

    async def detailed_entries(
        self,
        employee_id: int | str,
        start_date: str | date,
        end_date: str | date,
    ) -> DetailedReport:
        """Per-day timecards for one employee with totals across the range."""
        employee = parse_employee_id(employee_id)
        if employee == ALL_EMPLOYEES:
            raise InvalidReportRequest("Detailed entries require a single employeeId")
        start, end = validate_date_range(start_date, end_date)

        rows = await self._query(
            "timecards",
            f"employee {employee}, {start} to {end}",
            self.database.query_detailed_entries,
            employee, start, end,
        )
        return build_detailed_report(employee, rows)
