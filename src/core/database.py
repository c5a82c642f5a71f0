"""
SQLite database operations for timecard reports.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any

from core.config import ALL_EMPLOYEES
from models.timecards import (
    DetailedEntryRow,
    GroupedDurationRow,
    Period,
    RangeTotalRow,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS employees (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT,
    position TEXT,
    phone TEXT
);

CREATE TABLE IF NOT EXISTS timecards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    employee_id INTEGER NOT NULL,
    work_date TEXT NOT NULL,
    morning_activity TEXT,
    afternoon_activity TEXT,
    facility_start_time TEXT,
    facility_lunch_start TEXT,
    facility_lunch_end TEXT,
    facility_end_time TEXT,
    driving_start_time TEXT,
    driving_lunch_start TEXT,
    driving_lunch_end TEXT,
    driving_end_time TEXT,
    facility_total_hours TEXT,
    driving_total_hours TEXT,
    status TEXT NOT NULL DEFAULT 'active'
        CHECK(status IN ('active', 'submitted', 'locked')),
    UNIQUE (employee_id, work_date),
    FOREIGN KEY (employee_id) REFERENCES employees(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_timecards_employee_date
    ON timecards(employee_id, work_date);

CREATE TABLE IF NOT EXISTS api_requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT UNIQUE NOT NULL,
    timestamp TEXT NOT NULL,
    endpoint TEXT NOT NULL,
    method TEXT NOT NULL,
    client_ip TEXT,
    employee_id TEXT,
    period TEXT,
    start_date TEXT,
    end_date TEXT,
    status_code INTEGER NOT NULL,
    error_code TEXT,
    error_message TEXT,
    processing_time_ms INTEGER NOT NULL,
    rows_returned INTEGER
);

CREATE TABLE IF NOT EXISTS api_request_details (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT NOT NULL,
    detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'query_error', 'warning')),
    message TEXT NOT NULL,
    FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
);

CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp);
CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code);
"""

# =============================================================================
# SQL FRAGMENTS
# =============================================================================


def _duration_part(column: str, part: str) -> str:
    """Integer sub-field of a stored JSON duration; malformed or negative is 0."""
    return (
        f"MAX(COALESCE(CASE WHEN json_valid(t.{column}) THEN "
        f"CASE WHEN json_type(t.{column}, '$.{part}') IN ('integer', 'real', 'text') "
        f"THEN CAST(json_extract(t.{column}, '$.{part}') AS INTEGER) END END, 0), 0)"
    )


FACILITY_HOURS = _duration_part("facility_total_hours", "hours")
FACILITY_MINUTES = _duration_part("facility_total_hours", "minutes")
DRIVING_HOURS = _duration_part("driving_total_hours", "hours")
DRIVING_MINUTES = _duration_part("driving_total_hours", "minutes")

TOTAL_SECONDS = (
    f"({FACILITY_HOURS} * 3600 + {FACILITY_MINUTES} * 60 + "
    f"{DRIVING_HOURS} * 3600 + {DRIVING_MINUTES} * 60)"
)

# Weeks start on Monday (strftime %w: Sunday=0)
BUCKET_EXPRESSIONS = {
    Period.DAILY: "date(t.work_date)",
    Period.WEEKLY: (
        "date(t.work_date, '-' || "
        "((CAST(strftime('%w', t.work_date) AS INTEGER) + 6) % 7) || ' days')"
    ),
    Period.MONTHLY: "strftime('%Y-%m-01', t.work_date)",
    Period.YEARLY: "strftime('%Y-01-01', t.work_date)",
}

RAW_SUMS = f"""
    SUM({FACILITY_HOURS}) AS raw_facility_hours,
    SUM({FACILITY_MINUTES}) AS raw_facility_minutes,
    SUM({DRIVING_HOURS}) AS raw_driving_hours,
    SUM({DRIVING_MINUTES}) AS raw_driving_minutes
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Create report tables if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()


def _employee_filter(employee_id: int | str, params: list[Any]) -> str:
    if employee_id == ALL_EMPLOYEES:
        return ""
    params.append(employee_id)
    return " AND e.id = ?"


class Database:
    """
    Handle on the timecard database.

    Opened once at process start and closed at shutdown. Every query runs on
    its own short-lived connection, so the handle can be shared by concurrent
    requests running in worker threads.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        """Ensure the database file and tables exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        try:
            init_schema(conn)
        finally:
            conn.close()
        self._is_open = True
        logger.info("Database opened at %s", self.path)

    def close(self) -> None:
        self._is_open = False
        logger.info("Database closed at %s", self.path)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection."""
        if not self._is_open:
            raise RuntimeError(f"Database at {self.path} is not open")
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _fetch_all(self, query: str, params: list[Any]) -> list[dict]:
        logger.debug("Running query with params %s", params)
        with self.connect() as conn:
            cursor = conn.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    # =========================================================================
    # REPORT QUERIES
    # =========================================================================

    def query_grouped_durations(
        self,
        employee_id: int | str,
        start_date: date,
        end_date: date,
        period: Period,
    ) -> list[GroupedDurationRow]:
        """
        Sum raw facility/driving hours and minutes per (employee, period bucket).

        Minutes are not carried into hours here; ``days_worked`` counts the
        distinct work dates with any recorded time.
        """
        params: list[Any] = [start_date.isoformat(), end_date.isoformat()]
        employee_clause = _employee_filter(employee_id, params)
        query = f"""
            SELECT
                e.id AS employee_id,
                e.first_name,
                e.last_name,
                {BUCKET_EXPRESSIONS[period]} AS period_bucket,
                COUNT(DISTINCT CASE WHEN {TOTAL_SECONDS} > 0 THEN t.work_date END) AS days_worked,
                {RAW_SUMS}
            FROM employees e
            JOIN timecards t ON e.id = t.employee_id
            WHERE t.work_date BETWEEN ? AND ?{employee_clause}
            GROUP BY e.id, e.first_name, e.last_name, period_bucket
            ORDER BY period_bucket, e.id
        """
        return self._fetch_all(query, params)

    def query_range_totals(
        self, employee_id: int | str, start_date: date, end_date: date
    ) -> list[RangeTotalRow]:
        """Sum raw facility/driving hours and minutes per employee over the range."""
        params: list[Any] = [start_date.isoformat(), end_date.isoformat()]
        employee_clause = _employee_filter(employee_id, params)
        query = f"""
            SELECT
                e.id AS employee_id,
                e.first_name,
                e.last_name,
                {RAW_SUMS}
            FROM employees e
            JOIN timecards t ON e.id = t.employee_id
            WHERE t.work_date BETWEEN ? AND ?{employee_clause}
            GROUP BY e.id, e.first_name, e.last_name
            ORDER BY e.id
        """
        return self._fetch_all(query, params)

    def query_detailed_entries(
        self, employee_id: int, start_date: date, end_date: date
    ) -> list[DetailedEntryRow]:
        """Return one employee's timecards, one row per work date."""
        query = """
            SELECT
                t.id AS timecard_id,
                t.work_date,
                t.facility_start_time,
                t.facility_end_time,
                t.facility_lunch_start,
                t.facility_lunch_end,
                t.driving_start_time,
                t.driving_end_time,
                t.driving_lunch_start,
                t.driving_lunch_end,
                t.facility_total_hours,
                t.driving_total_hours
            FROM timecards t
            WHERE t.employee_id = ? AND t.work_date BETWEEN ? AND ?
            ORDER BY t.work_date, t.id
        """
        return self._fetch_all(
            query, [employee_id, start_date.isoformat(), end_date.isoformat()]
        )
