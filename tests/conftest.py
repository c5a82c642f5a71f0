"""
Pytest configuration and shared fixtures.
"""

import json
import sqlite3
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import Database  # noqa: E402


def insert_employee(db_path: Path, employee_id: int, first_name: str, last_name: str):
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "INSERT INTO employees (id, first_name, last_name) VALUES (?, ?, ?)",
            (employee_id, first_name, last_name),
        )
        conn.commit()
    finally:
        conn.close()


def insert_timecard(db_path: Path, employee_id: int, work_date: str, facility=None, driving=None):
    """Insert a timecard; dict durations are stored as JSON, strings as-is."""

    def encode(value):
        return json.dumps(value) if isinstance(value, dict) else value

    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            """
            INSERT INTO timecards (employee_id, work_date, facility_total_hours, driving_total_hours)
            VALUES (?, ?, ?, ?)
            """,
            (employee_id, work_date, encode(facility), encode(driving)),
        )
        conn.commit()
    finally:
        conn.close()


@pytest.fixture
def database(tmp_path):
    """Empty, opened timecard database."""
    db = Database(tmp_path / "timecards.db")
    db.open()
    yield db
    db.close()


@pytest.fixture
def seeded_database(database):
    """
    Timecards for January/February 2024.

    Employee 7: week of 2024-01-01 has facility (1, 90) and (0, 45) plus
    30 driving minutes; week of 2024-01-08 has one 8 hour day and one
    all-zero day; 2024-02-05 has a malformed facility value.
    Employee 8: two days in the week of 2024-01-01 (Wednesday and Sunday).
    Employee 9 has no timecards.
    """
    path = database.path
    insert_employee(path, 7, "Ada", "Lovelace")
    insert_employee(path, 8, "Grace", "Hopper")
    insert_employee(path, 9, "Alan", "Turing")

    insert_timecard(path, 7, "2024-01-02", {"hours": 1, "minutes": 90})
    insert_timecard(path, 7, "2024-01-04", {"hours": 0, "minutes": 45}, {"hours": 0, "minutes": 30})
    insert_timecard(path, 7, "2024-01-09", {"hours": 8, "minutes": 0})
    insert_timecard(path, 7, "2024-01-10", {"hours": 0, "minutes": 0}, {"hours": 0, "minutes": 0})
    insert_timecard(path, 7, "2024-02-05", "not json", {"hours": "2", "minutes": "x"})

    insert_timecard(path, 8, "2024-01-03", {"hours": 7, "minutes": 30}, {"hours": 1, "minutes": 45})
    insert_timecard(path, 8, "2024-01-07", {"hours": 2, "minutes": 0})

    return database
