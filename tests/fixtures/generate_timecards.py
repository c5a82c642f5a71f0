#!/usr/bin/env python3
"""
Generate demo employees and timecards for November 2025 and store them in a
SQLite database with the report schema.
"""

import json
import random
import sqlite3
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.database import init_schema

# Initialize Faker
fake = Faker()

# Database file
DB_FILE = Path(__file__).parent / "timecards.db"

EMPLOYEE_COUNT = 6
POSITIONS = ["Caregiver", "Driver", "Caregiver / Driver", "Nurse Aide"]

MORNING_ACTIVITIES = ["Breakfast service", "Exercise group", "Medication round", "Art class"]
AFTERNOON_ACTIVITIES = ["Lunch service", "Music hour", "Garden walk", "Board games"]


def create_database(db_file: Path = DB_FILE):
    conn = sqlite3.connect(db_file)
    cursor = conn.cursor()

    # Drop tables for clean slate
    cursor.execute("DROP TABLE IF EXISTS timecards")
    cursor.execute("DROP TABLE IF EXISTS employees")
    conn.commit()

    init_schema(conn)
    return conn


def get_workdays_november_2025():
    thanksgiving = date(2025, 11, 27)  # Thursday
    workdays = []

    for day in range(1, 31):
        d = date(2025, 11, day)
        # Skip weekends (5=Saturday, 6=Sunday)
        if d.weekday() >= 5 or d == thanksgiving:
            continue
        workdays.append(d)

    return workdays


def clock(d: date, hour: float) -> datetime:
    hours = int(hour)
    minutes = int(round((hour - hours) * 60))
    return datetime(d.year, d.month, d.day) + timedelta(hours=hours, minutes=minutes)


def duration_json(start: datetime, end: datetime, lunch_minutes: int = 0) -> str:
    minutes = int((end - start).total_seconds() // 60) - lunch_minutes
    return json.dumps({"hours": minutes // 60, "minutes": minutes % 60})


def generate_timecard(employee_id: int, d: date, drives: bool) -> dict:
    facility_start = clock(d, random.choice([7.5, 8, 8.5]))
    facility_end = facility_start + timedelta(minutes=random.choice([240, 300, 360, 405]))
    lunch_start = facility_start + timedelta(hours=3)
    lunch_end = lunch_start + timedelta(minutes=30)

    timecard = {
        "employee_id": employee_id,
        "work_date": d.isoformat(),
        "morning_activity": random.choice(MORNING_ACTIVITIES),
        "afternoon_activity": random.choice(AFTERNOON_ACTIVITIES),
        "facility_start_time": facility_start.strftime("%H:%M"),
        "facility_lunch_start": lunch_start.strftime("%H:%M"),
        "facility_lunch_end": lunch_end.strftime("%H:%M"),
        "facility_end_time": facility_end.strftime("%H:%M"),
        "facility_total_hours": duration_json(facility_start, facility_end, 30),
        "driving_start_time": None,
        "driving_lunch_start": None,
        "driving_lunch_end": None,
        "driving_end_time": None,
        "driving_total_hours": None,
        "status": random.choice(["active", "submitted"]),
    }

    if drives:
        driving_start = facility_end + timedelta(minutes=15)
        driving_end = driving_start + timedelta(minutes=random.choice([45, 75, 90, 125]))
        timecard.update(
            {
                "driving_start_time": driving_start.strftime("%H:%M"),
                "driving_end_time": driving_end.strftime("%H:%M"),
                "driving_total_hours": duration_json(driving_start, driving_end),
            }
        )

    return timecard


def generate(conn):
    cursor = conn.cursor()
    employees = []
    for _ in range(EMPLOYEE_COUNT):
        cursor.execute(
            """
            INSERT INTO employees (first_name, last_name, email, position, phone)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                fake.first_name(),
                fake.last_name(),
                fake.email(),
                random.choice(POSITIONS),
                fake.phone_number(),
            ),
        )
        employees.append(cursor.lastrowid)

    timecards = []
    for employee_id in employees:
        drives = random.random() < 0.5
        for d in get_workdays_november_2025():
            # Roughly one absence every two weeks
            if random.random() < 0.1:
                continue
            timecards.append(generate_timecard(employee_id, d, drives))

    cursor.executemany(
        """
        INSERT INTO timecards (
            employee_id, work_date, morning_activity, afternoon_activity,
            facility_start_time, facility_lunch_start, facility_lunch_end, facility_end_time,
            facility_total_hours, driving_start_time, driving_lunch_start, driving_lunch_end,
            driving_end_time, driving_total_hours, status
        ) VALUES (
            :employee_id, :work_date, :morning_activity, :afternoon_activity,
            :facility_start_time, :facility_lunch_start, :facility_lunch_end, :facility_end_time,
            :facility_total_hours, :driving_start_time, :driving_lunch_start, :driving_lunch_end,
            :driving_end_time, :driving_total_hours, :status
        )
        """,
        timecards,
    )
    conn.commit()
    return len(employees), len(timecards)


def main():
    conn = create_database()
    try:
        employee_count, timecard_count = generate(conn)
    finally:
        conn.close()
    print(f"Generated {employee_count} employees and {timecard_count} timecards in {DB_FILE}")


if __name__ == "__main__":
    main()
