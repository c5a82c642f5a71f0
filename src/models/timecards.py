"""
Data models for timecard durations and report rows.

Duration values arrive in one of two shapes and are decoded into the
Structured | RawPair union at the relation boundary. Query rows stay as
TypedDicts; computed report records are frozen dataclasses.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TypedDict


class Period(str, Enum):
    """Report granularity."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Structured:
    """Stored duration object, e.g. {"hours": 2, "minutes": 30}."""

    hours: int = 0
    minutes: int = 0


@dataclass(frozen=True)
class RawPair:
    """Hour and minute counts summed separately over several rows."""

    hours: int = 0
    minutes: int = 0


RawDuration = Structured | RawPair


@dataclass(frozen=True)
class NormalizedDuration:
    """Canonical duration with 0 <= minutes < 60."""

    hours: int
    minutes: int

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def as_dict(self) -> dict[str, int]:
        return {"hours": self.hours, "minutes": self.minutes}


@dataclass(frozen=True)
class PeriodBucketTotals:
    """Aggregated durations for one period bucket."""

    period_bucket: date
    days_worked: int
    absentee_days: int
    facility_total: NormalizedDuration
    driving_total: NormalizedDuration


@dataclass(frozen=True)
class PeriodSummary:
    """One summary row per (employee, period bucket)."""

    employee_id: int
    first_name: str
    last_name: str
    period_bucket: datetime
    days_worked: int
    absentee_days: int
    facility_total: NormalizedDuration
    driving_total: NormalizedDuration


@dataclass(frozen=True)
class RangeTotal:
    """Flat per-employee totals across a whole date range."""

    employee_id: int
    first_name: str
    last_name: str
    facility_total: NormalizedDuration
    driving_total: NormalizedDuration


@dataclass(frozen=True)
class DetailedEntry:
    """A single work date with its clock times and durations."""

    timecard_id: int
    work_date: date
    facility_start_time: str | None
    facility_end_time: str | None
    facility_lunch_start: str | None
    facility_lunch_end: str | None
    driving_start_time: str | None
    driving_end_time: str | None
    driving_lunch_start: str | None
    driving_lunch_end: str | None
    facility_total: NormalizedDuration
    driving_total: NormalizedDuration


@dataclass(frozen=True)
class DetailedReport:
    """Per-day entries for one employee plus totals across them."""

    employee_id: int
    entries: list[DetailedEntry]
    facility_total: NormalizedDuration
    driving_total: NormalizedDuration


class GroupedDurationRow(TypedDict):
    """Row returned by the grouped (per employee, per bucket) query."""
    employee_id: int
    first_name: str
    last_name: str
    period_bucket: str
    days_worked: int
    raw_facility_hours: int | None
    raw_facility_minutes: int | None
    raw_driving_hours: int | None
    raw_driving_minutes: int | None


class RangeTotalRow(TypedDict):
    """Row returned by the per-employee range totals query."""
    employee_id: int
    first_name: str
    last_name: str
    raw_facility_hours: int | None
    raw_facility_minutes: int | None
    raw_driving_hours: int | None
    raw_driving_minutes: int | None


class DetailedEntryRow(TypedDict):
    """Row returned by the ungrouped per-day query."""
    timecard_id: int
    work_date: str
    facility_start_time: str | None
    facility_end_time: str | None
    facility_lunch_start: str | None
    facility_lunch_end: str | None
    driving_start_time: str | None
    driving_end_time: str | None
    driving_lunch_start: str | None
    driving_lunch_end: str | None
    facility_total_hours: str | None
    driving_total_hours: str | None
