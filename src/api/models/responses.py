"""Pydantic response models for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel

from models.timecards import (
    DetailedEntry,
    DetailedReport,
    NormalizedDuration,
    PeriodSummary,
    RangeTotal,
)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DurationResponse(BaseModel):
    hours: int
    minutes: int

    @classmethod
    def from_duration(cls, duration: NormalizedDuration) -> "DurationResponse":
        return cls(hours=duration.hours, minutes=duration.minutes)


class RangeTotalResponse(BaseModel):
    """Facility and driving totals for one employee over a date range."""

    employee_id: int
    first_name: str
    last_name: str
    facility_total_hours: DurationResponse
    driving_total_hours: DurationResponse

    @classmethod
    def from_total(cls, total: RangeTotal) -> "RangeTotalResponse":
        return cls(
            employee_id=total.employee_id,
            first_name=total.first_name,
            last_name=total.last_name,
            facility_total_hours=DurationResponse.from_duration(total.facility_total),
            driving_total_hours=DurationResponse.from_duration(total.driving_total),
        )


class RangeTotalsEnvelope(BaseModel):
    data: list[RangeTotalResponse]


class PeriodSummaryResponse(BaseModel):
    """One employee's totals for one period bucket."""

    employee_id: int
    first_name: str
    last_name: str
    summary_period: datetime
    days_worked: int
    absentee_days: int
    facility_total_hours: DurationResponse
    driving_total_hours: DurationResponse

    @classmethod
    def from_summary(cls, summary: PeriodSummary) -> "PeriodSummaryResponse":
        return cls(
            employee_id=summary.employee_id,
            first_name=summary.first_name,
            last_name=summary.last_name,
            summary_period=summary.period_bucket,
            days_worked=summary.days_worked,
            absentee_days=summary.absentee_days,
            facility_total_hours=DurationResponse.from_duration(summary.facility_total),
            driving_total_hours=DurationResponse.from_duration(summary.driving_total),
        )


class SummaryEnvelope(BaseModel):
    """All-employees summary response."""

    data: list[PeriodSummaryResponse]
    message: str
    status: str  # "success" or "error"


class DetailedEntryResponse(BaseModel):
    timecard_id: int
    work_date: date
    facility_start_time: str | None = None
    facility_end_time: str | None = None
    facility_lunch_start: str | None = None
    facility_lunch_end: str | None = None
    driving_start_time: str | None = None
    driving_end_time: str | None = None
    driving_lunch_start: str | None = None
    driving_lunch_end: str | None = None
    facility_total_hours: DurationResponse
    driving_total_hours: DurationResponse

    @classmethod
    def from_entry(cls, entry: DetailedEntry) -> "DetailedEntryResponse":
        return cls(
            timecard_id=entry.timecard_id,
            work_date=entry.work_date,
            facility_start_time=entry.facility_start_time,
            facility_end_time=entry.facility_end_time,
            facility_lunch_start=entry.facility_lunch_start,
            facility_lunch_end=entry.facility_lunch_end,
            driving_start_time=entry.driving_start_time,
            driving_end_time=entry.driving_end_time,
            driving_lunch_start=entry.driving_lunch_start,
            driving_lunch_end=entry.driving_lunch_end,
            facility_total_hours=DurationResponse.from_duration(entry.facility_total),
            driving_total_hours=DurationResponse.from_duration(entry.driving_total),
        )


class DetailedReportResponse(BaseModel):
    """Per-day entries for one employee and their totals."""

    employee_id: int
    entries: list[DetailedEntryResponse]
    facility_total_hours: DurationResponse
    driving_total_hours: DurationResponse

    @classmethod
    def from_report(cls, report: DetailedReport) -> "DetailedReportResponse":
        return cls(
            employee_id=report.employee_id,
            entries=[DetailedEntryResponse.from_entry(e) for e in report.entries],
            facility_total_hours=DurationResponse.from_duration(report.facility_total),
            driving_total_hours=DurationResponse.from_duration(report.driving_total),
        )
