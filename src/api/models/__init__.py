"""API Pydantic models."""

from .responses import (
    DetailedReportResponse,
    DurationResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    PeriodSummaryResponse,
    RangeTotalResponse,
    RangeTotalsEnvelope,
    SummaryEnvelope,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "DurationResponse",
    "RangeTotalResponse",
    "RangeTotalsEnvelope",
    "PeriodSummaryResponse",
    "SummaryEnvelope",
    "DetailedReportResponse",
]
