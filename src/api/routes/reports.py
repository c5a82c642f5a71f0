"""Timecard report endpoints."""

import asyncio
import logging
import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from api.dependencies import get_report_service, verify_api_key
from api.request_log import RequestLog, log_request
from api.models.responses import (
    DetailedReportResponse,
    ErrorCodes,
    PeriodSummaryResponse,
    RangeTotalResponse,
    RangeTotalsEnvelope,
    SummaryEnvelope,
)
from core.config import ALL_EMPLOYEES
from core.validation import (
    InvalidReportRequest,
    parse_employee_id,
    parse_period,
    validate_date_range,
)
from services.reports import ReportQueryError, ReportService
from services.spreadsheets import summary_workbook_to_bytes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/reports", dependencies=[Depends(verify_api_key)])

Service = Annotated[ReportService, Depends(get_report_service)]
StartDate = Annotated[str | None, Query(alias="startDate")]
EndDate = Annotated[str | None, Query(alias="endDate")]
PeriodParam = Annotated[str | None, Query(alias="period")]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def not_found(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": message, "code": ErrorCodes.NOT_FOUND, "details": []},
    )


@contextmanager
def tracked_request(
    request: Request, service: ReportService, **fields
) -> Iterator[RequestLog]:
    """
    Translate report errors into HTTP errors and record the request.

    Validation errors become 400s. Database errors become a generic 500;
    their text only goes to the operational log and the request log table.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        **fields,
    )

    try:
        yield request_log
        request_log.status_code = 200

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
        else:
            request_log.error_message = str(e.detail)
        raise

    except InvalidReportRequest as e:
        request_log.status_code = 400
        request_log.error_code = ErrorCodes.INVALID_REQUEST
        request_log.error_message = str(e)
        request_log.details.append(("validation_error", str(e)))

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": str(e),
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [],
            },
        )

    except ReportQueryError as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        request_log.details.append(("query_error", str(e.__cause__ or e)))

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error while fetching timecards. Please contact support.",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            log_request(service.database.path, request_log)
        except sqlite3.Error as e:
            # Don't fail the request if logging fails
            logger.warning("Could not write request log %s: %s", request_log.request_id, e)


# =============================================================================
# RANGE TOTALS
# =============================================================================


@router.get("", response_model=list[RangeTotalResponse])
async def total_hours_by_query(
    request: Request,
    service: Service,
    employee_id: Annotated[str | None, Query(alias="employeeId")] = None,
    start_date: StartDate = None,
    end_date: EndDate = None,
):
    """Total facility and driving hours for one employee, or ALL, over a date range."""
    return await _range_totals(request, service, employee_id, start_date, end_date)


@router.get("/all/range/{start_date}/{end_date}", response_model=RangeTotalsEnvelope)
async def total_hours_for_all_employees(
    request: Request, service: Service, start_date: str, end_date: str
):
    """Total facility and driving hours per employee; 404 when nobody logged time."""
    with tracked_request(
        request, service, employee_id=ALL_EMPLOYEES, start_date=start_date, end_date=end_date
    ) as request_log:
        totals = await service.range_totals_for_all(start_date, end_date)
        request_log.rows_returned = len(totals)
        if not totals:
            raise not_found("No timecards found")
        return RangeTotalsEnvelope(data=[RangeTotalResponse.from_total(t) for t in totals])


# =============================================================================
# PERIOD SUMMARIES
# =============================================================================


@router.get("/all/employee-summary", response_model=SummaryEnvelope)
async def employee_summary_for_all(
    request: Request,
    service: Service,
    start_date: StartDate = None,
    end_date: EndDate = None,
    period: PeriodParam = None,
):
    """Weekly, monthly or yearly summary for every employee."""
    with tracked_request(
        request,
        service,
        employee_id=ALL_EMPLOYEES,
        period=period,
        start_date=start_date,
        end_date=end_date,
    ) as request_log:
        summaries = await service.report_for_all_employees(period, start_date, end_date)
        request_log.rows_returned = len(summaries)
        if not summaries:
            return SummaryEnvelope(
                data=[],
                message="No data found for the specified date range",
                status="success",
            )
        return SummaryEnvelope(
            data=[PeriodSummaryResponse.from_summary(s) for s in summaries],
            message="Employee summary retrieved successfully",
            status="success",
        )


@router.get("/detailed/{employee_id}", response_model=DetailedReportResponse)
async def detailed_timecards(
    request: Request,
    service: Service,
    employee_id: str,
    start_date: StartDate = None,
    end_date: EndDate = None,
):
    """Per-day timecards for one employee with totals across the range."""
    with tracked_request(
        request, service, employee_id=employee_id, start_date=start_date, end_date=end_date
    ) as request_log:
        report = await service.detailed_entries(employee_id, start_date, end_date)
        request_log.rows_returned = len(report.entries)
        return DetailedReportResponse.from_report(report)


@router.get("/employee-summary/{employee_id}/export")
async def export_employee_summary(
    request: Request,
    service: Service,
    employee_id: str,
    start_date: StartDate = None,
    end_date: EndDate = None,
    period: PeriodParam = None,
):
    """Download a period summary, with range totals, as an Excel workbook."""
    with tracked_request(
        request,
        service,
        employee_id=employee_id,
        period=period,
        start_date=start_date,
        end_date=end_date,
    ) as request_log:
        summaries = await service.report_for_employee(employee_id, period, start_date, end_date)
        request_log.rows_returned = len(summaries)
        employee = parse_employee_id(employee_id)
        if not summaries and employee != ALL_EMPLOYEES:
            raise not_found("No data found for the specified employee and date range")

        resolved_period = parse_period(period)
        start, end = validate_date_range(start_date, end_date)
        totals = await service.range_totals(employee_id, start_date, end_date)
        excel_bytes = await asyncio.to_thread(summary_workbook_to_bytes, summaries, totals)

        filename = f"employee_summary_{employee}_{resolved_period.value}_{start}_{end}.xlsx"
        return Response(
            content=excel_bytes,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )


@router.get("/employee-summary/{employee_id}", response_model=list[PeriodSummaryResponse])
async def employee_summary(
    request: Request,
    service: Service,
    employee_id: str,
    start_date: StartDate = None,
    end_date: EndDate = None,
    period: PeriodParam = None,
):
    """
    Weekly, monthly or yearly summary for one employee.

    ``ALL`` returns every employee's summary. A single employee with no
    timecards in range is a 404.
    """
    with tracked_request(
        request,
        service,
        employee_id=employee_id,
        period=period,
        start_date=start_date,
        end_date=end_date,
    ) as request_log:
        summaries = await service.report_for_employee(employee_id, period, start_date, end_date)
        request_log.rows_returned = len(summaries)
        if not summaries and parse_employee_id(employee_id) != ALL_EMPLOYEES:
            raise not_found("No data found for the specified employee and date range")
        return [PeriodSummaryResponse.from_summary(s) for s in summaries]


@router.get("/{employee_id}", response_model=list[RangeTotalResponse])
async def total_hours_for_employee(
    request: Request,
    service: Service,
    employee_id: str,
    start_date: StartDate = None,
    end_date: EndDate = None,
):
    """Total facility and driving hours for one employee over a date range."""
    return await _range_totals(request, service, employee_id, start_date, end_date)


async def _range_totals(
    request: Request,
    service: ReportService,
    employee_id: str | None,
    start_date: str | None,
    end_date: str | None,
) -> list[RangeTotalResponse]:
    with tracked_request(
        request, service, employee_id=employee_id, start_date=start_date, end_date=end_date
    ) as request_log:
        totals = await service.range_totals(employee_id, start_date, end_date)
        request_log.rows_returned = len(totals)
        if not totals and parse_employee_id(employee_id) != ALL_EMPLOYEES:
            raise not_found("No timecards found for the specified employee and date range")
        return [RangeTotalResponse.from_total(t) for t in totals]
