"""
Excel export of period summaries and range totals.
"""

from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import SUMMARY_HEADERS, TOTALS_HEADERS
from models.timecards import PeriodSummary, RangeTotal


def format_date_display(d) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def write_headers(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)
        ws.column_dimensions[get_column_letter(col_idx)].width = max(len(header) + 2, 12)


def write_summary_sheet(ws, summaries: list[PeriodSummary]):
    """
    Write one row per (employee, period bucket).

    Columns: Employee ID, First Name, Last Name, Period Start, Days Worked,
    Absentee Days, then facility and driving hours/minutes.
    """
    write_headers(ws, SUMMARY_HEADERS)

    for row_idx, summary in enumerate(summaries, start=2):
        row_data = [
            summary.employee_id,
            summary.first_name,
            summary.last_name,
            format_date_display(summary.period_bucket),
            summary.days_worked,
            summary.absentee_days,
            summary.facility_total.hours,
            summary.facility_total.minutes,
            summary.driving_total.hours,
            summary.driving_total.minutes,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_totals_sheet(ws, totals: list[RangeTotal]):
    """Write one row per employee with facility and driving totals."""
    write_headers(ws, TOTALS_HEADERS)

    for row_idx, total in enumerate(totals, start=2):
        row_data = [
            total.employee_id,
            total.first_name,
            total.last_name,
            total.facility_total.hours,
            total.facility_total.minutes,
            total.driving_total.hours,
            total.driving_total.minutes,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def create_summary_workbook(
    summaries: list[PeriodSummary], totals: list[RangeTotal] | None = None
) -> Workbook:
    """
    Build a workbook with a "Summary" sheet and, when totals are given,
    a "Totals" sheet.
    """
    wb = Workbook()
    ws_summary = wb.active
    ws_summary.title = "Summary"
    write_summary_sheet(ws_summary, summaries)

    if totals is not None:
        ws_totals = wb.create_sheet(title="Totals")
        write_totals_sheet(ws_totals, totals)

    return wb


def summary_workbook_to_bytes(
    summaries: list[PeriodSummary], totals: list[RangeTotal] | None = None
) -> bytes:
    buffer = BytesIO()
    create_summary_workbook(summaries, totals).save(buffer)
    return buffer.getvalue()


def save_summary_workbook(
    summaries: list[PeriodSummary], output_path: Path, totals: list[RangeTotal] | None = None
):
    output_path.parent.mkdir(parents=True, exist_ok=True)
    create_summary_workbook(summaries, totals).save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
