import asyncio
import sqlite3
from datetime import date, datetime

import pytest

from core.validation import InvalidReportRequest
from models.timecards import NormalizedDuration, Period
from services.aggregation import aggregate
from services.reports import ReportQueryError, ReportService

from conftest import insert_timecard


def run(coro):
    return asyncio.run(coro)


class RecordingDatabase:
    """Stands in for the database and fails the test if any query runs."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append(name)
            return []

        return record


class TestPeriodSummaries:
    def test_weekly_for_one_employee(self, seeded_database):
        service = ReportService(seeded_database)

        summaries = run(service.report_for_employee(7, "weekly", "2024-01-01", "2024-01-31"))

        assert [s.period_bucket for s in summaries] == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 8),
        ]
        first, second = summaries
        assert first.first_name == "Ada"
        assert first.facility_total == NormalizedDuration(hours=3, minutes=15)
        assert first.driving_total == NormalizedDuration(hours=0, minutes=30)
        assert first.days_worked == 2
        assert first.absentee_days == 3
        assert second.facility_total == NormalizedDuration(hours=8, minutes=0)
        assert second.days_worked == 1
        assert second.absentee_days == 4

    def test_sunday_shares_the_monday_bucket(self, seeded_database):
        service = ReportService(seeded_database)

        [summary] = run(service.report_for_employee("8", "weekly", "2024-01-01", "2024-01-31"))

        assert summary.period_bucket == datetime(2024, 1, 1)
        assert summary.days_worked == 2
        assert summary.facility_total == NormalizedDuration(hours=9, minutes=30)
        assert summary.driving_total == NormalizedDuration(hours=1, minutes=45)

    def test_monthly_for_all_employees(self, seeded_database):
        service = ReportService(seeded_database)

        summaries = run(service.report_for_all_employees("monthly", "2024-01-01", "2024-01-31"))

        assert [s.employee_id for s in summaries] == [7, 8]
        ada, grace = summaries
        assert ada.facility_total == NormalizedDuration(hours=11, minutes=15)
        assert ada.days_worked == 3
        assert ada.absentee_days == 17
        assert grace.days_worked == 2
        assert grace.absentee_days == 18

    def test_all_sentinel_matches_all_employees_report(self, seeded_database):
        service = ReportService(seeded_database)

        via_sentinel = run(service.report_for_employee("ALL", "monthly", "2024-01-01", "2024-01-31"))
        direct = run(service.report_for_all_employees("monthly", "2024-01-01", "2024-01-31"))

        assert via_sentinel == direct

    def test_yearly_includes_malformed_day_as_zero(self, seeded_database):
        service = ReportService(seeded_database)

        summaries = run(service.report_for_all_employees("yearly", "2024-01-01", "2024-12-31"))

        ada = summaries[0]
        assert ada.period_bucket == datetime(2024, 1, 1)
        assert ada.days_worked == 4
        assert ada.absentee_days == 236
        assert ada.facility_total == NormalizedDuration(hours=11, minutes=15)
        assert ada.driving_total == NormalizedDuration(hours=2, minutes=30)

    def test_daily_zero_day_is_absent(self, seeded_database):
        service = ReportService(seeded_database)

        summaries = run(service.report_for_employee(7, "daily", "2024-01-10", "2024-01-10"))

        assert len(summaries) == 1
        assert summaries[0].days_worked == 0
        assert summaries[0].absentee_days == 1

    def test_repeated_runs_are_identical(self, seeded_database):
        service = ReportService(seeded_database)

        first = run(service.report_for_all_employees("weekly", "2024-01-01", "2024-02-29"))
        second = run(service.report_for_all_employees("weekly", "2024-01-01", "2024-02-29"))

        assert first == second

    def test_no_rows_is_empty(self, seeded_database):
        service = ReportService(seeded_database)

        assert run(service.report_for_employee(9, "weekly", "2024-01-01", "2024-01-31")) == []

    def test_grouped_query_agrees_with_per_day_aggregation(self, seeded_database):
        # Array and boolean sub-fields read as zero on both paths
        insert_timecard(
            seeded_database.path, 7, "2024-02-12", "[1, 30]", {"hours": True, "minutes": 15}
        )
        service = ReportService(seeded_database)
        detailed = run(service.detailed_entries(7, "2024-01-01", "2024-02-29"))
        rows = seeded_database.query_detailed_entries(7, date(2024, 1, 1), date(2024, 2, 29))
        assert detailed.entries[-1].facility_total == NormalizedDuration(hours=0, minutes=0)
        assert detailed.entries[-1].driving_total == NormalizedDuration(hours=0, minutes=15)

        for period in Period:
            summaries = run(service.report_for_employee(7, period, "2024-01-01", "2024-02-29"))
            buckets = aggregate(
                [
                    (entry.work_date, row["facility_total_hours"], row["driving_total_hours"])
                    for entry, row in zip(detailed.entries, rows)
                ],
                period,
            )
            assert [
                (s.period_bucket.date(), s.days_worked, s.absentee_days, s.facility_total, s.driving_total)
                for s in summaries
            ] == [
                (b.period_bucket, b.days_worked, b.absentee_days, b.facility_total, b.driving_total)
                for b in buckets
            ]


class TestRangeTotals:
    def test_single_employee(self, seeded_database):
        service = ReportService(seeded_database)

        [total] = run(service.range_totals(7, "2024-01-01", "2024-01-31"))

        assert total.employee_id == 7
        assert total.facility_total == NormalizedDuration(hours=11, minutes=15)
        assert total.driving_total == NormalizedDuration(hours=0, minutes=30)

    def test_all_employees(self, seeded_database):
        service = ReportService(seeded_database)

        totals = run(service.range_totals("ALL", "2024-01-01", "2024-01-31"))

        assert [t.employee_id for t in totals] == [7, 8]
        assert totals == run(service.range_totals_for_all("2024-01-01", "2024-01-31"))

    def test_employee_without_timecards(self, seeded_database):
        service = ReportService(seeded_database)

        assert run(service.range_totals(9, "2024-01-01", "2024-01-31")) == []


class TestDetailedEntries:
    def test_entries_and_totals(self, seeded_database):
        service = ReportService(seeded_database)

        report = run(service.detailed_entries(7, "2024-01-01", "2024-01-31"))

        assert [e.work_date for e in report.entries] == [
            date(2024, 1, 2),
            date(2024, 1, 4),
            date(2024, 1, 9),
            date(2024, 1, 10),
        ]
        assert report.entries[0].facility_total == NormalizedDuration(hours=2, minutes=30)
        assert report.facility_total == NormalizedDuration(hours=11, minutes=15)
        assert report.driving_total == NormalizedDuration(hours=0, minutes=30)

    def test_malformed_values_are_zero(self, seeded_database):
        service = ReportService(seeded_database)

        report = run(service.detailed_entries(7, "2024-02-01", "2024-02-29"))

        [entry] = report.entries
        assert entry.facility_total == NormalizedDuration(hours=0, minutes=0)
        assert entry.driving_total == NormalizedDuration(hours=2, minutes=0)

    def test_requires_single_employee(self, seeded_database):
        service = ReportService(seeded_database)

        with pytest.raises(InvalidReportRequest):
            run(service.detailed_entries("ALL", "2024-01-01", "2024-01-31"))


class TestValidationRunsFirst:
    def test_invalid_period_before_any_query(self):
        database = RecordingDatabase()
        service = ReportService(database)

        with pytest.raises(InvalidReportRequest, match="Invalid period specified"):
            run(service.report_for_employee(7, "biannual", "2024-01-01", "2024-01-31"))
        with pytest.raises(InvalidReportRequest, match="Invalid period specified"):
            run(service.report_for_all_employees("biannual", "2024-01-01", "2024-01-31"))

        assert database.calls == []

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.report_for_employee(7, "weekly", "2024-02-01", "2024-01-01"),
            lambda s: s.report_for_employee("ALL", "weekly", "2024-02-01", "2024-01-01"),
            lambda s: s.report_for_all_employees("weekly", "2024-02-01", "2024-01-01"),
            lambda s: s.range_totals(7, "2024-02-01", "2024-01-01"),
            lambda s: s.range_totals_for_all("2024-02-01", "2024-01-01"),
            lambda s: s.detailed_entries(7, "2024-02-01", "2024-01-01"),
        ],
    )
    def test_start_after_end_rejected_everywhere(self, call):
        database = RecordingDatabase()

        with pytest.raises(InvalidReportRequest):
            run(call(ReportService(database)))

        assert database.calls == []


def test_database_errors_are_wrapped(database):
    conn = sqlite3.connect(database.path)
    conn.execute("DROP TABLE timecards")
    conn.commit()
    conn.close()
    service = ReportService(database)

    with pytest.raises(ReportQueryError) as exc_info:
        run(service.report_for_employee(7, "weekly", "2024-01-01", "2024-01-31"))

    assert "employee 7" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, sqlite3.Error)
