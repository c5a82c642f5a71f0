"""
Period bucketing and summary aggregation.

Two entry points share the same rules:

- ``aggregate`` folds per-day entries for a single employee into buckets.
- ``summarize_grouped`` shapes rows the database already summed per
  (employee, bucket).

In both, raw hours and raw minutes are summed independently across a
bucket and normalized once. Absentee days are a fixed quota per period
minus days worked, never clamped.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta

from core.config import ABSENTEE_QUOTAS
from models.timecards import (
    GroupedDurationRow,
    Period,
    PeriodBucketTotals,
    PeriodSummary,
)
from services.durations import extract, extract_pair, normalize, sum_raw, total_seconds

# (work_date, facility raw duration, driving raw duration)
DayEntry = tuple[date, object, object]


def bucket_start(work_date: date, period: Period) -> date:
    """
    Truncate a work date to the start of its period.

    Weeks start on Monday, which is what DATE_TRUNC('week') and the grouped
    SQLite query both use.
    """
    if period is Period.DAILY:
        return work_date
    if period is Period.WEEKLY:
        return work_date - timedelta(days=work_date.weekday())
    if period is Period.MONTHLY:
        return work_date.replace(day=1)
    if period is Period.YEARLY:
        return work_date.replace(month=1, day=1)
    raise ValueError(f"Unsupported period: {period!r}")


def absentee_days(days_worked: int, period: Period, quota: int | None = None) -> int:
    """Quota minus days worked. Goes negative when more days were worked."""
    if quota is None:
        quota = ABSENTEE_QUOTAS[period.value]
    return quota - days_worked


def aggregate(
    entries: Iterable[DayEntry],
    period: Period,
    quota: int | None = None,
) -> list[PeriodBucketTotals]:
    """
    Fold one employee's per-day entries into period buckets.

    A work date counts as worked when its facility plus driving time is
    above zero. Multiple rows for the same date count once.
    """
    facility: dict[date, list[tuple[int, int]]] = defaultdict(list)
    driving: dict[date, list[tuple[int, int]]] = defaultdict(list)
    seconds_by_day: dict[date, dict[date, int]] = defaultdict(lambda: defaultdict(int))

    for work_date, facility_raw, driving_raw in entries:
        bucket = bucket_start(work_date, period)
        facility_pair = extract(facility_raw)
        driving_pair = extract(driving_raw)
        facility[bucket].append(facility_pair)
        driving[bucket].append(driving_pair)
        seconds_by_day[bucket][work_date] += total_seconds(facility_pair) + total_seconds(
            driving_pair
        )

    results = []
    for bucket in sorted(seconds_by_day):
        days_worked = sum(1 for seconds in seconds_by_day[bucket].values() if seconds > 0)
        results.append(
            PeriodBucketTotals(
                period_bucket=bucket,
                days_worked=days_worked,
                absentee_days=absentee_days(days_worked, period, quota),
                facility_total=normalize(*sum_raw(facility[bucket])),
                driving_total=normalize(*sum_raw(driving[bucket])),
            )
        )
    return results


def parse_bucket(value: str | date | datetime) -> datetime:
    """Turn a bucket key from the database into a midnight timestamp."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return datetime.combine(date.fromisoformat(str(value)[:10]), time.min)


def summarize_grouped(
    rows: Sequence[GroupedDurationRow],
    period: Period,
    quota: int | None = None,
) -> list[PeriodSummary]:
    """Shape rows summed per (employee, bucket) into period summaries."""
    summaries = []
    for row in rows:
        days_worked = int(row["days_worked"] or 0)
        facility_pair = extract_pair(row["raw_facility_hours"], row["raw_facility_minutes"])
        driving_pair = extract_pair(row["raw_driving_hours"], row["raw_driving_minutes"])

        summaries.append(
            PeriodSummary(
                employee_id=row["employee_id"],
                first_name=row["first_name"],
                last_name=row["last_name"],
                period_bucket=parse_bucket(row["period_bucket"]),
                days_worked=days_worked,
                absentee_days=absentee_days(days_worked, period, quota),
                facility_total=normalize(*facility_pair),
                driving_total=normalize(*driving_pair),
            )
        )

    summaries.sort(key=lambda s: (s.period_bucket, s.employee_id))
    return summaries
