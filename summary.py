import logging
import math
from datetime import date, datetime, time, timedelta
from fractions import Fraction

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from models import ActivityRecord, Employee, FteTerm, PositionTerm
from schemas import EmployeeSummaryRow

logger = logging.getLogger(__name__)

DEFAULT_START_DATE = date(2025, 1, 1)
# an open-ended FTE term sorts as if it ended on this day
OPEN_END = date(9999, 12, 31)


class DataFetchError(Exception):
    """Raised when the summary could not be read from the database."""


# -------------------------
# Date and duration helpers
# -------------------------

def week_start(day: date) -> date:
    """Sunday on or before ``day`` (weeks run Sunday to Saturday)."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def previous_week_window(today: date):
    """Return (sunday, saturday) of the last full week before the current one."""
    prev_sunday = week_start(today) - timedelta(days=7)
    return prev_sunday, prev_sunday + timedelta(days=6)


def duration_minutes(value) -> int:
    """Whole minutes in an activity duration. NULL counts as zero, seconds are dropped."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return 0
    if isinstance(value, timedelta):
        return int(value.total_seconds() // 60)
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if isinstance(value, str):
        parts = value.split(':')
        return int(parts[0]) * 60 + (int(parts[1]) if len(parts) > 1 else 0)
    raise TypeError(f"Unsupported duration value: {value!r}")


def format_hhmm(minutes: int) -> str:
    """125 -> '2:05'"""
    return f"{minutes // 60}:{minutes % 60:02d}"


def ceil_hours(minutes: int, divisor: int = 1):
    """ceil(minutes / 60 / divisor), or None when there is nothing to divide by."""
    if not divisor:
        return None
    return math.ceil(Fraction(minutes, 60 * divisor))


def effective_fte(terms, today: date) -> float:
    """
    Pick the FTE percentage in force on ``today``.

    A term covering today wins, then terms that already ended, then anything
    else. Within a group the latest end date (open = far future) wins, then
    the latest start date. No term at all means 0.
    """
    def rank(term):
        if term.start_date <= today and (term.end_date is None or term.end_date > today):
            group = 1
        elif term.end_date is not None and term.end_date < today:
            group = 2
        else:
            group = 3
        end = term.end_date or OPEN_END
        return (group, -end.toordinal(), -term.start_date.toordinal())

    if not terms:
        return 0.0
    return float(min(terms, key=rank).percentage)


def termination_date(position_terms):
    """Latest non-null end date among the position terms, or None."""
    ended = [t.end_date for t in position_terms if t.end_date is not None]
    return max(ended) if ended else None


# -------------------------
# Aggregation
# -------------------------

def _activity_frame(session, start_date, end_date) -> pd.DataFrame:
    rows = session.query(
        ActivityRecord.employee_id,
        ActivityRecord.day,
        ActivityRecord.duration,
    ).filter(
        ActivityRecord.day >= start_date,
        ActivityRecord.day <= end_date,
    ).all()

    df = pd.DataFrame([tuple(r) for r in rows], columns=['employee_id', 'day', 'duration'])
    df['minutes'] = df['duration'].map(duration_minutes).astype('int64')
    return df


def _window_totals(df: pd.DataFrame) -> dict:
    """employee_id -> (total minutes, distinct months, distinct Sunday weeks)"""
    if df.empty:
        return {}

    days = pd.to_datetime(df['day'])
    df = df.assign(
        month=days.dt.to_period('M'),
        week=days - pd.to_timedelta((days.dt.dayofweek + 1) % 7, unit='D'),
    )
    grouped = df.groupby('employee_id').agg(
        total_minutes=('minutes', 'sum'),
        working_months=('month', 'nunique'),
        working_weeks=('week', 'nunique'),
    )
    return {
        int(emp_id): (int(r.total_minutes), int(r.working_months), int(r.working_weeks))
        for emp_id, r in grouped.iterrows()
    }


def _minutes_by_employee(df: pd.DataFrame) -> dict:
    if df.empty:
        return {}
    return {int(k): int(v) for k, v in df.groupby('employee_id')['minutes'].sum().items()}


def _group_by_employee(items):
    out = {}
    for item in items:
        out.setdefault(item.employee_id, []).append(item)
    return out


def build_rows(employees, fte_terms, position_terms, window_totals, prev_week_minutes, today):
    """
    Combine the per-employee pieces into summary rows, active employees only,
    ordered by hours per working month (highest first, NULL last, then by id).
    """
    fte_by_emp = _group_by_employee(fte_terms)
    positions_by_emp = _group_by_employee(position_terms)

    rows = []
    for emp in employees:
        terminated = termination_date(positions_by_emp.get(emp.id, []))
        if terminated is not None:
            continue

        total, months, weeks = window_totals.get(emp.id, (0, 0, 0))
        rows.append(EmployeeSummaryRow(
            employee_id=emp.id,
            employee_name=emp.display_name,
            fte_percentage=effective_fte(fte_by_emp.get(emp.id, []), today),
            termination_date=terminated,
            total_hhmm=format_hhmm(total),
            working_months=months,
            hours_per_working_month=ceil_hours(total, months),
            working_weeks=weeks,
            hours_per_working_week=ceil_hours(total, weeks),
            prev_week_hours=ceil_hours(prev_week_minutes.get(emp.id, 0)),
        ))

    rows.sort(key=lambda r: (
        r.hours_per_working_month is None,
        -(r.hours_per_working_month or 0),
        r.employee_id,
    ))
    return rows


def fetch_summary(session, today=None, start_date=None):
    """
    Work hours summary for every active employee.

    ``session`` is any SQLAlchemy session bound to the ERP database. The
    report window is [start_date, today] inclusive; the previous-week hours
    use the last full Sunday-Saturday week before ``today`` regardless of
    the window.
    """
    today = today or date.today()
    start_date = start_date or DEFAULT_START_DATE
    prev_sunday, prev_saturday = previous_week_window(today)

    try:
        employees = session.query(Employee).order_by(Employee.id.asc()).all()
        fte_terms = session.query(FteTerm).all()
        position_terms = session.query(PositionTerm).all()
        window_df = _activity_frame(session, start_date, today)
        prev_df = _activity_frame(session, prev_sunday, prev_saturday)
        rows = build_rows(
            employees,
            fte_terms,
            position_terms,
            _window_totals(window_df),
            _minutes_by_employee(prev_df),
            today,
        )
    except SQLAlchemyError as e:
        logger.exception("Database query failed: %s", e)
        raise DataFetchError('Failed to fetch employee data') from e
    except Exception as e:
        # bad values coming back from the driver, or rows failing validation
        logger.exception("Building the work hours summary failed: %s", e)
        raise DataFetchError('Failed to fetch employee data') from e

    logger.info("Built work hours summary: %d active employees (%s to %s)", len(rows), start_date, today)
    return rows
