# okr_app/core/timeline.py
"""Status rules that compare measured progress against elapsed time."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Sequence, Tuple, Union

from .progress import average_progress, to_safe_number

DateLike = Union[date, datetime]


def _as_datetime(value: DateLike, end_of_day: bool = False) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime(value.year, value.month, value.day)
        if end_of_day:
            dt = dt.replace(hour=23, minute=59, second=59, microsecond=999999)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def calculate_ideal_progress(start: DateLike, end: DateLike, now: Optional[DateLike] = None) -> float:
    """Share of the period that has elapsed, as a percentage in [0, 100]."""
    start_dt = _as_datetime(start)
    end_dt = _as_datetime(end, end_of_day=True)
    now_dt = _as_datetime(now) if now is not None else datetime.now(timezone.utc)

    if now_dt <= start_dt:
        return 0.0
    if now_dt >= end_dt:
        return 100.0

    total = (end_dt - start_dt).total_seconds()
    elapsed = (now_dt - start_dt).total_seconds()
    return elapsed / total * 100


@dataclass(frozen=True)
class GapThreshold:
    min_gap: float
    label: str


# gap = progress - ideal progress, evaluated top-down
TIMELINE_THRESHOLDS: Tuple[GapThreshold, ...] = (
    GapThreshold(10, "ahead"),
    GapThreshold(-10, "on_track"),
    GapThreshold(-25, "at_risk"),
)

OBJECTIVE_THRESHOLDS: Tuple[GapThreshold, ...] = (
    GapThreshold(0, "on_track"),
    GapThreshold(-20, "at_risk"),
)


def _bucket_gap(gap: float, thresholds: Sequence[GapThreshold], default: str) -> str:
    for threshold in thresholds:
        if gap >= threshold.min_gap:
            return threshold.label
    return default


def timeline_status(
    progress: float,
    ideal_progress: float,
    thresholds: Sequence[GapThreshold] = TIMELINE_THRESHOLDS,
) -> str:
    progress = to_safe_number(progress)
    if progress >= 100:
        return "completed"
    return _bucket_gap(progress - to_safe_number(ideal_progress), thresholds, "behind")


MANUAL_OBJECTIVE_STATUSES = ("paused", "canceled")


def objective_status(
    manual_status: Optional[str],
    key_result_percentages: Sequence[float],
    time_progress: float,
) -> str:
    """Derived status of an objective from its key results and cycle timeline.

    Manual ``paused``/``canceled`` always win. Once the cycle is over the
    objective is either ``partially_achieved`` (>= 50%) or ``not_achieved``.
    """
    if manual_status in MANUAL_OBJECTIVE_STATUSES:
        return manual_status
    if not key_result_percentages:
        return "not_started"

    overall = average_progress(key_result_percentages)
    if overall >= 100:
        return "completed"

    time_progress = to_safe_number(time_progress)
    if time_progress >= 100:
        return "partially_achieved" if overall >= 50 else "not_achieved"

    return _bucket_gap(overall - time_progress, OBJECTIVE_THRESHOLDS, "behind")


def cycle_status(start_date: date, end_date: date, today: Optional[date] = None) -> str:
    """planning before the start date, completed after the end date, otherwise active."""
    today = today or date.today()
    if today < start_date:
        return "planning"
    if today > end_date:
        return "completed"
    return "active"


def cycle_change_reason(old_status: str, new_status: str) -> str:
    if old_status == "planning" and new_status == "active":
        return "Cycle started"
    if old_status == "active" and new_status == "completed":
        return "Cycle ended"
    if old_status == "active" and new_status == "planning":
        return "Cycle has not started yet"
    return f"Status changed from {old_status} to {new_status}"
