"""
Rolling Flight & Duty Totals
============================

Sums flight and duty hours over trailing N-day windows ending on a target
date. A window of N days ending on D covers [D-(N-1), D] inclusive.

Duty hours count standby at 50% (Operations Manual 3.4).
"""

from datetime import timedelta
from typing import Iterable, List, Optional

from models.data_models import AircraftCategory, DutyRecord, FTLMetrics
from core.parameters import CUMULATIVE_LIMITS, DEFAULT_FRAMEWORK, FTLFramework
from core.time_utils import calculate_duration_hours, to_date


def record_flight_hours(record: DutyRecord) -> float:
    """Per-aircraft breakdown if present, else flight on/off duration"""
    if record.flight_hours_by_aircraft is not None:
        return sum(hours or 0 for hours in record.flight_hours_by_aircraft.values())
    return calculate_duration_hours(record.flight_on, record.flight_off)


def record_duty_hours(record: DutyRecord, framework: FTLFramework = DEFAULT_FRAMEWORK) -> float:
    duty = calculate_duration_hours(record.duty_start, record.duty_end)
    standby = calculate_duration_hours(record.standby_on, record.standby_off)
    return duty + standby * framework.standby_duty_weighting


def sum_hours_for_period(
    records: Iterable[DutyRecord],
    end_date: str,
    days: int,
    kind: str,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> float:
    """Total 'flight' or 'duty' hours in the `days`-day window ending on end_date"""
    end = to_date(end_date)
    if end is None or days <= 0:
        return 0.0
    start = end - timedelta(days=days - 1)

    total = 0.0
    for record in records:
        record_date = to_date(record.date)
        if record_date is None or not start <= record_date <= end:
            continue
        if kind == 'flight':
            total += record_flight_hours(record)
        else:
            total += record_duty_hours(record, framework)
    return total


def calculate_all_rolling_totals(
    records: Iterable[DutyRecord],
    target_date: Optional[str],
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> FTLMetrics:
    if not target_date or to_date(target_date) is None:
        return FTLMetrics()

    dated = [r for r in records if r.date]

    def total(days, kind):
        return sum_hours_for_period(dated, target_date, days, kind, framework)

    return FTLMetrics(
        flight_time_3d=total(3, 'flight'),
        duty_time_3d=total(3, 'duty'),
        flight_time_7d=total(7, 'flight'),
        duty_time_7d=total(7, 'duty'),
        flight_time_28d=total(28, 'flight'),
        duty_time_28d=total(28, 'duty'),
        flight_time_90d=total(90, 'flight'),
        duty_time_90d=total(90, 'duty'),
        flight_time_365d=total(365, 'flight'),
        duty_time_365d=total(365, 'duty'),
        fdp_time_14d=total(14, 'duty'),
    )


def metric_value(metrics: FTLMetrics, kind: str, days: int) -> float:
    """Look up e.g. ('duty', 14) on an FTLMetrics; 14-day duty is the FDP total"""
    if kind == 'duty' and days == 14:
        return metrics.fdp_time_14d
    return getattr(metrics, f"{kind}_time_{days}d", 0.0)


def check_cumulative_limits(metrics: FTLMetrics, category) -> List[str]:
    """Cumulative flight/duty limits exceeded for the pilot's aircraft category"""
    category = AircraftCategory.from_value(category)
    if category is None:
        return []

    violations = []
    for limit in CUMULATIVE_LIMITS[category]:
        if metric_value(metrics, limit.kind, limit.days) > limit.hours:
            violations.append(f"Exceeded {limit.hours:g}h {limit.kind} time in {limit.days} days.")
    return violations
