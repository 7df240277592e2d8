"""
Rest Period Validator
=====================

Minimum rest between consecutive duties is 12 hours or the length of the
preceding duty period, whichever is greater (Operations Manual 4.1).
"""

from typing import Iterable, Optional

from models.data_models import DutyRecord, RestPeriodDetails
from core.parameters import DEFAULT_FRAMEWORK, FTLFramework
from core.time_utils import (
    calculate_duration_hours, hours_between, parse_time_to_minutes, to_date, utc_instant,
)


def find_previous_record_with_end(records: Iterable[DutyRecord], target_date: str) -> Optional[DutyRecord]:
    """Most recent record before target_date that closes a duty or standby"""
    target = to_date(target_date)
    if target is None:
        return None
    candidates = [
        r for r in records
        if r.has_end and to_date(r.date) is not None and to_date(r.date) < target
    ]
    return max(candidates, key=lambda r: to_date(r.date), default=None)


def calculate_rest_period(
    current: DutyRecord,
    previous_with_end: Optional[DutyRecord],
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> RestPeriodDetails:
    if previous_with_end is None or not current.date or not previous_with_end.date:
        return RestPeriodDetails()

    previous_end = previous_with_end.duty_end or previous_with_end.standby_off
    previous_start = previous_with_end.duty_start or previous_with_end.standby_on
    if not previous_end or not previous_start:
        return RestPeriodDetails()

    if to_date(current.date) is None or to_date(previous_with_end.date) is None:
        return RestPeriodDetails(rest_period=0.0, has_history=True)

    previous_duty = calculate_duration_hours(previous_start, previous_end)
    required_rest = max(framework.minimum_rest_hours, previous_duty)

    overnight = parse_time_to_minutes(previous_end) < parse_time_to_minutes(previous_start)
    previous_off = utc_instant(previous_with_end.date, previous_end, next_day=overnight)
    effective_start = current.standby_on or current.duty_start or '00:00'
    current_on = utc_instant(current.date, effective_start)

    rest_hours = hours_between(previous_off, current_on)
    if rest_hours < 0:
        return RestPeriodDetails(rest_period=0.0, has_history=True)

    violation = None
    if current.starts_shift and rest_hours < required_rest:
        violation = (f"Rest period of {rest_hours:.1f}h is less than the required "
                     f"{required_rest:.1f}h (Max of 12h or previous duty length).")

    return RestPeriodDetails(rest_period=rest_hours, has_history=True, rest_violation=violation)
