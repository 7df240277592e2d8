"""
Days-Off Validator
==================

Operations Manual section 4, evaluated for one target date. Checks run in
order and the first violation found is returned:

1. no more than 7 consecutive duty days
2. 2 consecutive days off after 7 duty days
3. at least 7 days off in any 28 days
4. category-specific 14-day rules (helicopter: 3 days off including a
   2-day block; fixed wing: a 2-day block)
"""

from typing import Callable, Iterable, Optional

from models.data_models import AircraftCategory, DAY_OFF_REMARK, DaysOffValidationDetails, DutyRecord
from core.parameters import DEFAULT_FRAMEWORK, FTLFramework
from core.time_utils import shift_date, to_date


def is_an_off_day(record: Optional[DutyRecord]) -> bool:
    if record is None:
        return True
    if record.remarks == DAY_OFF_REMARK:
        return True
    return not record.duty_start and not record.standby_on


def _count_back(is_off: Callable[[str], bool], target_date: str, first: int, last: int, want_off: bool) -> int:
    """Consecutive days matching want_off walking back from target-first to target-last"""
    count = 0
    for offset in range(first, last + 1):
        if is_off(shift_date(target_date, -offset)) != want_off:
            break
        count += 1
    return count


def validate_days_off_rules(
    records: Iterable[DutyRecord],
    target_date: Optional[str],
    aircraft_category,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> DaysOffValidationDetails:
    if not target_date or to_date(target_date) is None:
        return DaysOffValidationDetails()

    target_date = to_date(target_date).isoformat()
    category = AircraftCategory.from_value(aircraft_category)
    by_date = {r.date: r for r in records if r.date}

    def is_off(date_str: str) -> bool:
        return is_an_off_day(by_date.get(date_str))

    max_duty_days = framework.max_consecutive_duty_days

    if not is_off(target_date):
        consecutive = _count_back(is_off, target_date, 0, max_duty_days, want_off=False)
        if consecutive > max_duty_days:
            return DaysOffValidationDetails(
                violation=f"Exceeds {max_duty_days} consecutive duty days (Day {consecutive})."
            )
    else:
        duty_before = _count_back(is_off, target_date, 1, max_duty_days, want_off=False)
        if duty_before == max_duty_days and not is_off(shift_date(target_date, 1)):
            return DaysOffValidationDetails(
                violation=f"Requires 2 consecutive days off after {max_duty_days} duty days."
            )

    days_off_28 = sum(1 for offset in range(28) if is_off(shift_date(target_date, -offset)))
    if days_off_28 < framework.min_days_off_in_28_days:
        return DaysOffValidationDetails(
            violation=(f"Fewer than {framework.min_days_off_in_28_days} days off "
                       f"in last 28 days (has {days_off_28}).")
        )

    has_two_day_block = any(
        is_off(shift_date(target_date, -offset)) and is_off(shift_date(target_date, -offset - 1))
        for offset in range(14)
    )
    no_block = "No 2-day consecutive off block in last 14 days."

    if category == AircraftCategory.HELICOPTER:
        days_off_14 = sum(1 for offset in range(14) if is_off(shift_date(target_date, -offset)))
        if days_off_14 < framework.heli_min_days_off_in_14_days:
            return DaysOffValidationDetails(
                violation=(f"Fewer than {framework.heli_min_days_off_in_14_days} days off "
                           f"in last 14 days (has {days_off_14}).")
            )
        if not has_two_day_block:
            return DaysOffValidationDetails(violation=no_block)
    elif category == AircraftCategory.FIXED_WING:
        if not has_two_day_block:
            return DaysOffValidationDetails(violation=no_block)

    return DaysOffValidationDetails()
