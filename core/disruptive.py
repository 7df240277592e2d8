"""
Disruptive Duty Tracker
=======================

A duty is disruptive when it touches the Window of Circadian Low (WOCL).

Limits (Operations Manual 3.3):
- not more than 3 consecutive disruptive duties, a run being broken only by
  at least 34 consecutive hours free of disruptive duty
- not more than 4 disruptive duties in any 7 consecutive days
"""

from typing import Iterable, Optional

from models.data_models import DisruptiveDutyDetails, DutyRecord
from core.parameters import DEFAULT_FRAMEWORK, FTLFramework
from core.time_utils import hours_between, parse_time_to_minutes, shift_date, to_date, utc_instant


def is_duty_disruptive(record: Optional[DutyRecord], framework: FTLFramework = DEFAULT_FRAMEWORK) -> bool:
    if record is None or not record.duty_start or not record.duty_end:
        return False

    duty_on = parse_time_to_minutes(record.duty_start)
    duty_off = parse_time_to_minutes(record.duty_end)
    wocl_start = framework.wocl_start_minutes
    wocl_end = framework.wocl_end_minutes

    # Overnight duty: it reached the WOCL if it ran past the WOCL start
    if duty_off < duty_on:
        return duty_off >= wocl_start

    starts_in_wocl = wocl_start <= duty_on <= wocl_end
    ends_in_wocl = wocl_start <= duty_off <= wocl_end
    spans_wocl = duty_on < wocl_start and duty_off > wocl_end
    return starts_in_wocl or ends_in_wocl or spans_wocl


def rest_between_duties(previous: DutyRecord, current: DutyRecord) -> float:
    """Hours from previous duty off to current duty on"""
    overnight = parse_time_to_minutes(previous.duty_end) < parse_time_to_minutes(previous.duty_start)
    previous_off = utc_instant(previous.date, previous.duty_end, next_day=overnight)
    current_on = utc_instant(current.date, current.duty_start)
    return hours_between(previous_off, current_on)


def count_consecutive_disruptive(
    records: Iterable[DutyRecord],
    target_date: str,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> int:
    """Length of the disruptive run ending on target_date (0 if target is not disruptive)"""
    target = to_date(target_date)
    if target is None:
        return 0
    disruptive = sorted(
        (r for r in records
         if to_date(r.date) is not None and to_date(r.date) <= target and is_duty_disruptive(r, framework)),
        key=lambda r: r.date,
    )
    if not disruptive or disruptive[-1].date != target.isoformat():
        return 0

    count = 1
    current = disruptive[-1]
    for previous in reversed(disruptive[:-1]):
        if rest_between_duties(previous, current) >= framework.disruptive_run_break_hours:
            break
        count += 1
        current = previous
    return count


def validate_disruptive_duties(
    records: Iterable[DutyRecord],
    target_date: Optional[str],
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> Optional[str]:
    """Violation message for the target date's disruptive duty, or None"""
    if not target_date or to_date(target_date) is None:
        return None

    by_date = {r.date: r for r in records if r.date}
    target_date = to_date(target_date).isoformat()
    if not is_duty_disruptive(by_date.get(target_date), framework):
        return None

    consecutive = count_consecutive_disruptive(by_date.values(), target_date, framework)
    if consecutive > framework.max_consecutive_disruptive_duties:
        return (f"Exceeds {framework.max_consecutive_disruptive_duties} consecutive "
                f"disruptive duties (Day {consecutive}).")

    seven_day_count = sum(
        1 for offset in range(7)
        if is_duty_disruptive(by_date.get(shift_date(target_date, -offset)), framework)
    )
    if seven_day_count > framework.max_disruptive_duties_in_7_days:
        return (f"Exceeds {framework.max_disruptive_duties_in_7_days} disruptive duties "
                f"in 7 days (has {seven_day_count}).")

    return None


def calculate_disruptive_details(
    records: Iterable[DutyRecord],
    target_date: str,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> DisruptiveDutyDetails:
    records = list(records)
    target = next((r for r in records if r.date == target_date), None)
    return DisruptiveDutyDetails(
        is_disruptive=is_duty_disruptive(target, framework),
        disruptive_violation=validate_disruptive_duties(records, target_date, framework),
    )
