"""Standby duration check (Operations Manual 3.4: a single standby may not exceed 12 hours)."""

from models.data_models import DutyRecord, StandbyDetails
from core.parameters import DEFAULT_FRAMEWORK, FTLFramework
from core.time_utils import calculate_duration_hours


def calculate_standby_details(record: DutyRecord, framework: FTLFramework = DEFAULT_FRAMEWORK) -> StandbyDetails:
    standby_duration = calculate_duration_hours(record.standby_on, record.standby_off)
    if standby_duration == 0:
        return StandbyDetails()

    violation = None
    if standby_duration > framework.max_standby_hours:
        violation = (f"Standby period of {standby_duration:.1f}h exceeds the maximum "
                     f"{framework.max_standby_hours:g}h.")

    return StandbyDetails(standby_duration=standby_duration, standby_violation=violation)
