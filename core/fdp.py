"""
FDP Limit Lookup
================

Maximum Flight Duty Period and flight time for a duty, from the
operations-manual tables, plus the split-duty extension.

The FDP reference start is the standby start when called out from standby,
otherwise the FDP start, otherwise the duty start.
"""

import logging

from models.data_models import AircraftCategory, DutyRecord, FdpDetails
from core.parameters import AERO_FDP_LIMITS, DEFAULT_FRAMEWORK, HELI_FDP_LIMITS, FTLFramework
from core.time_utils import calculate_duration_hours, parse_time_to_minutes

logger = logging.getLogger(__name__)


def fdp_reference_start(record: DutyRecord):
    return record.standby_on or record.fdp_start or record.duty_start


def single_pilot_sector_index(sectors: int) -> int:
    """Up to 4 sectors share the first column; 8 or more share the last"""
    if sectors <= 4:
        return 0
    return min(sectors, 8) - 4


def heli_limits(start_minutes: int, two_pilot: bool):
    """(max FDP, max flight time) for a helicopter duty starting start_minutes after midnight"""
    rows = HELI_FDP_LIMITS['two_pilot' if two_pilot else 'single_pilot']
    for row in rows:
        if row.start <= start_minutes <= row.end:
            return row.fdp, row.flight
    return 0.0, 0.0


def aero_limit(start_hour: int, two_pilot: bool, sectors: int) -> float:
    key = 'two_pilot' if two_pilot else 'single_pilot'
    table = AERO_FDP_LIMITS[key]
    row = table.get(start_hour, table['default'])
    if two_pilot:
        index = min(max(sectors, 1), 8) - 1
    else:
        index = single_pilot_sector_index(sectors)
    return row[index]


def split_duty_extension(
    category: AircraftCategory,
    break_duration: float,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> float:
    """
    FDP extension earned by an in-duty break (Operations Manual 3.1 / 3.2).

    The pre/post-flight allowance is not rest and is deducted from the break
    before the tables are applied.
    """
    effective_rest = max(0.0, break_duration - framework.split_duty_pre_post_flight_allowance_hours)

    if category == AircraftCategory.HELICOPTER:
        if framework.heli_split_duty_min_rest_hours <= effective_rest <= framework.heli_split_duty_flat_extension_max_rest_hours:
            return framework.heli_split_duty_flat_extension_hours
        if effective_rest > framework.heli_split_duty_flat_extension_max_rest_hours:
            return effective_rest / 2
        return 0.0

    if effective_rest >= framework.aero_split_duty_min_rest_hours:
        return effective_rest / 2
    return 0.0


def calculate_fdp_details(
    record: DutyRecord,
    aircraft_category,
    framework: FTLFramework = DEFAULT_FRAMEWORK,
) -> FdpDetails:
    category = AircraftCategory.from_value(aircraft_category)
    reference_start = fdp_reference_start(record)

    if not reference_start or len(reference_start) < 4 or category is None:
        if reference_start and category is None:
            logger.debug(f"No FDP limits for unknown aircraft category {aircraft_category!r}")
        return FdpDetails()

    start_minutes = parse_time_to_minutes(reference_start)
    two_pilot = bool(record.is_two_pilot_operation)

    if category == AircraftCategory.HELICOPTER:
        base_fdp, max_flight_time = heli_limits(start_minutes, two_pilot)
    else:
        base_fdp = aero_limit(start_minutes // 60, two_pilot, record.sectors or 1)
        max_flight_time = framework.fixed_wing_max_flight_time_hours

    break_duration = calculate_duration_hours(record.break_start, record.break_end)
    extension = 0.0
    if record.is_split_duty and break_duration > 0:
        extension = split_duty_extension(category, break_duration, framework)

    return FdpDetails(
        max_fdp=base_fdp + extension,
        fdp_extension=extension,
        break_duration=break_duration,
        max_flight_time=max_flight_time,
    )
