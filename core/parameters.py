"""
Configuration & Parameters for the FTL Engine
=============================================

Regulatory parameters and static lookup tables:
- FTLFramework: operations-manual limits (WOCL, rest, standby, days off)
- HELI_FDP_LIMITS / AERO_FDP_LIMITS: daily FDP tables (Table C / Table A)
- CUMULATIVE_LIMITS: rolling flight/duty hour limits per aircraft category
- EngineConfig: master configuration container

The tables are read-only module constants shared by every caller.

References:
    Operations Manual Part A, sections 2.0 - 5.0
    EASA ORO.FTL.205 (FDP), ORO.FTL.235 (rest), GM1 ORO.FTL.235 (disruptive duties)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple

from models.data_models import AircraftCategory


@dataclass
class FTLFramework:
    """Operations-manual FTL definitions"""

    # WOCL, minutes from midnight (01:00 - 06:59 local)
    wocl_start_minutes: int = 60
    wocl_end_minutes: int = 419

    # Disruptive duties (helicopter rules 3.3)
    max_consecutive_disruptive_duties: int = 3
    max_disruptive_duties_in_7_days: int = 4
    disruptive_run_break_hours: float = 34.0

    # Rest - section 4.1
    minimum_rest_hours: float = 12.0

    # Standby - section 3.4
    max_standby_hours: float = 12.0
    standby_duty_weighting: float = 0.5

    # Split duty - sections 3.1 / 3.2
    split_duty_pre_post_flight_allowance_hours: float = 0.5
    heli_split_duty_min_rest_hours: float = 2.0
    heli_split_duty_flat_extension_max_rest_hours: float = 3.0
    heli_split_duty_flat_extension_hours: float = 1.0
    aero_split_duty_min_rest_hours: float = 3.0
    fixed_wing_max_flight_time_hours: float = 99.0

    # Days off - section 4
    max_consecutive_duty_days: int = 7
    min_days_off_in_28_days: int = 7
    heli_min_days_off_in_14_days: int = 3

    def __post_init__(self):
        """Validate FTL parameters"""
        assert 0 <= self.wocl_start_minutes < 24 * 60, \
            f"WOCL start invalid: {self.wocl_start_minutes}"
        assert 0 <= self.wocl_end_minutes < 24 * 60, \
            f"WOCL end invalid: {self.wocl_end_minutes}"
        assert self.wocl_start_minutes < self.wocl_end_minutes, \
            "WOCL window inverted (start must be before end)"
        assert self.minimum_rest_hours > 0, "Minimum rest must be positive"
        assert self.max_standby_hours > 0, "Max standby must be positive"
        assert 0 <= self.standby_duty_weighting <= 1.0, \
            "Standby weighting must be between 0 and 1"
        assert self.disruptive_run_break_hours > 0, "Disruptive run break must be positive"
        assert self.max_consecutive_duty_days > 0, "Max consecutive duty days must be positive"


# ============================================================================
# FDP TABLES
# ============================================================================

class HeliFdpRow(NamedTuple):
    start: int          # minutes from midnight, inclusive
    end: int            # minutes from midnight, inclusive (hh:59)
    fdp: float
    flight: float


def _band(first_hour: int, last_hour: int, fdp: float, flight: float) -> HeliFdpRow:
    return HeliFdpRow(first_hour * 60, last_hour * 60 + 59, fdp, flight)


# Table C. The 22:00 - 05:59 band wraps midnight and is split into two rows.
HELI_FDP_LIMITS = MappingProxyType({
    'two_pilot': (
        _band(6, 6, 10, 7),
        _band(7, 7, 11, 8),
        _band(8, 13, 12, 8),
        _band(14, 21, 11, 7),
        _band(22, 23, 9, 6),
        _band(0, 5, 9, 6),
    ),
    'single_pilot': (
        _band(6, 6, 9, 6),
        _band(7, 7, 10, 7),
        _band(8, 13, 10, 7),
        _band(14, 21, 9, 6),
        _band(22, 23, 8, 5),
        _band(0, 5, 8, 5),
    ),
})


def _expand(bands) -> MappingProxyType:
    """{(first_hour, last_hour): row} -> {hour: row}, plus the 'default' row"""
    table = {}
    for key, row in bands.items():
        if key == 'default':
            table['default'] = row
            continue
        first, last = key
        for hour in range(first, last + 1):
            table[hour] = row
    return MappingProxyType(table)


# Table A, two flight crew, acclimatised. Columns: 1 .. 8+ sectors.
# Hours 22:00 - 05:59 fall through to the default row.
AERO_FDP_LIMITS = MappingProxyType({
    'two_pilot': _expand({
        (6, 6): (13.0, 12.75, 12.5, 11.75, 10.5, 9.5, 9.0, 9.0),
        (7, 12): (14.0, 13.25, 12.5, 11.5, 11.0, 10.5, 10.0, 9.5),
        (13, 17): (13.0, 12.75, 11.5, 10.75, 10.0, 9.5, 9.0, 9.0),
        (18, 21): (12.0, 11.75, 10.5, 9.75, 9.0, 9.0, 9.0, 9.0),
        'default': (11.0, 10.75, 9.5, 9.0, 9.0, 9.0, 9.0, 9.0),
    }),
    # Single pilot. Columns: up to 4, 5, 6, 7, 8+ sectors.
    'single_pilot': _expand({
        (6, 6): (10.0, 9.5, 8.5, 8.0, 8.0),
        (7, 12): (11.0, 10.0, 9.5, 8.75, 8.0),
        (13, 17): (10.0, 9.0, 8.75, 8.0, 8.0),
        (18, 21): (9.0, 8.75, 8.5, 8.0, 8.0),
        'default': (8.0, 8.0, 8.0, 8.0, 8.0),
    }),
})


# ============================================================================
# CUMULATIVE LIMITS
# ============================================================================

class CumulativeLimit(NamedTuple):
    kind: str           # 'flight' or 'duty'
    days: int
    hours: float


# Section 5.1 / 5.2
CUMULATIVE_LIMITS = MappingProxyType({
    AircraftCategory.FIXED_WING: (
        CumulativeLimit('flight', 28, 100.0),
        CumulativeLimit('flight', 365, 900.0),
        CumulativeLimit('duty', 7, 55.0),
        CumulativeLimit('duty', 14, 95.0),
        CumulativeLimit('duty', 28, 190.0),
    ),
    AircraftCategory.HELICOPTER: (
        CumulativeLimit('flight', 3, 18.0),
        CumulativeLimit('flight', 7, 30.0),
        CumulativeLimit('flight', 28, 90.0),
        CumulativeLimit('flight', 365, 800.0),
        CumulativeLimit('duty', 7, 60.0),
        CumulativeLimit('duty', 28, 190.0),
    ),
})

# Upper bound on any day-by-day date walk
MAX_DATE_RANGE_DAYS = 366


@dataclass
class EngineConfig:
    """Master configuration container"""
    framework: FTLFramework

    @classmethod
    def default_config(cls):
        """Operations-manual defaults"""
        return cls(framework=FTLFramework())


DEFAULT_FRAMEWORK = FTLFramework()
