"""
data_models.py - Core Data Structures
======================================

Data models for pilot duty records, FTL verdicts and department roster grids.

Two data shapes live here:
- Pilot timeline: DutyRecord / PilotTimeSeries, evaluated by the FTL checks
- Roster grid: date -> staff id -> RosterEntry, evaluated by the roster rule engine
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Union
import logging

logger = logging.getLogger(__name__)


# ============================================================================
# ENUMS
# ============================================================================

class AircraftCategory(Enum):
    """Aircraft category driving FDP tables and days-off rules"""
    HELICOPTER = "Helicopter"
    FIXED_WING = "Fixed Wing"

    @classmethod
    def from_value(cls, value) -> Optional['AircraftCategory']:
        """
        Resolve a category from staff/aircraft configuration.

        Accepts the enum itself or the labels used by the data layer
        ("Helicopter", "Fixed Wing", "Fixed-Wing", "Aeroplane").
        Anything else is an unknown category and resolves to None.
        """
        if isinstance(value, cls):
            return value
        if not value or not isinstance(value, str):
            return None
        key = value.strip().lower().replace('-', ' ').replace('_', ' ')
        if key in ('helicopter', 'rotor wing', 'rotorcraft'):
            return cls.HELICOPTER
        if key in ('fixed wing', 'aeroplane', 'airplane'):
            return cls.FIXED_WING
        return None


class RuleType(Enum):
    """Closed set of department roster validation rules"""
    MAX_CONSECUTIVE_DUTY = "MAX_CONSECUTIVE_DUTY"
    MIN_OFF_DAYS_IN_PERIOD = "MIN_OFF_DAYS_IN_PERIOD"
    MIN_CONSECUTIVE_OFF_DAYS_IN_PERIOD = "MIN_CONSECUTIVE_OFF_DAYS_IN_PERIOD"


DAY_OFF_REMARK = "DAY OFF"


# ============================================================================
# PILOT TIMELINE
# ============================================================================

@dataclass(frozen=True)
class DutyRecord:
    """
    One pilot's duty log entry for one calendar date.

    All clock fields are "HH:mm" strings (or None). A record with neither a
    duty start nor a standby on time is a day off.
    """
    date: str                                   # YYYY-MM-DD, UTC-anchored
    duty_start: Optional[str] = None
    duty_end: Optional[str] = None
    fdp_start: Optional[str] = None
    fdp_end: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    standby_on: Optional[str] = None
    standby_off: Optional[str] = None
    flight_on: Optional[str] = None
    flight_off: Optional[str] = None
    sectors: Optional[int] = None
    is_two_pilot_operation: bool = False
    is_split_duty: bool = False
    aircraft_type: Optional[str] = None
    flight_hours_by_aircraft: Optional[Mapping[str, float]] = None
    remarks: Optional[str] = None
    staff_id: Optional[str] = None
    record_id: Optional[str] = None

    @property
    def starts_shift(self) -> bool:
        return bool(self.duty_start or self.standby_on)

    @property
    def has_end(self) -> bool:
        """True if the record closes a duty or standby period"""
        return bool(self.duty_end or self.standby_off)

    @property
    def is_day_off(self) -> bool:
        return self.remarks == DAY_OFF_REMARK or not self.starts_shift


class PilotTimeSeries:
    """
    Ordered-by-date collection of one pilot's duty records.

    Dates are unique; a later record for an already-seen date replaces the
    earlier one. Missing dates are implicit days off and are never
    materialised as records.
    """

    def __init__(self, pilot_id: Optional[str] = None, records=None):
        self.pilot_id = pilot_id
        self._by_date: Dict[str, DutyRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: DutyRecord) -> None:
        if not record.date:
            logger.debug(f"[{self.pilot_id}] Dropping duty record without a date")
            return
        if record.date in self._by_date:
            logger.warning(f"[{self.pilot_id}] Duplicate duty record for {record.date}, keeping the latest")
        self._by_date[record.date] = record

    def get(self, date: str) -> Optional[DutyRecord]:
        return self._by_date.get(date)

    @property
    def dates(self) -> List[str]:
        return sorted(self._by_date)

    @property
    def records(self) -> List[DutyRecord]:
        return [self._by_date[d] for d in self.dates]

    def __iter__(self) -> Iterator[DutyRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._by_date)

    def __contains__(self, date: str) -> bool:
        return date in self._by_date


# ============================================================================
# FTL VERDICTS
# ============================================================================

@dataclass
class FTLMetrics:
    """Rolling flight/duty totals (hours) for windows ending on a target date"""
    flight_time_3d: float = 0.0
    duty_time_3d: float = 0.0
    flight_time_7d: float = 0.0
    duty_time_7d: float = 0.0
    flight_time_28d: float = 0.0
    duty_time_28d: float = 0.0
    flight_time_90d: float = 0.0
    duty_time_90d: float = 0.0
    flight_time_365d: float = 0.0
    duty_time_365d: float = 0.0
    fdp_time_14d: float = 0.0


@dataclass
class FdpDetails:
    max_fdp: float = 0.0
    fdp_extension: float = 0.0
    break_duration: float = 0.0
    max_flight_time: float = 0.0

    @property
    def base_fdp(self) -> float:
        """Table FDP before any split-duty extension"""
        return self.max_fdp - self.fdp_extension if self.max_fdp > 0 else 0.0


@dataclass
class DisruptiveDutyDetails:
    is_disruptive: bool = False
    disruptive_violation: Optional[str] = None


@dataclass
class RestPeriodDetails:
    rest_period: float = 0.0
    has_history: bool = False
    rest_violation: Optional[str] = None


@dataclass
class DaysOffValidationDetails:
    violation: Optional[str] = None


@dataclass
class StandbyDetails:
    standby_duration: float = 0.0
    standby_violation: Optional[str] = None


@dataclass
class DailyCompliance:
    """Every FTL verdict for one pilot on one date"""
    record: DutyRecord
    is_day_off: bool
    metrics: FTLMetrics
    flight_duration: float
    actual_fdp: float
    fdp: FdpDetails
    disruptive: DisruptiveDutyDetails
    rest: RestPeriodDetails
    days_off: DaysOffValidationDetails
    standby: StandbyDetails
    violation: Optional[str] = None
    cumulative_violations: List[str] = field(default_factory=list)

    @property
    def date(self) -> str:
        return self.record.date

    @property
    def exceeds_max_fdp(self) -> bool:
        return self.actual_fdp > 0 and self.fdp.max_fdp > 0 and self.actual_fdp > self.fdp.max_fdp

    @property
    def exceeds_max_flight_time(self) -> bool:
        return (self.flight_duration > 0 and self.fdp.max_flight_time > 0
                and self.flight_duration > self.fdp.max_flight_time)

    @property
    def used_split_duty_extension(self) -> bool:
        """Actual FDP ran past the table limit but stayed within the extended limit"""
        return self.fdp.fdp_extension > 0 and self.fdp.base_fdp < self.actual_fdp <= self.fdp.max_fdp

    def all_violations(self) -> List[str]:
        """Every finding for the day, not just the first one"""
        violations = []
        if self.exceeds_max_fdp:
            violations.append(
                f"Exceeded Max FDP of {self.fdp.max_fdp:.2f}h (Actual: {self.actual_fdp:.2f}h)."
            )
        if self.exceeds_max_flight_time:
            violations.append(f"Exceeded Max Flight Time of {self.fdp.max_flight_time:g}h.")
        for message in (
            self.rest.rest_violation,
            self.disruptive.disruptive_violation,
            self.days_off.violation,
            self.standby.standby_violation,
        ):
            if message:
                violations.append(message)
        violations.extend(self.cumulative_violations)
        return violations


# ============================================================================
# ROSTER GRID
# ============================================================================

@dataclass(frozen=True)
class RosterEntry:
    """One staff member's cell on one roster date"""
    duty_code_id: str = ''
    violation: Optional[str] = None
    note: Optional[str] = None
    is_underlined: bool = False
    is_leave_overlay: bool = False
    custom_color: Optional[str] = None


# date (YYYY-MM-DD) -> staff id -> entry
RosterGrid = Dict[str, Dict[str, RosterEntry]]


@dataclass(frozen=True)
class DutyCode:
    """Department duty/shift code catalog entry"""
    id: str
    code: str = ''
    description: str = ''
    is_off_duty: bool = False


@dataclass(frozen=True)
class StaffMember:
    id: str
    name: str = ''
    department_id: Optional[str] = None


@dataclass(frozen=True)
class MaxConsecutiveDutyRule:
    """Flag every date where the running on-duty streak exceeds `days`"""
    days: int
    error_message: str = "Exceeds {days} consecutive duty days"
    rule_id: Optional[str] = None

    rule_type = RuleType.MAX_CONSECUTIVE_DUTY

    @property
    def params(self) -> Dict[str, int]:
        return {'days': self.days}


@dataclass(frozen=True)
class MinOffDaysInPeriodRule:
    """Flag dates whose trailing `period`-day window has fewer than `days` off days"""
    period: int
    days: int
    error_message: str = "Requires {days} days off in {period} days"
    rule_id: Optional[str] = None

    rule_type = RuleType.MIN_OFF_DAYS_IN_PERIOD

    @property
    def params(self) -> Dict[str, int]:
        return {'period': self.period, 'days': self.days}


@dataclass(frozen=True)
class MinConsecutiveOffDaysInPeriodRule:
    """Flag dates whose trailing window lacks a block of `consecutive_days` off days"""
    period: int
    consecutive_days: int
    error_message: str = "Requires {consecutiveDays} consecutive days off in {period} days"
    rule_id: Optional[str] = None

    rule_type = RuleType.MIN_CONSECUTIVE_OFF_DAYS_IN_PERIOD

    @property
    def params(self) -> Dict[str, int]:
        return {'period': self.period, 'consecutiveDays': self.consecutive_days}


ValidationRule = Union[MaxConsecutiveDutyRule, MinOffDaysInPeriodRule, MinConsecutiveOffDaysInPeriodRule]
