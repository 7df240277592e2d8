"""
schemas.py - Boundary Schemas
=============================

Pydantic models for the camelCase payloads exchanged with the flight-log
data layer, department settings and the roster display layer, and their
conversion to/from the engine dataclasses.

Blank strings are normalised to None; structurally wrong payloads raise
pydantic.ValidationError.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.data_models import (
    DutyCode, DutyRecord, MaxConsecutiveDutyRule, MinConsecutiveOffDaysInPeriodRule,
    MinOffDaysInPeriodRule, PilotTimeSeries, RosterEntry, RosterGrid, RuleType, ValidationRule,
)

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class FlightLogRecordSchema(_CamelModel):
    """Flight-log record as stored by the data layer"""
    id: Optional[str] = None
    staff_id: Optional[str] = Field(None, alias='staffId')
    date: str
    duty_start: Optional[str] = Field(None, alias='dutyStart')
    duty_end: Optional[str] = Field(None, alias='dutyEnd')
    fdp_start: Optional[str] = Field(None, alias='fdpStart')
    fdp_end: Optional[str] = Field(None, alias='fdpEnd')
    break_start: Optional[str] = Field(None, alias='breakStart')
    break_end: Optional[str] = Field(None, alias='breakEnd')
    standby_on: Optional[str] = Field(None, alias='standbyOn')
    standby_off: Optional[str] = Field(None, alias='standbyOff')
    flight_on: Optional[str] = Field(None, alias='flightOn')
    flight_off: Optional[str] = Field(None, alias='flightOff')
    remarks: Optional[str] = None
    sectors: Optional[int] = None
    is_two_pilot_operation: bool = Field(False, alias='isTwoPilotOperation')
    is_split_duty: bool = Field(False, alias='isSplitDuty')
    aircraft_type: Optional[str] = Field(None, alias='aircraftType')
    flight_hours_by_aircraft: Optional[Dict[str, Optional[float]]] = Field(None, alias='flightHoursByAircraft')

    @field_validator(
        'duty_start', 'duty_end', 'fdp_start', 'fdp_end', 'break_start', 'break_end',
        'standby_on', 'standby_off', 'flight_on', 'flight_off', 'remarks', 'aircraft_type',
        mode='before',
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('sectors', mode='before')
    @classmethod
    def _blank_sectors(cls, value):
        if value == '' or value is None:
            return None
        return value

    @field_validator('is_two_pilot_operation', 'is_split_duty', mode='before')
    @classmethod
    def _none_is_false(cls, value):
        return False if value is None else value

    def to_duty_record(self) -> DutyRecord:
        hours = None
        if self.flight_hours_by_aircraft is not None:
            hours = {k: (v or 0.0) for k, v in self.flight_hours_by_aircraft.items()}
        return DutyRecord(
            date=self.date,
            duty_start=self.duty_start,
            duty_end=self.duty_end,
            fdp_start=self.fdp_start,
            fdp_end=self.fdp_end,
            break_start=self.break_start,
            break_end=self.break_end,
            standby_on=self.standby_on,
            standby_off=self.standby_off,
            flight_on=self.flight_on,
            flight_off=self.flight_off,
            sectors=self.sectors,
            is_two_pilot_operation=self.is_two_pilot_operation,
            is_split_duty=self.is_split_duty,
            aircraft_type=self.aircraft_type,
            flight_hours_by_aircraft=hours,
            remarks=self.remarks,
            staff_id=self.staff_id,
            record_id=self.id,
        )


class ValidationRuleSchema(_CamelModel):
    id: Optional[str] = None
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)
    error_message: str = Field('', alias='errorMessage')

    def _int_param(self, name: str) -> int:
        try:
            return int(self.params.get(name) or 0)
        except (TypeError, ValueError):
            return 0

    def to_rule(self) -> Optional[ValidationRule]:
        """Typed rule variant, or None for a rule type the engine does not know"""
        try:
            rule_type = RuleType(self.type)
        except ValueError:
            logger.warning(f"Unknown roster rule type {self.type!r} (rule {self.id}), ignoring")
            return None

        if rule_type == RuleType.MAX_CONSECUTIVE_DUTY:
            return MaxConsecutiveDutyRule(
                days=self._int_param('days'), error_message=self.error_message, rule_id=self.id,
            )
        if rule_type == RuleType.MIN_OFF_DAYS_IN_PERIOD:
            return MinOffDaysInPeriodRule(
                period=self._int_param('period'), days=self._int_param('days'),
                error_message=self.error_message, rule_id=self.id,
            )
        return MinConsecutiveOffDaysInPeriodRule(
            period=self._int_param('period'), consecutive_days=self._int_param('consecutiveDays'),
            error_message=self.error_message, rule_id=self.id,
        )


class DutyCodeSchema(_CamelModel):
    id: str
    code: str = ''
    description: str = ''
    is_off_duty: bool = Field(False, alias='isOffDuty')

    def to_duty_code(self) -> DutyCode:
        return DutyCode(id=self.id, code=self.code, description=self.description, is_off_duty=self.is_off_duty)


class RosterEntrySchema(_CamelModel):
    duty_code_id: Optional[str] = Field('', alias='dutyCodeId')
    violation: Optional[str] = None
    note: Optional[str] = None
    is_underlined: bool = Field(False, alias='isUnderlined')
    is_leave_overlay: bool = Field(False, alias='isLeaveOverlay')
    custom_color: Optional[str] = Field(None, alias='customColor')

    def to_entry(self) -> RosterEntry:
        return RosterEntry(
            duty_code_id=self.duty_code_id or '',
            violation=self.violation or None,
            note=self.note,
            is_underlined=self.is_underlined,
            is_leave_overlay=self.is_leave_overlay,
            custom_color=self.custom_color,
        )

    @classmethod
    def from_entry(cls, entry: RosterEntry) -> 'RosterEntrySchema':
        return cls(
            duty_code_id=entry.duty_code_id,
            violation=entry.violation,
            note=entry.note,
            is_underlined=entry.is_underlined,
            is_leave_overlay=entry.is_leave_overlay,
            custom_color=entry.custom_color,
        )


# ============================================================================
# CONVERSION HELPERS
# ============================================================================

def parse_flight_log(payload: List[Mapping[str, Any]], pilot_id: Optional[str] = None) -> PilotTimeSeries:
    records = [FlightLogRecordSchema.model_validate(item).to_duty_record() for item in payload]
    if pilot_id is not None:
        records = [r for r in records if r.staff_id in (None, pilot_id)]
    return PilotTimeSeries(pilot_id, records)


def parse_validation_rules(payload: List[Mapping[str, Any]]) -> List[ValidationRule]:
    """Typed rules in configured order; unknown rule types are dropped"""
    rules = []
    for item in payload:
        rule = ValidationRuleSchema.model_validate(item).to_rule()
        if rule is not None:
            rules.append(rule)
    return rules


def parse_duty_codes(payload: List[Mapping[str, Any]]) -> List[DutyCode]:
    return [DutyCodeSchema.model_validate(item).to_duty_code() for item in payload]


def parse_roster_grid(payload: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> RosterGrid:
    return {
        date: {staff_id: RosterEntrySchema.model_validate(entry).to_entry() for staff_id, entry in row.items()}
        for date, row in payload.items()
    }


def dump_roster_grid(grid: RosterGrid) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """camelCase payload for the roster display layer; unset fields are omitted"""
    return {
        date: {
            staff_id: RosterEntrySchema.from_entry(entry).model_dump(by_alias=True, exclude_none=True)
            for staff_id, entry in row.items()
        }
        for date, row in grid.items()
    }
