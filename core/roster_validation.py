"""
Roster Rule Engine
==================

Evaluates department-configured rules against a roster grid
(date -> staff id -> RosterEntry) and writes violation messages into the
entries.

- A missing entry, an empty duty code or a code flagged off-duty is an off day
- Violations of the staff being validated are cleared before rules run
- The first rule to flag a cell wins; later rules never overwrite it
- The caller's grid is never mutated: a new grid is returned in which only
  the validated staff members' entries are rebuilt
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
import logging
import re

from models.data_models import (
    DutyCode, MaxConsecutiveDutyRule, MinConsecutiveOffDaysInPeriodRule, MinOffDaysInPeriodRule,
    RosterEntry, RosterGrid, StaffMember, ValidationRule,
)
from core.parameters import MAX_DATE_RANGE_DAYS
from core.time_utils import shift_date, to_date

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r'{(\w+)}')


def is_off_duty(duty_code_id: Optional[str], duty_codes: Mapping[str, DutyCode]) -> bool:
    """Empty cells are off duty; unknown codes are on duty"""
    if not duty_code_id:
        return True
    code = duty_codes.get(duty_code_id)
    return bool(code and code.is_off_duty)


def format_error_message(template: str, params: Mapping[str, int]) -> str:
    """Replace {name} placeholders with rule parameters; unknown names are kept"""
    def substitute(match):
        value = params.get(match.group(1))
        return str(value) if value is not None else match.group(0)
    return _PLACEHOLDER.sub(substitute, template or '')


def _duty_code_index(duty_codes) -> Dict[str, DutyCode]:
    if isinstance(duty_codes, Mapping):
        return dict(duty_codes)
    return {code.id: code for code in duty_codes}


def _entry_off(grid: RosterGrid, date: str, staff_id: str, duty_codes) -> bool:
    entry = grid.get(date, {}).get(staff_id)
    return is_off_duty(entry.duty_code_id if entry else None, duty_codes)


def _max_consecutive_duty(rule, staff_id, sorted_dates, grid, duty_codes) -> Dict[str, str]:
    errors = {}
    if not rule.days or rule.days <= 0:
        return errors

    consecutive = 0
    for date in sorted_dates:
        if _entry_off(grid, date, staff_id, duty_codes):
            consecutive = 0
        else:
            consecutive += 1
        if consecutive > rule.days:
            errors[date] = f"(Day {consecutive} of {rule.days})"
    return errors


def _off_day_window(staff_id, end_date, period, grid, duty_codes):
    """(off days, longest consecutive off block) in the period-day window ending on end_date"""
    off_days = 0
    run = 0
    longest = 0
    period = min(period, MAX_DATE_RANGE_DAYS)
    for offset in range(period - 1, -1, -1):
        if _entry_off(grid, shift_date(end_date, -offset), staff_id, duty_codes):
            off_days += 1
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return off_days, longest


def _min_off_days(rule, staff_id, sorted_dates, grid, duty_codes) -> Dict[str, str]:
    errors = {}
    if not rule.period or rule.period <= 0 or not rule.days or rule.days <= 0:
        return errors
    for date in sorted_dates:
        off_days, _ = _off_day_window(staff_id, date, rule.period, grid, duty_codes)
        if off_days < rule.days:
            errors[date] = f"(has {off_days} of {rule.days})"
    return errors


def _min_consecutive_off_days(rule, staff_id, sorted_dates, grid, duty_codes) -> Dict[str, str]:
    errors = {}
    if not rule.period or rule.period <= 0 or not rule.consecutive_days or rule.consecutive_days <= 0:
        return errors
    for date in sorted_dates:
        _, longest = _off_day_window(staff_id, date, rule.period, grid, duty_codes)
        if longest < rule.consecutive_days:
            errors[date] = f"(longest block is {longest} of {rule.consecutive_days})"
    return errors


_RULE_HANDLERS = {
    MaxConsecutiveDutyRule: _max_consecutive_duty,
    MinOffDaysInPeriodRule: _min_off_days,
    MinConsecutiveOffDaysInPeriodRule: _min_consecutive_off_days,
}


def apply_rule(
    rule: ValidationRule,
    staff_id: str,
    sorted_dates: Sequence[str],
    grid: RosterGrid,
    duty_codes,
) -> Dict[str, str]:
    """Map of date -> violation detail for one rule and one staff member"""
    handler = _RULE_HANDLERS.get(type(rule))
    if handler is None:
        logger.warning(f"Unsupported roster rule {type(rule).__name__}, skipping")
        return {}
    return handler(rule, staff_id, sorted_dates, grid, _duty_code_index(duty_codes))


def _staff_ids(staff: Iterable) -> List[str]:
    return [member.id if isinstance(member, StaffMember) else str(member) for member in staff]


def dynamic_validate_roster(
    grid: RosterGrid,
    staff: Iterable,
    duty_codes,
    rules: Sequence[ValidationRule],
    target_staff_id: Optional[str] = None,
) -> RosterGrid:
    """
    Validate the roster grid and return a new grid carrying the violations.

    Args:
        grid: date -> staff id -> RosterEntry; left untouched
        staff: StaffMember objects (or staff ids) on the roster
        duty_codes: DutyCode catalog, as a sequence or a {id: DutyCode} mapping
        rules: rules in the department's configured order
        target_staff_id: re-validate only this staff member, e.g. after an edit

    Returns:
        A new grid. Cells of staff members that were not validated are the
        same RosterEntry objects as in the input.
    """
    new_grid: RosterGrid = {date: dict(row) for date, row in grid.items()}
    if not rules:
        return new_grid

    codes = _duty_code_index(duty_codes)
    sorted_dates = sorted(d for d in new_grid if to_date(d) is not None)
    staff_ids = _staff_ids(staff)
    if target_staff_id is not None:
        staff_ids = [sid for sid in staff_ids if sid == target_staff_id]

    for staff_id in staff_ids:
        for date in sorted_dates:
            entry = new_grid[date].get(staff_id)
            if entry is not None and entry.violation is not None:
                new_grid[date][staff_id] = replace(entry, violation=None)

    flagged = 0
    for staff_id in staff_ids:
        for rule in rules:
            errors = apply_rule(rule, staff_id, sorted_dates, new_grid, codes)
            if not errors:
                continue
            message = format_error_message(rule.error_message, rule.params)
            for date, detail in errors.items():
                row = new_grid.setdefault(date, {})
                entry = row.get(staff_id) or RosterEntry(duty_code_id='')
                if entry.violation:
                    continue
                row[staff_id] = replace(entry, violation=f"{message} {detail}")
                flagged += 1

    logger.debug(f"Roster validation flagged {flagged} cells for {len(staff_ids)} staff")
    return new_grid
