"""
Tests for boundary schemas and the pilot time series container.

Run: python -m pytest tests/test_schemas.py -v
"""

import pytest
from pydantic import ValidationError

from models.data_models import (
    AircraftCategory, DutyCode, DutyRecord, MaxConsecutiveDutyRule, MinConsecutiveOffDaysInPeriodRule,
    MinOffDaysInPeriodRule, PilotTimeSeries, RosterEntry,
)
from models.schemas import (
    FlightLogRecordSchema, dump_roster_grid, parse_duty_codes, parse_flight_log,
    parse_roster_grid, parse_validation_rules,
)


class TestFlightLog:

    def test_camel_case_record(self):
        record = FlightLogRecordSchema.model_validate({
            'id': 'r1',
            'staffId': 'p1',
            'date': '2025-03-01',
            'dutyStart': '07:00',
            'dutyEnd': '15:30',
            'fdpStart': '',
            'sectors': '',
            'isTwoPilotOperation': None,
            'isSplitDuty': True,
            'flightHoursByAircraft': {'AW139': 2.5, 'B412': None},
        }).to_duty_record()

        assert record == DutyRecord(
            date='2025-03-01', duty_start='07:00', duty_end='15:30', is_split_duty=True,
            flight_hours_by_aircraft={'AW139': 2.5, 'B412': 0.0}, staff_id='p1', record_id='r1',
        )

    def test_missing_date_rejected(self):
        with pytest.raises(ValidationError):
            FlightLogRecordSchema.model_validate({'dutyStart': '07:00'})

    def test_parse_flight_log_filters_pilot(self):
        series = parse_flight_log([
            {'date': '2025-03-02', 'staffId': 'p1', 'dutyStart': '08:00'},
            {'date': '2025-03-01', 'staffId': 'p1'},
            {'date': '2025-03-01', 'staffId': 'p2', 'dutyStart': '09:00'},
        ], pilot_id='p1')
        assert series.dates == ['2025-03-01', '2025-03-02']
        assert series.get('2025-03-01').is_day_off


class TestPilotTimeSeries:

    def test_ordered_and_unique(self):
        series = PilotTimeSeries('p1')
        series.add(DutyRecord(date='2025-01-03'))
        series.add(DutyRecord(date='2025-01-01', duty_start='08:00'))
        series.add(DutyRecord(date='2025-01-01', duty_start='09:00'))
        series.add(DutyRecord(date=''))

        assert len(series) == 2
        assert '2025-01-01' in series
        assert [r.date for r in series] == ['2025-01-01', '2025-01-03']
        assert series.get('2025-01-01').duty_start == '09:00'
        assert series.get('2025-01-02') is None


class TestRules:

    def test_parse_validation_rules(self):
        rules = parse_validation_rules([
            {'id': 'a', 'type': 'MAX_CONSECUTIVE_DUTY', 'params': {'days': '6'},
             'errorMessage': 'Max {days}'},
            {'id': 'b', 'type': 'SOMETHING_NEW', 'params': {}},
            {'id': 'c', 'type': 'MIN_OFF_DAYS_IN_PERIOD', 'params': {'period': 28, 'days': 7}},
            {'id': 'd', 'type': 'MIN_CONSECUTIVE_OFF_DAYS_IN_PERIOD',
             'params': {'period': 14, 'consecutiveDays': 2}, 'errorMessage': 'Block'},
        ])
        assert rules == [
            MaxConsecutiveDutyRule(days=6, error_message='Max {days}', rule_id='a'),
            MinOffDaysInPeriodRule(period=28, days=7, error_message='', rule_id='c'),
            MinConsecutiveOffDaysInPeriodRule(period=14, consecutive_days=2, error_message='Block', rule_id='d'),
        ]

    def test_bad_param_becomes_zero(self):
        rules = parse_validation_rules([{'type': 'MAX_CONSECUTIVE_DUTY', 'params': {'days': 'many'}}])
        assert rules[0].days == 0

    def test_parse_duty_codes(self):
        codes = parse_duty_codes([{'id': 'O', 'code': 'OFF', 'isOffDuty': True}, {'id': 'D'}])
        assert codes == [DutyCode(id='O', code='OFF', is_off_duty=True), DutyCode(id='D')]


class TestRosterGrid:

    def test_parse_and_dump(self):
        grid = parse_roster_grid({
            '2025-01-01': {
                's1': {'dutyCodeId': 'D', 'violation': '', 'isUnderlined': True},
                's2': {'dutyCodeId': None, 'note': 'sick'},
            },
        })
        assert grid['2025-01-01']['s1'] == RosterEntry(duty_code_id='D', is_underlined=True)
        assert grid['2025-01-01']['s2'] == RosterEntry(duty_code_id='', note='sick')

        dumped = dump_roster_grid(grid)
        assert dumped['2025-01-01']['s1'] == {
            'dutyCodeId': 'D', 'isUnderlined': True, 'isLeaveOverlay': False,
        }
        assert dumped['2025-01-01']['s2']['note'] == 'sick'


class TestAircraftCategory:

    @pytest.mark.parametrize('value, expected', [
        ('Helicopter', AircraftCategory.HELICOPTER),
        ('rotor-wing', AircraftCategory.HELICOPTER),
        ('Fixed Wing', AircraftCategory.FIXED_WING),
        ('fixed_wing', AircraftCategory.FIXED_WING),
        ('Aeroplane', AircraftCategory.FIXED_WING),
        (AircraftCategory.HELICOPTER, AircraftCategory.HELICOPTER),
        ('Glider', None),
        ('', None),
        (None, None),
    ])
    def test_from_value(self, value, expected):
        assert AircraftCategory.from_value(value) is expected
