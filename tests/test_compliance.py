"""
Tests for combined daily FTL compliance.

Run: python -m pytest tests/test_compliance.py -v
"""

from models.data_models import DutyRecord
from core.compliance import FTLComplianceValidator, day_flight_hours
from core.parameters import EngineConfig, FTLFramework


def heli_duty(day, start='08:00', end='16:00', **kwargs):
    kwargs.setdefault('is_two_pilot_operation', True)
    return DutyRecord(date=day, duty_start=start, duty_end=end, **kwargs)


class TestEvaluateDay:

    def setup_method(self):
        self.validator = FTLComplianceValidator()

    def test_clean_day(self):
        record = heli_duty('2025-01-02', fdp_start='08:00', fdp_end='15:00')
        day = self.validator.evaluate_day(record, [heli_duty('2025-01-01')], 'Helicopter')
        assert day.violation is None
        assert day.all_violations() == []
        assert not day.is_day_off
        assert day.actual_fdp == 7
        assert day.fdp.max_fdp == 12
        assert day.rest.rest_period == 16

    def test_rest_violation(self):
        records = [heli_duty('2025-01-01', '08:00', '20:00')]
        record = heli_duty('2025-01-02', '06:00', '14:00')
        day = self.validator.evaluate_day(record, records, 'Helicopter')
        assert day.violation.startswith("Rest period of 10.0h")
        assert day.rest.rest_violation == day.violation

    def test_fdp_exceeded(self):
        record = heli_duty('2025-01-01', '06:00', '18:00', fdp_start='06:00', fdp_end='17:00')
        day = self.validator.evaluate_day(record, [], 'Helicopter')
        assert day.exceeds_max_fdp
        assert day.violation == "Exceeded Max FDP of 10:00."
        assert "Exceeded Max FDP of 10.00h (Actual: 11.00h)." in day.all_violations()

    def test_flight_time_exceeded(self):
        record = heli_duty('2025-01-01', '08:00', '18:00', fdp_start='08:00', fdp_end='18:00',
                           flight_on='08:30', flight_off='17:30')
        day = self.validator.evaluate_day(record, [], 'Helicopter')
        assert day.flight_duration == 9
        assert not day.exceeds_max_fdp
        assert day.violation == "Exceeded Max Flight Time of 8h."

    def test_rest_takes_priority_over_fdp(self):
        records = [heli_duty('2025-01-01', '08:00', '20:00')]
        record = heli_duty('2025-01-02', '06:00', '18:00', fdp_start='06:00', fdp_end='17:00')
        day = self.validator.evaluate_day(record, records, 'Helicopter')
        assert day.violation.startswith("Rest period")
        assert len(day.all_violations()) == 2

    def test_cumulative_limit_reported_separately(self):
        records = [
            heli_duty(f'2025-01-0{d}', flight_on='08:00', flight_off='15:00') for d in (1, 2, 3)
        ]
        day = self.validator.evaluate_day(records[-1], records, 'Helicopter')
        assert day.metrics.flight_time_3d == 21
        assert day.violation is None
        assert day.all_violations() == ["Exceeded 18h flight time in 3 days."]

    def test_split_duty_extension_used(self):
        record = heli_duty('2025-01-01', '08:00', '20:30', fdp_start='08:00', fdp_end='20:30',
                           is_split_duty=True, break_start='12:00', break_end='15:00')
        day = self.validator.evaluate_day(record, [], 'Helicopter')
        assert day.fdp.max_fdp == 13
        assert day.used_split_duty_extension
        assert day.violation is None

    def test_record_replaces_same_date_history(self):
        stale = heli_duty('2025-01-02', '02:00', '05:00')
        record = heli_duty('2025-01-02', '09:00', '17:00')
        day = self.validator.evaluate_day(record, [heli_duty('2025-01-01'), stale], 'Helicopter')
        assert not day.disruptive.is_disruptive
        assert day.metrics.duty_time_3d == 16

    def test_day_off(self):
        day = self.validator.evaluate_day(DutyRecord(date='2025-01-02'), [heli_duty('2025-01-01')], 'Helicopter')
        assert day.is_day_off
        assert day.violation is None
        assert day.fdp.max_fdp == 0

    def test_unknown_category(self):
        record = heli_duty('2025-01-01', fdp_start='08:00', fdp_end='23:00')
        day = self.validator.evaluate_day(record, [], 'Glider')
        assert day.fdp.max_fdp == 0
        assert day.violation is None
        assert day.cumulative_violations == []

    def test_custom_framework(self):
        validator = FTLComplianceValidator(EngineConfig(framework=FTLFramework(max_standby_hours=8)))
        record = DutyRecord(date='2025-01-01', standby_on='06:00', standby_off='15:00')
        day = validator.evaluate_day(record, [], 'Helicopter')
        assert day.violation == "Standby period of 9.0h exceeds the maximum 8h."


class TestEvaluatePeriod:

    def test_day_off_sees_following_duty(self):
        period = [DutyRecord(date=f'2025-01-0{d}', duty_start='08:00', duty_end='16:00') for d in range(1, 8)]
        period.append(DutyRecord(date='2025-01-08'))
        period.append(DutyRecord(date='2025-01-09', duty_start='08:00', duty_end='16:00'))

        results = FTLComplianceValidator().evaluate_period(period, [], 'Fixed Wing')

        assert [day.date for day in results] == [r.date for r in period]
        by_date = {day.date: day for day in results}
        assert by_date['2025-01-08'].violation == "Requires 2 consecutive days off after 7 duty days."
        assert by_date['2025-01-07'].violation is None
        assert by_date['2025-01-09'].violation is None

    def test_period_overrides_history(self):
        historic = [
            DutyRecord(date='2025-01-01', duty_start='08:00', duty_end='20:00'),
            DutyRecord(date='2025-01-02', duty_start='02:00', duty_end='06:00'),
        ]
        period = [DutyRecord(date='2025-01-02', duty_start='09:00', duty_end='17:00')]
        results = FTLComplianceValidator().evaluate_period(period, historic, 'Fixed Wing')
        assert len(results) == 1
        assert results[0].rest.rest_period == 13
        assert results[0].metrics.duty_time_3d == 20


class TestDayFlightHours:

    def test_breakdown(self):
        record = DutyRecord(date='2025-01-01', flight_hours_by_aircraft={'AW139': 2.5, 'B412': 1.0})
        assert day_flight_hours(record) == 3.5

    def test_empty_breakdown_falls_back_to_block_times(self):
        record = DutyRecord(date='2025-01-01', flight_on='09:00', flight_off='11:00',
                            flight_hours_by_aircraft={'AW139': 0})
        assert day_flight_hours(record) == 2
