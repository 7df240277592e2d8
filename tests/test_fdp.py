"""
Tests for FDP limit lookup and split-duty extensions.

Run: python -m pytest tests/test_fdp.py -v
"""

import pytest

from models.data_models import AircraftCategory, DutyRecord, FdpDetails
from core.fdp import calculate_fdp_details

HELI = AircraftCategory.HELICOPTER
AERO = AircraftCategory.FIXED_WING


def duty(**kwargs):
    return DutyRecord(date='2025-01-01', **kwargs)


class TestMissingData:

    def test_no_reference_start(self):
        assert calculate_fdp_details(duty(), HELI) == FdpDetails()

    def test_unknown_category(self):
        assert calculate_fdp_details(duty(fdp_start='08:00'), 'Glider') == FdpDetails()
        assert calculate_fdp_details(duty(fdp_start='08:00'), None) == FdpDetails()

    def test_short_reference_start(self):
        assert calculate_fdp_details(duty(fdp_start='8:0'), HELI) == FdpDetails()


class TestHelicopterLimits:

    def test_single_pilot_early_morning(self):
        result = calculate_fdp_details(duty(duty_start='06:30'), HELI)
        assert result.max_fdp == 9
        assert result.max_flight_time == 6

    def test_single_pilot_optimal_start(self):
        assert calculate_fdp_details(duty(duty_start='08:00'), HELI).max_fdp == 10

    def test_two_pilot_gets_more_hours(self):
        result = calculate_fdp_details(duty(fdp_start='08:00', is_two_pilot_operation=True), HELI)
        assert result.max_fdp == 12
        assert result.max_flight_time == 8

    @pytest.mark.parametrize('start', ['22:00', '23:59', '00:00', '03:00', '05:59'])
    def test_night_band_wraps_midnight(self, start):
        result = calculate_fdp_details(duty(duty_start=start, is_two_pilot_operation=True), HELI)
        assert (result.max_fdp, result.max_flight_time) == (9, 6)

    def test_last_minute_of_band(self):
        assert calculate_fdp_details(duty(duty_start='13:59'), HELI).max_fdp == 10
        assert calculate_fdp_details(duty(duty_start='14:00'), HELI).max_fdp == 9

    def test_standby_start_is_reference(self):
        record = duty(standby_on='06:00', fdp_start='08:00', duty_start='08:00')
        assert calculate_fdp_details(record, HELI).max_fdp == 9


class TestFixedWingLimits:

    def test_two_pilot_by_sectors(self):
        assert calculate_fdp_details(duty(fdp_start='08:00', sectors=1, is_two_pilot_operation=True), AERO).max_fdp == 14
        assert calculate_fdp_details(duty(fdp_start='08:00', sectors=3, is_two_pilot_operation=True), AERO).max_fdp == 12.5
        assert calculate_fdp_details(duty(fdp_start='08:00', sectors=10, is_two_pilot_operation=True), AERO).max_fdp == 9.5

    def test_night_start_uses_default_row(self):
        result = calculate_fdp_details(duty(fdp_start='23:00', is_two_pilot_operation=True), AERO)
        assert result.max_fdp == 11

    def test_single_pilot_sector_bands(self):
        assert calculate_fdp_details(duty(fdp_start='06:15', sectors=2), AERO).max_fdp == 10
        assert calculate_fdp_details(duty(fdp_start='06:15', sectors=5), AERO).max_fdp == 9.5
        assert calculate_fdp_details(duty(fdp_start='07:00', sectors=7), AERO).max_fdp == 8.75
        assert calculate_fdp_details(duty(fdp_start='06:15', sectors=9), AERO).max_fdp == 8

    def test_flight_time_unbounded(self):
        assert calculate_fdp_details(duty(fdp_start='08:00'), AERO).max_flight_time == 99

    def test_category_labels(self):
        record = duty(fdp_start='08:00', sectors=1, is_two_pilot_operation=True)
        assert calculate_fdp_details(record, 'Aeroplane').max_fdp == 14
        assert calculate_fdp_details(record, 'Fixed Wing').max_fdp == 14


class TestSplitDutyExtension:

    def test_helicopter_two_to_three_hours_rest(self):
        record = duty(fdp_start='08:00', is_two_pilot_operation=True, is_split_duty=True,
                      break_start='12:00', break_end='15:00')
        result = calculate_fdp_details(record, HELI)
        assert result.fdp_extension == 1
        assert result.max_fdp == 13
        assert result.base_fdp == 12
        assert result.break_duration == 3

    def test_helicopter_long_break_gives_half(self):
        record = duty(fdp_start='08:00', is_split_duty=True, break_start='11:00', break_end='16:00')
        assert calculate_fdp_details(record, HELI).fdp_extension == pytest.approx(2.25)

    def test_helicopter_short_break_gives_nothing(self):
        record = duty(fdp_start='08:00', is_split_duty=True, break_start='11:00', break_end='13:00')
        assert calculate_fdp_details(record, HELI).fdp_extension == 0

    def test_break_without_split_duty_flag(self):
        record = duty(fdp_start='08:00', break_start='12:00', break_end='15:00')
        result = calculate_fdp_details(record, HELI)
        assert result.fdp_extension == 0
        assert result.break_duration == 3

    def test_fixed_wing_four_hour_break(self):
        record = duty(fdp_start='08:00', sectors=1, is_two_pilot_operation=True, is_split_duty=True,
                      break_start='11:00', break_end='15:00')
        result = calculate_fdp_details(record, AERO)
        assert result.fdp_extension == pytest.approx(1.75)
        assert result.max_fdp == pytest.approx(15.75)

    def test_fixed_wing_needs_three_hours_effective_rest(self):
        record = duty(fdp_start='08:00', is_split_duty=True, break_start='11:00', break_end='14:00')
        assert calculate_fdp_details(record, AERO).fdp_extension == 0
