"""
FTL Compliance Evaluation
=========================

Runs every FTL check for a pilot's duty day and combines the verdicts:
rolling totals, FDP limits, disruptive duties, rest, days off, standby and
cumulative limits.

The combined `violation` on a DailyCompliance is the first finding in
priority order: days off, rest, standby, disruptive, max FDP, max flight
time. `DailyCompliance.all_violations()` lists every finding.
"""

from typing import Iterable, List, Optional
import logging

from models.data_models import AircraftCategory, DailyCompliance, DutyRecord
from core.parameters import EngineConfig
from core.days_off import is_an_off_day, validate_days_off_rules
from core.disruptive import calculate_disruptive_details
from core.fdp import calculate_fdp_details
from core.rest import calculate_rest_period, find_previous_record_with_end
from core.rolling_totals import calculate_all_rolling_totals, check_cumulative_limits
from core.standby import calculate_standby_details
from core.time_utils import calculate_duration_hours, decimal_to_time

logger = logging.getLogger(__name__)


def day_flight_hours(record: DutyRecord) -> float:
    """Aircraft-hours breakdown total, falling back to flight on/off when it is empty"""
    total = 0.0
    if record.flight_hours_by_aircraft:
        total = sum(hours or 0 for hours in record.flight_hours_by_aircraft.values())
    if total == 0 and (record.flight_on or record.flight_off):
        total = calculate_duration_hours(record.flight_on, record.flight_off)
    return total


class FTLComplianceValidator:
    """Validate a pilot's duty log against the operations-manual FTL scheme"""

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig.default_config()
        self.framework = self.config.framework

    def evaluate_day(
        self,
        record: DutyRecord,
        records: Iterable[DutyRecord],
        aircraft_category,
    ) -> DailyCompliance:
        """
        Evaluate one record against the pilot's full history.

        Args:
            record: the duty day being evaluated
            records: every known record for the pilot (may include `record`
                and later dates; each check only looks where it needs to)
            aircraft_category: the pilot's primary category, or None if unknown
        """
        category = AircraftCategory.from_value(aircraft_category)
        history = [r for r in records if r.date and r.date != record.date]
        history.append(record)
        fw = self.framework

        metrics = calculate_all_rolling_totals(history, record.date, fw)
        fdp = calculate_fdp_details(record, category, fw)
        previous = find_previous_record_with_end(history, record.date)
        rest = calculate_rest_period(record, previous, fw)
        standby = calculate_standby_details(record, fw)
        days_off = validate_days_off_rules(history, record.date, category, fw)
        disruptive = calculate_disruptive_details(history, record.date, fw)

        flight_duration = day_flight_hours(record)
        actual_fdp = calculate_duration_hours(record.fdp_start, record.fdp_end)

        day = DailyCompliance(
            record=record,
            is_day_off=is_an_off_day(record),
            metrics=metrics,
            flight_duration=flight_duration,
            actual_fdp=actual_fdp,
            fdp=fdp,
            disruptive=disruptive,
            rest=rest,
            days_off=days_off,
            standby=standby,
            cumulative_violations=check_cumulative_limits(metrics, category),
        )
        day.violation = self._first_violation(day)
        return day

    def evaluate_period(
        self,
        period_records: Iterable[DutyRecord],
        historic_records: Iterable[DutyRecord],
        aircraft_category,
    ) -> List[DailyCompliance]:
        """Evaluate each record of a period (e.g. a month) in date order"""
        period_records = sorted((r for r in period_records if r.date), key=lambda r: r.date)
        period_dates = {r.date for r in period_records}
        combined = [r for r in historic_records if r.date and r.date not in period_dates]
        combined.extend(period_records)

        results = [self.evaluate_day(record, combined, aircraft_category) for record in period_records]
        flagged = sum(1 for day in results if day.violation)
        if flagged:
            logger.info(f"{flagged} of {len(results)} duty days flagged")
        return results

    @staticmethod
    def _first_violation(day: DailyCompliance) -> Optional[str]:
        for message in (
            day.days_off.violation,
            day.rest.rest_violation,
            day.standby.standby_violation,
            day.disruptive.disruptive_violation,
        ):
            if message:
                return message
        if day.exceeds_max_fdp:
            return f"Exceeded Max FDP of {decimal_to_time(day.fdp.max_fdp)}."
        if day.exceeds_max_flight_time:
            return f"Exceeded Max Flight Time of {day.fdp.max_flight_time:g}h."
        return None
