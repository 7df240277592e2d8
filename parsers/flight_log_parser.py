"""
flight_log_parser.py - Flight-log CSV import
============================================

Reads duty-log exports (one row per pilot per date) into PilotTimeSeries.

Expected columns (all but Date optional):
    Pilot, Date, Duty Start, Duty End, FDP Start, FDP End, Break Start,
    Break End, Standby On, Standby Off, Flight On, Flight Off, Sectors,
    Two Pilot, Split Duty, Remarks, Aircraft Type
plus any number of "Hours: <aircraft>" columns carrying the per-aircraft
flight-hours breakdown.
"""

from typing import Dict, Optional
import logging

import pandas as pd

from models.data_models import DutyRecord, PilotTimeSeries
from core.time_utils import time_to_decimal, to_date_str

logger = logging.getLogger(__name__)

TIME_COLUMNS = {
    'Duty Start': 'duty_start',
    'Duty End': 'duty_end',
    'FDP Start': 'fdp_start',
    'FDP End': 'fdp_end',
    'Break Start': 'break_start',
    'Break End': 'break_end',
    'Standby On': 'standby_on',
    'Standby Off': 'standby_off',
    'Flight On': 'flight_on',
    'Flight Off': 'flight_off',
}

HOURS_PREFIX = 'Hours:'
TRUE_VALUES = {'1', 'y', 'yes', 'true', 't', 'x'}


class FlightLogCSVParser:
    """Parse CSV exports of the pilot duty log"""

    def __init__(self, default_pilot_id: str = 'unknown'):
        self.default_pilot_id = default_pilot_id

    def parse_csv(self, csv_path) -> Dict[str, PilotTimeSeries]:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        return self.parse_dataframe(df)

    def parse_dataframe(self, df: pd.DataFrame) -> Dict[str, PilotTimeSeries]:
        df = df.rename(columns=lambda c: str(c).strip())
        if 'Date' not in df.columns:
            raise ValueError("Flight log CSV has no 'Date' column")

        hours_columns = [c for c in df.columns if c.startswith(HOURS_PREFIX)]
        series: Dict[str, PilotTimeSeries] = {}

        for _, row in df.iterrows():
            record = self._parse_row(row, hours_columns)
            if record is None:
                continue
            pilot_id = record.staff_id
            if pilot_id not in series:
                series[pilot_id] = PilotTimeSeries(pilot_id)
            series[pilot_id].add(record)

        logger.info(f"Parsed {sum(len(s) for s in series.values())} duty records for {len(series)} pilots")
        return series

    def _parse_row(self, row: pd.Series, hours_columns) -> Optional[DutyRecord]:
        date = to_date_str(_cell(row, 'Date'))
        if date is None:
            logger.warning(f"Skipping flight log row with invalid date {row.get('Date')!r}")
            return None

        fields = {attr: _cell(row, column) for column, attr in TIME_COLUMNS.items()}

        hours = None
        if hours_columns:
            breakdown = {
                column[len(HOURS_PREFIX):].strip(): time_to_decimal(_cell(row, column))
                for column in hours_columns
                if _cell(row, column) is not None
            }
            hours = breakdown or None

        return DutyRecord(
            date=date,
            sectors=_int(_cell(row, 'Sectors')),
            is_two_pilot_operation=_flag(_cell(row, 'Two Pilot')),
            is_split_duty=_flag(_cell(row, 'Split Duty')),
            remarks=_cell(row, 'Remarks'),
            aircraft_type=_cell(row, 'Aircraft Type'),
            flight_hours_by_aircraft=hours,
            staff_id=_cell(row, 'Pilot') or self.default_pilot_id,
            **fields,
        )


def _cell(row: pd.Series, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def _flag(value: Optional[str]) -> bool:
    return bool(value) and value.lower() in TRUE_VALUES


def _int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None
