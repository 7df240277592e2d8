"""
Core FTL Engine Components
==========================

Main exports for the Flight Time Limitation and roster-compliance engine.
"""

from core.parameters import (
    FTLFramework,
    EngineConfig,
    HELI_FDP_LIMITS,
    AERO_FDP_LIMITS,
    CUMULATIVE_LIMITS,
)

from core.time_utils import (
    parse_time_to_minutes,
    calculate_duration_hours,
    decimal_to_time,
    time_to_decimal,
)
from core.rolling_totals import calculate_all_rolling_totals, check_cumulative_limits
from core.fdp import calculate_fdp_details
from core.disruptive import is_duty_disruptive, validate_disruptive_duties, calculate_disruptive_details
from core.rest import calculate_rest_period, find_previous_record_with_end
from core.days_off import is_an_off_day, validate_days_off_rules
from core.standby import calculate_standby_details
from core.compliance import FTLComplianceValidator
from core.roster_validation import dynamic_validate_roster, apply_rule, format_error_message, is_off_duty

__all__ = [
    # Parameters
    'FTLFramework',
    'EngineConfig',
    'HELI_FDP_LIMITS',
    'AERO_FDP_LIMITS',
    'CUMULATIVE_LIMITS',
    # Time arithmetic
    'parse_time_to_minutes',
    'calculate_duration_hours',
    'decimal_to_time',
    'time_to_decimal',
    # FTL checks
    'calculate_all_rolling_totals',
    'check_cumulative_limits',
    'calculate_fdp_details',
    'is_duty_disruptive',
    'validate_disruptive_duties',
    'calculate_disruptive_details',
    'calculate_rest_period',
    'find_previous_record_with_end',
    'is_an_off_day',
    'validate_days_off_rules',
    'calculate_standby_details',
    # Combined evaluation
    'FTLComplianceValidator',
    # Roster grid
    'dynamic_validate_roster',
    'apply_rule',
    'format_error_message',
    'is_off_duty',
]
