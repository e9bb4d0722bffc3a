"""Valet Pay SDK - Payroll reconciliation for valet shift reports."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    load_company_profile,
    get_data_path,
    prepare_data_dir,
    get_default_format,
    OUTPUT_FORMATS,
    SettingsError,
    ProfileNotFoundError,
    ProfileValidationError,
)

from .errors import (
    ValetPayError,
    RateResolutionError,
    RecordNotFoundError,
)

from .schemas import (
    ShiftRecord,
    ShiftEmployeeEntry,
    Employee,
    TaxPaymentRecord,
    LocationRecord,
    CompanyProfile,
    LocationRateTable,
    EmployeeFinancialSummary,
)

from .rates import (
    resolve_rate_table,
    RateTableResolver,
    LEGACY_RATES,
)

from .shift_calc import ShiftTotals, calc_shift_totals, calc_cash_car_count
from .allocation import EmployeeAllocation, allocate_hours, total_job_hours
from .taxes import (
    ESTIMATED_TAX_RATE,
    TaxAdvance,
    calc_tax_and_advance,
    sum_tax_payments,
)
from .breakdown import ShiftBreakdown, ShiftLine, build_shift_breakdown
from .periods import AggregationWindow, parse_window, parse_shift_date
from .quality import DataQualityReport, DataQualityIssue

from .aggregate import (
    AggregationResult,
    aggregate_summaries,
    summarize_by_location,
    sort_summaries,
)

from .export import (
    CSV_COLUMNS,
    write_summary_csv,
    summary_csv_text,
    summary_table_rows,
)

from .audit import (
    ValidationSummary,
    validate_calculations,
    generate_audit_report,
)

from . import records

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "load_company_profile",
    "get_data_path",
    "prepare_data_dir",
    "get_default_format",
    "OUTPUT_FORMATS",
    "SettingsError",
    "ProfileNotFoundError",
    "ProfileValidationError",
    # Errors
    "ValetPayError",
    "RateResolutionError",
    "RecordNotFoundError",
    # Schemas
    "ShiftRecord",
    "ShiftEmployeeEntry",
    "Employee",
    "TaxPaymentRecord",
    "LocationRecord",
    "CompanyProfile",
    "LocationRateTable",
    "EmployeeFinancialSummary",
    # Rates
    "resolve_rate_table",
    "RateTableResolver",
    "LEGACY_RATES",
    # Shift pipeline
    "ShiftTotals",
    "calc_shift_totals",
    "calc_cash_car_count",
    "EmployeeAllocation",
    "allocate_hours",
    "total_job_hours",
    "ESTIMATED_TAX_RATE",
    "TaxAdvance",
    "calc_tax_and_advance",
    "sum_tax_payments",
    "ShiftBreakdown",
    "ShiftLine",
    "build_shift_breakdown",
    # Windows and data quality
    "AggregationWindow",
    "parse_window",
    "parse_shift_date",
    "DataQualityReport",
    "DataQualityIssue",
    # Aggregation
    "AggregationResult",
    "aggregate_summaries",
    "summarize_by_location",
    "sort_summaries",
    # Export
    "CSV_COLUMNS",
    "write_summary_csv",
    "summary_csv_text",
    "summary_table_rows",
    # Audit
    "ValidationSummary",
    "validate_calculations",
    "generate_audit_report",
    # Records module
    "records",
]
