"""Fold shift breakdowns into per-employee summaries.

Summaries are recomputed from source records on every call and never
cached. A shift whose location has no rate table is skipped and reported;
it does not stop the rest of the aggregation.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .breakdown import ShiftBreakdown, ShiftLine, build_shift_breakdown
from .employee.roster import match_employee, surname_key
from .errors import RateResolutionError
from .periods import AggregationWindow, parse_shift_date, parse_window
from .quality import BAD_DATE, RATE_ERROR, DataQualityReport
from .rates import RateTableResolver
from .schemas import Employee, EmployeeFinancialSummary, ShiftRecord, TaxPaymentRecord

logger = logging.getLogger(__name__)

# Summary fields summed line by line: (summary field, getter)
_SUMMED_FIELDS: List[Tuple[str, Callable[[ShiftLine], float]]] = [
    ("hours", lambda line: line.allocation.hours),
    ("credit_commission", lambda line: line.allocation.credit_commission),
    ("cash_commission", lambda line: line.allocation.cash_commission),
    ("receipt_commission", lambda line: line.allocation.receipt_commission),
    ("commission", lambda line: line.allocation.commission),
    ("credit_tips", lambda line: line.allocation.credit_tips),
    ("cash_tips", lambda line: line.allocation.cash_tips),
    ("receipt_tips", lambda line: line.allocation.receipt_tips),
    ("tips", lambda line: line.allocation.tips),
    ("earnings", lambda line: line.allocation.earnings),
    ("money_owed", lambda line: line.allocation.money_owed),
    ("tax", lambda line: line.tax.tax),
    ("cash_paid", lambda line: line.tax.cash_paid),
    ("outstanding_tax_balance", lambda line: line.tax.outstanding_tax_balance),
    ("advance", lambda line: line.tax.advance),
]


@dataclass
class AggregationResult:
    """Output of aggregate_summaries()."""

    window: AggregationWindow
    summaries: List[EmployeeFinancialSummary]
    breakdowns: List[ShiftBreakdown] = field(default_factory=list)
    quality: DataQualityReport = field(default_factory=DataQualityReport)
    errors: List[str] = field(default_factory=list)


def sort_summaries(summaries: Iterable[EmployeeFinancialSummary]) -> List[EmployeeFinancialSummary]:
    """Sort by surname, then full name, then key (all case-insensitive)."""
    return sorted(
        summaries,
        key=lambda s: (
            surname_key(s.full_name or s.employee_key),
            (s.full_name or "").lower(),
            s.employee_key.lower(),
        ),
    )


def select_employees(employees: Iterable[Employee], active_only: bool = False) -> List[Employee]:
    """All employees (accounting/audit view) or only active ones (management view)."""
    if active_only:
        return [e for e in employees if e.active]
    return list(employees)


def collect_breakdowns(
    shifts: Iterable[ShiftRecord],
    resolver: RateTableResolver,
    payments: Iterable[TaxPaymentRecord] = (),
    employees: Sequence[Employee] = (),
    window: Union[str, AggregationWindow, None] = None,
    today: Optional[date] = None,
) -> Tuple[List[ShiftBreakdown], DataQualityReport, List[str]]:
    """Build breakdowns for every shift in the window.

    Returns:
        (breakdowns sorted by date, quality report, configuration errors)
    """
    if not isinstance(window, AggregationWindow):
        window = parse_window(window)
    payments = list(payments)
    quality = DataQualityReport()
    errors: List[str] = []
    dated: List[Tuple[date, ShiftBreakdown]] = []

    for shift in shifts:
        shift_date, ok = parse_shift_date(shift.date, today=today)
        if not ok:
            quality.record(BAD_DATE, shift.id, f"unparseable date '{shift.date}'; using {shift_date}")
        if not window.contains(shift_date):
            continue

        try:
            rates = resolver.resolve(shift.location_id)
        except RateResolutionError as e:
            quality.record(RATE_ERROR, shift.id, str(e))
            errors.append(f"shift {shift.id}: {e}")
            continue

        breakdown = build_shift_breakdown(shift, rates, payments, employees, quality)
        dated.append((shift_date, breakdown))

    dated.sort(key=lambda pair: (pair[0], pair[1].shift.id))
    logger.debug(f"window {window.label}: {len(dated)} shifts, {len(errors)} errors")
    return [b for _, b in dated], quality, errors


def _fold(employee: Employee, items: List[Tuple[ShiftBreakdown, ShiftLine]]) -> EmployeeFinancialSummary:
    totals: Dict[str, float] = {name: 0.0 for name, _ in _SUMMED_FIELDS}
    shift_ids = set()
    locations = []
    for breakdown, line in items:
        for name, getter in _SUMMED_FIELDS:
            totals[name] += getter(line)
        shift_ids.add(breakdown.shift.id)
        if breakdown.location_name not in locations:
            locations.append(breakdown.location_name)

    return EmployeeFinancialSummary(
        employee_key=employee.key,
        full_name=employee.full_name or employee.key,
        active=employee.active,
        shifts=len(shift_ids),
        locations=sorted(locations),
        **totals,
    )


def _owned_by(line: ShiftLine, employee: Employee) -> bool:
    # Lines resolved at breakdown time belong to exactly one employee
    if line.employee_key is not None:
        return line.employee_key == employee.key
    return match_employee(line.name, employee)


def _lines_for(employee: Employee, breakdowns: Iterable[ShiftBreakdown]) -> List[Tuple[ShiftBreakdown, ShiftLine]]:
    return [
        (breakdown, line)
        for breakdown in breakdowns
        for line in breakdown.lines
        if _owned_by(line, employee)
    ]


def summarize(
    employees: Iterable[Employee],
    breakdowns: Sequence[ShiftBreakdown],
) -> List[EmployeeFinancialSummary]:
    """One summary per employee over the given breakdowns, surname-sorted."""
    return sort_summaries(_fold(e, _lines_for(e, breakdowns)) for e in employees)


def summarize_by_location(
    employees: Iterable[Employee],
    breakdowns: Sequence[ShiftBreakdown],
) -> List[EmployeeFinancialSummary]:
    """One summary per (employee, location) pair the employee worked.

    Used by the CSV export, which carries a location column.
    """
    rows = []
    for employee in sort_employees(employees):
        by_location: Dict[str, List[Tuple[ShiftBreakdown, ShiftLine]]] = {}
        for breakdown, line in _lines_for(employee, breakdowns):
            by_location.setdefault(breakdown.location_name, []).append((breakdown, line))
        for location in sorted(by_location):
            rows.append(_fold(employee, by_location[location]))
    return rows


def sort_employees(employees: Iterable[Employee]) -> List[Employee]:
    """Employees in presentation order (same ordering as sort_summaries)."""
    return sorted(
        employees,
        key=lambda e: (
            surname_key(e.full_name or e.key),
            (e.full_name or "").lower(),
            e.key.lower(),
        ),
    )


def aggregate_summaries(
    shifts: Iterable[ShiftRecord],
    employees: Iterable[Employee],
    payments: Iterable[TaxPaymentRecord] = (),
    resolver: Optional[RateTableResolver] = None,
    window: Union[str, AggregationWindow, None] = None,
    active_only: bool = False,
    today: Optional[date] = None,
) -> AggregationResult:
    """Compute EmployeeFinancialSummary rows for a window.

    Args:
        shifts: All shift records (filtered to the window here)
        employees: Employee records
        payments: Tax payment records
        resolver: Rate resolver; defaults to legacy rates only
        window: 'all' (default), 'YYYY-MM', or an AggregationWindow
        active_only: Limit to active employees (management view)
        today: Fallback date for unparseable shift dates

    Returns:
        AggregationResult with surname-sorted summaries. Employees with no
        shifts in the window are included with zero totals.
    """
    if not isinstance(window, AggregationWindow):
        window = parse_window(window)
    if resolver is None:
        resolver = RateTableResolver()

    all_employees = list(employees)
    breakdowns, quality, errors = collect_breakdowns(
        shifts, resolver, payments, all_employees, window, today
    )
    selected = select_employees(all_employees, active_only)

    return AggregationResult(
        window=window,
        summaries=summarize(selected, breakdowns),
        breakdowns=breakdowns,
        quality=quality,
        errors=errors,
    )
