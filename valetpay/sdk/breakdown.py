"""Per-shift breakdown: totals, allocation and tax for every roster entry.

This is the single place where the shift calculator, hours allocator and
tax calculator are chained. The aggregator, the audit and the CLI shift
view all build on it.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .allocation import EmployeeAllocation, allocate_hours, total_job_hours
from .employee.roster import find_employee, normalize_name
from .quality import DataQualityReport
from .schemas import Employee, LocationRateTable, ShiftRecord, TaxPaymentRecord
from .shift_calc import ShiftTotals, calc_shift_totals
from .taxes import TaxAdvance, calc_tax_and_advance, sum_tax_payments


@dataclass(frozen=True)
class ShiftLine:
    """One roster entry's allocation and tax position."""

    allocation: EmployeeAllocation
    tax: TaxAdvance
    employee_key: Optional[str] = None

    @property
    def name(self) -> str:
        return self.allocation.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "employee_key": self.employee_key,
            **self.allocation.to_dict(),
            **self.tax.to_dict(),
        }


@dataclass
class ShiftBreakdown:
    """Everything derived from one shift."""

    shift: ShiftRecord
    rates: LocationRateTable
    totals: ShiftTotals
    total_job_hours: float
    lines: List[ShiftLine] = field(default_factory=list)

    @property
    def location_name(self) -> str:
        return self.rates.name or f"Location {self.rates.location_id}"

    def to_dict(self) -> dict:
        return {
            "shift_id": self.shift.id,
            "date": self.shift.date,
            "shift": self.shift.shift,
            "location_id": self.shift.location_id,
            "location": self.location_name,
            "rates": self.rates.model_dump(),
            "totals": self.totals.to_dict(),
            "total_job_hours": self.total_job_hours,
            "employees": [line.to_dict() for line in self.lines],
        }


def _payment_share(alloc: EmployeeAllocation, same_employee: List[EmployeeAllocation]) -> float:
    """Fraction of an employee's recorded payments carried by one of their lines.

    An employee listed twice on a roster (by key and by display name) has
    their payments for the shift split across those lines by hours.
    """
    if len(same_employee) == 1:
        return 1.0
    hours = sum(a.hours for a in same_employee)
    if hours > 0:
        return alloc.hours / hours
    return 1.0 / len(same_employee)


def build_shift_breakdown(
    shift: ShiftRecord,
    rates: LocationRateTable,
    payments: Iterable[TaxPaymentRecord] = (),
    employees: Sequence[Employee] = (),
    quality: Optional[DataQualityReport] = None,
) -> ShiftBreakdown:
    """Run the full per-shift pipeline.

    Args:
        shift: Shift record
        rates: Rate table resolved for shift.location_id
        payments: Tax payment records (any shift; filtered here)
        employees: Known employees, used to match payments recorded under a
                   key when the roster uses a display name (or vice versa)
        quality: Optional report for recovered conditions
    """
    payments = list(payments)
    totals = calc_shift_totals(shift, rates, quality)
    allocations = allocate_hours(totals, shift, quality)

    owners = []
    by_owner: Dict[str, List[EmployeeAllocation]] = {}
    for alloc in allocations:
        employee = find_employee(alloc.name, employees)
        owner = employee.key if employee else normalize_name(alloc.name)
        owners.append((employee, owner))
        by_owner.setdefault(owner, []).append(alloc)

    lines = []
    for alloc, (employee, owner) in zip(allocations, owners):
        recorded = sum_tax_payments(payments, employee or alloc.name, shift.id)
        tax = calc_tax_and_advance(
            earnings=alloc.earnings,
            commission=alloc.commission,
            tips=alloc.tips,
            money_owed=alloc.money_owed,
            roster_cash_paid=alloc.roster_cash_paid,
            recorded_payments=recorded * _payment_share(alloc, by_owner[owner]),
        )
        lines.append(ShiftLine(
            allocation=alloc,
            tax=tax,
            employee_key=employee.key if employee else None,
        ))

    return ShiftBreakdown(
        shift=shift,
        rates=rates,
        totals=totals,
        total_job_hours=total_job_hours(shift),
        lines=lines,
    )
