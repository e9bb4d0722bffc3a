"""Estimated tax, cash paid and advance for one employee on one shift.

A flat 22% estimate is withheld from earnings. It is a heuristic, not a
tax engine, and is not configurable per jurisdiction.

Cash paid toward the estimate can be recorded twice: on the shift roster
(cashPaid) and as tax payment records. Both describe the same payment, so
the larger of the two is used, never the sum. Multiple payment records for
the same employee and shift do sum.
"""

from dataclasses import asdict, dataclass
from typing import Iterable

from ..employee.roster import match_employee, normalize_name

ESTIMATED_TAX_RATE = 0.22


@dataclass(frozen=True)
class TaxAdvance:
    """Tax position for one employee on one shift."""

    tax: float
    cash_paid: float
    advance: float
    outstanding_tax_balance: float

    def to_dict(self) -> dict:
        return asdict(self)


def calc_estimated_tax(earnings: float) -> float:
    """Flat estimated withholding on earnings."""
    return earnings * ESTIMATED_TAX_RATE


def sum_tax_payments(payments: Iterable, employee, shift_id: str) -> float:
    """Total of all payment records for one employee on one shift.

    Args:
        payments: TaxPaymentRecord objects
        employee: Employee (matched by key or full name) or a plain name string
        shift_id: Shift record ID
    """
    total = 0.0
    for payment in payments:
        if str(payment.shift_id) != str(shift_id):
            continue
        if isinstance(employee, str):
            matched = normalize_name(payment.employee_key) == normalize_name(employee)
        else:
            matched = match_employee(payment.employee_key, employee)
        if matched:
            total += payment.amount
    return total


def calc_tax_and_advance(
    earnings: float,
    commission: float,
    tips: float,
    money_owed: float,
    roster_cash_paid: float = 0.0,
    recorded_payments: float = 0.0,
) -> TaxAdvance:
    """Compute tax, cash paid, advance and outstanding balance.

    Args:
        earnings: Employee's share of commission + tips for the shift
        commission: Employee's commission share
        tips: Employee's tips share
        money_owed: Employee's share of shift money owed
        roster_cash_paid: cashPaid from the shift roster entry
        recorded_payments: Sum of tax payment records for this employee+shift

    Returns:
        TaxAdvance. outstanding_tax_balance is never negative; a surplus is
        not a refund.
    """
    tax = calc_estimated_tax(earnings)
    cash_paid = max(roster_cash_paid, recorded_payments)
    advance = commission + tips - money_owed
    outstanding = max(0.0, tax - money_owed - cash_paid)
    return TaxAdvance(
        tax=tax,
        cash_paid=cash_paid,
        advance=advance,
        outstanding_tax_balance=outstanding,
    )
