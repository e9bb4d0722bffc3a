"""Hours-proportional allocation of shift totals to the crew.

Each roster entry receives hours / total_job_hours of every shift total.
There is no weighting by role or seniority.
"""

from dataclasses import asdict, dataclass
from typing import List, Optional

from .quality import ZERO_JOB_HOURS, DataQualityReport
from .schemas import ShiftRecord
from .shift_calc import ShiftTotals


@dataclass(frozen=True)
class EmployeeAllocation:
    """One roster entry's share of a shift."""

    name: str
    hours: float
    hours_percent: float
    credit_commission: float
    cash_commission: float
    receipt_commission: float
    commission: float
    credit_tips: float
    cash_tips: float
    receipt_tips: float
    tips: float
    earnings: float
    money_owed: float
    roster_cash_paid: float

    def to_dict(self) -> dict:
        return asdict(self)


def total_job_hours(shift: ShiftRecord) -> float:
    """Declared total job hours if positive, else the roster sum."""
    declared = shift.total_job_hours or 0
    if declared > 0:
        return declared
    return shift.roster_hours


def allocate_hours(
    totals: ShiftTotals,
    shift: ShiftRecord,
    quality: Optional[DataQualityReport] = None,
) -> List[EmployeeAllocation]:
    """Split shift totals across the roster by hours worked.

    When total job hours is zero every entry gets a zero share.

    Args:
        totals: Output of calc_shift_totals() for this shift
        shift: The shift, for its roster and declared hours
        quality: Optional report that receives a zero-hours issue

    Returns:
        One allocation per roster entry, in roster order
    """
    job_hours = total_job_hours(shift)
    if job_hours <= 0 and shift.employees and quality is not None:
        quality.record(ZERO_JOB_HOURS, shift.id, "total job hours is 0; nothing allocated")

    allocations = []
    for entry in shift.employees:
        pct = entry.hours / job_hours if job_hours > 0 else 0.0
        commission = totals.total_commission * pct
        tips = totals.total_tips * pct
        allocations.append(EmployeeAllocation(
            name=entry.name,
            hours=entry.hours,
            hours_percent=pct,
            credit_commission=totals.credit_commission * pct,
            cash_commission=totals.cash_commission * pct,
            receipt_commission=totals.receipt_commission * pct,
            commission=commission,
            credit_tips=totals.credit_tips * pct,
            cash_tips=totals.cash_tips * pct,
            receipt_tips=totals.receipt_tips * pct,
            tips=tips,
            earnings=commission + tips,
            money_owed=totals.money_owed * pct,
            roster_cash_paid=entry.cash_paid,
        ))
    return allocations
