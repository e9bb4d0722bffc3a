"""Shift-level financial totals.

Tips are inferred with an expected-vs-actual model: every car is assumed to
have been charged the location's per-car tip baseline, and any deviation
from that, in either direction, counts as tip. The absolute value means an
under-charge and an over-charge of the same size produce the same tip.

Cars fall into three categories: credit card, paper receipt, and cash. Cash
cars are not recorded; they are whatever remains of total_cars. A negative
remainder means the counters are inconsistent, and is clamped to zero.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from .quality import CLAMPED_CASH_CARS, DataQualityReport
from .schemas import LocationRateTable, ShiftRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftTotals:
    """Crew-wide totals for one shift."""

    cash_car_count: int
    credit_commission: float
    cash_commission: float
    receipt_commission: float
    total_commission: float
    credit_tips: float
    cash_tips: float
    receipt_tips: float
    total_tips: float
    receipt_revenue: float
    money_owed: float
    expected_turn_in: float
    cash_cars_clamped: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def calc_cash_car_count(shift: ShiftRecord) -> Tuple[int, bool]:
    """Derive the cash-car count.

    Returns:
        (count, clamped) - count is never negative; clamped is True when
        the raw remainder was negative
    """
    raw = shift.total_cars - shift.credit_transactions - shift.receipt_count
    if raw < 0:
        return 0, True
    return raw, False


def calc_shift_totals(
    shift: ShiftRecord,
    rates: LocationRateTable,
    quality: Optional[DataQualityReport] = None,
) -> ShiftTotals:
    """Compute commission, tips and money owed for one shift.

    Args:
        shift: Shift record with raw counters
        rates: Resolved rate table for the shift's location
        quality: Optional report that receives a clamped-counter issue

    Returns:
        ShiftTotals. total_commission is always total_cars x commission_rate;
        the per-category commissions sum to it only when the counters are
        consistent.
    """
    cash_cars, clamped = calc_cash_car_count(shift)
    if clamped and quality is not None:
        quality.record(
            CLAMPED_CASH_CARS,
            shift.id,
            f"credit ({shift.credit_transactions}) + receipts ({shift.receipt_count}) "
            f"exceed total cars ({shift.total_cars}); cash cars clamped to 0",
        )

    rate = rates.commission_rate
    baseline = rates.per_car_tip_baseline

    credit_commission = shift.credit_transactions * rate
    cash_commission = cash_cars * rate
    receipt_commission = shift.receipt_count * rate
    total_commission = shift.total_cars * rate

    credit_tips = abs(shift.credit_transactions * baseline - shift.total_credit_sales)
    cash_kept = shift.total_cash_collected - shift.company_cash_turn_in
    cash_tips = abs(cash_cars * baseline - cash_kept)
    receipt_tips = shift.receipt_count * rates.receipt_tip_amount
    total_tips = credit_tips + cash_tips + receipt_tips

    receipt_revenue = shift.receipt_count * rates.receipt_unit_price
    money_owed = max(0.0, (shift.total_credit_sales + receipt_revenue) - shift.total_turn_in)

    logger.debug(
        f"shift {shift.id}: cars={shift.total_cars} cash_cars={cash_cars} "
        f"commission={total_commission:.2f} tips={total_tips:.2f} owed={money_owed:.2f}"
    )

    return ShiftTotals(
        cash_car_count=cash_cars,
        credit_commission=credit_commission,
        cash_commission=cash_commission,
        receipt_commission=receipt_commission,
        total_commission=total_commission,
        credit_tips=credit_tips,
        cash_tips=cash_tips,
        receipt_tips=receipt_tips,
        total_tips=total_tips,
        receipt_revenue=receipt_revenue,
        money_owed=money_owed,
        expected_turn_in=shift.total_cars * rates.turn_in_rate,
        cash_cars_clamped=clamped,
    )
