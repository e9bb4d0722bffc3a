"""Tests for shift-level commission, tips and money owed."""

import pytest

from valetpay.sdk import ShiftRecord, calc_cash_car_count, calc_shift_totals, resolve_rate_table
from valetpay.sdk.quality import CLAMPED_CASH_CARS, DataQualityReport


def make_shift(**overrides) -> ShiftRecord:
    """Build a shift from camelCase fields, as stored shift data uses."""
    data = {
        "id": "s1",
        "locationId": 1,
        "date": "2025-06-14",
        "totalCars": 10,
        "creditTransactions": 4,
        "receiptCount": 0,
        "totalCreditSales": 60,
        "totalCashCollected": 90,
        "companyCashTurnIn": 90,
        "totalTurnIn": 110,
        "totalReceiptSales": 0,
        "employees": [],
    }
    data.update(overrides)
    return ShiftRecord.model_validate(data)


class TestBasicShift:
    """Location 1, 10 cars, 4 credit, no receipts."""

    def test_totals(self):
        totals = calc_shift_totals(make_shift(), resolve_rate_table(1))

        assert totals.cash_car_count == 6
        assert totals.total_commission == pytest.approx(40)
        assert totals.credit_tips == pytest.approx(0)
        assert totals.cash_tips == pytest.approx(90)
        assert totals.receipt_tips == pytest.approx(0)
        assert totals.total_tips == pytest.approx(90)
        assert totals.money_owed == pytest.approx(0)
        assert totals.expected_turn_in == pytest.approx(110)
        assert not totals.cash_cars_clamped

    def test_category_commissions_sum_to_total(self):
        totals = calc_shift_totals(make_shift(receiptCount=2), resolve_rate_table(1))

        assert totals.credit_commission + totals.cash_commission + totals.receipt_commission == pytest.approx(
            totals.total_commission
        )


class TestTips:
    """Tips are the absolute deviation from the per-car baseline."""

    def test_under_and_over_charge_give_same_tip(self):
        rates = resolve_rate_table(1)
        under = calc_shift_totals(make_shift(totalCreditSales=50), rates)
        over = calc_shift_totals(make_shift(totalCreditSales=70), rates)

        assert under.credit_tips == pytest.approx(10)
        assert over.credit_tips == pytest.approx(10)

    def test_receipts(self):
        shift = make_shift(totalCars=10, creditTransactions=4, receiptCount=2)
        totals = calc_shift_totals(shift, resolve_rate_table(1))

        assert totals.cash_car_count == 4
        assert totals.receipt_tips == pytest.approx(6)
        assert totals.receipt_revenue == pytest.approx(36)
        assert totals.receipt_commission == pytest.approx(8)

    def test_cash_tips_use_cash_kept_after_turn_in(self):
        shift = make_shift(totalCashCollected=150, companyCashTurnIn=40)
        totals = calc_shift_totals(shift, resolve_rate_table(1))

        # 6 cash cars x 15 = 90 expected, 110 kept
        assert totals.cash_tips == pytest.approx(20)

    def test_location_baseline_applies(self):
        totals = calc_shift_totals(make_shift(locationId=4), resolve_rate_table(4))

        assert totals.credit_tips == pytest.approx(abs(4 * 13 - 60))
        assert totals.total_commission == pytest.approx(60)


class TestMoneyOwed:
    """Money owed is never negative."""

    def test_owed_when_turn_in_short(self):
        shift = make_shift(receiptCount=2, totalCreditSales=100, totalTurnIn=80)
        totals = calc_shift_totals(shift, resolve_rate_table(1))

        assert totals.money_owed == pytest.approx(100 + 36 - 80)

    def test_clamped_at_zero(self):
        totals = calc_shift_totals(make_shift(totalTurnIn=1000), resolve_rate_table(1))

        assert totals.money_owed == 0


class TestCashCarClamping:
    """Inconsistent counters clamp cash cars to zero."""

    def test_negative_remainder_clamped(self):
        shift = make_shift(totalCars=3, creditTransactions=4, receiptCount=1)

        assert calc_cash_car_count(shift) == (0, True)

    def test_clamp_reported(self):
        shift = make_shift(totalCars=3, creditTransactions=4, receiptCount=1)
        quality = DataQualityReport()

        totals = calc_shift_totals(shift, resolve_rate_table(1), quality)

        assert totals.cash_car_count == 0
        assert totals.cash_cars_clamped
        assert totals.cash_commission == 0
        assert totals.total_commission == pytest.approx(12)
        assert quality.counts == {CLAMPED_CASH_CARS: 1}

    def test_no_report_when_consistent(self):
        quality = DataQualityReport()

        calc_shift_totals(make_shift(), resolve_rate_table(1), quality)

        assert not quality.has_issues


class TestCarPartition:
    """Consistent counters partition total cars."""

    @pytest.mark.parametrize("total,credit,receipts", [(10, 4, 0), (10, 0, 10), (7, 3, 2), (0, 0, 0)])
    def test_categories_sum_to_total(self, total, credit, receipts):
        shift = make_shift(totalCars=total, creditTransactions=credit, receiptCount=receipts)

        cash, clamped = calc_cash_car_count(shift)

        assert not clamped
        assert credit + receipts + cash == total
