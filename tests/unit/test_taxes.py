"""Tests for estimated tax, cash paid and advance."""

import pytest

from valetpay.sdk import Employee, TaxPaymentRecord, calc_tax_and_advance, sum_tax_payments


def payment(employee: str, shift_id: str, amount: float) -> TaxPaymentRecord:
    return TaxPaymentRecord(employee_key=employee, shift_id=shift_id, amount=amount)


class TestTaxAndAdvance:
    """Flat 22% estimate with money owed and cash paid offsets."""

    def test_earnings_90_owed_10(self):
        result = calc_tax_and_advance(earnings=90, commission=30, tips=60, money_owed=10)

        assert result.tax == pytest.approx(19.8)
        assert result.cash_paid == 0
        assert result.outstanding_tax_balance == pytest.approx(9.8)
        assert result.advance == pytest.approx(80)

    def test_balance_never_negative(self):
        result = calc_tax_and_advance(earnings=90, commission=30, tips=60, money_owed=10, roster_cash_paid=50)

        assert result.outstanding_tax_balance == 0

    def test_cash_paid_is_max_not_sum(self):
        result = calc_tax_and_advance(
            earnings=100, commission=50, tips=50, money_owed=0,
            roster_cash_paid=5, recorded_payments=8,
        )

        assert result.cash_paid == 8
        assert result.outstanding_tax_balance == pytest.approx(22 - 8)

    def test_more_cash_paid_never_raises_balance(self):
        balances = [
            calc_tax_and_advance(
                earnings=100, commission=50, tips=50, money_owed=3, recorded_payments=paid
            ).outstanding_tax_balance
            for paid in (0, 5, 10, 15, 30)
        ]

        assert balances == sorted(balances, reverse=True)

    def test_more_money_owed_never_raises_balance(self):
        balances = [
            calc_tax_and_advance(earnings=100, commission=50, tips=50, money_owed=owed).outstanding_tax_balance
            for owed in (0, 5, 10, 30)
        ]

        assert balances == sorted(balances, reverse=True)
        assert balances[-1] == 0

    def test_advance_can_be_negative(self):
        result = calc_tax_and_advance(earnings=10, commission=4, tips=6, money_owed=25)

        assert result.advance == pytest.approx(-15)


class TestSumTaxPayments:
    """Payment records for one employee on one shift sum."""

    def test_multiple_records_sum(self):
        payments = [payment("kevin", "s1", 5), payment("kevin", "s1", 7.5), payment("kevin", "s2", 100)]

        assert sum_tax_payments(payments, "kevin", "s1") == pytest.approx(12.5)

    def test_name_match_is_case_insensitive(self):
        payments = [payment("Kevin ", "s1", 5)]

        assert sum_tax_payments(payments, "KEVIN", "s1") == 5

    def test_employee_matches_key_or_full_name(self):
        employee = Employee(key="kevin", full_name="Kevin Ortiz")
        payments = [payment("kevin", "s1", 5), payment("kevin ortiz", "s1", 2), payment("other", "s1", 9)]

        assert sum_tax_payments(payments, employee, "s1") == pytest.approx(7)

    def test_shift_id_compared_as_string(self):
        payments = [TaxPaymentRecord.model_validate({"employeeKey": "kevin", "shiftId": 42, "paidAmount": 3})]

        assert sum_tax_payments(payments, "kevin", 42) == 3

    def test_no_payments(self):
        assert sum_tax_payments([], "kevin", "s1") == 0
