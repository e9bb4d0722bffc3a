"""Tests for folding shifts into per-employee summaries."""

from datetime import date

import pytest

from valetpay.sdk import (
    Employee,
    LocationRecord,
    RateTableResolver,
    ShiftRecord,
    TaxPaymentRecord,
    aggregate_summaries,
    build_shift_breakdown,
    resolve_rate_table,
    summarize_by_location,
)
from valetpay.sdk.quality import BAD_DATE, RATE_ERROR


def make_shift(shift_id, date_str, employees, location_id=1, **overrides) -> ShiftRecord:
    data = {
        "id": shift_id,
        "locationId": location_id,
        "date": date_str,
        "totalCars": 10,
        "creditTransactions": 4,
        "receiptCount": 0,
        "totalCreditSales": 60,
        "totalCashCollected": 90,
        "companyCashTurnIn": 90,
        "totalTurnIn": 110,
        "employees": employees,
    }
    data.update(overrides)
    return ShiftRecord.model_validate(data)


EMPLOYEES = [
    Employee(key="ana", full_name="Ana Zamora"),
    Employee(key="ben", full_name="Ben Adams"),
    Employee(key="cy", full_name="Cy Moreno", active=False),
]


def by_key(result):
    return {s.employee_key: s for s in result.summaries}


class TestAggregateSummaries:
    """Per-employee totals across shifts."""

    def test_single_shift_totals(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}, {"name": "ben", "hours": 15}])]

        result = aggregate_summaries(shifts, EMPLOYEES)
        summaries = by_key(result)

        assert summaries["ana"].commission == pytest.approx(10)
        assert summaries["ana"].tips == pytest.approx(22.5)
        assert summaries["ana"].earnings == pytest.approx(32.5)
        assert summaries["ana"].tax == pytest.approx(32.5 * 0.22)
        assert summaries["ana"].shifts == 1
        assert summaries["ben"].hours == pytest.approx(15)
        assert summaries["ben"].locations == ["The Capital Grille"]

    def test_sums_across_shifts(self):
        shifts = [
            make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 4}]),
            make_shift("s2", "2025-06-15", [{"name": "Ana Zamora", "hours": 6}]),
        ]

        ana = by_key(aggregate_summaries(shifts, EMPLOYEES))["ana"]

        assert ana.shifts == 2
        assert ana.hours == pytest.approx(10)
        assert ana.commission == pytest.approx(80)

    def test_employee_without_shifts_has_zero_row(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}])]

        ben = by_key(aggregate_summaries(shifts, EMPLOYEES))["ben"]

        assert ben.shifts == 0
        assert ben.earnings == 0
        assert ben.locations == []

    def test_sorted_by_surname(self):
        result = aggregate_summaries([], EMPLOYEES)

        assert [s.full_name for s in result.summaries] == ["Ben Adams", "Cy Moreno", "Ana Zamora"]

    def test_active_only(self):
        result = aggregate_summaries([], EMPLOYEES, active_only=True)

        assert "cy" not in by_key(result)
        assert len(result.summaries) == 2

    def test_recomputation_is_idempotent(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}, {"name": "ben", "hours": 15}])]

        first = aggregate_summaries(shifts, EMPLOYEES)
        second = aggregate_summaries(shifts, EMPLOYEES)

        assert [s.model_dump() for s in first.summaries] == [s.model_dump() for s in second.summaries]


class TestWindowFiltering:
    """Month windows compare local calendar dates."""

    shifts = [
        make_shift("may", "2025-05-31", [{"name": "ana", "hours": 1}]),
        make_shift("jun", "2025-06-01", [{"name": "ana", "hours": 2}]),
        make_shift("jul", "2025-07-01", [{"name": "ana", "hours": 4}]),
    ]

    def test_month(self):
        result = aggregate_summaries(self.shifts, EMPLOYEES, window="2025-06")

        assert by_key(result)["ana"].hours == pytest.approx(2)
        assert [b.shift.id for b in result.breakdowns] == ["jun"]

    def test_all(self):
        result = aggregate_summaries(self.shifts, EMPLOYEES, window="all")

        assert by_key(result)["ana"].hours == pytest.approx(7)

    def test_breakdowns_sorted_by_date(self):
        result = aggregate_summaries(list(reversed(self.shifts)), EMPLOYEES)

        assert [b.shift.id for b in result.breakdowns] == ["may", "jun", "jul"]

    def test_bad_date_uses_today_and_is_reported(self):
        shifts = [make_shift("odd", "not-a-date", [{"name": "ana", "hours": 3}])]

        result = aggregate_summaries(shifts, EMPLOYEES, window="2025-07", today=date(2025, 7, 4))

        assert by_key(result)["ana"].hours == pytest.approx(3)
        assert result.quality.counts == {BAD_DATE: 1}

    def test_invalid_window_raises(self):
        with pytest.raises(ValueError):
            aggregate_summaries(self.shifts, EMPLOYEES, window="June")


class TestRateErrors:
    """A shift with no rate table is skipped and reported."""

    def test_unresolvable_shift_does_not_abort(self):
        shifts = [
            make_shift("ok", "2025-06-14", [{"name": "ana", "hours": 5}]),
            make_shift("bad", "2025-06-15", [{"name": "ana", "hours": 5}], location_id=99),
        ]

        result = aggregate_summaries(shifts, EMPLOYEES)

        assert by_key(result)["ana"].shifts == 1
        assert len(result.errors) == 1
        assert "bad" in result.errors[0]
        assert result.quality.counts == {RATE_ERROR: 1}

    def test_dynamic_location_from_resolver(self):
        resolver = RateTableResolver({12: LocationRecord(id=12, name="Fogo", employee_commission=5)})
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}], location_id=12)]

        result = aggregate_summaries(shifts, EMPLOYEES, resolver=resolver)

        assert by_key(result)["ana"].commission == pytest.approx(50)
        assert by_key(result)["ana"].locations == ["Fogo"]
        assert result.errors == []


class TestTaxPayments:
    """Recorded payments reduce the outstanding balance."""

    def test_payment_recorded_under_key_matches_display_name_on_roster(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "Ana Zamora", "hours": 10}])]
        payments = [TaxPaymentRecord(employee_key="ana", shift_id="s1", amount=5)]

        ana = by_key(aggregate_summaries(shifts, EMPLOYEES, payments))["ana"]

        # earnings 130, tax 28.6, nothing owed
        assert ana.cash_paid == pytest.approx(5)
        assert ana.outstanding_tax_balance == pytest.approx(28.6 - 5)

    def test_roster_cash_paid_and_record_take_max(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 10, "cashPaid": 8}])]
        payments = [TaxPaymentRecord(employee_key="ana", shift_id="s1", amount=5)]

        ana = by_key(aggregate_summaries(shifts, EMPLOYEES, payments))["ana"]

        assert ana.cash_paid == pytest.approx(8)

    def test_payment_counted_once_when_listed_by_key_and_name(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}, {"name": "Ana Zamora", "hours": 5}])]
        payments = [TaxPaymentRecord(employee_key="ana", shift_id="s1", amount=4)]

        result = aggregate_summaries(shifts, EMPLOYEES, payments)
        ana = by_key(result)["ana"]

        assert ana.earnings == pytest.approx(130)
        assert ana.cash_paid == pytest.approx(4)
        assert ana.outstanding_tax_balance == pytest.approx(28.6 - 4)
        assert [line.tax.cash_paid for line in result.breakdowns[0].lines] == pytest.approx([2, 2])

    def test_duplicate_lines_split_payment_by_hours(self):
        shift = make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 6}, {"name": "Ana Zamora", "hours": 2}])
        payments = [TaxPaymentRecord(employee_key="ana", shift_id="s1", amount=8)]

        breakdown = build_shift_breakdown(shift, resolve_rate_table(1), payments, EMPLOYEES)

        assert [line.tax.cash_paid for line in breakdown.lines] == pytest.approx([6, 2])

    def test_money_owed_offsets_advance(self):
        shifts = [make_shift(
            "s1", "2025-06-14", [{"name": "ana", "hours": 10}],
            totalCreditSales=100, totalTurnIn=40,
        )]

        ana = by_key(aggregate_summaries(shifts, EMPLOYEES))["ana"]

        assert ana.money_owed == pytest.approx(60)
        assert ana.advance == pytest.approx(ana.commission + ana.tips - 60)
        assert ana.outstanding_tax_balance == 0


class TestSummarizeByLocation:
    def test_one_row_per_location(self):
        resolver = RateTableResolver({12: LocationRecord(id=12, name="Fogo")})
        shifts = [
            make_shift("s1", "2025-06-14", [{"name": "ana", "hours": 5}]),
            make_shift("s2", "2025-06-15", [{"name": "ana", "hours": 5}], location_id=12),
        ]
        result = aggregate_summaries(shifts, EMPLOYEES, resolver=resolver)

        rows = summarize_by_location(EMPLOYEES, result.breakdowns)

        assert [(r.employee_key, r.locations) for r in rows] == [
            ("ana", ["Fogo"]),
            ("ana", ["The Capital Grille"]),
        ]


class TestRosterNameOwnership:
    """Each roster line is credited to exactly one employee."""

    def test_key_match_beats_full_name_match(self):
        employees = [Employee(key="john", full_name="John Smith"), Employee(key="jd", full_name="John")]
        shifts = [make_shift("s1", "2025-06-14", [{"name": "john", "hours": 10}])]

        summaries = by_key(aggregate_summaries(shifts, employees))

        assert summaries["john"].earnings == pytest.approx(130)
        assert summaries["jd"].earnings == 0
        assert summaries["jd"].shifts == 0

    def test_null_hours_entry_keeps_shift(self):
        shifts = [make_shift("s1", "2025-06-14", [{"name": "ana", "hours": None}, {"name": "ben", "hours": 10}])]

        summaries = by_key(aggregate_summaries(shifts, EMPLOYEES))

        assert summaries["ben"].earnings == pytest.approx(130)
        assert summaries["ana"].earnings == 0
        assert summaries["ana"].shifts == 1


class TestShiftBreakdown:
    def test_lines_carry_employee_key(self):
        shift = make_shift("s1", "2025-06-14", [{"name": "Ben Adams", "hours": 5}, {"name": "temp", "hours": 5}])

        breakdown = build_shift_breakdown(shift, resolve_rate_table(1), employees=EMPLOYEES)

        assert [line.employee_key for line in breakdown.lines] == ["ben", None]
        assert breakdown.total_job_hours == 10
        assert breakdown.to_dict()["employees"][0]["name"] == "Ben Adams"
