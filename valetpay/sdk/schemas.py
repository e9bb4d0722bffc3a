"""Pydantic schemas for valet-pay data validation.

Record schemas (shifts, employees, tax payments) accept both the snake_case
names used by this package and the camelCase names found in exported shift
data, and ignore unknown fields since historical records carry extra
columns (manager, notes, incidents...). Config schemas use extra='forbid'
so typos in profile.yaml cause clear errors rather than silent ignoring.
"""

from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .employee.roster import parse_roster


# Fixed per-receipt amounts, identical for every location
RECEIPT_UNIT_PRICE = 18.0
RECEIPT_TIP_AMOUNT = 3.0

_RECORD_CONFIG = ConfigDict(
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


# =============================================================================
# Source records
# =============================================================================


class ShiftEmployeeEntry(BaseModel):
    """One roster line on a shift report."""

    model_config = _RECORD_CONFIG

    name: str = Field(..., min_length=1, description="Employee key or display name")
    hours: float = Field(default=0, description="Hours worked on this shift")
    cash_paid: float = Field(
        default=0,
        description="Cash already paid toward this employee's tax on this shift",
    )

    @field_validator("hours", "cash_paid", mode="before")
    @classmethod
    def _none_is_zero(cls, v):
        return 0 if v is None else v


class ShiftRecord(BaseModel):
    """One recorded work shift at one location."""

    model_config = _RECORD_CONFIG

    id: str = Field(..., description="Shift record ID")
    location_id: int = Field(..., description="Location identifier")
    date: str = Field(..., description="Calendar date, YYYY-MM-DD (not validated)")
    shift: str = Field(default="", description="Shift label, e.g. Lunch or Dinner")
    total_cars: int = Field(default=0)
    credit_transactions: int = Field(default=0)
    receipt_count: int = Field(
        default=0,
        validation_alias=AliasChoices("receipt_count", "receiptCount", "totalReceipts"),
    )
    total_credit_sales: float = Field(default=0)
    total_cash_collected: float = Field(default=0)
    company_cash_turn_in: float = Field(default=0)
    total_turn_in: float = Field(default=0)
    total_receipt_sales: float = Field(default=0)
    total_job_hours: Optional[float] = Field(
        default=None,
        description="Declared total hours; derived from the roster when absent or 0",
    )
    employees: List[ShiftEmployeeEntry] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("employees", mode="before")
    @classmethod
    def _parse_employees(cls, v):
        return parse_roster(v)

    @property
    def roster_hours(self) -> float:
        """Sum of hours across the roster."""
        return sum(e.hours for e in self.employees)


class Employee(BaseModel):
    """Employee roster record."""

    model_config = _RECORD_CONFIG

    key: str = Field(..., min_length=1, description="Short internal key")
    full_name: str = Field(default="", description="Display name")
    active: bool = Field(
        default=True,
        validation_alias=AliasChoices("active", "isActive", "is_active"),
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.key


class TaxPaymentRecord(BaseModel):
    """Cash an employee paid toward estimated tax for one shift."""

    model_config = _RECORD_CONFIG

    employee_key: str = Field(
        ...,
        validation_alias=AliasChoices("employee_key", "employeeKey", "employeeName", "employee"),
    )
    shift_id: str = Field(
        ...,
        validation_alias=AliasChoices("shift_id", "shiftId", "reportId", "report_id"),
    )
    amount: float = Field(
        ...,
        validation_alias=AliasChoices("amount", "paidAmount", "paid_amount"),
    )
    paid_on: Optional[str] = Field(default=None, description="Payment date, YYYY-MM-DD")
    notes: Optional[str] = None

    @field_validator("shift_id", mode="before")
    @classmethod
    def _shift_id_as_str(cls, v):
        return str(v) if v is not None else v


# =============================================================================
# Configuration
# =============================================================================


class LocationRecord(BaseModel):
    """Dynamic location configuration (profile.yaml `locations` entry).

    Missing rate fields fall back to resolver defaults.
    """

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., ge=1)
    name: str = Field(default="")
    active: bool = Field(default=True)
    curbside_rate: Optional[float] = Field(default=None, ge=0, description="Per-car tip baseline")
    turn_in_rate: Optional[float] = Field(default=None, ge=0, description="Per-car company turn-in")
    employee_commission: Optional[float] = Field(default=None, ge=0, description="Per-car commission")


class CompanyProfile(BaseModel):
    """Validated profile.yaml contents."""

    model_config = ConfigDict(extra="forbid")

    company: str = Field(default="")
    locations: List[LocationRecord] = Field(default_factory=list)

    @field_validator("locations")
    @classmethod
    def _unique_ids(cls, v):
        seen = set()
        for loc in v:
            if loc.id in seen:
                raise ValueError(f"duplicate location id {loc.id}")
            seen.add(loc.id)
        return v

    def location_map(self) -> dict:
        """Locations keyed by id."""
        return {loc.id: loc for loc in self.locations}


class LocationRateTable(BaseModel):
    """Resolved per-location constants. Immutable."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location_id: int
    name: str = ""
    commission_rate: float = Field(..., ge=0, description="Dollars per car, all categories")
    per_car_tip_baseline: float = Field(..., ge=0, description="Expected charge per car")
    turn_in_rate: float = Field(..., ge=0, description="Dollars per car owed to the company")
    receipt_unit_price: float = RECEIPT_UNIT_PRICE
    receipt_tip_amount: float = RECEIPT_TIP_AMOUNT
    source: Literal["legacy", "location"] = "legacy"


# =============================================================================
# Derived output
# =============================================================================


class EmployeeFinancialSummary(BaseModel):
    """Per-employee totals for an aggregation window. Never persisted."""

    model_config = ConfigDict(extra="forbid")

    employee_key: str
    full_name: str
    active: bool = True
    shifts: int = 0
    hours: float = 0
    credit_commission: float = 0
    cash_commission: float = 0
    receipt_commission: float = 0
    commission: float = 0
    credit_tips: float = 0
    cash_tips: float = 0
    receipt_tips: float = 0
    tips: float = 0
    earnings: float = 0
    money_owed: float = 0
    tax: float = 0
    cash_paid: float = 0
    outstanding_tax_balance: float = 0
    advance: float = 0
    locations: List[str] = Field(default_factory=list)
