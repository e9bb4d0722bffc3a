"""Payroll calculation audit.

Re-derives every roster entry's earnings and flags the entries an
accountant should look at before payroll goes out. Unlike the aggregator,
which recovers quietly, the audit lists every recovered condition as an
error against the shift it came from.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .allocation import total_job_hours
from .breakdown import build_shift_breakdown
from .errors import RateResolutionError
from .periods import parse_shift_date
from .quality import DataQualityReport
from .rates import RateTableResolver
from .schemas import ShiftRecord

# Allowed rounding slop when checking hours share <= 1
_TOLERANCE = 1e-9


@dataclass
class CalculationResult:
    """Audit result for one roster entry."""

    employee_name: str
    shift_id: str
    location_name: str
    date: str
    hours: float
    total_job_hours: float
    hours_percent: float
    commission: float
    tips: float
    total_earnings: float
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


@dataclass
class ValidationSummary:
    """Result of validate_calculations()."""

    results: List[CalculationResult] = field(default_factory=list)
    total_earnings: Dict[str, float] = field(default_factory=dict)
    critical_errors: List[str] = field(default_factory=list)

    @property
    def total_employees(self) -> int:
        return len(self.total_earnings)

    @property
    def valid_calculations(self) -> int:
        return sum(1 for r in self.results if r.is_valid)

    @property
    def invalid_calculations(self) -> int:
        return sum(1 for r in self.results if not r.is_valid)

    @property
    def accuracy_rate(self) -> Optional[float]:
        """Percent of valid calculations, None when nothing was checked."""
        if not self.results:
            return None
        return self.valid_calculations / len(self.results) * 100


def validate_calculations(
    shifts: Iterable[ShiftRecord],
    resolver: Optional[RateTableResolver] = None,
) -> ValidationSummary:
    """Audit every roster entry on every shift.

    Args:
        shifts: Shift records to audit (no window filtering)
        resolver: Rate resolver; defaults to legacy rates only

    Returns:
        ValidationSummary with per-entry results and shift-level critical errors
    """
    if resolver is None:
        resolver = RateTableResolver()

    summary = ValidationSummary()
    earnings: Dict[str, float] = defaultdict(float)

    for shift in shifts:
        _, date_ok = parse_shift_date(shift.date)
        if not date_ok:
            summary.critical_errors.append(f"Shift {shift.id}: unparseable date '{shift.date}'")

        try:
            rates = resolver.resolve(shift.location_id)
        except RateResolutionError as e:
            summary.critical_errors.append(f"Shift {shift.id}: {e}")
            continue

        shift_quality = DataQualityReport()
        breakdown = build_shift_breakdown(shift, rates, quality=shift_quality)
        shift_errors = [issue.message for issue in shift_quality.issues]
        job_hours = total_job_hours(shift)

        for line in breakdown.lines:
            alloc = line.allocation
            errors = list(shift_errors)
            if alloc.hours < 0:
                errors.append(f"Invalid hours: {alloc.hours}")
            if alloc.hours_percent > 1 + _TOLERANCE:
                errors.append(f"Hours exceed total job hours: {alloc.hours} > {job_hours}")
            if alloc.earnings < 0:
                errors.append(f"Negative earnings calculated: {alloc.earnings:.2f}")

            result = CalculationResult(
                employee_name=alloc.name,
                shift_id=shift.id,
                location_name=breakdown.location_name,
                date=shift.date,
                hours=alloc.hours,
                total_job_hours=job_hours,
                hours_percent=alloc.hours_percent,
                commission=alloc.commission,
                tips=alloc.tips,
                total_earnings=alloc.earnings,
                errors=errors,
            )
            summary.results.append(result)
            earnings[alloc.name] += alloc.earnings

            if errors:
                summary.critical_errors.append(
                    f"Shift {shift.id} - {alloc.name}: {', '.join(errors)}"
                )

    summary.total_earnings = dict(earnings)
    return summary


def generate_audit_report(summary: ValidationSummary, generated_at: Optional[datetime] = None) -> str:
    """Render a ValidationSummary as a plain-text audit report."""
    generated_at = generated_at or datetime.now()
    accuracy = summary.accuracy_rate
    accuracy_text = f"{accuracy:.2f}%" if accuracy is not None else "n/a"

    lines = [
        "=== PAYROLL CALCULATION AUDIT REPORT ===",
        f"Generated: {generated_at.isoformat(timespec='seconds')}",
        "",
        "SUMMARY:",
        f"- Total Employees: {summary.total_employees}",
        f"- Valid Calculations: {summary.valid_calculations}",
        f"- Invalid Calculations: {summary.invalid_calculations}",
        f"- Accuracy Rate: {accuracy_text}",
        "",
        "EMPLOYEE TOTAL EARNINGS:",
    ]

    for name, total in sorted(summary.total_earnings.items(), key=lambda kv: kv[1], reverse=True):
        lines.append(f"{name}: ${total:,.2f}")

    if summary.critical_errors:
        lines.append("")
        lines.append("CRITICAL ERRORS REQUIRING ATTENTION:")
        for error in summary.critical_errors:
            lines.append(f"- {error}")

    return "\n".join(lines) + "\n"
