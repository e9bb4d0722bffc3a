"""CSV and fixed-column table export of employee summaries.

The CSV column order is fixed; accounting imports depend on it.
"""

import csv
import io
from pathlib import Path
from typing import Iterable, List, Sequence, TextIO, Union

from .schemas import EmployeeFinancialSummary

CSV_COLUMNS = [
    "Employee",
    "Hours",
    "Location",
    "Credit Commission",
    "Cash Commission",
    "Receipt Commission",
    "Credit Tips",
    "Cash Tips",
    "Receipt Tips",
    "Total Commission",
    "Total Tips",
    "Money Owed",
    "Total Earnings",
    "Est. Tax (22%)",
]

# Columns of the PDF payroll table (numbers only, layout lives elsewhere)
TABLE_COLUMNS = [
    "Employee",
    "Hours",
    "Commission",
    "Tips",
    "Money Owed",
    "Total Earnings",
    "Est. Tax (22%)",
    "Cash Paid",
    "Tax Balance",
    "Advance",
]


def _money(value: float) -> str:
    return f"{value:.2f}"


def summary_csv_rows(summaries: Iterable[EmployeeFinancialSummary]) -> List[List[str]]:
    """Data rows (no header) in CSV_COLUMNS order.

    Expects one summary per (employee, location) pair, as produced by
    summarize_by_location(); multiple locations are joined with '; '.
    """
    rows = []
    for s in summaries:
        rows.append([
            s.full_name,
            f"{s.hours:.2f}",
            "; ".join(s.locations),
            _money(s.credit_commission),
            _money(s.cash_commission),
            _money(s.receipt_commission),
            _money(s.credit_tips),
            _money(s.cash_tips),
            _money(s.receipt_tips),
            _money(s.commission),
            _money(s.tips),
            _money(s.money_owed),
            _money(s.earnings),
            _money(s.tax),
        ])
    return rows


def write_summary_csv(
    summaries: Sequence[EmployeeFinancialSummary],
    output: Union[Path, str, TextIO],
) -> Union[Path, TextIO]:
    """Write summaries to a CSV file or open text stream.

    Args:
        summaries: Summary rows
        output: File path, or a writable text stream

    Returns:
        The path written, or the stream
    """
    if isinstance(output, (str, Path)):
        output_path = Path(output)
        with open(output_path, "w", newline="") as csvfile:
            _write_rows(csv.writer(csvfile), summaries)
        return output_path

    _write_rows(csv.writer(output), summaries)
    return output


def _write_rows(writer, summaries) -> None:
    writer.writerow(CSV_COLUMNS)
    writer.writerows(summary_csv_rows(summaries))


def summary_csv_text(summaries: Sequence[EmployeeFinancialSummary]) -> str:
    """CSV export as a string."""
    buf = io.StringIO()
    write_summary_csv(summaries, buf)
    return buf.getvalue()


def summary_table_rows(summaries: Iterable[EmployeeFinancialSummary]) -> List[List[str]]:
    """Rows in TABLE_COLUMNS order for the PDF payroll table."""
    return [
        [
            s.full_name,
            f"{s.hours:.1f}",
            _money(s.commission),
            _money(s.tips),
            _money(s.money_owed),
            _money(s.earnings),
            _money(s.tax),
            _money(s.cash_paid),
            _money(s.outstanding_tax_balance),
            _money(s.advance),
        ]
        for s in summaries
    ]
