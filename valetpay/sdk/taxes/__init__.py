"""taxes - Estimated tax and advance calculations.

Scope:
- Flat 22% estimated withholding on shift earnings
- Reconciling roster cash paid with tax payment records
- Advance (cash due now) and outstanding tax balance per shift

Constraints:
- Pure calculation - no records access, receives data, returns results

Usage:
    from valetpay.sdk.taxes import calc_tax_and_advance

    result = calc_tax_and_advance(earnings=90, commission=40, tips=50, money_owed=10)
"""

from .withholding import (
    ESTIMATED_TAX_RATE,
    TaxAdvance,
    calc_estimated_tax,
    calc_tax_and_advance,
    sum_tax_payments,
)

__all__ = [
    "ESTIMATED_TAX_RATE",
    "TaxAdvance",
    "calc_estimated_tax",
    "calc_tax_and_advance",
    "sum_tax_payments",
]
