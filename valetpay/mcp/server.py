"""Valet Pay MCP Server - FastMCP implementation for payroll tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from valetpay.sdk import (
    ValetPayError,
    aggregate_summaries,
    build_shift_breakdown,
    generate_audit_report,
    validate_calculations,
)
from valetpay.sdk import records as sdk_records

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("valet-pay")


# --- Tools ---

@mcp.tool()
async def employee_summaries(
    window: str = Field(default="all", description="'all' or a month as YYYY-MM (e.g., '2025-06')"),
    active_only: bool = Field(default=False, description="Only include active employees"),
) -> dict[str, Any]:
    """Per-employee payroll totals: hours, commission, tips, money owed, earnings, estimated tax, cash paid, tax balance and advance."""
    try:
        inputs = sdk_records.load_inputs()
        result = aggregate_summaries(
            inputs.shifts,
            inputs.employees,
            inputs.payments,
            resolver=inputs.resolver,
            window=window,
            active_only=active_only,
        )
    except (ValetPayError, ValueError) as e:
        logger.error(f"Error computing summaries for {window}: {e}")
        return {"error": str(e), "summaries": []}

    _, warnings = result.quality.to_errors_warnings()
    return {
        "window": result.window.label,
        "shift_count": len(result.breakdowns),
        "summaries": [s.model_dump() for s in result.summaries],
        "errors": result.errors,
        "warnings": warnings,
    }


@mcp.tool()
async def shift_breakdown(
    shift_id: str = Field(description="Shift record ID"),
) -> dict[str, Any]:
    """Totals and per-employee allocation, tax and advance for one shift."""
    try:
        inputs = sdk_records.load_inputs()
        shift = sdk_records.get_shift(shift_id)
        rates = inputs.resolver.resolve(shift.location_id)
    except ValetPayError as e:
        logger.error(f"Error loading shift {shift_id}: {e}")
        return {"error": str(e), "shift": None}

    breakdown = build_shift_breakdown(
        shift, rates, payments=inputs.payments, employees=inputs.employees
    )
    return {"shift": breakdown.to_dict()}


@mcp.tool()
async def audit_calculations() -> dict[str, Any]:
    """Re-check every shift's calculations. Returns counts, critical errors and the plain-text report."""
    try:
        inputs = sdk_records.load_inputs()
    except ValetPayError as e:
        logger.error(f"Error loading records for audit: {e}")
        return {"error": str(e), "report": None}

    summary = validate_calculations(inputs.shifts, inputs.resolver)
    return {
        "total_employees": summary.total_employees,
        "valid_calculations": summary.valid_calculations,
        "invalid_calculations": summary.invalid_calculations,
        "accuracy_rate": summary.accuracy_rate,
        "critical_errors": summary.critical_errors,
        "invalid": [
            {"employee": r.employee_name, "shift_id": r.shift_id, "errors": r.errors}
            for r in summary.results
            if not r.is_valid
        ],
        "report": generate_audit_report(summary),
    }


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
