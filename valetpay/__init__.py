"""Valet Pay - payroll reconciliation for valet shift reports."""

__version__ = "0.3.0"
