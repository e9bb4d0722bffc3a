"""employee - Roster parsing and employee identity matching.

Scope:
- Parsing shift rosters from their stored forms (roster.py)
- Matching roster names to Employee records by key or display name
- Surname ordering for presentation

Constraints:
- No records access and no schema imports: functions operate on whatever
  objects expose `key`/`full_name` (employees) and `employees` (shifts)

Usage:
    from valetpay.sdk.employee import parse_roster, find_employee

    entries = parse_roster('[{"name": "kevin", "hours": 6}]')
    employee = find_employee("Kevin Ortiz", employees)
"""

from .roster import (
    parse_roster,
    normalize_name,
    match_employee,
    find_employee,
    surname_key,
)

__all__ = [
    "parse_roster",
    "normalize_name",
    "match_employee",
    "find_employee",
    "surname_key",
]
