"""Shift roster parsing and employee matching.

Shift records store their roster as a JSON list of {name, hours, cashPaid}
objects. Older rows were written as strings, some of them double-encoded
by the database layer, e.g.:

    '{"{\\"name\\":\\"kevin\\",\\"hours\\":6,\\"cashPaid\\":19}"}'

parse_roster() recovers entries from all of these forms.

Roster names were historically written as either the employee's short key
or their display name, so matching checks both, case-insensitively.
"""

import json
import logging
import re
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[^{}]*\}")


def _keep_named(entries: Iterable[Any]) -> List[Any]:
    """Drop dict entries without a usable name."""
    kept = []
    for entry in entries:
        if isinstance(entry, dict):
            name = entry.get("name")
            if not isinstance(name, str) or not name.strip():
                logger.warning(f"roster entry without a name skipped: {entry}")
                continue
        kept.append(entry)
    return kept


def _as_list(parsed: Any) -> Optional[List[Any]]:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        return [parsed]
    return None


def _parse_wrapped(raw: str) -> List[dict]:
    """Parse the double-encoded '{"{...}","{...}"}' form."""
    cleaned = raw
    if cleaned.startswith('{"') and cleaned.endswith('"}'):
        cleaned = cleaned[2:-2]
    cleaned = cleaned.replace('\\"', '"').replace('""', '"')

    entries = []
    for match in _JSON_OBJECT.findall(cleaned):
        try:
            entry = json.loads(match)
        except json.JSONDecodeError:
            logger.warning(f"roster fragment could not be parsed: {match}")
            continue
        hours = entry.get("hours", "")
        if (hours is None or isinstance(hours, (int, float))) and entry.get("name"):
            entries.append(entry)
    return entries


def parse_roster(raw: Any) -> List[Any]:
    """Parse a shift roster from any of its stored forms.

    Args:
        raw: None, a list of entries, or a JSON string (plain or
             double-encoded)

    Returns:
        List of roster entries (dicts, or already-built models passed through).
        Unrecoverable input yields an empty list and a warning.
    """
    if raw is None:
        return []

    if isinstance(raw, (list, tuple)):
        return _keep_named(raw)

    if isinstance(raw, dict):
        return _keep_named([raw])

    if not isinstance(raw, str):
        logger.warning(f"roster is neither string nor list: {type(raw).__name__}")
        return []

    text = raw.strip()
    if not text:
        return []

    try:
        parsed = _as_list(json.loads(text))
        if parsed is not None:
            return _keep_named(parsed)
    except json.JSONDecodeError:
        pass

    entries = _parse_wrapped(text)
    if not entries:
        logger.warning(f"roster could not be parsed: {text[:80]}")
    return entries


def normalize_name(name: Optional[str]) -> str:
    """Lowercase and strip a roster name or employee identifier."""
    return (name or "").strip().lower()


def match_employee(roster_name: str, employee) -> bool:
    """True if a roster name refers to the given employee.

    Compares case-insensitively against the employee's key and full name.
    """
    shift_name = normalize_name(roster_name)
    if not shift_name:
        return False
    return shift_name in (normalize_name(employee.key), normalize_name(employee.full_name))


def find_employee(roster_name: str, employees: Iterable[Any]) -> Optional[Any]:
    """The employee a roster name refers to, or None.

    A key match wins over a full-name match. A name that still matches
    more than one employee goes to the first and is logged.
    """
    shift_name = normalize_name(roster_name)
    if not shift_name:
        return None

    by_key = []
    by_full_name = []
    for employee in employees:
        if normalize_name(employee.key) == shift_name:
            by_key.append(employee)
        elif normalize_name(employee.full_name) == shift_name:
            by_full_name.append(employee)

    matches = by_key + by_full_name
    if len(matches) > 1:
        logger.warning(
            f"roster name '{roster_name}' matches {', '.join(e.key for e in matches)}; "
            f"crediting {matches[0].key}"
        )
    return matches[0] if matches else None


def surname_key(full_name: str) -> str:
    """Sort key: last whitespace-delimited token, case-insensitive."""
    parts = (full_name or "").split()
    return parts[-1].lower() if parts else ""
