"""Per-location rate table resolution.

Two tiers:
- Legacy locations (ids 1-4 and the special id 7) were configured before the
  location table existed and keep hard-coded constants. They always use
  these values; a location record only contributes its display name.
- Every other location id >= 5 reads curbside_rate / turn_in_rate /
  employee_commission from its location record, with a default for any
  missing field.

A location with neither a legacy entry nor a record is a configuration
error (RateResolutionError). Never substitute zero rates.
"""

import logging
from typing import Dict, Mapping, Optional

from .errors import RateResolutionError
from .schemas import LocationRateTable, LocationRecord

logger = logging.getLogger(__name__)

# Defaults for location records with missing fields
DEFAULT_CURBSIDE_RATE = 15.0
DEFAULT_TURN_IN_RATE = 11.0
DEFAULT_EMPLOYEE_COMMISSION = 4.0

# First id served by the location table
DYNAMIC_LOCATION_MIN_ID = 5

# Legacy constants: (name, commission, tip baseline, turn-in)
LEGACY_RATES = {
    1: ("The Capital Grille", 4.0, 15.0, 11.0),
    2: ("Bob's Steak & Chop House", 9.0, 15.0, 6.0),
    3: ("Truluck's", 7.0, 15.0, 8.0),
    4: ("BOA Steakhouse", 6.0, 13.0, 7.0),
    7: ("", 4.0, 15.0, 11.0),
}


def _legacy_table(location_id: int, name: str = "") -> LocationRateTable:
    legacy_name, commission, baseline, turn_in = LEGACY_RATES[location_id]
    return LocationRateTable(
        location_id=location_id,
        name=name or legacy_name,
        commission_rate=commission,
        per_car_tip_baseline=baseline,
        turn_in_rate=turn_in,
        source="legacy",
    )


def _record_table(record: LocationRecord) -> LocationRateTable:
    def pick(value: Optional[float], default: float) -> float:
        return default if value is None else value

    return LocationRateTable(
        location_id=record.id,
        name=record.name,
        commission_rate=pick(record.employee_commission, DEFAULT_EMPLOYEE_COMMISSION),
        per_car_tip_baseline=pick(record.curbside_rate, DEFAULT_CURBSIDE_RATE),
        turn_in_rate=pick(record.turn_in_rate, DEFAULT_TURN_IN_RATE),
        source="location",
    )


def resolve_rate_table(
    location_id: int,
    location_record: Optional[LocationRecord] = None,
) -> LocationRateTable:
    """Resolve the rate table for one location.

    Args:
        location_id: Location identifier from the shift record
        location_record: Dynamic location configuration, if one exists

    Returns:
        Immutable LocationRateTable

    Raises:
        RateResolutionError: No legacy entry and no usable location record
    """
    name = location_record.name if location_record else ""

    if location_id in LEGACY_RATES:
        return _legacy_table(location_id, name)

    if location_record is not None and location_id >= DYNAMIC_LOCATION_MIN_ID:
        if location_record.id != location_id:
            raise RateResolutionError(
                location_id, f"location record has id {location_record.id}"
            )
        return _record_table(location_record)

    if location_id < DYNAMIC_LOCATION_MIN_ID:
        raise RateResolutionError(location_id, "not a legacy location")
    raise RateResolutionError(location_id, "no location record configured")


class RateTableResolver:
    """Resolves rate tables against a fixed set of location records.

    Create one per computation. Results are memoized for the resolver's
    lifetime only, so rates are fetched once per computation and never
    cached across requests.
    """

    def __init__(self, locations: Optional[Mapping[int, LocationRecord]] = None):
        self._locations: Dict[int, LocationRecord] = dict(locations or {})
        self._tables: Dict[int, LocationRateTable] = {}

    @classmethod
    def from_records(cls, records) -> "RateTableResolver":
        return cls({rec.id: rec for rec in records})

    def resolve(self, location_id: int) -> LocationRateTable:
        if location_id not in self._tables:
            table = resolve_rate_table(location_id, self._locations.get(location_id))
            logger.debug(
                f"rates for location {location_id} ({table.source}): "
                f"commission={table.commission_rate} baseline={table.per_car_tip_baseline} "
                f"turn_in={table.turn_in_rate}"
            )
            self._tables[location_id] = table
        return self._tables[location_id]

    def location_name(self, location_id: int) -> str:
        """Display name for a location, without requiring a rate table."""
        record = self._locations.get(location_id)
        if record and record.name:
            return record.name
        if location_id in LEGACY_RATES and LEGACY_RATES[location_id][0]:
            return LEGACY_RATES[location_id][0]
        return f"Location {location_id}"
