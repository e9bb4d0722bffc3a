"""
Records storage for shifts, employees and tax payments.

The payroll engine itself never reads or writes storage; this module is the
thin file-backed collaborator that feeds it from the command line. CLI and
MCP tools should be thin wrappers that call these functions.

Layout
------

    <data_dir>/records/shift/<id>.json
    <data_dir>/records/employee/<id>.json
    <data_dir>/records/tax_payment/<id>.json

Each file holds {"meta": {...}, "data": {...}}; data is validated against
the matching schema before it is written. Tax payments are append-only:
recording the same payment twice produces two records, and the engine sums
them.

Shift IDs come from the shift data ("id") when present, so re-adding an
exported shift overwrites it instead of duplicating it.
"""

import hashlib
import json
import logging
import os
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import get_data_path, load_company_profile
from .errors import RecordNotFoundError, ValetPayError
from .rates import RateTableResolver
from .schemas import Employee, ShiftRecord, TaxPaymentRecord

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

RecordType = Literal["shift", "employee", "tax_payment"]
RECORD_TYPES = ("shift", "employee", "tax_payment")

_SCHEMAS = {
    "shift": ShiftRecord,
    "employee": Employee,
    "tax_payment": TaxPaymentRecord,
}

# Record ids double as filenames
_PLAIN_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class RecordValidationError(ValetPayError):
    """Raised when record data fails schema validation."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


def _check_type(record_type: str) -> None:
    if record_type not in RECORD_TYPES:
        raise ValueError(f"record type must be one of {RECORD_TYPES}, got: {record_type}")


def validate_record(record_type: RecordType, data: Dict[str, Any]) -> BaseModel:
    """Validate record data against its schema.

    Returns:
        The parsed model

    Raises:
        RecordValidationError: With one message per failing field
    """
    _check_type(record_type)
    try:
        return _SCHEMAS[record_type].model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or record_type}: {err['msg']}"
            for err in e.errors()
        ]
        raise RecordValidationError(errors) from e


# =============================================================================
# STORAGE FUNCTIONS
# =============================================================================

def get_records_dir() -> Path:
    """Get the records base directory (<data_dir>/records/)."""
    records_dir = get_data_path() / "records"
    records_dir.mkdir(parents=True, exist_ok=True)
    return records_dir


def _generate_record_id(record_type: str, data: Dict[str, Any], meta: Dict[str, Any]) -> str:
    """Generate a record ID for the filename.

    Shifts use their own id when present. Employees hash their key so the
    same employee always maps to one file. Tax payments hash the payment
    plus its recorded_at timestamp and a random nonce, so identical payments
    stay separate.

    Returns first 8 chars of hash for brevity (or the shift id).
    """
    if record_type == "shift" and data.get("id") not in (None, ""):
        shift_id = str(data["id"])
        if not _PLAIN_ID.fullmatch(str(shift_id)):
            raise RecordValidationError([
                f"id: '{shift_id}' must be letters, digits, '.', '_' or '-' and cannot start with '.'"
            ])
        return shift_id

    if record_type == "employee":
        content = f"employee|{str(data.get('key', '')).strip().lower()}"
    elif record_type == "tax_payment":
        employee = data.get("employee_key") or data.get("employeeKey", "")
        shift_id = data.get("shift_id") or data.get("shiftId", "")
        content = (
            f"tax_payment|{employee}|{shift_id}|{data.get('amount', '')}|"
            f"{meta.get('recorded_at', '')}|{meta.get('nonce', '')}"
        )
    else:
        content = f"{record_type}|{json.dumps(data, sort_keys=True)}|{meta.get('recorded_at', '')}"

    return hashlib.sha256(content.encode()).hexdigest()[:8]


def add_record(
    record_type: RecordType,
    data: Dict[str, Any],
    meta: Optional[Dict[str, Any]] = None,
) -> Path:
    """Validate and save a record.

    Args:
        record_type: "shift", "employee" or "tax_payment"
        data: Record data
        meta: Optional extra metadata (source_filename, ...)

    Returns:
        Path to the saved JSON file

    Raises:
        RecordValidationError: If data does not match the schema
    """
    meta = dict(meta or {})
    meta["type"] = record_type
    meta.setdefault("recorded_at", datetime.now().isoformat())
    if record_type == "tax_payment":
        meta.setdefault("nonce", uuid.uuid4().hex[:8])

    data = dict(data)
    record_id = _generate_record_id(record_type, data, meta)
    if record_type == "shift":
        data.setdefault("id", record_id)

    validate_record(record_type, data)

    target_dir = get_records_dir() / record_type
    target_dir.mkdir(parents=True, exist_ok=True)
    record_path = target_dir / f"{record_id}.json"

    with open(record_path, "w") as f:
        json.dump({"meta": meta, "data": data}, f, indent=2)

    logger.debug(f"saved {record_type} record {record_id}")
    return record_path


def _read_record(json_file: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(json_file) as f:
            record = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"{json_file.name}: unreadable record skipped ({e})")
        return None
    record["id"] = json_file.stem
    record["_path"] = str(json_file)
    return record


def list_records(type_filter: Optional[RecordType] = None) -> List[Dict[str, Any]]:
    """List stored records, optionally of one type.

    Returns:
        Records with 'meta', 'data', 'id' and '_path' keys, sorted by type
        then ID
    """
    records_dir = get_records_dir()
    types = [type_filter] if type_filter else list(RECORD_TYPES)
    results = []

    for record_type in types:
        _check_type(record_type)
        type_dir = records_dir / record_type
        if not type_dir.exists():
            continue
        for json_file in sorted(type_dir.glob("*.json")):
            record = _read_record(json_file)
            if record is not None:
                results.append(record)

    return results


def get_record(record_id: str) -> Dict[str, Any]:
    """Get a single record by ID.

    Raises:
        RecordNotFoundError: If no record has this ID
    """
    if not _PLAIN_ID.fullmatch(str(record_id)):
        raise RecordNotFoundError(f"Record not found: {record_id}")
    for json_file in get_records_dir().rglob(f"{record_id}.json"):
        record = _read_record(json_file)
        if record is not None:
            return record
    raise RecordNotFoundError(f"Record not found: {record_id}")


def remove_record(record_id: str) -> bool:
    """Delete a record by its ID.

    Returns:
        True if record was found and deleted, False if not found
    """
    if not _PLAIN_ID.fullmatch(str(record_id)):
        return False
    for json_file in get_records_dir().rglob(f"{record_id}.json"):
        json_file.unlink()
        return True
    return False


# =============================================================================
# TYPED LOADERS
# =============================================================================

def _load_models(record_type: RecordType) -> list:
    models = []
    for record in list_records(record_type):
        try:
            models.append(validate_record(record_type, record.get("data") or {}))
        except RecordValidationError as e:
            logger.warning(f"{record['id']}: invalid {record_type} record skipped ({e})")
    return models


def load_shifts() -> List[ShiftRecord]:
    """All valid shift records."""
    return _load_models("shift")


def load_employees() -> List[Employee]:
    """All valid employee records."""
    return _load_models("employee")


def load_tax_payments() -> List[TaxPaymentRecord]:
    """All valid tax payment records."""
    return _load_models("tax_payment")


def get_shift(shift_id: str) -> ShiftRecord:
    """Load one shift by ID.

    Raises:
        RecordNotFoundError: If the shift does not exist
    """
    if not _PLAIN_ID.fullmatch(str(shift_id)):
        raise RecordNotFoundError(f"Shift not found: {shift_id}")
    path = get_records_dir() / "shift" / f"{shift_id}.json"
    if not path.exists():
        raise RecordNotFoundError(f"Shift not found: {shift_id}")
    record = _read_record(path)
    if record is None:
        raise RecordNotFoundError(f"Shift record unreadable: {shift_id}")
    return validate_record("shift", record.get("data") or {})


def record_tax_payment(
    employee_key: str,
    shift_id: str,
    amount: float,
    paid_on: Optional[str] = None,
    notes: Optional[str] = None,
) -> Path:
    """Append a tax payment record.

    Returns:
        Path to the new record file
    """
    data = {
        "employee_key": employee_key,
        "shift_id": str(shift_id),
        "amount": amount,
        "paid_on": paid_on,
        "notes": notes,
    }
    return add_record("tax_payment", data)


@dataclass
class PayrollInputs:
    """Everything the engine needs, loaded once per computation."""

    shifts: List[ShiftRecord]
    employees: List[Employee]
    payments: List[TaxPaymentRecord]
    resolver: RateTableResolver


def load_resolver() -> RateTableResolver:
    """Rate resolver over the locations configured in profile.yaml."""
    profile = load_company_profile(require_exists=False)
    return RateTableResolver(profile.location_map())


def load_inputs() -> PayrollInputs:
    """Load shifts, employees, tax payments and location rates."""
    return PayrollInputs(
        shifts=load_shifts(),
        employees=load_employees(),
        payments=load_tax_payments(),
        resolver=load_resolver(),
    )
