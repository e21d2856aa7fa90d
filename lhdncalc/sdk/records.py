"""
Local record storage for deductions, PCB records and commitments.

This module contains all business logic for records storage.
CLI and MCP tools should be thin wrappers that call these functions.

Layout under the data directory:

    records/<year>/deductions/<id>.json   one file per relief claim
    records/<year>/pcb/<MM>.json          one file per month (upsert)
    commitments/<id>.json                 recurring commitments

Each file holds {"meta": {...}, "data": {...}} where data is the
validated record with amounts serialized as strings. Records are
validated through the schemas on the way in and on the way out, so a
hand-edited file with a bad amount fails loudly instead of being taxed
as zero.
"""

import hashlib
import json
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import get_data_path
from .money import InvalidInputError
from .schemas import Commitment, CurrentPayment, DeductionRecord, PcbRecord, parse_record

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

# IDs come from _generate_record_id(); anything else never names a stored file
_RECORD_ID_RE = re.compile(r"^[0-9a-f]{8}$")


def get_records_dir() -> Path:
    """Get the records base directory.

    Returns:
        Path to records directory (~/.local/share/lhdn-calc/records/)
    """
    records_dir = get_data_path() / "records"
    records_dir.mkdir(parents=True, exist_ok=True)
    return records_dir


def get_commitments_dir() -> Path:
    """Get the commitments directory (created if doesn't exist)."""
    commitments_dir = get_data_path() / "commitments"
    commitments_dir.mkdir(parents=True, exist_ok=True)
    return commitments_dir


def _generate_record_id(kind: str, data: Dict[str, Any], created_at: str) -> str:
    """Generate an 8-char record ID used as the JSON filename.

    The creation timestamp is part of the hash so two identical claims
    (e.g. two receipts for the same amount) are stored separately.
    """
    content = f"{kind}|{json.dumps(data, sort_keys=True)}|{created_at}"
    return hashlib.sha256(content.encode()).hexdigest()[:8]


def _find_record(directory: Path, record_id: str) -> Optional[Path]:
    """Return the stored file for record_id in directory, or None if absent."""
    if not _RECORD_ID_RE.match(record_id or ""):
        return None
    path = directory / f"{record_id}.json"
    return path if path.is_file() else None


def _write_record(path: Path, meta: Dict[str, Any], data: Dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump({"meta": meta, "data": data}, f, indent=2)
    return path


def _read_record(path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(path) as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Skipping unreadable record {path}: {e}")
        return None


def _load_model(model, path: Path, extra: Optional[Dict[str, Any]] = None):
    record = _read_record(path)
    if record is None:
        return None
    data = dict(record.get("data") or {})
    if extra:
        data.update(extra)
    try:
        return parse_record(model, data)
    except InvalidInputError as e:
        raise InvalidInputError(f"{path}: {e}") from e


# =============================================================================
# Deductions
# =============================================================================

def _deductions_dir(year: int) -> Path:
    return get_records_dir() / str(year) / "deductions"


def add_deduction(data: Dict[str, Any]) -> DeductionRecord:
    """Validate and save a relief claim.

    Args:
        data: Raw deduction fields (category, amount, year, ...)

    Returns:
        The saved DeductionRecord with its id set

    Raises:
        InvalidInputError: If the deduction fails validation
    """
    record = parse_record(DeductionRecord, data)
    payload = record.model_dump(mode="json", exclude={"id"})
    created_at = datetime.now().isoformat()

    record_id = _generate_record_id("deduction", payload, created_at)
    meta = {"type": "deduction", "year": record.year, "created_at": created_at}
    path = _write_record(_deductions_dir(record.year) / f"{record_id}.json", meta, payload)

    logger.debug(f"Saved deduction {record_id} to {path}")
    return record.model_copy(update={"id": record_id})


def list_deductions(year: int, category: Optional[str] = None) -> List[DeductionRecord]:
    """List a year's deductions, optionally for one category.

    Returns:
        Records ordered by month (undated last) then category
    """
    target_dir = _deductions_dir(year)
    if not target_dir.exists():
        return []

    results = []
    for json_file in sorted(target_dir.glob("*.json")):
        record = _load_model(DeductionRecord, json_file, {"id": json_file.stem})
        if record is None:
            continue
        if category and record.category != category.strip().upper():
            continue
        results.append(record)

    results.sort(key=lambda r: (r.month or 13, r.category, r.id))
    return results


def remove_deduction(year: int, record_id: str) -> bool:
    """Delete a deduction by ID.

    Returns:
        True if the record was found and deleted, False if not found
    """
    path = _find_record(_deductions_dir(year), record_id)
    if path is None:
        return False
    path.unlink()
    return True


# =============================================================================
# PCB records
# =============================================================================

def _pcb_path(year: int, month: int) -> Path:
    return get_records_dir() / str(year) / "pcb" / f"{month:02d}.json"


def save_pcb_record(data: Dict[str, Any]) -> Tuple[PcbRecord, bool]:
    """Create or replace the PCB record for a month.

    Returns:
        (record, created) where created is False if an existing record
        for the same month was overwritten

    Raises:
        InvalidInputError: If the record fails validation
    """
    record = parse_record(PcbRecord, data)
    path = _pcb_path(record.year, record.month)
    created = not path.exists()

    meta = {"type": "pcb", "year": record.year, "updated_at": datetime.now().isoformat()}
    _write_record(path, meta, record.model_dump(mode="json"))

    logger.debug(f"{'Created' if created else 'Updated'} PCB record {record.year}-{record.month:02d}")
    return record, created


def list_pcb_records(year: int) -> List[PcbRecord]:
    """List a year's PCB records ordered by month."""
    target_dir = get_records_dir() / str(year) / "pcb"
    if not target_dir.exists():
        return []

    results = []
    for json_file in sorted(target_dir.glob("*.json")):
        record = _load_model(PcbRecord, json_file)
        if record is not None:
            results.append(record)
    results.sort(key=lambda r: r.month)
    return results


def remove_pcb_record(year: int, month: int) -> bool:
    """Delete the PCB record for a month.

    Returns:
        True if the record was found and deleted, False if not found
    """
    path = _pcb_path(year, month)
    if not path.exists():
        return False
    path.unlink()
    return True


# =============================================================================
# Commitments
# =============================================================================

def add_commitment(data: Dict[str, Any]) -> Commitment:
    """Validate and save a commitment.

    Raises:
        InvalidInputError: If the commitment fails validation
    """
    commitment = parse_record(Commitment, data)
    payload = commitment.model_dump(mode="json", exclude={"id"})
    created_at = datetime.now().isoformat()

    record_id = _generate_record_id("commitment", payload, created_at)
    meta = {"type": "commitment", "created_at": created_at}
    _write_record(get_commitments_dir() / f"{record_id}.json", meta, payload)

    return commitment.model_copy(update={"id": record_id})


def get_commitment(record_id: str) -> Optional[Commitment]:
    """Get a single commitment by ID, or None if not found."""
    path = _find_record(get_commitments_dir(), record_id)
    if path is None:
        return None
    return _load_model(Commitment, path, {"id": record_id})


def list_commitments(active_only: bool = False) -> List[Commitment]:
    """List stored commitments ordered by start date."""
    results = []
    for json_file in sorted(get_commitments_dir().glob("*.json")):
        commitment = _load_model(Commitment, json_file, {"id": json_file.stem})
        if commitment is None:
            continue
        if active_only and not commitment.is_active:
            continue
        results.append(commitment)

    results.sort(key=lambda c: (c.start_date, c.name))
    return results


def set_commitment_paid(record_id: str, is_paid: bool = True) -> Optional[Commitment]:
    """Mark the current period of a commitment as paid (or unpaid).

    Returns:
        The updated Commitment, or None if not found
    """
    commitment = get_commitment(record_id)
    if commitment is None:
        return None

    updated = commitment.model_copy(update={"current_payment": CurrentPayment(is_paid=is_paid)})
    path = get_commitments_dir() / f"{record_id}.json"
    meta = (_read_record(path) or {}).get("meta") or {"type": "commitment"}
    meta["updated_at"] = datetime.now().isoformat()
    _write_record(path, meta, updated.model_dump(mode="json", exclude={"id"}))
    return updated


def remove_commitment(record_id: str) -> bool:
    """Delete a commitment by ID.

    Returns:
        True if the commitment was found and deleted, False if not found
    """
    path = _find_record(get_commitments_dir(), record_id)
    if path is None:
        return False
    path.unlink()
    return True
