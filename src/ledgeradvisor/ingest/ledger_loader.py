"""Load, validate and save ledger JSON files."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union
from pydantic import ValidationError
from ..contracts.records import Ledger, Record
from ..utils.errors import LedgerLoadError
from ..utils.logging import get_logger

logger = get_logger("ingest.ledger_loader")


def load_ledger(ledger_path: Union[str, Path]) -> Ledger:
    """
    Load and validate a ledger JSON file.

    The file is either a bare list of records or an object with
    ``records``, ``budgets`` and ``accounts`` keys.

    Args:
        ledger_path: Path to the ledger JSON file

    Returns:
        Validated Ledger

    Raises:
        LedgerLoadError: If the file cannot be loaded or is invalid
    """
    path = Path(ledger_path)

    if not path.exists():
        raise LedgerLoadError(
            f"Ledger file not found: {ledger_path}. "
            "Please check the file path and ensure the file exists."
        )

    if not path.is_file():
        raise LedgerLoadError(
            f"Path is not a file: {ledger_path}. "
            "Please provide a ledger JSON file."
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LedgerLoadError(
            f"Invalid JSON in ledger file: {e}. "
            "Please ensure the file is valid JSON."
        )
    except OSError as e:
        raise LedgerLoadError(
            f"Error reading ledger file: {e}. "
            "Please check file permissions and try again."
        )

    ledger = parse_ledger(data)
    logger.info(
        f"Loaded ledger from {ledger_path} "
        f"(records: {len(ledger.records)}, budgets: {len(ledger.budgets)})"
    )
    return ledger


def parse_ledger(data: Any) -> Ledger:
    """
    Validate already-decoded ledger data.

    Raises:
        LedgerLoadError: If the structure does not match the ledger schema
    """
    if isinstance(data, list):
        data = {"records": data}

    if not isinstance(data, dict):
        raise LedgerLoadError(
            "Ledger must be a list of records or an object with a 'records' key"
        )

    try:
        return Ledger(**data)
    except ValidationError as e:
        raise LedgerLoadError(f"Invalid ledger structure: {e}")


def append_record(record: Record, ledger_path: Union[str, Path]) -> None:
    """
    Append one record to a ledger file, leaving existing content untouched.

    Existing records keep every field and their original formatting of
    values; a bare-list ledger stays a list. The file is replaced
    atomically so a failed write never leaves a truncated ledger.

    Raises:
        LedgerLoadError: If the file cannot be read or written
    """
    path = Path(ledger_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LedgerLoadError(f"Invalid JSON in ledger file: {e}. Refusing to overwrite it.")
    except OSError as e:
        raise LedgerLoadError(f"Error reading ledger file {path}: {e}")

    entry = record.model_dump(mode="json", exclude_none=True)
    if isinstance(data, list):
        data.append(entry)
    elif isinstance(data, dict) and isinstance(data.get("records", []), list):
        data.setdefault("records", []).append(entry)
    else:
        raise LedgerLoadError(
            "Ledger must be a list of records or an object with a 'records' key"
        )

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise LedgerLoadError(f"Failed to save ledger to {path}: {e}")

    logger.info(f"Appended record {record.id} to {path}")
