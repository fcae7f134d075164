"""Public interface for the CSV batch and ledger adapters."""

from __future__ import annotations

from .ledger import CsvAuditLedger, ledger_filename
from .reader import DEFAULT_KEY_COLUMN, BatchFileError, load_batch, read_batch
from .schema import BatchRow

__all__ = [
    "DEFAULT_KEY_COLUMN",
    "BatchFileError",
    "BatchRow",
    "CsvAuditLedger",
    "ledger_filename",
    "load_batch",
    "read_batch",
]
