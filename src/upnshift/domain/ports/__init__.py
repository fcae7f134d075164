"""Domain port definitions for adapters."""

from __future__ import annotations

from .batch import BatchSource
from .directory import DirectoryClient
from .ledger import AuditLedger

__all__ = [
    "AuditLedger",
    "BatchSource",
    "DirectoryClient",
]
