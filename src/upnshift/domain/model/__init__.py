"""Domain model for suffix migration runs."""

from __future__ import annotations

from .account import (
    DISPLAY_NAME_ATTRIBUTE,
    PRINCIPAL_NAME_ATTRIBUTE,
    AccountState,
    BatchEntry,
)
from .audit import LEDGER_COLUMNS, AuditRecord
from .decision import (
    ACCOUNT_NOT_FOUND,
    ALREADY_MIGRATED,
    CLEAR_FAILED,
    EXCLUDED_SUFFIX,
    MALFORMED_SOURCE_VALUE,
    NO_PRINCIPAL_NAME,
    NOTHING_TO_RESTORE,
    SUFFIX_NOT_PERMITTED,
    VERIFICATION_MISMATCH,
    Decision,
    Outcome,
)
from .enums import AuditStatus, DecisionKind, RunMode, RunState

__all__ = [
    "ACCOUNT_NOT_FOUND",
    "ALREADY_MIGRATED",
    "CLEAR_FAILED",
    "DISPLAY_NAME_ATTRIBUTE",
    "EXCLUDED_SUFFIX",
    "LEDGER_COLUMNS",
    "MALFORMED_SOURCE_VALUE",
    "NO_PRINCIPAL_NAME",
    "NOTHING_TO_RESTORE",
    "PRINCIPAL_NAME_ATTRIBUTE",
    "SUFFIX_NOT_PERMITTED",
    "VERIFICATION_MISMATCH",
    "AccountState",
    "AuditRecord",
    "AuditStatus",
    "BatchEntry",
    "Decision",
    "DecisionKind",
    "Outcome",
    "RunMode",
    "RunState",
]
