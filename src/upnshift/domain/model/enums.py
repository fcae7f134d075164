"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class RunMode(StrEnum):
    UPDATE = "Update"
    RESTORE = "Restore"


class AuditStatus(StrEnum):
    SUCCESS = "Success"
    SKIPPED = "Skipped"
    FAIL = "Fail"
    ERROR = "Error"


class DecisionKind(StrEnum):
    PROCEED = "proceed"
    SKIP = "skip"
    ERROR = "error"


class RunState(StrEnum):
    """Lifecycle of a single migration run."""

    INIT = "init"
    CATALOG_LOADED = "catalog_loaded"
    PROCESSING_BATCH = "processing_batch"
    DONE = "done"
