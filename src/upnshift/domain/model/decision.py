"""Per-account decision and outcome values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .enums import AuditStatus, DecisionKind

EXCLUDED_SUFFIX: Final[str] = "excluded suffix"
ALREADY_MIGRATED: Final[str] = "already migrated"
MALFORMED_SOURCE_VALUE: Final[str] = "malformed source value"
SUFFIX_NOT_PERMITTED: Final[str] = "suffix not permitted"
NOTHING_TO_RESTORE: Final[str] = "nothing to restore"
NO_PRINCIPAL_NAME: Final[str] = "no current principal name"
ACCOUNT_NOT_FOUND: Final[str] = "account not found"
VERIFICATION_MISMATCH: Final[str] = "verification mismatch"
CLEAR_FAILED: Final[str] = "rename succeeded, clear failed"


@dataclass(frozen=True, slots=True)
class Decision:
    """Result of evaluating one account against the run parameters."""

    kind: DecisionKind
    new_value: str = ""
    reason: str = ""

    @classmethod
    def proceed(cls, new_value: str) -> Decision:
        return cls(kind=DecisionKind.PROCEED, new_value=new_value)

    @classmethod
    def skip(cls, reason: str) -> Decision:
        return cls(kind=DecisionKind.SKIP, reason=reason)

    @classmethod
    def error(cls, reason: str) -> Decision:
        return cls(kind=DecisionKind.ERROR, reason=reason)

    @property
    def should_proceed(self) -> bool:
        return self.kind is DecisionKind.PROCEED


@dataclass(frozen=True, slots=True)
class Outcome:
    """What actually happened to one account."""

    status: AuditStatus
    new_value: str = ""
    detail: str = ""

    @classmethod
    def from_decision(cls, decision: Decision) -> Outcome:
        """Map a non-proceeding decision onto its ledger status."""

        if decision.kind is DecisionKind.SKIP:
            return cls(status=AuditStatus.SKIPPED, detail=decision.reason)
        if decision.kind is DecisionKind.ERROR:
            return cls(status=AuditStatus.ERROR, detail=decision.reason)
        raise ValueError("proceeding decisions produce an outcome only after a rewrite")
