"""Audit records written to the change ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .enums import AuditStatus, RunMode

LEDGER_COLUMNS: Final[tuple[str, ...]] = (
    "Date-Changed",
    "Mode",
    "Name",
    "AccountKey",
    "OldUPN",
    "NewUPN",
    "Status",
    "Details",
)


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """One immutable ledger row describing what happened to an account."""

    mode: RunMode
    account_key: str
    status: AuditStatus
    display_name: str = ""
    old_value: str = ""
    new_value: str = ""
    detail: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def as_row(self) -> tuple[str, ...]:
        return (
            self.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            str(self.mode),
            self.display_name,
            self.account_key,
            self.old_value,
            self.new_value,
            str(self.status),
            self.detail,
        )
