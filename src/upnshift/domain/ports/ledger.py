"""Port for the append-only audit ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from upnshift.domain.model import AuditRecord


@runtime_checkable
class AuditLedger(Protocol):
    """Sequential, single-writer sink for audit records."""

    def append(self, record: AuditRecord) -> None:
        """Durably write ``record``; raise ``LedgerWriteError`` if that is impossible."""
        ...


__all__ = ["AuditLedger"]
