"""CSV implementation of the audit ledger."""

from __future__ import annotations

import csv
import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Self, TextIO

from upnshift.domain.errors import LedgerWriteError
from upnshift.domain.model import LEDGER_COLUMNS

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from upnshift.domain.model import AuditRecord, RunMode

log = getLogger(__name__)


def ledger_filename(mode: RunMode, *, now: datetime | None = None) -> str:
    stamp = (now or datetime.now(tz=UTC)).strftime("%Y%m%dT%H%M%SZ")
    return f"upn-{str(mode).lower()}-{stamp}-{secrets.token_hex(3)}.csv"


@dataclass(slots=True)
class CsvAuditLedger:
    """Append-only CSV ledger, one file per run.

    The file is created exclusively so a run never appends to an earlier ledger.
    Every row is flushed as soon as it is written.
    """

    path: Path
    _handle: TextIO | None = field(default=None, init=False, repr=False)
    _writer: Any = field(default=None, init=False, repr=False)
    rows_written: int = field(default=0, init=False)

    @classmethod
    def create(cls, directory: Path, mode: RunMode) -> CsvAuditLedger:
        ledger = cls(directory / ledger_filename(mode))
        ledger.open()
        return ledger

    def open(self) -> None:
        try:
            self._handle = self.path.open("x", newline="", encoding="utf-8")
            self._writer = csv.writer(self._handle)
            self._writer.writerow(LEDGER_COLUMNS)
            self._handle.flush()
        except OSError as exc:
            raise LedgerWriteError(f"Cannot create ledger {self.path}: {exc}") from exc
        log.info("Writing audit ledger to %s", self.path)

    def append(self, record: AuditRecord) -> None:
        if self._handle is None or self._writer is None:
            raise LedgerWriteError(f"Ledger {self.path} is not open")
        try:
            self._writer.writerow(record.as_row())
            self._handle.flush()
        except OSError as exc:
            raise LedgerWriteError(f"Cannot write to ledger {self.path}: {exc}") from exc
        self.rows_written += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._writer = None

    def __enter__(self) -> Self:
        if self._handle is None:
            self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
