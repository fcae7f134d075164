"""Run a batch of accounts through evaluation, rewrite and the audit ledger."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from upnshift.domain.eligibility import evaluate
from upnshift.domain.errors import AccountNotFoundError, DirectoryError
from upnshift.domain.model import (
    ACCOUNT_NOT_FOUND,
    AuditRecord,
    AuditStatus,
    Outcome,
    RunMode,
    RunState,
)
from upnshift.domain.rewrite import SuffixRewriter
from upnshift.domain.suffixes import load_suffix_catalog

if TYPE_CHECKING:
    from upnshift.domain.eligibility import RunParameters
    from upnshift.domain.model import AccountState, BatchEntry
    from upnshift.domain.ports import AuditLedger, BatchSource, DirectoryClient
    from upnshift.domain.suffixes import SuffixCatalog


@dataclass(slots=True)
class MigrationResult:
    """Outcome of a migration or restore run."""

    mode: RunMode
    processed: int = 0
    statuses: Counter[AuditStatus] = field(default_factory=Counter[AuditStatus])

    def count(self, status: AuditStatus) -> int:
        return self.statuses[status]


log = getLogger(__name__)


@dataclass(slots=True)
class SuffixMigration:
    """Drives one run: catalog load, then every batch entry in order.

    The run parameters fix the mode for the whole run. Per-account problems are
    recorded in the ledger; only catalog and ledger failures propagate.
    """

    directory: DirectoryClient
    ledger: AuditLedger
    params: RunParameters
    dry_run: bool = False
    state: RunState = RunState.INIT
    catalog: SuffixCatalog | None = None

    @property
    def mode(self) -> RunMode:
        return self.params.mode

    def run(self, batch: BatchSource) -> MigrationResult:
        if self.state is not RunState.INIT:
            raise RuntimeError(f"Migration already in state {self.state}")

        self.catalog = load_suffix_catalog(self.directory)
        self._transition(RunState.CATALOG_LOADED)

        result = MigrationResult(mode=self.mode)
        rewriter = SuffixRewriter(self.directory)
        self._transition(RunState.PROCESSING_BATCH)
        for entry in batch:
            record = self._process(entry, rewriter)
            self.ledger.append(record)
            result.processed += 1
            result.statuses[record.status] += 1

        self._transition(RunState.DONE)
        return result

    def _process(self, entry: BatchEntry, rewriter: SuffixRewriter) -> AuditRecord:
        try:
            account = self.directory.fetch_account(entry.account_key, self.params.read_attributes)
        except AccountNotFoundError:
            log.warning("Account %s not found", entry.account_key)
            return self._record(entry, None, Outcome(AuditStatus.ERROR, detail=ACCOUNT_NOT_FOUND))
        except DirectoryError as exc:
            log.warning("Could not read account %s: %s", entry.account_key, exc)
            return self._record(
                entry, None, Outcome(AuditStatus.ERROR, detail=f"{ACCOUNT_NOT_FOUND}: {exc}")
            )

        decision = evaluate(account, self.params, self.catalog)
        if not decision.should_proceed:
            log.debug("%s: %s (%s)", entry.account_key, decision.kind, decision.reason)
            return self._record(entry, account, Outcome.from_decision(decision))

        if self.dry_run:
            outcome = Outcome(
                AuditStatus.SKIPPED,
                new_value=decision.new_value,
                detail=f"dry run: would set {decision.new_value}",
            )
            return self._record(entry, account, outcome)

        outcome = rewriter.apply(
            account_key=account.account_key,
            new_value=decision.new_value,
            mode=self.mode,
            attribute=self.params.record_attribute,
            old_value=account.principal_name,
        )
        return self._record(entry, account, outcome)

    def _record(
        self, entry: BatchEntry, account: AccountState | None, outcome: Outcome
    ) -> AuditRecord:
        return AuditRecord(
            mode=self.mode,
            account_key=entry.account_key,
            status=outcome.status,
            display_name=account.display_name if account else "",
            old_value=account.principal_name if account else "",
            new_value=outcome.new_value,
            detail=outcome.detail,
        )

    def _transition(self, state: RunState) -> None:
        log.debug("Migration state %s -> %s", self.state, state)
        self.state = state


def run_migration(
    *,
    directory: DirectoryClient,
    ledger: AuditLedger,
    batch: BatchSource,
    params: RunParameters,
    dry_run: bool = False,
) -> MigrationResult:
    """Process ``batch`` in the mode implied by ``params`` and ledger every entry."""

    return SuffixMigration(
        directory=directory, ledger=ledger, params=params, dry_run=dry_run
    ).run(batch)


__all__ = ["MigrationResult", "SuffixMigration", "run_migration"]
