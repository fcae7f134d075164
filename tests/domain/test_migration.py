from __future__ import annotations

import pytest

from upnshift.domain.eligibility import RestoreParameters, UpdateParameters
from upnshift.domain.errors import CatalogUnavailableError, LedgerWriteError
from upnshift.domain.migration import SuffixMigration, run_migration
from upnshift.domain.model import (
    ACCOUNT_NOT_FOUND,
    ALREADY_MIGRATED,
    EXCLUDED_SUFFIX,
    NO_PRINCIPAL_NAME,
    PRINCIPAL_NAME_ATTRIBUTE,
    SUFFIX_NOT_PERMITTED,
    AuditRecord,
    AuditStatus,
    RunMode,
    RunState,
)
from tests.helpers.directory import (
    FakeDirectory,
    FakeLedger,
    entries,
    make_account,
    unavailable_catalog,
)

UPDATE = UpdateParameters(source_attribute="alt", backup_attribute="backup")
RESTORE = RestoreParameters(restore_attribute="backup")


def _migrated_directory() -> FakeDirectory:
    return FakeDirectory.with_accounts(
        make_account("jdoe", upn="jdoe@fabrikam.com", alt="jdoe@contoso.com"),
        make_account("asmith", upn="asmith@fabrikam.com", alt="asmith@contoso.com"),
    )


def test_update_rewrites_and_ledgers_each_account() -> None:
    directory = _migrated_directory()
    ledger = FakeLedger()

    result = run_migration(
        directory=directory, ledger=ledger, batch=entries("jdoe", "asmith"), params=UPDATE
    )

    assert result.processed == 2
    assert result.count(AuditStatus.SUCCESS) == 2
    jdoe = directory.accounts["jdoe"]
    assert jdoe[PRINCIPAL_NAME_ATTRIBUTE] == "jdoe@contoso.com"
    assert jdoe["backup"] == "jdoe@fabrikam.com"
    first = ledger.records[0]
    assert first.mode is RunMode.UPDATE
    assert first.display_name == "John Doe"
    assert (first.old_value, first.new_value) == ("jdoe@fabrikam.com", "jdoe@contoso.com")


def test_second_update_pass_skips_every_account() -> None:
    directory = _migrated_directory()
    batch = entries("jdoe", "asmith")
    first, second = FakeLedger(), FakeLedger()

    run_migration(directory=directory, ledger=first, batch=batch, params=UPDATE)
    writes_after_first = list(directory.writes)
    run_migration(directory=directory, ledger=second, batch=batch, params=UPDATE)

    assert [r.status for r in first.records] == [AuditStatus.SUCCESS, AuditStatus.SUCCESS]
    assert [(r.status, r.detail) for r in second.records] == [
        (AuditStatus.SKIPPED, ALREADY_MIGRATED),
        (AuditStatus.SKIPPED, ALREADY_MIGRATED),
    ]
    assert directory.writes == writes_after_first
    assert directory.accounts["jdoe"]["backup"] == "jdoe@fabrikam.com"



def test_account_without_principal_name_is_never_migrated() -> None:
    directory = FakeDirectory.with_accounts(make_account("nu", upn="", alt="nu@contoso.com"))
    first, second = FakeLedger(), FakeLedger()

    run_migration(directory=directory, ledger=first, batch=entries("nu"), params=UPDATE)
    run_migration(directory=directory, ledger=second, batch=entries("nu"), params=UPDATE)

    for ledger in (first, second):
        assert [(r.status, r.detail) for r in ledger.records] == [
            (AuditStatus.ERROR, NO_PRINCIPAL_NAME)
        ]
    assert directory.writes == []
    assert directory.accounts["nu"][PRINCIPAL_NAME_ATTRIBUTE] == ""

def test_update_then_restore_round_trips() -> None:
    directory = FakeDirectory.with_accounts(
        make_account("a", upn="A@x.com", alt="A@y.com"),
        suffixes=["x.com", "y.com"],
    )

    run_migration(directory=directory, ledger=FakeLedger(), batch=entries("a"), params=UPDATE)
    assert directory.accounts["a"][PRINCIPAL_NAME_ATTRIBUTE] == "A@y.com"
    assert directory.accounts["a"]["backup"] == "A@x.com"

    ledger = FakeLedger()
    run_migration(directory=directory, ledger=ledger, batch=entries("a"), params=RESTORE)

    assert directory.accounts["a"][PRINCIPAL_NAME_ATTRIBUTE] == "A@x.com"
    assert "backup" not in directory.accounts["a"]
    record = ledger.records[0]
    assert record.status is AuditStatus.SUCCESS
    assert (record.old_value, record.new_value) == ("A@y.com", "A@x.com")


def test_second_restore_is_a_no_op() -> None:
    directory = FakeDirectory.with_accounts(
        make_account("a", upn="A@y.com", backup="A@x.com"), suffixes=["x.com", "y.com"]
    )
    run_migration(directory=directory, ledger=FakeLedger(), batch=entries("a"), params=RESTORE)

    ledger = FakeLedger()
    run_migration(directory=directory, ledger=ledger, batch=entries("a"), params=RESTORE)

    assert ledger.records[0].status is AuditStatus.SKIPPED
    assert len(directory.writes) == 1


def test_skipped_and_excluded_accounts_are_not_written() -> None:
    directory = FakeDirectory.with_accounts(
        make_account("out", upn="out@fabrikam.com", alt="out@northwind.com"),
        make_account("kept", upn="kept@contoso.com", alt="kept@fabrikam.com"),
    )
    ledger = FakeLedger()
    params = UpdateParameters(
        source_attribute="alt", backup_attribute="backup", excluded_suffixes={"contoso.com"}
    )

    run_migration(directory=directory, ledger=ledger, batch=entries("out", "kept"), params=params)

    assert directory.writes == []
    assert [(r.status, r.detail) for r in ledger.records] == [
        (AuditStatus.SKIPPED, SUFFIX_NOT_PERMITTED),
        (AuditStatus.ERROR, EXCLUDED_SUFFIX),
    ]
    assert all(r.new_value == "" for r in ledger.records)


def test_missing_account_does_not_abort_run() -> None:
    directory = _migrated_directory()
    ledger = FakeLedger()

    result = run_migration(
        directory=directory,
        ledger=ledger,
        batch=entries("jdoe", "ghost", "asmith"),
        params=UPDATE,
    )

    assert [r.account_key for r in ledger.records] == ["jdoe", "ghost", "asmith"]
    ghost = ledger.records[1]
    assert (ghost.status, ghost.detail) == (AuditStatus.ERROR, ACCOUNT_NOT_FOUND)
    assert (ghost.display_name, ghost.old_value, ghost.new_value) == ("", "", "")
    assert result.count(AuditStatus.SUCCESS) == 2


def test_unreadable_account_is_recorded_as_error() -> None:
    directory = _migrated_directory()
    directory.unreadable.add("jdoe")
    ledger = FakeLedger()

    run_migration(directory=directory, ledger=ledger, batch=entries("jdoe"), params=UPDATE)

    assert ledger.records[0].status is AuditStatus.ERROR
    assert "server unavailable" in ledger.records[0].detail


def test_failed_write_does_not_block_others() -> None:
    directory = _migrated_directory()
    directory.rejected_writes["jdoe"] = "stale record"
    ledger = FakeLedger()

    run_migration(
        directory=directory, ledger=ledger, batch=entries("jdoe", "asmith"), params=UPDATE
    )

    assert [(r.status, r.detail) for r in ledger.records] == [
        (AuditStatus.FAIL, "stale record"),
        (AuditStatus.SUCCESS, ""),
    ]


def test_ledger_row_count_matches_batch_in_order() -> None:
    directory = _migrated_directory()
    ledger = FakeLedger()
    keys = ("asmith", "nobody", "jdoe", "asmith")

    result = run_migration(directory=directory, ledger=ledger, batch=entries(*keys), params=UPDATE)

    assert [r.account_key for r in ledger.records] == list(keys)
    assert result.processed == len(keys)


def test_catalog_failure_aborts_before_any_account() -> None:
    directory = _migrated_directory()
    directory.catalog_error = unavailable_catalog()
    ledger = FakeLedger()
    migration = SuffixMigration(directory=directory, ledger=ledger, params=UPDATE)

    with pytest.raises(CatalogUnavailableError):
        migration.run(entries("jdoe"))

    assert ledger.records == []
    assert directory.writes == []
    assert migration.state is RunState.INIT


def test_dry_run_records_without_writing() -> None:
    directory = _migrated_directory()
    ledger = FakeLedger()

    run_migration(
        directory=directory, ledger=ledger, batch=entries("jdoe"), params=UPDATE, dry_run=True
    )

    assert directory.writes == []
    record = ledger.records[0]
    assert record.status is AuditStatus.SKIPPED
    assert record.new_value == "jdoe@contoso.com"
    assert record.detail == "dry run: would set jdoe@contoso.com"


def test_migration_reaches_done_and_cannot_rerun() -> None:
    migration = SuffixMigration(
        directory=_migrated_directory(), ledger=FakeLedger(), params=UPDATE
    )

    migration.run(entries("jdoe"))

    assert migration.state is RunState.DONE
    with pytest.raises(RuntimeError, match="already"):
        migration.run(entries("jdoe"))


def test_ledger_failure_halts_run() -> None:
    class BrokenLedger(FakeLedger):
        def append(self, record: AuditRecord) -> None:
            raise LedgerWriteError("disk full")

    directory = _migrated_directory()

    with pytest.raises(LedgerWriteError):
        run_migration(
            directory=directory,
            ledger=BrokenLedger(),
            batch=entries("jdoe", "asmith"),
            params=UPDATE,
        )

    assert len(directory.writes) == 1
