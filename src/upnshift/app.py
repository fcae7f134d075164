"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from upnshift.adapters.csvfile import DEFAULT_KEY_COLUMN, CsvAuditLedger, load_batch
from upnshift.adapters.ldap import LdapDirectory
from upnshift.config import get_directory_config, get_storage_config
from upnshift.domain.migration import MigrationResult, run_migration
from upnshift.domain.model import AuditStatus
from upnshift.domain.ports import DirectoryClient

if TYPE_CHECKING:
    from pathlib import Path

    from upnshift.domain.eligibility import RunParameters

DirectoryFactory = Callable[[], AbstractContextManager[DirectoryClient]]


log = getLogger(__name__)


@dataclass(slots=True)
class MigrationReport:
    """Run summary plus where its ledger was written."""

    result: MigrationResult
    ledger_path: Path


def _default_directory_factory() -> LdapDirectory:
    return LdapDirectory(get_directory_config())


def run_suffix_migration(
    *,
    batch_path: Path,
    params: RunParameters,
    key_column: str = DEFAULT_KEY_COLUMN,
    ledger_dir: Path | None = None,
    dry_run: bool = False,
    directory_factory: DirectoryFactory | None = None,
) -> MigrationReport:
    """Migrate or restore the accounts listed in ``batch_path`` against the directory."""

    batch = load_batch(batch_path, key_column=key_column)
    target_dir = get_storage_config(ledger_dir).ledger_dir()
    effective_factory = directory_factory or _default_directory_factory
    log.info(
        "Starting %s: batch=%s, entries=%s, ledger_dir=%s, dry_run=%s",
        params.mode,
        batch_path,
        len(batch),
        target_dir,
        dry_run,
    )

    with effective_factory() as directory, CsvAuditLedger.create(target_dir, params.mode) as ledger:
        result = run_migration(
            directory=directory,
            ledger=ledger,
            batch=batch,
            params=params,
            dry_run=dry_run,
        )
        ledger_path = ledger.path

    log.info(
        "Finished %s: processed=%s, success=%s, skipped=%s, fail=%s, error=%s, ledger=%s",
        params.mode,
        result.processed,
        result.count(AuditStatus.SUCCESS),
        result.count(AuditStatus.SKIPPED),
        result.count(AuditStatus.FAIL),
        result.count(AuditStatus.ERROR),
        ledger_path,
    )
    return MigrationReport(result=result, ledger_path=ledger_path)
