"""Apply decided principal name changes to the directory."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from upnshift.domain.errors import DirectoryError
from upnshift.domain.model import (
    CLEAR_FAILED,
    PRINCIPAL_NAME_ATTRIBUTE,
    VERIFICATION_MISMATCH,
    AuditStatus,
    Outcome,
    RunMode,
)

if TYPE_CHECKING:
    from upnshift.domain.ports import DirectoryClient

log = getLogger(__name__)


@dataclass(slots=True)
class SuffixRewriter:
    """Writes one account's new principal name and its backup/restore attribute."""

    directory: DirectoryClient

    def apply(
        self,
        *,
        account_key: str,
        new_value: str,
        mode: RunMode,
        attribute: str,
        old_value: str,
    ) -> Outcome:
        if mode is RunMode.UPDATE:
            return self._update(account_key, new_value, attribute, old_value)
        return self._restore(account_key, new_value, attribute)

    def _update(self, account_key: str, new_value: str, backup: str, old_value: str) -> Outcome:
        try:
            self.directory.set_attributes(
                account_key,
                {PRINCIPAL_NAME_ATTRIBUTE: new_value, backup: old_value},
            )
        except DirectoryError as exc:
            log.warning("Update of %s rejected: %s", account_key, exc)
            return Outcome(status=AuditStatus.FAIL, new_value=new_value, detail=str(exc))
        log.info("Updated %s: %s -> %s", account_key, old_value, new_value)
        return Outcome(status=AuditStatus.SUCCESS, new_value=new_value)

    def _restore(self, account_key: str, new_value: str, restore: str) -> Outcome:
        try:
            self.directory.set_attributes(account_key, {PRINCIPAL_NAME_ATTRIBUTE: new_value})
        except DirectoryError as exc:
            log.warning("Restore of %s rejected: %s", account_key, exc)
            return Outcome(status=AuditStatus.FAIL, new_value=new_value, detail=str(exc))

        try:
            confirmed = self.directory.fetch_account(account_key, (restore,)).principal_name
        except DirectoryError as exc:
            log.warning("Could not re-read %s after restore: %s", account_key, exc)
            return Outcome(
                status=AuditStatus.FAIL,
                new_value=new_value,
                detail=f"{VERIFICATION_MISMATCH}: {exc}",
            )
        if confirmed != new_value:
            log.warning(
                "Restore of %s not confirmed: expected %s, directory holds %s",
                account_key,
                new_value,
                confirmed,
            )
            return Outcome(status=AuditStatus.FAIL, new_value=new_value, detail=VERIFICATION_MISMATCH)

        try:
            self.directory.clear_attribute(account_key, restore)
        except DirectoryError as exc:
            log.warning("Restored %s but could not clear %s: %s", account_key, restore, exc)
            return Outcome(
                status=AuditStatus.FAIL,
                new_value=new_value,
                detail=f"{CLEAR_FAILED}: {exc}",
            )
        log.info("Restored %s to %s", account_key, new_value)
        return Outcome(status=AuditStatus.SUCCESS, new_value=new_value)


__all__ = ["SuffixRewriter"]
