"""Exceptions raised across the directory and ledger boundaries."""

from __future__ import annotations


class UpnShiftError(RuntimeError):
    """Base class for suffix migration errors."""


class CatalogUnavailableError(UpnShiftError):
    """Raised when the forest suffix catalog cannot be read."""


class DirectoryError(UpnShiftError):
    """Raised when a directory request fails."""


class AccountNotFoundError(DirectoryError):
    """Raised when no directory account matches a batch key."""

    def __init__(self, account_key: str) -> None:
        super().__init__(f"No account matches key {account_key!r}")
        self.account_key = account_key


class DirectoryWriteRejectedError(DirectoryError):
    """Raised when the directory refuses an attribute write.

    The message is the directory's own description and is recorded verbatim.
    """


class LedgerWriteError(UpnShiftError):
    """Raised when the audit ledger can no longer be written."""
