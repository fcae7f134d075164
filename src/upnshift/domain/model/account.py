"""Batch entries and directory account snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

PRINCIPAL_NAME_ATTRIBUTE: Final[str] = "userPrincipalName"
DISPLAY_NAME_ATTRIBUTE: Final[str] = "displayName"


@dataclass(frozen=True, slots=True)
class BatchEntry:
    """One row of the input batch, identifying a single account."""

    account_key: str
    line_number: int | None = None


@dataclass(frozen=True, slots=True)
class AccountState:
    """Snapshot of the directory fields relevant to one account.

    ``attributes`` holds the values of the named attributes requested when the
    snapshot was read (source, backup or restore attribute). Attribute names are
    matched case-insensitively, mirroring directory attribute semantics.
    """

    account_key: str
    display_name: str
    principal_name: str
    attributes: Mapping[str, str] = field(default_factory=dict[str, str])

    def attribute(self, name: str) -> str:
        """Return the value of ``name`` or an empty string when it is unset."""

        wanted = name.casefold()
        for key, value in self.attributes.items():
            if key.casefold() == wanted:
                return value or ""
        return ""
