"""Port for reading and writing directory accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from upnshift.domain.model import AccountState


@runtime_checkable
class DirectoryClient(Protocol):
    """Attribute-level access to the accounts of a directory service."""

    def fetch_account(self, account_key: str, attributes: Sequence[str]) -> AccountState:
        """Read the principal name, display name and ``attributes`` of one account.

        Raises ``AccountNotFoundError`` when the key matches nothing and
        ``DirectoryError`` when the read itself fails.
        """
        ...

    def set_attributes(self, account_key: str, values: Mapping[str, str]) -> None:
        """Replace every attribute in ``values`` in a single update.

        Raises ``DirectoryWriteRejectedError`` when the directory refuses it.
        """
        ...

    def clear_attribute(self, account_key: str, name: str) -> None:
        """Remove every value of attribute ``name``."""
        ...

    def load_suffixes(self) -> Iterable[str]:
        """Return the principal name suffixes the forest accepts.

        Raises ``CatalogUnavailableError`` when they cannot be read.
        """
        ...


__all__ = ["DirectoryClient"]
