"""ldap3-backed directory client for Active Directory style forests."""

from __future__ import annotations

import ssl
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, Self, TypeAlias

import ldap3
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from upnshift.domain.errors import (
    AccountNotFoundError,
    CatalogUnavailableError,
    DirectoryError,
    DirectoryWriteRejectedError,
)
from upnshift.domain.model import DISPLAY_NAME_ATTRIBUTE, PRINCIPAL_NAME_ATTRIBUTE, AccountState

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from types import TracebackType

    from upnshift.config import DirectoryConfig

log = getLogger(__name__)

PARTITIONS_RDN: Final[str] = "CN=Partitions"
UPN_SUFFIXES_ATTRIBUTE: Final[str] = "uPNSuffixes"
_RESULT_SUCCESS: Final[int] = 0

ConnectionFactory: TypeAlias = "Callable[[DirectoryConfig], ldap3.Connection]"


def _default_connection_factory(config: DirectoryConfig) -> ldap3.Connection:
    tls = ldap3.Tls(validate=ssl.CERT_REQUIRED if config.verify_tls else ssl.CERT_NONE)
    server = ldap3.Server(
        config.url,
        tls=tls,
        get_info=ldap3.DSA,
        connect_timeout=config.connect_timeout,
    )
    return ldap3.Connection(server, user=config.bind_user, password=config.password)


def _first_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _all_values(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_first_value(item) for item in value if item]
    return [_first_value(value)]


def _lookup(attributes: Mapping[str, Any], name: str) -> object:
    if name in attributes:
        return attributes[name]
    wanted = name.casefold()
    for key, value in attributes.items():
        if key.casefold() == wanted:
            return value
    return None


def _describe(result: Mapping[str, Any] | None) -> str:
    if not result:
        return "no result from directory"
    description = str(result.get("description") or "").strip()
    message = str(result.get("message") or "").strip()
    if description and message:
        return f"{description}: {message}"
    return description or message or f"result code {result.get('result')}"


@dataclass(slots=True)
class LdapDirectory:
    """Directory client speaking LDAP through ``ldap3``.

    Accounts are located by ``config.key_attribute`` under the search base. Each
    call resolves the account again; nothing is cached between accounts.
    """

    config: DirectoryConfig
    connection_factory: ConnectionFactory = field(default=_default_connection_factory)
    _connection: ldap3.Connection | None = field(default=None, init=False, repr=False)

    def open(self) -> None:
        try:
            connection = self.connection_factory(self.config)
            bound = connection.bind()
        except LDAPException as exc:
            raise DirectoryError(f"Cannot connect to {self.config.url}: {exc}") from exc
        if not bound:
            raise DirectoryError(
                f"Bind to {self.config.url} as {self.config.bind_user} failed: "
                f"{_describe(connection.result)}"
            )
        self._connection = connection
        log.info("Bound to %s as %s", self.config.url, self.config.bind_user)

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.unbind()
        except LDAPException as exc:
            log.warning("Error while unbinding from %s: %s", self.config.url, exc)
        self._connection = None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def connection(self) -> ldap3.Connection:
        if self._connection is None:
            raise DirectoryError("Directory connection is not open")
        return self._connection

    def fetch_account(self, account_key: str, attributes: Sequence[str]) -> AccountState:
        requested = list(dict.fromkeys(attributes))
        dn, values = self._find_account(
            account_key,
            [PRINCIPAL_NAME_ATTRIBUTE, DISPLAY_NAME_ATTRIBUTE, *requested],
        )
        log.debug("Resolved %s to %s", account_key, dn)
        return AccountState(
            account_key=account_key,
            display_name=_first_value(_lookup(values, DISPLAY_NAME_ATTRIBUTE)),
            principal_name=_first_value(_lookup(values, PRINCIPAL_NAME_ATTRIBUTE)),
            attributes={name: _first_value(_lookup(values, name)) for name in requested},
        )

    def set_attributes(self, account_key: str, values: Mapping[str, str]) -> None:
        changes = {
            name: [(ldap3.MODIFY_REPLACE, [value] if value else [])]
            for name, value in values.items()
        }
        self._modify(account_key, changes)

    def clear_attribute(self, account_key: str, name: str) -> None:
        self._modify(account_key, {name: [(ldap3.MODIFY_REPLACE, [])]})

    def load_suffixes(self) -> Iterable[str]:
        """Forest ``uPNSuffixes`` plus the DNS root of every domain in the forest."""

        try:
            partitions = f"{PARTITIONS_RDN},{self._configuration_base()}"
            suffixes = self._search_values(
                partitions, "(objectClass=*)", ldap3.BASE, [UPN_SUFFIXES_ATTRIBUTE]
            )
            domains = self._search_values(
                partitions,
                "(&(objectClass=crossRef)(nETBIOSName=*))",
                ldap3.LEVEL,
                ["dnsRoot"],
            )
        except (LDAPException, DirectoryError) as exc:
            raise CatalogUnavailableError(f"Unable to read forest suffixes: {exc}") from exc
        log.debug("Forest suffixes %s, domain roots %s", suffixes, domains)
        return [*domains, *suffixes]

    def _search_values(
        self, base: str, search_filter: str, scope: str, attributes: list[str]
    ) -> list[str]:
        conn = self.connection
        conn.search(base, search_filter, search_scope=scope, attributes=attributes)
        if conn.result and conn.result.get("result") != _RESULT_SUCCESS:
            raise DirectoryError(_describe(conn.result))
        collected: list[str] = []
        for entry in self._entries():
            entry_attributes = entry.get("attributes") or {}
            for name in attributes:
                collected.extend(_all_values(_lookup(entry_attributes, name)))
        return collected

    def _find_account(
        self, account_key: str, attributes: list[str]
    ) -> tuple[str, Mapping[str, Any]]:
        key_attribute = self.config.key_attribute
        search_filter = (
            f"(&(objectClass=user)({key_attribute}={escape_filter_chars(account_key)}))"
        )
        conn = self.connection
        try:
            conn.search(
                self._search_base(),
                search_filter,
                search_scope=ldap3.SUBTREE,
                attributes=attributes,
            )
        except LDAPException as exc:
            raise DirectoryError(f"Search for {account_key} failed: {exc}") from exc
        if conn.result and conn.result.get("result") != _RESULT_SUCCESS:
            raise DirectoryError(f"Search for {account_key} failed: {_describe(conn.result)}")

        entries = self._entries()
        if not entries:
            raise AccountNotFoundError(account_key)
        if len(entries) > 1:
            raise DirectoryError(f"Key {account_key!r} matches {len(entries)} accounts")
        entry = entries[0]
        return entry["dn"], entry.get("attributes") or {}

    def _modify(self, account_key: str, changes: dict[str, list[tuple[str, list[str]]]]) -> None:
        dn, _ = self._find_account(account_key, [PRINCIPAL_NAME_ATTRIBUTE])
        conn = self.connection
        try:
            accepted = conn.modify(dn, changes)
        except LDAPException as exc:
            raise DirectoryWriteRejectedError(str(exc)) from exc
        if not accepted:
            raise DirectoryWriteRejectedError(_describe(conn.result))

    def _entries(self) -> list[dict[str, Any]]:
        return [
            entry
            for entry in (self.connection.response or [])
            if entry.get("type") == "searchResEntry"
        ]

    def _search_base(self) -> str:
        return self.config.search_base or self._naming_context("defaultNamingContext")

    def _configuration_base(self) -> str:
        return self.config.configuration_base or self._naming_context(
            "configurationNamingContext"
        )

    def _naming_context(self, name: str) -> str:
        info = self.connection.server.info
        values = _all_values(info.other.get(name)) if info is not None else []
        if not values:
            raise DirectoryError(f"Server did not publish {name}; configure it explicitly")
        return values[0]


__all__ = ["ConnectionFactory", "LdapDirectory"]
