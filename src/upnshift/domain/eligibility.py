"""Eligibility rules deciding whether an account may be rewritten or restored.

Update mode is a single ordered rule list; the first rule that returns a
decision wins. Keep the order: the exclusion check looks at the *current*
principal name, before the backup guard and before the source value is parsed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from upnshift.domain.model import (
    ALREADY_MIGRATED,
    EXCLUDED_SUFFIX,
    MALFORMED_SOURCE_VALUE,
    NO_PRINCIPAL_NAME,
    NOTHING_TO_RESTORE,
    SUFFIX_NOT_PERMITTED,
    Decision,
    RunMode,
)
from upnshift.domain.suffixes import normalize_suffix, principal_suffix, split_principal_name

if TYPE_CHECKING:
    from upnshift.domain.model import AccountState
    from upnshift.domain.suffixes import SuffixCatalog

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateParameters:
    source_attribute: str
    backup_attribute: str
    subdomain: str | None = None
    excluded_suffixes: frozenset[str] = field(default_factory=frozenset[str])

    def __post_init__(self) -> None:
        if not self.source_attribute.strip():
            raise ValueError("Update mode requires a source attribute")
        if not self.backup_attribute.strip():
            raise ValueError("Update mode requires a backup attribute")
        if self.source_attribute.strip().casefold() == self.backup_attribute.strip().casefold():
            raise ValueError("source and backup attributes must differ")
        if self.subdomain is not None and not self.subdomain.strip(" ."):
            raise ValueError("Subdomain token must not be blank")
        normalized = frozenset(normalize_suffix(s) for s in self.excluded_suffixes if s.strip())
        object.__setattr__(self, "excluded_suffixes", normalized)
        if self.subdomain is not None:
            object.__setattr__(self, "subdomain", self.subdomain.strip(" ."))

    @property
    def mode(self) -> RunMode:
        return RunMode.UPDATE

    @property
    def record_attribute(self) -> str:
        """Attribute stashing the prior principal name."""

        return self.backup_attribute

    @property
    def read_attributes(self) -> tuple[str, ...]:
        return (self.source_attribute, self.backup_attribute)


@dataclass(frozen=True, slots=True)
class RestoreParameters:
    restore_attribute: str

    def __post_init__(self) -> None:
        if not self.restore_attribute.strip():
            raise ValueError("Restore mode requires a restore attribute")

    @property
    def mode(self) -> RunMode:
        return RunMode.RESTORE

    @property
    def record_attribute(self) -> str:
        return self.restore_attribute

    @property
    def read_attributes(self) -> tuple[str, ...]:
        return (self.restore_attribute,)


RunParameters: TypeAlias = UpdateParameters | RestoreParameters
UpdateRule: TypeAlias = "Callable[[AccountState, UpdateParameters, SuffixCatalog], Decision | None]"


def _reject_excluded_suffix(
    account: AccountState, params: UpdateParameters, _catalog: SuffixCatalog
) -> Decision | None:
    if not params.excluded_suffixes:
        return None
    current = normalize_suffix(principal_suffix(account.principal_name))
    if current and current in params.excluded_suffixes:
        return Decision.error(EXCLUDED_SUFFIX)
    return None


def _skip_already_migrated(
    account: AccountState, params: UpdateParameters, _catalog: SuffixCatalog
) -> Decision | None:
    if account.attribute(params.backup_attribute).strip():
        return Decision.skip(ALREADY_MIGRATED)
    return None


def _reject_missing_principal_name(
    account: AccountState, _params: UpdateParameters, _catalog: SuffixCatalog
) -> Decision | None:
    # an empty backup would read as "not migrated" on the next pass
    if not account.principal_name.strip():
        return Decision.error(NO_PRINCIPAL_NAME)
    return None


def _derive_new_value(
    account: AccountState, params: UpdateParameters, catalog: SuffixCatalog
) -> Decision:
    source_value = account.attribute(params.source_attribute)
    parts = split_principal_name(source_value)
    if parts is None:
        return Decision.error(MALFORMED_SOURCE_VALUE)

    local, source_suffix = parts
    if params.subdomain:
        candidate_suffix = f"{params.subdomain}.{source_suffix}"
        candidate = f"{local}@{candidate_suffix}"
    else:
        candidate_suffix = source_suffix
        candidate = source_value

    if candidate_suffix not in catalog:
        log.debug("Suffix %s of %s is not in the catalog", candidate_suffix, account.account_key)
        return Decision.skip(SUFFIX_NOT_PERMITTED)
    return Decision.proceed(candidate)


UPDATE_RULES: tuple[UpdateRule, ...] = (
    _reject_excluded_suffix,
    _skip_already_migrated,
    _reject_missing_principal_name,
)


def evaluate_update(
    account: AccountState, params: UpdateParameters, catalog: SuffixCatalog
) -> Decision:
    """Decide whether ``account`` gets a new principal name and which one."""

    for rule in UPDATE_RULES:
        decision = rule(account, params, catalog)
        if decision is not None:
            return decision
    return _derive_new_value(account, params, catalog)


def evaluate_restore(
    account: AccountState,
    params: RestoreParameters,
    catalog: SuffixCatalog | None = None,
) -> Decision:
    """Decide whether ``account`` has a saved principal name to restore.

    The saved value is trusted as-is; the catalog is only consulted to warn.
    """

    saved = account.attribute(params.restore_attribute)
    if not saved.strip():
        return Decision.skip(NOTHING_TO_RESTORE)
    if catalog is not None and principal_suffix(saved) not in catalog:
        log.warning(
            "Restoring %s to %s whose suffix is no longer in the catalog",
            account.account_key,
            saved,
        )
    return Decision.proceed(saved)


def evaluate(
    account: AccountState, params: RunParameters, catalog: SuffixCatalog | None
) -> Decision:
    if isinstance(params, UpdateParameters):
        if catalog is None:
            raise ValueError("Update mode requires a suffix catalog")
        return evaluate_update(account, params, catalog)
    return evaluate_restore(account, params, catalog)


__all__ = [
    "UPDATE_RULES",
    "RestoreParameters",
    "RunParameters",
    "UpdateParameters",
    "evaluate",
    "evaluate_restore",
    "evaluate_update",
]
