"""Principal name suffix handling and the forest suffix catalog."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from upnshift.domain.errors import CatalogUnavailableError

if TYPE_CHECKING:
    from upnshift.domain.ports import DirectoryClient

log = getLogger(__name__)


def split_principal_name(value: str) -> tuple[str, str] | None:
    """Split ``local@suffix`` at the first ``@``; ``None`` when there is no ``@``."""

    local, separator, suffix = value.partition("@")
    if not separator:
        return None
    return local, suffix


def principal_suffix(value: str) -> str:
    """Return the suffix of a principal name, or an empty string."""

    parts = split_principal_name(value)
    return parts[1] if parts else ""


def normalize_suffix(suffix: str) -> str:
    return suffix.strip().casefold()


@dataclass(frozen=True, slots=True)
class SuffixCatalog:
    """Case-insensitive set of suffixes the directory accepts."""

    suffixes: frozenset[str]

    @classmethod
    def of(cls, suffixes: Iterable[str]) -> SuffixCatalog:
        return cls(frozenset(normalize_suffix(s) for s in suffixes if s and s.strip()))

    def __contains__(self, suffix: object) -> bool:
        if not isinstance(suffix, str):
            return False
        return normalize_suffix(suffix) in self.suffixes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.suffixes))

    def __len__(self) -> int:
        return len(self.suffixes)


def load_suffix_catalog(directory: DirectoryClient) -> SuffixCatalog:
    """Read the forest suffix catalog once.

    Any failure surfaces as ``CatalogUnavailableError``: without the catalog
    no eligibility decision can be trusted.
    """

    try:
        catalog = SuffixCatalog.of(directory.load_suffixes())
    except CatalogUnavailableError:
        raise
    except Exception as exc:
        raise CatalogUnavailableError(f"Unable to read suffix catalog: {exc}") from exc

    if not catalog:
        raise CatalogUnavailableError("Directory reported no principal name suffixes")

    log.info("Loaded %s permitted suffixes: %s", len(catalog), ", ".join(catalog))
    return catalog


__all__ = [
    "SuffixCatalog",
    "load_suffix_catalog",
    "normalize_suffix",
    "principal_suffix",
    "split_principal_name",
]
