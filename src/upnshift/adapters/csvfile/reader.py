"""Read batch entries from a CSV file."""

from __future__ import annotations

import csv
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from upnshift.domain.model import BatchEntry

from .schema import BatchRow

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

log = getLogger(__name__)

DEFAULT_KEY_COLUMN: Final[str] = "SamAccountName"


class BatchFileError(ValueError):
    """Raised when a batch file cannot be used at all."""


def _resolve_column(fieldnames: list[str] | None, key_column: str) -> str:
    if not fieldnames:
        raise BatchFileError("Batch file has no header row")
    wanted = key_column.strip().casefold()
    for name in fieldnames:
        if name and name.strip().casefold() == wanted:
            return name
    available = ", ".join(name for name in fieldnames if name)
    raise BatchFileError(f"Batch file has no {key_column!r} column (found: {available})")


def read_batch(path: Path, *, key_column: str = DEFAULT_KEY_COLUMN) -> Iterator[BatchEntry]:
    """Yield one ``BatchEntry`` per data row, in file order.

    The key column is matched case-insensitively. Rows with a blank key are not
    entries; they are logged and skipped.
    """

    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        column = _resolve_column(reader.fieldnames, key_column)
        for row in reader:
            try:
                parsed = BatchRow.model_validate(
                    {"account_key": row.get(column) or "", "line_number": reader.line_num}
                )
            except ValidationError:
                log.warning("Skipping line %s of %s: blank %s", reader.line_num, path, column)
                continue
            yield BatchEntry(account_key=parsed.account_key, line_number=parsed.line_number)


def load_batch(path: Path, *, key_column: str = DEFAULT_KEY_COLUMN) -> list[BatchEntry]:
    """Read the whole batch up front so header problems surface before any write."""

    if not path.is_file():
        raise BatchFileError(f"Batch file does not exist: {path}")
    entries = list(read_batch(path, key_column=key_column))
    log.info("Loaded %s batch entries from %s", len(entries), path)
    return entries
