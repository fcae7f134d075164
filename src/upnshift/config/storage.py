"""Ledger storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "upnshift"
LEDGER_SUBDIR: Final[str] = "ledgers"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ledger_dir(self, *, ensure: bool = True) -> Path:
        path = self.resolve_data_dir()
        if path.exists() and not path.is_dir():
            raise ConfigurationError(f"Ledger location is not a directory: {path}")
        if ensure:
            path.mkdir(parents=True, exist_ok=True)
        return path


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME / LEDGER_SUBDIR).expanduser().resolve()


def get_storage_config(ledger_dir: Path | None = None) -> StorageConfig:
    """Resolve where ledgers go: explicit path, then ``UPNSHIFT_LEDGER_DIR``, then the data dir."""

    if ledger_dir is not None:
        return StorageConfig(data_dir=ledger_dir)
    env_dir = os.getenv("UPNSHIFT_LEDGER_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)
