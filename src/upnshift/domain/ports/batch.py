"""Port for the input batch."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeAlias

from upnshift.domain.model import BatchEntry

BatchSource: TypeAlias = Iterable[BatchEntry]
"""Ordered batch entries; consumed once per run."""

__all__ = ["BatchSource"]
