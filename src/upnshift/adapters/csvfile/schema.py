"""Pydantic models describing batch CSV rows."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip(value: object) -> object:
    if isinstance(value, str):
        return value.strip()
    return value


class BatchRow(BaseModel):
    """One data row of the batch file, keyed by the configured column."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    account_key: str = Field(min_length=1)
    line_number: int

    _normalize_key = field_validator("account_key", mode="before")(_strip)
