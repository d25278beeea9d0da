from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UslexModel(BaseModel):
    """Base class for records that are written to the provision store."""

    model_config = ConfigDict(str_strip_whitespace=True)

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_store_timestamp(cls, value: Any) -> Any:
        # SQLite's datetime('now') gives "YYYY-MM-DD HH:MM:SS" with no offset, always UTC
        if isinstance(value, str):
            value = datetime.fromisoformat(value.strip().replace(" ", "T", 1))
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
