"""SQLite-backed cache rows for OpenParliament pass-through resources."""

import json
import time
from typing import Any, Optional

from sqlmodel import Field, SQLModel


class CacheEntry(SQLModel, table=True):
    """One cached upstream payload.

    Rows are append-only: a refresh inserts a new row rather than updating
    the old one, and reads pick the newest row that has not expired.
    """

    __tablename__ = "cache_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(index=True, max_length=512)
    value: str  # JSON serialized payload
    expires_at: float = Field(index=True)  # Unix timestamp
    created_at: float = Field(default_factory=time.time)

    @classmethod
    def build(cls, key: str, payload: Any, expires_at: float) -> "CacheEntry":
        return cls(key=key, value=json.dumps(payload), expires_at=expires_at)

    @property
    def payload(self) -> Any:
        return json.loads(self.value)
