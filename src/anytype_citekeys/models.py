"""Core data models and host interfaces used across Anytype Citekeys."""

from __future__ import annotations

from typing import Optional, Protocol

from pydantic import BaseModel

CITATION_KEY_FIELD = "citationKey"
TITLE_FIELD = "title"
DATE_FIELD = "date"


class Creator(BaseModel):
    """Represents a single contributor attached to a record."""

    last_name: Optional[str] = None
    first_name: Optional[str] = None
    name: Optional[str] = None

    def key_name(self) -> str:
        return self.last_name or self.name or self.first_name or ""


class RecordHandle(Protocol):
    """Capabilities the key engine needs from a host record."""

    def get_creators(self) -> list[Creator]:
        ...

    def get_field(self, name: str) -> Optional[str]:
        ...

    def set_field(self, name: str, value: str) -> None:
        ...

    def is_regular_item(self) -> bool:
        ...

    async def save(self) -> None:
        ...


class Library(Protocol):
    """Record enumeration and lookup offered by the host library."""

    async def all_records(self) -> list[RecordHandle]:
        ...

    async def get(self, record_id: str) -> Optional[RecordHandle]:
        ...
