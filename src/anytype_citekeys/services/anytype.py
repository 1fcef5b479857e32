"""Anytype API client and the record/library adapters built on it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from anytype_citekeys.config import Settings
from anytype_citekeys.models import (
    CITATION_KEY_FIELD,
    DATE_FIELD,
    TITLE_FIELD,
    Creator,
)

logger = logging.getLogger(__name__)


class AnytypeAPIError(RuntimeError):
    """Raised when Anytype API calls fail."""


@dataclass
class AnytypeClient:
    """Lightweight async HTTP client wrapper around the Anytype REST API."""

    settings: Settings
    timeout: float = 15.0
    page_size: int = 100
    transport: Optional[httpx.AsyncBaseTransport] = None
    _http: Optional[httpx.AsyncClient] = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> AnytypeClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _url(self, path: str) -> str:
        base = self.settings.anytype_base_url.rstrip("/")
        return f"{base}/spaces/{self.settings.anytype_space_id}{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.anytype_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self._http is None:
            self._http = httpx.AsyncClient(transport=self.transport, timeout=self.timeout)
        try:
            return await self._http.request(
                method, self._url(path), headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as exc:
            logger.error("Anytype request failed: %s", exc)
            raise AnytypeAPIError(str(exc)) from exc

    async def list_objects(self) -> list[dict[str, Any]]:
        """Return every object in the space, following pagination.

        Paging stops on a short or empty page, when the server reports no more
        results, or when a page contains only objects already seen.
        """
        objects: list[dict[str, Any]] = []
        seen: set[str] = set()
        offset = 0
        while True:
            payload = {"filters": [], "offset": offset, "limit": self.page_size}
            response = await self._request("POST", "/objects/search", json=payload)
            data = self._parse_response(response)
            page = data.get("objects", []) if isinstance(data, dict) else []
            new = [obj for obj in page if str(obj.get("id")) not in seen]
            seen.update(str(obj.get("id")) for obj in new)
            objects.extend(new)
            if len(page) < self.page_size or not new:
                if page and not new:
                    logger.warning("Anytype search repeated objects at offset %d", offset)
                return objects
            pagination = data.get("pagination") or {}
            if pagination.get("has_more") is False:
                return objects
            total = pagination.get("total")
            if isinstance(total, int) and len(objects) >= total:
                return objects
            offset += len(page)

    async def get_object(self, object_id: str) -> Optional[dict[str, Any]]:
        response = await self._request("GET", f"/objects/{object_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        data = self._parse_response(response)
        return data.get("object", data)

    async def update_object(self, object_id: str, *, fields: dict[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "PATCH", f"/objects/{object_id}", json={"fields": fields}
        )
        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Anytype API error: %s", exc)
            raise AnytypeAPIError(str(exc)) from exc
        if response.content:
            try:
                return response.json()
            except ValueError as exc:
                raise AnytypeAPIError("Anytype API returned invalid JSON") from exc
        return {}


@dataclass
class AnytypeRecord:
    """Exposes an Anytype object through the record interface."""

    client: AnytypeClient
    settings: Settings
    raw: dict[str, Any]
    _pending: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    @property
    def object_id(self) -> str:
        return str(self.raw.get("id"))

    @property
    def fields(self) -> dict[str, Any]:
        fields = self.raw.get("fields")
        if not isinstance(fields, dict):
            fields = self.raw["fields"] = {}
        return fields

    def is_regular_item(self) -> bool:
        return self.raw.get("objectType") in {
            self.settings.anytype_object_type_article,
            self.settings.anytype_object_type_book,
        }

    def get_creators(self) -> list[Creator]:
        authors_field = self.fields.get(self.settings.anytype_field_authors)
        if isinstance(authors_field, str):
            entries = authors_field.split(self.settings.anytype_author_separator)
        elif isinstance(authors_field, list):
            entries = [str(part) for part in authors_field]
        else:
            return []
        return [self._parse_creator(entry) for entry in entries if entry.strip()]

    def get_field(self, name: str) -> Optional[str]:
        if name == TITLE_FIELD:
            title = self.raw.get("name") or self.raw.get("title")
            return str(title) if title else None
        value = self.fields.get(self._field_key(name))
        return str(value) if value is not None else None

    def set_field(self, name: str, value: str) -> None:
        key = self._field_key(name)
        self.fields[key] = value
        self._pending[key] = value

    async def save(self) -> None:
        if not self._pending:
            return
        await self.client.update_object(self.object_id, fields=dict(self._pending))
        logger.info("Updated Anytype object %s: %s", self.object_id, self._pending)
        self._pending.clear()

    def _field_key(self, name: str) -> str:
        mapping = {
            DATE_FIELD: self.settings.anytype_field_year,
            CITATION_KEY_FIELD: self.settings.anytype_field_citation_key,
        }
        return mapping.get(name, name)

    @staticmethod
    def _parse_creator(entry: str) -> Creator:
        family, sep, given = entry.partition(",")
        if sep:
            return Creator(last_name=family.strip() or None, first_name=given.strip() or None)
        return Creator(name=entry.strip())


@dataclass
class AnytypeLibrary:
    """Record enumeration and lookup for one Anytype space."""

    client: AnytypeClient
    settings: Settings

    async def all_records(self) -> list[AnytypeRecord]:
        objects = await self.client.list_objects()
        logger.debug("Listed %d Anytype objects", len(objects))
        return [self._wrap(obj) for obj in objects]

    async def get(self, record_id: str) -> Optional[AnytypeRecord]:
        obj = await self.client.get_object(record_id)
        return self._wrap(obj) if obj else None

    def _wrap(self, obj: dict[str, Any]) -> AnytypeRecord:
        return AnytypeRecord(client=self.client, settings=self.settings, raw=obj)
